from typing import Any, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from shared.errors import StorageError

from .models import KVEntry


class KVStore:
    """String key -> JSON value store kept in a single table."""

    @staticmethod
    async def get(db: AsyncSession, key: str) -> Optional[Any]:
        try:
            entry = await db.get(KVEntry, key)
        except SQLAlchemyError as e:
            raise StorageError(f"get {key!r} failed") from e
        return entry.value if entry is not None else None

    @staticmethod
    async def set(db: AsyncSession, key: str, value: Any) -> Any:
        try:
            entry = await db.get(KVEntry, key)
            if entry is None:
                db.add(KVEntry(key=key, value=value))
            else:
                entry.value = value
                flag_modified(entry, "value")
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise StorageError(f"set {key!r} failed") from e
        return value

    @staticmethod
    async def set_if_absent(db: AsyncSession, key: str, value: Any) -> Any:
        """Insert ``value`` unless the key exists. Returns the stored value either way."""
        existing = await KVStore.get(db, key)
        if existing is not None:
            return existing

        db.add(KVEntry(key=key, value=value))
        try:
            await db.commit()
            return value
        except IntegrityError:
            # Someone else wrote the key first
            await db.rollback()
        except SQLAlchemyError as e:
            await db.rollback()
            raise StorageError(f"set_if_absent {key!r} failed") from e
        return await KVStore.get(db, key)

    @staticmethod
    async def delete(db: AsyncSession, key: str) -> None:
        try:
            await db.execute(delete(KVEntry).where(KVEntry.key == key))
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise StorageError(f"delete {key!r} failed") from e

    @staticmethod
    async def get_by_prefix(db: AsyncSession, prefix: str) -> List[Any]:
        try:
            result = await db.execute(
                select(KVEntry.value).where(KVEntry.key.startswith(prefix, autoescape=True))
            )
        except SQLAlchemyError as e:
            raise StorageError(f"scan {prefix!r} failed") from e
        return list(result.scalars().all())
