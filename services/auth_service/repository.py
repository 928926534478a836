from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shared.storage import KVStore

CREDENTIALS_KEY = "admin:credentials"


class AdminCredentialsRepository:

    @staticmethod
    async def get(db: AsyncSession) -> Optional[dict]:
        return await KVStore.get(db, CREDENTIALS_KEY)

    @staticmethod
    async def seed(db: AsyncSession, credentials: dict) -> dict:
        """Store ``credentials`` unless a record exists; returns whichever record won."""
        return await KVStore.set_if_absent(db, CREDENTIALS_KEY, credentials)
