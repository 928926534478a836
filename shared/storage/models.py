from sqlalchemy import JSON, Column, String
from sqlalchemy.dialects.postgresql import JSONB

from shared.config.database import Base


class KVEntry(Base):
    __tablename__ = "kv_store"

    key = Column(String, primary_key=True, index=True)
    value = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False)
