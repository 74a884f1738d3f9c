"""Key-value storage entry model."""

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from ..database import Base


class StorageEntry(Base):
    """Durable key-value table backing the project snapshot."""

    __tablename__ = "storage_entries"

    # Primary key: one of the well-known project keys ("editor-files", ...)
    key = Column(String(100), primary_key=True)

    # Serialized value (JSON for files, plain text for ids and theme)
    value = Column(Text, nullable=False)

    # Timestamp
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
