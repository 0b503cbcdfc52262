"""LocalRecord model — key/value rows backing the offline trade store."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class LocalRecord(SQLModel, table=True):
    __tablename__ = "local_record"

    key: str = Field(primary_key=True, max_length=64)
    value: str  # JSON document
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
