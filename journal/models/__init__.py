"""Database models."""

from journal.models.local_record import LocalRecord

__all__ = [
    "LocalRecord",
]
