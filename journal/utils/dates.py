"""Calendar helpers. "Today" is the journal's local trading day."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def today_in(tz_name: str) -> date:
    return datetime.now(ZoneInfo(tz_name)).date()


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def epoch_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def coerce_date(value) -> date:
    """Parse an ISO date, tolerating the datetime strings spreadsheets emit.

    "2024-03-05", "2024-03-05T00:00:00.000Z" and date/datetime objects all
    map to date(2024, 3, 5).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if "T" in text:
        text = text.split("T", 1)[0]
    return date.fromisoformat(text[:10])
