from datetime import datetime, timezone
from typing import Optional

def get_utc_now() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)

def format_datetime(dt: datetime) -> str:
    """Format datetime to ISO format with timezone"""
    return dt.isoformat()

def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 string written by format_datetime, assuming UTC when naive"""
    if not value:
        return None
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
