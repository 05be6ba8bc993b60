"""UTC timestamps for catalog rows.

Every model's created_at/updated_at column defaults to utc_now, so
timestamps are timezone-aware and never depend on the host clock's zone.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
