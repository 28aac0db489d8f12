"""UTC clock for order stamps (paid_at, cancelled_at) and response envelopes."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Timezone-aware now; naive datetimes never reach the database."""
    return datetime.now(UTC)
