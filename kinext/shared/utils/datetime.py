"""Timezone-aware UTC helpers.

Timestamps written to Firestore are always UTC; naive values coming from
request bodies are taken to already be UTC.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to a naive datetime, convert an aware one; None passes through."""
    if dt is None:
        return None
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)
