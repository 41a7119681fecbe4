"""Small helpers shared across features."""
from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(moment: datetime) -> str:
    """Render ``moment`` as ISO-8601 UTC with millisecond precision and ``Z``."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_timestamp() -> str:
    return isoformat_utc(utc_now())


__all__ = ["isoformat_utc", "utc_now", "utc_timestamp"]
