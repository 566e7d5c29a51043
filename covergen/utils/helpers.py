from datetime import datetime, timezone


def utcnow() -> datetime:
    """Naive UTC 'now'; matches how ledger timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def isoformat_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None
