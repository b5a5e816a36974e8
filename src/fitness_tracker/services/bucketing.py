"""Calendar bucketing of dated records."""

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from fitness_tracker.domain.errors import InvalidInputError
from fitness_tracker.domain.stats import DatedRecord, Granularity


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; aware values are returned unchanged."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def record_day(recorded_at: datetime | date, tz: ZoneInfo) -> date:
    """Return the calendar date of a timestamp in the reporting timezone.

    Naive datetimes are treated as UTC. Plain dates are returned unchanged.
    """
    if isinstance(recorded_at, datetime):
        return as_utc(recorded_at).astimezone(tz).date()
    return recorded_at


def week_start(day: date) -> date:
    """Return the Sunday on or before the given day."""
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)


def bucket_key(
    recorded_at: datetime | date, granularity: Granularity | str, tz: ZoneInfo
) -> str:
    """Return the ISO date key of the bucket containing the timestamp."""
    resolved = _resolve_granularity(granularity)
    day = record_day(recorded_at, tz)
    if resolved is Granularity.WEEK:
        day = week_start(day)
    return day.isoformat()


def aggregate_by_bucket(
    records: Iterable[DatedRecord],
    granularity: Granularity | str,
    tz: ZoneInfo,
    fields: Iterable[str] | None = None,
) -> dict[str, dict[str, float]]:
    """Sum numeric fields per bucket, ordered ascending by bucket key.

    When ``fields`` is given every bucket carries exactly those keys; otherwise
    the keys seen on the bucket's records are summed. Missing or ``None``
    values count as zero.
    """
    resolved = _resolve_granularity(granularity)
    wanted = list(fields) if fields is not None else None
    buckets: dict[str, dict[str, float]] = {}
    for record in records:
        key = bucket_key(record.recorded_at, resolved, tz)
        sums = buckets.setdefault(key, dict.fromkeys(wanted or [], 0.0))
        names = wanted if wanted is not None else list(record.values)
        for name in names:
            sums[name] = sums.get(name, 0.0) + _as_float(record.values.get(name))
    return {key: buckets[key] for key in sorted(buckets)}


def count_by_bucket(
    records: Iterable[DatedRecord], granularity: Granularity | str, tz: ZoneInfo
) -> dict[str, int]:
    """Count records per bucket, ordered ascending by bucket key."""
    resolved = _resolve_granularity(granularity)
    counts: dict[str, int] = {}
    for record in records:
        key = bucket_key(record.recorded_at, resolved, tz)
        counts[key] = counts.get(key, 0) + 1
    return {key: counts[key] for key in sorted(counts)}


def _resolve_granularity(granularity: Granularity | str) -> Granularity:
    try:
        return Granularity(granularity)
    except ValueError as exc:
        raise InvalidInputError(f"Unknown granularity: {granularity!r}") from exc


def _as_float(value: float | None) -> float:
    if value is None:
        return 0.0
    return float(value)
