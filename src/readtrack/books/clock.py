# ABOUTME: UTC timestamp helpers for createdAt/updatedAt/lentAt fields.
# ABOUTME: Formats ISO-8601 with a Z suffix and guarantees strictly increasing stamps.

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

Clock = Callable[[], datetime]

_ONE_TICK = timedelta(microseconds=1)


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with microseconds and a Z suffix."""
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC.

    Accepts the millisecond form written by the mobile client
    (``2024-05-01T10:00:00.000Z``) as well as our own microsecond form.
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def next_timestamp(clock: Clock, previous: str | None = None) -> str:
    """Return a timestamp from the clock that is strictly after ``previous``.

    When the clock has not advanced past the previous stamp (coarse clocks,
    fast successive writes), the previous stamp plus one microsecond is used.
    """
    now = clock()
    if previous is not None:
        floor = parse_timestamp(previous) + _ONE_TICK
        if now < floor:
            now = floor
    return format_timestamp(now)
