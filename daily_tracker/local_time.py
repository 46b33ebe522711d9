# -*- coding: utf-8 -*-
"""Local-time codec.

Users type wall-clock values ("07:30 on March 10th") into forms. Those values
must come back exactly as typed, whatever zone the writing or reading process
runs in. The only storage primitive is an absolute instant, so the codec
copies the six wall-clock fields into the *UTC* fields of an instant on the
way in and reads the *UTC* fields back on the way out. No zone conversion
ever happens, which also makes the codec blind to DST.

The instant produced by `encode` is an envelope, not a real point in time:
never use it to compute elapsed time or to compare users in different zones.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import List, NamedTuple, Tuple, Union


class InvalidTimestampError(ValueError):
    """Raised when wall-clock fields do not form a real calendar date/time."""


class WallClock(NamedTuple):
    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0

    @classmethod
    def from_datetime(cls, value: datetime) -> "WallClock":
        """Fields exactly as `value` shows them (naive, or in its own zone)."""
        return cls(value.year, value.month, value.day, value.hour, value.minute, value.second)

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    def to_naive(self) -> datetime:
        return datetime(*self)


WallClockLike = Union[WallClock, Tuple[int, ...], datetime, date]
StorageLike = Union[datetime, int, float]

_WALL_CLOCK_RE = re.compile(
    r"^(\d{4})-(\d{1,2})-(\d{1,2})"
    r"(?:[T ](\d{1,2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?)?"
    r"(?:Z|[+-]\d{2}(?::?\d{2})?)?$"
)


def validate(fields: Tuple[int, ...]) -> WallClock:
    """Return `fields` as a WallClock, failing fast on impossible values."""
    try:
        wall = WallClock(*fields)
        datetime(*wall)
    except (TypeError, ValueError) as exc:
        raise InvalidTimestampError(f"invalid timestamp {tuple(fields)!r}: {exc}") from exc
    return wall


def encode(value: WallClockLike) -> datetime:
    """Wall clock -> storage instant whose UTC fields equal the wall-clock fields.

    A `datetime` contributes the fields it displays: naive values as-is, aware
    values in their own zone. A bare `date` means midnight. Sub-second
    precision is dropped.
    """
    if isinstance(value, datetime):
        wall = WallClock.from_datetime(value)
    elif isinstance(value, date):
        wall = WallClock(value.year, value.month, value.day)
    else:
        wall = validate(tuple(value))
    return datetime(*wall, tzinfo=timezone.utc)


def decode(instant: StorageLike) -> WallClock:
    """Storage instant -> wall clock, read from the UTC fields only.

    Naive datetimes are taken to already hold UTC fields; numbers are UTC
    epoch seconds.
    """
    if not isinstance(instant, (datetime, int, float)) or isinstance(instant, bool):
        raise InvalidTimestampError(f"invalid timestamp {instant!r}: not a datetime")
    try:
        if not isinstance(instant, datetime):
            instant = datetime.fromtimestamp(instant, tz=timezone.utc)
        elif instant.tzinfo is not None:
            instant = instant.astimezone(timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        # The UTC reading falls outside years 1..9999.
        raise InvalidTimestampError(f"invalid timestamp {instant!r}: out of range") from exc
    return WallClock.from_datetime(instant)


def parse_wall_clock(text: str) -> WallClock:
    """Parse form input such as `2024-03-10T07:30` or `2024-03-10`.

    A trailing zone designator is accepted and ignored: what the user typed
    is the wall clock.
    """
    match = _WALL_CLOCK_RE.match((text or "").strip())
    if not match:
        raise InvalidTimestampError(f"invalid timestamp {text!r}: expected YYYY-MM-DD[THH:MM[:SS]]")
    return validate(tuple(int(part) if part else 0 for part in match.groups()))


def format_wall_clock(wall: WallClock) -> str:
    return (
        f"{wall.year:04d}-{wall.month:02d}-{wall.day:02d}"
        f"T{wall.hour:02d}:{wall.minute:02d}:{wall.second:02d}"
    )


def to_column(instant: datetime) -> str:
    """SQLite text form of a storage instant, e.g. `2024-03-10T07:30:00Z`."""
    return format_wall_clock(decode(instant)) + "Z"


def from_column(text: str) -> datetime:
    return encode(parse_wall_clock(text))


def column_to_display(text: str) -> str:
    return format_wall_clock(decode(from_column(text)))


def date_key(instant: StorageLike) -> str:
    wall = decode(instant)
    return f"{wall.year:04d}-{wall.month:02d}-{wall.day:02d}"


def parse_date(text: str) -> date:
    return parse_wall_clock(text).to_date()


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Inclusive storage-instant range covering one local day."""
    return (
        encode(WallClock(day.year, day.month, day.day, 0, 0, 0)),
        encode(WallClock(day.year, day.month, day.day, 23, 59, 59)),
    )


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    validate((year, month, 1))
    last_day = calendar.monthrange(year, month)[1]
    start, _ = day_bounds(date(year, month, 1))
    _, end = day_bounds(date(year, month, last_day))
    return start, end


def month_days(year: int, month: int) -> List[date]:
    validate((year, month, 1))
    last_day = calendar.monthrange(year, month)[1]
    return [date(year, month, d) for d in range(1, last_day + 1)]


def fixed_offset(hours: float) -> timezone:
    return timezone(timedelta(hours=hours))


def rebase_instant(true_instant: datetime, tz: tzinfo) -> datetime:
    """Turn a genuine instant into the envelope of the wall clock it showed in `tz`.

    Legacy rows stored real UTC instants; this recovers what the user saw on
    their clock. Naive input is taken as UTC.
    """
    if true_instant.tzinfo is None:
        true_instant = true_instant.replace(tzinfo=timezone.utc)
    return encode(true_instant.astimezone(tz))
