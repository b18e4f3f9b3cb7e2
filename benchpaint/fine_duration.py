"""Picosecond-precise durations and their human-readable formatting."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum
from typing import ClassVar

from .fmt import _apply_spec, format_f64

__all__ = ["TimeScale", "FineDuration", "into_duration"]

_U128_MAX = (1 << 128) - 1

_NANOS = 1_000
_MICROS = 1_000 * _NANOS
_MILLIS = 1_000 * _MICROS
_SEC = 1_000 * _MILLIS
_MIN = 60 * _SEC
_HOUR = 60 * _MIN
_DAY = 24 * _HOUR


class TimeScale(IntEnum):
    """Units of time used when displaying a duration."""

    PICO_SEC = 0
    NANO_SEC = 1
    MICRO_SEC = 2
    MILLI_SEC = 3
    SEC = 4
    MIN = 5
    HOUR = 6
    DAY = 7

    @classmethod
    def from_picos(cls, picos: int) -> TimeScale:
        """Return the scale best suited to a number of picoseconds."""
        for scale in reversed(cls):
            if picos >= scale.picos():
                return scale
        return cls.PICO_SEC

    def picos(self) -> int:
        """Return the number of picoseconds in one unit of this scale."""
        return _SCALE_PICOS[self]

    def suffix(self) -> str:
        """Return the unit suffix."""
        return _SCALE_SUFFIXES[self]


_SCALE_PICOS = {
    TimeScale.PICO_SEC: 1,
    TimeScale.NANO_SEC: _NANOS,
    TimeScale.MICRO_SEC: _MICROS,
    TimeScale.MILLI_SEC: _MILLIS,
    TimeScale.SEC: _SEC,
    TimeScale.MIN: _MIN,
    TimeScale.HOUR: _HOUR,
    TimeScale.DAY: _DAY,
}

_SCALE_SUFFIXES = {
    TimeScale.PICO_SEC: "ps",
    TimeScale.NANO_SEC: "ns",
    TimeScale.MICRO_SEC: "µs",
    TimeScale.MILLI_SEC: "ms",
    TimeScale.SEC: "s",
    TimeScale.MIN: "m",
    TimeScale.HOUR: "h",
    TimeScale.DAY: "d",
}


@dataclass(frozen=True, order=True)
class FineDuration:
    """A non-negative duration measured in whole picoseconds."""

    picos: int = 0

    MAX: ClassVar[FineDuration]

    def __post_init__(self) -> None:
        if not 0 <= self.picos <= _U128_MAX:
            raise ValueError(f"picoseconds out of range: {self.picos}")

    @classmethod
    def from_timedelta(cls, duration: timedelta) -> FineDuration:
        """Convert a non-negative timedelta to picoseconds."""
        if duration < timedelta(0):
            raise ValueError(f"{duration!r} is negative")
        micros = (duration.days * 86_400 + duration.seconds) * 1_000_000 + duration.microseconds
        picos = micros * _MICROS
        if picos > _U128_MAX:
            raise OverflowError(f"{duration!r} is too large to fit in FineDuration")
        return cls(picos)

    def is_zero(self) -> bool:
        """Return True for a zero duration."""
        return self.picos == 0

    def clamp_to(self, other: FineDuration) -> FineDuration:
        """Return `other` if this duration is zero, else this duration."""
        return other if self.is_zero() else self

    def clamp_to_min(self, other: FineDuration) -> FineDuration:
        """Return the smaller non-zero duration of the two."""
        if self.is_zero():
            return other
        if other.is_zero():
            return self
        return min(self, other)

    def __add__(self, other: FineDuration) -> FineDuration:
        if not isinstance(other, FineDuration):
            return NotImplemented
        total = self.picos + other.picos
        if total > _U128_MAX:
            raise OverflowError("FineDuration addition overflowed")
        return FineDuration(total)

    def __floordiv__(self, count: int) -> FineDuration:
        if isinstance(count, bool) or not isinstance(count, int):
            return NotImplemented
        return FineDuration(self.picos // count)

    def _render(self, sig_figs: int) -> str:
        picos = self.picos
        scale = TimeScale.from_picos(picos)

        # Picoseconds read better as nanoseconds next to nanosecond values.
        if scale is TimeScale.PICO_SEC and sig_figs > 3:
            scale = TimeScale.NANO_SEC

        multiple = 10**sig_figs if sig_figs <= 38 else _U128_MAX

        int_day = _DAY * multiple
        if int_day <= _U128_MAX and picos >= int_day:
            text = str(picos // _DAY)
        else:
            val = float((picos * multiple) // scale.picos()) / float(multiple)
            text = format_f64(val, sig_figs)

        return f"{text} {scale.suffix()}"

    def __format__(self, spec: str) -> str:
        return _apply_spec(spec, self._render)

    def __str__(self) -> str:
        return format(self, "")


FineDuration.MAX = FineDuration(_U128_MAX)


def into_duration(value: timedelta | int | float) -> timedelta:
    """Convert a timedelta, or a number of seconds, into a timedelta."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"cannot convert {type(value).__name__} into a duration")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"duration must be finite, got {value}")
    if value < 0:
        raise ValueError(f"duration must be non-negative, got {value}")
    return timedelta(seconds=value)