"""Timers and timestamps used to take benchmark samples."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, TypeVar

from .fine_duration import FineDuration

__all__ = [
    "black_box",
    "TscUnavailableReason",
    "TscUnavailable",
    "TscTimestamp",
    "TimerKind",
    "Timer",
    "Timestamp",
]

T = TypeVar("T")

_PICOS_PER_SEC = 1_000_000_000_000
_PICOS_PER_NANO = 1_000


def black_box(value: T) -> T:
    """Return `value` unchanged, as an opaque step inside a timed loop."""
    return value


class TscUnavailableReason(Enum):
    """Why the CPU timestamp counter cannot be used."""

    UNIMPLEMENTED = "unimplemented"
    ZERO_FREQUENCY = "zero TSC frequency"
    MISSING_INSTRUCTIONS = "missing instructions"
    VARIABLE_FREQUENCY = "variable TSC frequency"


class TscUnavailable(Exception):
    """Raised when the CPU timestamp counter cannot be used."""

    def __init__(self, reason: TscUnavailableReason) -> None:
        super().__init__(reason.value)
        self.reason = reason

    def __str__(self) -> str:
        return self.reason.value


def _read_tsc() -> int:
    # The interpreter offers no way to read the CPU's cycle counter.
    raise TscUnavailable(TscUnavailableReason.UNIMPLEMENTED)


@dataclass(frozen=True, order=True)
class TscTimestamp:
    """A reading of the CPU timestamp counter."""

    value: int

    @classmethod
    def frequency(cls) -> int:
        """Return the counter frequency in ticks per second."""
        frequency = _tsc_frequency()
        if frequency == 0:
            raise TscUnavailable(TscUnavailableReason.ZERO_FREQUENCY)
        return frequency

    def duration_since(self, earlier: TscTimestamp, frequency: int) -> FineDuration:
        """Return the time elapsed since `earlier`, or zero if it is later."""
        if frequency <= 0:
            raise ValueError(f"TSC frequency must be positive, got {frequency}")
        diff = self.value - earlier.value
        if diff < 0:
            return FineDuration()
        return FineDuration(diff * _PICOS_PER_SEC // frequency)


def _tsc_frequency() -> int:
    raise TscUnavailable(TscUnavailableReason.UNIMPLEMENTED)


class TimerKind(IntEnum):
    """The source a timer reads time from."""

    OS = 0
    TSC = 1


_precision_cache: dict[TimerKind, FineDuration] = {}
_precision_lock = threading.Lock()


@dataclass(frozen=True)
class Timer:
    """Measures time, with the operating system clock or the CPU counter.

    A timer with a `frequency` reads the CPU timestamp counter; one without
    reads the operating system clock.
    """

    frequency: int | None = None

    def __post_init__(self) -> None:
        if self.frequency is not None and self.frequency <= 0:
            raise ValueError(f"TSC frequency must be positive, got {self.frequency}")

    @classmethod
    def available(cls) -> list[Timer]:
        """Return every timer usable on this machine."""
        timers = [cls()]
        try:
            timers.append(cls.get_tsc())
        except TscUnavailable:
            pass
        return timers

    @classmethod
    def get_tsc(cls) -> Timer:
        """Return a timer reading the CPU timestamp counter."""
        return cls(frequency=TscTimestamp.frequency())

    def kind(self) -> TimerKind:
        """Return which clock this timer reads."""
        return TimerKind.OS if self.frequency is None else TimerKind.TSC

    def precision(self) -> FineDuration:
        """Return the smallest non-zero duration this timer can measure.

        The result is measured once per timer kind and then cached.
        """
        kind = self.kind()
        with _precision_lock:
            cached = _precision_cache.get(kind)
            if cached is None:
                cached = self._measure_precision()
                _precision_cache[kind] = cached
            return cached

    def _measure_precision(self) -> FineDuration:
        kind = self.kind()
        min_sample = FineDuration.MAX
        seen_count = 0

        # When back-to-back readings give nothing, pad them with a busy loop.
        delay_len = 0

        while True:
            for _ in range(100):
                if delay_len == 0:
                    start = Timestamp.start(kind)
                    end = Timestamp.end(kind)
                else:
                    start = Timestamp.start(kind)
                    for n in range(delay_len):
                        black_box(n)
                    end = Timestamp.end(kind)

                sample = end.duration_since(start, self)
                if sample.is_zero():
                    continue

                if sample > min_sample:
                    if delay_len > 100:
                        return min_sample
                elif sample == min_sample:
                    seen_count += 1
                    if seen_count >= 100:
                        return min_sample
                else:
                    min_sample = sample
                    seen_count = 0

            delay_len += 1

    def measure_sample_loop_overhead(self) -> FineDuration:
        """Return the per-iteration cost of an empty timed loop."""
        kind = self.kind()
        sample_count = 100
        sample_size = 10_000

        min_sample = FineDuration()
        for _ in range(sample_count):
            start = Timestamp.start(kind)
            for i in range(sample_size):
                black_box(i)
            end = Timestamp.end(kind)

            total = end.duration_since(start, self)
            sample = FineDuration(total.picos // sample_size)
            min_sample = min_sample.clamp_to_min(sample)

        return min_sample


@dataclass(frozen=True, order=True)
class Timestamp:
    """A reading taken from one kind of timer.

    For the operating system clock `value` is in nanoseconds; for the CPU
    counter it is in counter ticks.
    """

    kind: TimerKind
    value: int

    @classmethod
    def _read(cls, timer_kind: TimerKind) -> Timestamp:
        kind = TimerKind(timer_kind)
        if kind is TimerKind.OS:
            return cls(kind, time.perf_counter_ns())
        return cls(kind, _read_tsc())

    @classmethod
    def start(cls, timer_kind: TimerKind) -> Timestamp:
        """Take the reading that opens a timed section."""
        return cls._read(timer_kind)

    @classmethod
    def end(cls, timer_kind: TimerKind) -> Timestamp:
        """Take the reading that closes a timed section."""
        return cls._read(timer_kind)

    def duration_since(self, earlier: Timestamp, timer: Timer) -> FineDuration:
        """Return the time elapsed since `earlier`, as measured by `timer`."""
        timer_kind = timer.kind()
        if not (self.kind is earlier.kind is timer_kind):
            raise ValueError(
                "timestamps and timer disagree on kind: "
                f"{self.kind.name}, {earlier.kind.name}, {timer_kind.name}"
            )

        if timer_kind is TimerKind.OS:
            nanos = max(self.value - earlier.value, 0)
            return FineDuration(nanos * _PICOS_PER_NANO)

        assert timer.frequency is not None
        return TscTimestamp(self.value).duration_since(
            TscTimestamp(earlier.value), timer.frequency
        )


def _describe(value: Any) -> str:
    return type(value).__name__