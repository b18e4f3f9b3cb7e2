"""Number, byte-size and throughput formatting for benchmark output."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum, IntEnum

__all__ = [
    "BytesFormat",
    "CounterKind",
    "Scale",
    "ScaleUnit",
    "ScaleFormat",
    "DisplayThroughput",
    "format_f64",
    "format_bytes",
    "scale_value",
]


class BytesFormat(IntEnum):
    """Whether byte quantities use powers of 1000 or powers of 1024."""

    DECIMAL = 0
    BINARY = 1


class CounterKind(IntEnum):
    """The kinds of throughput counters."""

    BYTES = 0
    CHARS = 1
    ITEMS = 2


class ScaleUnit(Enum):
    """The unit family that a scaled value is displayed in."""

    BYTES = "bytes"
    BYTES_THROUGHPUT = "bytes_throughput"
    CHARS_THROUGHPUT = "chars_throughput"
    ITEMS_THROUGHPUT = "items_throughput"


@dataclass(frozen=True)
class ScaleFormat:
    """A unit family together with the byte format it uses, if any."""

    unit: ScaleUnit
    bytes_format: BytesFormat = BytesFormat.DECIMAL

    def effective_bytes_format(self) -> BytesFormat:
        """Return the byte format that governs scaling for this unit."""
        if self.unit in (ScaleUnit.BYTES, ScaleUnit.BYTES_THROUGHPUT):
            return self.bytes_format
        return BytesFormat.DECIMAL


_SCALE_STARTS: dict[BytesFormat, tuple[float, ...]] = {
    BytesFormat.DECIMAL: (1.0, 1e3, 1e6, 1e9, 1e12, 1e15),
    BytesFormat.BINARY: tuple(float(1024**n) for n in range(6)),
}

_BYTES_SUFFIXES = {
    BytesFormat.DECIMAL: ("B", "KB", "MB", "GB", "TB", "PB"),
    BytesFormat.BINARY: ("B", "KiB", "MiB", "GiB", "TiB", "PiB"),
}

_BYTES_THROUGHPUT_SUFFIXES = {
    BytesFormat.DECIMAL: ("B/s", "KB/s", "MB/s", "GB/s", "TB/s", "PB/s"),
    BytesFormat.BINARY: ("B/s", "KiB/s", "MiB/s", "GiB/s", "TiB/s", "PiB/s"),
}

_CHARS_THROUGHPUT_SUFFIXES = ("char/s", "Kchar/s", "Mchar/s", "Gchar/s", "Tchar/s", "Pchar/s")
_ITEMS_THROUGHPUT_SUFFIXES = ("item/s", "Kitem/s", "Mitem/s", "Gitem/s", "Titem/s", "Pitem/s")


class Scale(IntEnum):
    """Magnitude prefixes for scaled values."""

    ONE = 0
    KILO = 1
    MEGA = 2
    GIGA = 3
    TERA = 4
    PETA = 5

    def suffix(self, format: ScaleFormat) -> str:
        """Return the unit suffix for this scale in the given format."""
        unit = format.unit
        if unit is ScaleUnit.BYTES:
            return _BYTES_SUFFIXES[format.bytes_format][self]
        if unit is ScaleUnit.BYTES_THROUGHPUT:
            return _BYTES_THROUGHPUT_SUFFIXES[format.bytes_format][self]
        if unit is ScaleUnit.CHARS_THROUGHPUT:
            return _CHARS_THROUGHPUT_SUFFIXES[self]
        return _ITEMS_THROUGHPUT_SUFFIXES[self]


def _float_to_str(val: float) -> str:
    """Shortest round-trip positional representation, without exponent."""
    if math.isnan(val):
        return "NaN"
    if math.isinf(val):
        return "inf" if val > 0 else "-inf"
    return format(Decimal(repr(val)).normalize(), "f")


def format_f64(val: float, sig_figs: int) -> str:
    """Format a float, truncating its fraction to the given significant figures."""
    text = _float_to_str(float(val))
    dot_index = text.find(".")
    if dot_index < 0:
        return text

    fract_digits = max(sig_figs - dot_index, 0)
    if fract_digits == 0:
        return text[:dot_index]

    fract_start = dot_index + 1
    fract_end = fract_start + fract_digits
    if fract_end > len(text):
        return text

    fract = text[fract_start:fract_end].rstrip("0")
    if not fract:
        return text[:dot_index]
    return text[:fract_start] + fract


def scale_value(value: float, bytes_format: BytesFormat) -> tuple[float, Scale]:
    """Scale a value down to its magnitude prefix."""
    starts = _SCALE_STARTS[BytesFormat(bytes_format)]

    if math.isinf(value) or value < starts[1]:
        scale = Scale.ONE
    elif value < starts[2]:
        scale = Scale.KILO
    elif value < starts[3]:
        scale = Scale.MEGA
    elif value < starts[4]:
        scale = Scale.GIGA
    elif value < starts[5]:
        scale = Scale.TERA
    else:
        scale = Scale.PETA

    return value / starts[scale], scale


def format_bytes(val: float, sig_figs: int, bytes_format: BytesFormat) -> str:
    """Format a byte quantity with a scaled unit suffix."""
    scaled, scale = scale_value(val, bytes_format)
    suffix = scale.suffix(ScaleFormat(ScaleUnit.BYTES, BytesFormat(bytes_format)))
    return f"{format_f64(scaled, sig_figs)} {suffix}"


_SPEC_RE = re.compile(
    r"^(?:(?P<fill>.)?(?P<align>[<^>]))?(?P<width>\d+)?(?:\.(?P<precision>\d+))?$",
    re.DOTALL,
)


def _apply_spec(spec: str, render) -> str:
    match = _SPEC_RE.match(spec)
    if match is None:
        raise ValueError(f"invalid format spec: {spec!r}")

    precision = match["precision"]
    text = render(int(precision) if precision is not None else 4)

    width = match["width"]
    if width is not None:
        fill_len = int(width) - len(text.encode("utf-8"))
        if fill_len >= 0:
            if match["align"] not in (None, "<"):
                raise ValueError(f"unsupported alignment in format spec: {spec!r}")
            text += (match["fill"] or " ") * fill_len
    return text


@dataclass(frozen=True)
class DisplayThroughput:
    """A counter's throughput over a duration in picoseconds, ready to display."""

    kind: CounterKind
    count: int
    picos: float
    bytes_format: BytesFormat = BytesFormat.DECIMAL

    def _count_per_sec(self) -> float:
        if self.count == 0:
            return 0.0
        rate = 1e12 / self.picos if self.picos != 0 else math.inf
        return self.count * rate

    def _scale_format(self) -> ScaleFormat:
        if self.kind is CounterKind.BYTES:
            return ScaleFormat(ScaleUnit.BYTES_THROUGHPUT, self.bytes_format)
        if self.kind is CounterKind.CHARS:
            return ScaleFormat(ScaleUnit.CHARS_THROUGHPUT)
        return ScaleFormat(ScaleUnit.ITEMS_THROUGHPUT)

    def __format__(self, spec: str) -> str:
        fmt = self._scale_format()
        val, scale = scale_value(self._count_per_sec(), fmt.effective_bytes_format())

        def render(sig_figs: int) -> str:
            return f"{format_f64(val, sig_figs)} {scale.suffix(fmt)}"

        return _apply_spec(spec, render)

    def __str__(self) -> str:
        return format(self, "")