"""Tree-style benchmark output drawn with box-drawing characters."""

from __future__ import annotations

import sys
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Generic, TextIO, TypeVar

from .fine_duration import FineDuration
from .fmt import BytesFormat, CounterKind, DisplayThroughput, format_bytes, format_f64

__all__ = [
    "TreeColumn",
    "StatsSet",
    "AllocTally",
    "LeafStats",
    "TreePainter",
]

T = TypeVar("T")

_TREE_COL_BUF = 2
_COLUMN_SEP = " │ "
_ALLOC_OPS = ("alloc", "dealloc", "grow", "shrink")


class TreeColumn(IntEnum):
    """Columns of the table printed next to the tree."""

    FASTEST = 0
    SLOWEST = 1
    MEDIAN = 2
    MEAN = 3
    SAMPLES = 4
    ITERS = 5

    @classmethod
    def time_stats(cls) -> Iterator[TreeColumn]:
        """Yield the columns that hold timing statistics."""
        yield from (cls.FASTEST, cls.SLOWEST, cls.MEDIAN, cls.MEAN)

    def is_first(self) -> bool:
        """Return True for the leftmost column."""
        return self is TreeColumn.FASTEST

    def is_last(self) -> bool:
        """Return True for the rightmost column."""
        return self is TreeColumn.ITERS

    def column_name(self) -> str:
        """Return the heading shown for this column."""
        return self.name.lower()

    def is_time_stat(self) -> bool:
        """Return True if this column holds a timing statistic."""
        return self in (
            TreeColumn.FASTEST,
            TreeColumn.SLOWEST,
            TreeColumn.MEDIAN,
            TreeColumn.MEAN,
        )

    def get_stat(self, stats: StatsSet[T]) -> T | None:
        """Return the statistic for this column, or None if it has none."""
        if self is TreeColumn.FASTEST:
            return stats.fastest
        if self is TreeColumn.SLOWEST:
            return stats.slowest
        if self is TreeColumn.MEDIAN:
            return stats.median
        if self is TreeColumn.MEAN:
            return stats.mean
        return None


@dataclass(frozen=True)
class StatsSet(Generic[T]):
    """Summary statistics over a set of samples."""

    fastest: T
    slowest: T
    median: T
    mean: T


@dataclass(frozen=True)
class AllocTally(Generic[T]):
    """A count of allocation operations and the bytes they touched."""

    count: T
    size: T


def _stats_is_zero(stats: StatsSet[float]) -> bool:
    return not any((stats.fastest, stats.slowest, stats.median, stats.mean))


def _tally_is_zero(tally: AllocTally[StatsSet[float]]) -> bool:
    return _stats_is_zero(tally.count) and _stats_is_zero(tally.size)


@dataclass(frozen=True)
class LeafStats:
    """Statistics of one benchmark, as shown at a leaf of the tree.

    `alloc_tallies` is keyed by operation: "alloc", "dealloc", "grow" or
    "shrink".
    """

    time: StatsSet[FineDuration]
    sample_count: int
    iter_count: int
    counts: Mapping[CounterKind, StatsSet[int]] = field(default_factory=dict)
    alloc_tallies: Mapping[str, AllocTally[StatsSet[float]]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = sorted(set(self.alloc_tallies) - set(_ALLOC_OPS))
        if unknown:
            raise ValueError(f"unknown allocation operations: {', '.join(unknown)}")


class TreePainter:
    """Paints benchmark results as a tree with an aligned table beside it."""

    def __init__(
        self,
        max_name_span: int,
        column_widths: Sequence[int],
        out: TextIO | None = None,
    ) -> None:
        widths = list(column_widths)
        if len(widths) != len(TreeColumn):
            raise ValueError(
                f"expected {len(TreeColumn)} column widths, got {len(widths)}"
            )
        self.max_name_span = max_name_span
        self.column_widths = widths
        self._out = out
        self._depth = 0
        self._prefix = ""

    def _write(self, text: str, *, flush: bool = False) -> None:
        out = self._out if self._out is not None else sys.stdout
        out.write(text)
        if flush:
            out.flush()

    def _has_columns(self) -> bool:
        return any(self.column_widths)

    def _pad_name(self, text: str) -> str:
        """Right-pad to the name column, widening it when needed."""
        length = len(text)
        pad = _TREE_COL_BUF + max(self.max_name_span - length, 0)
        if length > self.max_name_span:
            self.max_name_span = length
        return text + " " * pad

    def _columns(self, values: Sequence[str]) -> str:
        """Render one table row, widening columns as needed."""
        parts: list[str] = []
        last = len(values) - 1
        for column, value in enumerate(values):
            width = len(value)
            if column != 0:
                # Avoid a trailing space after the final separator.
                parts.append(_COLUMN_SEP[:-1] if column == last and width == 0 else _COLUMN_SEP)
            parts.append(value)
            if column != last:
                remaining = self.column_widths[column] - width
                if remaining >= 0:
                    parts.append(" " * remaining)
                else:
                    self.column_widths[column] = width
        return "".join(parts)

    @staticmethod
    def _first_only(value: str) -> list[str]:
        return [value] + [""] * (len(TreeColumn) - 1)

    @staticmethod
    def _branch(is_last: bool) -> str:
        return "╰─ " if is_last else "├─ "

    def start_parent(self, name: str, is_last: bool) -> None:
        """Enter a parent node."""
        is_top_level = self._depth == 0
        has_columns = self._has_columns()

        branch = "" if is_top_level else self._branch(is_last)
        line = self._prefix + branch + name

        if has_columns:
            line = self._pad_name(line)
            if is_top_level:
                line += self._columns([column.column_name() for column in TreeColumn])
            else:
                line += self._columns([""] * len(TreeColumn))

        self._write(line + "\n")
        self._depth += 1

        if not is_top_level:
            self._prefix += "   " if is_last else "│  "

    def finish_parent(self) -> None:
        """Exit the current parent node."""
        if self._depth == 0:
            raise RuntimeError("no parent node to finish")
        self._depth -= 1

        # Separate consecutive top-level parents.
        if self._depth == 0:
            self._write("\n")

        self._prefix = self._prefix[:-3]

    def ignore_leaf(self, name: str, is_last: bool) -> None:
        """Show a leaf whose benchmark was skipped."""
        line = self._pad_name(self._prefix + self._branch(is_last) + name)
        if self._has_columns():
            line += self._columns(self._first_only("(ignored)"))
        else:
            line += "(ignored)"
        self._write(line + "\n")

    def start_leaf(self, name: str, is_last: bool) -> None:
        """Enter a leaf node; its statistics follow on the same line."""
        line = self._prefix + self._branch(is_last) + name
        if self._has_columns():
            line = self._pad_name(line)
        self._write(line, flush=True)

    def finish_empty_leaf(self) -> None:
        """Exit the current leaf node without statistics."""
        self._write("\n")

    def _row_lead(self, is_last: bool) -> str:
        return self._pad_name(self._prefix + ("" if is_last else "│"))

    def finish_leaf(self, is_last: bool, stats: LeafStats, bytes_format: BytesFormat) -> None:
        """Exit the current leaf node, showing its statistics."""
        columns = list(TreeColumn)

        alloc_rows: dict[str, tuple[list[str], list[str]]] = {}
        for op in _ALLOC_OPS:
            tally = stats.alloc_tallies.get(op)
            if tally is None or _tally_is_zero(tally):
                continue
            counts: list[str] = []
            sizes: list[str] = []
            for column in columns:
                count = column.get_stat(tally.count)
                size = column.get_stat(tally.size)
                if count is None or size is None:
                    counts.append("")
                    sizes.append("")
                    continue
                lead = "  " if column.is_first() else ""
                counts.append(lead + format_f64(count, 4))
                sizes.append(lead + format_bytes(size, 4, bytes_format))
            alloc_rows[op] = (counts, sizes)

        counter_rows: list[list[str]] = []
        for kind in CounterKind:
            counter_stats = stats.counts.get(kind)
            row: list[str] = []
            for column in columns:
                count = None if counter_stats is None else column.get_stat(counter_stats)
                time = column.get_stat(stats.time)
                if count is None or time is None:
                    row.append("")
                else:
                    row.append(
                        str(DisplayThroughput(kind, count, float(time.picos), bytes_format))
                    )
            counter_rows.append(row)

        # Widen columns up front so every row lines up.
        for column in TreeColumn.time_stats():
            candidates = [row[column] for row in counter_rows]
            for counts, sizes in alloc_rows.values():
                candidates.extend((counts[column], sizes[column]))
            self.column_widths[column] = max(
                [self.column_widths[column], *(len(s) for s in candidates)]
            )

        time_row = [
            str(stats.time.fastest),
            str(stats.time.slowest),
            str(stats.time.median),
            str(stats.time.mean),
            str(stats.sample_count),
            str(stats.iter_count),
        ]
        self._write(self._columns(time_row) + "\n")

        for row in counter_rows:
            if not any(row):
                continue
            self._write(self._row_lead(is_last) + self._columns(row) + "\n")

        for op, (counts, sizes) in alloc_rows.items():
            self._write(self._row_lead(is_last) + self._columns(self._first_only(f"{op}:")) + "\n")
            for values in (counts, sizes):
                self._write(self._row_lead(is_last) + self._columns(values) + "\n")