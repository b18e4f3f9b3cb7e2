# benchpaint

Building blocks for benchmark harnesses: picosecond-precise durations,
a timer with measured precision and loop overhead, human-friendly number,
byte-size and throughput formatting, and a tree-style report painter that
draws results with box-drawing characters.

It has no dependencies outside the standard library.

## Installation

```sh
pip install benchpaint
```

## Formatting durations

`benchpaint.fine_duration.FineDuration` holds a non-negative duration in
integer picoseconds and picks a readable unit (`ps`, `ns`, `µs`, `ms`, `s`,
`m`, `h`, `d`) when formatted. It shows four significant figures unless a
precision is given; values below a nanosecond are shown in nanoseconds at
that default. A width pads on the right; only left alignment is accepted.

```python
from benchpaint.fine_duration import FineDuration

print(f"{FineDuration(1_234_000)}")    # 1.234 µs
print(f"{FineDuration(120):.4}")       # 0.12 ns
print(f"{FineDuration(10**12):<10}|")  # "1 s       |"
```

`FineDuration.from_timedelta` converts a non-negative `timedelta`;
`clamp_to` and `clamp_to_min` pick between durations while treating zero as
"no value". `TimeScale` names the units and their sizes in picoseconds.

`into_duration` turns whole seconds (`int`), fractional seconds (`float`) or
a `timedelta` into a `timedelta`, rejecting negative and non-finite values.

## Numbers, bytes and throughput

```python
from benchpaint.fmt import BytesFormat, format_bytes, format_f64, scale_value

format_f64(1.23456, 4)                       # "1.234"
format_bytes(2048.0, 4, BytesFormat.BINARY)  # "2 KiB"
scale_value(1e6, BytesFormat.DECIMAL)        # (1.0, Scale.MEGA)
```

`DisplayThroughput(kind, count, picos, bytes_format)` formats a count of
`CounterKind.BYTES`, `CHARS` or `ITEMS` measured over a number of
picoseconds as a per-second rate, for example `1 Kitem/s` or `2 MiB/s`.
It accepts the same precision and width specifications as `FineDuration`.

## Timers

`benchpaint.timer.Timer()` measures with the operating system's
high-resolution clock.

- `Timer().precision()` returns the smallest non-zero interval the timer
  observes, measured once and then cached.
- `Timer().measure_sample_loop_overhead()` estimates the cost of one
  iteration of an empty timed loop.
- `Timestamp.start(kind)` / `Timestamp.end(kind)` take readings, and
  `Timestamp.duration_since(earlier, timer)` turns them into a
  `FineDuration`.
- `black_box(value)` returns its argument unchanged, for use inside timed
  loops.

The CPU timestamp counter cannot be read from Python, so `Timer.get_tsc()`
and `TscTimestamp.frequency()` raise `TscUnavailable`, and
`Timer.available()` returns only the operating-system timer.

## Painting result trees

`benchpaint.tree_painter.TreePainter` writes a tree of benchmark groups and
leaves to a stream (standard output when `out` is not given), with a table
of `fastest`, `slowest`, `median`, `mean`, `samples` and `iters` columns
beside it. The table is drawn only when some column width is non-zero;
widths grow as wider values come in.

```python
import sys
from benchpaint.tree_painter import TreePainter

painter = TreePainter(max_name_span=10, column_widths=[0] * 6, out=sys.stdout)
painter.start_parent("math", is_last=True)
painter.start_leaf("add", is_last=True)
painter.finish_empty_leaf()
painter.finish_parent()
```

`ignore_leaf` marks a skipped benchmark with `(ignored)`. To show results,
pass a `LeafStats` to `finish_leaf`: its `time` is a `StatsSet` of
`FineDuration`, `counts` maps a `CounterKind` to a `StatsSet` of counts
(shown as throughput rows), and `alloc_tallies` maps `"alloc"`,
`"dealloc"`, `"grow"` or `"shrink"` to an `AllocTally` of count and size
statistics.

## Other helpers

`benchpaint.util.slice_middle` returns the middle one or two items of a
sequence, and `known_parallelism` returns the number of CPUs available to
the process (cached).

## What it does not do

This package does not discover, run or sample benchmarks, has no command
line, and does not profile memory: it provides the timing, formatting and
reporting pieces, and displays whatever statistics it is given.

## Running the tests

```sh
pip install -e ".[test]"
pytest
```