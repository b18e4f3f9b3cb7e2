"""Durations, timers, number formatting and tree-style reports for benchmarks."""

__version__ = "0.1.0"

__all__ = ["fmt", "util", "fine_duration", "timer", "tree_painter"]