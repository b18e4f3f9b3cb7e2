import math

import pytest

from benchpaint.fmt import (
    BytesFormat,
    CounterKind,
    DisplayThroughput,
    Scale,
    ScaleFormat,
    ScaleUnit,
    format_bytes,
    format_f64,
    scale_value,
)


@pytest.mark.parametrize(
    "n, expected_value, expected_scale",
    [
        (1.0, 1.0, Scale.ONE),
        (1_000.0, 1.0, Scale.KILO),
        (1_000_000.0, 1.0, Scale.MEGA),
        (1_000_000_000.0, 1.0, Scale.GIGA),
        (1_000_000_000_000.0, 1.0, Scale.TERA),
        (1_000_000_000_000_000.0, 1.0, Scale.PETA),
    ],
)
def test_scale_value_decimal(n, expected_value, expected_scale):
    assert scale_value(n, BytesFormat.DECIMAL) == (expected_value, expected_scale)


def test_scale_value_binary():
    assert scale_value(1024.0, BytesFormat.BINARY) == (1.0, Scale.KILO)
    assert scale_value(1024.0**2 * 3, BytesFormat.BINARY) == (3.0, Scale.MEGA)
    assert scale_value(1000.0, BytesFormat.BINARY) == (1000.0, Scale.ONE)


def test_scale_value_infinite():
    value, scale = scale_value(math.inf, BytesFormat.DECIMAL)
    assert scale is Scale.ONE
    assert math.isinf(value)


@pytest.mark.parametrize(
    "val, sig_figs, expected",
    [
        (1.0, 4, "1"),
        (0.0, 4, "0"),
        (0.001, 4, "0.001"),
        (1.23456, 4, "1.234"),
        (100.2, 4, "100.2"),
        (1.2, 4, "1.2"),
        (12345.678, 4, "12345"),
        (59.999, 4, "59.99"),
        (0.1000001, 4, "0.1"),
        (1.0001, 4, "1"),
        (1e20, 4, "100000000000000000000"),
        (1.5, 0, "1"),
    ],
)
def test_format_f64(val, sig_figs, expected):
    assert format_f64(val, sig_figs) == expected


def test_format_f64_special_values():
    assert format_f64(math.inf, 4) == "inf"
    assert format_f64(-math.inf, 4) == "-inf"
    assert format_f64(math.nan, 4) == "NaN"


def test_format_bytes():
    assert format_bytes(1024.0, 4, BytesFormat.BINARY) == "1 KiB"
    assert format_bytes(1500.0, 4, BytesFormat.DECIMAL) == "1.5 KB"
    assert format_bytes(12.0, 4, BytesFormat.DECIMAL) == "12 B"


def test_suffixes():
    assert Scale.MEGA.suffix(ScaleFormat(ScaleUnit.BYTES, BytesFormat.BINARY)) == "MiB"
    assert Scale.GIGA.suffix(ScaleFormat(ScaleUnit.BYTES_THROUGHPUT)) == "GB/s"
    assert Scale.TERA.suffix(ScaleFormat(ScaleUnit.CHARS_THROUGHPUT)) == "Tchar/s"
    assert Scale.ONE.suffix(ScaleFormat(ScaleUnit.ITEMS_THROUGHPUT)) == "item/s"


def test_effective_bytes_format():
    binary = BytesFormat.BINARY
    assert ScaleFormat(ScaleUnit.BYTES, binary).effective_bytes_format() is binary
    assert ScaleFormat(ScaleUnit.BYTES_THROUGHPUT, binary).effective_bytes_format() is binary
    assert (
        ScaleFormat(ScaleUnit.CHARS_THROUGHPUT, binary).effective_bytes_format()
        is BytesFormat.DECIMAL
    )


def test_throughput_bytes():
    display = DisplayThroughput(CounterKind.BYTES, 1000, 1e12, BytesFormat.DECIMAL)
    assert str(display) == "1 KB/s"


def test_throughput_binary_bytes():
    display = DisplayThroughput(CounterKind.BYTES, 2048, 1e12, BytesFormat.BINARY)
    assert str(display) == "2 KiB/s"


def test_throughput_items_and_chars():
    assert str(DisplayThroughput(CounterKind.ITEMS, 5, 1e9)) == "5 Kitem/s"
    assert str(DisplayThroughput(CounterKind.CHARS, 3, 1e12)) == "3 char/s"


def test_throughput_zero_count():
    assert str(DisplayThroughput(CounterKind.ITEMS, 0, 1e12)) == "0 item/s"


def test_throughput_zero_time():
    assert str(DisplayThroughput(CounterKind.BYTES, 1, 0.0)) == "inf B/s"


def test_throughput_precision():
    display = DisplayThroughput(CounterKind.ITEMS, 1234, 1e12)
    assert format(display) == "1.234 Kitem/s"
    assert format(display, ".2") == "1.2 Kitem/s"


def test_throughput_fill():
    display = DisplayThroughput(CounterKind.BYTES, 1000, 1e12)
    assert format(display, "<10") == "1 KB/s    "
    assert format(display, "10") == "1 KB/s    "
    assert format(display, "*<8") == "1 KB/s**"
    assert format(display, "<2") == "1 KB/s"


def test_throughput_rejects_right_alignment():
    display = DisplayThroughput(CounterKind.BYTES, 1000, 1e12)
    assert format(display, "<10") == "1 KB/s    "
    with pytest.raises(ValueError):
        format(display, ">10")


def test_throughput_rejects_bad_spec():
    display = DisplayThroughput(CounterKind.BYTES, 1000, 1e12)
    assert format(display, "") == "1 KB/s"
    with pytest.raises(ValueError):
        format(display, "abc")