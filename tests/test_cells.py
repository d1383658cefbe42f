import datetime
from decimal import Decimal

from querydump.cells import NULL, Null, Scalar, TextOrBinary, to_cell, to_row


def test_driver_values_are_classified():
    assert to_cell(None) is NULL
    assert isinstance(to_cell(None), Null)
    assert to_cell(b"\xff\x00") == TextOrBinary(b"\xff\x00")
    assert to_cell(bytearray(b"ab")) == TextOrBinary(b"ab")
    assert to_cell("café") == TextOrBinary("café".encode("utf-8"))
    assert to_cell(42) == Scalar(42)
    assert to_cell(1.5) == Scalar(1.5)


def test_decimal_and_temporal_values_become_text():
    assert to_cell(Decimal("12.50")) == TextOrBinary(b"12.50")
    assert to_cell(datetime.date(2024, 3, 1)) == TextOrBinary(b"2024-03-01")
    assert to_cell(datetime.datetime(2024, 3, 1, 10, 5, 0)) == TextOrBinary(b"2024-03-01 10:05:00")
    assert to_cell(datetime.timedelta(hours=26, minutes=3, seconds=4)) == TextOrBinary(b"26:03:04")
    assert to_cell(-datetime.timedelta(minutes=90)) == TextOrBinary(b"-01:30:00")


def test_small_decimal_keeps_plain_notation():
    assert to_cell(Decimal("0.0000000100")) == TextOrBinary(b"0.0000000100")
    assert to_cell(Decimal("-12345678901234567890.5")) == TextOrBinary(b"-12345678901234567890.5")


def test_scalar_text():
    assert Scalar(7).text == "7"
    assert Scalar(2.25).text == "2.25"
    assert Scalar(True).text == "1"
    assert Scalar(False).text == "0"


def test_text_decode_replaces_invalid_utf8():
    assert TextOrBinary(b"ok\xff").decode() == "ok\ufffd"


def test_to_row():
    assert to_row([1, None, "x"]) == (Scalar(1), NULL, TextOrBinary(b"x"))
