from datetime import datetime, timedelta, timezone

import pytest

from installcmx import codec


def test_bytes_encode_lowercase_hex():
    assert codec.encode_bytes(bytes([0x0A, 0xFF])) == "0aff"
    assert codec.decode_bytes("0aff") == bytes([0x0A, 0xFF])
    assert codec.decode_bytes("0AFF") == bytes([0x0A, 0xFF])


def test_bytes_short_and_odd_input():
    assert codec.decode_bytes("") == b""
    assert codec.decode_bytes("a") == b""
    assert codec.decode_bytes("0af") == b"\x0a"


@pytest.mark.parametrize("text", ["zz", "0g", "0a f", "+a"])
def test_bytes_malformed(text):
    with pytest.raises(codec.ValueFormatError):
        codec.decode_bytes(text)


def test_bool_is_stored_as_integer():
    assert codec.encode_bool(True) == "1"
    assert codec.encode_bool(False) == "0"
    assert codec.decode_bool("1") is True
    assert codec.decode_bool("0") is False
    assert codec.decode_bool("-7") is True
    with pytest.raises(codec.ValueFormatError):
        codec.decode_bool("true")


def test_numbers():
    assert codec.encode_int(30) == "30"
    assert codec.decode_int("-12") == -12
    assert codec.encode_float(0.1) == "0.1"
    assert codec.decode_float("2.5") == 2.5
    with pytest.raises(codec.ValueFormatError):
        codec.decode_int("1.5")
    with pytest.raises(codec.ValueFormatError):
        codec.decode_float("1,5")


def test_timestamp_sortable_form():
    ts = datetime(2021, 1, 21, 13, 5, 9)
    assert codec.encode_timestamp(ts) == "2021-01-21T13:05:09"
    assert codec.decode_timestamp("2021-01-21T13:05:09") == ts

    aware = datetime(2021, 1, 21, 13, 5, 9, 250, tzinfo=timezone(timedelta(hours=1)))
    assert codec.decode_timestamp(codec.encode_timestamp(aware)) == aware

    with pytest.raises(codec.ValueFormatError):
        codec.decode_timestamp("21/01/2021")


@pytest.mark.parametrize("text", ["1_000", "١٢", " 3", "0x1f", ""])
def test_int_accepts_plain_ascii_decimal_only(text):
    with pytest.raises(codec.ValueFormatError):
        codec.decode_int(text)


@pytest.mark.parametrize("text", ["1_000.5", "١.٥", "1e", ".", ""])
def test_float_accepts_plain_ascii_decimal_only(text):
    with pytest.raises(codec.ValueFormatError):
        codec.decode_float(text)


def test_float_special_values_round_trip():
    assert codec.decode_float(codec.encode_float(float("inf"))) == float("inf")
    assert codec.decode_float("-1.5e3") == -1500.0
    assert codec.decode_float("+.5") == 0.5
