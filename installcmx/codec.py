from __future__ import annotations

import re
from datetime import datetime


class ValueFormatError(ValueError):
    pass


_HEX_PAIRS = re.compile(r"(?:[0-9a-fA-F]{2})*")
_INT = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


def encode_bool(value: bool) -> str:
    return "1" if value else "0"


def decode_bool(text: str) -> bool:
    # Booleans are stored as integers; anything nonzero is true.
    return decode_int(text) != 0


def encode_int(value: int) -> str:
    return str(int(value))


def decode_int(text: str) -> int:
    # Plain ASCII decimal only: no digit separators, no other scripts.
    if not _INT.fullmatch(text):
        raise ValueFormatError(f"Not an integer: {text!r}")
    return int(text)


def encode_float(value: float) -> str:
    return repr(float(value))


def decode_float(text: str) -> float:
    if not _FLOAT.fullmatch(text):
        raise ValueFormatError(f"Not a number: {text!r}")
    return float(text)


def encode_bytes(value: bytes) -> str:
    return bytes(value).hex()


def decode_bytes(text: str) -> bytes:
    """Decode lowercase (or uppercase) hex, two digits per byte.

    A trailing odd digit is ignored and strings shorter than one byte decode
    to ``b""``.
    """

    usable = text[: len(text) - len(text) % 2]
    if not _HEX_PAIRS.fullmatch(usable):
        raise ValueFormatError(f"Malformed hex string: {text!r}")
    return bytes.fromhex(usable)


def encode_timestamp(value: datetime) -> str:
    # Sortable ISO-8601; fractional seconds only appear when present.
    return value.isoformat()


def decode_timestamp(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueFormatError(f"Not an ISO-8601 timestamp: {text!r}") from e
