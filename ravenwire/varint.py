"""Variable-length integers (RFC 9000, section 16) and fixed-width integers."""

from __future__ import annotations

from ravenwire.span import NonContiguousSpan

MAX_VARINT = (1 << 62) - 1

_WIDTHS = (1, 2, 4, 8)
_BYTEORDERS = ("big", "little")
_PREFIXES = {1: 0b00, 2: 0b01, 4: 0b10, 8: 0b11}


def _as_span(span):
    if isinstance(span, (bytes, bytearray, memoryview)):
        if len(span) == 0:
            raise ValueError("not enough bytes to decode")
        return NonContiguousSpan([bytes(span)])
    return span


def _check_width(width: int, byteorder: str) -> None:
    if width not in _WIDTHS:
        raise ValueError(f"unsupported integer width: {width}")
    if byteorder not in _BYTEORDERS:
        raise ValueError(f"unsupported byte order: {byteorder!r}")


def varint_size(value: int) -> int:
    """Return how many bytes the variable-length encoding of ``value`` takes."""
    if not 0 <= value <= MAX_VARINT:
        raise ValueError(f"value {value} cannot be encoded as a variable-length integer")
    if value < 1 << 6:
        return 1
    if value < 1 << 14:
        return 2
    if value < 1 << 30:
        return 4
    return 8


def encode_varint(value: int) -> bytes:
    """Encode ``value`` in the shortest variable-length form."""
    size = varint_size(value)
    prefixed = (_PREFIXES[size] << (8 * size - 2)) | value
    return prefixed.to_bytes(size, "big")


def decode_varint(span) -> tuple[int, int]:
    """Read a variable-length integer from the front of ``span``.

    Returns the value and the number of bytes consumed; a span is
    advanced past those bytes.
    """
    span = _as_span(span)
    if len(span) == 0:
        raise ValueError("not enough bytes to decode")
    size = 1 << (span[0] >> 6)
    if len(span) < size:
        raise ValueError("not enough bytes to decode")
    raw = int.from_bytes(span.copy_to(size), "big")
    span.advance(size)
    return raw & ((1 << (8 * size - 2)) - 1), size


def encode_uint(value: int, width: int, byteorder: str = "big") -> bytes:
    """Encode ``value`` as an unsigned integer of ``width`` bytes."""
    _check_width(width, byteorder)
    if not 0 <= value < 1 << (8 * width):
        raise ValueError(f"value {value} does not fit in {width} bytes")
    return value.to_bytes(width, byteorder)


def decode_uint(span, width: int, byteorder: str = "big") -> int:
    """Read an unsigned integer of ``width`` bytes from the front of ``span``."""
    _check_width(width, byteorder)
    span = _as_span(span)
    if len(span) < width:
        raise ValueError("not enough bytes to decode")
    value = int.from_bytes(span.copy_to(width), byteorder)
    span.advance(width)
    return value