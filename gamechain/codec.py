"""Compact little-endian binary encoding for chain values."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, TypeVar

T = TypeVar("T")

_SINGLE_BYTE_LIMIT = 1 << 6
_TWO_BYTE_LIMIT = 1 << 14
_FOUR_BYTE_LIMIT = 1 << 30
_MAX_BIG_INT_BYTES = 67


class ByteReader:
    """Sequential reader over an immutable byte string."""

    def __init__(self, data: bytes = b"") -> None:
        self._data = bytes(data)
        self._pos = 0

    def read(self, size: int) -> bytes:
        """Return the next ``size`` bytes, raising ValueError if too few remain."""
        if size < 0:
            raise ValueError("cannot read a negative number of bytes")
        end = self._pos + size
        if end > len(self._data):
            raise ValueError(
                f"not enough data: wanted {size} bytes, {self.remaining()} left"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def remaining(self) -> int:
        """Number of bytes not yet read."""
        return len(self._data) - self._pos


def encode_compact(value: int) -> bytes:
    """Encode a non-negative integer in compact form."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError("compact values must be integers")
    if value < 0:
        raise ValueError("compact values must not be negative")
    if value < _SINGLE_BYTE_LIMIT:
        return bytes([value << 2])
    if value < _TWO_BYTE_LIMIT:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value < _FOUR_BYTE_LIMIT:
        return ((value << 2) | 0b10).to_bytes(4, "little")
    length = max(4, (value.bit_length() + 7) // 8)
    if length > _MAX_BIG_INT_BYTES:
        raise ValueError("value too large for compact encoding")
    return bytes([((length - 4) << 2) | 0b11]) + value.to_bytes(length, "little")


def decode_compact(reader) -> int:
    """Decode a compact integer from ``reader``."""
    first = reader.read(1)
    mode = first[0] & 0b11
    if mode == 0b00:
        return first[0] >> 2
    if mode == 0b01:
        value = int.from_bytes(first + reader.read(1), "little") >> 2
        if value < _SINGLE_BYTE_LIMIT:
            raise ValueError("non-canonical compact encoding")
        return value
    if mode == 0b10:
        value = int.from_bytes(first + reader.read(3), "little") >> 2
        if value < _TWO_BYTE_LIMIT:
            raise ValueError("non-canonical compact encoding")
        return value
    length = (first[0] >> 2) + 4
    value = int.from_bytes(reader.read(length), "little")
    if value < _FOUR_BYTE_LIMIT or value.bit_length() <= 8 * (length - 1):
        raise ValueError("non-canonical compact encoding")
    return value


def encode_uint(value: int, width: int) -> bytes:
    """Encode an unsigned integer as ``width`` little-endian bytes."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError("unsigned values must be integers")
    if width <= 0:
        raise ValueError("width must be positive")
    if value < 0 or value >= 1 << (8 * width):
        raise ValueError(f"{value} does not fit in {width} bytes")
    return value.to_bytes(width, "little")


def decode_uint(reader, width: int) -> int:
    """Decode an unsigned integer of ``width`` little-endian bytes."""
    if width <= 0:
        raise ValueError("width must be positive")
    return int.from_bytes(reader.read(width), "little")


def encode_option(value: Optional[T], encode_item: Callable[[T], bytes]) -> bytes:
    """Encode an optional value: a flag byte followed by the item when present."""
    if value is None:
        return b"\x00"
    return b"\x01" + encode_item(value)


def decode_option(reader, decode_item: Callable[[object], T]) -> Optional[T]:
    """Decode an optional value written by :func:`encode_option`."""
    flag = reader.read(1)[0]
    if flag == 0:
        return None
    if flag == 1:
        return decode_item(reader)
    raise ValueError(f"invalid option flag {flag}")


def encode_vec(items: Iterable[T], encode_item: Callable[[T], bytes]) -> bytes:
    """Encode a sequence as its compact length followed by each item."""
    encoded = [encode_item(item) for item in items]
    return encode_compact(len(encoded)) + b"".join(encoded)


def decode_vec(reader, decode_item: Callable[[object], T]) -> List[T]:
    """Decode a sequence written by :func:`encode_vec`."""
    count = decode_compact(reader)
    return [decode_item(reader) for _ in range(count)]