"""
Fixed-width field helpers for the partition table block.

All integers are little-endian. Setters mask the value to the field width and
never complain about overflow: a value of 0x1ABCD written to a 16-bit field
stores 0xABCD. This mirrors the hardware tooling the format comes from and is
not treated as an error.
"""

import struct

from .constants import TEXT_MAX, TEXT_MIN, TEXT_PLACEHOLDER
from .exceptions import OutOfRangeError


def _check_range(buf, ofs: int, width: int) -> None:
    if ofs < 0 or ofs + width > len(buf):
        raise OutOfRangeError(
            f"Field at 0x{ofs:X} (width {width}) outside buffer of {len(buf)} bytes"
        )


def get_u8(buf, ofs: int) -> int:
    """Read an unsigned byte."""
    _check_range(buf, ofs, 1)
    return buf[ofs]


def get_u16(buf, ofs: int) -> int:
    """Read an unsigned 16-bit value."""
    _check_range(buf, ofs, 2)
    return struct.unpack_from('<H', buf, ofs)[0]


def get_u24(buf, ofs: int) -> int:
    """Read an unsigned 24-bit value (LSB at ofs, MSB at ofs + 2)."""
    _check_range(buf, ofs, 3)
    return struct.unpack('<I', bytes(buf[ofs:ofs + 3]) + b'\x00')[0]


def set_u8(buf: bytearray, ofs: int, value: int) -> None:
    _check_range(buf, ofs, 1)
    buf[ofs] = value & 0xFF


def set_u16(buf: bytearray, ofs: int, value: int) -> None:
    _check_range(buf, ofs, 2)
    struct.pack_into('<H', buf, ofs, value & 0xFFFF)


def set_u24(buf: bytearray, ofs: int, value: int) -> None:
    _check_range(buf, ofs, 3)
    buf[ofs:ofs + 3] = struct.pack('<I', value & 0xFFFFFF)[:3]


def get_bytes(buf, ofs: int, length: int) -> bytes:
    """Return a copy of a raw byte range."""
    _check_range(buf, ofs, length)
    return bytes(buf[ofs:ofs + length])


def set_bytes(buf: bytearray, ofs: int, data: bytes) -> None:
    _check_range(buf, ofs, len(data))
    buf[ofs:ofs + len(data)] = data


def get_text(buf, ofs: int, length: int) -> str:
    """
    Decode a high-bit ASCII string.

    Bit 7 is stripped from every byte; anything still outside the printable
    range is replaced with a placeholder, so the result is always `length`
    characters long.
    """
    _check_range(buf, ofs, length)
    chars = []
    for b in buf[ofs:ofs + length]:
        b &= 0x7F
        if b < TEXT_MIN or b > TEXT_MAX:
            chars.append(TEXT_PLACEHOLDER)
        else:
            chars.append(chr(b))
    return ''.join(chars)


def set_text(buf: bytearray, ofs: int, text: str, length: int) -> None:
    """Store text space-padded to `length` with bit 7 set on every byte."""
    _check_range(buf, ofs, length)
    padded = text.ljust(length)[:length]
    buf[ofs:ofs + length] = bytes((ord(ch) & 0x7F) | 0x80 for ch in padded)


def hex_bytes(buf, ofs: int, length: int, skip_zero: bool = False) -> str:
    """
    Format a byte range as '0xNN,0xNN,...'.

    With skip_zero, zero bytes are shown as '.' so sparse regions stay
    readable.
    """
    _check_range(buf, ofs, length)
    parts = []
    for i, b in enumerate(buf[ofs:ofs + length]):
        if b == 0 and skip_zero:
            parts.append('.')
        else:
            if i > 0:
                parts.append(',')
            parts.append(f"0x{b:02X}")
    return ''.join(parts)
