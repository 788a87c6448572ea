from __future__ import annotations

import struct

MASK_64 = 0xFFFFFFFFFFFFFFFF


def apply_mask64(value: int) -> int:
    return value & MASK_64


def rotate_left(value: int, shift: int) -> int:
    """
    Rotate a 64-bit value left by ``shift`` bits.

    Bits pushed off the top are carried back onto the bottom. The shifted
    value is masked before it is combined, since Python ints never overflow.

    Args:
        value: Unsigned 64-bit integer
        shift: Rotation amount, 0 < shift < 64

    Raises:
        ValueError: If shift is out of range
    """
    if not 0 < shift < 64:
        raise ValueError(f"shift must be between 1 and 63, got {shift}")
    return apply_mask64(value << shift) | (value >> (64 - shift))


def bytes_to_long(data: bytes) -> int:
    """Decode exactly 8 bytes as a little-endian unsigned 64-bit int."""
    return struct.unpack("<Q", data)[0]


__all__ = ["MASK_64", "apply_mask64", "rotate_left", "bytes_to_long"]
