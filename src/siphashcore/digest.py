from __future__ import annotations

import re
import struct
from dataclasses import dataclass
from typing import Tuple

from .state import absorb_block, absorb_last_block, finalize, initialize

_VARIANT_PATTERNS = (
    re.compile(r"siphash[-_](\d+)[-_](\d+)"),
    re.compile(r"siphash(\d)(\d)"),
)


def _select_rounds(algo: str) -> Tuple[int, int]:
    algo_normalized = algo.strip().lower()
    for pattern in _VARIANT_PATTERNS:
        match = pattern.fullmatch(algo_normalized)
        if match:
            c, d = int(match.group(1)), int(match.group(2))
            if c > 0 and d > 0:
                return c, d
    raise ValueError(f"Unsupported algorithm: {algo}")


def siphash(key: bytes, message: bytes, c: int = 2, d: int = 4) -> int:
    """
    Hash a complete message with SipHash-c-d and return the 64-bit digest.

    Args:
        key: 16-byte key
        message: Bytes-like message, held in full
        c: Compression rounds per block (default: 2)
        d: Finalization rounds (default: 4)

    Returns:
        Digest as an unsigned int

    Raises:
        TypeError: If key or message is not bytes-like
        InvalidKeyLength: If key is not exactly 16 bytes
    """
    if not isinstance(message, (bytes, bytearray, memoryview)):
        raise TypeError("message must be bytes-like")
    data = bytes(message)

    state = initialize(key)
    offset_limit = len(data) - (len(data) % 8)
    for idx in range(0, offset_limit, 8):
        state = absorb_block(state, data[idx : idx + 8], c)
    state = absorb_last_block(state, data[offset_limit:], len(data), c)
    return finalize(state, d)


def siphash24(key: bytes, message: bytes) -> int:
    return siphash(key, message, 2, 4)


def siphash13(key: bytes, message: bytes) -> int:
    return siphash(key, message, 1, 3)


@dataclass(frozen=True)
class SipHashDigest:
    """Eight little-endian digest bytes, as laid out in the published SipHash vectors."""

    _digest: bytes

    def digest(self) -> bytes:
        return self._digest

    def hexdigest(self) -> str:
        return self._digest.hex()

    def intdigest(self) -> int:
        return int.from_bytes(self._digest, byteorder="little", signed=False)


def keyed_hash(message: bytes, key: bytes, algo: str = "siphash-2-4") -> SipHashDigest:
    """
    Hash a message with a named SipHash variant.

    Args:
        message: Bytes-like message
        key: 16-byte key
        algo: Variant name such as "siphash-2-4", "SipHash-1-3" or "siphash24"

    Returns:
        SipHashDigest with digest(), hexdigest(), and intdigest() methods.
        The byte form is little-endian, matching the published test vectors.

    Raises:
        ValueError: If algo is not a SipHash variant name
    """
    c, d = _select_rounds(algo)
    return SipHashDigest(struct.pack("<Q", siphash(key, message, c, d)))


__all__ = ["SipHashDigest", "keyed_hash", "siphash", "siphash13", "siphash24"]
