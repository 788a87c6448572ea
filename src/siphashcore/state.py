"""
State transformations of a SipHash digest as it moves through the pipeline.

A state is a plain 4-tuple ``(v0, v1, v2, v3)`` of unsigned 64-bit ints.
Every function here returns a new tuple and never mutates its input, so
independent computations can run on separate threads without coordination.

The SipRound loop is the hot path. When numba is installed a compiled loop
is swapped in at import time, after checking it bit-for-bit against the
portable round. Set ``SIPHASH_STATE_IMPL=embedded`` to force the portable
round.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Tuple

from .errors import InvalidBlockLength, InvalidKeyLength, InvalidRemainderLength
from .util import MASK_64, apply_mask64, bytes_to_long, rotate_left

logger = logging.getLogger(__name__)

State = Tuple[int, int, int, int]

_INITIAL_V0 = 0x736F6D6570736575
_INITIAL_V1 = 0x646F72616E646F6D
_INITIAL_V2 = 0x6C7967656E657261
_INITIAL_V3 = 0x7465646279746573

_IMPL_ENV = "SIPHASH_STATE_IMPL"

_BYTES_LIKE = (bytes, bytearray, memoryview)


def _ensure_bytes(value, name: str) -> bytes:
    if not isinstance(value, _BYTES_LIKE):
        raise TypeError(f"{name} must be bytes-like")
    return bytes(value)


def _portable_round(state: State) -> State:
    v0, v1, v2, v3 = state

    v0 = apply_mask64(v0 + v1)
    v2 = apply_mask64(v2 + v3)
    v1 = rotate_left(v1, 13)
    v3 = rotate_left(v3, 16)

    v1 ^= v0
    v3 ^= v2
    v0 = rotate_left(v0, 32)

    v2 = apply_mask64(v2 + v1)
    v0 = apply_mask64(v0 + v3)
    v1 = rotate_left(v1, 17)
    v3 = rotate_left(v3, 21)

    v1 ^= v2
    v3 ^= v0
    v2 = rotate_left(v2, 32)

    return v0, v1, v2, v3


def _portable_compress(state: State, n: int) -> State:
    for _ in range(n):
        state = _portable_round(state)
    return state


# States the native loop must reproduce before it is trusted.
_PROBE_STATES = (
    (0, 0, 0, 0),
    (MASK_64, MASK_64, MASK_64, MASK_64),
    (_INITIAL_V0, _INITIAL_V1, _INITIAL_V2, _INITIAL_V3),
    (0x0123456789ABCDEF, 0xFEDCBA9876543210, 0x8000000000000000, 0x0000000000000001),
    (0xDEADBEEFCAFEBABE, 0x7FFFFFFFFFFFFFFF, 0x5555555555555555, 0xAAAAAAAAAAAAAAAA),
)


def _matches_portable(candidate: Callable[[State, int], State]) -> bool:
    for probe in _PROBE_STATES:
        # Chained rounds so carries reach every bit position.
        for n in range(5):
            if candidate(probe, n) != _portable_compress(probe, n):
                return False
    return True


def _select_compress() -> Tuple[Callable[[State, int], State], bool]:
    if os.environ.get(_IMPL_ENV, "").lower() == "embedded":
        logger.debug("%s=embedded, using portable SipRound", _IMPL_ENV)
        return _portable_compress, False

    try:
        from ._native import compress as native_compress
    except ImportError as exc:
        logger.debug("Native SipRound unavailable (%s), using portable SipRound", exc)
        return _portable_compress, False

    try:
        verified = _matches_portable(native_compress)
    except Exception:
        logger.warning(
            "Native SipRound raised while compiling or running, using portable SipRound",
            exc_info=True,
        )
        return _portable_compress, False

    if not verified:
        logger.warning("Native SipRound disagrees with portable SipRound, ignoring it")
        return _portable_compress, False

    logger.debug("Using native SipRound")
    return native_compress, True


_compress, _NATIVE_ACTIVE = _select_compress()


def native_acceleration_active() -> bool:
    """Return True if the compiled SipRound is in use."""
    return _NATIVE_ACTIVE


def sip_round(state: State) -> State:
    """
    Perform one SipRound on ``state`` and return the new state.

    Every addition is masked back to 64 bits as it happens. The exact order
    of operations and rotation amounts define the algorithm; any change
    produces a different hash.
    """
    return _compress(state, 1)


def compress(state: State, n: int) -> State:
    """Apply SipRound ``n`` times. ``n == 0`` returns the state unchanged."""
    if n < 0:
        raise ValueError(f"round count must be non-negative, got {n}")
    if n == 0:
        return state
    return _compress(state, n)


def initialize(key: bytes) -> State:
    """
    Derive the initial state from a 16-byte key.

    The key is split into two little-endian words ``k0`` and ``k1`` which are
    XOR'd against the four SipHash magic constants.

    Raises:
        TypeError: If key is not bytes-like
        InvalidKeyLength: If key is not exactly 16 bytes
    """
    key_bytes = _ensure_bytes(key, "key")
    if len(key_bytes) != 16:
        raise InvalidKeyLength(len(key_bytes))

    k0 = bytes_to_long(key_bytes[:8])
    k1 = bytes_to_long(key_bytes[8:])
    return (
        _INITIAL_V0 ^ k0,
        _INITIAL_V1 ^ k1,
        _INITIAL_V2 ^ k0,
        _INITIAL_V3 ^ k1,
    )


def _absorb_word(state: State, m: int, c: int) -> State:
    v0, v1, v2, v3 = compress((state[0], state[1], state[2], state[3] ^ m), c)
    return v0 ^ m, v1, v2, v3


def absorb_block(state: State, block: bytes, c: int) -> State:
    """
    Fold one 8-byte message block into the state.

    The block is read as a little-endian word ``m``; ``v3`` is XOR'd with it,
    ``c`` rounds run, then ``v0`` is XOR'd with the same ``m``.

    Raises:
        InvalidBlockLength: If block is not exactly 8 bytes
        ValueError: If c is negative
    """
    block_bytes = _ensure_bytes(block, "block")
    if len(block_bytes) != 8:
        raise InvalidBlockLength(len(block_bytes))
    if c < 0:
        raise ValueError(f"round count must be non-negative, got {c}")
    return _absorb_word(state, bytes_to_long(block_bytes), c)


def absorb_last_block(state: State, remainder: bytes, total_length: int, c: int) -> State:
    """
    Absorb the trailing 0-7 bytes of a message.

    The remainder is zero padded to 7 bytes and the message length modulo 256
    is appended as the eighth byte. An empty message still absorbs one block.

    Raises:
        InvalidRemainderLength: If remainder is longer than 7 bytes
    """
    tail = _ensure_bytes(remainder, "remainder")
    if len(tail) > 7:
        raise InvalidRemainderLength(len(tail))
    if total_length < 0:
        raise ValueError(f"total_length must be non-negative, got {total_length}")
    last_block = tail.ljust(7, b"\x00") + bytes([total_length & 0xFF])
    return absorb_block(state, last_block, c)


def finalize(state: State, d: int) -> int:
    """XOR 0xff into ``v2``, run ``d`` rounds and fold the words into the digest."""
    v0, v1, v2, v3 = compress((state[0], state[1], state[2] ^ 0xFF, state[3]), d)
    return v0 ^ v1 ^ v2 ^ v3


__all__ = [
    "State",
    "initialize",
    "sip_round",
    "compress",
    "absorb_block",
    "absorb_last_block",
    "finalize",
    "native_acceleration_active",
]
