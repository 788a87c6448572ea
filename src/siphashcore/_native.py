"""
Compiled SipRound loop built with numba.

Importing this module raises ImportError when numba or numpy is missing;
``siphashcore.state`` treats that as "no accelerator" and keeps the portable
round.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from numba import njit

# Rotation amounts must stay uint64 so numba never promotes to float64.
_R13 = np.uint64(13)
_R16 = np.uint64(16)
_R17 = np.uint64(17)
_R21 = np.uint64(21)
_R32 = np.uint64(32)
_R64 = np.uint64(64)


@njit(nogil=True)
def _rotl(x, b):
    return (x << b) | (x >> (_R64 - b))


@njit(nogil=True)
def _sip_round(v0, v1, v2, v3):
    v0 = v0 + v1
    v2 = v2 + v3
    v1 = _rotl(v1, _R13)
    v3 = _rotl(v3, _R16)

    v1 = v1 ^ v0
    v3 = v3 ^ v2
    v0 = _rotl(v0, _R32)

    v2 = v2 + v1
    v0 = v0 + v3
    v1 = _rotl(v1, _R17)
    v3 = _rotl(v3, _R21)

    v1 = v1 ^ v2
    v3 = v3 ^ v0
    v2 = _rotl(v2, _R32)

    return v0, v1, v2, v3


@njit(nogil=True)
def _compress(v0, v1, v2, v3, n):
    for _ in range(n):
        v0, v1, v2, v3 = _sip_round(v0, v1, v2, v3)
    return v0, v1, v2, v3


def compress(state: Tuple[int, int, int, int], n: int) -> Tuple[int, int, int, int]:
    """Run ``n`` SipRounds without leaving compiled code between rounds."""
    v0, v1, v2, v3 = _compress(
        np.uint64(state[0]),
        np.uint64(state[1]),
        np.uint64(state[2]),
        np.uint64(state[3]),
        n,
    )
    return int(v0), int(v1), int(v2), int(v3)


__all__ = ["compress"]
