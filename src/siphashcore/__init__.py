"""
SipHash digest state machine with an optional compiled SipRound.
"""

from .digest import SipHashDigest, keyed_hash, siphash, siphash13, siphash24
from .errors import (
    InvalidBlockLength,
    InvalidKeyLength,
    InvalidRemainderLength,
    SipHashError,
)
from .state import (
    absorb_block,
    absorb_last_block,
    compress,
    finalize,
    initialize,
    native_acceleration_active,
    sip_round,
)
from .util import rotate_left

__all__ = [
    "SipHashDigest",
    "keyed_hash",
    "siphash",
    "siphash13",
    "siphash24",
    "SipHashError",
    "InvalidKeyLength",
    "InvalidBlockLength",
    "InvalidRemainderLength",
    "initialize",
    "sip_round",
    "compress",
    "absorb_block",
    "absorb_last_block",
    "finalize",
    "native_acceleration_active",
    "rotate_left",
]
