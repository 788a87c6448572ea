from __future__ import annotations


class SipHashError(ValueError):
    """Base class for malformed input shapes handed to the SipHash core."""


class InvalidKeyLength(SipHashError):
    def __init__(self, length: int):
        super().__init__(f"SipHash key must be exactly 16 bytes, got {length}")
        self.length = length


class InvalidBlockLength(SipHashError):
    def __init__(self, length: int):
        super().__init__(f"SipHash block must be exactly 8 bytes, got {length}")
        self.length = length


class InvalidRemainderLength(SipHashError):
    def __init__(self, length: int):
        super().__init__(f"SipHash last block remainder must be at most 7 bytes, got {length}")
        self.length = length


__all__ = [
    "SipHashError",
    "InvalidKeyLength",
    "InvalidBlockLength",
    "InvalidRemainderLength",
]
