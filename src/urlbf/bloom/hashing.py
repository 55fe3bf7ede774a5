"""Hash functions and double-hash probe positions for the URL Bloom filter.

The primary channel is MurmurHash3 (x86, 32-bit, seed 0) over UTF-8 bytes. It
is fixed across processes and interpreter versions, so persisted filters stay
valid after a restart. The secondary channel is Bob Jenkins' One-at-a-Time
hash over UTF-16 code units, computed in signed 32-bit arithmetic.
"""
from __future__ import annotations

import struct
from typing import Callable

import mmh3

HashFunction = Callable[[str], int]

INT32_MAX = 2**31 - 1
_UINT32_MASK = 0xFFFFFFFF
_SIGN_BIT = 0x80000000


def to_int32(value: int) -> int:
    """Wrap a Python int to signed 32-bit two's complement."""
    value &= _UINT32_MASK
    if value & _SIGN_BIT:
        return value - (1 << 32)
    return value


def primary_hash(item: str) -> int:
    return mmh3.hash(item, seed=0, signed=True)


def _code_units(item: str) -> tuple[int, ...]:
    data = item.encode("utf-16-le", "surrogatepass")
    return struct.unpack(f"<{len(data) // 2}H", data)


def one_at_a_time(item: str) -> int:
    """Jenkins One-at-a-Time, see http://burtleburtle.net/bob/hash/doobs.html.

    Python's ``>>`` on a negative int is an arithmetic shift, which matches
    the signed 32-bit behaviour the filter format was defined with.
    """
    h = 0
    for c in _code_units(item):
        h = to_int32(h + c)
        h = to_int32(h + (h << 10))
        h ^= h >> 6

    h = to_int32(h + (h << 3))
    h ^= h >> 11
    h = to_int32(h + (h << 15))
    return h


def _truncated_mod(value: int, modulus: int) -> int:
    # Remainder takes the sign of the dividend.
    remainder = abs(value) % modulus
    return -remainder if value < 0 else remainder


def probe_positions(primary: int, secondary: int, k: int, m: int) -> list[int]:
    """Derive k bit positions with Dillinger-Manolios double hashing."""
    positions = []
    for i in range(k):
        combined = to_int32(primary + to_int32(i * secondary))
        positions.append(abs(_truncated_mod(combined, m)))
    return positions
