"""Bloom filter for deduplicating URLs, with a compact byte serialization.

Serialized layout::

    [0..4)   int32 little-endian, hash count (k)
    [4..end) packed bit vector, bit i in byte i // 8 at mask 1 << (i % 8)
"""
from __future__ import annotations

import logging
import struct
from typing import Iterable

from bitarray import bitarray

from urlbf.bloom.bloom_params import BloomParams
from urlbf.bloom.hashing import HashFunction, one_at_a_time, primary_hash, probe_positions
from urlbf.errors import FilterFormatError
from urlbf.types.url_types import UrlKey, normalize_key

logger = logging.getLogger(__name__)

_HEADER = struct.Struct("<i")
HEADER_SIZE = _HEADER.size


class BloomFilter:
    def __init__(
        self,
        m_bits: int,
        k_hash: int,
        *,
        primary: HashFunction = primary_hash,
        secondary: HashFunction = one_at_a_time,
    ) -> None:
        """Create an empty filter with m bits and k probes per item.

        Prefer ``from_capacity`` or ``from_bytes``; this constructor only
        validates the raw parameters.
        """
        if m_bits <= 0 or m_bits % 8 != 0:
            raise ValueError("m_bits must be a positive multiple of 8")
        if k_hash <= 0:
            raise ValueError("k_hash must be positive")
        self._m = m_bits
        self._k = k_hash
        self._primary = primary
        self._secondary = secondary
        self._bits = bitarray(m_bits, endian="little")
        self._bits.setall(0)

    @classmethod
    def from_capacity(
        cls,
        capacity: int,
        *,
        primary: HashFunction = primary_hash,
        secondary: HashFunction = one_at_a_time,
    ) -> "BloomFilter":
        """New filter sized for ``capacity`` items at error rate 1/capacity."""
        params = BloomParams.for_capacity(capacity)
        bf = cls(params.m_bits, params.k_hash, primary=primary, secondary=secondary)
        logger.debug(
            "BloomFilter init: capacity=%d m=%d bits (~%.1f KB) k=%d",
            capacity, params.m_bits, params.m_bits / 8 / 1024, params.k_hash,
        )
        return bf

    @classmethod
    def from_bytes(
        cls,
        data: bytes | bytearray | memoryview,
        *,
        primary: HashFunction = primary_hash,
        secondary: HashFunction = one_at_a_time,
    ) -> "BloomFilter":
        """Rebuild a filter from the output of ``serialize``.

        The bit count is implied by the body length, 8 * (len(data) - 4).
        """
        data = bytes(data)
        if len(data) < HEADER_SIZE:
            raise FilterFormatError(
                f"serialized filter needs at least {HEADER_SIZE} bytes, got {len(data)}"
            )
        (k_hash,) = _HEADER.unpack_from(data, 0)
        body = data[HEADER_SIZE:]
        if not body:
            raise FilterFormatError("serialized filter has an empty bit vector")
        if k_hash < 1:
            raise FilterFormatError(f"serialized hash count must be positive, got {k_hash}")

        bf = cls(len(body) * 8, k_hash, primary=primary, secondary=secondary)
        bits = bitarray(endian="little")
        bits.frombytes(body)
        bf._bits = bits
        logger.debug("BloomFilter restored: m=%d bits k=%d", bf._m, k_hash)
        return bf

    def add(self, item: str | UrlKey) -> None:
        """Set the k bits for item. Bits are never cleared."""
        for pos in self._positions(item):
            self._bits[pos] = 1

    def add_many(self, items: Iterable[str]) -> None:
        for item in items:
            self.add(item)

    def contains(self, item: str | UrlKey) -> bool:
        """False means item was never added; True may be a false positive."""
        for pos in self._positions(item):
            if not self._bits[pos]:
                return False
        return True

    def __contains__(self, item: str) -> bool:
        return self.contains(item)

    @property
    def truthiness(self) -> float:
        """Fraction of set bits, e.g. 1 set bit out of 10 gives 0.1."""
        return self._bits.count(1) / self._m

    def estimate_fpr(self) -> float:
        """Expected false positive rate at the current saturation."""
        return self.truthiness ** self._k

    def serialize(self) -> bytes:
        return _HEADER.pack(self._k) + self._bits.tobytes()

    to_bytes = serialize

    @property
    def bit_count(self) -> int:
        return self._m

    @property
    def hash_count(self) -> int:
        return self._k

    @property
    def size_bytes(self) -> int:
        return HEADER_SIZE + self._m // 8

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BloomFilter):
            return NotImplemented
        return self._k == other._k and self._bits == other._bits

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (
            f"BloomFilter(m={self._m:,} bits, k={self._k}, "
            f"truthiness={self.truthiness:.4f}, est_fpr≈{self.estimate_fpr():.4%})"
        )

    # Internal helpers
    def _positions(self, item: str | UrlKey) -> list[int]:
        key = normalize_key(item)
        return probe_positions(self._primary(key), self._secondary(key), self._k, self._m)
