"""Bloom filter sizing from an expected capacity."""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from urlbf.bloom.hashing import INT32_MAX

# 1 / 2^ln2, base of the optimal-size logarithm.
_SIZE_LOG_BASE = 1.0 / math.pow(2, math.log(2.0))


def best_error_rate(capacity: int) -> float:
    """Target false positive rate 1/n, held in single precision."""
    rate = float(np.float32(1.0 / capacity))
    if rate != 0:
        return rate

    # http://www.cs.princeton.edu/courses/archive/spring02/cs493/lec7.pdf
    return float(np.float32(math.pow(0.6185, INT32_MAX // capacity)))


def best_m(capacity: int, error_rate: float) -> int:
    return int(math.ceil(capacity * math.log(error_rate, _SIZE_LOG_BASE)))


def best_k(capacity: int, error_rate: float) -> int:
    return int(round(math.log(2.0) * best_m(capacity, error_rate) / capacity))


@dataclass(frozen=True)
class BloomParams:
    m_bits: int
    k_hash: int

    @staticmethod
    def for_capacity(capacity: int) -> "BloomParams":
        """Compute m (bits) and k (probes) for error rate 1/capacity.

        m is rounded down to a whole number of bytes so the bit vector
        serializes without padding; k is derived from the unrounded m.
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise TypeError("capacity must be an int")
        if capacity < 1 or capacity > INT32_MAX:
            raise ValueError(f"capacity must be in [1, {INT32_MAX}], got {capacity}")

        error_rate = best_error_rate(capacity)
        m = best_m(capacity, error_rate)
        m_bits = max(8, (m // 8) * 8)
        k_hash = max(1, best_k(capacity, error_rate))
        return BloomParams(m_bits=m_bits, k_hash=k_hash)
