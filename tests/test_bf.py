# -*- coding: utf-8 -*-
"""
Tests for the BloomFilter core module.
"""

import random
import string

import pytest

from urlbf.bloom.bloom_filter import BloomFilter


def random_url(rng: random.Random, n: int = 10) -> str:
    """Random https URL with an n-character a-z path."""
    return "https://example.com/" + "".join(rng.choices(string.ascii_lowercase, k=n))


def test_bloom_filter_fpr():
    """Observed FPR stays well under 5% at the configured capacity."""
    rng = random.Random(1234)
    capacity = 1000
    bf = BloomFilter.from_capacity(capacity)

    dataset = set()
    while len(dataset) < capacity:
        dataset.add(random_url(rng))
    for item in dataset:
        bf.add(item)

    test_data = set()
    while len(test_data) < capacity * 10:
        candidate = random_url(rng)
        if candidate not in dataset:
            test_data.add(candidate)
    false_positive = sum(bf.contains(item) for item in test_data)

    empirical_fpr = false_positive / len(test_data)
    print(f"n={capacity} m={bf.bit_count} k={bf.hash_count} empirical_fpr={empirical_fpr:.4%}")
    assert empirical_fpr < 0.05, "FPR too high (>5%)"


def test_no_false_negatives():
    rng = random.Random(7)
    bf = BloomFilter.from_capacity(500)
    added = []
    for _ in range(800):  # past capacity on purpose
        url = random_url(rng)
        bf.add(url)
        added.append(url)
        assert url in bf
    assert all(bf.contains(url) for url in added)


def test_small_capacity_example():
    bf = BloomFilter.from_capacity(8)
    assert bf.bit_count == 32
    assert bf.hash_count == 3

    for item in ("a", "b", "c"):
        bf.add(item)
    assert bf.contains("a")
    assert bf.contains("b")
    assert bf.contains("c")


def test_empty_filter_contains_nothing():
    bf = BloomFilter.from_capacity(100)
    assert not bf.contains("https://example.com/")
    assert bf.truthiness == 0.0
    assert bf.estimate_fpr() == 0.0


def test_add_is_idempotent():
    bf = BloomFilter.from_capacity(100)
    bf.add("https://example.com/a")
    once = bf.serialize()
    bf.add("https://example.com/a")
    assert bf.serialize() == once


def test_truthiness_is_monotonic():
    rng = random.Random(99)
    bf = BloomFilter.from_capacity(200)
    last = bf.truthiness
    for _ in range(400):
        bf.add(random_url(rng))
        now = bf.truthiness
        assert last <= now <= 1.0
        last = now
    assert last > 0.0


def test_same_capacity_same_state():
    urls = [f"https://example.com/page/{i}" for i in range(300)]
    a = BloomFilter.from_capacity(1000)
    b = BloomFilter.from_capacity(1000)
    a.add_many(urls)
    b.add_many(urls)
    assert a == b
    assert a.serialize() == b.serialize()


def test_capacity_validation():
    with pytest.raises(ValueError):
        BloomFilter.from_capacity(0)
    with pytest.raises(ValueError):
        BloomFilter.from_capacity(-5)

    bf = BloomFilter.from_capacity(10000)
    assert bf.bit_count % 8 == 0
    assert bf.hash_count >= 1


def test_raw_constructor_validation():
    with pytest.raises(ValueError):
        BloomFilter(12, 3)
    with pytest.raises(ValueError):
        BloomFilter(0, 3)
    with pytest.raises(ValueError):
        BloomFilter(64, 0)


def test_non_string_item_rejected():
    bf = BloomFilter.from_capacity(10)
    with pytest.raises(TypeError):
        bf.add(b"https://example.com")


def test_custom_secondary_hash_is_used():
    calls = []

    def secondary(item: str) -> int:
        calls.append(item)
        return 1

    bf = BloomFilter.from_capacity(100, secondary=secondary)
    bf.add("x")
    assert bf.contains("x")
    assert calls == ["x", "x"]
