import ctypes

import pytest

from urlbf.bloom.hashing import INT32_MAX, one_at_a_time, primary_hash, probe_positions, to_int32


def _reference_oat(text: str) -> int:
    # Independent rendition using ctypes int32 wrapping.
    def i32(v):
        return ctypes.c_int32(v).value

    data = text.encode("utf-16-le")
    units = [int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2)]
    h = 0
    for c in units:
        h = i32(h + c)
        h = i32(h + (h << 10))
        h = i32(h ^ (h >> 6))
    h = i32(h + (h << 3))
    h = i32(h ^ (h >> 11))
    h = i32(h + (h << 15))
    return h


@pytest.mark.parametrize("text, expected_u32", [("", 0x00000000), ("a", 0xCA2E9442)])
def test_one_at_a_time_known_vectors(text, expected_u32):
    assert one_at_a_time(text) == to_int32(expected_u32)


@pytest.mark.parametrize(
    "text",
    [
        "https://news.ycombinator.com",
        "The quick brown fox jumps over the lazy dog",
        "https://example.com/ü/ß",
        "x" * 500,
    ],
)
def test_one_at_a_time_matches_reference(text):
    assert one_at_a_time(text) == _reference_oat(text)


def test_one_at_a_time_uses_utf16_code_units():
    # U+1F680 is a surrogate pair, two code units
    rocket = "\U0001F680"
    assert one_at_a_time(rocket) == _reference_oat(rocket)


def test_primary_hash_is_stable_murmur3():
    assert primary_hash("foo") == -156908512
    assert -2**31 <= primary_hash("https://example.com") <= INT32_MAX


def test_to_int32_wraps():
    assert to_int32(INT32_MAX + 1) == -2**31
    assert to_int32(-1) == -1
    assert to_int32(2**32 + 5) == 5


def test_probe_positions_truncated_mod_then_abs():
    # -20 mod 16 truncates to -4, abs gives 4 (floor modulo would give 12)
    assert probe_positions(-20, 0, 1, 16) == [4]
    assert probe_positions(-5, 0, 1, 16) == [5]
    assert probe_positions(3, 5, 3, 16) == [3, 8, 13]


def test_probe_positions_wrap_at_int32():
    positions = probe_positions(INT32_MAX, 1, 2, 8)
    assert positions == [INT32_MAX % 8, 0]
