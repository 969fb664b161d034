import pytest

from labkernel.strings import compare_strings, copy_limited


def test_equal_strings_compare_zero():
    assert compare_strings("help", "help") == 0


def test_ordering():
    assert compare_strings("abc", "abd") == -1
    assert compare_strings("abd", "abc") == 1


def test_prefix_is_smaller():
    assert compare_strings("ab", "abc") == -1
    assert compare_strings("abc", "ab") == 1


def test_empty_strings():
    assert compare_strings("", "") == 0
    assert compare_strings("", "a") == -1


def test_comparison_stops_at_nul():
    assert compare_strings("cmd\0junk", "cmd") == 0
    assert compare_strings("cmd\0", "cmd\0other") == 0


def test_comparison_is_antisymmetric():
    pairs = [("testdP1", "testdP2"), ("help", "cmd"), ("a", "")]
    for a, b in pairs:
        assert compare_strings(a, b) == -compare_strings(b, a)


def test_copy_within_limit():
    assert copy_limited("hello", 3) == "hello"[:3]


def test_copy_limit_larger_than_string():
    assert copy_limited("hello", 20) == "hello"


def test_copy_stops_at_nul():
    assert copy_limited("testMalloc1\0", 20) == "testMalloc1"


def test_copy_zero_limit_still_copies_one_character():
    assert copy_limited("hello", 0) == "h"


def test_copy_empty_string():
    assert copy_limited("", 5) == ""


def test_copy_negative_limit_rejected():
    with pytest.raises(ValueError):
        copy_limited("hello", -1)


@pytest.mark.parametrize("text", ["cmd", "help [cmd]", "maxMallocSizeNow"])
def test_copy_round_trip(text):
    copied = copy_limited(text, len(text))
    assert compare_strings(copied, text) == 0
    assert len(copied) == len(text)