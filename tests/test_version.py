"""
Tests for version parsing and comparison.
"""

import itertools

import pytest

from docker_prebuilt.core.domain.version import (
    Ordering,
    compare,
    is_at_least,
    pad,
    parse_version,
)
from docker_prebuilt.core.errors import InstallError, MalformedVersion


class TestParseVersion:
    def test_dotted(self):
        assert parse_version("1.10.0") == (1, 10, 0)

    def test_single_segment(self):
        assert parse_version("3") == (3,)

    def test_surrounding_whitespace(self):
        assert parse_version(" 2.34.1\n") == (2, 34, 1)

    @pytest.mark.parametrize("bad", ["", "1.x", "1..2", "v1.2", "1.2-rc1", "-1.0"])
    def test_malformed(self, bad):
        with pytest.raises(MalformedVersion):
            parse_version(bad)

    def test_malformed_is_install_error(self):
        with pytest.raises(InstallError):
            parse_version("abc")


class TestPad:
    def test_extends(self):
        assert pad((3, 10), 3) == (3, 10, 0)

    def test_never_truncates(self):
        assert pad((1, 2, 3, 4), 2) == (1, 2, 3, 4)


class TestCompare:
    def test_unequal_lengths_equal(self):
        assert compare("3.10", "3.10.0") == Ordering.EQUAL
        assert compare("3.10.0", "3.10") == Ordering.EQUAL

    def test_numeric_not_lexical(self):
        assert compare("3.10", "3.9") == Ordering.GREATER
        assert compare("1.9.1", "1.10.0") == Ordering.LESS

    def test_kernel_below_minimum(self):
        assert compare("3.8.0", "3.10") == Ordering.LESS

    def test_padding_matches_explicit_zeros(self):
        pairs = [("1", "1.0.0"), ("2.1", "2.0.9"), ("0.0", "0"), ("4.9", "4.10.1")]
        for a, b in pairs:
            width = max(a.count("."), b.count(".")) + 1
            pa = ".".join(map(str, pad(parse_version(a), width)))
            pb = ".".join(map(str, pad(parse_version(b), width)))
            assert compare(a, b) == compare(pa, pb)

    def test_antisymmetric_and_transitive(self):
        versions = ["0", "0.1", "1", "1.0.1", "1.2", "1.10", "2", "2.0.0.1"]
        for a, b in itertools.product(versions, repeat=2):
            assert compare(a, b) == Ordering(-compare(b, a))
        for a, b, c in itertools.product(versions, repeat=3):
            if compare(a, b) <= 0 and compare(b, c) <= 0:
                assert compare(a, c) <= 0

    def test_is_at_least(self):
        assert is_at_least("1.7", "1.7.0")
        assert is_at_least("2.34.1", "1.7")
        assert not is_at_least("1.6.9", "1.7")
