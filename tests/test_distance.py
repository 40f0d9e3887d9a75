"""
Unit tests for Hamming distance.
"""

import random

import pytest
from boardhash.hashing.distance import hamming_distance, validate_hex
from boardhash.hashing.errors import InvalidHashError


FULL_A = '0123456789abcdef' * 4
FULL_B = 'fedcba9876543210' * 4


class TestHammingDistance:
    """Test hamming_distance function."""

    def test_known_distance(self):
        """Test distance of a small known pair."""
        assert hamming_distance('ff00', 'f0f0') == 8

    def test_reflexive(self):
        """Test a hash is at distance 0 from itself."""
        assert hamming_distance(FULL_A, FULL_A) == 0
        assert hamming_distance('beef', 'beef') == 0

    def test_symmetric(self):
        """Test distance does not depend on argument order."""
        assert hamming_distance(FULL_A, FULL_B) == hamming_distance(FULL_B, FULL_A)

    def test_complement(self):
        """Test complementary hashes differ in every bit."""
        assert hamming_distance('0' * 64, 'f' * 64) == 256
        assert hamming_distance('0000', 'ffff') == 16

    @pytest.mark.parametrize("hex_length", [4, 64])
    def test_triangle_inequality(self, hex_length):
        """Test d(a, c) <= d(a, b) + d(b, c) over random hashes."""
        rng = random.Random(hex_length)
        for _ in range(200):
            a, b, c = (''.join(rng.choice('0123456789abcdef') for _ in range(hex_length))
                       for _ in range(3))
            assert hamming_distance(a, c) <= hamming_distance(a, b) + hamming_distance(b, c)

    def test_left_pads_shorter(self):
        """Test the shorter hash is left-padded with zero bytes."""
        assert hamming_distance('01', '0001') == 0
        assert hamming_distance('ff', '00ff') == 0
        assert hamming_distance('ff', 'ffff') == 8

    def test_case_insensitive(self):
        """Test uppercase hex decodes like lowercase."""
        assert hamming_distance('ABCD', 'abcd') == 0

    def test_expected_length(self):
        """Test expected_length is enforced on both hashes."""
        assert hamming_distance(FULL_A, FULL_B, 64) == hamming_distance(FULL_A, FULL_B)
        with pytest.raises(InvalidHashError):
            hamming_distance(FULL_A, 'ffff', 64)

    @pytest.mark.parametrize("bad", ['', 'xyz0', 'abc', None, 1234])
    def test_rejects_malformed(self, bad):
        """Test malformed hashes raise InvalidHashError."""
        with pytest.raises(InvalidHashError):
            hamming_distance(bad, 'ffff')

    def test_invalid_hash_is_value_error(self):
        """Test InvalidHashError can be caught as ValueError."""
        with pytest.raises(ValueError):
            hamming_distance('zz', 'ff')


class TestValidateHex:
    """Test validate_hex function."""

    def test_returns_value(self):
        """Test a valid hash is returned unchanged."""
        assert validate_hex('a1b2') == 'a1b2'

    def test_odd_length(self):
        """Test an odd number of digits is rejected."""
        with pytest.raises(InvalidHashError):
            validate_hex('a1b')
