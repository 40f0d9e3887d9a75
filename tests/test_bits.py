"""
Unit tests for bit packing and pHash block decomposition.
"""

import pytest
from boardhash.hashing import distance
from boardhash.hashing.bits import HEX_RE, fit_bits, bits_to_hex, hex_to_binary
from boardhash.hashing.blocks import split_phash, join_blocks
from boardhash.hashing.distance import validate_hex
from boardhash.hashing.errors import InvalidHashError


class TestFitBits:
    """Test fit_bits function."""

    def test_repeats_short_input(self):
        """Test short bit strings are repeated end-to-end."""
        assert fit_bits('101', 8) == '10110110'

    def test_truncates_long_input(self):
        """Test long bit strings are cut to length."""
        assert fit_bits('1' * 300, 256) == '1' * 256

    def test_exact_length_unchanged(self):
        """Test an exact-length input is returned as is."""
        bits = '01' * 128
        assert fit_bits(bits, 256) == bits

    def test_empty_input_rejected(self):
        """Test an empty bit string cannot be extended."""
        with pytest.raises(ValueError):
            fit_bits('', 256)


class TestBitsToHex:
    """Test bits_to_hex function."""

    def test_full_width(self):
        """Test a 256-bit string packs to 64 hex characters."""
        assert bits_to_hex('1' * 256) == 'f' * 64

    def test_nibble_order(self):
        """Test the first bit is the most significant bit of the first digit."""
        assert bits_to_hex('1000' + '0' * 252) == '8' + '0' * 63

    def test_right_pads_partial_nibble(self):
        """Test an incomplete trailing nibble is padded with zeros on the right."""
        assert bits_to_hex('11', 2) == 'c0'

    def test_right_pads_to_length(self):
        """Test the hex string is padded with zeros on the right."""
        assert bits_to_hex('1010', 4) == 'a000'

    def test_lowercase(self):
        """Test output uses lowercase digits."""
        assert bits_to_hex('1011', 1) == 'b'

    def test_rejects_non_binary(self):
        """Test characters other than 0 and 1 are rejected."""
        with pytest.raises(ValueError):
            bits_to_hex('102')


class TestHexToBinary:
    """Test hex_to_binary function."""

    def test_left_pads(self):
        """Test leading zeros are restored on the left."""
        assert hex_to_binary('0f', 8) == '00001111'

    def test_full_width_round_trip(self):
        """Test a full-width hash decodes to the bits it was packed from."""
        bits = ('0001' * 32) + ('1110' * 32)
        assert hex_to_binary(bits_to_hex(bits)) == bits

    def test_padding_asymmetry(self):
        """Test short inputs expose the right-pad / left-pad difference."""
        packed = bits_to_hex('1', 2)
        assert packed == '80'
        assert hex_to_binary(packed, 8) == '10000000'
        assert hex_to_binary('1', 8) == '00000001'

    def test_rejects_invalid_hex(self):
        """Test malformed hex raises InvalidHashError."""
        with pytest.raises(InvalidHashError):
            hex_to_binary('xyz')

    def test_uses_shared_hex_pattern(self):
        """Test bit decoding and distance validation accept the same digits."""
        assert distance.HEX_RE is HEX_RE
        assert hex_to_binary('AbCd', 16) == '1010101111001101'
        assert validate_hex('AbCd') == 'AbCd'


class TestPhashBlocks:
    """Test split_phash and join_blocks functions."""

    def test_split_into_sixteen(self):
        """Test a 64-character pHash splits into 16 blocks of 4."""
        phash = ''.join(f"{i:04x}" for i in range(16))
        blocks = split_phash(phash)
        assert len(blocks) == 16
        assert all(len(b) == 4 for b in blocks)
        assert blocks[0] == '0000'
        assert blocks[15] == '000f'

    def test_lossless(self):
        """Test concatenating the blocks reproduces the pHash."""
        phash = '0123456789abcdef' * 4
        assert join_blocks(split_phash(phash)) == phash

    def test_block_positions(self):
        """Test block i is the slice [4i, 4i + 4)."""
        phash = '0123456789abcdef' * 4
        for i, block in enumerate(split_phash(phash)):
            assert block == phash[i * 4:i * 4 + 4]

    def test_bad_length(self):
        """Test a hash that does not split evenly is rejected."""
        with pytest.raises(InvalidHashError):
            split_phash('abc')
