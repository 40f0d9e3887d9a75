"""
Unit tests for similarity scoring.
"""

import pytest
from fractions import Fraction

from boardhash.models import ImageHashRecord
from boardhash.hashing.errors import InvalidHashError
from boardhash.workflows.ingest import ingest_image
from boardhash.workflows.similarity import (
    SimilarityFormula,
    round_half_up,
    legacy_similarity,
    normalized_similarity,
    phash_block_distance,
    score_records,
    compare,
)

from conftest import noise_image


def make_record(image_id, ahash='0' * 64, dhash='0' * 64, phash='0' * 64):
    return ImageHashRecord(
        image_id=image_id,
        ahash=ahash,
        dhash=dhash,
        phash=phash,
        phash_blocks=[phash[i * 4:i * 4 + 4] for i in range(16)],
    )


class TestRounding:
    """Test round_half_up function."""

    @pytest.mark.parametrize("value, expected", [
        (Fraction(1, 2), 1),
        (Fraction(3, 2), 2),
        (Fraction(5, 2), 3),
        (Fraction(49, 10), 5),
        (Fraction(44, 10), 4),
        (0, 0),
    ])
    def test_halves_go_up(self, value, expected):
        assert round_half_up(value) == expected


class TestLegacySimilarity:
    """Test the legacy percentage formula."""

    def test_identical(self):
        assert legacy_similarity(0, 0, 0) == 100

    def test_half_point_rounds_up(self):
        """Test an average of 9.5 rounds to 10."""
        assert legacy_similarity(10, 6, 3) == 90

    def test_single_bit(self):
        """Test an average of 0.5 already costs one point."""
        assert legacy_similarity(0, 0, 1) == 99

    def test_clamped_at_zero(self):
        """Test large distances never go negative."""
        assert legacy_similarity(256, 256, 16) == 0
        assert legacy_similarity(100, 100, 0) == 0


class TestNormalizedSimilarity:
    """Test the normalized percentage formula."""

    def test_bounds(self):
        assert normalized_similarity(0, 0, 0) == 100
        assert normalized_similarity(256, 256, 16) == 0

    def test_half(self):
        assert normalized_similarity(128, 128, 8) == 50


class TestScoreRecords:
    """Test score_records and phash_block_distance functions."""

    def test_identical_records(self):
        """Test identical records score 100 with zero distances."""
        record = make_record('a', ahash='ab' * 32, dhash='cd' * 32, phash='ef' * 32)
        result = score_records(record, record)
        assert (result.ahash_distance, result.dhash_distance, result.phash_distance) == (0, 0, 0)
        assert result.similarity_percent == 100
        assert result.formula == 'legacy'

    def test_block_distance_is_mean(self):
        """Test the pHash distance is the rounded mean over the 16 blocks."""
        a = make_record('a')
        b = make_record('b', phash='ffff' + '0' * 60)
        assert phash_block_distance(a, b) == 1

        c = make_record('c', phash='f' * 64)
        assert phash_block_distance(a, c) == 16

    def test_block_distance_half_up(self):
        """Test a mean of 8 / 16 rounds up to 1."""
        a = make_record('a')
        b = make_record('b', phash='ff' + '0' * 62)
        assert phash_block_distance(a, b) == 1

    def test_distances(self):
        """Test each distance is computed on its own hash."""
        a = make_record('a')
        b = make_record('b', ahash='f' + '0' * 63, dhash='ff' + '0' * 62)
        result = score_records(a, b)
        assert result.ahash_distance == 4
        assert result.dhash_distance == 8
        assert result.phash_distance == 0
        assert result.similarity_percent == legacy_similarity(4, 8, 0)

    def test_normalized_formula(self):
        """Test the formula can be selected by name."""
        a = make_record('a')
        b = make_record('b', ahash='f' * 64, dhash='f' * 64, phash='f' * 64)
        result = score_records(a, b, 'normalized')
        assert result.similarity_percent == 0
        assert result.formula == SimilarityFormula.NORMALIZED.value

    def test_malformed_hash(self):
        """Test a malformed stored hash raises InvalidHashError."""
        a = make_record('a')
        b = make_record('b')
        b.ahash = 'zz' * 32
        with pytest.raises(InvalidHashError):
            score_records(a, b)

    def test_missing_blocks(self):
        """Test a record without 16 blocks raises InvalidHashError."""
        a = make_record('a')
        b = make_record('b')
        b.phash_blocks = []
        with pytest.raises(InvalidHashError):
            phash_block_distance(a, b)


class TestCompare:
    """Test compare against the store."""

    def test_identical_images(self, store, upload_root, write_upload):
        """Test byte-identical uploads compare at 100%."""
        img = noise_image(21)
        a, _ = ingest_image(store, write_upload('a.png', img), str(upload_root))
        b, _ = ingest_image(store, write_upload('b.png', img), str(upload_root))

        result = compare(store, a.image_id, b.image_id)
        assert result.ahash_distance == 0
        assert result.dhash_distance == 0
        assert result.phash_distance == 0
        assert result.similarity_percent == 100

    def test_different_images(self, store, upload_root, write_upload):
        """Test unrelated uploads score below 100%."""
        a, _ = ingest_image(store, write_upload('a.png', noise_image(1)), str(upload_root))
        b, _ = ingest_image(store, write_upload('b.png', noise_image(2)), str(upload_root))

        result = compare(store, a.image_id, b.image_id)
        assert result.similarity_percent < 100

    def test_missing_record(self, store, upload_root, write_upload):
        """Test a missing hash record yields None."""
        a, _ = ingest_image(store, write_upload('a.png', noise_image(1)), str(upload_root))
        assert compare(store, a.image_id, '00000-00000-00000-00000-00000') is None
