"""
Moderator-facing similarity scoring.

Combines the Hamming distances of two stored hash records into a single
percentage shown next to the images. The score informs a human
moderator; nothing here accepts or rejects an image.

Two formulas are available:

- LEGACY (default): avg = (ahash + phash + dhash) / 2, then
  max(0, 100 - round(avg / 100 * 100)). The constants do not follow from
  the hash widths (256 bits whole, 16 bits per block); the formula is kept
  so scores match what moderators have always seen.
- NORMALIZED: 100 * (1 - mean(ahash/256, dhash/256, phash/16)).

Rounding is half-up on exact rational values (round(0.5) == 1).
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from fractions import Fraction
from typing import Optional, Union

from ..config import HASH_BITS, HASH_HEX_LENGTH, PHASH_BLOCK_COUNT, PHASH_BLOCK_LENGTH, PHASH_BLOCK_BITS
from ..database import HashStore
from ..hashing.distance import hamming_distance
from ..hashing.errors import InvalidHashError
from ..models import ComparisonResult, ImageHashRecord


logger = logging.getLogger(__name__)

LEGACY_MAX_DISTANCE = 100


class SimilarityFormula(str, Enum):
    """How distances are folded into a percentage."""
    LEGACY = "legacy"
    NORMALIZED = "normalized"


def round_half_up(value) -> int:
    """
    Round a non-negative number to the nearest integer, halves going up.

    Examples:
        >>> round_half_up(Fraction(1, 2))
        1
        >>> round_half_up(Fraction(5, 2))
        3
    """
    return math.floor(Fraction(value) + Fraction(1, 2))


def legacy_similarity(ahash_distance: int, dhash_distance: int, phash_distance: int) -> int:
    """
    Similarity percentage as the moderation panel has always computed it.

    Examples:
        >>> legacy_similarity(0, 0, 0)
        100
        >>> legacy_similarity(10, 6, 3)
        90
    """
    avg = Fraction(ahash_distance + phash_distance + dhash_distance, 2)
    return max(0, 100 - round_half_up(avg / LEGACY_MAX_DISTANCE * 100))


def normalized_similarity(ahash_distance: int, dhash_distance: int, phash_distance: int) -> int:
    """
    Similarity percentage normalized by the bit width of each distance.

    Examples:
        >>> normalized_similarity(0, 0, 0)
        100
        >>> normalized_similarity(256, 256, 16)
        0
    """
    ratio = (
        Fraction(ahash_distance, HASH_BITS)
        + Fraction(dhash_distance, HASH_BITS)
        + Fraction(phash_distance, PHASH_BLOCK_BITS)
    ) / 3
    return max(0, round_half_up(100 * (1 - ratio)))


def phash_block_distance(record_a: ImageHashRecord, record_b: ImageHashRecord) -> int:
    """
    Mean Hamming distance over the 16 pHash block pairs, rounded half-up.

    Raises:
        InvalidHashError: If either record does not hold 16 valid blocks
    """
    for record in (record_a, record_b):
        if len(record.phash_blocks) != PHASH_BLOCK_COUNT:
            raise InvalidHashError(
                f"Record {record.image_id} has {len(record.phash_blocks)} pHash blocks, "
                f"expected {PHASH_BLOCK_COUNT}"
            )

    total = sum(
        hamming_distance(block_a, block_b, PHASH_BLOCK_LENGTH)
        for block_a, block_b in zip(record_a.phash_blocks, record_b.phash_blocks)
    )
    return round_half_up(Fraction(total, PHASH_BLOCK_COUNT))


def score_records(
    record_a: ImageHashRecord,
    record_b: ImageHashRecord,
    formula: Union[SimilarityFormula, str] = SimilarityFormula.LEGACY,
) -> ComparisonResult:
    """
    Compare two hash records.

    Args:
        record_a: First image's hashes
        record_b: Second image's hashes
        formula: Percentage formula to apply

    Returns:
        ComparisonResult with the three distances and the percentage

    Raises:
        InvalidHashError: If a stored hash is malformed
    """
    formula = SimilarityFormula(formula)

    ahash_distance = hamming_distance(record_a.ahash, record_b.ahash, HASH_HEX_LENGTH)
    dhash_distance = hamming_distance(record_a.dhash, record_b.dhash, HASH_HEX_LENGTH)
    phash_distance = phash_block_distance(record_a, record_b)

    if formula is SimilarityFormula.LEGACY:
        percent = legacy_similarity(ahash_distance, dhash_distance, phash_distance)
    else:
        percent = normalized_similarity(ahash_distance, dhash_distance, phash_distance)

    return ComparisonResult(
        image_id_a=record_a.image_id,
        image_id_b=record_b.image_id,
        ahash_distance=ahash_distance,
        dhash_distance=dhash_distance,
        phash_distance=phash_distance,
        similarity_percent=percent,
        formula=formula.value,
    )


def compare(
    store: HashStore,
    image_id_a: str,
    image_id_b: str,
    formula: Union[SimilarityFormula, str] = SimilarityFormula.LEGACY,
) -> Optional[ComparisonResult]:
    """
    Load two stored hash records and score them.

    Returns:
        ComparisonResult, or None if either image has no hash record

    Raises:
        InvalidHashError: If a stored hash is malformed
    """
    record_a = store.get_hash_record(image_id_a)
    record_b = store.get_hash_record(image_id_b)

    missing = [image_id for image_id, record in ((image_id_a, record_a), (image_id_b, record_b))
               if record is None]
    if missing:
        logger.warning(f"No hash record for {', '.join(missing)}; comparison skipped")
        return None

    result = score_records(record_a, record_b, formula)
    logger.debug(
        f"Compared {image_id_a} / {image_id_b}: ahash={result.ahash_distance} "
        f"dhash={result.dhash_distance} phash={result.phash_distance} "
        f"similarity={result.similarity_percent}% ({result.formula})"
    )
    return result


__all__ = [
    'LEGACY_MAX_DISTANCE',
    'SimilarityFormula',
    'round_half_up',
    'legacy_similarity',
    'normalized_similarity',
    'phash_block_distance',
    'score_records',
    'compare',
]
