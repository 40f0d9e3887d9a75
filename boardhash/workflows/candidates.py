"""
Near-duplicate candidate lookup.

The 16 pHash block columns are indexed. Two 256-bit pHashes within 15 bits
of each other must agree on at least one of the 16 blocks, so an equality
match on any block column finds every such record without scanning the
table. Matches are then ranked by their full pHash distance.
"""

from __future__ import annotations

import logging

from ..config import CANDIDATE_LIMIT, CANDIDATE_MAX_DISTANCE, HASH_HEX_LENGTH
from ..database import HashStore
from ..hashing.distance import hamming_distance
from ..hashing.errors import InvalidHashError


logger = logging.getLogger(__name__)

PREFILTER_LIMIT = 1000


def find_candidates(
    store: HashStore,
    image_id: str,
    max_distance: int = CANDIDATE_MAX_DISTANCE,
    limit: int = CANDIDATE_LIMIT,
    prefilter_limit: int = PREFILTER_LIMIT,
) -> list[tuple[str, int]]:
    """
    Find stored images whose pHash is close to that of ``image_id``.

    Args:
        store: Hash store to search
        image_id: Image to find candidates for
        max_distance: Largest full pHash distance kept. Values above 15 may
            miss records that share no block.
        limit: Maximum number of candidates returned
        prefilter_limit: Maximum rows fetched by the block pre-filter

    Returns:
        List of (image_id, phash_distance) sorted by distance then id.
        Empty when the image has no hash record.
    """
    record = store.get_hash_record(image_id)
    if record is None:
        logger.warning(f"No hash record for {image_id}; no candidates")
        return []

    matches = store.find_block_matches(record, prefilter_limit)
    logger.debug(f"{len(matches)} block matches for {image_id}")

    candidates = []
    for match in matches:
        try:
            distance = hamming_distance(record.phash, match.phash, HASH_HEX_LENGTH)
        except InvalidHashError as e:
            logger.warning(f"Skipping candidate {match.image_id}: {e}")
            continue
        if distance <= max_distance:
            candidates.append((match.image_id, distance))

    candidates.sort(key=lambda item: (item[1], item[0]))
    return candidates[:limit]


__all__ = ['PREFILTER_LIMIT', 'find_candidates']
