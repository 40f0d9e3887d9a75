"""
Workflows built on the hashing engine and the hash store.

- compare: Similarity percentage between two stored images
- rehash: Recompute stored hashes (single image or batch)
- ingest_image: Register an upload with its initial hashes
- find_candidates: Block-indexed near-duplicate lookup
"""

from __future__ import annotations

from .similarity import (
    SimilarityFormula,
    legacy_similarity,
    normalized_similarity,
    score_records,
    compare,
)
from .rehash import RehashMode, rehash
from .ingest import generate_image_id, calculate_digests, ingest_image
from .candidates import find_candidates


__all__ = [
    'SimilarityFormula',
    'legacy_similarity',
    'normalized_similarity',
    'score_records',
    'compare',
    'RehashMode',
    'rehash',
    'generate_image_id',
    'calculate_digests',
    'ingest_image',
    'find_candidates',
]
