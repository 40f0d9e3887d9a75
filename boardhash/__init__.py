"""
boardhash
=========
Perceptual image hashing and similarity scoring for image board moderation.

Features:
- 256-bit aHash, dHash and pHash over stretched grayscale samples
- pHash persisted as 16 indexed blocks for candidate lookup
- Moderator-facing similarity percentage between two images
- Single and batch rehash of stored originals
- SQLite hash store
- CLI for automation
"""

__version__ = "1.0.0"

from .models import ImageRecord, ImageHashRecord, ComparisonResult, RehashRun
from .hashing import (
    HashAlgorithm,
    HashParams,
    average_hash,
    difference_hash,
    perceptual_hash,
    structural_block_hash,
    compute_hash,
    compute_hash_record,
    hamming_distance,
    split_phash,
)
from .database import HashStore, get_store
from .workflows import (
    SimilarityFormula,
    compare,
    RehashMode,
    rehash,
    ingest_image,
    find_candidates,
)

__all__ = [
    "ImageRecord",
    "ImageHashRecord",
    "ComparisonResult",
    "RehashRun",
    "HashAlgorithm",
    "HashParams",
    "average_hash",
    "difference_hash",
    "perceptual_hash",
    "structural_block_hash",
    "compute_hash",
    "compute_hash_record",
    "hamming_distance",
    "split_phash",
    "HashStore",
    "get_store",
    "SimilarityFormula",
    "compare",
    "RehashMode",
    "rehash",
    "ingest_image",
    "find_candidates",
]
