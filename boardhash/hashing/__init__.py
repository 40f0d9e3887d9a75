"""
Hashing package for boardhash.

Pure perceptual hashing engine: decoding and sampling, the aHash, dHash
and pHash algorithms (plus the optional structural block hash), bit
packing, pHash block decomposition and Hamming distance.

Public API:
- sample_luminance: Decode bytes into a fixed-size luminance matrix
- average_hash / difference_hash / perceptual_hash: Matrix -> hex hash
- structural_block_hash: Decoded image -> list of per-region hashes
- compute_hash: Bytes -> hash for a selected HashAlgorithm
- compute_hash_record: Bytes -> complete ImageHashRecord
- bits_to_hex / hex_to_binary: Bit packing conventions
- hamming_distance: Bit difference between two hex hashes
- split_phash / join_blocks: pHash block decomposition
"""

from __future__ import annotations

from .errors import HashingError, ImageDecodeError, InvalidHashError
from .sampler import decode_image, describe_image, luminance_matrix, sample_luminance
from .bits import fit_bits, bits_to_hex, hex_to_binary
from .distance import validate_hex, hamming_distance
from .dct import dct2
from .algorithms import (
    HashAlgorithm,
    HashParams,
    average_hash,
    difference_hash,
    perceptual_hash,
    structural_block_hash,
    compute_hash,
)
from .blocks import split_phash, join_blocks
from .analysis import compute_hash_record

# Import dependencies for has_heif_support function
from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


# Public API exports
__all__ = [
    # Errors
    'HashingError',
    'ImageDecodeError',
    'InvalidHashError',
    # Sampling
    'decode_image',
    'describe_image',
    'luminance_matrix',
    'sample_luminance',
    # Bit packing
    'fit_bits',
    'bits_to_hex',
    'hex_to_binary',
    # Distance
    'validate_hex',
    'hamming_distance',
    # Algorithms
    'dct2',
    'HashAlgorithm',
    'HashParams',
    'average_hash',
    'difference_hash',
    'perceptual_hash',
    'structural_block_hash',
    'compute_hash',
    'compute_hash_record',
    # Blocks
    'split_phash',
    'join_blocks',
    # Feature detection
    'has_heif_support',
]
