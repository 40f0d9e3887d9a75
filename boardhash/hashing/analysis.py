"""
Image analysis module for the hashing package.

Turns the bytes of a stored original into a complete ImageHashRecord:
aHash, dHash, pHash and the 16 pHash blocks, computed from one decode.
"""

from __future__ import annotations

from ..config import HASH_BITS
from ..models import ImageHashRecord
from .algorithms import HashAlgorithm, HashParams, hash_decoded
from .blocks import split_phash
from .sampler import decode_image


def compute_hash_record(
    image_id: str,
    data: bytes,
    params: HashParams = HashParams(),
) -> ImageHashRecord:
    """
    Hash image bytes into a record ready to be stored.

    Args:
        image_id: Identifier of the image the record belongs to
        data: Encoded bytes of the original file (never a resized copy)
        params: Sampling parameters

    Returns:
        ImageHashRecord with every hash field populated

    Raises:
        ImageDecodeError: If the bytes cannot be decoded
    """
    img = decode_image(data)

    phash = hash_decoded(img, HashAlgorithm.PERCEPTUAL, params)
    ahash = hash_decoded(img, HashAlgorithm.AVERAGE, params)
    dhash = hash_decoded(img, HashAlgorithm.DIFFERENCE, params)

    return ImageHashRecord(
        image_id=image_id,
        ahash=ahash,
        dhash=dhash,
        phash=phash,
        phash_blocks=split_phash(phash),
    )


def check_storable(params: HashParams) -> HashParams:
    """
    Make sure hashes computed with ``params`` fit the stored record layout.

    Raises:
        ValueError: If ``params.bit_length`` is not HASH_BITS
    """
    if params.bit_length != HASH_BITS:
        raise ValueError(
            f"Stored hashes are {HASH_BITS} bits; cannot persist bit_length={params.bit_length}"
        )
    return params


__all__ = ['compute_hash_record', 'check_storable']
