"""
Perceptual hash algorithms.

Each algorithm consumes a grayscale luminance matrix (see sampler.py) and
produces a 256-bit hash packed as 64 lowercase hex characters:

- aHash: threshold every sample against the mean brightness
- dHash: sign of the horizontal gradient between neighbours
- pHash: threshold low-frequency DCT coefficients against their median

The structural block hash is an optional fourth variant that hashes the
edge map of each region of a grid independently. None of the functions
read configuration; every size is an explicit parameter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..config import (
    HASH_BITS,
    AHASH_SIZE,
    DHASH_WIDTH,
    DHASH_HEIGHT,
    PHASH_SIZE,
    PHASH_LOW_SIZE,
    STRUCTURAL_BLOCK_GRID,
    DEFAULT_DCT_METHOD,
)
from .bits import bits_to_hex, fit_bits, matrix_bits
from .dct import dct2
from .dependencies import Image, np
from .sampler import decode_image, luminance_matrix


class HashAlgorithm(str, Enum):
    """Selectable hashing algorithms."""
    AVERAGE = "average"
    DIFFERENCE = "difference"
    PERCEPTUAL = "perceptual"
    STRUCTURAL_BLOCK = "structural_block"


@dataclass(frozen=True)
class HashParams:
    """
    Sampling parameters for every algorithm.

    Attributes:
        ahash_size: aHash samples an N x N grid
        dhash_width: dHash sample width (one more than the bits per row)
        dhash_height: dHash sample height
        phash_size: pHash DCT input size S
        phash_low_size: Low-frequency block size L kept from the DCT
        block_grid: Regions per side for the structural block hash
        dct_method: 'separable' or 'direct'
        bit_length: Bits per packed hash
    """
    ahash_size: int = AHASH_SIZE
    dhash_width: int = DHASH_WIDTH
    dhash_height: int = DHASH_HEIGHT
    phash_size: int = PHASH_SIZE
    phash_low_size: int = PHASH_LOW_SIZE
    block_grid: int = STRUCTURAL_BLOCK_GRID
    dct_method: str = DEFAULT_DCT_METHOD
    bit_length: int = HASH_BITS


def _as_matrix(matrix) -> np.ndarray:
    samples = np.asarray(matrix, dtype=np.float64)
    if samples.ndim != 2 or samples.size == 0:
        raise ValueError(f"Expected a non-empty 2-D matrix, got shape {samples.shape}")
    return samples


def _pack(mask, bit_length: int) -> str:
    return bits_to_hex(fit_bits(matrix_bits(mask), bit_length), bit_length // 4)


def median(values) -> float:
    """Median; the mean of the two middle values for an even count."""
    return float(np.median(np.asarray(values, dtype=np.float64)))


def average_hash(matrix, bit_length: int = HASH_BITS) -> str:
    """
    Compute the average hash (aHash) of a luminance matrix.

    A bit is 1 when the sample is at or above the mean of all samples,
    scanning row-major. The test is evaluated as ``sample * n >= sum`` with
    an exactly rounded sum, so a uniform matrix always yields all ones.

    Args:
        matrix: N x N luminance samples (16 x 16 by default)
        bit_length: Output bits; shorter bit strings are repeated to fit

    Returns:
        Hex string of ``bit_length / 4`` characters
    """
    samples = _as_matrix(matrix)
    total = math.fsum(samples.ravel().tolist())
    return _pack(samples * samples.size >= total, bit_length)


def difference_hash(matrix, bit_length: int = HASH_BITS) -> str:
    """
    Compute the difference hash (dHash) of a luminance matrix.

    For each row, each of the first W columns gives bit 1 when the pixel is
    strictly brighter than its right neighbour.

    Args:
        matrix: H x (W + 1) luminance samples (16 x 17 by default)
        bit_length: Output bits; shorter bit strings are repeated to fit
    """
    samples = _as_matrix(matrix)
    if samples.shape[1] < 2:
        raise ValueError("dHash needs at least two columns")
    return _pack(samples[:, :-1] > samples[:, 1:], bit_length)


def _low_frequency_hash(coefficients: np.ndarray, low_size: int, bit_length: int) -> str:
    if not 1 <= low_size <= coefficients.shape[0]:
        raise ValueError(
            f"Low-frequency size {low_size} must be between 1 and {coefficients.shape[0]}"
        )
    low = coefficients[:low_size, :low_size]
    return _pack(low > median(low), bit_length)


def perceptual_hash(
    matrix,
    low_size: int = PHASH_LOW_SIZE,
    method: str = DEFAULT_DCT_METHOD,
    bit_length: int = HASH_BITS,
) -> str:
    """
    Compute the perceptual hash (pHash) of a luminance matrix.

    Applies a 2-D DCT-II to the S x S matrix, keeps the top-left
    ``low_size`` x ``low_size`` coefficients (DC term included) and emits
    bit 1 where a coefficient strictly exceeds their median.

    Args:
        matrix: S x S luminance samples (32 x 32 by default)
        low_size: Size L of the low-frequency block (16 by default)
        method: DCT implementation, 'separable' or 'direct'
        bit_length: Output bits; shorter bit strings are repeated to fit
    """
    samples = _as_matrix(matrix)
    return _low_frequency_hash(dct2(samples, method), low_size, bit_length)


def edge_magnitude(matrix) -> np.ndarray:
    """
    Gradient magnitude sqrt(gx^2 + gy^2) of each sample.

    gx is the difference to the right neighbour and gy to the neighbour
    below; both are 0 on the last column/row.
    """
    samples = _as_matrix(matrix)
    gx = np.zeros_like(samples)
    gy = np.zeros_like(samples)
    gx[:, :-1] = samples[:, :-1] - samples[:, 1:]
    gy[:-1, :] = samples[:-1, :] - samples[1:, :]
    return np.sqrt(gx * gx + gy * gy)


def structural_block_hash(
    img: Image.Image,
    grid: int = STRUCTURAL_BLOCK_GRID,
    size: int = PHASH_SIZE,
    low_size: int = PHASH_LOW_SIZE,
    method: str = DEFAULT_DCT_METHOD,
    bit_length: int = HASH_BITS,
) -> list[str]:
    """
    Hash each region of a grid x grid split of an image independently.

    Every region is stretched to size x size, reduced to its edge map and
    run through the pHash thresholding. Regions are ordered row-major.

    Args:
        img: Decoded image
        grid: Regions per side (4 -> 16 hashes)
        size: Sample size of each region
        low_size: Low-frequency block size kept from each DCT
        method: DCT implementation
        bit_length: Bits per region hash

    Returns:
        List of ``grid * grid`` hex hashes
    """
    if grid < 1:
        raise ValueError(f"Grid must be positive, got {grid}")

    width, height = img.size
    block_width = width // grid
    block_height = height // grid
    if block_width < 1 or block_height < 1:
        raise ValueError(f"Image {width}x{height} is too small for a {grid}x{grid} grid")

    hashes = []
    for by in range(grid):
        for bx in range(grid):
            box = (
                bx * block_width,
                by * block_height,
                (bx + 1) * block_width,
                (by + 1) * block_height,
            )
            edges = edge_magnitude(luminance_matrix(img, size, size, box=box))
            hashes.append(_low_frequency_hash(dct2(edges, method), low_size, bit_length))

    return hashes


def hash_decoded(
    img: Image.Image,
    algorithm: Union[HashAlgorithm, str],
    params: HashParams = HashParams(),
) -> Union[str, list[str]]:
    """
    Run one algorithm on an already decoded image.

    Returns:
        A hex hash, or a list of hex hashes for the structural block hash
    """
    algorithm = HashAlgorithm(algorithm)

    if algorithm is HashAlgorithm.AVERAGE:
        matrix = luminance_matrix(img, params.ahash_size, params.ahash_size)
        return average_hash(matrix, params.bit_length)

    if algorithm is HashAlgorithm.DIFFERENCE:
        matrix = luminance_matrix(img, params.dhash_width, params.dhash_height)
        return difference_hash(matrix, params.bit_length)

    if algorithm is HashAlgorithm.PERCEPTUAL:
        matrix = luminance_matrix(img, params.phash_size, params.phash_size)
        return perceptual_hash(matrix, params.phash_low_size, params.dct_method, params.bit_length)

    return structural_block_hash(
        img,
        grid=params.block_grid,
        size=params.phash_size,
        low_size=params.phash_low_size,
        method=params.dct_method,
        bit_length=params.bit_length,
    )


def compute_hash(
    algorithm: Union[HashAlgorithm, str],
    data: bytes,
    params: HashParams = HashParams(),
) -> Union[str, list[str]]:
    """
    Decode image bytes and hash them with the selected algorithm.

    Raises:
        ImageDecodeError: If the bytes cannot be decoded
        ValueError: If the algorithm name or parameters are invalid
    """
    algorithm = HashAlgorithm(algorithm)
    return hash_decoded(decode_image(data), algorithm, params)


__all__ = [
    'HashAlgorithm',
    'HashParams',
    'median',
    'average_hash',
    'difference_hash',
    'perceptual_hash',
    'edge_magnitude',
    'structural_block_hash',
    'hash_decoded',
    'compute_hash',
]
