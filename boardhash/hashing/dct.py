"""
Two-dimensional DCT-II used by the perceptual hashes.

Coefficient (u, v) of an N x N matrix is

    0.25 * cu * cv * sum_ij pixel[i][j] * cos((2i+1)u*pi/2N) * cos((2j+1)v*pi/2N)

with cu = 1/sqrt(2) when u == 0, else 1 (same for cv). The 0.25 factor is
only orthonormal for N = 8; hashes threshold against a median, so the
scale does not affect the output bits.
"""

from __future__ import annotations

import math

from .dependencies import np

DCT_METHODS = ('separable', 'direct')


def cosine_basis(n: int) -> np.ndarray:
    """Return the N x N matrix C[u, i] = cos((2i+1) * u * pi / 2N)."""
    u = np.arange(n).reshape(-1, 1)
    i = np.arange(n).reshape(1, -1)
    return np.cos((2 * i + 1) * u * math.pi / (2 * n))


def _scale(n: int) -> np.ndarray:
    c = np.ones(n)
    c[0] = 1 / math.sqrt(2)
    return 0.25 * np.outer(c, c)


def dct2_separable(matrix: np.ndarray) -> np.ndarray:
    """DCT-II as two 1-D passes (C @ M @ C.T), O(N^3)."""
    n = matrix.shape[0]
    basis = cosine_basis(n)
    return _scale(n) * (basis @ matrix @ basis.T)


def dct2_direct(matrix: np.ndarray) -> np.ndarray:
    """DCT-II by direct summation over every input sample, O(N^4)."""
    n = matrix.shape[0]
    basis = cosine_basis(n)
    out = np.empty((n, n), dtype=np.float64)
    for u in range(n):
        for v in range(n):
            out[u, v] = np.sum(matrix * np.outer(basis[u], basis[v]))
    return _scale(n) * out


def dct2(matrix, method: str = 'separable') -> np.ndarray:
    """
    Apply a 2-D DCT-II to a square matrix.

    Args:
        matrix: N x N array-like of samples
        method: 'separable' (default) or 'direct'

    Returns:
        N x N float64 array of frequency coefficients
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"DCT input must be a square matrix, got shape {matrix.shape}")

    if method == 'separable':
        return dct2_separable(matrix)
    if method == 'direct':
        return dct2_direct(matrix)
    raise ValueError(f"Unknown DCT method: {method!r} (expected one of {DCT_METHODS})")


__all__ = ['DCT_METHODS', 'cosine_basis', 'dct2', 'dct2_separable', 'dct2_direct']
