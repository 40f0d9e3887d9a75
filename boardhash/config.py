"""
Configuration constants for boardhash.

This module contains the default settings including:
- Resize dimensions for each hashing algorithm
- Hash bit widths and the pHash block layout
- Rehash paging and storage locations
"""

import os

# Every hash is packed to exactly this many bits (64 hex characters)
HASH_BITS = 256
HASH_HEX_LENGTH = HASH_BITS // 4

# aHash samples an N x N grid (16 x 16 = 256 samples)
AHASH_SIZE = 16

# dHash samples (W + 1) x H so each row yields W gradient bits
DHASH_WIDTH = 17
DHASH_HEIGHT = 16

# pHash runs the DCT on S x S and keeps the top-left L x L coefficients
PHASH_SIZE = 32
PHASH_LOW_SIZE = 16

# pHash is persisted as 16 slices of 4 hex characters (16 bits each)
PHASH_BLOCK_COUNT = 16
PHASH_BLOCK_LENGTH = HASH_HEX_LENGTH // PHASH_BLOCK_COUNT
PHASH_BLOCK_BITS = PHASH_BLOCK_LENGTH * 4

# Structural block hash splits the image into a GRID x GRID layout
STRUCTURAL_BLOCK_GRID = 4

# "separable" (O(S^3)) or "direct" (O(S^4) reference summation)
DEFAULT_DCT_METHOD = "separable"

# Images per batch rehash request; bounds wall-clock time given pHash cost
REHASH_BATCH_SIZE = 10

# Candidate lookup defaults
# A record within 15 bits always shares at least one of the 16 blocks
CANDIDATE_MAX_DISTANCE = PHASH_BLOCK_COUNT - 1
CANDIDATE_LIMIT = 50

# Image statuses accepted by the store
IMAGE_STATUSES = ('pending', 'approved', 'rejected', 'deleted')

# Stored original paths carry this prefix relative to the upload root
UPLOAD_PATH_PREFIX = "uploads/"

# Decompression bomb limit for decoded uploads
MAX_IMAGE_PIXELS = 500_000_000

# Default storage locations
DATABASE_FILE = os.path.join(os.path.expanduser('~'), '.boardhash', 'boardhash.db')
UPLOAD_ROOT = os.path.join(os.getcwd(), 'uploads')
