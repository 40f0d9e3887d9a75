"""
Data models for boardhash.

Contains dataclasses for persisted image rows, their perceptual hash
records, and the transient results of comparison and rehash runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
import re

from .config import HASH_HEX_LENGTH, PHASH_BLOCK_COUNT, PHASH_BLOCK_LENGTH

_LOWER_HEX_RE = re.compile(r'^[0-9a-f]*$')


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} TB"


@dataclass
class ImageRecord:
    """
    A stored image row.

    Attributes:
        image_id: Public identifier (e.g. 'a1b2c-3d4e5-...')
        original_path: Stored path of the original file
        status: Moderation status ('pending', 'approved', ...)
        mime_type: Detected MIME type
        width: Image width in pixels
        height: Image height in pixels
        size_bytes: Size of the original file
        md5, sha1, sha256, sha512: Digests of the original file
        rehashed: Whether the perceptual hashes were recomputed
        rehashed_on: Unix timestamp of the last rehash
        id: Database row id (insertion order)
        created_at: Unix timestamp of the insert
    """
    image_id: str
    original_path: str
    status: str = "pending"
    mime_type: str = ""
    width: int = 0
    height: int = 0
    size_bytes: int = 0
    md5: str = ""
    sha1: str = ""
    sha256: str = ""
    sha512: str = ""
    rehashed: bool = False
    rehashed_on: Optional[float] = None
    id: Optional[int] = None
    created_at: Optional[float] = None

    @property
    def resolution(self) -> str:
        """Return resolution as 'WxH' string."""
        return f"{self.width}x{self.height}"

    @property
    def size_formatted(self) -> str:
        """Return human-readable file size."""
        return format_size(self.size_bytes)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'image_id': self.image_id,
            'original_path': self.original_path,
            'status': self.status,
            'mime_type': self.mime_type,
            'width': self.width,
            'height': self.height,
            'resolution': self.resolution,
            'size_bytes': self.size_bytes,
            'size_formatted': self.size_formatted,
            'md5': self.md5,
            'sha1': self.sha1,
            'sha256': self.sha256,
            'sha512': self.sha512,
            'rehashed': self.rehashed,
            'rehashed_on': self.rehashed_on,
            'created_at': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ImageRecord':
        """Create ImageRecord from dictionary."""
        return cls(
            image_id=data['image_id'],
            original_path=data['original_path'],
            status=data.get('status', 'pending'),
            mime_type=data.get('mime_type', ''),
            width=data.get('width', 0),
            height=data.get('height', 0),
            size_bytes=data.get('size_bytes', 0),
            md5=data.get('md5', ''),
            sha1=data.get('sha1', ''),
            sha256=data.get('sha256', ''),
            sha512=data.get('sha512', ''),
            rehashed=bool(data.get('rehashed', False)),
            rehashed_on=data.get('rehashed_on'),
            id=data.get('id'),
            created_at=data.get('created_at'),
        )


@dataclass
class ImageHashRecord:
    """
    Perceptual fingerprints of one image.

    Attributes:
        image_id: Identifier of the image these hashes belong to
        ahash: Average hash, 64 lowercase hex characters
        dhash: Difference hash, 64 lowercase hex characters
        phash: Perceptual hash, 64 lowercase hex characters
        phash_blocks: The 16 four-character slices of phash, in order
    """
    image_id: str
    ahash: str
    dhash: str
    phash: str
    phash_blocks: list = field(default_factory=list)

    def block(self, index: int) -> str:
        """Return pHash block slice ``index``."""
        return self.phash_blocks[index]

    def validate(self) -> list[str]:
        """
        Check the record invariants.

        Returns:
            List of problems found (empty when the record is consistent)
        """
        problems = []
        for name in ('ahash', 'dhash', 'phash'):
            value = getattr(self, name)
            if len(value) != HASH_HEX_LENGTH or not _LOWER_HEX_RE.match(value):
                problems.append(f"{name} must be {HASH_HEX_LENGTH} lowercase hex characters")

        if len(self.phash_blocks) != PHASH_BLOCK_COUNT:
            problems.append(f"expected {PHASH_BLOCK_COUNT} phash blocks, got {len(self.phash_blocks)}")
        elif any(len(b) != PHASH_BLOCK_LENGTH for b in self.phash_blocks):
            problems.append(f"phash blocks must be {PHASH_BLOCK_LENGTH} characters each")
        elif ''.join(self.phash_blocks) != self.phash:
            problems.append("phash blocks do not reproduce phash")

        return problems

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    def to_dict(self) -> dict:
        """Convert to dictionary using the flat phash_block_N column names."""
        data = {
            'image_id': self.image_id,
            'ahash': self.ahash,
            'dhash': self.dhash,
            'phash': self.phash,
        }
        for i, block in enumerate(self.phash_blocks):
            data[f'phash_block_{i}'] = block
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'ImageHashRecord':
        """Create ImageHashRecord from a flat dictionary or database row."""
        return cls(
            image_id=data['image_id'],
            ahash=data['ahash'],
            dhash=data['dhash'],
            phash=data['phash'],
            phash_blocks=[data[f'phash_block_{i}'] or '' for i in range(PHASH_BLOCK_COUNT)],
        )


@dataclass
class ComparisonResult:
    """
    Outcome of comparing the hash records of two images.

    Not persisted. The percentage is shown to a moderator; it is not an
    accept/reject decision.
    """
    image_id_a: str
    image_id_b: str
    ahash_distance: int
    dhash_distance: int
    phash_distance: int
    similarity_percent: int
    formula: str = "legacy"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'image_id_a': self.image_id_a,
            'image_id_b': self.image_id_b,
            'ahash_distance': self.ahash_distance,
            'dhash_distance': self.dhash_distance,
            'phash_distance': self.phash_distance,
            'similarity_percent': self.similarity_percent,
            'formula': self.formula,
        }


@dataclass
class RehashRun:
    """
    Result of a single or batch rehash invocation.

    Attributes:
        mode: 'single' or 'batch'
        targets: Image ids selected for processing
        processed: Image ids whose hashes were rewritten (successes only)
        skipped: Image id -> reason for every selected image not processed
        message: Summary or error message for the caller
    """
    mode: str
    targets: list = field(default_factory=list)
    processed: list = field(default_factory=list)
    skipped: dict = field(default_factory=dict)
    message: str = ""

    @property
    def processed_count(self) -> int:
        return len(self.processed)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'mode': self.mode,
            'targets': list(self.targets),
            'processed': list(self.processed),
            'skipped': dict(self.skipped),
            'message': self.message,
        }
