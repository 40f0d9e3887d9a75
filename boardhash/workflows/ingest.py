"""
Upload-time ingest.

Registers a stored original: digests, dimensions, a fresh image id and the
initial hash record, inserted together so an image never exists without
its hashes.
"""

from __future__ import annotations

import hashlib
import logging
import os
import secrets
from typing import Callable, Optional

from ..config import IMAGE_STATUSES, UPLOAD_ROOT
from ..database import HashStore
from ..hashing.algorithms import HashParams
from ..hashing.analysis import check_storable, compute_hash_record
from ..hashing.sampler import describe_image
from ..models import ImageRecord, ImageHashRecord
from ..utils.validators import resolve_original_path


logger = logging.getLogger(__name__)

IMAGE_ID_GROUPS = 5
IMAGE_ID_GROUP_LENGTH = 5
MAX_ID_ATTEMPTS = 100

DIGEST_ALGORITHMS = ('md5', 'sha1', 'sha256', 'sha512')


def generate_image_id(exists: Optional[Callable[[str], bool]] = None) -> str:
    """
    Generate a public image id of five dash-separated 5-hex-char groups.

    Args:
        exists: Optional predicate; ids it accepts are regenerated

    Raises:
        RuntimeError: If no free id is found after MAX_ID_ATTEMPTS tries
    """
    for _ in range(MAX_ID_ATTEMPTS):
        image_id = '-'.join(
            secrets.token_hex(3)[:IMAGE_ID_GROUP_LENGTH] for _ in range(IMAGE_ID_GROUPS)
        )
        if exists is None or not exists(image_id):
            return image_id
        logger.debug(f"Image id collision on {image_id}, retrying")

    raise RuntimeError(f"Could not generate a unique image id after {MAX_ID_ATTEMPTS} attempts")


def calculate_digests(data: bytes) -> dict[str, str]:
    """
    Hex digests of the original file contents.

    Examples:
        >>> calculate_digests(b'')['md5']
        'd41d8cd98f00b204e9800998ecf8427e'
    """
    return {name: hashlib.new(name, data).hexdigest() for name in DIGEST_ALGORITHMS}


def ingest_image(
    store: HashStore,
    original_path: str,
    upload_root: str = UPLOAD_ROOT,
    status: str = 'pending',
    params: HashParams = HashParams(),
) -> tuple[ImageRecord, ImageHashRecord]:
    """
    Register a stored original and compute its initial hash record.

    Args:
        store: Hash store to insert into
        original_path: Stored path, e.g. 'uploads/images/original/x.jpg'
        upload_root: Directory the stored path is relative to
        status: Initial moderation status
        params: Hash sampling parameters

    Returns:
        Tuple of (inserted ImageRecord, its ImageHashRecord)

    Raises:
        ValueError: If the status is unknown, the path escapes the upload root
            or ``params`` do not produce storable hash widths
        FileNotFoundError: If the original does not exist
        ImageDecodeError: If the file is not a decodable image
    """
    check_storable(params)
    if status not in IMAGE_STATUSES:
        raise ValueError(f"Unknown status {status!r} (expected one of {IMAGE_STATUSES})")

    path = resolve_original_path(original_path, upload_root)
    if path is None:
        raise ValueError(f"Path {original_path} resolves outside {upload_root}")
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Original not found: {path}")

    with open(path, 'rb') as f:
        data = f.read()

    width, height, mime_type = describe_image(data)
    image_id = generate_image_id(lambda candidate: store.get_image(candidate) is not None)
    record = compute_hash_record(image_id, data, params)

    image = ImageRecord(
        image_id=image_id,
        original_path=original_path,
        status=status,
        mime_type=mime_type,
        width=width,
        height=height,
        size_bytes=len(data),
        **calculate_digests(data),
    )
    store.add_image(image, record)

    logger.info(f"Ingested {original_path} as {image_id} ({image.resolution}, {image.size_formatted})")
    return image, record


__all__ = [
    'IMAGE_ID_GROUPS',
    'IMAGE_ID_GROUP_LENGTH',
    'generate_image_id',
    'calculate_digests',
    'ingest_image',
]
