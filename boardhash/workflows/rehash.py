"""
Rehash workflow.

Recomputes aHash, dHash, pHash and the pHash blocks of stored images from
their original files and overwrites the stored records:

- single: one approved image that already has a hash record
- batch: up to REHASH_BATCH_SIZE approved images not rehashed yet,
  oldest first

A missing original, a path outside the upload root, an undecodable file or
a failed store update skips that image only; the run continues. Hashing is
deterministic, so rerunning on unchanged files rewrites identical values.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from enum import Enum
from typing import Optional, Any, Union

from ..config import REHASH_BATCH_SIZE, UPLOAD_ROOT
from ..database import HashStore
from ..hashing.algorithms import HashParams
from ..hashing.analysis import check_storable, compute_hash_record
from ..hashing.dependencies import HAS_TQDM, _tqdm_class
from ..hashing.errors import ImageDecodeError
from ..models import ImageRecord, RehashRun
from ..utils.formatters import pluralize
from ..utils.validators import resolve_original_path


logger = logging.getLogger(__name__)

SKIP_MISSING_FILE = "original file missing"
SKIP_OUTSIDE_ROOT = "original path outside upload root"


class RehashMode(str, Enum):
    """Which images a rehash run targets."""
    SINGLE = "single"
    BATCH = "batch"


def _rehash_image(
    store: HashStore,
    image: ImageRecord,
    upload_root: str,
    params: HashParams,
) -> Optional[str]:
    """
    Recompute and store the hashes of one image.

    Returns:
        None on success, otherwise the reason the image was skipped
    """
    path = resolve_original_path(image.original_path, upload_root)
    if path is None:
        logger.warning(f"Skipping {image.image_id}: {image.original_path} resolves outside {upload_root}")
        return SKIP_OUTSIDE_ROOT

    if not os.path.isfile(path):
        logger.debug(f"Skipping {image.image_id}: original not found at {path}")
        return SKIP_MISSING_FILE

    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        logger.warning(f"Skipping {image.image_id}: cannot read {path}: {e}")
        return f"read failed: {e}"

    try:
        record = compute_hash_record(image.image_id, data, params)
    except ImageDecodeError as e:
        logger.warning(f"Skipping {image.image_id}: {e}")
        return f"decode failed: {e}"

    try:
        store.save_rehash(record)
    except sqlite3.Error as e:
        logger.warning(f"Skipping {image.image_id}: store update failed: {e}")
        return f"store update failed: {e}"

    return None


def _resolve_targets(
    store: HashStore,
    run: RehashRun,
    image_id: Optional[str],
    batch_size: int,
) -> list[ImageRecord]:
    if run.mode == RehashMode.SINGLE.value:
        if not image_id:
            run.message = "Error: No image selected."
            return []

        image = store.get_image(image_id, status='approved')
        hash_record = store.get_hash_record(image_id)
        if image is None or hash_record is None:
            table = 'images' if image is None else 'image_hashes'
            run.message = f"Error: Image hash missing in {table}. Cannot rehash."
            return []
        return [image]

    return store.select_rehash_batch(batch_size)


def rehash(
    store: HashStore,
    mode: Union[RehashMode, str],
    image_id: Optional[str] = None,
    upload_root: str = UPLOAD_ROOT,
    batch_size: int = REHASH_BATCH_SIZE,
    params: HashParams = HashParams(),
    show_progress: bool = False,
) -> RehashRun:
    """
    Recompute stored hashes for one image or a batch of images.

    Args:
        store: Hash store to read images from and write records to
        mode: 'single' or 'batch'
        image_id: Target image for single mode
        upload_root: Directory that stored original paths are relative to
        batch_size: Maximum images per batch run
        params: Hash sampling parameters
        show_progress: Whether to show a tqdm progress bar in batch mode

    Returns:
        RehashRun listing the targets, the processed ids and the skips.
        Failures never raise; they are reported through the run.

    Raises:
        ValueError: If ``mode`` is not a known rehash mode, or ``params``
            produce hashes that do not fit the stored record layout
    """
    mode = RehashMode(mode)
    check_storable(params)
    run = RehashRun(mode=mode.value)

    images = _resolve_targets(store, run, image_id, batch_size)
    run.targets = [image.image_id for image in images]
    if run.message:
        logger.info(run.message)
        return run

    pbar: Optional[Any] = None
    if HAS_TQDM and show_progress and _tqdm_class is not None and mode is RehashMode.BATCH:
        pbar = _tqdm_class(total=len(images), desc="Rehashing images", unit="img", ncols=80)

    try:
        for image in images:
            reason = _rehash_image(store, image, upload_root, params)
            if reason is None:
                run.processed.append(image.image_id)
            else:
                run.skipped[image.image_id] = reason

            if pbar is not None:
                pbar.update(1)
    finally:
        if pbar is not None:
            pbar.close()

    if mode is RehashMode.SINGLE and not run.processed and run.skipped:
        run.message = f"No images processed: {run.skipped[run.targets[0]]}."
    else:
        run.message = f"Rehashed {pluralize(run.processed_count, 'image')} successfully."

    logger.info(run.message)
    return run


__all__ = ['RehashMode', 'SKIP_MISSING_FILE', 'SKIP_OUTSIDE_ROOT', 'rehash']
