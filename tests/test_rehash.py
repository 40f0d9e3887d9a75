"""
Unit tests for the rehash workflow.
"""

import pytest
import os

from boardhash.hashing.algorithms import HashParams
from boardhash.hashing.analysis import compute_hash_record
from boardhash.utils.validators import resolve_original_path
from boardhash.workflows.rehash import (
    RehashMode,
    SKIP_MISSING_FILE,
    SKIP_OUTSIDE_ROOT,
    rehash,
)
from boardhash.models import ImageRecord

from conftest import noise_image


def original_file(image, upload_root):
    return resolve_original_path(image.original_path, str(upload_root))


class TestBatchRehash:
    """Test batch mode."""

    def test_processes_all(self, store, upload_root, approved_images):
        """Test every selected image is rehashed and marked."""
        run = rehash(store, 'batch', upload_root=str(upload_root))

        ids = [image.image_id for image in approved_images]
        assert run.targets == ids
        assert run.processed == ids
        assert run.skipped == {}
        assert run.message == "Rehashed 5 images successfully."
        assert all(store.get_image(i).rehashed for i in ids)

    def test_missing_file_skipped(self, store, upload_root, approved_images):
        """Test a missing original is skipped and the batch continues."""
        missing = approved_images[2]
        os.remove(original_file(missing, upload_root))

        run = rehash(store, RehashMode.BATCH, upload_root=str(upload_root))

        assert run.processed_count == 4
        assert missing.image_id not in run.processed
        assert run.skipped == {missing.image_id: SKIP_MISSING_FILE}
        assert run.message == "Rehashed 4 images successfully."
        assert store.get_image(missing.image_id).rehashed is False

    def test_undecodable_file_skipped(self, store, upload_root, approved_images):
        """Test a corrupt original is skipped without aborting the run."""
        corrupt = approved_images[0]
        with open(original_file(corrupt, upload_root), 'wb') as f:
            f.write(b'not an image')

        run = rehash(store, 'batch', upload_root=str(upload_root))

        assert run.processed_count == 4
        assert run.skipped[corrupt.image_id].startswith('decode failed')

    def test_batch_size(self, store, upload_root, approved_images):
        """Test a batch takes the oldest images up to the batch size."""
        run = rehash(store, 'batch', upload_root=str(upload_root), batch_size=2)
        assert run.processed == [image.image_id for image in approved_images[:2]]

        run = rehash(store, 'batch', upload_root=str(upload_root), batch_size=2)
        assert run.processed == [image.image_id for image in approved_images[2:4]]

    def test_rehashed_images_not_reselected(self, store, upload_root, approved_images):
        """Test a second batch finds nothing left to do."""
        rehash(store, 'batch', upload_root=str(upload_root))
        run = rehash(store, 'batch', upload_root=str(upload_root))
        assert run.targets == []
        assert run.message == "Rehashed 0 images successfully."

    def test_pending_images_ignored(self, store, upload_root, approved_images):
        """Test only approved images are selected."""
        store.set_status(approved_images[0].image_id, 'pending')
        run = rehash(store, 'batch', upload_root=str(upload_root))
        assert approved_images[0].image_id not in run.targets

    def test_updates_stale_hashes(self, store, upload_root, approved_images):
        """Test stored hashes are replaced by ones computed from the original."""
        image = approved_images[1]
        with open(original_file(image, upload_root), 'rb') as f:
            expected = compute_hash_record(image.image_id, f.read())

        with open(original_file(approved_images[0], upload_root), 'rb') as f:
            stale = compute_hash_record(image.image_id, f.read())
        store.upsert_hash_record(stale)

        rehash(store, 'batch', upload_root=str(upload_root))
        assert store.get_hash_record(image.image_id) == expected


class TestSingleRehash:
    """Test single mode."""

    def test_single_image(self, store, upload_root, approved_images):
        """Test one image is rehashed."""
        target = approved_images[3].image_id
        run = rehash(store, 'single', image_id=target, upload_root=str(upload_root))
        assert run.targets == [target]
        assert run.processed == [target]
        assert run.message == "Rehashed 1 image successfully."

    def test_idempotent(self, store, upload_root, approved_images):
        """Test rehashing twice writes identical hashes."""
        target = approved_images[0].image_id
        rehash(store, 'single', image_id=target, upload_root=str(upload_root))
        first = store.get_hash_record(target)
        rehash(store, 'single', image_id=target, upload_root=str(upload_root))
        assert store.get_hash_record(target) == first

    def test_no_image_selected(self, store):
        """Test single mode without an id reports an error."""
        run = rehash(store, 'single')
        assert run.message == "Error: No image selected."
        assert run.processed == []

    def test_unknown_image(self, store):
        """Test an unknown id names the images table."""
        run = rehash(store, 'single', image_id='00000-00000-00000-00000-00000')
        assert run.message == "Error: Image hash missing in images. Cannot rehash."
        assert run.targets == []

    def test_unapproved_image(self, store, upload_root, approved_images):
        """Test a pending image cannot be rehashed."""
        target = approved_images[0].image_id
        store.set_status(target, 'pending')
        run = rehash(store, 'single', image_id=target, upload_root=str(upload_root))
        assert run.message == "Error: Image hash missing in images. Cannot rehash."

    def test_missing_hash_record(self, store, upload_root, approved_images):
        """Test an image without a hash record names the image_hashes table."""
        target = approved_images[0].image_id
        with store._conn_mgr.connection(exclusive=True) as conn:
            conn.execute("DELETE FROM image_hashes WHERE image_id = ?", (target,))

        run = rehash(store, 'single', image_id=target, upload_root=str(upload_root))
        assert run.message == "Error: Image hash missing in image_hashes. Cannot rehash."

    def test_missing_file(self, store, upload_root, approved_images):
        """Test a missing original is reported, not raised."""
        target = approved_images[0]
        os.remove(original_file(target, upload_root))
        run = rehash(store, 'single', image_id=target.image_id, upload_root=str(upload_root))
        assert run.processed == []
        assert run.message == f"No images processed: {SKIP_MISSING_FILE}."

    def test_unknown_mode(self, store):
        """Test an unknown mode is rejected."""
        with pytest.raises(ValueError):
            rehash(store, 'everything')

    def test_unstorable_bit_length_rejected(self, store, upload_root, approved_images):
        """Test a hash width the store cannot hold fails before any image is touched."""
        with pytest.raises(ValueError, match="256 bits"):
            rehash(store, 'batch', upload_root=str(upload_root), params=HashParams(bit_length=128))

        assert not any(store.get_image(image.image_id).rehashed for image in approved_images)
        assert len(store.select_rehash_batch(10)) == len(approved_images)


class TestPathResolution:
    """Test original path handling during rehash."""

    def test_path_outside_root(self, store, upload_root, write_upload):
        """Test a stored path escaping the upload root is skipped."""
        from boardhash.workflows.ingest import ingest_image

        image, record = ingest_image(store, write_upload('a.png', noise_image(3)),
                                     str(upload_root), status='approved')
        escaped = ImageRecord(image_id='aaaaa-bbbbb-ccccc-ddddd-eeeee',
                              original_path='uploads/../../etc/passwd', status='approved')
        record.image_id = escaped.image_id
        store.add_image(escaped, record)

        run = rehash(store, 'batch', upload_root=str(upload_root))
        assert run.processed == [image.image_id]
        assert run.skipped == {escaped.image_id: SKIP_OUTSIDE_ROOT}
