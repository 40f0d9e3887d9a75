"""
Unit tests for candidate lookup.
"""

from boardhash.models import ImageRecord, ImageHashRecord
from boardhash.workflows.candidates import find_candidates
from boardhash.workflows.ingest import ingest_image

from conftest import noise_image


def add_phash(store, image_id, phash):
    image = ImageRecord(image_id=image_id, original_path=f"uploads/{image_id}.png", status='approved')
    record = ImageHashRecord(
        image_id=image_id,
        ahash='0' * 64,
        dhash='0' * 64,
        phash=phash,
        phash_blocks=[phash[i * 4:i * 4 + 4] for i in range(16)],
    )
    store.add_image(image, record)


class TestFindCandidates:
    """Test find_candidates function."""

    def test_ranked_by_distance(self, store):
        """Test candidates are sorted by full pHash distance."""
        add_phash(store, 'base', '0' * 64)
        add_phash(store, 'near', '1' + '0' * 63)
        add_phash(store, 'nearer', '0' * 64)
        add_phash(store, 'far', '0000' + 'f' * 60)

        assert find_candidates(store, 'base') == [('nearer', 0), ('near', 1)]

    def test_max_distance(self, store):
        """Test the distance cut-off."""
        add_phash(store, 'base', '0' * 64)
        add_phash(store, 'one', '1' + '0' * 63)
        add_phash(store, 'three', '7' + '0' * 63)

        assert find_candidates(store, 'base', max_distance=2) == [('one', 1)]
        assert find_candidates(store, 'base', max_distance=3) == [('one', 1), ('three', 3)]

    def test_limit(self, store):
        add_phash(store, 'base', '0' * 64)
        for i in range(5):
            add_phash(store, f"copy-{i}", '0' * 64)
        assert len(find_candidates(store, 'base', limit=3)) == 3

    def test_excludes_self(self, store):
        add_phash(store, 'base', '0' * 64)
        assert find_candidates(store, 'base') == []

    def test_unknown_image(self, store):
        assert find_candidates(store, 'missing') == []

    def test_duplicate_upload(self, store, upload_root, write_upload):
        """Test a re-uploaded image is found and an unrelated one is not."""
        img = noise_image(42)
        a, _ = ingest_image(store, write_upload('a.png', img), str(upload_root))
        b, _ = ingest_image(store, write_upload('b.png', img), str(upload_root))
        ingest_image(store, write_upload('c.png', noise_image(43)), str(upload_root))

        assert find_candidates(store, a.image_id) == [(b.image_id, 0)]
