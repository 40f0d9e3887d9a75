"""
Pytest configuration and shared fixtures for test suite.
"""

import io
import pytest
import tempfile
import shutil
from pathlib import Path
from PIL import Image
import numpy as np


def png_bytes(img: Image.Image) -> bytes:
    """Encode a PIL image as PNG bytes."""
    buf = io.BytesIO()
    img.save(buf, 'PNG')
    return buf.getvalue()


def noise_image(seed: int, size=(64, 64)) -> Image.Image:
    """Random RGB image, reproducible per seed."""
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, (size[1], size[0], 3), dtype=np.uint8)
    return Image.fromarray(pixels, 'RGB')


def gray_image(values: np.ndarray) -> Image.Image:
    """RGB image with R = G = B = values (2-D uint8 array)."""
    values = np.asarray(values, dtype=np.uint8)
    return Image.fromarray(np.stack([values] * 3, axis=-1), 'RGB')


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def temp_db(temp_dir):
    """Path for a temporary hash store."""
    return str(temp_dir / "test_boardhash.db")


@pytest.fixture
def store(temp_db):
    """Fresh HashStore on a temporary database."""
    from boardhash.database import HashStore

    return HashStore(temp_db)


@pytest.fixture
def upload_root(temp_dir):
    """Upload root with the images/original directory stored paths point into."""
    root = temp_dir / "uploads"
    (root / "images" / "original").mkdir(parents=True)
    return root


@pytest.fixture
def write_upload(upload_root):
    """
    Save an image under the upload root.

    Returns:
        Function (name, img) -> stored path ('uploads/images/original/<name>')
    """
    def _write(name: str, img: Image.Image) -> str:
        img.save(upload_root / "images" / "original" / name, 'PNG')
        return f"uploads/images/original/{name}"

    return _write


@pytest.fixture
def sample_images():
    """
    A set of in-memory test images.

    Returns:
        dict with:
        - black, white: uniform 64x64 images
        - half, half_inverted: left/right black and white halves, and their inverse
        - gradient: horizontal gray ramp
        - noise_a, noise_b: unrelated random images
    """
    half = np.zeros((64, 64), dtype=np.uint8)
    half[:, 32:] = 255

    return {
        'black': Image.new('RGB', (64, 64), color='black'),
        'white': Image.new('RGB', (64, 64), color='white'),
        'half': gray_image(half),
        'half_inverted': gray_image(255 - half),
        'gradient': gray_image(np.tile(np.arange(0, 256, 4), (64, 1))),
        'noise_a': noise_image(1),
        'noise_b': noise_image(2),
    }


@pytest.fixture
def approved_images(store, upload_root, write_upload):
    """
    Five distinct approved images ingested into the store, oldest first.

    Returns:
        List of ImageRecord
    """
    from boardhash.workflows.ingest import ingest_image

    images = []
    for i in range(5):
        stored_path = write_upload(f"img_{i}.png", noise_image(100 + i))
        image, _ = ingest_image(store, stored_path, str(upload_root), status='approved')
        images.append(image)
    return images


@pytest.fixture
def isolated_config(temp_dir, monkeypatch):
    """UserConfig reading from an empty temporary config directory."""
    from boardhash.user_config import get_user_config

    config_dir = temp_dir / "config"
    monkeypatch.setenv('BOARDHASH_CONFIG_DIR', str(config_dir))
    for var in ('BOARDHASH_DB', 'BOARDHASH_UPLOAD_ROOT', 'BOARDHASH_REHASH_BATCH',
                'BOARDHASH_DCT_METHOD', 'BOARDHASH_MAX_PIXELS'):
        monkeypatch.delenv(var, raising=False)

    config = get_user_config()
    config.reload()
    yield config
    config.reload()
