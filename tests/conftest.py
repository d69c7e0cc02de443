"""
Pytest configuration and shared fixtures for test suite.
"""

import pytest
import tempfile
import shutil
from pathlib import Path

import numpy as np
from PIL import Image


def make_image(array) -> Image.Image:
    """Build an RGB image from an (H, W, 3) array-like of 0-255 values."""
    return Image.fromarray(np.asarray(array, dtype=np.uint8), 'RGB')


def split_image(width, height, left, right) -> Image.Image:
    """Image whose left half is one color and right half another."""
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[:, :width // 2] = left
    array[:, width // 2:] = right
    return make_image(array)


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keep tests away from ~/.quadmatch and QUADMATCH_* variables."""
    from quadmatch.user_config import get_user_config

    for var in (
        'QUADMATCH_THRESHOLD', 'QUADMATCH_MAX_DIMENSION', 'QUADMATCH_SPLIT_QUADRANTS',
        'QUADMATCH_BACKGROUND_FRACTION', 'QUADMATCH_MAX_IMAGES', 'QUADMATCH_WORKERS',
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv('QUADMATCH_CONFIG_DIR', str(tmp_path / 'quadmatch-config'))

    config = get_user_config()
    config.reload()
    yield config
    config.reload()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def sample_images(temp_dir):
    """
    Create a set of sample images for testing.

    Returns:
        dict with paths to:
        - photo.jpg, photo_copy.jpg (byte-identical JPEGs)
        - red_small.png, red_large.png (same solid color, different sizes)
        - blue.png (unique solid color)
        - split.png, split_mirror.png (red|blue and blue|red halves)
        - split_half.png (left half crop of split.png)
        - corrupted.txt (not an image)
    """
    images = {}

    photo = split_image(320, 240, (200, 40, 40), (30, 60, 180))
    path = temp_dir / "photo.jpg"
    photo.save(path, 'JPEG', quality=95)
    images['photo'] = str(path)

    copy_path = temp_dir / "photo_copy.jpg"
    shutil.copyfile(path, copy_path)
    images['photo_copy'] = str(copy_path)

    path = temp_dir / "red_small.png"
    Image.new('RGB', (100, 100), color='red').save(path, 'PNG')
    images['red_small'] = str(path)

    path = temp_dir / "red_large.png"
    Image.new('RGB', (200, 200), color='red').save(path, 'PNG')
    images['red_large'] = str(path)

    path = temp_dir / "blue.png"
    Image.new('RGB', (100, 100), color='blue').save(path, 'PNG')
    images['blue'] = str(path)

    split = split_image(200, 100, (255, 0, 0), (0, 0, 255))
    path = temp_dir / "split.png"
    split.save(path, 'PNG')
    images['split'] = str(path)

    path = temp_dir / "split_mirror.png"
    split_image(200, 100, (0, 0, 255), (255, 0, 0)).save(path, 'PNG')
    images['split_mirror'] = str(path)

    path = temp_dir / "split_half.png"
    split.crop((0, 0, 100, 100)).save(path, 'PNG')
    images['split_half'] = str(path)

    path = temp_dir / "corrupted.txt"
    path.write_text("not an image")
    images['corrupted'] = str(path)

    return images


@pytest.fixture
def jpeg_dir(temp_dir):
    """
    Directory holding only JPEG files.

    Contains a.jpg and b.JPG (byte-identical), c.jpeg (different picture),
    a PNG that the default scan ignores, and broken.jpg (not an image).
    """
    directory = temp_dir / "photos"
    directory.mkdir()

    split_image(300, 200, (220, 30, 30), (20, 40, 200)).save(directory / "a.jpg", 'JPEG', quality=95)
    shutil.copyfile(directory / "a.jpg", directory / "b.JPG")
    split_image(300, 200, (20, 200, 40), (240, 240, 20)).save(directory / "c.jpeg", 'JPEG', quality=95)
    Image.new('RGB', (50, 50), color='red').save(directory / "ignored.png", 'PNG')
    (directory / "broken.jpg").write_bytes(b"\xff\xd8 definitely not a jpeg")

    return directory
