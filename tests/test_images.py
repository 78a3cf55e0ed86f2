"""
Tests for encoding local image files into data URLs.
"""

import base64

import pytest
from PIL import Image

from keyhost.client import ImageValidationError, encode_image_file


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "room.png"
    Image.new("RGB", (8, 8), color=(200, 120, 40)).save(path, format="PNG")
    return path


async def test_png_encodes_to_data_url(png_file):
    encoded = await encode_image_file(png_file)

    prefix = "data:image/png;base64,"
    assert encoded.startswith(prefix)
    assert base64.b64decode(encoded[len(prefix):]) == png_file.read_bytes()


async def test_jpeg_encodes(tmp_path):
    path = tmp_path / "view.jpg"
    Image.new("RGB", (8, 8), color=(10, 90, 200)).save(path, format="JPEG")

    assert (await encode_image_file(path)).startswith("data:image/jpeg;base64,")


async def test_disallowed_type(tmp_path):
    path = tmp_path / "anim.gif"
    Image.new("RGB", (4, 4)).save(path, format="GIF")

    with pytest.raises(ImageValidationError, match="not allowed"):
        await encode_image_file(path)


async def test_extension_must_match_content(tmp_path, png_file):
    disguised = tmp_path / "room.jpg"
    disguised.write_bytes(png_file.read_bytes())

    with pytest.raises(ImageValidationError, match="doesn't match"):
        await encode_image_file(disguised)


async def test_oversized_file(png_file):
    with pytest.raises(ImageValidationError, match="exceeds maximum"):
        await encode_image_file(png_file, max_bytes=10)


async def test_corrupt_bytes(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"not really a png")

    with pytest.raises(ImageValidationError, match="Invalid image file"):
        await encode_image_file(path)


async def test_empty_file(tmp_path):
    path = tmp_path / "empty.png"
    path.write_bytes(b"")

    with pytest.raises(ImageValidationError, match="empty"):
        await encode_image_file(path)


async def test_missing_file(tmp_path):
    with pytest.raises(ImageValidationError, match="not found"):
        await encode_image_file(tmp_path / "nowhere.png")


async def test_custom_allow_list(png_file):
    with pytest.raises(ImageValidationError):
        await encode_image_file(png_file, allowed_types=["image/jpeg"])
