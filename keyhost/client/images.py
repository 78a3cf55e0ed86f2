"""
Image encoding for property submissions.
Turns a local image file into the base64 data URL the API stores verbatim.
"""

import base64
import io
import mimetypes
from pathlib import Path
from typing import Iterable, Optional, Union

import aiofiles
from PIL import Image

from keyhost.config import settings


class ImageValidationError(Exception):
    """Raised when a file cannot be submitted as a property image."""


# Pillow format name for each accepted MIME type
EXPECTED_FORMATS = {
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
    "image/png": "png",
    "image/webp": "webp",
}


async def encode_image_file(
    path: Union[str, Path],
    max_bytes: Optional[int] = None,
    allowed_types: Optional[Iterable[str]] = None,
) -> str:
    """
    Read an image file and return it as a ``data:`` URL.

    Args:
        path: Image file on disk
        max_bytes: Size limit, defaults to ``settings.max_image_bytes``
        allowed_types: MIME allow-list, defaults to ``settings.allowed_image_types``

    Returns:
        ``data:<mime>;base64,<payload>``

    Raises:
        ImageValidationError: Unknown or disallowed type, empty or oversized
            file, or bytes Pillow cannot read as the declared format
    """
    path = Path(path)
    limit = max_bytes if max_bytes is not None else settings.max_image_bytes
    allowed = set(allowed_types if allowed_types is not None else settings.allowed_image_types)

    mime_type, _ = mimetypes.guess_type(path.name)
    if mime_type not in allowed:
        raise ImageValidationError(
            f"File type '{mime_type or path.suffix}' not allowed. Allowed types: {', '.join(sorted(allowed))}"
        )

    if not path.is_file():
        raise ImageValidationError(f"Image file not found: {path}")

    async with aiofiles.open(path, "rb") as f:
        content = await f.read()

    if not content:
        raise ImageValidationError("Image file is empty")
    if len(content) > limit:
        raise ImageValidationError(
            f"Image size ({len(content) / (1024 * 1024):.1f}MB) exceeds maximum ({limit / (1024 * 1024):.1f}MB)"
        )

    try:
        with Image.open(io.BytesIO(content)) as img:
            pil_format = img.format.lower() if img.format else ""
            img.verify()
    except Exception as e:
        raise ImageValidationError(f"Invalid image file: {e}") from e

    expected = EXPECTED_FORMATS.get(mime_type)
    if expected and pil_format != expected:
        raise ImageValidationError(f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'")

    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
