"""
Utility functions for the poster studio.
"""
# stdlib imports
import base64
import os
import uuid
from io import BytesIO

# third-party imports
from PIL import Image, UnidentifiedImageError

# local imports
from constants import DEFAULT_IMAGE_EXTENSION, MIME_EXTENSION_MAP, OUTPUT_IMAGES_DIR, STATIC_ROUTE


# Image utilities
def encode_image(image_bytes: bytes) -> str:
    """Return the base64 text form of raw image bytes."""
    return base64.b64encode(image_bytes).decode("utf-8")


def detect_image_mime(image_bytes: bytes) -> str:
    """
    Identify an uploaded image with Pillow and return its MIME type.

    Raises:
        ValueError: If the bytes are not a readable image.
    """
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            image_format = img.format
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Uploaded file is not a valid image: {e}") from e

    mime_type = Image.MIME.get(image_format or "")
    if not mime_type:
        raise ValueError(f"Unsupported image format: {image_format}")
    return mime_type


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    """
    Parse data URLs in the format 'data:<mime-type>;base64,<payload>'.

    Returns:
        (mime_type, raw_bytes)
    """
    if not isinstance(data_url, str) or not data_url.startswith("data:image"):
        raise ValueError("Invalid data URL: must start with 'data:image'.")

    try:
        header, b64data = data_url.split(",", 1)
        mime_type = header.split(";", 1)[0].split(":", 1)[1]
        raw_bytes = base64.b64decode(b64data)
        return mime_type, raw_bytes

    except Exception as e:
        raise ValueError(f"Failed to parse and decode data URL: {e}") from e


def save_generated_image(
    data_url: str,
    base_dir: str = OUTPUT_IMAGES_DIR,
    filename_prefix: str = "generated",
) -> str:
    """
    Persist a generated data URL image under base_dir.

    Args:
        data_url: Image returned by one of the generators.
        base_dir: Directory served under /static.
        filename_prefix: Prefix before the UUID in the filename.

    Returns:
        The /static URL of the saved file.
    """
    mime_type, raw_bytes = decode_data_url(data_url)
    extension = MIME_EXTENSION_MAP.get(mime_type, DEFAULT_IMAGE_EXTENSION)

    try:
        os.makedirs(base_dir, exist_ok=True)
        filename = f"{filename_prefix}_{uuid.uuid4().hex}.{extension}"
        with open(os.path.join(base_dir, filename), "wb") as f:
            f.write(raw_bytes)

    except OSError as e:
        # <from e> keeps the original traceback
        raise RuntimeError(f"Failed to save image to {base_dir}: {e}") from e

    return f"{STATIC_ROUTE}/{filename}"
