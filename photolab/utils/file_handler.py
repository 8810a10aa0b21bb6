"""Image payload handling: validation, MIME sniffing and data URIs."""

import base64
import binascii
import io
import logging
import re

from PIL import Image, UnidentifiedImageError

from photolab.errors import (
    ImageDimensionsTooLargeError,
    ImageTooLargeError,
    InvalidDataURIError,
    MissingSourceImageError,
    UnsupportedImageError,
)

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"

_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[^;,]*)*?;base64,(?P<data>.*)$",
    re.S,
)


def detect_mime_type(data: bytes) -> str:
    """Detect image MIME type from magic bytes.

    Args:
        data: Raw image bytes

    Returns:
        Detected MIME type, JPEG when unknown
    """
    if data.startswith(b"\xff\xd8"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG"):
        return "image/png"
    if data.startswith(b"GIF"):
        return "image/gif"
    if data.startswith(b"WEBP", 8):
        return "image/webp"
    return DEFAULT_MIME_TYPE


def validate_upload(data: bytes | None, max_bytes: int) -> None:
    """Validate an uploaded or captured image before it is used.

    Args:
        data: Raw image bytes
        max_bytes: Largest accepted payload, inclusive

    Raises:
        MissingSourceImageError: If there is no data
        ImageTooLargeError: If the payload exceeds the limit
        ImageDimensionsTooLargeError: If the pixel count trips Pillow's decompression bomb guard
        UnsupportedImageError: If Pillow cannot identify the image
    """
    if not data:
        raise MissingSourceImageError()

    size = len(data)
    if size > max_bytes:
        logger.info(f"Rejected upload: {size} bytes exceeds limit of {max_bytes}")
        raise ImageTooLargeError(size, max_bytes)

    try:
        with Image.open(io.BytesIO(data)) as image:
            image.verify()
    except Image.DecompressionBombError as e:
        logger.info(f"Rejected upload: {e}")
        raise ImageDimensionsTooLargeError() from e
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.info(f"Rejected upload: not a readable image ({e})")
        raise UnsupportedImageError() from e


def to_data_uri(data: bytes, mime_type: str | None = None) -> str:
    """Encode bytes as a base64 data URI."""
    mime_type = mime_type or detect_mime_type(data)
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def parse_data_uri(uri: str) -> tuple[bytes, str]:
    """Decode a base64 data URI.

    Args:
        uri: String of the form ``data:<mime>;base64,<payload>``

    Returns:
        Tuple of (decoded bytes, MIME type)

    Raises:
        InvalidDataURIError: If the URI is not a base64 data URI
    """
    match = _DATA_URI_RE.match(uri or "")
    if not match:
        raise InvalidDataURIError()

    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidDataURIError() from e

    if not data:
        raise InvalidDataURIError()

    mime_type = match.group("mime") or detect_mime_type(data)
    return data, mime_type


def load_source_image(data: bytes | None, declared_mime: str | None, max_bytes: int) -> str:
    """Validate an uploaded image and encode it as the session source image.

    Args:
        data: Raw image bytes from the uploader or camera
        declared_mime: MIME type reported by the browser, if any
        max_bytes: Upload size limit

    Returns:
        Data URI of the image
    """
    validate_upload(data, max_bytes)
    mime_type = declared_mime if declared_mime and declared_mime.startswith("image/") else None
    uri = to_data_uri(data, mime_type or detect_mime_type(data))
    logger.info(f"Source image loaded: {len(data)} bytes, {mime_type or 'sniffed type'}")
    return uri
