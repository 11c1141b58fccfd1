"""Image preparation for multimodal Gemini requests.

Core Functions:
- guess_mime_type(): Sniff JPEG/PNG from magic bytes
- validate_image_format(): Check JPEG/PNG only
- validate_image_size(): Check MAX_IMAGE_SIZE_MB limit
- compress_image(): Re-encode as JPEG when above COMPRESS_IMG_THRESHOLD_KB
- prepare_image(): validate → compress, raising ImageError on rejection
"""

from io import BytesIO

import filetype
from PIL import Image

from cookbook.errors import ImageError
from cookbook.utils.config import config
from cookbook.utils.logger import logger


DEFAULT_MIME_TYPE = "image/jpeg"


def guess_mime_type(image_bytes: bytes) -> str:
    """Return the MIME type of JPEG or PNG bytes, image/jpeg for anything else."""
    kind = filetype.guess(image_bytes)
    if kind is not None and kind.extension == "png":
        return "image/png"
    return DEFAULT_MIME_TYPE


def validate_image_format(image_bytes: bytes) -> bool:
    """Validate image format (JPEG or PNG only).

    Uses the filetype library to detect the actual format from magic bytes.

    Args:
        image_bytes: Raw image bytes.

    Returns:
        True if valid format, False otherwise.
    """
    kind = filetype.guess(image_bytes)
    if kind is None or kind.extension not in ("jpg", "jpeg", "png"):
        logger.warning(f"Invalid image format: {kind}. Only JPEG and PNG supported.")
        return False
    return True


def validate_image_size(image_bytes: bytes) -> bool:
    """Validate image size against MAX_IMAGE_SIZE_MB."""
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > config.MAX_IMAGE_SIZE_MB:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {config.MAX_IMAGE_SIZE_MB}MB")
        return False
    return True


def compress_image(image_bytes: bytes, max_width: int = 1024) -> bytes:
    """Compress image for API transmission using Pillow.

    Uses JPEG quality=70, the same setting the app uses when it encodes a
    picked photo. Resizes oversized images and converts color modes to RGB.
    Images below COMPRESS_IMG_THRESHOLD_KB are returned untouched.

    Args:
        image_bytes: Raw image bytes to compress.
        max_width: Maximum image width in pixels.

    Returns:
        Compressed image bytes, or the original bytes when compression is
        skipped or fails.
    """
    size_kb = len(image_bytes) / 1024
    if size_kb < config.COMPRESS_IMG_THRESHOLD_KB:
        logger.debug(
            f"Image size {size_kb:.1f}KB below compression threshold "
            f"({config.COMPRESS_IMG_THRESHOLD_KB}KB), skipping compression"
        )
        return image_bytes

    try:
        img = Image.open(BytesIO(image_bytes))

        # Convert RGBA/LA/P to RGB, JPEG has no alpha channel
        if img.mode in ("RGBA", "LA", "P"):
            img = img.convert("RGBA")
            rgb_img = Image.new("RGB", img.size, (255, 255, 255))
            rgb_img.paste(img, mask=img.split()[-1])
            img = rgb_img
        elif img.mode != "RGB":
            img = img.convert("RGB")

        if img.width > max_width:
            ratio = max_width / img.width
            img = img.resize((max_width, int(img.height * ratio)), Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format="JPEG", quality=70, optimize=True)
        compressed_bytes = output.getvalue()
    except (OSError, ValueError) as e:
        logger.warning(f"Image compression failed, sending original: {e}")
        return image_bytes

    logger.debug(
        f"Image compressed: {size_kb:.1f}KB → {len(compressed_bytes) / 1024:.1f}KB"
    )
    return compressed_bytes


def prepare_image(image_bytes: bytes) -> bytes:
    """Validate and optionally compress an image before it is inlined.

    Raises:
        ImageError: If the format is not JPEG/PNG or the size exceeds the limit.
    """
    if not validate_image_format(image_bytes):
        raise ImageError("Invalid image format. Only JPEG and PNG are supported.")
    if not validate_image_size(image_bytes):
        raise ImageError(f"Image too large. Maximum size is {config.MAX_IMAGE_SIZE_MB}MB")
    if config.COMPRESS_IMG:
        return compress_image(image_bytes)
    return image_bytes
