"""
User photo intake.

Photos travel end to end as data URIs (`data:<mime>;base64,<payload>`).
Before an external call is made the payload is decoded and opened with
Pillow, so obviously broken uploads fail as input errors instead of
burning an analysis call.
"""

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass, field
from typing import List

from PIL import Image, ImageStat, UnidentifiedImageError

from snaptheplant.core.errors import InputError

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>image/[\w.+-]+);base64,(?P<payload>.+)$", re.DOTALL)
MIN_DIMENSION = 64


@dataclass
class DecodedImage:
    """Metadata about an accepted photo."""
    mime_type: str
    format: str
    width: int
    height: int
    size_bytes: int
    warnings: List[str] = field(default_factory=list)


def decode_image_data_uri(data_uri: str, max_size_mb: float = 10.0) -> DecodedImage:
    """
    Validate and inspect a photo data URI.

    Raises:
        InputError: If the URI is missing, malformed, too large or not an image
    """
    if not data_uri or not data_uri.strip():
        raise InputError("No image provided")

    match = DATA_URI_PATTERN.match(data_uri.strip())
    if not match:
        raise InputError("Image must be a base64 data URI (data:image/<type>;base64,...)")

    try:
        image_bytes = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InputError(f"Invalid base64 image data: {e}")

    if len(image_bytes) > max_size_mb * 1024 * 1024:
        raise InputError(f"Image exceeds {max_size_mb:g}MB limit")

    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.load()
            decoded = DecodedImage(
                mime_type=match.group("mime"),
                format=image.format or "unknown",
                width=image.width,
                height=image.height,
                size_bytes=len(image_bytes),
                warnings=_assess_quality(image),
            )
    except (UnidentifiedImageError, OSError) as e:
        raise InputError(f"Could not read image: {e}")

    return decoded


def _assess_quality(image: Image.Image) -> List[str]:
    """Cheap checks that hint at an unusable photo; never fatal."""
    warnings = []

    if min(image.width, image.height) < MIN_DIMENSION:
        warnings.append("Image is very small - details may be hard to distinguish")

    stat = ImageStat.Stat(image.convert("RGB"))
    mean_brightness = sum(stat.mean) / 3 / 255
    if mean_brightness < 0.2:
        warnings.append("Image is too dark")
    elif mean_brightness > 0.85:
        warnings.append("Image is overexposed")

    return warnings
