"""
Image re-encoding backed by Pillow.
"""

import logging
from io import BytesIO
from typing import Any, Dict

from PIL import Image, UnidentifiedImageError

from ..utils.error_handling import MalformedInputError
from .base import ImageRecoder

logger = logging.getLogger(__name__)

# Encoders without alpha or palette support
RGB_ONLY_FORMATS = {"JPEG"}

# Modes the PNG encoder writes directly
PNG_MODES = {"1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA"}


class PillowImageRecoder(ImageRecoder):
    """Re-encode any Pillow-readable image as PNG or JPEG."""

    def recode(self, data: bytes, target_format: str, options: Dict[str, Any]) -> bytes:
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise MalformedInputError(f"Cannot decode image: {e}")

        if target_format in RGB_ONLY_FORMATS and image.mode != "RGB":
            logger.debug(f"Converting {image.mode} image to RGB for {target_format}")
            image = image.convert("RGB")
        elif target_format == "PNG" and image.mode not in PNG_MODES:
            image = image.convert("RGBA")

        output = BytesIO()
        image.save(output, format=target_format, **options)
        return output.getvalue()
