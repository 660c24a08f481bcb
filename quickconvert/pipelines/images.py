"""Image to image re-encoding with fixed per-format encoder settings."""

import logging

from ..config import IMAGE_ENCODER_SETTINGS
from ..extract.base import ImageRecoder

logger = logging.getLogger(__name__)


def recode_image(file_content: bytes, output_format: str, recoder: ImageRecoder) -> bytes:
    """
    Re-encode an image for the requested output format.

    PNG output is lossless; JPEG output uses a fixed high-quality progressive
    setting (see IMAGE_ENCODER_SETTINGS).
    """
    settings = IMAGE_ENCODER_SETTINGS[output_format]
    logger.info(f"Converting image to {settings['format']}")
    return recoder.recode(file_content, settings["format"], dict(settings["options"]))
