"""Image preparation service.

Provides a small OOP wrapper around Pillow that bounds the size of an
uploaded image before it is sent to the captioning model. Images that
already fit within `max_side` are passed through untouched; larger ones are
downscaled with their aspect ratio preserved and re-encoded as JPEG. Image
types Pillow cannot open (SVG, HEIC and the like) are forwarded as sent and
left for the model to judge.

Public class: `ImagePreparer`

Example:
    preparer = ImagePreparer(max_side=1536)
    data_url = preparer.prepare(data_url)
"""
from __future__ import annotations

import base64
import io
import logging
from typing import Tuple

from PIL import Image

from utils.media_validation import split_data_url


class ImagePreparer:
    """Bound image dimensions for transport to a vision model.

    Args:
        max_side: Maximum width and height in pixels.
        background: Color used when flattening images with alpha to RGB.
        quality: JPEG quality used when an image has to be re-encoded.
    """

    def __init__(self, max_side: int = 1536, background: Tuple[int, int, int] | None = None, quality: int = 90):
        if max_side <= 0:
            raise ValueError("max_side must be positive.")
        self.max_side = max_side
        self.background = background or (255, 255, 255)
        self.quality = quality

    def prepare(self, data_url: str) -> str:
        """Return a data URL whose image fits within `max_side`.

        Raises:
            ValueError: If the data is not valid base64.
        """
        _, raw = split_data_url(data_url)

        try:
            src = Image.open(io.BytesIO(raw))
            src.load()
        except Exception as exc:
            logging.info("Forwarding image Pillow cannot open unchanged: %s", exc)
            return data_url

        if max(src.size) <= self.max_side:
            return data_url

        src = src.convert("RGBA")
        src.thumbnail((self.max_side, self.max_side), Image.LANCZOS)

        # Flatten alpha against the background color
        background = Image.new("RGB", src.size, self.background)
        background.paste(src, mask=src.split()[3])

        out_io = io.BytesIO()
        background.save(out_io, format="JPEG", quality=self.quality)
        b64_str = base64.b64encode(out_io.getvalue()).decode("utf-8")
        return f"data:image/jpeg;base64,{b64_str}"
