"""Validation and encoding helpers for uploaded images."""

import base64
import binascii
from typing import Optional, Sequence, Tuple

DEFAULT_IMAGE_TYPE = "image/jpeg"


def normalize_content_type(content_type: Optional[str]) -> str:
    """Lower-case a declared content type and drop any parameters."""
    if not content_type:
        return ""
    return content_type.lower().split(";", 1)[0].strip()


def is_image_type(content_type: Optional[str]) -> bool:
    """Return True when the declared type begins with `image/`."""
    return normalize_content_type(content_type).startswith("image/")


def first_file(files: Sequence):
    """Return the first entry of a multi-file drop, or None when empty."""
    if not files:
        return None
    return files[0]


def to_data_url(raw: bytes, content_type: Optional[str]) -> str:
    """Encode raw image bytes as a base64 data URL.

    Raises:
        ValueError: If the upload is empty.
    """
    if not raw:
        raise ValueError("Uploaded image is empty.")
    mime = normalize_content_type(content_type) or DEFAULT_IMAGE_TYPE
    b64_str = base64.b64encode(raw).decode("utf-8")
    return f"data:{mime};base64,{b64_str}"


def split_data_url(data_url: str) -> Tuple[str, bytes]:
    """Return `(mime, raw_bytes)` for a data URL or bare base64 string.

    Bare base64 payloads are treated as JPEG, which is what older clients sent.

    Raises:
        ValueError: If the payload is not valid base64.
    """
    if not data_url or not isinstance(data_url, str):
        raise ValueError("Image data must be a non-empty string.")

    mime = DEFAULT_IMAGE_TYPE
    payload = data_url.strip()
    if payload.startswith("data:"):
        header, sep, payload = payload.partition(",")
        if not sep or ";base64" not in header:
            raise ValueError("Image data URL must be base64-encoded.")
        mime = normalize_content_type(header[len("data:"):]) or DEFAULT_IMAGE_TYPE

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Invalid base64 image data.") from exc
    if not raw:
        raise ValueError("Image data is empty.")
    return mime, raw
