"""Helpers for inline ``data:<mime>;base64,<payload>`` URLs."""
import re
from typing import Optional

_MEDIA_TYPE_RE = re.compile(r"^data:([A-Za-z0-9.+/-]+);base64")


def get_media_type_from_data_url(data_url: str) -> Optional[str]:
    """Return the MIME type of a base64 data URL, or None if it is not one."""
    match = _MEDIA_TYPE_RE.match(data_url)
    return match.group(1) if match else None


def get_base64_from_data_url(data_url: str) -> Optional[str]:
    """Return the base64 payload after the first comma, or None."""
    _, sep, payload = data_url.partition(",")
    return payload if sep else None
