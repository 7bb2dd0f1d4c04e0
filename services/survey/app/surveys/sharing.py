"""Public share link and QR image URL for a published survey."""

from __future__ import annotations

from urllib.parse import urlencode
from uuid import UUID


def build_share_url(base_url: str, survey_id: UUID | str) -> str:
    return f"{base_url.rstrip('/')}/survey/{survey_id}"


def build_qr_code_url(qr_api_url: str, share_url: str, size: str = "300x300") -> str:
    # The image itself is rendered by the third-party QR API.
    return f"{qr_api_url}?{urlencode({'size': size, 'data': share_url})}"
