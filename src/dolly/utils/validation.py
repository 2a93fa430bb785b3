"""Validation utilities."""

import logging
import os
from pathlib import Path
from typing import Union

from ..config import SUPPORTED_AUDIO_EXTENSIONS, supported_formats_label
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


def is_supported_audio_file(path: Union[str, Path]) -> bool:
    """Check the file extension against the supported formats (case-insensitive)."""
    return Path(path).suffix.lower() in SUPPORTED_AUDIO_EXTENSIONS


def validate_input_file(path: Union[str, Path]) -> Path:
    """Validate that the input exists, is readable and has a supported extension."""
    input_path = Path(path)

    if not input_path.is_file() or not os.access(input_path, os.R_OK):
        raise ValidationError(f"File not found: {path}")

    if not is_supported_audio_file(input_path):
        extension = input_path.suffix[1:] if input_path.suffix else "unknown"
        raise ValidationError(
            f"Unsupported audio format: {path} ({extension})\n\n"
            f"Supported audio formats: {supported_formats_label()}"
        )

    return input_path


def ensure_https_url(url: str) -> str:
    """Upgrade an http:// URL to https://, then require https://."""
    url = url.strip()
    if url.startswith("http://"):
        logger.info("Upgrading HTTP URL to HTTPS for AudioShake compatibility...")
        url = "https://" + url[len("http://"):]
    return require_https_url(url)


def require_https_url(url: str) -> str:
    """Reject anything that is not an https:// URL."""
    if not url.startswith("https://"):
        raise ValidationError(f"AudioShake requires HTTPS URLs, got: {url!r}")
    return url


def is_success_status(status_code: int) -> bool:
    """True only for 2xx; redirects and other 3xx answers are failures."""
    return 200 <= status_code < 300
