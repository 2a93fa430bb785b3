"""Utility modules."""

from .logging import setup_logging, get_logger
from .validation import (
    is_supported_audio_file,
    validate_input_file,
    ensure_https_url,
    require_https_url,
    is_success_status,
)
from .retry import RetryPolicy, call_with_retry

__all__ = [
    "setup_logging",
    "get_logger",
    "is_supported_audio_file",
    "validate_input_file",
    "ensure_https_url",
    "require_https_url",
    "is_success_status",
    "RetryPolicy",
    "call_with_retry",
]
