"""Configuration settings for Dolly."""

import os
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

from . import __version__
from .exceptions import ConfigError

# Pick up AUDIOSHAKE_API_KEY and overrides from a local .env file
load_dotenv()

API_KEY_ENV_VAR = "AUDIOSHAKE_API_KEY"

# Remote services (can be overridden via environment variables)
AUDIOSHAKE_API_BASE = os.getenv("DOLLY_AUDIOSHAKE_API_BASE", "https://api.audioshake.ai")
UPLOAD_URL = os.getenv("DOLLY_UPLOAD_URL", "https://0x0.st")
USER_AGENT = f"Dolly/{__version__}"

# Polling
POLL_INTERVAL = float(os.getenv("DOLLY_POLL_INTERVAL", "5"))  # seconds between status checks
TASK_TIMEOUT = float(os.getenv("DOLLY_TASK_TIMEOUT", "600"))  # measured from submission

# Per-request network timeouts (seconds)
REQUEST_TIMEOUT = 60.0
UPLOAD_TIMEOUT = 300.0

DEFAULT_STEMS: Tuple[str, ...] = ("vocals", "instrumental")
STEM_OUTPUT_FORMAT = "wav"

# Conversion target profile
CONVERTED_DIR_NAME = os.getenv("DOLLY_CONVERTED_DIR", "converted")
WAV_CODEC = "pcm_s24le"  # 24-bit PCM, little-endian
WAV_CHANNELS = 2
WAV_SAMPLE_RATE = 44100

SUPPORTED_AUDIO_EXTENSIONS = (
    ".mp3",
    ".wav",
    ".flac",
    ".aac",
    ".ogg",
    ".m4a",
    ".wma",
    ".aiff",
    ".alac",
    ".opus",
)


def supported_formats_label() -> str:
    """Supported extensions without dots, e.g. 'mp3, wav, flac'."""
    return ", ".join(ext.lstrip(".") for ext in SUPPORTED_AUDIO_EXTENSIONS)


def validate_config() -> None:
    """Validate configuration values."""
    if POLL_INTERVAL <= 0:
        raise ConfigError("Poll interval must be positive")

    if TASK_TIMEOUT <= 0:
        raise ConfigError("Task timeout must be positive")

    if not AUDIOSHAKE_API_BASE.startswith("https://"):
        raise ConfigError("AudioShake API base must be an https:// URL")

    if not CONVERTED_DIR_NAME or Path(CONVERTED_DIR_NAME).is_absolute():
        raise ConfigError("Converted directory must be a relative directory name")


def get_api_key() -> str:
    """Get the AudioShake API key from the environment."""
    api_key: Optional[str] = os.getenv(API_KEY_ENV_VAR)
    if not api_key or not api_key.strip():
        raise ConfigError(
            f"{API_KEY_ENV_VAR} is not set.\n\n"
            f"Get an API key from https://dashboard.audioshake.ai and either\n"
            f"export it or add it to a .env file in the current directory:\n"
            f"   {API_KEY_ENV_VAR}=<your key>\n"
        )
    return api_key.strip()


def get_converted_dir() -> Path:
    """Directory for converted WAV files, scoped to the working directory."""
    return Path.cwd() / CONVERTED_DIR_NAME


# Validate config on import
validate_config()
