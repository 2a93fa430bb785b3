"""Dolly - separate a local song into stems with the AudioShake API."""

__version__ = "0.1.0"
