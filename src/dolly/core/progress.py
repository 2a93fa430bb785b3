"""Single-line console progress for conversion and task polling."""

import sys
from typing import Optional, TextIO


TERMINAL_STATUSES = frozenset({"completed", "failed", "cancelled"})


class ConsoleProgress:
    """Overwrites one console line with the latest progress update.

    Percentages never move backwards; ffmpeg occasionally reports a slightly
    smaller position after a seek. The line is closed once conversion hits
    100% or the task reports a terminal status.
    """

    def __init__(self, stream: Optional[TextIO] = None, enabled: bool = True):
        self.stream = stream or sys.stdout
        self.enabled = enabled
        self.last_percent = -1.0
        self._line_open = False

    def percent(self, value: float) -> None:
        """Report conversion progress (0-100)."""
        value = max(0.0, min(100.0, value))
        if value <= self.last_percent:
            return
        self.last_percent = value
        self._render(f"Progress: {value:.1f}%")
        if value >= 100.0:
            self.finish()

    def status(self, text: str) -> None:
        """Report the current remote task status."""
        self._render(f"Status: {text}...")
        if text in TERMINAL_STATUSES:
            self.finish()

    def finish(self) -> None:
        """End the progress line so later output starts on a fresh line."""
        if self._line_open:
            print(file=self.stream, flush=True)
            self._line_open = False

    def reset(self) -> None:
        """Close any open line and start counting from zero again."""
        self.finish()
        self.last_percent = -1.0

    def _render(self, text: str) -> None:
        if not self.enabled:
            return
        # Pad so a shorter update fully covers the previous one
        print(f"\r{text:<40}", end="", file=self.stream, flush=True)
        self._line_open = True
