"""Stage timing utilities."""

import time
from typing import Optional

from .logging import get_logger

logger = get_logger(__name__)


class StageTimer:
    """Context manager that logs how long a pipeline stage took."""

    def __init__(self, stage_name: str, clock=time.monotonic):
        self.stage_name = stage_name
        self._clock = clock
        self.start_time = 0.0
        self.duration: Optional[float] = None

    def __enter__(self):
        self.start_time = self._clock()
        logger.debug(f"Starting {self.stage_name}...")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = self._clock() - self.start_time
        if exc_type is None:
            logger.info(f"⏱️  {self.stage_name} completed in {self.duration:.2f}s")
        else:
            logger.error(f"⏱️  {self.stage_name} failed after {self.duration:.2f}s")
        return False
