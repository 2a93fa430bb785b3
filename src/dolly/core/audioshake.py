"""AudioShake stem separation client.

Submits a separation task for a publicly reachable HTTPS audio URL and polls
the task until the service reports a terminal status or the client-side time
budget runs out. See https://developer.audioshake.ai/tasks for the API.

There is no cancellation endpoint in use: once submitted, a task keeps
running remotely even if this client gives up on it.
"""

import json
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from ..config import (
    AUDIOSHAKE_API_BASE,
    DEFAULT_STEMS,
    POLL_INTERVAL,
    REQUEST_TIMEOUT,
    STEM_OUTPUT_FORMAT,
    TASK_TIMEOUT,
    USER_AGENT,
)
from ..exceptions import (
    ConfigError,
    SeparationCancelledError,
    SeparationError,
    SeparationTimeoutError,
    StatusCheckError,
    SubmissionError,
    ValidationError,
)
from ..utils.logging import get_logger
from ..utils.validation import is_success_status, require_https_url
from .models import SeparationTask, StemResult, TaskSnapshot, TaskStatus

logger = get_logger(__name__)

StatusCallback = Callable[[str], None]


class StemSeparationClient:
    """Client for the AudioShake tasks API."""

    def __init__(
        self,
        api_key: str,
        api_base: str = AUDIOSHAKE_API_BASE,
        session: Optional[requests.Session] = None,
        poll_interval: float = POLL_INTERVAL,
        timeout: float = TASK_TIMEOUT,
        request_timeout: float = REQUEST_TIMEOUT,
        on_status: Optional[StatusCallback] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not api_key:
            raise ConfigError("An AudioShake API key is required")
        if poll_interval <= 0 or timeout <= 0:
            raise ConfigError("Poll interval and timeout must be positive")

        self.api_key = api_key
        self.tasks_url = f"{api_base.rstrip('/')}/tasks"
        self.session = session or requests.Session()
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.request_timeout = request_timeout
        self.on_status = on_status
        self._clock = clock
        self._sleep = sleep

    def _headers(self) -> Dict[str, str]:
        return {"x-api-key": self.api_key, "User-Agent": USER_AGENT}

    @staticmethod
    def build_task_body(audio_url: str, stems: Sequence[str]) -> Dict[str, Any]:
        """Request body asking for one WAV target per stem model."""
        return {
            "url": audio_url,
            "targets": [
                {"model": stem, "formats": [STEM_OUTPUT_FORMAT]} for stem in stems
            ],
        }

    def separate(
        self, audio_url: str, stems: Sequence[str] = DEFAULT_STEMS
    ) -> List[StemResult]:
        """
        Separate the audio at audio_url into stems.

        Args:
            audio_url: Public https:// URL of the audio file
            stems: Stem models to extract (default: vocals, instrumental)

        Returns:
            Download URLs for each stem

        Raises:
            ValidationError: If audio_url is not https:// (no request is made)
            SubmissionError: If the task could not be created
            StatusCheckError: If a status poll fails
            SeparationError: If the task failed or was cancelled
            SeparationTimeoutError: If the task did not finish in time
        """
        require_https_url(audio_url)
        if not stems:
            raise ValidationError("At least one stem must be requested")

        task = self.submit(audio_url, stems)
        return self.wait_for_completion(task)

    def submit(self, audio_url: str, stems: Sequence[str]) -> SeparationTask:
        """Create the remote task. Single attempt."""
        logger.info("Submitting stem separation task to AudioShake...")
        body = self.build_task_body(audio_url, stems)
        logger.debug(json.dumps(body, indent=2))

        try:
            response = self.session.post(
                self.tasks_url,
                json=body,
                headers=self._headers(),
                timeout=self.request_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise SubmissionError(f"AudioShake API request failed: {e}", cause=e) from e

        if not is_success_status(response.status_code):
            raise SubmissionError(
                f"AudioShake API error ({response.status_code}): {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            task_id = response.json().get("id")
        except (ValueError, AttributeError) as e:
            raise SubmissionError(
                f"AudioShake returned an unreadable task response: {response.text}",
                status_code=response.status_code,
                body=response.text,
                cause=e,
            ) from e
        if not task_id:
            raise SubmissionError(
                f"AudioShake response did not include a task id: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        # The budget starts at submission, not at the first poll
        task = SeparationTask(task_id=str(task_id), submitted_at=self._clock())
        logger.info(f"Task created: {task.task_id}")
        return task

    def get_status(self, task_id: str) -> TaskSnapshot:
        """Fetch the current task status. Any failure is fatal."""
        try:
            response = self.session.get(
                f"{self.tasks_url}/{task_id}",
                headers=self._headers(),
                timeout=self.request_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise StatusCheckError(f"Failed to check task status: {e}", cause=e) from e

        if not is_success_status(response.status_code):
            raise StatusCheckError(
                f"Failed to check task status ({response.status_code}): {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise StatusCheckError(
                f"Unreadable task status response: {response.text}",
                status_code=response.status_code,
                body=response.text,
                cause=e,
            ) from e
        if not isinstance(data, dict):
            raise StatusCheckError(
                f"Unexpected task status response: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        return TaskSnapshot.from_response(data, task_id=task_id)

    def wait_for_completion(self, task: SeparationTask) -> List[StemResult]:
        """Poll task until it succeeds, fails, is cancelled or times out."""
        logger.info("Waiting for processing to complete...")

        while True:
            self._sleep(self.poll_interval)

            snapshot = self.get_status(task.task_id)
            task.observe(snapshot)
            if self.on_status:
                self.on_status(snapshot.raw_status or "unknown")

            if snapshot.is_terminal:
                return self._finish(task, snapshot)

            if snapshot.status is TaskStatus.COMPLETED:
                logger.debug("Task reported completed without stems, polling again")
            elif snapshot.status is TaskStatus.UNKNOWN:
                logger.debug(f"Unrecognised task status {snapshot.raw_status!r}")

            elapsed = self._clock() - task.submitted_at
            if elapsed > self.timeout:
                raise SeparationTimeoutError(
                    f"Task timeout after {self.timeout / 60:g} minutes "
                    f"(last status: {snapshot.raw_status or 'unknown'})"
                )

    @staticmethod
    def _finish(task: SeparationTask, snapshot: TaskSnapshot) -> List[StemResult]:
        """Turn a terminal snapshot into stems or the matching error."""
        if snapshot.is_success:
            logger.info(f"Stem separation completed after {task.polls} status checks")
            return list(snapshot.stems)

        if snapshot.status is TaskStatus.CANCELLED:
            raise SeparationCancelledError(
                f"Stem separation task {task.task_id} was cancelled by the service"
            )

        raise SeparationError(
            f"Stem separation failed: {snapshot.error or 'Unknown error'}"
        )


def separate_stems(
    audio_url: str,
    api_key: str,
    stems: Sequence[str] = DEFAULT_STEMS,
    on_status: Optional[StatusCallback] = None,
) -> List[StemResult]:
    """Separate audio_url into stems with default polling settings."""
    client = StemSeparationClient(api_key, on_status=on_status)
    return client.separate(audio_url, stems)
