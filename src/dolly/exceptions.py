"""Custom exceptions for Dolly."""

from typing import Optional


class DollyError(Exception):
    """Base exception for Dolly."""
    pass


class ConfigError(DollyError):
    """Missing or invalid configuration."""
    pass


class ValidationError(DollyError):
    """Invalid input path, extension or URL."""
    pass


class ConversionError(DollyError):
    """Error converting audio to the target WAV profile."""
    pass


class RemoteServiceError(DollyError):
    """Error talking to a remote HTTP service.

    Carries the HTTP status code and response body when the service answered,
    or the underlying transport exception when it did not.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.status_code = status_code
        self.body = body
        self.cause = cause
        super().__init__(message)


class UploadError(RemoteServiceError):
    """Error uploading audio to temporary hosting."""
    pass


class SubmissionError(RemoteServiceError):
    """The separation service rejected the task submission."""
    pass


class StatusCheckError(RemoteServiceError):
    """A task status poll failed."""
    pass


class SeparationError(DollyError):
    """The separation task finished without results."""
    pass


class SeparationCancelledError(SeparationError):
    """The separation task was cancelled on the service side."""
    pass


class SeparationTimeoutError(SeparationError):
    """The separation task did not finish within the polling budget."""
    pass


class PipelineError(DollyError):
    """A pipeline stage failed; wraps the stage's own error."""

    def __init__(self, stage: str, cause: DollyError):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage} failed: {cause}")
