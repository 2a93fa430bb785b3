"""Temporary file hosting for audio that must be reachable by URL.

Uses 0x0.st, which serves direct download URLs for files up to 512MB and
keeps them for up to a year depending on size.
"""

from pathlib import Path
from typing import Optional, Union

import requests

from ..config import UPLOAD_TIMEOUT, UPLOAD_URL, USER_AGENT
from ..exceptions import UploadError, ValidationError
from ..utils.logging import get_logger
from ..utils.validation import ensure_https_url, is_success_status
from .models import RemoteAudioRef

logger = get_logger(__name__)


class TemporaryUploader:
    """Publishes a local file and returns its public HTTPS URL."""

    def __init__(
        self,
        upload_url: str = UPLOAD_URL,
        session: Optional[requests.Session] = None,
        timeout: float = UPLOAD_TIMEOUT,
    ):
        self.upload_url = upload_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def upload(self, local_path: Union[str, Path]) -> RemoteAudioRef:
        """
        Upload a file in a single multipart request.

        Args:
            local_path: Path to the file to upload

        Returns:
            RemoteAudioRef with an https:// URL

        Raises:
            UploadError: On a non-2xx response, a network failure, or a
                response that is not an HTTPS URL
        """
        local_path = Path(local_path)
        file_name = local_path.name
        try:
            size_mb = local_path.stat().st_size / (1024 * 1024)
            logger.info(f"Uploading {file_name} ({size_mb:.2f} MB) to temporary hosting...")
            data = local_path.read_bytes()
        except OSError as e:
            raise UploadError(f"Could not read {local_path}: {e}", cause=e) from e

        files = {"file": (file_name, data, "audio/wav")}
        headers = {"User-Agent": USER_AGENT}

        try:
            response = self.session.post(
                self.upload_url, files=files, headers=headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise UploadError(f"Failed to upload file: {e}", cause=e) from e

        if not is_success_status(response.status_code):
            raise UploadError(
                f"Upload failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            url = ensure_https_url(response.text)
        except ValidationError as e:
            raise UploadError(f"Invalid URL format - {e}", body=response.text) from e

        logger.info(f"Upload complete: {url}")
        return RemoteAudioRef(url=url)


def upload_file_temporary(local_path: Union[str, Path]) -> RemoteAudioRef:
    """Upload local_path to the default hosting endpoint."""
    return TemporaryUploader().upload(local_path)
