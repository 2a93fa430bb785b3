"""Test configuration and fixtures.

Provides reusable fixtures for:
- Temporary audio files
- Fake HTTP sessions and responses for the upload and AudioShake APIs
- A fake clock so polling tests never really sleep
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Optional

import pytest
import requests


def pytest_addoption(parser):
    parser.addoption(
        "--run-network",
        action="store_true",
        default=False,
        help="Run tests that require network access",
    )


def pytest_collection_modifyitems(config, items):
    run_network = config.getoption("--run-network") or os.getenv(
        "RUN_INTEGRATION_TESTS"
    ) == "1"
    if run_network:
        return

    skip_network = pytest.mark.skip(
        reason="requires network access (use --run-network or RUN_INTEGRATION_TESTS=1)"
    )
    for item in items:
        if "network" in item.keywords or "integration" in item.keywords:
            item.add_marker(skip_network)


# =============================================================================
# HTTP fakes
# =============================================================================


class FakeResponse:
    """Just enough of requests.Response for the clients."""

    def __init__(self, status_code: int = 200, text: str = "", json_data: Any = None):
        self.status_code = status_code
        if json_data is not None and not text:
            text = json.dumps(json_data)
        self.text = text
        self._json = json_data

    def json(self):
        if self._json is None:
            return json.loads(self.text)
        return self._json


class FakeSession:
    """Records requests and replays queued responses.

    Once the queue is empty, ``default`` is returned for every further call.
    Queued exceptions are raised instead of returned.
    """

    def __init__(self, responses: Optional[List[Any]] = None, default: Any = None):
        self.responses = list(responses or [])
        self.default = default
        self.calls: List[dict] = []

    def _next(self):
        item = self.responses.pop(0) if self.responses else self.default
        if item is None:
            raise AssertionError("FakeSession ran out of responses")
        if isinstance(item, BaseException):
            raise item
        return item

    def post(self, url, **kwargs):
        self.calls.append({"method": "POST", "url": url, **kwargs})
        return self._next()

    def get(self, url, **kwargs):
        self.calls.append({"method": "GET", "url": url, **kwargs})
        return self._next()

    @property
    def gets(self) -> List[dict]:
        return [c for c in self.calls if c["method"] == "GET"]

    @property
    def posts(self) -> List[dict]:
        return [c for c in self.calls if c["method"] == "POST"]


class FakeClock:
    """Monotonic clock that only advances when sleep() is called."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def status_response(status: str, stems=None, error=None, task_id="task-123") -> FakeResponse:
    body = {"id": task_id, "status": status}
    if stems is not None:
        body["stems"] = stems
    if error is not None:
        body["error"] = error
    return FakeResponse(200, json_data=body)


VOCALS_STEM = {
    "model": "vocals",
    "urls": {"wav": "https://cdn.audioshake.ai/task-123/vocals.wav"},
}
INSTRUMENTAL_STEM = {
    "model": "instrumental",
    "urls": {"wav": "https://cdn.audioshake.ai/task-123/instrumental.wav"},
}


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def connection_error():
    return requests.exceptions.ConnectionError("connection refused")


# =============================================================================
# Audio fixtures
# =============================================================================


@pytest.fixture
def mock_audio_file(tmp_path):
    """Create a mock mp3 input file."""
    audio_file = tmp_path / "song.mp3"
    audio_file.write_bytes(b"fake audio data")
    return audio_file


@pytest.fixture
def mock_wav_file(tmp_path):
    """Create a mock converted wav file."""
    converted = tmp_path / "converted"
    converted.mkdir()
    wav_file = converted / "song.wav"
    wav_file.write_bytes(b"RIFF" + b"\x00" * 2044)
    return wav_file


@pytest.fixture
def in_tmp_cwd(tmp_path, monkeypatch) -> Path:
    """Run the test with tmp_path as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


# =============================================================================
# Factory fixtures (test modules do not import conftest directly)
# =============================================================================


@pytest.fixture
def make_response():
    return FakeResponse


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_status():
    return status_response


@pytest.fixture
def vocals_stem():
    return dict(VOCALS_STEM)


@pytest.fixture
def instrumental_stem():
    return dict(INSTRUMENTAL_STEM)


@pytest.fixture(autouse=True)
def reset_dolly_logger():
    """CLI runs attach handlers to streams that are closed once the run ends."""
    yield
    logger = logging.getLogger("dolly")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
