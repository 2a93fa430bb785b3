"""End-to-end run against the real upload host and AudioShake.

The conversion test needs ffmpeg; the full run also needs network access
and AUDIOSHAKE_API_KEY. Both are skipped unless --run-network or
RUN_INTEGRATION_TESTS=1 is given.
"""

import os
import shutil
import subprocess
import wave

import pytest

from dolly.core.audioshake import StemSeparationClient
from dolly.core.converter import AudioConverter
from dolly.core.pipeline import StemPipeline
from dolly.core.uploader import TemporaryUploader


@pytest.fixture
def sine_mp3(tmp_path):
    if not shutil.which("ffmpeg"):
        pytest.skip("ffmpeg not installed")
    path = tmp_path / "sine.mp3"
    subprocess.run(
        ["ffmpeg", "-y", "-f", "lavfi", "-i", "sine=frequency=440:duration=5", str(path)],
        check=True,
        capture_output=True,
    )
    return path


@pytest.mark.integration
def test_convert_real_file(sine_mp3, tmp_path):
    converted = AudioConverter(output_dir=tmp_path / "converted").convert(sine_mp3)

    with wave.open(str(converted.path), "rb") as wav:
        assert wav.getnchannels() == 2
        assert wav.getframerate() == 44100
        assert wav.getsampwidth() == 3
        assert wav.getnframes() > 0


@pytest.mark.network
@pytest.mark.integration
def test_full_pipeline_real(sine_mp3, tmp_path):
    api_key = os.getenv("AUDIOSHAKE_API_KEY")
    if not api_key:
        pytest.skip("AUDIOSHAKE_API_KEY not set")

    pipeline = StemPipeline(
        converter=AudioConverter(output_dir=tmp_path / "converted"),
        uploader=TemporaryUploader(),
        separator=StemSeparationClient(api_key),
    )
    result = pipeline.run(sine_mp3, stems=["vocals"])

    assert result.remote.url.startswith("https://")
    assert result.stems
    assert all(url.startswith("https://") for stem in result.stems for url in stem.urls.values())
