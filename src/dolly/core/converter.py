"""Audio conversion to the canonical WAV profile using ffmpeg."""

import subprocess
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from pydub.utils import mediainfo, which

from ..config import WAV_CHANNELS, WAV_CODEC, WAV_SAMPLE_RATE, get_converted_dir
from ..exceptions import ConversionError
from ..utils.logging import get_logger
from .models import ConvertedAudio

logger = get_logger(__name__)

ProgressCallback = Callable[[float], None]


class AudioConverter:
    """Converts any supported input to 24-bit PCM, stereo, 44.1kHz WAV.

    The caller is responsible for checking the input extension; the
    converter hands whatever it gets to ffmpeg.
    """

    def __init__(
        self,
        output_dir: Optional[Path] = None,
        ffmpeg_path: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
        popen=None,
        probe=None,
    ):
        self.output_dir = Path(output_dir) if output_dir else get_converted_dir()
        self.ffmpeg_path = ffmpeg_path
        self.on_progress = on_progress
        self._popen = popen or subprocess.Popen
        self._probe = probe or mediainfo
        self._last_percent = -1.0

    def output_path_for(self, input_path: Union[str, Path]) -> Path:
        """Where the converted file for input_path is written."""
        return self.output_dir / f"{Path(input_path).stem}.wav"

    def build_command(self, ffmpeg: str, input_path: Path, output_path: Path) -> List[str]:
        return [
            ffmpeg,
            "-hide_banner",
            "-nostdin",
            "-y",  # overwrite leftovers from a previous run
            "-i", str(input_path),
            "-vn",
            "-acodec", WAV_CODEC,
            "-ac", str(WAV_CHANNELS),
            "-ar", str(WAV_SAMPLE_RATE),
            "-f", "wav",
            "-progress", "pipe:1",
            "-nostats",
            str(output_path),
        ]

    def convert(self, input_path: Union[str, Path]) -> ConvertedAudio:
        """
        Convert input_path into the converted directory.

        Args:
            input_path: Path to a supported audio file

        Returns:
            ConvertedAudio pointing at <converted dir>/<input stem>.wav

        Raises:
            ConversionError: If ffmpeg is missing, cannot start or fails
        """
        input_path = Path(input_path)
        ffmpeg = self.ffmpeg_path or which("ffmpeg")
        if not ffmpeg:
            raise ConversionError(
                "ffmpeg not found. Install ffmpeg and make sure it is on your PATH."
            )

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConversionError(
                f"Could not create output directory {self.output_dir}: {e}"
            ) from e
        output_path = self.output_path_for(input_path)
        duration = self._probe_duration(input_path)
        self._last_percent = -1.0

        logger.info(f"Converting {input_path.name} to 24-bit WAV...")
        command = self.build_command(ffmpeg, input_path, output_path)
        logger.debug(f"Running: {subprocess.list2cmdline(command)}")

        try:
            returncode, details = self._run(command, duration, output_path)
        except OSError as e:
            self._discard(output_path)
            raise ConversionError(f"Could not write {output_path}: {e}") from e

        if returncode != 0:
            self._discard(output_path)
            raise ConversionError(
                f"ffmpeg exited with code {returncode}: {details or 'no error output'}"
            )

        if not output_path.exists():
            raise ConversionError(f"ffmpeg reported success but wrote no file: {output_path}")

        logger.info(f"Conversion complete: {output_path}")
        return ConvertedAudio(
            path=output_path,
            codec=WAV_CODEC,
            channels=WAV_CHANNELS,
            sample_rate=WAV_SAMPLE_RATE,
        )

    def _run(
        self, command: List[str], duration: Optional[float], output_path: Path
    ) -> Tuple[int, str]:
        """Run ffmpeg to completion; returns the exit code and the stderr tail."""
        with tempfile.TemporaryFile(mode="w+") as stderr:
            try:
                process = self._popen(
                    command,
                    stdout=subprocess.PIPE,
                    stderr=stderr,
                    text=True,
                )
            except OSError as e:
                raise ConversionError(f"Could not start ffmpeg: {e}") from e

            try:
                for line in process.stdout:
                    self._handle_progress_line(line, duration)
            except BaseException:
                process.kill()
                process.wait()
                self._discard(output_path)
                raise
            returncode = process.wait()

            stderr.seek(0)
            return returncode, stderr.read().strip()[-2000:]

    def _probe_duration(self, input_path: Path) -> Optional[float]:
        """Input duration in seconds, or None when ffprobe cannot tell."""
        try:
            info = self._probe(str(input_path))
            duration = float(info.get("duration") or 0)
        except (OSError, ValueError, TypeError) as e:
            logger.debug(f"Could not probe duration of {input_path}: {e}")
            return None
        return duration if duration > 0 else None

    def _handle_progress_line(self, line: str, duration: Optional[float]) -> None:
        key, _, value = line.strip().partition("=")
        if not self.on_progress:
            return
        if key == "progress" and value == "end":
            self._report(100.0)
        elif key in ("out_time_us", "out_time_ms") and duration:
            # ffmpeg reports both keys in microseconds
            try:
                position = int(value) / 1_000_000
            except ValueError:
                return
            self._report(min(100.0, 100.0 * position / duration))

    def _report(self, percent: float) -> None:
        if percent > self._last_percent:
            self._last_percent = percent
            self.on_progress(percent)

    @staticmethod
    def _discard(output_path: Path) -> None:
        try:
            output_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove partial output {output_path}: {e}")


def convert_to_wav(
    input_path: Union[str, Path], on_progress: Optional[ProgressCallback] = None
) -> ConvertedAudio:
    """Convert input_path into ./converted/ with the default settings."""
    return AudioConverter(on_progress=on_progress).convert(input_path)
