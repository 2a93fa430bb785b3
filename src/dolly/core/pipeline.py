"""Pipeline orchestration: convert, upload, separate.

Stages run strictly one after another. The first failure aborts the run
with a PipelineError naming the stage; nothing is rolled back, so the
converted file and the uploaded copy stay around for inspection.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Union

from ..config import DEFAULT_STEMS
from ..exceptions import ConversionError, DollyError, PipelineError, UploadError
from ..utils.logging import get_logger
from ..utils.performance import StageTimer
from ..utils.retry import RetryPolicy, call_with_retry
from ..utils.validation import validate_input_file
from .audioshake import StemSeparationClient
from .converter import AudioConverter
from .models import AudioFile, PipelineResult, StemResult
from .progress import ConsoleProgress
from .uploader import TemporaryUploader

logger = get_logger(__name__)

STAGE_VALIDATION = "validation"
STAGE_CONVERSION = "conversion"
STAGE_UPLOAD = "upload"
STAGE_SEPARATION = "separation"


class StemPipeline:
    """Runs one input file through conversion, upload and stem separation."""

    def __init__(
        self,
        converter: AudioConverter,
        uploader: TemporaryUploader,
        separator: StemSeparationClient,
        retry_policy: Optional[RetryPolicy] = None,
        progress: Optional[ConsoleProgress] = None,
    ):
        self.converter = converter
        self.uploader = uploader
        self.separator = separator
        self.retry_policy = retry_policy or RetryPolicy()
        self.progress = progress

    @contextmanager
    def _stage(self, name: str) -> Iterator[None]:
        """Label any Dolly error raised inside with the stage name."""
        if self.progress:
            self.progress.reset()
        try:
            with StageTimer(name):
                try:
                    yield
                finally:
                    if self.progress:
                        self.progress.finish()
        except DollyError as e:
            raise PipelineError(name, e) from e

    def run(
        self, input_path: Union[str, Path], stems: Sequence[str] = DEFAULT_STEMS
    ) -> PipelineResult:
        with self._stage(STAGE_VALIDATION):
            source = AudioFile.from_path(validate_input_file(input_path))

        with self._stage(STAGE_CONVERSION):
            converted = call_with_retry(
                lambda: self.converter.convert(source.path),
                self.retry_policy,
                exceptions=(ConversionError,),
            )
            logger.info(f"Ready to process: {converted.path}")

        with self._stage(STAGE_UPLOAD):
            remote = call_with_retry(
                lambda: self.uploader.upload(converted.path),
                self.retry_policy,
                exceptions=(UploadError,),
            )
            logger.info(f"Audio URL: {remote.url}")

        # Polling is never retried: a bad status response ends the run
        with self._stage(STAGE_SEPARATION):
            stems_out = self.separator.separate(remote.url, stems)

        return PipelineResult(
            source=source, converted=converted, remote=remote, stems=stems_out
        )


def format_stem_report(stems: List[StemResult]) -> str:
    """One block per stem label with a line per output format."""
    blocks = []
    for stem in stems:
        lines = [f"{stem.label}:"]
        lines.extend(f"  {fmt}: {url}" for fmt, url in stem.urls.items())
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
