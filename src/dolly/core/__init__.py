"""Core pipeline components."""

from .models import (
    AudioFile,
    ConvertedAudio,
    PipelineResult,
    RemoteAudioRef,
    SeparationTask,
    StemResult,
    TaskSnapshot,
    TaskStatus,
)
from .converter import AudioConverter
from .uploader import TemporaryUploader
from .audioshake import StemSeparationClient
from .pipeline import StemPipeline, format_stem_report

__all__ = [
    "AudioFile",
    "ConvertedAudio",
    "PipelineResult",
    "RemoteAudioRef",
    "SeparationTask",
    "StemResult",
    "TaskSnapshot",
    "TaskStatus",
    "AudioConverter",
    "TemporaryUploader",
    "StemSeparationClient",
    "StemPipeline",
    "format_stem_report",
]
