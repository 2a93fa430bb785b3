"""Data models for the stem separation pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class AudioFile:
    """The local input file."""

    path: Path

    @classmethod
    def from_path(cls, path) -> "AudioFile":
        return cls(path=Path(path))

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def extension(self) -> str:
        return self.path.suffix.lower()

    @property
    def size_bytes(self) -> int:
        return self.path.stat().st_size


@dataclass(frozen=True)
class ConvertedAudio:
    """A WAV file in the fixed 24-bit / stereo / 44.1kHz profile."""

    path: Path
    codec: str = "pcm_s24le"
    channels: int = 2
    sample_rate: int = 44100


@dataclass(frozen=True)
class RemoteAudioRef:
    """Public HTTPS URL serving the converted audio."""

    url: str

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class StemResult:
    """Download URLs for one separated stem, keyed by output format."""

    label: str
    urls: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StemResult":
        return cls(
            label=str(data.get("model", "")),
            urls={str(k): str(v) for k, v in (data.get("urls") or {}).items()},
        )


class TaskStatus(str, Enum):
    """Remote separation task status."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TaskStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class TaskSnapshot:
    """One observation of a separation task, as returned by a status poll.

    A ``completed`` snapshot without stems is not terminal: some backends
    report completion before attaching results, so the client keeps polling
    until stems show up or the time budget runs out.
    """

    task_id: str
    status: TaskStatus
    raw_status: str = ""
    stems: Tuple[StemResult, ...] = ()
    error: Optional[str] = None

    @classmethod
    def from_response(cls, data: Dict[str, Any], task_id: str = "") -> "TaskSnapshot":
        raw_status = str(data.get("status") or "")
        stems = tuple(
            StemResult.from_dict(item)
            for item in (data.get("stems") or [])
            if isinstance(item, dict)
        )
        return cls(
            task_id=str(data.get("id") or task_id),
            status=TaskStatus.parse(raw_status),
            raw_status=raw_status,
            stems=stems,
            error=data.get("error") or None,
        )

    @property
    def is_success(self) -> bool:
        return self.status is TaskStatus.COMPLETED and bool(self.stems)

    @property
    def is_terminal(self) -> bool:
        if self.status is TaskStatus.COMPLETED:
            return self.is_success
        return self.status in (TaskStatus.FAILED, TaskStatus.CANCELLED)


@dataclass
class SeparationTask:
    """Client-side record of the single remote task of a run."""

    task_id: str
    submitted_at: float
    polls: int = 0
    last: Optional[TaskSnapshot] = None

    def observe(self, snapshot: TaskSnapshot) -> None:
        self.polls += 1
        self.last = snapshot


@dataclass
class PipelineResult:
    """Everything a successful run produced."""

    source: AudioFile
    converted: ConvertedAudio
    remote: RemoteAudioRef
    stems: List[StemResult]
