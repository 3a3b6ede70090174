"""Encoding plan data models."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class AudioEncoder(Enum):
    """HandBrakeCLI audio encoder tokens.

    The full set HandBrakeCLI accepts; the planner itself only emits copy,
    av_aac and ac3.
    """

    COPY = "copy"
    AAC = "av_aac"
    AC3 = "ac3"
    COPY_DTS = "copy:dts"
    COPY_DTSHD = "copy:dtshd"
    MP3 = "mp3"
    VORBIS = "vorbis"
    OPUS = "opus"


class Mixdown(Enum):
    """HandBrakeCLI mixdown tokens."""

    AUTO = "auto"
    MONO = "mono"
    STEREO = "stereo"
    PRO_LOGIC_I = "dpl1"
    PRO_LOGIC_II = "dpl2"
    SIX_CHANNEL = "6ch"


@dataclass(frozen=True)
class AudioTrackSpec:
    """One output audio track."""

    source: int  # 1-based source audio position
    encoder: AudioEncoder
    mixdown: Mixdown
    name: str


@dataclass(frozen=True)
class VideoPlan:
    """Chosen video encoder settings."""

    encoder: str
    quality: int
    max_width: Optional[int] = None


@dataclass(frozen=True)
class StaticOptions:
    """Options that do not depend on the source file."""

    format: str = "mkv"
    loose_anamorphic: bool = True
    peak_framerate: bool = True
    decomb: bool = True
    optimize_streaming: bool = False


@dataclass
class EncodingCommand:
    """A rendered HandBrakeCLI invocation."""

    executable: str
    arguments: list[str] = field(default_factory=list)
    input_path: Optional[Path] = None
    output_path: Optional[Path] = None

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.arguments]

    def __str__(self) -> str:
        return " ".join(f'"{arg}"' if " " in arg else arg for arg in self.argv)
