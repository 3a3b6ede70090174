"""Inspected track data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TrackType(Enum):
    """Track kinds reported by mediainfo."""

    GENERAL = "General"
    VIDEO = "Video"
    AUDIO = "Audio"
    TEXT = "Text"
    MENU = "Menu"


@dataclass(frozen=True)
class Track:
    """Immutable snapshot of one track from a mediainfo report."""

    type: TrackType
    ordinal: int  # 1-based position within its type
    format: str = ""  # e.g. "DTS", "AC-3"
    format_profile: str = ""  # e.g. "MA / Core", "ES"
    language: str = "und"  # ISO 639-2 language code
    title: Optional[str] = None
    is_default: bool = False
    is_forced: bool = False
    codec_id: str = ""  # e.g. "A_DTS", "S_HDMV/PGS"
    height: Optional[int] = None  # Video only
    stream_id: Optional[int] = None  # Container track ID (1-based for Matroska)
    chapter_count: int = 0  # Menu only

    def __str__(self) -> str:
        """Human-readable representation."""
        flags = ""
        if self.is_default:
            flags += " [DEFAULT]"
        if self.is_forced:
            flags += " [FORCED]"
        profile = f" {self.format_profile}" if self.format_profile else ""
        title_part = f" ({self.title})" if self.title else ""
        return f"{self.type.value} #{self.ordinal}: {self.language} {self.format}{profile}{title_part}{flags}"


@dataclass(frozen=True)
class MediaReport:
    """All tracks of one inspected file, in report order."""

    tracks: tuple[Track, ...]

    def of_type(self, track_type: TrackType) -> list[Track]:
        """Tracks of one type, in ordinal order."""
        return [t for t in self.tracks if t.type == track_type]

    @property
    def audio(self) -> list[Track]:
        return self.of_type(TrackType.AUDIO)

    @property
    def video(self) -> Optional[Track]:
        videos = self.of_type(TrackType.VIDEO)
        return videos[0] if videos else None

    @property
    def general(self) -> Optional[Track]:
        general = self.of_type(TrackType.GENERAL)
        return general[0] if general else None

    @property
    def chapter_count(self) -> int:
        return sum(t.chapter_count for t in self.of_type(TrackType.MENU))
