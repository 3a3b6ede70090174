"""Track inspection using mediainfo."""

import json
import re
import subprocess
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Any, Optional

from autohandbrake.models.track import MediaReport, Track, TrackType
from autohandbrake.utils.language import normalize_language
from autohandbrake.utils.logger import get_logger

logger = get_logger(__name__)

# Menu entries are keyed by timestamp, e.g. "_00_12_34_567" or "_00_12_34567"
CHAPTER_KEY = re.compile(r"^_\d+_\d+_\d+_?\d+$")

TRACK_TYPES = {t.value.lower(): t for t in TrackType}


def _key(name: str) -> str:
    """Normalize field names across mediainfo versions (Format_profile == Format_Profile)."""
    return name.lstrip("@").replace("_", "").lower()


def _int_prefix(value: Optional[str]) -> Optional[int]:
    """Parse "1080", "1 080 pixels" or "2 (0x2)" into an integer."""
    if not value:
        return None
    match = re.match(r"^\s*([\d ]+)", value)
    if not match:
        return None
    digits = match.group(1).replace(" ", "")
    return int(digits) if digits else None


def _build_track(fields: dict[str, str], track_type: TrackType, ordinal: int, chapters: int) -> Track:
    title = fields.get("title")
    if track_type == TrackType.GENERAL:
        title = fields.get("movie") or fields.get("moviename") or title

    return Track(
        type=track_type,
        ordinal=ordinal,
        format=fields.get("format", ""),
        format_profile=fields.get("formatprofile", ""),
        language=normalize_language(fields.get("language")),
        title=title or None,
        is_default=fields.get("default", "").lower() == "yes",
        is_forced=fields.get("forced", "").lower() == "yes",
        codec_id=fields.get("codecid", ""),
        height=_int_prefix(fields.get("height")) if track_type == TrackType.VIDEO else None,
        stream_id=_int_prefix(fields.get("id")),
        chapter_count=chapters if track_type == TrackType.MENU else 0,
    )


def _assemble(raw_tracks: list[tuple[str, dict[str, str], int]]) -> MediaReport:
    """Turn (type, fields, chapter count) triples into a MediaReport."""
    counters: dict[TrackType, int] = {}
    tracks = []
    for type_name, fields, chapters in raw_tracks:
        track_type = TRACK_TYPES.get(type_name.lower())
        if track_type is None:
            logger.debug("Ignoring unknown track type", type=type_name)
            continue
        counters[track_type] = counters.get(track_type, 0) + 1
        tracks.append(_build_track(fields, track_type, counters[track_type], chapters))
    return MediaReport(tracks=tuple(tracks))


def parse_json(text: str) -> MediaReport:
    """Parse ``mediainfo --Output=JSON`` output.

    Args:
        text: Raw JSON document

    Returns:
        MediaReport with every recognised track

    Raises:
        json.JSONDecodeError: If the document is not valid JSON
    """
    data = json.loads(text)
    media: Any = data.get("media") or {}
    if isinstance(media, list):
        media = media[0] if media else {}

    raw_tracks = []
    for entry in media.get("track", []):
        fields = {
            _key(name): str(value)
            for name, value in entry.items()
            if not isinstance(value, (dict, list))
        }
        extra = entry.get("extra") or {}
        chapters = sum(1 for name in extra if CHAPTER_KEY.match(name))
        raw_tracks.append((entry.get("@type", ""), fields, chapters))

    return _assemble(raw_tracks)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_xml(text: str) -> MediaReport:
    """Parse ``mediainfo --Output=XML`` output.

    Handles both the namespaced ``<MediaInfo><media>`` layout and the
    legacy ``<Mediainfo><File>`` layout. Repeated fields keep their first
    value.

    Args:
        text: Raw XML document

    Returns:
        MediaReport with every recognised track

    Raises:
        xml.etree.ElementTree.ParseError: If the document is not valid XML
    """
    root = ET.fromstring(text)

    raw_tracks = []
    for element in root.iter():
        if _local(element.tag) != "track":
            continue
        type_name = element.get("type", "")
        fields: dict[str, str] = {}
        chapters = 0
        for child in element.iter():
            if child is element:
                continue
            name = _local(child.tag)
            if CHAPTER_KEY.match(name):
                chapters += 1
                continue
            if len(child) == 0:
                fields.setdefault(_key(name), (child.text or "").strip())
        raw_tracks.append((type_name, fields, chapters))

    return _assemble(raw_tracks)


class MediaInfoAdapter:
    """Inspect video files with mediainfo."""

    def __init__(self, executable: str, output: str = "json", timeout: int = 60):
        """Initialize the adapter.

        Args:
            executable: Path to the mediainfo binary
            output: Requested output encoding ("json" or "xml")
            timeout: Subprocess timeout in seconds
        """
        self.executable = executable
        self.output = output
        self.timeout = timeout

    def inspect(self, file_path: Path) -> MediaReport:
        """Extract track information from a media file.

        Args:
            file_path: Path to media file

        Returns:
            MediaReport with all tracks

        Raises:
            FileNotFoundError: If file doesn't exist
            subprocess.CalledProcessError: If mediainfo fails
            subprocess.TimeoutExpired: If mediainfo hangs
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        logger.debug("Inspecting tracks", file=str(file_path), output=self.output)

        cmd = [self.executable, f"--Output={self.output.upper()}", str(file_path)]

        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, check=True, timeout=self.timeout
            )

            if self.output == "json":
                report = parse_json(result.stdout)
            else:
                report = parse_xml(result.stdout)

        except subprocess.TimeoutExpired:
            logger.error("mediainfo timeout", file=str(file_path), timeout=self.timeout)
            raise
        except subprocess.CalledProcessError as e:
            logger.error(
                "mediainfo failed",
                file=str(file_path),
                returncode=e.returncode,
                stderr=e.stderr,
            )
            raise
        except (json.JSONDecodeError, ET.ParseError) as e:
            logger.error("Failed to parse mediainfo output", file=str(file_path), error=str(e))
            raise

        video = report.video
        logger.info(
            "Tracks inspected",
            file=str(file_path),
            audio_tracks=len(report.audio),
            languages=[t.language for t in report.audio],
            video_height=video.height if video else None,
            chapters=report.chapter_count,
        )

        return report
