"""Subtitle track selection and extraction."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from autohandbrake.core.executor import MkvExtractRunner
from autohandbrake.models.track import MediaReport, Track, TrackType
from autohandbrake.utils.logger import get_logger

logger = get_logger(__name__)

# Matroska codec IDs of extractable subtitle formats
TEXT_SUBTITLE = re.compile(r"^S_TEXT/(UTF8|ASCII)$", re.IGNORECASE)
PGS_SUBTITLE = re.compile(r"^S_HDMV/PGS$", re.IGNORECASE)
VOBSUB_SUBTITLE = re.compile(r"^S_VOBSUB$", re.IGNORECASE)
SUBTITLE_PATTERNS = (TEXT_SUBTITLE, PGS_SUBTITLE, VOBSUB_SUBTITLE)


def is_subtitle(track: Track) -> bool:
    """Whether a track's codec ID is a supported subtitle format."""
    return any(pattern.match(track.codec_id) for pattern in SUBTITLE_PATTERNS)


def subtitle_extension(track: Track) -> str:
    """File extension for an extracted subtitle track.

    The extension is a naming convention only; the stream is written as-is.
    """
    return ".sup" if PGS_SUBTITLE.match(track.codec_id) else ".srt"


@dataclass
class ExtractionResult:
    """Outcome for one subtitle track."""

    status: Literal["extracted", "skipped", "dry_run"]
    track: Track
    output_path: Path
    reason: Optional[str] = None

    def __str__(self) -> str:
        if self.status == "skipped":
            return f"{self.output_path.name}: Skipped ({self.reason})"
        if self.status == "dry_run":
            return f"{self.output_path.name}: Would extract track {self.track.stream_id}"
        return f"{self.output_path.name}: Extracted"


class SubtitleExtractor:
    """Select subtitle tracks and extract them with mkvextract."""

    def __init__(
        self,
        runner: MkvExtractRunner,
        extract_all: bool = False,
        force: bool = False,
        dry_run: bool = False,
    ):
        """Initialize subtitle extractor.

        Args:
            runner: mkvextract runner
            extract_all: Include tracks that are neither default nor forced
            force: Overwrite existing output files
            dry_run: Report planned extractions without running mkvextract
        """
        self.runner = runner
        self.extract_all = extract_all
        self.force = force
        self.dry_run = dry_run

    def select(self, report: MediaReport) -> list[Track]:
        """Pick the subtitle tracks to extract.

        Args:
            report: Inspected tracks of the source file

        Returns:
            Selected tracks in report order
        """
        selected = []
        for track in report.tracks:
            if track.type == TrackType.GENERAL or not is_subtitle(track):
                continue
            if not (self.extract_all or track.is_default or track.is_forced):
                logger.debug("Skipping optional subtitle", track=track.ordinal, language=track.language)
                continue
            selected.append(track)
        return selected

    def output_path(self, input_path: Path, track: Track, output_dir: Optional[Path] = None) -> Path:
        """Name the output file: <stem>.<lang>[.forced].<ext>."""
        directory = output_dir or input_path.parent
        forced = ".forced" if track.is_forced else ""
        return directory / f"{input_path.stem}.{track.language}{forced}{subtitle_extension(track)}"

    def extract(
        self,
        input_path: Path,
        report: MediaReport,
        output_dir: Optional[Path] = None,
    ) -> list[ExtractionResult]:
        """Extract the selected subtitle tracks of one file.

        Existing outputs are skipped unless forced; extraction continues with
        the next track.

        Args:
            input_path: Matroska source file
            report: Inspected tracks of the source file
            output_dir: Directory for output files (defaults to the input's)

        Returns:
            One ExtractionResult per selected track

        Raises:
            subprocess.CalledProcessError: If mkvextract fails
        """
        results = []
        for track in self.select(report):
            output_path = self.output_path(input_path, track, output_dir)

            if output_path.exists() and not self.force:
                logger.warning("Subtitle output exists, skipping", output=str(output_path))
                results.append(
                    ExtractionResult("skipped", track, output_path, reason="output_exists")
                )
                continue

            if track.stream_id is None:
                logger.warning("Subtitle track has no container ID", track=track.ordinal)
                results.append(ExtractionResult("skipped", track, output_path, reason="no_track_id"))
                continue

            # mediainfo IDs are 1-based, mkvextract IDs are 0-based
            track_id = track.stream_id - 1

            if self.dry_run:
                logger.info(
                    "DRY RUN: Would extract subtitle",
                    file=str(input_path),
                    track_id=track_id,
                    output=str(output_path),
                )
                results.append(ExtractionResult("dry_run", track, output_path))
                continue

            self.runner.extract(input_path, track_id, output_path)
            results.append(ExtractionResult("extracted", track, output_path))

        return results
