"""Runners for the external transcoding and extraction tools."""

import subprocess
import time
from pathlib import Path
from typing import Optional

from autohandbrake.models.plan import EncodingCommand
from autohandbrake.utils.logger import get_logger

logger = get_logger(__name__)


class HandBrakeRunner:
    """Execute rendered HandBrakeCLI commands."""

    def __init__(self, timeout_seconds: Optional[int] = None):
        """Initialize runner.

        Args:
            timeout_seconds: Maximum time for one encode (None waits forever)
        """
        self.timeout_seconds = timeout_seconds

    def run(self, command: EncodingCommand) -> float:
        """Run one encode.

        HandBrakeCLI output is passed through to the terminal so its
        progress stays visible.

        Args:
            command: Rendered command

        Returns:
            Duration in seconds

        Raises:
            subprocess.CalledProcessError: If HandBrakeCLI exits non-zero
            subprocess.TimeoutExpired: If the encode exceeds the timeout
        """
        logger.info("Starting encode", file=str(command.input_path), command=str(command))
        start_time = time.monotonic()

        try:
            subprocess.run(command.argv, check=True, timeout=self.timeout_seconds)
        except subprocess.TimeoutExpired:
            logger.error(
                "HandBrakeCLI timeout",
                file=str(command.input_path),
                timeout=self.timeout_seconds,
            )
            raise
        except subprocess.CalledProcessError as e:
            logger.error(
                "HandBrakeCLI failed",
                file=str(command.input_path),
                returncode=e.returncode,
            )
            raise

        duration = time.monotonic() - start_time
        logger.info(
            "Encode finished",
            file=str(command.input_path),
            output=str(command.output_path),
            duration_s=round(duration, 1),
        )
        return duration


class MkvExtractRunner:
    """Extract raw track streams with mkvextract."""

    def __init__(self, executable: str, timeout_seconds: int = 600):
        """Initialize runner.

        Args:
            executable: Path to the mkvextract binary
            timeout_seconds: Maximum time for one extraction
        """
        self.executable = executable
        self.timeout_seconds = timeout_seconds

    def build_command(self, input_path: Path, track_id: int, output_path: Path) -> list[str]:
        """Build the mkvextract command for one track.

        Args:
            input_path: Matroska source file
            track_id: 0-based mkvextract track ID
            output_path: Destination file

        Returns:
            Argument list
        """
        return [self.executable, "tracks", str(input_path), f"{track_id}:{output_path}"]

    def extract(self, input_path: Path, track_id: int, output_path: Path) -> None:
        """Extract one track.

        Raises:
            subprocess.CalledProcessError: If mkvextract exits non-zero
            subprocess.TimeoutExpired: If extraction exceeds the timeout
        """
        cmd = self.build_command(input_path, track_id, output_path)
        logger.debug("Executing mkvextract", file=str(input_path), command=cmd)

        try:
            subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            logger.error("mkvextract timeout", file=str(input_path), timeout=self.timeout_seconds)
            raise
        except subprocess.CalledProcessError as e:
            logger.error(
                "mkvextract failed",
                file=str(input_path),
                track_id=track_id,
                returncode=e.returncode,
                stderr=e.stderr,
            )
            raise

        logger.info(
            "Extracted track",
            file=str(input_path),
            track_id=track_id,
            output=str(output_path),
        )
