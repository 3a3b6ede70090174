"""Per-file processing result models."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

from autohandbrake.models.plan import EncodingCommand


@dataclass
class ProcessResult:
    """Result of processing a single file."""

    status: Literal["success", "skipped", "failed", "error", "dry_run"]
    file_path: Optional[Path] = None
    output_path: Optional[Path] = None
    command: Optional[EncodingCommand] = None
    duration_seconds: Optional[float] = None
    reason: Optional[str] = None  # Reason for skip
    error: Optional[str] = None  # Error message if failed

    def __str__(self) -> str:
        """Human-readable representation."""
        name = self.file_path.name if self.file_path else "<unknown>"
        if self.status == "success":
            output = self.output_path.name if self.output_path else "output"
            return f"{name}: Encoded to {output} in {self.duration_seconds or 0:.1f}s"
        elif self.status == "skipped":
            return f"{name}: Skipped ({self.reason})"
        elif self.status == "dry_run":
            return f"{name}: Would run {self.command}"
        else:
            return f"{name}: Failed ({self.error or self.reason})"
