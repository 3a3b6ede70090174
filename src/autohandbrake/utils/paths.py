"""Output path resolution."""

from pathlib import Path
from typing import Optional

from autohandbrake.config import CONTAINER_FORMATS
from autohandbrake.errors import PreconditionError
from autohandbrake.utils.logger import get_logger

logger = get_logger(__name__)

EXTENSION_FORMATS = {".mkv": "mkv", ".mp4": "mp4", ".m4v": "mp4"}


class OutputResolver:
    """Map an input file to its output path and container format.

    Exactly one of ``output_file`` and ``output_dir`` may be set. Without
    either, the output is written beside the input.
    """

    def __init__(
        self,
        output_file: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        format: Optional[str] = None,
        force: bool = False,
    ):
        if output_file and output_dir:
            raise PreconditionError("Use either an output file or an output directory, not both")
        if format is not None and format not in CONTAINER_FORMATS:
            raise PreconditionError(f"Unsupported output format: {format}")
        self.output_file = output_file
        self.output_dir = output_dir
        self.format = format
        self.force = force

    def resolve(self, input_path: Path) -> tuple[Path, str]:
        """Resolve the output path and format for one input.

        Args:
            input_path: Source file

        Returns:
            Tuple of (output path, container format)

        Raises:
            PreconditionError: If the format conflicts with the output file,
                the output would replace the input, or the output exists
                without force
        """
        if self.output_file:
            output_format = EXTENSION_FORMATS.get(self.output_file.suffix.lower())
            if output_format is None:
                raise PreconditionError(
                    f"Cannot determine container format from {self.output_file.name}"
                )
            if self.format and self.format != output_format:
                raise PreconditionError(
                    f"Output format '{self.format}' does not match output file "
                    f"{self.output_file.name}"
                )
            output_path = self.output_file
        else:
            output_format = self.format or "mkv"
            directory = self.output_dir or input_path.parent
            output_path = directory / f"{input_path.stem}.{output_format}"

        if output_path.resolve() == input_path.resolve():
            raise PreconditionError(f"Output would overwrite the input file: {input_path}")

        if output_path.exists() and not self.force:
            raise PreconditionError(f"Output file already exists: {output_path}")

        logger.debug(
            "Resolved output path",
            input=str(input_path),
            output=str(output_path),
            format=output_format,
        )
        return output_path, output_format
