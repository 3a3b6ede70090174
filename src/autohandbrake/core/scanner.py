"""Input discovery for batch encodes."""

from pathlib import Path
from typing import Iterable, List

from autohandbrake.utils.logger import get_logger

logger = get_logger(__name__)


class FileScanner:
    """Expand input arguments into video files."""

    SUPPORTED_EXTENSIONS = {".mkv", ".mp4", ".m4v", ".avi", ".mov", ".ts", ".m2ts", ".wmv", ".mpg"}

    def __init__(self, extensions: set[str] | None = None):
        if extensions is None:
            extensions = self.SUPPORTED_EXTENSIONS
        # Normalize extensions (leading dot, lowercase)
        self.extensions = {
            ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions
        }

    def scan(self, path: Path, recursive: bool = True) -> List[Path]:
        """Scan a path for video files.

        A file is returned as-is whatever its extension, since the caller
        named it explicitly.

        Args:
            path: File or directory
            recursive: If True, scan subdirectories recursively

        Returns:
            List of video file paths, sorted by path

        Raises:
            FileNotFoundError: If path doesn't exist
        """
        if not path.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        if path.is_file():
            return [path]

        candidates = path.rglob("*") if recursive else path.glob("*")
        files = sorted(
            p for p in candidates if p.is_file() and p.suffix.lower() in self.extensions
        )

        logger.info(
            "Directory scan complete",
            directory=str(path),
            recursive=recursive,
            total_files=len(files),
        )
        return files

    def expand(
        self, inputs: Iterable[Path], recursive: bool = True, keep_missing: bool = False
    ) -> List[Path]:
        """Expand several inputs, keeping their order and dropping duplicates.

        With keep_missing, a path that does not exist is passed through
        unchanged so the caller can report it alongside the other inputs.
        """
        seen = set()
        files = []
        for path in inputs:
            try:
                found = self.scan(path, recursive=recursive)
            except FileNotFoundError:
                if not keep_missing:
                    raise
                logger.warning("Input not found", path=str(path))
                found = [path]
            for file in found:
                if file not in seen:
                    seen.add(file)
                    files.append(file)
        return files
