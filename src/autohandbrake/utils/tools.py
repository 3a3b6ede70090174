"""Locate the external command-line tools."""

import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from autohandbrake.config import ToolsConfig
from autohandbrake.errors import ToolNotFoundError
from autohandbrake.utils.logger import get_logger

logger = get_logger(__name__)

# Executable names per tool and platform family
TOOL_NAMES = {
    "mediainfo": {"win32": ["MediaInfo.exe", "mediainfo.exe"], "default": ["mediainfo"]},
    "handbrake": {"win32": ["HandBrakeCLI.exe"], "default": ["HandBrakeCLI", "handbrake-cli"]},
    "mkvextract": {"win32": ["mkvextract.exe"], "default": ["mkvextract"]},
}

# Default install locations that are usually not on PATH
PLATFORM_SEARCH_PATHS = {
    "win32": [
        r"C:\Program Files\HandBrake",
        r"C:\Program Files\MediaInfo",
        r"C:\Program Files\MKVToolNix",
    ],
    "darwin": ["/Applications", "/opt/homebrew/bin", "/usr/local/bin"],
    "default": ["/usr/local/bin", "/usr/bin"],
}


@dataclass(frozen=True)
class ToolPaths:
    """Resolved executable paths, shared by all components of one run."""

    mediainfo: Optional[str] = None
    handbrake: Optional[str] = None
    mkvextract: Optional[str] = None


class ToolLocator:
    """Resolve tool executables from configuration, PATH and install dirs."""

    def __init__(self, config: ToolsConfig, platform: str = sys.platform):
        """Initialize tool locator.

        Args:
            config: Tool configuration
            platform: Platform identifier (defaults to sys.platform)
        """
        self.config = config
        self.platform = platform

    def _platform_key(self, mapping: dict) -> str:
        return self.platform if self.platform in mapping else "default"

    def search_paths(self) -> list[str]:
        """Directories searched in addition to PATH."""
        defaults = PLATFORM_SEARCH_PATHS[self._platform_key(PLATFORM_SEARCH_PATHS)]
        return [*self.config.search_paths, *defaults]

    def locate(self, tool: str) -> str:
        """Resolve one tool.

        An explicitly configured path wins; otherwise each platform-specific
        name is looked up on PATH, then in the extra search directories.

        Args:
            tool: Tool key ("mediainfo", "handbrake" or "mkvextract")

        Returns:
            Absolute path to the executable

        Raises:
            ToolNotFoundError: If the tool cannot be found
        """
        explicit = getattr(self.config, tool)
        if explicit:
            if Path(explicit).is_file() or shutil.which(explicit):
                logger.debug("Using configured tool path", tool=tool, path=explicit)
                return shutil.which(explicit) or explicit
            raise ToolNotFoundError(tool, [explicit])

        names = TOOL_NAMES[tool][self._platform_key(TOOL_NAMES[tool])]
        extra = os.pathsep.join(self.search_paths())

        for name in names:
            found = shutil.which(name) or shutil.which(name, path=extra)
            if found:
                logger.debug("Located tool", tool=tool, path=found)
                return found

        raise ToolNotFoundError(tool, ["PATH", *self.search_paths()])

    def resolve(self, required: list[str]) -> ToolPaths:
        """Resolve every required tool up front.

        Args:
            required: Tool keys that must be available

        Returns:
            ToolPaths with the required entries populated

        Raises:
            ToolNotFoundError: For the first missing tool
        """
        resolved = {tool: self.locate(tool) for tool in required}
        logger.info("Resolved external tools", **resolved)
        return ToolPaths(**resolved)
