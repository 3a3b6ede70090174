"""Configuration management for AutoHandBrake."""

import os
import re
from pathlib import Path
from typing import Any, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

# Max-resolution tiers mapped to HandBrake's --maxWidth value
RESOLUTION_TIERS = {
    "480p": 480,
    "720p": 1280,
    "1080p": 1920,
}

CONTAINER_FORMATS = ("mkv", "mp4")


class ToolsConfig(BaseModel):
    """External tool locations."""

    mediainfo: Optional[str] = Field(default=None, description="Explicit path to mediainfo")
    handbrake: Optional[str] = Field(default=None, description="Explicit path to HandBrakeCLI")
    mkvextract: Optional[str] = Field(default=None, description="Explicit path to mkvextract")
    search_paths: List[str] = Field(
        default_factory=list, description="Extra directories searched for tools"
    )
    inspect_timeout: int = Field(default=60, description="mediainfo timeout in seconds")
    mediainfo_output: Literal["json", "xml"] = Field(
        default="json", description="mediainfo output encoding"
    )


class AudioConfig(BaseModel):
    """Audio track selection policy."""

    stereo_downmix: bool = Field(
        default=True, description="Add a Pro Logic II AAC downmix of the default track"
    )
    always_ac3: bool = Field(default=False, description="Always add an AC3 track for the default track")
    ac3_for_hd: bool = Field(default=True, description="Add an AC3 track for DTS-HD MA sources")
    ignore_tracks: List[int] = Field(
        default_factory=list, description="1-based audio track positions to skip"
    )

    @field_validator("ignore_tracks")
    @classmethod
    def validate_ignore_tracks(cls, v: List[int]) -> List[int]:
        """Audio positions are 1-based."""
        if any(index < 1 for index in v):
            raise ValueError("Ignored audio track positions start at 1")
        return v


class VideoConfig(BaseModel):
    """Video encoder configuration."""

    encoder: Optional[str] = Field(default=None, description="Encoder override")
    quality: int = Field(default=0, description="Constant quality (0 selects the encoder default)")
    max_resolution: Optional[str] = Field(default=None, description="480p, 720p or 1080p")

    @field_validator("quality")
    @classmethod
    def validate_quality(cls, v: int) -> int:
        """Validate quality range."""
        if v != 0 and not 1 <= v <= 51:
            raise ValueError("Quality must be between 1 and 51")
        return v

    @field_validator("max_resolution")
    @classmethod
    def validate_max_resolution(cls, v: Optional[str]) -> Optional[str]:
        """Validate resolution tier."""
        if v is not None and v.lower() not in RESOLUTION_TIERS:
            raise ValueError(f"Max resolution must be one of {', '.join(RESOLUTION_TIERS)}")
        return v.lower() if v else v


class OutputConfig(BaseModel):
    """Static transcoding options."""

    format: Optional[str] = Field(default=None, description="Container format (mkv or mp4)")
    loose_anamorphic: bool = Field(default=True, description="Pass --loose-anamorphic")
    peak_framerate: bool = Field(default=True, description="Pass --pfr")
    decomb: bool = Field(default=True, description="Pass --decomb")
    optimize_streaming: bool = Field(default=False, description="Pass --optimize")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: Optional[str]) -> Optional[str]:
        """Validate container format."""
        if v is not None and v.lower() not in CONTAINER_FORMATS:
            raise ValueError("Output format must be 'mkv' or 'mp4'")
        return v.lower() if v else v


class ChaptersConfig(BaseModel):
    """Chapter name service configuration."""

    enabled: bool = Field(default=False, description="Look up chapter names")
    base_url: str = Field(default="https://www.chapterdb.org", description="Service base URL")
    api_key: Optional[str] = Field(default=None, description="Service API key")
    timeout: float = Field(default=10.0, description="HTTP timeout in seconds")
    best_result: bool = Field(default=True, description="Use only the most confirmed result")
    language: Optional[str] = Field(
        default=None, description="Preferred chapter name language (ISO 639-2)"
    )


class SubtitlesConfig(BaseModel):
    """Subtitle extraction configuration."""

    extract_all: bool = Field(default=False, description="Extract every subtitle track")
    output_dir: Optional[str] = Field(default=None, description="Directory for extracted files")


class ExecutionConfig(BaseModel):
    """Execution configuration."""

    dry_run: bool = Field(default=False, description="Report commands without running them")
    force: bool = Field(default=False, description="Overwrite existing output files")
    timeout_seconds: Optional[int] = Field(
        default=None, description="HandBrakeCLI timeout (None waits forever)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = Field(default="text", description="Log format (json or text)")
    level: str = Field(default="info", description="Log level")
    output: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        if v.lower() not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError("Invalid log level")
        return v.lower()


class Config(BaseModel):
    """Main configuration model."""

    tools: ToolsConfig = Field(default_factory=ToolsConfig, description="Tool locations")
    audio: AudioConfig = Field(default_factory=AudioConfig, description="Audio policy")
    video: VideoConfig = Field(default_factory=VideoConfig, description="Video settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output settings")
    chapters: ChaptersConfig = Field(
        default_factory=ChaptersConfig, description="Chapter lookup settings"
    )
    subtitles: SubtitlesConfig = Field(
        default_factory=SubtitlesConfig, description="Subtitle extraction settings"
    )
    execution: ExecutionConfig = Field(
        default_factory=ExecutionConfig, description="Execution configuration"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path) as f:
            raw_config = yaml.safe_load(f)

        if raw_config is None:
            raw_config = {}

        raw_config = cls._substitute_env_vars(raw_config)

        return cls(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """Recursively replace ${VAR_NAME} with os.environ['VAR_NAME']."""
        if isinstance(obj, dict):
            return {key: Config._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [Config._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            pattern = r"\$\{([^}]+)\}"

            def replace_var(match):
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    raise ValueError(
                        f"Environment variable '{var_name}' not found "
                        f"(referenced in configuration)"
                    )
                return value

            return re.sub(pattern, replace_var, obj)
        else:
            return obj

    @classmethod
    def from_defaults(cls) -> "Config":
        """Create configuration with default values."""
        return cls()

    def merged(self, overrides: dict[str, dict[str, Any]]) -> "Config":
        """Return a copy with section values replaced.

        ``None`` values are ignored so unset CLI options keep the file value.

        Args:
            overrides: Mapping of section name to field overrides

        Returns:
            New validated Config instance
        """
        data = self.model_dump()
        for section, values in overrides.items():
            for key, value in values.items():
                if value is not None:
                    data[section][key] = value
        return Config(**data)


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load configuration from file or use defaults.

    Args:
        path: Optional path to configuration file. If None, uses defaults.

    Returns:
        Config instance
    """
    if path is None:
        return Config.from_defaults()

    return Config.from_yaml(path)
