"""Exception hierarchy for AutoHandBrake."""


class AutoHandBrakeError(Exception):
    """Base exception for AutoHandBrake errors."""

    pass


class ConfigurationError(AutoHandBrakeError):
    """Invalid setup that prevents any file from being processed."""

    pass


class ToolNotFoundError(ConfigurationError):
    """A required external tool could not be located."""

    def __init__(self, tool: str, searched: list[str]):
        self.tool = tool
        self.searched = searched
        super().__init__(f"{tool} not found (searched: {', '.join(searched) or 'PATH'})")


class PreconditionError(AutoHandBrakeError):
    """A per-file precondition failed; the file is skipped."""

    pass


class MetadataError(AutoHandBrakeError):
    """Inspected metadata is insufficient to plan an encode."""

    pass


class NoAudioTracksError(MetadataError):
    """The inspector reported no audio tracks."""

    pass


class NoVideoTrackError(MetadataError):
    """The inspector reported no video track."""

    pass


class ChapterLookupError(AutoHandBrakeError):
    """The chapter name service returned a non-success response."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RenderError(AutoHandBrakeError):
    """A plan cannot be rendered into a valid HandBrakeCLI invocation."""

    pass
