"""HandBrakeCLI command rendering."""

from pathlib import Path
from typing import Optional, Sequence

from autohandbrake.errors import RenderError
from autohandbrake.models.plan import AudioTrackSpec, EncodingCommand, StaticOptions, VideoPlan

# HandBrakeCLI splits per-track audio options on this character and has no escape for it
LIST_DELIMITER = ","

FORMAT_FLAGS = {"mkv": "av_mkv", "mp4": "av_mp4"}

GENERIC_MARKERS = "--markers"


def markers_option(markers_file: Optional[Path] = None) -> str:
    """Chapter option: named markers from a CSV file, or generic markers."""
    if markers_file is None:
        return GENERIC_MARKERS
    return f"{GENERIC_MARKERS}={markers_file}"


def audio_lists(specs: Sequence[AudioTrackSpec]) -> tuple[str, str, str, str]:
    """Join the audio plan into HandBrake's four parallel lists.

    Args:
        specs: Audio plan in output order

    Returns:
        Tuple of (track numbers, encoders, mixdowns, names)

    Raises:
        RenderError: If a track name contains the list delimiter
    """
    for spec in specs:
        if LIST_DELIMITER in spec.name:
            raise RenderError(
                f"Audio track name {spec.name!r} contains the list delimiter {LIST_DELIMITER!r}"
            )

    return (
        LIST_DELIMITER.join(str(spec.source) for spec in specs),
        LIST_DELIMITER.join(spec.encoder.value for spec in specs),
        LIST_DELIMITER.join(spec.mixdown.value for spec in specs),
        LIST_DELIMITER.join(spec.name for spec in specs),
    )


class CommandRenderer:
    """Merge static options and plans into one HandBrakeCLI invocation."""

    def __init__(self, executable: str):
        self.executable = executable

    def render(
        self,
        options: StaticOptions,
        audio: Sequence[AudioTrackSpec],
        video: VideoPlan,
        chapter_option: Optional[str],
        input_path: Path,
        output_path: Path,
    ) -> EncodingCommand:
        """Render the argument list.

        Has no side effects; identical inputs give identical arguments.

        Args:
            options: Static transcoding options
            audio: Audio plan in output order
            video: Video plan
            chapter_option: Chapter markers option, or None for no chapters
            input_path: Source file
            output_path: Destination file

        Returns:
            EncodingCommand

        Raises:
            RenderError: If the audio plan cannot be expressed
        """
        args = ["-i", str(input_path), "-o", str(output_path)]
        args += ["-f", FORMAT_FLAGS[options.format]]

        if options.loose_anamorphic:
            args.append("--loose-anamorphic")
        if options.peak_framerate:
            args.append("--pfr")
        if options.decomb:
            args.append("--decomb")
        if options.optimize_streaming:
            args.append("--optimize")

        if audio:
            numbers, encoders, mixdowns, names = audio_lists(audio)
            args += ["-a", numbers, "-E", encoders, "-6", mixdowns, "-A", names]
        else:
            args += ["-a", "none"]

        args += ["-e", video.encoder, "-q", str(video.quality)]
        if video.max_width:
            args += ["-X", str(video.max_width)]

        if chapter_option:
            args.append(chapter_option)

        return EncodingCommand(
            executable=self.executable,
            arguments=args,
            input_path=input_path,
            output_path=output_path,
        )
