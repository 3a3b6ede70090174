"""Audio track planning."""

from typing import Iterable

from autohandbrake.config import AudioConfig
from autohandbrake.errors import NoAudioTracksError
from autohandbrake.models.plan import AudioEncoder, AudioTrackSpec, Mixdown
from autohandbrake.models.track import Track
from autohandbrake.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TITLE = "Main"

# Source titles that misdescribe a lossy AC3 encode
AC3_RENAMED_TITLES = {"Lossless", "3/2+1"}
AC3_TITLE = "Dolby Digital 5.1"


def dts_variant(format_profile: str) -> str:
    """Human-readable DTS flavour for a mediainfo format profile."""
    if format_profile.startswith("MA"):
        return "DTS-HD Master Audio"
    if format_profile.startswith("ES"):
        return "DTS-ES"
    return "DTS"


class AudioPlanBuilder:
    """Decide which audio tracks to emit for a source file."""

    def __init__(self, config: AudioConfig):
        """Initialize audio plan builder.

        Args:
            config: Audio policy configuration
        """
        self.stereo_downmix = config.stereo_downmix
        self.always_ac3 = config.always_ac3
        self.ac3_for_hd = config.ac3_for_hd
        self.ignore = set(config.ignore_tracks)

    def build(self, tracks: Iterable[Track]) -> list[AudioTrackSpec]:
        """Build the ordered output audio track list.

        For each source track, in order, the checks below run independently
        so one source track can yield several outputs:

        1. Default track with stereo downmix enabled: AAC Pro Logic II downmix
        2. DTS source: pass-through copy named after its DTS flavour
        3. AC-3 source, default track with always-AC3, or DTS-HD MA with
           AC3-for-HD: AC3 encode
        4. Neither AC-3 nor DTS source: pass-through copy

        Args:
            tracks: Audio tracks in source order

        Returns:
            List of AudioTrackSpec in emission order

        Raises:
            NoAudioTracksError: If there are no audio tracks
        """
        tracks = list(tracks)
        if not tracks:
            raise NoAudioTracksError("No audio tracks found")

        specs: list[AudioTrackSpec] = []
        for track in tracks:
            if track.ordinal in self.ignore:
                logger.debug("Ignoring audio track", track=track.ordinal)
                continue
            specs.extend(self._plan_track(track))

        logger.info(
            "Audio plan built",
            source_tracks=len(tracks),
            ignored=sorted(self.ignore),
            outputs=[spec.name for spec in specs],
        )
        return specs

    def _plan_track(self, track: Track) -> list[AudioTrackSpec]:
        specs = []
        title = track.title or ""
        lang = track.language
        fmt = track.format
        profile = track.format_profile

        if track.is_default and not title:
            title = DEFAULT_TITLE

        if track.is_default and self.stereo_downmix:
            specs.append(
                AudioTrackSpec(
                    source=track.ordinal,
                    encoder=AudioEncoder.AAC,
                    mixdown=Mixdown.PRO_LOGIC_II,
                    name=f"{title} Stereo (Dolby Pro Logic II / {lang})",
                )
            )

        if fmt.startswith("DTS"):
            specs.append(
                AudioTrackSpec(
                    source=track.ordinal,
                    encoder=AudioEncoder.COPY,
                    mixdown=Mixdown.AUTO,
                    name=f"{title} ({dts_variant(profile)} / {lang})",
                )
            )

        if (
            fmt.startswith("AC-3")
            or (self.always_ac3 and track.is_default)
            or (self.ac3_for_hd and profile.startswith("MA"))
        ):
            ac3_title = AC3_TITLE if title in AC3_RENAMED_TITLES else title
            specs.append(
                AudioTrackSpec(
                    source=track.ordinal,
                    encoder=AudioEncoder.AC3,
                    mixdown=Mixdown.AUTO,
                    name=f"{ac3_title} (AC-3 / {lang})",
                )
            )

        if not fmt.startswith("AC-3") and not fmt.startswith("DTS"):
            specs.append(
                AudioTrackSpec(
                    source=track.ordinal,
                    encoder=AudioEncoder.COPY,
                    mixdown=Mixdown.AUTO,
                    name=f"{title} ({fmt} / {lang})",
                )
            )

        if not specs:
            logger.debug("Audio track contributes no outputs", track=track.ordinal, format=fmt)

        return specs
