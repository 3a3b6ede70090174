"""Video encoder planning."""

import re
from typing import Optional

from autohandbrake.config import RESOLUTION_TIERS, VideoConfig
from autohandbrake.errors import NoVideoTrackError
from autohandbrake.models.plan import VideoPlan
from autohandbrake.models.track import Track
from autohandbrake.utils.logger import get_logger

logger = get_logger(__name__)

BASELINE_ENCODER = "x264"
HIGH_EFFICIENCY_ENCODER = "x265"
HIGH_EFFICIENCY_MIN_HEIGHT = 1080

# Default constant quality per encoder family. Hardware variants such as
# nvenc_h265, qsv_h264 or x265_10bit share their family's default.
FAMILY_QUALITY = (
    (re.compile(r"265|hevc", re.IGNORECASE), 21),
    (re.compile(r"264|avc", re.IGNORECASE), 18),
)
FALLBACK_QUALITY = 20


def default_quality(encoder: str) -> int:
    """Default constant quality for an encoder name."""
    for pattern, quality in FAMILY_QUALITY:
        if pattern.search(encoder):
            return quality
    logger.warning("Unknown encoder family, using fallback quality", encoder=encoder)
    return FALLBACK_QUALITY


class VideoPlanBuilder:
    """Choose encoder, quality and size limit for a source video track."""

    def __init__(self, config: VideoConfig):
        """Initialize video plan builder.

        Args:
            config: Video configuration with optional overrides
        """
        self.encoder = config.encoder
        self.quality = config.quality
        self.max_resolution = config.max_resolution

    def build(self, video: Optional[Track]) -> VideoPlan:
        """Build the video plan.

        Args:
            video: First video track of the source, if any

        Returns:
            VideoPlan

        Raises:
            NoVideoTrackError: If no video track was detected
        """
        if video is None:
            raise NoVideoTrackError("No video track found")

        height = video.height or 0
        if self.encoder:
            encoder = self.encoder
        elif height >= HIGH_EFFICIENCY_MIN_HEIGHT:
            encoder = HIGH_EFFICIENCY_ENCODER
        else:
            encoder = BASELINE_ENCODER

        quality = self.quality or default_quality(encoder)
        max_width = RESOLUTION_TIERS[self.max_resolution] if self.max_resolution else None

        plan = VideoPlan(encoder=encoder, quality=quality, max_width=max_width)
        logger.info(
            "Video plan built",
            height=video.height,
            encoder=plan.encoder,
            quality=plan.quality,
            max_width=plan.max_width,
        )
        return plan
