"""Unit tests for the video plan builder."""

import pytest

from autohandbrake.config import VideoConfig
from autohandbrake.core.video import VideoPlanBuilder, default_quality
from autohandbrake.errors import NoVideoTrackError
from autohandbrake.models.track import Track, TrackType


def video(height):
    return Track(type=TrackType.VIDEO, ordinal=1, format="AVC", height=height)


class TestDefaultQuality:
    """Test encoder family quality defaults."""

    @pytest.mark.parametrize(
        "encoder,quality",
        [
            ("x264", 18),
            ("x265", 21),
            ("nvenc_h264", 18),
            ("nvenc_h265", 21),
            ("qsv_h265", 21),
            ("vce_h264", 18),
            ("x265_10bit", 21),
        ],
    )
    def test_family(self, encoder, quality):
        assert default_quality(encoder) == quality


class TestVideoPlanBuilder:
    """Test encoder and quality selection."""

    def test_1080p_selects_high_efficiency(self):
        plan = VideoPlanBuilder(VideoConfig()).build(video(1080))

        assert plan.encoder == "x265"
        assert plan.quality == 21
        assert plan.max_width is None

    def test_720p_selects_baseline(self):
        plan = VideoPlanBuilder(VideoConfig()).build(video(720))

        assert plan.encoder == "x264"
        assert plan.quality == 18

    def test_2160p_selects_high_efficiency(self):
        assert VideoPlanBuilder(VideoConfig()).build(video(2160)).encoder == "x265"

    def test_encoder_override_drives_quality_default(self):
        plan = VideoPlanBuilder(VideoConfig(encoder="nvenc_h264")).build(video(1080))

        assert plan.encoder == "nvenc_h264"
        assert plan.quality == 18

    def test_quality_override(self):
        plan = VideoPlanBuilder(VideoConfig(quality=25)).build(video(1080))

        assert plan.quality == 25

    @pytest.mark.parametrize("tier,width", [("480p", 480), ("720p", 1280), ("1080p", 1920)])
    def test_max_resolution_tiers(self, tier, width):
        plan = VideoPlanBuilder(VideoConfig(max_resolution=tier)).build(video(1080))

        assert plan.max_width == width

    def test_unknown_height_uses_baseline(self):
        assert VideoPlanBuilder(VideoConfig()).build(video(None)).encoder == "x264"

    def test_missing_video_raises(self):
        with pytest.raises(NoVideoTrackError):
            VideoPlanBuilder(VideoConfig()).build(None)
