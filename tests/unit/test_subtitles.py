"""Unit tests for subtitle selection and extraction."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from autohandbrake.core.subtitles import SubtitleExtractor, is_subtitle, subtitle_extension
from autohandbrake.models.track import MediaReport, Track, TrackType


def text_track(ordinal, codec, language="eng", default=False, forced=False, stream_id=None):
    return Track(
        type=TrackType.TEXT,
        ordinal=ordinal,
        codec_id=codec,
        language=language,
        is_default=default,
        is_forced=forced,
        stream_id=stream_id if stream_id is not None else ordinal + 2,
    )


@pytest.fixture
def report():
    return MediaReport(
        tracks=(
            Track(type=TrackType.GENERAL, ordinal=1, codec_id="S_TEXT/UTF8"),
            Track(type=TrackType.VIDEO, ordinal=1, codec_id="V_MPEG4/ISO/AVC", stream_id=1),
            Track(type=TrackType.AUDIO, ordinal=1, codec_id="A_DTS", is_default=True, stream_id=2),
            text_track(1, "S_HDMV/PGS", forced=True),
            text_track(2, "S_TEXT/UTF8", language="fre", default=True),
            text_track(3, "S_VOBSUB", language="ger"),
            text_track(4, "S_TEXT/ASS", language="jpn", default=True),
        )
    )


@pytest.fixture
def runner():
    return Mock()


class TestSubtitleMatching:
    """Test codec matching and naming helpers."""

    @pytest.mark.parametrize(
        "codec,expected",
        [
            ("S_TEXT/UTF8", True),
            ("S_TEXT/ASCII", True),
            ("S_HDMV/PGS", True),
            ("S_VOBSUB", True),
            ("S_TEXT/ASS", False),
            ("A_AC3", False),
        ],
    )
    def test_is_subtitle(self, codec, expected):
        assert is_subtitle(text_track(1, codec)) is expected

    def test_extension(self):
        assert subtitle_extension(text_track(1, "S_HDMV/PGS")) == ".sup"
        assert subtitle_extension(text_track(1, "S_VOBSUB")) == ".srt"
        assert subtitle_extension(text_track(1, "S_TEXT/UTF8")) == ".srt"


class TestSubtitleExtractor:
    """Test selection policy and extraction."""

    def test_select_default_and_forced(self, report, runner):
        selected = SubtitleExtractor(runner).select(report)

        assert [t.ordinal for t in selected] == [1, 2]

    def test_select_all(self, report, runner):
        selected = SubtitleExtractor(runner, extract_all=True).select(report)

        assert [t.ordinal for t in selected] == [1, 2, 3]

    def test_output_naming(self, report, runner, tmp_path):
        extractor = SubtitleExtractor(runner)
        source = tmp_path / "Movie.mkv"
        forced, default = extractor.select(report)

        assert extractor.output_path(source, forced) == tmp_path / "Movie.eng.forced.sup"
        assert extractor.output_path(source, default) == tmp_path / "Movie.fre.srt"
        assert extractor.output_path(source, default, Path("/subs")) == Path("/subs/Movie.fre.srt")

    def test_extract_uses_zero_based_ids(self, report, runner, tmp_path):
        source = tmp_path / "Movie.mkv"

        results = SubtitleExtractor(runner).extract(source, report)

        assert [r.status for r in results] == ["extracted", "extracted"]
        runner.extract.assert_any_call(source, 2, tmp_path / "Movie.eng.forced.sup")
        runner.extract.assert_any_call(source, 3, tmp_path / "Movie.fre.srt")

    def test_existing_output_skipped_and_continues(self, report, runner, tmp_path):
        source = tmp_path / "Movie.mkv"
        (tmp_path / "Movie.eng.forced.sup").touch()

        results = SubtitleExtractor(runner).extract(source, report)

        assert [r.status for r in results] == ["skipped", "extracted"]
        assert results[0].reason == "output_exists"
        runner.extract.assert_called_once_with(source, 3, tmp_path / "Movie.fre.srt")

    def test_force_overwrites(self, report, runner, tmp_path):
        source = tmp_path / "Movie.mkv"
        (tmp_path / "Movie.eng.forced.sup").touch()

        results = SubtitleExtractor(runner, force=True).extract(source, report)

        assert [r.status for r in results] == ["extracted", "extracted"]

    def test_dry_run(self, report, runner, tmp_path):
        results = SubtitleExtractor(runner, dry_run=True).extract(tmp_path / "Movie.mkv", report)

        assert [r.status for r in results] == ["dry_run", "dry_run"]
        runner.extract.assert_not_called()
