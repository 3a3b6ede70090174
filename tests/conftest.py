"""Shared pytest fixtures for AutoHandBrake tests."""

import json

import pytest

from autohandbrake.config import AudioConfig, Config
from autohandbrake.models.track import MediaReport, Track, TrackType


def audio_track(ordinal=1, format="AC-3", profile="", language="eng", title=None, default=False):
    """Build an audio Track with sensible defaults."""
    return Track(
        type=TrackType.AUDIO,
        ordinal=ordinal,
        format=format,
        format_profile=profile,
        language=language,
        title=title,
        is_default=default,
    )


@pytest.fixture
def default_config():
    """Create a default configuration for testing."""
    return Config()


@pytest.fixture
def all_audio_policies():
    """Audio policy with every optional output enabled."""
    return AudioConfig(stereo_downmix=True, always_ac3=True, ac3_for_hd=True)


@pytest.fixture
def bluray_report():
    """General + 1080p video + default untitled DTS-HD MA English track."""
    return MediaReport(
        tracks=(
            Track(type=TrackType.GENERAL, ordinal=1, title="Blade Runner"),
            Track(type=TrackType.VIDEO, ordinal=1, format="AVC", height=1080, stream_id=1),
            Track(
                type=TrackType.AUDIO,
                ordinal=1,
                format="DTS",
                format_profile="MA / Core",
                language="eng",
                title=None,
                is_default=True,
                stream_id=2,
            ),
        )
    )


@pytest.fixture
def mediainfo_json():
    """mediainfo --Output=JSON document for a Blu-ray remux."""
    return json.dumps(
        {
            "creatingLibrary": {"name": "MediaInfoLib", "version": "23.10"},
            "media": {
                "@ref": "/media/movie.mkv",
                "track": [
                    {"@type": "General", "Format": "Matroska", "Movie": "Blade Runner"},
                    {
                        "@type": "Video",
                        "ID": "1",
                        "Format": "AVC",
                        "CodecID": "V_MPEG4/ISO/AVC",
                        "Height": "1080",
                        "Default": "Yes",
                        "Forced": "No",
                    },
                    {
                        "@type": "Audio",
                        "@typeorder": "1",
                        "ID": "2",
                        "Format": "DTS",
                        "Format_Profile": "MA / Core",
                        "CodecID": "A_DTS",
                        "Language": "en",
                        "Default": "Yes",
                        "Forced": "No",
                    },
                    {
                        "@type": "Audio",
                        "@typeorder": "2",
                        "ID": "3",
                        "Format": "AC-3",
                        "CodecID": "A_AC3",
                        "Language": "fr",
                        "Title": "Commentary",
                        "Default": "No",
                        "Forced": "No",
                    },
                    {
                        "@type": "Text",
                        "@typeorder": "1",
                        "ID": "4",
                        "Format": "PGS",
                        "CodecID": "S_HDMV/PGS",
                        "Language": "en",
                        "Default": "No",
                        "Forced": "Yes",
                    },
                    {
                        "@type": "Menu",
                        "extra": {
                            "_00_00_00_000": "en:Chapter 1",
                            "_00_12_30_500": "en:Chapter 2",
                            "_00_25_01_250": "en:Chapter 3",
                        },
                    },
                ],
            },
        }
    )


@pytest.fixture
def make_audio():
    """Factory for audio tracks."""
    return audio_track
