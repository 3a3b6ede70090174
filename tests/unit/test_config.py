"""Unit tests for configuration loading."""

import pytest
from pydantic import ValidationError

from autohandbrake.config import AudioConfig, Config, VideoConfig, load_config


def test_defaults():
    config = load_config()

    assert config.audio.stereo_downmix is True
    assert config.audio.always_ac3 is False
    assert config.audio.ac3_for_hd is True
    assert config.video.quality == 0
    assert config.chapters.enabled is False
    assert config.execution.dry_run is False


def test_from_yaml_with_env(tmp_path, monkeypatch):
    monkeypatch.setenv("CHAPTERDB_KEY", "abc123")
    path = tmp_path / "config.yaml"
    path.write_text(
        "audio:\n"
        "  always_ac3: true\n"
        "  ignore_tracks: [3]\n"
        "video:\n"
        "  encoder: nvenc_h265\n"
        "  max_resolution: 720P\n"
        "chapters:\n"
        "  enabled: true\n"
        "  api_key: ${CHAPTERDB_KEY}\n"
    )

    config = load_config(path)

    assert config.audio.always_ac3 is True
    assert config.audio.ignore_tracks == [3]
    assert config.video.encoder == "nvenc_h265"
    assert config.video.max_resolution == "720p"
    assert config.chapters.api_key == "abc123"


def test_missing_env_var(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("chapters:\n  api_key: ${AUTOHANDBRAKE_UNSET_VARIABLE}\n")

    with pytest.raises(ValueError, match="AUTOHANDBRAKE_UNSET_VARIABLE"):
        load_config(path)


def test_empty_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert load_config(path) == Config()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config.from_yaml(tmp_path / "missing.yaml")


def test_merged_ignores_none():
    config = Config(audio=AudioConfig(always_ac3=True))

    merged = config.merged({"audio": {"always_ac3": None, "stereo_downmix": False}})

    assert merged.audio.always_ac3 is True
    assert merged.audio.stereo_downmix is False
    assert config.audio.stereo_downmix is True


@pytest.mark.parametrize(
    "kwargs",
    [{"quality": 52}, {"quality": -1}, {"max_resolution": "4k"}],
)
def test_invalid_video(kwargs):
    with pytest.raises(ValidationError):
        VideoConfig(**kwargs)


def test_invalid_ignore_tracks():
    with pytest.raises(ValidationError):
        AudioConfig(ignore_tracks=[0])
