"""Unit tests for output path resolution."""

from pathlib import Path

import pytest

from autohandbrake.errors import PreconditionError
from autohandbrake.utils.paths import OutputResolver


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "in" / "Movie.mkv"
    path.parent.mkdir()
    path.touch()
    return path


class TestOutputResolver:
    """Test output file and directory modes."""

    def test_output_file_format_from_extension(self, source, tmp_path):
        resolver = OutputResolver(output_file=tmp_path / "out.m4v")

        assert resolver.resolve(source) == (tmp_path / "out.m4v", "mp4")

    def test_output_file_format_conflict(self, source, tmp_path):
        resolver = OutputResolver(output_file=tmp_path / "out.mkv", format="mp4")

        with pytest.raises(PreconditionError, match="does not match"):
            resolver.resolve(source)

    def test_output_file_unknown_extension(self, source, tmp_path):
        with pytest.raises(PreconditionError):
            OutputResolver(output_file=tmp_path / "out.avi").resolve(source)

    def test_output_dir(self, source, tmp_path):
        resolver = OutputResolver(output_dir=tmp_path / "out", format="mp4")

        assert resolver.resolve(source) == (tmp_path / "out" / "Movie.mp4", "mp4")

    def test_output_dir_defaults_to_mkv(self, source, tmp_path):
        assert OutputResolver(output_dir=tmp_path).resolve(source) == (tmp_path / "Movie.mkv", "mkv")

    def test_beside_input(self, source):
        assert OutputResolver(format="mp4").resolve(source) == (source.with_suffix(".mp4"), "mp4")

    def test_refuses_to_overwrite_input(self, source):
        with pytest.raises(PreconditionError, match="overwrite the input"):
            OutputResolver(format="mkv", force=True).resolve(source)

    def test_existing_output_requires_force(self, source, tmp_path):
        existing = tmp_path / "Movie.mkv"
        existing.touch()

        with pytest.raises(PreconditionError, match="already exists"):
            OutputResolver(output_dir=tmp_path).resolve(source)

        assert OutputResolver(output_dir=tmp_path, force=True).resolve(source)[0] == existing

    def test_file_and_dir_are_exclusive(self, tmp_path):
        with pytest.raises(PreconditionError):
            OutputResolver(output_file=tmp_path / "a.mkv", output_dir=tmp_path)
