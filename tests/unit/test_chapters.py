"""Unit tests for chapter marker preparation."""

from pathlib import Path
from unittest.mock import Mock

import httpx
import pytest

from autohandbrake.core.chapters import chapter_markers, write_markers
from autohandbrake.errors import ChapterLookupError
from autohandbrake.metadata.chapterdb import ChapterDbClient
from autohandbrake.models.chapter import Chapter, ChapterResult


@pytest.fixture
def result():
    return ChapterResult(
        ref="1",
        title="Blade Runner",
        confirmations=3,
        chapters=(
            Chapter(1, "00:00:00.000", "Opening"),
            Chapter(2, "00:10:00.000", "Tears, in rain"),
        ),
    )


def test_write_markers(tmp_path, result):
    path = tmp_path / "markers.csv"

    write_markers(result, path)

    assert path.read_text(encoding="utf-8") == "1,Opening\n2,Tears\\, in rain\n"


def test_no_chapters_yields_none():
    client = Mock()

    with chapter_markers(0, "Blade Runner", client) as option:
        assert option is None

    client.lookup.assert_not_called()


def test_lookup_disabled_yields_generic_markers():
    with chapter_markers(2, "Blade Runner", None) as option:
        assert option == "--markers"


def test_empty_title_yields_generic_markers():
    client = Mock()

    with chapter_markers(2, "", client) as option:
        assert option == "--markers"

    client.lookup.assert_not_called()


def test_lookup_failure_degrades_to_generic_markers():
    client = Mock()
    client.lookup.side_effect = ChapterLookupError("boom", status_code=500)

    with chapter_markers(2, "Blade Runner", client) as option:
        assert option == "--markers"


def test_named_markers_file_is_removed(result):
    client = Mock()
    client.lookup.return_value = [result]

    with chapter_markers(2, "Blade Runner", client, best_result=True, language="eng") as option:
        assert option.startswith("--markers=")
        path = Path(option.split("=", 1)[1])
        assert path.read_text(encoding="utf-8").startswith("1,Opening")

    assert not path.exists()
    client.lookup.assert_called_once_with("Blade Runner", 2, best_result=True, language="eng")


def test_markers_file_removed_on_error(result):
    client = Mock()
    client.lookup.return_value = [result]

    with pytest.raises(RuntimeError):
        with chapter_markers(2, "Blade Runner", client) as option:
            path = Path(option.split("=", 1)[1])
            raise RuntimeError("encode failed")

    assert not path.exists()


def test_malformed_service_payload_degrades_to_generic_markers():
    def handler(request):
        if request.url.path == "/chapters/search":
            return httpx.Response(200, json=[{"id": "7"}])
        return httpx.Response(200, json={"id": "7", "confirmations": 2, "chapters": [None, None]})

    client = ChapterDbClient(
        "https://chapters.example", client=httpx.Client(transport=httpx.MockTransport(handler))
    )

    with chapter_markers(2, "Blade Runner", client) as option:
        assert option == "--markers"


def test_null_chapter_names_write_empty_markers(tmp_path):
    def handler(request):
        if request.url.path == "/chapters/search":
            return httpx.Response(200, json=[{"id": "7"}])
        return httpx.Response(
            200,
            json={
                "id": "7",
                "confirmations": None,
                "chapters": [{"time": "00:00:00.000", "name": "Opening"}, {"time": None, "name": None}],
            },
        )

    client = ChapterDbClient(
        "https://chapters.example", client=httpx.Client(transport=httpx.MockTransport(handler))
    )

    with chapter_markers(2, "Blade Runner", client) as option:
        path = Path(option.split("=", 1)[1])
        assert path.read_text(encoding="utf-8") == "1,Opening\n2,\n"
