"""Unit tests for language normalization."""

import pytest

from autohandbrake.utils.language import normalize_language


@pytest.mark.parametrize(
    "value,expected",
    [
        ("de", "ger"),
        ("deu", "ger"),
        ("ger", "ger"),
        ("German", "ger"),
        ("fra", "fre"),
        ("en-US", "eng"),
        ("jpn", "jpn"),
        ("", "und"),
        (None, "und"),
    ],
)
def test_normalize_language(value, expected):
    assert normalize_language(value) == expected
