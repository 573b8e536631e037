"""Tests for data URL helpers."""
from chatrelay.core.data_url import get_base64_from_data_url, get_media_type_from_data_url


def test_media_type_from_png_data_url():
    assert get_media_type_from_data_url("data:image/png;base64,AAA=") == "image/png"


def test_media_type_with_plus_and_dot():
    assert get_media_type_from_data_url("data:image/svg+xml;base64,PHN2Zz4=") == "image/svg+xml"
    assert get_media_type_from_data_url("data:application/vnd.ms-excel;base64,AA==") == "application/vnd.ms-excel"


def test_media_type_requires_base64_data_url():
    assert get_media_type_from_data_url("https://example.com/cat.png") is None
    assert get_media_type_from_data_url("data:text/plain,hello") is None


def test_base64_payload():
    assert get_base64_from_data_url("data:image/png;base64,AAA=") == "AAA="


def test_base64_payload_missing_comma():
    assert get_base64_from_data_url("data:image/png;base64") is None
