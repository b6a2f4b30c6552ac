"""
Tests for secret loading and key masking
"""

import os

import pytest

from versus.secure_config import check_api_key, get_config_summary, load_secret_files, mask_key
from versus.settings import Settings


@pytest.mark.parametrize("key,expected", [
    (None, "Not set"),
    ("", "Not set"),
    ("short", "***"),
    ("AIzaSyA1234567890abcdWXYZ", "AIzaSyA1...WXYZ"),
])
def test_mask_key(key, expected):
    assert mask_key(key) == expected


def test_load_secret_files_does_not_override_environment(tmp_path, monkeypatch):
    """Test dotenv values fill gaps but never replace real env vars"""
    secrets = tmp_path / ".env.local"
    secrets.write_text("VERSUS_TEST_FROM_FILE=file-value\nVERSUS_TEST_REAL=file-value\n")
    monkeypatch.setenv("VERSUS_TEST_FROM_FILE", "placeholder")
    monkeypatch.delenv("VERSUS_TEST_FROM_FILE")
    monkeypatch.setenv("VERSUS_TEST_REAL", "real-value")

    loaded = load_secret_files([str(secrets), str(tmp_path / "missing.env")])

    assert loaded == [str(secrets)]
    assert os.environ["VERSUS_TEST_FROM_FILE"] == "file-value"
    assert os.environ["VERSUS_TEST_REAL"] == "real-value"


def test_load_secret_files_with_nothing_to_load(tmp_path):
    assert load_secret_files([str(tmp_path / "nope.env")]) == []


@pytest.mark.parametrize("key,usable", [
    (None, False),
    ("your_gemini_key_here", False),
    ("tiny", True),
    ("AIzaSyA1234567890abcdWXYZ", True),
])
def test_check_api_key(key, usable):
    assert check_api_key(key) is usable


def test_config_summary_never_contains_the_key():
    settings = Settings(gemini_api_key="AIzaSyA1234567890abcdWXYZ", gemini_model="gemini-2.0-flash")

    summary = get_config_summary(settings)

    assert summary["api_keys"]["gemini"] == "AIzaSyA1...WXYZ"
    assert summary["model"]["name"] == "gemini-2.0-flash"
    assert "AIzaSyA1234567890abcdWXYZ" not in str(summary)
