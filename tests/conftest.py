"""
Global pytest configuration and fixtures.
"""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolate_settings_lookup(monkeypatch, tmp_path):
    """Keep tests from picking up a real settings file.

    ``load_settings`` looks at CONFUCIUS_CONFIG, the home directory and the
    working directory. Every test gets an empty home and working directory.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("CONFUCIUS_CONFIG", raising=False)
    monkeypatch.delenv("CONFUCIUS_DEBUG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def write_file(tmp_path):
    """Write a text file under the test's temporary directory."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
