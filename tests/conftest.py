"""
Shared fixtures for photo-tool tests.
"""
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from exiftool.exceptions import ExifToolException

from phototool.models import AppConfig


class FakeExifTool:
    """Stands in for exiftool.ExifToolHelper, keyed by file name."""

    def __init__(self, metadata: dict[str, Any] | None = None):
        self.metadata = metadata or {}
        self.calls: list[str] = []

    def __enter__(self) -> "FakeExifTool":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None

    def get_metadata(self, path: str) -> list[dict[str, Any]]:
        self.calls.append(path)
        value = self.metadata.get(Path(path).name)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise ExifToolException(f"no metadata for {path}")
        return [value]


def exif(date_str: str) -> dict[str, str]:
    """Metadata dict as returned by ExifTool for a photo taken at date_str."""
    return {
        "SourceFile": "ignored",
        "EXIF:DateTimeOriginal": date_str,
        "File:MIMEType": "image/jpeg",
    }


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "source"
    path.mkdir()
    return path


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    return tmp_path / "target"


@pytest.fixture
def base_config(source_dir: Path, target_dir: Path) -> AppConfig:
    """AppConfig pointed at temporary source and target directories."""
    return AppConfig(source_dir=source_dir, target_dir=target_dir, depth=0, quiet=True)


@pytest.fixture
def fake_exiftool():
    """Patch ExifToolHelper in core with a FakeExifTool and return it."""
    fake = FakeExifTool()
    with patch("phototool.core.exiftool.ExifToolHelper", return_value=fake):
        yield fake
