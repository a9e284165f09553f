"""Unit tests for the exiftool tagger adapter."""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from src.domain.errors import ConfigurationError, UnwritableFile
from src.infrastructure.adapters.exiftool_tagger import ExifToolTagContainer, ExifToolTaggerAdapter

LISTW_OUTPUT = """Writable tags:
  Title Caption-Abstract Subject GPSLatitude
  GPSLongitude Location Country UserComment
"""


def _completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=["exiftool"], returncode=returncode, stdout=stdout, stderr=stderr)


def test_list_writable_tag_names_parses_and_caches():
    adapter = ExifToolTaggerAdapter()

    with patch("subprocess.run", return_value=_completed(stdout=LISTW_OUTPUT)) as mock_run:
        first = adapter.list_writable_tag_names()
        second = adapter.list_writable_tag_names()

    assert "Writable" not in first
    assert {"Title", "Subject", "GPSLatitude", "UserComment"} <= first
    assert first is second
    mock_run.assert_called_once()
    assert mock_run.call_args[0][0] == ["exiftool", "-listw"]


def test_missing_exiftool_is_a_configuration_error():
    adapter = ExifToolTaggerAdapter(exiftool_path="/nonexistent/exiftool")

    with patch("subprocess.run", side_effect=FileNotFoundError("exiftool")):
        with pytest.raises(ConfigurationError) as exc_info:
            adapter.list_writable_tag_names()

    assert exc_info.value.key == "tagging.exiftool_path"


def test_open_requires_existing_file(tmp_path: Path):
    with pytest.raises(UnwritableFile):
        ExifToolTaggerAdapter().open(tmp_path / "missing.jpg")


def test_container_builds_single_invocation(tmp_path: Path):
    """Test that staged values become one exiftool command line."""
    target = tmp_path / "Sunset.jpg"
    target.write_bytes(b"jpeg")
    container = ExifToolTaggerAdapter().open(target)

    container.set("Title", "Sunset")
    container.set("Subject", ("sea", "sky"))
    container.set("GPSLatitude", 51.4545)
    container.set("GPSLongitude", -2.5879)

    args = container.arguments()
    assert args[0] == "exiftool"
    assert "-overwrite_original" in args
    assert args[-1] == str(target)
    assert "-Title=Sunset" in args
    assert "-Subject=sea" in args and "-Subject=sky" in args
    assert "-GPSLatitude=51.4545" in args
    assert "-GPSLatitudeRef=51.4545" in args
    assert "-GPSLongitudeRef=-2.5879" in args


def test_save_success(tmp_path: Path):
    container = ExifToolTagContainer("exiftool", tmp_path / "a.jpg", timeout_seconds=5)
    container.set("Title", "A")

    with patch("subprocess.run", return_value=_completed()) as mock_run:
        assert container.save() is True

    assert mock_run.call_args[0][0] == container.arguments()


def test_save_reports_failure_on_nonzero_exit(tmp_path: Path):
    container = ExifToolTagContainer("exiftool", tmp_path / "a.jpg", timeout_seconds=5)
    container.set("Title", "A")

    with patch("subprocess.run", return_value=_completed(returncode=1, stderr="Error: Not a valid JPG")):
        assert container.save() is False


def test_save_reports_failure_on_timeout(tmp_path: Path):
    container = ExifToolTagContainer("exiftool", tmp_path / "a.jpg", timeout_seconds=5)
    container.set("Title", "A")

    with patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="exiftool", timeout=5)):
        assert container.save() is False


def test_save_without_assignments_does_not_run(tmp_path: Path):
    container = ExifToolTagContainer("exiftool", tmp_path / "a.jpg", timeout_seconds=5)

    with patch("subprocess.run") as mock_run:
        assert container.save() is True

    mock_run.assert_not_called()
