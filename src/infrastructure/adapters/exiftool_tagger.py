"""Tagger adapter driving the ExifTool command-line program."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ...application.ports.tagger import TaggerPort
from ...domain.errors import ConfigurationError, UnwritableFile

logger = logging.getLogger(__name__)

# Signed coordinates need their hemisphere reference written alongside
GPS_REFERENCE_TAGS = {"GPSLatitude": "GPSLatitudeRef", "GPSLongitude": "GPSLongitudeRef"}


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return repr(value)
    return str(value)


class ExifToolTagContainer:
    """Staged tag assignments for one file, committed by a single exiftool call."""

    def __init__(self, exiftool_path: str, path: Path, timeout_seconds: float) -> None:
        self.exiftool_path = exiftool_path
        self.path = Path(path)
        self.timeout_seconds = timeout_seconds
        self._assignments: list[str] = []

    def set(self, name: str, value: Any) -> None:
        values = value if isinstance(value, Sequence) and not isinstance(value, str) else [value]
        for item in values:
            self._assignments.append(f"-{name}={_format_value(item)}")
        if name in GPS_REFERENCE_TAGS and isinstance(value, (int, float)):
            # exiftool derives N/S and E/W from the sign
            self._assignments.append(f"-{GPS_REFERENCE_TAGS[name]}={_format_value(value)}")

    def arguments(self) -> list[str]:
        return [
            self.exiftool_path,
            "-overwrite_original",
            "-charset",
            "iptc=utf8",
            "-codedcharacterset=utf8",
            *self._assignments,
            str(self.path),
        ]

    def save(self) -> bool:
        if not self._assignments:
            return True
        try:
            completed = subprocess.run(
                self.arguments(),
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error(f"exiftool could not be run: {e}", extra={"path": str(self.path)})
            return False

        if completed.returncode != 0:
            logger.error(
                f"exiftool failed with exit code {completed.returncode}: {completed.stderr.strip()}",
                extra={"path": str(self.path)},
            )
            return False
        return True


class ExifToolTaggerAdapter(TaggerPort):
    """Writes embedded metadata with exiftool (must be installed and on PATH)."""

    def __init__(self, exiftool_path: str = "exiftool", timeout_seconds: float = 60.0) -> None:
        self.exiftool_path = exiftool_path
        self.timeout_seconds = timeout_seconds
        self._writable: set[str] | None = None

    def list_writable_tag_names(self) -> set[str]:
        """
        List tag names exiftool can write (``exiftool -listw``), cached per adapter.

        Raises:
            ConfigurationError: If exiftool is not installed or cannot be run
        """
        if self._writable is not None:
            return self._writable

        try:
            completed = subprocess.run(
                [self.exiftool_path, "-listw"],
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=True,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise ConfigurationError(
                "tagging.exiftool_path",
                f"exiftool is required to write tags ({e}). Install it or set tagging.exiftool_path",
            ) from e

        lines = completed.stdout.splitlines()
        # First line is the "Writable tags:" heading
        self._writable = {name for line in lines[1:] for name in line.split()}
        logger.debug(f"exiftool reports {len(self._writable)} writable tags")
        return self._writable

    def open(self, path: Path) -> ExifToolTagContainer:
        path = Path(path)
        if not path.is_file():
            raise UnwritableFile(str(path), "file does not exist")
        return ExifToolTagContainer(self.exiftool_path, path, self.timeout_seconds)
