"""Writes mapped tag pairs to a downloaded file through the tagging port."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ...domain.errors import UnwritableFile
from ..ports.tagger import TaggerPort

logger = logging.getLogger(__name__)


def apply_tags(tagger: TaggerPort, file_path: Path, pairs: Sequence[tuple[str, Any]]) -> None:
    """
    Open the file's tag container, set each pair, and commit.

    Args:
        tagger: Tagging collaborator
        file_path: Downloaded file
        pairs: (tag_name, value) pairs from the field mapper

    Raises:
        UnwritableFile: If the container cannot be opened or saving fails
    """
    container = tagger.open(file_path)
    for name, value in pairs:
        container.set(name, value)

    if not container.save():
        raise UnwritableFile(str(file_path), "tag writer reported a failed save")

    logger.debug(
        f"Wrote {len(pairs)} tags",
        extra={"path": str(file_path), "tags": [name for name, _ in pairs]},
    )
