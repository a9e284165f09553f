"""Unit tests for apply_tags."""

from pathlib import Path

import pytest

from src.application.services.tag_applier import apply_tags
from src.domain.errors import UnwritableFile


class MockContainer:
    def __init__(self, save_result: bool = True) -> None:
        self.save_result = save_result
        self.values: list[tuple[str, object]] = []
        self.saved = False

    def set(self, name, value):
        self.values.append((name, value))

    def save(self):
        self.saved = True
        return self.save_result


class MockTagger:
    def __init__(self, container: MockContainer) -> None:
        self.container = container
        self.opened: list[Path] = []

    def list_writable_tag_names(self):
        return {"Title"}

    def open(self, path):
        self.opened.append(path)
        return self.container


def test_sets_each_pair_then_saves(tmp_path: Path):
    container = MockContainer()
    tagger = MockTagger(container)
    target = tmp_path / "Sunset.jpg"

    apply_tags(tagger, target, [("Title", "Sunset"), ("Country", "UK")])

    assert tagger.opened == [target]
    assert container.values == [("Title", "Sunset"), ("Country", "UK")]
    assert container.saved


def test_failed_save_raises_unwritable(tmp_path: Path):
    """Test that a failed save is surfaced."""
    tagger = MockTagger(MockContainer(save_result=False))

    with pytest.raises(UnwritableFile) as exc_info:
        apply_tags(tagger, tmp_path / "Cat.jpg", [("Title", "Cat")])

    assert exc_info.value.path.endswith("Cat.jpg")


def test_empty_pairs_still_save(tmp_path: Path):
    container = MockContainer()

    apply_tags(MockTagger(container), tmp_path / "a.jpg", [])

    assert container.saved
