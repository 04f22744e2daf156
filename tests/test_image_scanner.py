"""Image discovery tests."""

from pathlib import Path

from tagdeck.config.models import ScanningSettings
from tagdeck.ingestion import ImageScanner


def _tree(root: Path) -> None:
    (root / "b.JPG").write_bytes(b"12345")
    (root / "a.png").write_bytes(b"1")
    (root / "readme.md").write_text("skip", encoding="utf-8")
    (root / ".hidden.jpg").write_bytes(b"1")
    nested = root / "nested"
    nested.mkdir()
    (nested / "c.gif").write_bytes(b"1")


def test_list_images_filters_extensions_and_hidden_files(tmp_path: Path) -> None:
    _tree(tmp_path)

    entries = ImageScanner().list_images(tmp_path)

    assert [Path(entry.path).name for entry in entries] == ["a.png", "b.JPG"]
    assert entries[1].size_bytes == 5
    assert entries[1].created_at is not None


def test_recursive_scan_with_hidden_files(tmp_path: Path) -> None:
    _tree(tmp_path)
    scanner = ImageScanner.from_settings(ScanningSettings(recursive=True, include_hidden=True))

    names = sorted(Path(entry.path).name for entry in scanner.scan(tmp_path))

    assert names == [".hidden.jpg", "a.png", "b.JPG", "c.gif"]


def test_missing_directory_yields_nothing(tmp_path: Path) -> None:
    assert ImageScanner().list_images(tmp_path / "absent") == []
