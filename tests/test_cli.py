"""CLI integration tests."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from tagdeck.cli import cli
from tagdeck.config import ConfigManager
from tagdeck.state import DocumentRepository


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path / "home")
    return env


def _photos(tmp_path: Path) -> Path:
    root = tmp_path / "photos"
    root.mkdir()
    (root / "a.jpg").write_bytes(b"x" * 2 * 1024)
    (root / "b.png").write_bytes(b"x" * 10 * 1024)
    (root / "notes.txt").write_text("not an image", encoding="utf-8")
    return root


def _listed(result: Any) -> list[str]:
    payload = json.loads(result.output)
    return [Path(item["path"]).name for item in payload["images"]]


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def test_categories_add_assign_and_list(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)

    result = runner.invoke(cli, ["categories", "add", str(root), "Keep"], env=env)
    assert result.exit_code == 0, result.output
    assert "Created category Keep" in result.output

    result = runner.invoke(cli, ["assign", str(root), "a.jpg", "keep"], env=env)
    assert result.exit_code == 0, result.output
    assert "Assigned Keep to a.jpg" in result.output

    result = runner.invoke(cli, ["list", str(root), "--category", "Keep", "--json"], env=env)
    assert result.exit_code == 0, result.output
    assert _listed(result) == ["a.jpg"]

    result = runner.invoke(cli, ["list", str(root), "--category", "uncategorized", "--json"], env=env)
    assert _listed(result) == ["b.png"]

    result = runner.invoke(cli, ["categories", "list", str(root), "--json"], env=env)
    [category] = json.loads(result.output)["categories"]
    assert category["name"] == "Keep"
    assert category["count"] == 1

    document = DocumentRepository().load(root.resolve())
    assert [pair[0] for pair in document.image_categories or []] == [
        (root.resolve() / "a.jpg").as_posix()
    ]


def test_duplicate_category_name_is_rejected(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)
    runner.invoke(cli, ["categories", "add", str(root), "Keep"], env=env)

    result = runner.invoke(cli, ["categories", "add", str(root), "  keep "], env=env)

    assert result.exit_code != 0
    assert "already exists" in result.output


def test_exclusive_categories_via_cli(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)
    runner.invoke(cli, ["categories", "add", str(root), "Keep"], env=env)
    runner.invoke(cli, ["categories", "add", str(root), "Archive", "--exclusive-with", "Keep"], env=env)

    runner.invoke(cli, ["assign", str(root), "a.jpg", "Keep"], env=env)
    result = runner.invoke(cli, ["assign", str(root), "a.jpg", "Archive"], env=env)
    assert result.exit_code == 0, result.output

    keep = runner.invoke(cli, ["list", str(root), "--category", "Keep", "--json"], env=env)
    archive = runner.invoke(cli, ["list", str(root), "--category", "Archive", "--json"], env=env)
    assert _listed(keep) == []
    assert _listed(archive) == ["a.jpg"]


def test_toggle_removes_assignment(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)
    runner.invoke(cli, ["categories", "add", str(root), "Keep"], env=env)
    runner.invoke(cli, ["toggle", str(root), "a.jpg", "Keep"], env=env)

    result = runner.invoke(cli, ["toggle", str(root), "a.jpg", "Keep"], env=env)

    assert result.exit_code == 0, result.output
    assert "Removed Keep from a.jpg" in result.output


def test_assign_rejects_unknown_image_and_category(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)
    runner.invoke(cli, ["categories", "add", str(root), "Keep"], env=env)

    missing_image = runner.invoke(cli, ["assign", str(root), "notes.txt", "Keep"], env=env)
    missing_category = runner.invoke(cli, ["assign", str(root), "a.jpg", "Nope"], env=env)

    assert missing_image.exit_code != 0
    assert "is not an image" in missing_image.output
    assert missing_category.exit_code != 0
    assert "Unknown category" in missing_category.output


def test_list_filters_by_size_and_name(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)

    larger = runner.invoke(cli, ["list", str(root), "--size", "5", "--json"], env=env)
    smaller = runner.invoke(
        cli, ["list", str(root), "--size-op", "lessThan", "--size", "5", "--json"], env=env
    )
    named = runner.invoke(
        cli, ["list", str(root), "--name", "A", "--name-op", "startsWith", "--json"], env=env
    )
    ordered = runner.invoke(
        cli, ["list", str(root), "--sort", "size", "--descending", "--json"], env=env
    )

    assert _listed(larger) == ["b.png"]
    assert _listed(smaller) == ["a.jpg"]
    assert _listed(named) == ["a.jpg"]
    assert _listed(ordered) == ["b.png", "a.jpg"]


def test_list_unknown_category_json_error(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)

    result = runner.invoke(cli, ["list", str(root), "--category", "Nope", "--json"], env=env)

    assert result.exit_code == 1
    assert json.loads(result.output)["error"]["code"] == "unknown_category"


def test_categories_delete_prompts_and_cascades(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)
    runner.invoke(cli, ["categories", "add", str(root), "Keep"], env=env)
    runner.invoke(cli, ["assign", str(root), "a.jpg", "Keep"], env=env)

    declined = runner.invoke(cli, ["categories", "delete", str(root), "Keep"], env=env, input="n\n")
    assert declined.exit_code == 0, declined.output
    assert "cancelled" in declined.output

    accepted = runner.invoke(cli, ["categories", "delete", str(root), "Keep", "--yes"], env=env)
    assert accepted.exit_code == 0, accepted.output
    assert "Deleted category Keep" in accepted.output

    document = DocumentRepository().load(root.resolve())
    assert document.categories == []
    assert document.image_categories == []


def test_categories_edit_renames(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)
    runner.invoke(cli, ["categories", "add", str(root), "Keep"], env=env)
    runner.invoke(cli, ["categories", "add", str(root), "Trash"], env=env)

    clash = runner.invoke(cli, ["categories", "edit", str(root), "Keep", "--name", "trash"], env=env)
    renamed = runner.invoke(
        cli, ["categories", "edit", str(root), "Keep", "--name", "Favourites", "--color", "#123456"],
        env=env,
    )

    assert clash.exit_code != 0
    assert renamed.exit_code == 0, renamed.output
    names = [category.name for category in DocumentRepository().load(root.resolve()).categories or []]
    assert names == ["Favourites", "Trash"]


def test_hotkeys_list_shows_seeded_defaults(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)

    result = runner.invoke(cli, ["hotkeys", "list", str(root)], env=env)

    assert result.exit_code == 0, result.output
    assert "ArrowRight" in result.output
    assert "next_image" in result.output


def test_document_location_from_settings(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)
    root = _photos(tmp_path)
    env["TAGDECK__STORAGE__CONFIG_FILE_PATH"] = "labels.json"

    runner.invoke(cli, ["categories", "add", str(root), "Keep"], env=env)

    assert (root / "labels.json").exists()
    assert not (root / ".tagdeck.json").exists()


def test_config_view_creates_and_displays_config(tmp_path: Path, runner: CliRunner) -> None:
    result = runner.invoke(cli, ["config", "view"], env=_env_with_home(tmp_path))

    assert result.exit_code == 0
    assert "storage:" in result.output


def test_config_set_updates_value_and_writes_diff(tmp_path: Path, runner: CliRunner) -> None:
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "set", "logging.level", "--value", "INFO"], env=env)

    assert result.exit_code == 0, result.output
    assert "Updated logging.level" in result.output

    manager = ConfigManager(config_path=tmp_path / "home" / ".tagdeck" / "config.yaml")
    assert manager.load(include_env=False).logging.level == "INFO"

    again = runner.invoke(cli, ["config", "set", "logging.level", "--value", "INFO"], env=env)
    assert "No changes applied" in again.output


def test_config_set_rejects_invalid_value(tmp_path: Path, runner: CliRunner) -> None:
    result = runner.invoke(
        cli, ["config", "set", "scanning.recursive", "--value", "sometimes"], env=_env_with_home(tmp_path)
    )

    assert result.exit_code != 0


def test_config_edit_applies_changes(
    tmp_path: Path, runner: CliRunner, monkeypatch: pytest.MonkeyPatch
) -> None:
    env = _env_with_home(tmp_path)
    manager = ConfigManager(config_path=tmp_path / "home" / ".tagdeck" / "config.yaml")
    manager.ensure_exists()

    def _mock_edit(text: str, **_: Any) -> str:
        return text.replace("recursive: false", "recursive: true")

    monkeypatch.setattr("tagdeck.cli.click.edit", _mock_edit)

    result = runner.invoke(cli, ["config", "edit"], env=env)

    assert result.exit_code == 0
    assert "updated" in result.output.lower()
    assert manager.load(include_env=False).scanning.recursive is True
