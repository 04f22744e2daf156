"""Command line interface for tagdeck."""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from tagdeck.collaborators import ImageSource
from tagdeck.config import ConfigError, ConfigManager, TagdeckConfig
from tagdeck.filtering import (
    UNCATEGORIZED,
    FilterCriteria,
    NameOperator,
    SizeOperator,
    SortCriteria,
    SortDirection,
    SortOption,
)
from tagdeck.hotkeys import format_display
from tagdeck.ingestion import ImageScanner
from tagdeck.labels import Category, LabelError
from tagdeck.session import LabelingSession
from tagdeck.state import StateError

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    """Route log records through rich at the configured verbosity.

    Args:
        level: Level name such as ``WARNING`` or ``DEBUG``.
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    logging.basicConfig(
        level=resolved,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config() -> TagdeckConfig:
    """Load settings and configure logging from them.

    Raises:
        click.ClickException: If the settings file is invalid.
    """
    try:
        config = ConfigManager().load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    _configure_logging(config.logging.level)
    return config


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output.
        click.ClickException: For non-JSON flows.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)
    raise click.ClickException(message) from original


def _emit_message(message: Any, *, quiet: bool) -> None:
    if quiet:
        return
    console.print(message)


def _resolve_quiet(ctx: click.Context, quiet: bool, config: TagdeckConfig) -> bool:
    explicit = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    return quiet if explicit else config.cli.quiet_default


def _open_session(
    path: str,
    config: TagdeckConfig,
    *,
    assume_yes: bool = False,
) -> LabelingSession:
    """Create a session for ``path`` with its images and label document loaded.

    Args:
        path: Directory to browse.
        config: Loaded settings.
        assume_yes: Confirm destructive prompts without asking.

    Returns:
        LabelingSession: Session ready for edits.

    Raises:
        click.ClickException: If the label document cannot be read.
    """

    def confirm(message: str, *, title: str) -> bool:
        if assume_yes:
            return True
        return click.confirm(f"{title}: {message}", default=False)

    directory = Path(path).expanduser().resolve()
    session = LabelingSession.create(config=config, confirm=confirm)
    source: ImageSource = ImageScanner.from_settings(config.scanning)
    images = source.list_images(directory)
    try:
        session.open_directory(directory, images)
    except StateError as exc:
        raise click.ClickException(str(exc)) from exc
    return session


def _resolve_category(session: LabelingSession, value: str) -> Category:
    category = session.registry.get(value) or session.registry.find_by_name(value)
    if category is None:
        raise click.ClickException(f"Unknown category: {value}")
    return category


def _resolve_image(session: LabelingSession, value: str) -> str:
    candidate = Path(value).expanduser()
    if not candidate.is_absolute():
        candidate = Path(session.current_directory) / candidate
    image = candidate.resolve().as_posix()
    if image not in {entry.path for entry in session.images}:
        raise click.ClickException(f"{value} is not an image in {session.current_directory}.")
    return image


def _display_path(session: LabelingSession, image: str) -> str:
    try:
        return Path(image).relative_to(session.current_directory).as_posix()
    except ValueError:
        return image


def _save(session: LabelingSession) -> None:
    try:
        session.save()
    except StateError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="tagdeck")
def cli() -> None:
    """Tagdeck sorts images into user-defined categories."""


# ---------------------------------------------------------------------- #
# Categories                                                             #
# ---------------------------------------------------------------------- #


@cli.group()
def categories() -> None:
    """Manage the categories stored for a directory."""


@categories.command("list")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.option("--json", "json_output", is_flag=True, help="Emit categories as JSON.")
def categories_list(path: str, json_output: bool) -> None:
    """Show the categories of PATH with their image counts."""
    config = _load_config()
    session = _open_session(path, config)
    counts = session.category_counts()

    if json_output:
        payload = [
            {**category.model_dump(mode="json", by_alias=True), "count": counts[category.id]}
            for category in session.registry
        ]
        console.print_json(data={"categories": payload})
        return

    if len(session.registry) == 0:
        console.print("[yellow]No categories defined.[/yellow]")
        return

    table = Table(title=f"Categories in {session.current_directory}")
    table.add_column("ID", style="dim")
    table.add_column("Name")
    table.add_column("Images", justify="right")
    table.add_column("Excludes")
    for category in session.registry:
        peers = [session.registry.get(peer) for peer in category.mutually_exclusive_with]
        table.add_row(
            category.id,
            f"[{category.color}]{category.name}[/]" if category.color else category.name,
            str(counts[category.id]),
            ", ".join(peer.name for peer in peers if peer is not None),
        )
    console.print(table)


@categories.command("add")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.argument("name")
@click.option("--color", type=str, help="Display color, e.g. '#22c55e'.")
@click.option(
    "--exclusive-with",
    "exclusive_with",
    multiple=True,
    help="Category (name or id) removed from an image when this one is assigned.",
)
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def categories_add(
    ctx: click.Context,
    path: str,
    name: str,
    color: Optional[str],
    exclusive_with: tuple[str, ...],
    quiet: bool,
) -> None:
    """Create category NAME in PATH."""
    config = _load_config()
    quiet_enabled = _resolve_quiet(ctx, quiet, config)
    session = _open_session(path, config)

    if not name.strip():
        raise click.ClickException("Category name cannot be empty.")
    if session.registry.is_duplicate_name(name):
        raise click.ClickException(f"A category named '{name.strip()}' already exists.")

    peers = [_resolve_category(session, value).id for value in exclusive_with]
    category = session.registry.create(name.strip(), color)
    if peers:
        session.registry.update(category.id, mutually_exclusive_with=peers)
    _save(session)
    _emit_message(
        f"[green]Created category {category.name} ({category.id}).[/green]", quiet=quiet_enabled
    )


@categories.command("edit")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.argument("category")
@click.option("--name", type=str, help="New display name.")
@click.option("--color", type=str, help="New display color.")
@click.option(
    "--exclusive-with",
    "exclusive_with",
    multiple=True,
    help="Replace the exclusion list with these categories (names or ids).",
)
@click.option("--clear-exclusive", is_flag=True, help="Remove every exclusion.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def categories_edit(
    ctx: click.Context,
    path: str,
    category: str,
    name: Optional[str],
    color: Optional[str],
    exclusive_with: tuple[str, ...],
    clear_exclusive: bool,
    quiet: bool,
) -> None:
    """Change name, color or exclusions of CATEGORY in PATH."""
    config = _load_config()
    quiet_enabled = _resolve_quiet(ctx, quiet, config)
    session = _open_session(path, config)
    target = _resolve_category(session, category)

    fields: dict[str, Any] = {}
    if name is not None:
        if not name.strip():
            raise click.ClickException("Category name cannot be empty.")
        if session.registry.is_duplicate_name(name, exclude_id=target.id):
            raise click.ClickException(f"A category named '{name.strip()}' already exists.")
        fields["name"] = name.strip()
    if color is not None:
        fields["color"] = color
    if clear_exclusive:
        fields["mutually_exclusive_with"] = []
    elif exclusive_with:
        fields["mutually_exclusive_with"] = [
            _resolve_category(session, value).id for value in exclusive_with
        ]

    if not fields:
        _emit_message("[yellow]Nothing to update.[/yellow]", quiet=quiet_enabled)
        return

    try:
        session.update_category(target.id, **fields)
    except StateError as exc:
        raise click.ClickException(str(exc)) from exc
    _emit_message(f"[green]Updated category {target.id}.[/green]", quiet=quiet_enabled)


@categories.command("delete")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.argument("category")
@click.option("--yes", "assume_yes", is_flag=True, help="Do not ask for confirmation.")
def categories_delete(path: str, category: str, assume_yes: bool) -> None:
    """Delete CATEGORY from PATH, removing it from every image."""
    config = _load_config()
    session = _open_session(path, config, assume_yes=assume_yes)
    target = _resolve_category(session, category)

    try:
        deleted = session.delete_category(target.id)
    except StateError as exc:
        raise click.ClickException(str(exc)) from exc

    if deleted:
        console.print(f"[green]Deleted category {target.name}.[/green]")
    else:
        console.print("[yellow]Deletion cancelled; no changes applied.[/yellow]")


# ---------------------------------------------------------------------- #
# Assignments                                                            #
# ---------------------------------------------------------------------- #


def _run_assignment(
    ctx: click.Context,
    path: str,
    image: str,
    category: str,
    quiet: bool,
    *,
    toggle: bool,
) -> None:
    config = _load_config()
    quiet_enabled = _resolve_quiet(ctx, quiet, config)
    session = _open_session(path, config)
    target = _resolve_category(session, category)
    image_path = _resolve_image(session, image)
    shown = _display_path(session, image_path)

    try:
        if toggle:
            changed = session.toggle(image_path, target.id)
        else:
            changed = session.assign(image_path, target.id)
    except (StateError, LabelError) as exc:
        raise click.ClickException(str(exc)) from exc

    if not changed:
        _emit_message(f"[yellow]{shown} already has {target.name}.[/yellow]", quiet=quiet_enabled)
        return

    if session.assignments.has(image_path, target.id):
        _emit_message(f"[green]Assigned {target.name} to {shown}.[/green]", quiet=quiet_enabled)
    else:
        _emit_message(f"[green]Removed {target.name} from {shown}.[/green]", quiet=quiet_enabled)


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.argument("image")
@click.argument("category")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def assign(ctx: click.Context, path: str, image: str, category: str, quiet: bool) -> None:
    """Assign CATEGORY to IMAGE inside PATH."""
    _run_assignment(ctx, path, image, category, quiet, toggle=False)


@cli.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.argument("image")
@click.argument("category")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def toggle(ctx: click.Context, path: str, image: str, category: str, quiet: bool) -> None:
    """Toggle CATEGORY on IMAGE inside PATH."""
    _run_assignment(ctx, path, image, category, quiet, toggle=True)


# ---------------------------------------------------------------------- #
# Listing                                                                #
# ---------------------------------------------------------------------- #


@cli.command("list")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.option(
    "--category",
    type=str,
    help=f"Only images with this category (name or id), or '{UNCATEGORIZED}'.",
)
@click.option("--name", "name_pattern", type=str, default="", help="Filter by file name.")
@click.option(
    "--name-op",
    type=click.Choice([operator.value for operator in NameOperator]),
    default=NameOperator.CONTAINS.value,
    show_default=True,
)
@click.option("--case-sensitive", is_flag=True, help="Match file names case-sensitively.")
@click.option(
    "--size-op",
    type=click.Choice([operator.value for operator in SizeOperator]),
    default=SizeOperator.LARGER_THAN.value,
    show_default=True,
)
@click.option("--size", "size_value", type=str, default="", help="Size in KB.")
@click.option("--size2", "size_value2", type=str, default="", help="Upper bound in KB for 'between'.")
@click.option(
    "--sort",
    "sort_option",
    type=click.Choice([option.value for option in SortOption]),
    default=SortOption.NONE.value,
    show_default=True,
)
@click.option("--descending", is_flag=True, help="Reverse the sort order.")
@click.option("--json", "json_output", is_flag=True, help="Emit the listing as JSON.")
@click.pass_context
def list_images(
    ctx: click.Context,
    path: str,
    category: Optional[str],
    name_pattern: str,
    name_op: str,
    case_sensitive: bool,
    size_op: str,
    size_value: str,
    size_value2: str,
    sort_option: str,
    descending: bool,
    json_output: bool,
) -> None:
    """List the images in PATH that match the given filters."""
    try:
        config = _load_config()
        session = _open_session(path, config)
    except click.ClickException as exc:
        _handle_cli_error(exc.message, code="load_error", json_output=json_output, original=exc)
        return

    category_id = ""
    if category:
        if category == UNCATEGORIZED:
            category_id = UNCATEGORIZED
        else:
            found = session.registry.get(category) or session.registry.find_by_name(category)
            if found is None:
                _handle_cli_error(
                    f"Unknown category: {category}", code="unknown_category", json_output=json_output
                )
                return
            category_id = found.id

    explicit_case = ctx.get_parameter_source("case_sensitive") == ParameterSource.COMMANDLINE
    session.set_filter(
        FilterCriteria(
            category_id=category_id,
            name_pattern=name_pattern,
            name_operator=name_op,
            case_sensitive=case_sensitive if explicit_case else config.filtering.case_sensitive_names,
            size_operator=size_op,
            size_value=size_value,
            size_value2=size_value2,
        )
    )
    session.set_sort(
        SortCriteria(
            option=SortOption(sort_option),
            direction=SortDirection.DESCENDING if descending else SortDirection.ASCENDING,
        )
    )

    entries = session.visible_entries()

    def names_for(image: str) -> list[str]:
        names = []
        for assigned_id in session.assignments.category_ids(image):
            found = session.registry.get(assigned_id)
            names.append(found.name if found is not None else assigned_id)
        return names

    if json_output:
        payload = [
            {
                "path": entry.path,
                "size_bytes": entry.size_bytes,
                "categories": names_for(entry.path),
            }
            for entry in entries
        ]
        console.print_json(data={"images": payload, "count": len(payload)})
        return

    if not entries:
        console.print("[yellow]No images match the current filters.[/yellow]")
        return

    table = Table(title=f"Images in {session.current_directory}")
    table.add_column("Image")
    table.add_column("Size (KB)", justify="right")
    table.add_column("Categories")
    for entry in entries:
        size = "" if entry.size_bytes is None else f"{entry.size_bytes / 1024:.1f}"
        table.add_row(_display_path(session, entry.path), size, ", ".join(names_for(entry.path)))
    console.print(table)
    console.print(f"[green]{len(entries)} of {len(session.images)} image(s) shown.[/green]")


# ---------------------------------------------------------------------- #
# Hotkeys                                                                #
# ---------------------------------------------------------------------- #


@cli.group()
def hotkeys() -> None:
    """Inspect the hotkeys stored for a directory."""


@hotkeys.command("list")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=str))
def hotkeys_list(path: str) -> None:
    """Show the hotkeys of PATH."""
    config = _load_config()
    session = _open_session(path, config)

    if len(session.hotkeys) == 0:
        console.print("[yellow]No hotkeys defined.[/yellow]")
        return

    table = Table(title=f"Hotkeys in {session.current_directory}")
    table.add_column("Keys")
    table.add_column("Action")
    for hotkey in session.hotkeys:
        action = hotkey.parsed_action
        label = hotkey.action or "[dim]unassigned[/dim]"
        if action.category_id is not None:
            category = session.registry.get(action.category_id)
            if category is not None:
                label = f"{action.kind.value} ({category.name})"
        table.add_row(format_display(hotkey), label)
    console.print(table)


# ---------------------------------------------------------------------- #
# Settings                                                               #
# ---------------------------------------------------------------------- #


@cli.group()
def config() -> None:
    """Manage tagdeck settings and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective settings after applying precedence rules."""
    manager = ConfigManager()
    try:
        settings = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(settings.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist one settings value; KEY is SECTION.FIELD such as logging.level."""
    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    manager = ConfigManager()
    try:
        manager.ensure_exists()
        before = manager.read_text()
        changed = manager.set_value(key, parsed_value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if not changed:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    diff = difflib.unified_diff(
        before.splitlines(),
        manager.read_text().splitlines(),
        fromfile="config.yaml (before)",
        tofile="config.yaml (after)",
        lineterm="",
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key.strip()}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the settings file in an editor."""
    manager = ConfigManager()
    try:
        manager.ensure_exists()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")
    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return
    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc
    if not isinstance(parsed, dict):
        raise click.ClickException("Settings file must contain a top-level mapping.")

    try:
        manager.save(parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print("[green]Settings updated successfully.[/green]")


def main() -> None:
    """Invoke the click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
