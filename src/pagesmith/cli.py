"""CLI entry point for pagesmith."""

import json
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from pagesmith.catalog import BLOCK_SPECS
from pagesmith.config import load_config
from pagesmith.editor import PageEditor
from pagesmith.models.intents import parse_intents
from pagesmith.models.node import AnyNode, ContainerNode, Page
from pagesmith.services.exceptions import PageLoadError
from pagesmith.services.storage import PageStore, export_json
from pagesmith.templates import TEMPLATES, build_template
from pagesmith.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)
console = Console()

SUMMARY_KEYS = ("text", "label", "name", "alt")


def parse_assignments(assignments: tuple[str, ...]) -> dict[str, Any]:
    """
    Parse ``key=value`` arguments into a props patch.

    Values that are JSON literals are decoded, so ``level=1`` is an int,
    ``frame=true`` a bool and ``items=[...]`` a list. Anything else is kept as
    the raw string: ``text=Welcome: Day 1``, ``label=no``, ``time=12:30`` and
    ``color=#000`` all stay text.

    Args:
        assignments: Raw ``key=value`` strings

    Returns:
        Patch mapping

    Raises:
        ValueError: If an argument has no ``=`` or an empty key
    """
    patch: dict[str, Any] = {}
    for item in assignments:
        key, sep, raw = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"Invalid assignment: {item!r}. Expected: key=value")
        patch[key] = _decode_value(raw)
    return patch


def _reject_constant(name: str) -> Any:
    raise ValueError(name)


def _decode_value(raw: str) -> Any:
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        return raw


def describe_node(node: AnyNode) -> str:
    """One-line layer label: type, a short content summary and the id."""
    summary = next((str(node.props[k]) for k in SUMMARY_KEYS if node.props.get(k)), "")
    if len(summary) > 40:
        summary = summary[:37] + "..."
    label = f"[bold]{node.type}[/bold]"
    if summary:
        label += f" {escape(repr(summary))}"
    return f"{label} [dim]{escape(node.id)}[/dim]"


def render_layers(page: Page, selected_id: Optional[str] = None) -> Tree:
    """Build the layers panel view of a page."""
    tree = Tree(f"Page ({len(page)} blocks)")

    def label(node: AnyNode) -> str:
        text = describe_node(node)
        return f"{text} [reverse]selected[/reverse]" if node.id == selected_id else text

    for node in page:
        branch = tree.add(label(node))
        if isinstance(node, ContainerNode):
            for child in node.children:
                branch.add(label(child))
    return tree


def _store(ctx: click.Context) -> PageStore:
    return ctx.obj["store"]


def _open_editor(ctx: click.Context) -> PageEditor:
    store = _store(ctx)
    try:
        page = store.load()
    except PageLoadError as e:
        raise click.ClickException(str(e)) from e
    if page is None:
        raise click.ClickException(
            f"No saved page found at {store.path}\n"
            "Run `pagesmith new` to start from a template."
        )
    return PageEditor(page)


def _finish(ctx: click.Context, editor: PageEditor, changed: bool, action: str) -> None:
    if not changed:
        logger.warning("intent_ignored", action=action)
        click.echo(f"Warning: {action} had no effect (unknown id or invalid target)", err=True)
        return
    _store(ctx).save(editor.page)
    message = f"✓ {action}"
    if editor.selected_id:
        message += f" (selected {editor.selected_id})"
    click.echo(message)


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (default: ~/.config/pagesmith/config.yaml)",
)
@click.option(
    "--page",
    "page_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Page file to edit (overrides storage.page_path)",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging")
@click.version_option("0.1.0", prog_name="pagesmith")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], page_path: Optional[Path], verbose: bool):
    """pagesmith - Compose event pages from content blocks.

    Blocks are addressed by id; use `pagesmith show` to list them.
    """
    configure_logging("DEBUG" if verbose else None)

    try:
        cfg = load_config(config)
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    ctx.ensure_object(dict)
    ctx.obj["config"] = cfg
    ctx.obj["store"] = PageStore(page_path or Path(cfg.storage.page_path))


@cli.command()
def blocks():
    """List the block types available in the palette."""
    table = Table(title="Blocks")
    table.add_column("Type", style="bold")
    table.add_column("Title")
    table.add_column("Description")
    table.add_column("Container")
    for spec in BLOCK_SPECS:
        table.add_row(spec.type, spec.title, spec.description or "", "yes" if spec.is_container else "")
    console.print(table)


@cli.command()
def templates():
    """List the available page templates."""
    for name in TEMPLATES:
        click.echo(name)


@cli.command()
@click.option("--template", "template_name", help="Template to start from (default: editor.default_template)")
@click.option("--empty", is_flag=True, help="Start from an empty page")
@click.option("--force", is_flag=True, help="Overwrite an existing saved page")
@click.pass_context
def new(ctx: click.Context, template_name: Optional[str], empty: bool, force: bool):
    """Start a new page from a template."""
    store = _store(ctx)
    if store.exists() and not force:
        raise click.ClickException(f"A page already exists at {store.path} (use --force to replace it)")

    if empty:
        page = Page.empty()
    else:
        name = template_name or ctx.obj["config"].editor.default_template
        page = build_template(name)
        if page is None:
            raise click.ClickException(
                f"Unknown template: {name}. Available: {', '.join(TEMPLATES)}"
            )
        logger.info("template_selected", template=name)

    store.save(page)
    click.echo(f"✓ New page with {len(page)} blocks saved to {store.path}")


@cli.command()
@click.pass_context
def show(ctx: click.Context):
    """Show the page's layer tree."""
    editor = _open_editor(ctx)
    console.print(render_layers(editor.page))


@cli.command()
@click.argument("block_type")
@click.option("--index", type=int, default=None, help="Top-level drop index (default: end of page)")
@click.option("--parent", "parent_id", help="Container to append the block to")
@click.pass_context
def insert(ctx: click.Context, block_type: str, index: Optional[int], parent_id: Optional[str]):
    """Insert a new BLOCK_TYPE block."""
    editor = _open_editor(ctx)
    position = len(editor.page) if index is None else index
    changed = editor.insert_block(block_type, position, parent_id)
    _finish(ctx, editor, changed, f"Inserted {block_type}")


@cli.command()
@click.argument("node_id")
@click.option("--index", type=int, default=0, help="Top-level drop index")
@click.option("--parent", "parent_id", help="Container to move the block into")
@click.pass_context
def move(ctx: click.Context, node_id: str, index: int, parent_id: Optional[str]):
    """Move top-level block NODE_ID."""
    editor = _open_editor(ctx)
    _finish(ctx, editor, editor.move(node_id, index, parent_id), f"Moved {node_id}")


@cli.command()
@click.argument("node_id")
@click.pass_context
def duplicate(ctx: click.Context, node_id: str):
    """Duplicate block NODE_ID."""
    editor = _open_editor(ctx)
    _finish(ctx, editor, editor.duplicate(node_id), f"Duplicated {node_id}")


@cli.command()
@click.argument("node_id")
@click.option("--nested", is_flag=True, help="Allow deleting a block inside a container")
@click.pass_context
def delete(ctx: click.Context, node_id: str, nested: bool):
    """Delete block NODE_ID."""
    editor = _open_editor(ctx)
    _finish(ctx, editor, editor.delete(node_id, nested), f"Deleted {node_id}")


@cli.command()
@click.argument("node_id")
@click.argument("assignments", nargs=-1, required=True)
@click.pass_context
def patch(ctx: click.Context, node_id: str, assignments: tuple[str, ...]):
    """Set properties on NODE_ID, e.g. `patch n_1 text="Hello" level=1`."""
    try:
        values = parse_assignments(assignments)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="ASSIGNMENTS") from e
    editor = _open_editor(ctx)
    _finish(ctx, editor, editor.patch(node_id, values), f"Patched {node_id}")


@cli.command()
@click.argument("node_id")
@click.pass_context
def up(ctx: click.Context, node_id: str):
    """Move top-level block NODE_ID one slot up."""
    editor = _open_editor(ctx)
    _finish(ctx, editor, editor.shift(node_id, -1), f"Moved {node_id} up")


@cli.command()
@click.argument("node_id")
@click.pass_context
def down(ctx: click.Context, node_id: str):
    """Move top-level block NODE_ID one slot down."""
    editor = _open_editor(ctx)
    _finish(ctx, editor, editor.shift(node_id, 1), f"Moved {node_id} down")


@cli.command()
@click.argument("node_id")
@click.argument("width", type=float)
@click.pass_context
def resize(ctx: click.Context, node_id: str, width: float):
    """Give top-level block NODE_ID a custom WIDTH in pixels."""
    editor = _open_editor(ctx)
    _finish(ctx, editor, editor.resize(node_id, width), f"Resized {node_id}")


@cli.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Show the result without saving")
@click.pass_context
def apply(ctx: click.Context, script: Path, dry_run: bool):
    """Apply a YAML/JSON list of intents from SCRIPT, in order.

    \b
    Example script:
      - {kind: insert_block, block_type: heading, index: 0}
      - {kind: patch, node_id: n_abc, patch: {text: Welcome}}
    """
    try:
        data = yaml.safe_load(script.read_text(encoding="utf-8")) or []
        intents = parse_intents(data)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, ValidationError) as e:
        raise click.ClickException(f"Invalid intent script {script}: {e}") from e

    editor = _open_editor(ctx)
    applied = 0
    for number, intent in enumerate(intents, start=1):
        if editor.apply(intent):
            applied += 1
        else:
            click.echo(f"Warning: intent {number} ({intent.kind}) had no effect", err=True)

    logger.info("intent_script_applied", script=str(script), total=len(intents), applied=applied)
    console.print(render_layers(editor.page, editor.selected_id))

    if dry_run:
        click.echo(f"Dry run: {applied}/{len(intents)} intents applied, nothing saved")
        return
    _store(ctx).save(editor.page)
    click.echo(f"✓ Applied {applied}/{len(intents)} intents")


@cli.command(name="export")
@click.argument("target", type=click.Path(path_type=Path))
@click.pass_context
def export_command(ctx: click.Context, target: Path):
    """Export the page as indented JSON to TARGET (file or directory)."""
    editor = _open_editor(ctx)
    written = export_json(editor.page, target, ctx.obj["config"].storage.export_name)
    click.echo(f"✓ Exported {len(editor.page)} blocks to {written}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
