"""Command line interface for structure organizer."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.tree import Tree

from . import __version__
from .core.resolver import ParentResolver
from .domain.items import Item
from .domain.references import ContainerRef, is_value
from .exceptions import StructureOrganizerError
from .infrastructure.memory_store import Container, InMemoryContainerStore
from .models.config import build_store, create_default_config, load_config

console = Console()

_POLICY_LABELS = {
    "DateOrganizingPolicy": "by date",
    "AttributeOrganizingPolicy": "by attribute",
    "RedirectPolicy": "redirect",
}


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_store(ctx: click.Context, structure: Path) -> InMemoryContainerStore:
    cfg = load_config(structure)
    if not ctx.obj.get('verbose'):
        logging.getLogger('structure_organizer').setLevel(cfg.settings.log_level.upper())
    return build_store(cfg)


def _parse_parent(store: InMemoryContainerStore, parent: str) -> ContainerRef:
    if parent.startswith("/"):
        ref = store.find_by_path(parent)
        if ref is None:
            raise click.BadParameter(f"No container at {parent}", param_hint="PARENT")
        return ref
    try:
        return ContainerRef.parse(parent)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="PARENT")


def _parse_attributes(pairs: Tuple[str, ...]) -> dict:
    attributes = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"Expected key=value, got {pair!r}", param_hint="--attr")
        attributes[key.strip()] = value.strip()
    return attributes


def _container_label(container: Container) -> str:
    label = f"[bold]{container.name}[/bold] [dim]({container.ref})[/dim]"
    if container.policy is not None:
        kind = _POLICY_LABELS.get(type(container.policy).__name__, "organizing")
        label += f" [cyan]\\[{kind}][/cyan]"
    return label


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', is_flag=True, help='Verbose output')
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Resolve where items land in a hierarchy with organizing containers."""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    setup_logging(verbose)


@cli.command()
@click.argument('structure', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def tree(ctx: click.Context, structure: Path):
    """Show the container tree described by STRUCTURE."""
    try:
        store = _load_store(ctx, structure)

        root = Tree(f"[bold cyan]{structure.name}[/bold cyan]")

        def add_children(node: Tree, container: Container) -> None:
            branch = node.add(_container_label(container))
            for child in store.children(container.ref):
                add_children(branch, child)

        for container in store.roots():
            add_children(root, container)

        console.print(root)

    except StructureOrganizerError as e:
        console.print(f"\n[red]Error: {e}[/red]")
        sys.exit(1)


@cli.command()
@click.argument('structure', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('parent')
@click.option('--name', default='item', help='Item name')
@click.option(
    '--published',
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S"]),
    help='Item publish date'
)
@click.option('--attr', 'attrs', multiple=True, help='Item attribute as key=value (repeatable)')
@click.option('--trace', is_flag=True, help='Show every container asked on the way')
@click.pass_context
def resolve(
    ctx: click.Context,
    structure: Path,
    parent: str,
    name: str,
    published: Optional[datetime],
    attrs: Tuple[str, ...],
    trace: bool
):
    """Resolve where an item requested under PARENT would be placed.

    PARENT is a container path (/Site/News) or reference (5, 5_2).
    """
    try:
        store = _load_store(ctx, structure)
        requested = _parse_parent(store, parent)
        item = Item(
            name=name,
            parent=requested,
            published=published,
            attributes=_parse_attributes(attrs)
        )

        resolution = ParentResolver(store).resolve_with_trace(requested, item)

        if trace:
            trace_table = Table(title="Resolution")
            trace_table.add_column("Step", justify="right")
            trace_table.add_column("Container", style="cyan")
            trace_table.add_column("Reference")
            for step, ref in enumerate(resolution.visited, 1):
                trace_table.add_row(str(step), store.path_of(ref), str(ref))
            console.print(trace_table)
            console.print(f"Stopped: {resolution.terminated_by.value.replace('_', ' ')}")

        resolved = resolution.resolved
        if is_value(resolved):
            console.print(f"[green]{store.path_of(resolved)}[/green] ({resolved})")
        else:
            console.print("[yellow]No container[/yellow]")

        if not resolution.changed:
            console.print("[dim]Placement unchanged[/dim]")

    except StructureOrganizerError as e:
        console.print(f"\n[red]Error: {e}[/red]")
        sys.exit(1)


@cli.command()
@click.argument('output', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--force', is_flag=True, help='Overwrite an existing file')
def init(output: Path, force: bool):
    """Write an example structure file to OUTPUT."""
    if output.exists() and not force:
        console.print(f"[red]Error: {output} already exists (use --force)[/red]")
        sys.exit(1)

    create_default_config(output)
    console.print(f"[green]Wrote example structure to {output}[/green]")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
