"""Instance listing and inspection commands."""

from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from ..console import console
from ..instances.collection import InstanceList
from ..instances.groups import group_names
from ..instances.groups import load_group_map
from ..instances.scanner import DirectoryScanner
from ..instances.scanner import ScanStatus
from ..paths import create_instance_list
from ..paths import create_instance_loader
from ..paths import create_settings_manager

_root_option = click.option(
    "--root",
    "root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Instances directory (overrides the instances.dir setting)",
)

_STATUS_STYLES = {
    ScanStatus.LOADED: "green",
    ScanStatus.SKIPPED: "yellow",
    ScanStatus.FAILED: "red",
}


def _load(root: Path | None) -> InstanceList:
    instance_list = create_instance_list(instances_dir=root)
    if not instance_list.instances_dir.is_dir():
        console.print(f"[yellow]Instances directory not found:[/yellow] {escape(str(instance_list.instances_dir))}")
    instance_list.load_list()
    return instance_list


@click.command(name="list")
@_root_option
@click.option("--group", "group", default=None, help="Only show instances in this group ('' for ungrouped)")
def list_cmd(root: Path | None, group: str | None):
    """List all instances."""
    instance_list = _load(root)
    instances = [i for i in instance_list if group is None or i.group == group]

    table = Table(title="Instances", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="green")
    table.add_column("Name")
    table.add_column("Group", style="yellow")
    table.add_column("Directory", style="dim")

    for instance in instances:
        table.add_row(
            escape(instance.id),
            escape(instance.name),
            escape(instance.group) or "[dim]-[/dim]",
            escape(str(instance.directory)),
        )

    console.print(table)
    if not instances:
        console.print("[yellow]No instances found.[/yellow]")


@click.command(name="show")
@click.argument("instance_id")
@_root_option
def show_cmd(instance_id: str, root: Path | None):
    """Show details of one instance."""
    instance_list = _load(root)
    instance = instance_list.get_by_id(instance_id)
    if instance is None:
        console.print(f"[red]Error:[/red] Instance '{escape(instance_id)}' not found")
        sys.exit(1)

    console.print(f"[bold]ID:[/bold]        {escape(instance.id)}")
    console.print(f"[bold]Name:[/bold]      {escape(instance.name)}")
    console.print(f"[bold]Group:[/bold]     {escape(instance.group) or '[dim](ungrouped)[/dim]'}")
    console.print(f"[bold]Directory:[/bold] {escape(str(instance.directory))}")

    if instance.settings:
        table = Table(title="Settings", show_header=True, header_style="bold cyan")
        table.add_column("Key", style="green")
        table.add_column("Value")
        for key, value in sorted(instance.settings.items()):
            table.add_row(escape(key), escape(value))
        console.print(table)


@click.command(name="groups")
@_root_option
def groups_cmd(root: Path | None):
    """List groups and how many loaded instances each one has."""
    instance_list = _load(root)
    declared = group_names(load_group_map(instance_list.group_file))
    counts = Counter(i.group for i in instance_list if i.group)

    names = sorted(set(declared) | set(counts))
    if not names:
        console.print("[yellow]No groups defined.[/yellow]")
        return

    table = Table(title="Groups", show_header=True, header_style="bold cyan")
    table.add_column("Group", style="yellow")
    table.add_column("Instances", justify="right")
    for name in names:
        table.add_row(escape(name), str(counts.get(name, 0)))

    ungrouped = sum(1 for i in instance_list if not i.group)
    if ungrouped:
        table.add_row("[dim](ungrouped)[/dim]", str(ungrouped))
    console.print(table)


@click.command(name="scan")
@_root_option
def scan_cmd(root: Path | None):
    """Show how every candidate instance directory was classified."""
    settings = create_settings_manager()
    instances_dir = root if root is not None else settings.get_instances_dir()
    scanner = DirectoryScanner(create_instance_loader(settings), sort_entries=settings.get_sort_entries())
    entries = scanner.scan(instances_dir)

    if not entries:
        console.print(f"[yellow]No instance directories under {escape(str(instances_dir))}[/yellow]")
        return

    table = Table(title=f"Scan of {escape(str(instances_dir))}", show_header=True, header_style="bold cyan")
    table.add_column("Directory")
    table.add_column("Status")
    table.add_column("Detail", style="dim")
    for entry in entries:
        style = _STATUS_STYLES[entry.status]
        detail = entry.instance.name if entry.instance is not None else entry.reason
        table.add_row(escape(entry.directory.name), f"[{style}]{entry.status.value}[/{style}]", escape(detail))
    console.print(table)


@click.command(name="dir")
@click.argument("path", required=False, type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--scope",
    type=click.Choice(["local", "project", "user"]),
    default="local",
    show_default=True,
    help="Settings scope to write to",
)
def dir_cmd(path: Path | None, scope: str):
    """Show or set the instances directory."""
    settings = create_settings_manager()
    if path is None:
        console.print(str(settings.get_instances_dir()))
        return

    settings.set_instances_dir(path, scope=scope)
    console.print(f"[green]✓ Instances directory set to {escape(str(path))}[/green] [dim]({scope})[/dim]")
