"""
Output formatters for CLI.
"""

import json

from rich.console import Console
from rich.table import Table

from sniview.core.models import EventRecord, Protocol, SetConfig, SortColumn, SortState, SortDirection

__all__ = [
    "render_records",
    "build_table",
    "render_table",
    "render_json",
    "render_compact",
    "render_variants",
    "render_sets",
    "variant_description",
]


PROTOCOL_STYLES = {
    Protocol.TCP: "cyan",
    Protocol.UDP: "magenta",
}

COLUMN_TITLES = [
    (SortColumn.TIMESTAMP, "Time"),
    (SortColumn.PROTOCOL, "Proto"),
    (SortColumn.IS_TARGET, "Target"),
    (SortColumn.DOMAIN, "Domain"),
    (SortColumn.SOURCE, "Source"),
    (SortColumn.DESTINATION, "Destination"),
]


def render_records(
    records: list[EventRecord],
    output_format: str,
    console: Console,
    sort_state: SortState | None = None,
) -> None:
    """
    Render records in the specified format.

    Args:
        records: Records to render, already filtered and ordered
        output_format: One of "table", "json", "compact"
        console: Rich Console for output
        sort_state: Used to mark the sorted column in table output
    """
    match output_format:
        case "json":
            render_json(records, console)
        case "compact":
            render_compact(records, console)
        case _:
            render_table(records, console, sort_state)


def _header(column: SortColumn, title: str, sort_state: SortState | None) -> str:
    if sort_state is None or not sort_state.active or sort_state.column is not column:
        return title
    arrow = "▲" if sort_state.direction is SortDirection.ASC else "▼"
    return f"{title} {arrow}"


def build_table(
    records: list[EventRecord],
    sort_state: SortState | None = None,
    caption: str | None = None,
) -> Table:
    """Build the events table (shared by one-shot and live output)."""
    table = Table(show_header=True, header_style="bold magenta", caption=caption)
    for column, title in COLUMN_TITLES:
        header = _header(column, title, sort_state)
        match column:
            case SortColumn.TIMESTAMP:
                table.add_column(header, style="dim", no_wrap=True)
            case SortColumn.PROTOCOL | SortColumn.IS_TARGET:
                table.add_column(header, justify="center", width=7)
            case SortColumn.DOMAIN:
                table.add_column(header, overflow="fold")
            case _:
                table.add_column(header, no_wrap=True)

    for record in records:
        style = PROTOCOL_STYLES.get(record.protocol, "white")
        target = "[green bold]●[/green bold]" if record.is_target else ""
        table.add_row(
            record.timestamp,
            f"[{style}]{record.protocol.value}[/{style}]",
            target,
            record.domain,
            record.source,
            record.destination,
        )
    return table


def render_table(
    records: list[EventRecord],
    console: Console,
    sort_state: SortState | None = None,
) -> None:
    """Render records as a Rich table."""
    console.print(build_table(records, sort_state))
    console.print(f"\n[dim]Total: {len(records)} events[/dim]")


def render_json(records: list[EventRecord], console: Console) -> None:
    """Render records as JSON."""
    output = [record.to_dict() for record in records]
    console.print(json.dumps(output, indent=2), highlight=False, markup=False, soft_wrap=True)


def render_compact(records: list[EventRecord], console: Console) -> None:
    """Render records in compact single-line format."""
    for record in records:
        style = PROTOCOL_STYLES.get(record.protocol, "white")
        marker = " [green]TARGET[/green]" if record.is_target else ""
        console.print(
            f"[dim]{record.timestamp}[/dim] [{style}]{record.protocol.value}[/{style}]{marker} "
            f"{record.domain} {record.source} -> {record.destination}",
            highlight=False,
        )


def variant_description(index: int, count: int) -> str:
    if index == 0:
        return "Most specific - exact match only"
    if index == count - 1:
        return "Broadest - matches all subdomains"
    return "Intermediate specificity"


def render_variants(target: str, variants: list[str], console: Console) -> None:
    """Render the promotion candidates for one observed value."""
    if not variants:
        console.print(f"[yellow]No rule candidates for {target!r}.[/yellow]")
        return
    table = Table(show_header=True, header_style="bold magenta", title=f"Candidates for {target}")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Pattern", style="cyan")
    table.add_column("Scope")
    for index, variant in enumerate(variants):
        table.add_row(str(index), variant, variant_description(index, len(variants)))
    console.print(table)


def render_sets(sets: list[SetConfig], console: Console) -> None:
    """Render configured sets."""
    table = Table(show_header=True, header_style="bold magenta", title="Sets")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled", justify="center")
    for set_config in sets:
        enabled = "[green]yes[/green]" if set_config.enabled else "[red]no[/red]"
        name = f"{set_config.name} [dim](main)[/dim]" if set_config.is_main else set_config.name
        table.add_row(set_config.id, name, enabled)
    console.print(table)
