"""
CLI commands using the application layer use cases.

This module provides the CLI command implementations that wire up
the infrastructure adapters to the application use cases.
"""

import queue
import sys
import threading
from typing import Callable, Iterable

import click
from rich.console import Console
from rich.live import Live
from rich.markup import escape

from sniview.application import (
    EventChannel,
    EventStore,
    LiveEventsView,
    LineSourcePort,
    PromoteDomainUseCase,
    PromoteIpUseCase,
    PromoteUseCase,
)
from sniview.config import AppConfig
from sniview.core.exceptions import BackendError, StorageError
from sniview.core.models import MAIN_SET_ID, NEW_SET_ID, Notification, SortColumn, SortDirection, SortState
from sniview.domain import (
    filter_records,
    generate_domain_variants,
    generate_ip_variants,
    sort_records,
)
from sniview.infrastructure import (
    FileLineSource,
    HttpLineSource,
    JsonLineStore,
    SniviewApiClient,
    StdinLineSource,
)
from sniview.parsers import SniLineParser
from sniview.cli.output import build_table, render_records, render_sets, render_variants

__all__ = [
    "create_source",
    "KeyReader",
    "translate_key",
    "dispatch_keys",
    "watch_command",
    "parse_command",
    "variants_command",
    "promote_command",
    "sets_command",
    "history_command",
    "make_promote_use_case",
]

# Raw click.getchar() output -> (key name, ctrl held)
KEY_MAP = {
    "\x18": ("x", True),            # Ctrl+X
    "\x1b[3~": ("Delete", False),   # Delete, POSIX terminals
    "\x00S": ("Delete", False),     # Delete, Windows console
    "\xe0S": ("Delete", False),
}

QUIT_KEYS = ("q", "Q", "\x03")

WATCH_KEYS_HINT = "Ctrl+X/Del clear, p pause, q quit"


def create_source(location: str | None, config: AppConfig) -> LineSourcePort:
    """
    Create the line source adapter for a location.

    Args:
        location: URL, "-" for stdin, a file path, or None for the
            configured appliance stream

    Returns:
        Source adapter instance
    """
    if location is None:
        return HttpLineSource(config.stream_url)
    if location == "-":
        return StdinLineSource()
    if location.startswith(("http://", "https://")):
        return HttpLineSource(location)
    return FileLineSource(location)


def _sort_state(sort: str | None, descending: bool) -> SortState:
    column = SortColumn.from_string(sort)
    if column is None:
        return SortState()
    direction = SortDirection.DESC if descending else SortDirection.ASC
    return SortState(column, direction)


class KeyReader:
    """
    Read single key presses on a daemon thread.

    Keys are only queued here; the watch loop applies them on its own
    thread so the store is never touched concurrently. The reader stops
    after a quit key, which also lets click restore the terminal mode.

    Example:
        reader = KeyReader()
        reader.start()
        for char in reader.drain():
            ...
    """

    def __init__(self, getchar: Callable[[], str] = click.getchar):
        self.keys: "queue.Queue[str]" = queue.Queue()
        self._getchar = getchar
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._thread = threading.Thread(target=self._run, name="sniview-keys", daemon=True)
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def drain(self) -> list[str]:
        """Return every key read since the last call."""
        chars = []
        while True:
            try:
                chars.append(self.keys.get_nowait())
            except queue.Empty:
                return chars

    def _run(self) -> None:
        while True:
            try:
                char = self._getchar()
            except (EOFError, KeyboardInterrupt):
                char = "\x03"
            self.keys.put(char)
            if char in QUIT_KEYS:
                return


def translate_key(char: str) -> tuple[str, bool]:
    """Map raw terminal input to the (key, ctrl) pair LiveEventsView expects."""
    return KEY_MAP.get(char, (char, False))


def dispatch_keys(view: LiveEventsView, chars: Iterable[str]) -> tuple[list[Notification], bool]:
    """
    Apply key presses to the view.

    Returns:
        (notifications to show, whether a quit key was pressed)
    """
    notifications = []
    for char in chars:
        if char in QUIT_KEYS:
            return notifications, True
        key, ctrl = translate_key(char)
        notification = view.handle_key(key, ctrl=ctrl)
        if notification is not None:
            notifications.append(notification)
    return notifications, False


def _keyboard_available(source: LineSourcePort) -> bool:
    # Piped events own stdin; keys need a terminal of their own
    return not isinstance(source, StdinLineSource) and sys.stdin.isatty()


def watch_command(
    config: AppConfig,
    location: str | None,
    filter_text: str,
    sort: str | None,
    descending: bool,
    limit: int | None,
    persist: bool,
    refresh: float,
    console: Console,
    error_console: Console,
    key_reader: KeyReader | None = None,
) -> int:
    """
    Stream events into the store and keep the table on screen.

    Files are replayed and rendered once; HTTP and stdin sources are shown
    live until the stream ends or the user interrupts. When a terminal is
    attached and the events do not arrive on stdin, Ctrl+X or Delete clears
    the buffer, p pauses and resumes, and q quits.

    Args:
        key_reader: Key source (default: the terminal, when available)

    Returns:
        Exit code (0 = success, 1 = error)
    """
    try:
        source = create_source(location, config)
    except FileNotFoundError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        return 1

    line_store = JsonLineStore(config.state_dir, max_lines=config.max_lines) if persist else None

    with EventStore(line_store, capacity=config.max_lines) as store:
        view = LiveEventsView(store, line_store=line_store)
        view.filter_text = filter_text
        if sort:
            view.sort_state = _sort_state(sort, descending)

        if key_reader is None and not isinstance(source, FileLineSource) and _keyboard_available(source):
            key_reader = KeyReader()

        def render():
            result = view.refresh()
            rows = result.rows[:limit] if limit else result.rows
            caption = f"{result.total_count} events"
            if filter_text:
                caption += f", {result.filtered_count} filtered"
            if store.is_paused():
                caption += " [yellow](paused)[/yellow]"
            if store.stream_failed:
                caption += " [red](stream error)[/red]"
            if key_reader is not None:
                caption += f"  [dim]{WATCH_KEYS_HINT}[/dim]"
            return build_table(rows, view.sort_state, caption=caption)

        channel = EventChannel(source, is_paused=store.is_paused)

        if isinstance(source, FileLineSource):
            channel.run_inline()
            while store.pump(channel.events):
                pass
            console.print(render())
            return 0

        try:
            with channel, Live(render(), console=console, refresh_per_second=4) as live:
                if key_reader is not None:
                    key_reader.start()
                ended_shown = False
                while True:
                    changed = store.pump(channel.events, timeout=refresh)
                    if key_reader is not None:
                        notifications, quit_requested = dispatch_keys(view, key_reader.drain())
                        for notification in notifications:
                            live.console.print(f"[green]{escape(notification.message)}[/green]")
                        if quit_requested:
                            break
                        changed = changed or bool(notifications)
                    if changed:
                        live.update(render())
                    if channel.running or not channel.events.empty():
                        continue
                    if key_reader is None or not key_reader.running:
                        break
                    if not ended_shown:
                        live.console.print("[dim]Stream ended. Press q to quit.[/dim]")
                        ended_shown = True
                live.update(render())
        except KeyboardInterrupt:
            pass

    if store.stream_failed:
        error_console.print("[red]Event stream failed.[/red] Restart the command to reconnect.")
        return 1
    return 0


def parse_command(
    files: tuple[str, ...],
    filter_text: str,
    sort: str | None,
    descending: bool,
    output_format: str,
    limit: int | None,
    quiet: bool,
    console: Console,
    error_console: Console,
) -> int:
    """
    Parse captured lines once and display them.

    Returns:
        Exit code (0 = success, 1 = error)
    """
    parser = SniLineParser()
    sources: list[LineSourcePort] = []

    if not files:
        if sys.stdin.isatty():
            error_console.print("[red]Error:[/red] No files specified")
            return 1
        sources.append(StdinLineSource())
    else:
        for file_path in files:
            try:
                sources.append(FileLineSource(file_path))
            except FileNotFoundError as e:
                error_console.print(f"[red]Error:[/red] {e}")

    records = []
    for source in sources:
        records.extend(parser.parse_stream(source.read_lines()))

    records = filter_records(records, filter_text)
    state = _sort_state(sort, descending)
    records = sort_records(records, state)

    if limit:
        records = records[:limit]

    if records:
        render_records(records, output_format, console, state)
    elif not quiet:
        console.print("[yellow]No matching events found.[/yellow]")

    return 0


def variants_command(target: str, console: Console) -> int:
    """Show domain suffixes or network prefixes for a value."""
    variants = generate_ip_variants(target)
    if not variants:
        variants = generate_domain_variants(target)
    render_variants(target, variants, console)
    return 0


def promote_command(
    use_case: PromoteUseCase,
    target: str,
    picks: tuple[str, ...],
    set_id: str | None,
    new_set: str | None,
    console: Console,
    error_console: Console,
) -> int:
    """
    Add an observed domain or address to a set.

    Args:
        use_case: PromoteDomainUseCase or PromoteIpUseCase
        target: Observed domain or endpoint
        picks: Chosen variants (default: the most specific one)
        set_id: Existing set to insert into (default: the main set)
        new_set: Name of a set to create and insert into

    Returns:
        Exit code (0 = success, 1 = error)
    """
    state = use_case.open(target, sets=use_case.refresh_sets())

    if picks:
        unknown = [p for p in picks if p not in state.variants]
        if unknown:
            error_console.print(
                f"[red]Error:[/red] {', '.join(unknown)} is not a candidate for {state.target}. "
                f"Candidates: {', '.join(state.variants) or 'none'}"
            )
            return 1
        use_case.select_variant(list(picks) if len(picks) > 1 else picks[0])

    if new_set is not None:
        use_case.resolver.select(NEW_SET_ID)
        use_case.resolver.type_name(new_set)
        if not use_case.resolver.confirm():
            error_console.print("[red]Error:[/red] New set name must not be blank")
            return 1
    elif set_id is not None:
        use_case.resolver.select(set_id)
    elif not use_case.resolver.is_ready:
        use_case.resolver.select(MAIN_SET_ID)

    notification = use_case.add()
    if notification is None:
        error_console.print(f"[red]Error:[/red] Nothing to add for {target!r}")
        return 1
    if notification.is_error:
        error_console.print(f"[red]{escape(notification.message)}[/red]")
        return 1
    console.print(f"[green]{escape(notification.message)}[/green]")
    return 0


def sets_command(client: SniviewApiClient, console: Console, error_console: Console) -> int:
    """List configured sets."""
    try:
        sets = client.list_sets()
    except BackendError as e:
        error_console.print(f"[red]Failed to fetch sets:[/red] {e.message}")
        return 1
    render_sets(sets, console)
    return 0


def history_command(
    config: AppConfig,
    action: str,
    output_format: str,
    console: Console,
    error_console: Console,
) -> int:
    """Show or clear the persisted event lines."""
    line_store = JsonLineStore(config.state_dir, max_lines=config.max_lines)

    if action == "clear":
        try:
            line_store.clear_lines()
        except StorageError as e:
            error_console.print(f"[red]Error:[/red] {e.message}")
            return 1
        console.print("[green]Cleared persisted events.[/green]")
        return 0

    lines = line_store.load_lines()
    records = list(SniLineParser().parse_stream(lines))
    if not records:
        console.print("[yellow]No persisted events.[/yellow]")
        return 0
    render_records(records, output_format, console)
    return 0


def make_promote_use_case(kind: str, client: SniviewApiClient) -> PromoteUseCase:
    if kind == "ip":
        return PromoteIpUseCase(client, client)
    return PromoteDomainUseCase(client, client)
