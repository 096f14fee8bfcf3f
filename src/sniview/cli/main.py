"""
Main CLI entry point for sniview.

Uses the application layer use cases and infrastructure adapters.
"""

import logging

import click
from rich.console import Console

from sniview import __version__
from sniview.core.exceptions import ConfigurationError
from sniview.core.models import SortColumn

console = Console()
error_console = Console(stderr=True)

SORT_CHOICES = [column.value for column in SortColumn]


def _config(ctx: click.Context):
    """Load the config once per invocation."""
    from sniview.config import load_config

    if "config" not in ctx.obj:
        try:
            config = load_config(ctx.obj.get("config_path"))
        except ConfigurationError as e:
            error_console.print(f"[red]Configuration error:[/red] {e}")
            ctx.exit(2)
        if ctx.obj.get("base_url"):
            config.base_url = ctx.obj["base_url"]
        ctx.obj["config"] = config
    return ctx.obj["config"]


def _client(ctx: click.Context):
    from sniview.infrastructure import SniviewApiClient

    config = _config(ctx)
    return SniviewApiClient(config.base_url, timeout=config.request_timeout)


@click.group()
@click.version_option(version=__version__, prog_name="sniview")
@click.option(
    "--config", "-c", "config_path", type=click.Path(dir_okay=False),
    help="Config file (default: per-user config.ini)"
)
@click.option(
    "--base-url", "-u", envvar="SNIVIEW_BASE_URL",
    help="Appliance base URL, e.g. http://192.168.1.1:7000"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str | None,
    base_url: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """
    sniview - live view of SNI events from a filtering appliance

    Watch TLS/QUIC SNI detections as they happen, filter and sort them,
    and promote interesting domains or addresses into rule sets.

    Examples:

    \b
        sniview watch
        sniview watch --filter "protocol:udp+google"
        websocat ws://router:7000/api/ws/logs | sniview watch -
        sniview parse --sort domain capture.log
        sniview variants cdn.video.example.com
        sniview add-domain a.b.example.com --pick example.com
        sniview add-ip 203.0.113.7:443 --prefix 203.0.113.0/24
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path
    ctx.obj["base_url"] = base_url
    ctx.obj["console"] = console
    ctx.obj["error_console"] = error_console


@cli.command()
@click.argument("source", required=False)
@click.option(
    "--filter", "-F", "filter_text", default="",
    help="Filter expression, e.g. 'domain:google+protocol:udp'"
)
@click.option(
    "--sort", "-s", type=click.Choice(SORT_CHOICES),
    help="Sort column (default: arrival order, or the saved sort)"
)
@click.option("--desc", "descending", is_flag=True, help="Sort descending")
@click.option("--limit", "-n", type=int, help="Limit number of rows displayed")
@click.option(
    "--persist/--no-persist", default=True,
    help="Keep the last events across runs (default: on)"
)
@click.option(
    "--refresh", "-r", type=float, default=0.5,
    help="Seconds between screen refreshes (default: 0.5)"
)
@click.pass_context
def watch(
    ctx: click.Context,
    source: str | None,
    filter_text: str,
    sort: str | None,
    descending: bool,
    limit: int | None,
    persist: bool,
    refresh: float,
) -> None:
    """
    Watch SNI events live.

    SOURCE is an http(s) URL streaming one event per line, "-" for stdin,
    or a captured file to replay. Without SOURCE the configured appliance
    stream is used.

    On a terminal, Ctrl+X or Delete clears the events, p pauses and
    resumes, and q quits. Keys are not read when events come from stdin.

    Examples:

    \b
        sniview watch
        sniview watch http://192.168.1.1:7000/api/logs/stream
        sniview watch --sort timestamp --desc capture.log
    """
    from sniview.cli.commands import watch_command

    exit_code = watch_command(
        config=_config(ctx),
        location=source,
        filter_text=filter_text,
        sort=sort,
        descending=descending,
        limit=limit,
        persist=persist,
        refresh=refresh,
        console=ctx.obj["console"],
        error_console=ctx.obj["error_console"],
    )
    ctx.exit(exit_code)


@cli.command()
@click.argument("files", nargs=-1, type=click.Path(exists=True))
@click.option(
    "--output", "-o", "output_format",
    type=click.Choice(["table", "json", "compact"]),
    default="table",
    help="Output format (default: table)"
)
@click.option("--filter", "-F", "filter_text", default="", help="Filter expression")
@click.option("--sort", "-s", type=click.Choice(SORT_CHOICES), help="Sort column")
@click.option("--desc", "descending", is_flag=True, help="Sort descending")
@click.option("--limit", "-n", type=int, help="Limit number of events to display")
@click.pass_context
def parse(
    ctx: click.Context,
    files: tuple[str, ...],
    output_format: str,
    filter_text: str,
    sort: str | None,
    descending: bool,
    limit: int | None,
) -> None:
    """
    Parse captured event lines and display them.

    Lines that are not SNI events are skipped. Reads stdin when no files
    are given.

    Examples:

    \b
        sniview parse capture.log
        sniview parse --output json --filter target:true capture.log
        cat capture.log | sniview parse --sort domain
    """
    from sniview.cli.commands import parse_command

    exit_code = parse_command(
        files=files,
        filter_text=filter_text,
        sort=sort,
        descending=descending,
        output_format=output_format,
        limit=limit,
        quiet=ctx.obj.get("quiet", False),
        console=ctx.obj["console"],
        error_console=ctx.obj["error_console"],
    )
    ctx.exit(exit_code)


@cli.command()
@click.argument("target")
@click.pass_context
def variants(ctx: click.Context, target: str) -> None:
    """
    Show rule candidates for a domain or address.

    \b
        sniview variants a.b.example.com
        sniview variants 203.0.113.7:443
    """
    from sniview.cli.commands import variants_command

    ctx.exit(variants_command(target, ctx.obj["console"]))


def _promote(ctx, kind, target, picks, set_id, new_set):
    from sniview.cli.commands import make_promote_use_case, promote_command

    if set_id and new_set:
        ctx.obj["error_console"].print("[red]Error:[/red] Use either --set or --new-set, not both")
        ctx.exit(2)

    exit_code = promote_command(
        use_case=make_promote_use_case(kind, _client(ctx)),
        target=target,
        picks=picks,
        set_id=set_id,
        new_set=new_set,
        console=ctx.obj["console"],
        error_console=ctx.obj["error_console"],
    )
    ctx.exit(exit_code)


@cli.command("add-domain")
@click.argument("domain")
@click.option(
    "--pick", "-p", "picks", multiple=True,
    help="Suffix to add instead of the full domain (repeatable)"
)
@click.option("--set", "set_id", help="Target set id (default: main set)")
@click.option("--new-set", help="Create a set with this name and add to it")
@click.pass_context
def add_domain(
    ctx: click.Context,
    domain: str,
    picks: tuple[str, ...],
    set_id: str | None,
    new_set: str | None,
) -> None:
    """
    Add a domain (or one of its suffixes) to a set.

    \b
        sniview add-domain a.b.example.com
        sniview add-domain a.b.example.com --pick example.com
        sniview add-domain video.example.com --new-set Streaming
    """
    _promote(ctx, "domain", domain, picks, set_id, new_set)


@cli.command("add-ip")
@click.argument("endpoint")
@click.option(
    "--prefix", "-p", "picks", multiple=True,
    help="Network to add instead of the single address (repeatable)"
)
@click.option("--set", "set_id", help="Target set id (default: main set)")
@click.option("--new-set", help="Create a set with this name and add to it")
@click.pass_context
def add_ip(
    ctx: click.Context,
    endpoint: str,
    picks: tuple[str, ...],
    set_id: str | None,
    new_set: str | None,
) -> None:
    """
    Add an address (or an enclosing network) to a set.

    ENDPOINT may carry a port, which is ignored.

    \b
        sniview add-ip 203.0.113.7:443
        sniview add-ip 203.0.113.7 --prefix 203.0.113.0/24
        sniview add-ip "[2001:db8::1]:443" --prefix 2001:db8::/48
    """
    _promote(ctx, "ip", endpoint, picks, set_id, new_set)


@cli.command()
@click.pass_context
def sets(ctx: click.Context) -> None:
    """List the sets configured on the appliance."""
    from sniview.cli.commands import sets_command

    ctx.exit(sets_command(_client(ctx), ctx.obj["console"], ctx.obj["error_console"]))


@cli.command()
@click.argument("action", type=click.Choice(["show", "clear"]), default="show")
@click.option(
    "--output", "-o", "output_format",
    type=click.Choice(["table", "json", "compact"]),
    default="table",
    help="Output format (default: table)"
)
@click.pass_context
def history(ctx: click.Context, action: str, output_format: str) -> None:
    """
    Show or clear the events kept between runs.

    \b
        sniview history
        sniview history clear
    """
    from sniview.cli.commands import history_command

    exit_code = history_command(
        config=_config(ctx),
        action=action,
        output_format=output_format,
        console=ctx.obj["console"],
        error_console=ctx.obj["error_console"],
    )
    ctx.exit(exit_code)


if __name__ == "__main__":
    cli()
