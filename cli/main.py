"""s3-checker CLI.

Command-line interface for discovering and auditing S3 buckets that belong
to a target organization.
"""

import asyncio
import sys
from typing import Optional

import click
from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from cli.config import load_config, parse_value, save_config
from cli.utils import format_duration, format_rate, parse_status_codes, pluralize
from s3checker import __version__
from s3checker.core.config import settings
from s3checker.core.error_handler import S3CheckerError
from s3checker.core.generator import generate
from s3checker.core.logging import setup_logging
from s3checker.core.orchestrator import ScanOptions, ScanOrchestrator, ScanSummary
from s3checker.core.wordlist import load_wordlist
from s3checker.reports.result_sink import ConsoleDestination, FileDestination, ResultSink

console = Console()
err_console = Console(stderr=True)


# Main CLI group
@click.group()
@click.version_option(version=__version__, prog_name="s3-checker")
@click.pass_context
def cli(ctx):
    """S3 bucket discovery and exposure audit.

    Guesses bucket names for a target, probes them and reports which ones
    exist and whether anyone can list them.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config()


@cli.command("scan")
@click.option("--target", "-t", required=True, help="Target name (required)")
@click.option("--wordlist", "-w", type=click.Path(exists=True, dir_okay=False), help="Wordlist file")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file")
@click.option("--append", is_flag=True, help="Append to the output file instead of truncating it")
@click.option("--concurrency", "-c", type=click.IntRange(min=1), help=f"Concurrent probes (default {settings.DEFAULT_CONCURRENCY})")
@click.option("--rate-limit", "-r", type=click.IntRange(min=0), help="Max probes per second (0 = unlimited)")
@click.option("--include-code", type=int, help="Only report this status code")
@click.option("--exclude-code", multiple=True, help="Never report these status codes (repeatable, comma-separated)")
@click.option("--acl-fallback/--no-acl-fallback", default=None, help="Use the aws CLI with --no-sign-request when HTTP listing is inconclusive")
@click.option("--feeds/--no-feeds", default=None, help="Query GrayHatWarfare and osint.sh for extra candidates")
@click.option("--region/--no-region", default=None, help="Look up the bucket region")
@click.option("--verbose", "-v", is_flag=True, help="Verbose mode")
@click.pass_context
def scan_command(
    ctx,
    target,
    wordlist,
    output,
    append,
    concurrency,
    rate_limit,
    include_code,
    exclude_code,
    acl_fallback,
    feeds,
    region,
    verbose,
):
    """Scan buckets for a target.

    Examples:
        s3-checker scan -t acme
        s3-checker scan -t acme -w words.txt -o found.txt -c 100 -r 20
        s3-checker scan -t acme --include-code 200 --acl-fallback
    """
    cfg = ctx.obj["config"]
    setup_logging("DEBUG" if verbose else None)

    try:
        exclude_codes = parse_status_codes(exclude_code or cfg.get("exclude_codes") or ())
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--exclude-code")

    options = ScanOptions(
        target=target.strip(),
        wordlist_path=wordlist or cfg.get("wordlist"),
        concurrency=(
            concurrency
            if concurrency is not None
            else _configured_int(cfg, "concurrency", settings.DEFAULT_CONCURRENCY, minimum=1)
        ),
        rate_per_second=(
            rate_limit if rate_limit is not None else _configured_int(cfg, "rate_limit", 0, minimum=0)
        ),
        include_code=include_code,
        exclude_codes=exclude_codes,
        acl_fallback=_pick(acl_fallback, cfg.get("acl_fallback")),
        use_feeds=_pick(feeds, cfg.get("feeds")),
        discover_region=_pick(region, cfg.get("region")),
    )

    sink = None
    try:
        destinations = [ConsoleDestination(console)]
        if output:
            destinations.append(FileDestination(output, append=append))
        sink = ResultSink(destinations)

        orchestrator = ScanOrchestrator(options, sink=sink)
        summary = asyncio.run(_run_scan(orchestrator))

    except S3CheckerError as e:
        err_console.print(f"[red]✗[/red] {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        err_console.print("[yellow]Interrupted[/yellow]")
        sys.exit(130)
    finally:
        if sink is not None:
            sink.close()

    _print_summary(summary, output)


def _configured_int(cfg, key: str, default: int, minimum: int) -> int:
    """Integer from the config file, checked like the matching command-line option."""
    value = cfg.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise click.BadParameter(
            f"{value!r} in the config file must be an integer >= {minimum}",
            param_hint=key,
        )
    return value


def _pick(flag: Optional[bool], configured) -> bool:
    """Command-line flag when given, config file value otherwise."""
    if flag is not None:
        return flag
    return bool(configured)


async def _run_scan(orchestrator: ScanOrchestrator) -> ScanSummary:
    with err_console.status("[bold green]Collecting candidates..."):
        candidates = await orchestrator.prepare_candidates()

    err_console.print(
        f"[cyan]Scanning {len(candidates)} {pluralize(len(candidates), 'candidate')} "
        f"for '{orchestrator.options.target}'[/cyan]"
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Probing", total=len(candidates))

        def on_progress(result, scan_progress):
            progress.update(task_id, completed=scan_progress.completed)

        return await orchestrator.scan(candidates, progress_callback=on_progress)


def _print_summary(summary: ScanSummary, output: Optional[str]) -> None:
    table = Table(title=f"Scan summary: {summary.target}", show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Candidates", str(summary.candidates))
    for feed_name, count in summary.feed_contributions.items():
        table.add_row(f"  from {feed_name}", str(count))
    table.add_row("Scanned", str(summary.scanned))
    table.add_row("Existing", str(summary.existing))
    table.add_row("Public", f"[red]{summary.public}[/red]" if summary.public else "0")
    table.add_row("Private", str(summary.private))
    table.add_row("Unreachable", str(summary.unreachable))
    table.add_row("Reported", str(summary.emitted))
    table.add_row("Duration", format_duration(summary.duration))
    table.add_row("Throughput", format_rate(summary.scanned, summary.duration))
    if output:
        table.add_row("Output", output)

    err_console.print(table)


@cli.command("generate")
@click.option("--target", "-t", required=True, help="Target name (required)")
@click.option("--wordlist", "-w", type=click.Path(exists=True, dir_okay=False), help="Wordlist file")
@click.pass_context
def generate_command(ctx, target, wordlist):
    """Print permutation candidates without probing them.

    Examples:
        s3-checker generate -t acme
        s3-checker generate -t acme -w words.txt > candidates.txt
    """
    try:
        words = load_wordlist(wordlist or ctx.obj["config"].get("wordlist"))
    except S3CheckerError as e:
        err_console.print(f"[red]✗[/red] {e}")
        sys.exit(1)

    for candidate in generate(target.strip(), words):
        click.echo(candidate)


# Config commands
@cli.group()
def config():
    """Manage CLI configuration."""
    pass


@config.command("show")
def config_show():
    """Show current configuration."""
    cfg = load_config()

    table = Table(title="CLI Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    for key, value in cfg.items():
        table.add_row(key, str(value))

    console.print(table)


@config.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key, value):
    """Set configuration value.

    Examples:
        s3-checker config set concurrency 100
        s3-checker config set exclude_codes "[400, 404]"
    """
    try:
        cfg = load_config()
        cfg[key] = parse_value(value)
        save_config(cfg)

        console.print(f"[green]✓[/green] Set {key} = {cfg[key]}")

    except OSError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli(obj={})
