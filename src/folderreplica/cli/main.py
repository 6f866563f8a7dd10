"""
FolderReplica CLI Main Entry Point.

Provides the command-line interface for running replication passes.
"""

from __future__ import annotations

import json
import signal
import sys
from pathlib import Path
from types import FrameType

import click
import humanize
from rich.console import Console
from rich.table import Table

from folderreplica import __version__
from folderreplica.core.config import FolderReplicaConfig, get_default_config, load_config
from folderreplica.core.logging import setup_logging
from folderreplica.core.models import SyncOutcome
from folderreplica.sync.audit import build_audit_channel
from folderreplica.sync.scheduler import ReplicationScheduler

console = Console()


def format_outcome(pass_number: int, outcome: SyncOutcome) -> str:
    """One summary line for a finished pass."""
    stats = outcome.stats
    duration = outcome.duration_seconds or 0.0
    if not outcome.success:
        return (
            f"[red]Pass {pass_number} failed after {duration:.2f}s:[/red] "
            f"{type(outcome.error).__name__}: {outcome.error}"
        )
    return (
        f"[green]Pass {pass_number} finished in {duration:.2f}s[/green] "
        f"created={stats.created} copied={stats.copied} deleted={stats.deleted} "
        f"unchanged={stats.unchanged} "
        f"({humanize.naturalsize(stats.bytes_copied, binary=True)} copied)"
    )


def build_summary_table(outcome: SyncOutcome) -> Table:
    table = Table(title="Last Pass")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    stats = outcome.stats
    table.add_row("Directories scanned", str(stats.directories_scanned))
    table.add_row("Created", str(stats.created))
    table.add_row("Copied", str(stats.copied))
    table.add_row("Deleted", str(stats.deleted))
    table.add_row("Unchanged", str(stats.unchanged))
    table.add_row("Vanished", str(stats.vanished))
    table.add_row("Bytes copied", humanize.naturalsize(stats.bytes_copied, binary=True))
    return table


@click.group()
@click.version_option(version=__version__, prog_name="FolderReplica")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    json_output: bool,
    quiet: bool,
) -> None:
    """
    FolderReplica - one-way folder replication.

    Keeps a replica folder identical to a source folder, re-syncing on a
    fixed interval.
    """
    ctx.ensure_object(dict)

    if config:
        ctx.obj["config"] = FolderReplicaConfig.load(config)
    else:
        ctx.obj["config"] = load_config()

    ctx.obj["json_output"] = json_output
    ctx.obj["quiet"] = quiet


@cli.command("run")
@click.argument("source", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("replica", type=click.Path(path_type=Path))
@click.option("--interval", "-i", type=float, help="Seconds between pass starts")
@click.option("--log-file", "-l", type=click.Path(dir_okay=False, path_type=Path), help="Audit log file")
@click.option("--workers", "-w", type=click.IntRange(min=1), help="Worker threads per pass")
@click.option("--threshold", type=click.IntRange(min=0), help="Entry count above which hash sets are used")
@click.option("--once", is_flag=True, help="Run a single pass and exit")
@click.option("--max-passes", type=click.IntRange(min=1), help="Stop after this many passes")
@click.pass_context
def run_replication(
    ctx: click.Context,
    source: Path,
    replica: Path,
    interval: float | None,
    log_file: Path | None,
    workers: int | None,
    threshold: int | None,
    once: bool,
    max_passes: int | None,
) -> None:
    """Replicate SOURCE into REPLICA until interrupted."""
    config: FolderReplicaConfig = ctx.obj["config"]
    json_output = ctx.obj.get("json_output", False)
    quiet = ctx.obj.get("quiet", False)

    overrides: dict[str, object] = {}
    if interval is not None:
        overrides["interval_seconds"] = interval
    if workers is not None:
        overrides["max_workers"] = workers
    if threshold is not None:
        overrides["hash_set_threshold"] = threshold
    sync_config = config.sync.model_copy(update=overrides)

    setup_logging(config.logging)
    audit_log = log_file.expanduser().resolve() if log_file else config.audit_log_path()

    def report_pass(pass_number: int, outcome: SyncOutcome) -> None:
        if json_output:
            click.echo(json.dumps({"pass": pass_number, **outcome.to_dict()}))
        elif not quiet or not outcome.success:
            console.print(format_outcome(pass_number, outcome))

    scheduler = ReplicationScheduler(
        source,
        replica,
        config=sync_config,
        on_pass_complete=report_pass,
    )

    def request_stop(signum: int, frame: FrameType | None) -> None:
        if not quiet and not json_output:
            console.print("[yellow]Stop requested; finishing current pass...[/yellow]")
        scheduler.stop()

    if not quiet and not json_output:
        console.print(f"[cyan]Replicating[/cyan] {source} -> {replica} (audit log: {audit_log})")

    previous = {sig: signal.signal(sig, request_stop) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        with build_audit_channel(audit_log, config.audit.echo_to_logger) as channel:
            scheduler.audit_sink = channel
            report = scheduler.run(max_passes=1 if once else max_passes)
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    if report.last_outcome is not None and not quiet and not json_output:
        console.print(build_summary_table(report.last_outcome))

    if report.last_outcome is None or not report.last_outcome.success:
        sys.exit(1)


@cli.group("config")
def config_group() -> None:
    """Inspect or create configuration files."""


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the effective configuration as JSON."""
    config: FolderReplicaConfig = ctx.obj["config"]
    click.echo(json.dumps(config.model_dump(mode="json"), indent=2))


@config_group.command("init")
@click.argument("path", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path: Path | None, force: bool) -> None:
    """Write a default configuration file."""
    config = get_default_config()
    target = path or Path.home() / ".folderreplica" / "config.json"
    if target.exists() and not force:
        console.print(f"[red]Configuration already exists: {target}[/red]")
        sys.exit(1)
    config.save(target)
    console.print(f"[green]Wrote configuration to {target}[/green]")


def main() -> None:
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
