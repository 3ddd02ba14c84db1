# src/gpinstall/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from gpinstall.config.loader import load_config
from gpinstall.errors import InstallError
from gpinstall.install.steps import HostSetup
from gpinstall.logging.log import init_logging
from gpinstall.observers.dispatcher import EventBus
from gpinstall.observers.jsonfile import JsonFileObserver
from gpinstall.observers.logger import LoggerObserver
from gpinstall.topology.models import InstallationTopology
from gpinstall.utils.execution import ExecutionContext


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Greenplum host setup CLI")

ConfigOption = typer.Option(None, "--config", "-c", help="Install definition YAML")
LogDirOption = typer.Option(None, "--log-dir", help="Directory for run logs (default ~/.gpinstall/logs)")
DebugOption = typer.Option(False, "--debug")


def _setup(config: Optional[Path], log_dir: Optional[Path], debug: bool, dry_run: bool = False) -> HostSetup:
    logger, run_id, log_path = init_logging(base_dir=log_dir, verbose=debug)

    typer.echo("")
    typer.secho("gpinstall started", bold=True)
    typer.echo(f"  Run ID   : {run_id}")
    typer.echo(f"  Logs     : {log_path}")
    typer.echo("")

    cfg = load_config(config)
    bus = EventBus(
        observers=[
            LoggerObserver(logger),
            JsonFileObserver(log_path.parent / f"{run_id}.jsonl"),
        ]
    )
    return HostSetup(cfg, ctx=ExecutionContext(dry_run=dry_run), bus=bus, run_id=run_id)


def _summary(topo: InstallationTopology) -> None:
    typer.echo("")
    typer.echo(f"  Mode          : {topo.mode.value}")
    typer.echo(f"  Hosts         : {', '.join(topo.validated_hosts)}")
    typer.echo(f"  Segment hosts : {', '.join(topo.segment_hosts) or '-'}")
    typer.echo(f"  Host file     : {topo.working_host_file}")
    typer.echo(f"  Segment file  : {topo.segment_host_file}")


def _abort(exc: InstallError) -> None:
    typer.secho(f"[error] {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command()
def hosts(
    config: Optional[Path] = ConfigOption,
    log_dir: Optional[Path] = LogDirOption,
    debug: bool = DebugOption,
):
    """Discover, validate and persist the installation hosts."""
    try:
        setup = _setup(config, log_dir, debug)
        topo = setup.discover()
    except InstallError as exc:
        _abort(exc)
    _summary(topo)


@app.command()
def install(
    config: Optional[Path] = ConfigOption,
    log_dir: Optional[Path] = LogDirOption,
    dry_run: bool = typer.Option(False, "--dry-run"),
    debug: bool = DebugOption,
):
    """Validate the hosts, then enable keyless SSH and install the segments."""
    try:
        setup = _setup(config, log_dir, debug, dry_run=dry_run)
        topo = setup.run()
    except InstallError as exc:
        _abort(exc)
    _summary(topo)
    typer.secho("Host setup complete", bold=True)


if __name__ == "__main__":
    app()
