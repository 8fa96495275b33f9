"""CLI entry point for signal exports."""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from signal_export.core.config import SignalExportConfig, load_config
from signal_export.core.errors import TargetRejectedError
from signal_export.exports import (
    BaseSignalExport,
    Collective2SignalExport,
    CrunchDAOSignalExport,
    NumeraiSignalExport,
)
from signal_export.manager import SignalExportManager
from signal_export.models import SignalExportTargetParameters
from signal_export.snapshot import PortfolioSnapshot, load_snapshot

app = typer.Typer(
    name="signal-export",
    help="Translate portfolio targets into signal-copying service formats",
)


class Destination(str, Enum):
    COLLECTIVE2 = "collective2"
    CRUNCHDAO = "crunchdao"
    NUMERAI = "numerai"


def setup_logging(log_dir: Path, verbose: bool = False) -> None:
    """Configure loguru logging.

    Args:
        log_dir: Directory for log files
        verbose: Enable verbose debug logging
    """
    logger.remove()

    log_level = "DEBUG" if verbose else "INFO"
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
        "<level>{message}</level>",
        level=log_level,
    )

    log_dir.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_dir / "signal_export_{time}.log",
        rotation="1 day",
        retention="7 days",
        level="DEBUG",
    )


def build_preview_export(destination: Destination, config: SignalExportConfig) -> BaseSignalExport:
    """Build an export for message rendering; credentials default to empty."""
    if destination == Destination.COLLECTIVE2:
        return Collective2SignalExport(
            config.collective2_api_key or "",
            config.collective2_system_id or 0,
            config.collective2_platform_id,
        )
    if destination == Destination.CRUNCHDAO:
        return CrunchDAOSignalExport(
            config.crunchdao_api_key or "",
            config.crunchdao_model or "",
            config.crunchdao_submission_name,
            config.crunchdao_comment,
        )
    return NumeraiSignalExport(
        config.numerai_public_id or "",
        config.numerai_secret_id or "",
        config.numerai_model_id or "",
        config.numerai_filename,
    )


def _load(path: Path) -> PortfolioSnapshot:
    try:
        return load_snapshot(path)
    except FileNotFoundError:
        typer.echo(f"Snapshot file not found: {path}", err=True)
        raise typer.Exit(code=2) from None
    except (ValueError, ValidationError) as exc:
        typer.echo(f"Invalid snapshot {path}: {exc}", err=True)
        raise typer.Exit(code=2) from None


@app.command()
def preview(
    snapshot_path: Path = typer.Argument(..., help="Portfolio snapshot JSON file"),
    destination: Destination = typer.Option(
        Destination.COLLECTIVE2, "--destination", "-d", help="Destination format"
    ),
    derive: bool = typer.Option(
        False, "--derive", help="Derive targets from holdings instead of the snapshot targets"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Print the message a destination would receive, without sending it."""

    config = load_config()
    setup_logging(config.log_dir, verbose)

    snapshot = _load(snapshot_path)
    account = snapshot.account()
    manager = SignalExportManager()
    targets = (
        manager.get_portfolio_targets(account)
        if derive or snapshot.targets is None
        else snapshot.targets
    )
    if targets is None:
        typer.echo("Total account value must be positive to derive targets.", err=True)
        raise typer.Exit(code=1)

    with build_preview_export(destination, config) as export:
        if not export.validate(targets):
            typer.echo(f"Targets rejected by {destination.value}.", err=True)
            raise typer.Exit(code=1)
        parameters = SignalExportTargetParameters(targets=tuple(targets), account=account)
        try:
            message = export.build_message(parameters)
        except TargetRejectedError as exc:
            typer.echo(f"Targets rejected by {destination.value}: {exc}", err=True)
            raise typer.Exit(code=1) from None

    typer.echo(message, nl=False)


@app.command()
def targets(
    snapshot_path: Path = typer.Argument(..., help="Portfolio snapshot JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Show the weights derived from the snapshot holdings."""

    config = load_config()
    setup_logging(config.log_dir, verbose)

    account = _load(snapshot_path).account()
    derived = SignalExportManager().get_portfolio_targets(account)
    if derived is None:
        typer.echo("Total account value must be positive to derive targets.", err=True)
        raise typer.Exit(code=1)

    table = Table(title=f"Portfolio targets (account value {account.total_value})")
    table.add_column("Symbol", style="cyan")
    table.add_column("Type")
    table.add_column("Weight", justify="right")
    for target in derived:
        table.add_row(
            target.symbol.value,
            target.symbol.security_type.value,
            f"{target.quantity:.4%}",
        )
    Console().print(table)


@app.command()
def send(
    snapshot_path: Path = typer.Argument(..., help="Portfolio snapshot JSON file"),
    derive: bool = typer.Option(
        False, "--derive", help="Derive targets from holdings instead of the snapshot targets"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Send the snapshot targets to every configured destination."""

    config = load_config()
    setup_logging(config.log_dir, verbose)

    snapshot = _load(snapshot_path)
    exports = config.create_signal_exports()
    if not exports:
        typer.echo("No destinations configured. Set SIGNAL_EXPORT_* credentials.", err=True)
        raise typer.Exit(code=1)

    with SignalExportManager(*exports) as manager:
        explicit = None if derive else snapshot.targets
        report = manager.set_target_portfolio(snapshot.account(), explicit)

    if not report.accepted:
        typer.echo("Export refused: account value must be positive.", err=True)
        raise typer.Exit(code=1)
    for name, ok in report.results:
        typer.echo(f"{name}: {'sent' if ok else 'FAILED'}")
    if not report:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
