"""Command line interface for the kvlet record store."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import typer

from kvlet.config import KvletConfig, load_config
from kvlet.contracts import NotifyTarget, Record
from kvlet.exceptions import KvletError
from kvlet.log import configure_logging
from kvlet.orchestrator import RecordOrchestrator

app = typer.Typer(help="Durable key-value records with state-change notifications")

HEADER = (
    "id",
    "state",
    "info",
    "method",
    "url",
    "response_code",
    "response",
    "created_at",
    "updated_at",
)


def _format_time(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S.") + f"{value.microsecond // 1000:03d}"


def _row(record: Record) -> list[str]:
    target = record.notify_target
    response = record.last_response
    return [
        record.id,
        record.state,
        record.info or "",
        target.method.value if target else "",
        target.endpoint if target else "",
        str(response.status_code) if response else "",
        response.body if response else "",
        _format_time(record.created),
        _format_time(record.updated),
    ]


def _echo_table(records: Iterable[Record]) -> None:
    typer.echo("\t".join(HEADER))
    for record in records:
        typer.echo("\t".join(_row(record)))


def _fail(message: str) -> typer.Exit:
    typer.secho(message, fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def _orchestrator(ctx: typer.Context) -> RecordOrchestrator:
    config: KvletConfig = ctx.obj
    try:
        return RecordOrchestrator.from_config(config)
    except KvletError as exc:
        raise _fail(str(exc))


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Path to a kvlet YAML config file"
    ),
    home: Optional[Path] = typer.Option(
        None, "--home", envvar="KVLET_HOME", help="Directory holding kvlet.db"
    ),
) -> None:
    """kvlet CLI entry point."""
    try:
        config = load_config(str(config_path) if config_path else None)
    except KvletError as exc:
        raise _fail(str(exc))
    if home is not None:
        config.home = str(home)
    if config.log.enabled:
        try:
            configure_logging(config.log_path, config.log.level)
        except KvletError as exc:
            raise _fail(str(exc))
    ctx.obj = config


@app.command("set")
def set_record(
    ctx: typer.Context,
    key: str = typer.Option(..., "--key", "-k", help="Record key, unique"),
    state: str = typer.Option(..., "--state", "-s", help="New state"),
    info: Optional[str] = typer.Option(None, "--info", "-i", help="Free-form payload"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Notification endpoint"),
    method: Optional[str] = typer.Option(
        None, "--method", "-m", help="Notification method: get, post or none"
    ),
) -> None:
    """
    Write a state for a key and notify its target.

    The notification target is remembered, so later writes for the same key
    do not need to repeat --url and --method.

    Example:
        kvlet set -k build-42 -s running -u http://ci.local/hook -m post
        kvlet set -k build-42 -s done
        # Output: Status: 200
        #         ok
    """
    with _orchestrator(ctx) as orchestrator:
        try:
            target = NotifyTarget.from_options(method, url)
            outcome = orchestrator.set(key, state, info=info, notify_target=target)
        except KvletError as exc:
            raise _fail(str(exc))
    if outcome is None:
        typer.echo(f"Saved {key}")
        return
    typer.echo(f"Status: {outcome.status_code}")
    if outcome.body:
        typer.echo(outcome.body)


@app.command("get")
def get_record(
    ctx: typer.Context,
    key: str = typer.Option(..., "--key", "-k", help="Record key"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="New notification endpoint"),
    method: Optional[str] = typer.Option(
        None, "--method", "-m", help="New notification method: get, post or none"
    ),
) -> None:
    """Show a record, optionally replacing its notification target."""
    with _orchestrator(ctx) as orchestrator:
        try:
            target = NotifyTarget.from_options(method, url)
            record = orchestrator.get(key, notify_target=target)
        except KvletError as exc:
            raise _fail(str(exc))
    if record is None:
        typer.echo("Record not found")
        raise typer.Exit(code=1)
    _echo_table([record])


@app.command("list")
def list_records(
    ctx: typer.Context,
    num: int = typer.Option(10, "--num", "-n", min=0, help="List the latest n records"),
    state: Optional[str] = typer.Option(None, "--state", "-s", help="Only this state"),
) -> None:
    """List the most recent records, newest first."""
    with _orchestrator(ctx) as orchestrator:
        try:
            records = orchestrator.list(num, state)
        except KvletError as exc:
            raise _fail(str(exc))
    if not records:
        typer.echo("No records found")
        return
    _echo_table(records)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()
