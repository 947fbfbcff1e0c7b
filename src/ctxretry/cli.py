"""Command-line entry points for ctxretry."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import requests
import typer

from ctxretry.config import ConfigError, dump_example_config, load_config
from ctxretry.errors import RetryError
from ctxretry.io.fetcher import build_session, fetch, fetch_file
from ctxretry.util.logging import configure_logging

app = typer.Typer(add_completion=False, help="Deadline-bound exponential retry tooling")


def _load(config: Optional[Path]):
    try:
        return load_config(config)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)


def _policy(cfg, name: str):
    try:
        return cfg.policy(name)
    except KeyError:
        typer.echo(f"Unknown policy '{name}'. Known: {', '.join(cfg.policies.names())}", err=True)
        raise typer.Exit(code=2)


@app.command()
def schedule(
    policy: str = typer.Option("default", "--policy", "-p", help="Policy name"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (YAML/TOML/JSON)"),
) -> None:
    """Print the backoff waits of a policy and its worst-case total."""

    cfg = _load(config)
    selected = _policy(cfg, policy)

    elapsed = 0.0
    for attempt, wait in enumerate(selected.schedule()):
        elapsed += wait
        typer.echo(f"after attempt {attempt}: wait {wait:.3f}s (cumulative {elapsed:.3f}s)")

    worst = selected.worst_case_wait_seconds()
    typer.echo(f"attempts: {selected.max_retries + 1}")
    typer.echo(f"worst-case wait: {worst:.3f}s")
    if selected.deadline_seconds is None:
        typer.echo("deadline: none (callers must supply one)")
    elif worst > selected.deadline_seconds:
        typer.echo(f"deadline: {selected.deadline_seconds:.3f}s (shorter than worst-case wait)")
    else:
        typer.echo(f"deadline: {selected.deadline_seconds:.3f}s")


@app.command(name="fetch")
def fetch_command(
    url: str = typer.Argument(..., help="URL to request"),
    policy: str = typer.Option("http", "--policy", "-p", help="Policy name"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the body here instead of stdout"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (YAML/TOML/JSON)"),
) -> None:
    """GET a URL, retrying failures under the chosen policy."""

    cfg = _load(config)
    logger = configure_logging(level=cfg.logging.level, log_path=cfg.logging.log_path)
    selected = _policy(cfg, policy)
    session = build_session(cfg.http.headers)

    try:
        if output is not None:
            fetch_file(url, output, policy=selected, session=session)
            logger.info("Wrote %s", output)
            typer.echo(f"Wrote {output}")
        else:
            response = fetch(url, policy=selected, session=session)
            typer.echo(response.text)
    except (RetryError, requests.RequestException) as exc:
        logger.error("Fetching %s failed: %s", url, exc)
        raise typer.Exit(code=1)


@app.command()
def dump_config(dest: Path = typer.Argument(..., help="Destination (.yaml or .json)")) -> None:
    """Write the default configuration to a file."""

    try:
        dump_example_config(dest)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)
    typer.echo(f"Wrote {dest}")


def main() -> None:
    app()


__all__ = ["main", "app"]
