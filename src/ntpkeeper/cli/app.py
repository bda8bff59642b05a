# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/ntpkeeper/cli/app.py
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
import yaml
from pydantic import ValidationError

from ntpkeeper.config.loader import load_config
from ntpkeeper.config.models import NtpConfig
from ntpkeeper.errors import UnsupportedOSError
from ntpkeeper.logging.log import init_logging
from ntpkeeper.observers.console import ConsoleObserver
from ntpkeeper.observers.dispatcher import EventBus
from ntpkeeper.observers.events import ConfigRendered, new_ctx
from ntpkeeper.observers.jsonfile import JsonFileObserver
from ntpkeeper.observers.logger import LoggerObserver
from ntpkeeper.platform.facts import OS_RELEASE, detect_os_family
from ntpkeeper.reconcile.planner import plan as plan_order
from ntpkeeper.reconcile.reconciler import reconcile
from ntpkeeper.render.template_renderer import render_ntp_conf
from ntpkeeper.utils.serialize import to_jsonable


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="ntpkeeper: NTP daemon desired-state planner")

FORMATS = ("yaml", "json")


# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------

def _load(config: Path) -> NtpConfig:
    try:
        return load_config(config)
    except ValidationError as exc:
        typer.secho(f"Invalid config {config}:\n{exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(2)


def _bus(logger, run_id: str, log_dir: Optional[Path], events: bool) -> EventBus:
    observers: List = [LoggerObserver(logger)]
    if log_dir is not None:
        observers.append(JsonFileObserver(log_dir / f"{run_id}.jsonl"))
    if events:
        observers.append(ConsoleObserver())
    return EventBus(observers=observers)


def _dump(data, fmt: str) -> str:
    if fmt == "json":
        return json.dumps(data, indent=2) + "\n"
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------

@app.command()
def plan(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Desired-state YAML"),
    os_family: Optional[str] = typer.Option(
        None,
        "--os-family",
        help="OS family fact (RedHat, CentOS, Debian, Ubuntu). Detected from os-release when omitted.",
    ),
    fmt: str = typer.Option("yaml", "--format", help="Output format: yaml or json"),
    ordered: bool = typer.Option(False, "--ordered", help="Print resources in apply order"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the catalog here instead of stdout"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for run logs"),
    events: bool = typer.Option(False, "--events", help="Echo lifecycle events to stderr"),
    debug: bool = typer.Option(False, "--debug"),
):
    """Print the managed-resource catalog for CONFIG."""
    if fmt not in FORMATS:
        raise typer.BadParameter(f"Unknown format '{fmt}'. Valid formats: {', '.join(FORMATS)}")

    logger, run_id, _ = init_logging(base_dir=log_dir, verbose=debug)
    desired = _load(config)

    if os_family:
        family = os_family
    elif OS_RELEASE.is_file():
        family = detect_os_family(OS_RELEASE)
    else:
        typer.secho(
            f"{OS_RELEASE} not found; pass --os-family to choose a family",
            err=True,
            fg=typer.colors.RED,
        )
        raise typer.Exit(1)
    logger.debug("os family: %s", family)

    bus = _bus(logger, run_id, log_dir, events)
    ctx = new_ctx(env=family, context=str(config))
    ctx["run_id"] = run_id

    try:
        resources = reconcile(desired, family, bus=bus, run_ctx=ctx)
    except UnsupportedOSError as exc:
        typer.secho(str(exc), err=True, fg=typer.colors.RED)
        raise typer.Exit(1)

    if ordered:
        resources = plan_order(resources, bus=bus, run_ctx=ctx)

    text = _dump(to_jsonable(resources), fmt)
    if output is None:
        typer.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text)
    logger.info("Wrote %d resources to %s", len(resources), output)


@app.command()
def render(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="Desired-state YAML"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write ntp.conf here instead of stdout"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for run logs"),
    debug: bool = typer.Option(False, "--debug"),
):
    """Render ntp.conf for CONFIG."""
    logger, run_id, _ = init_logging(base_dir=log_dir, verbose=debug)
    text = render_ntp_conf(_load(config))

    if output is None:
        typer.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text)
    logger.info("Wrote %s (%d bytes)", output, len(text))

    ctx = new_ctx(env="n/a", context=str(config))
    ctx["run_id"] = run_id
    _bus(logger, run_id, log_dir, events=False).emit(
        ConfigRendered(path=str(output), size=len(text), **ctx)
    )


@app.command()
def facts(
    os_release: Path = typer.Option(OS_RELEASE, "--os-release", help="os-release file to inspect"),
):
    """Print the detected OS family."""
    if not os_release.is_file():
        typer.secho(f"{os_release} not found", err=True, fg=typer.colors.RED)
        raise typer.Exit(1)
    typer.echo(detect_os_family(os_release))


if __name__ == "__main__":
    app()
