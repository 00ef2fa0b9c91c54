"""Command line entry point for EnvLens."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from envlens.app import EnvLensApp
from envlens.controllers.environment.context_resolver import ContextResolver
from envlens.models.state.config_manager import (
    AppSettings,
    ConfigError,
    ConfigLoadError,
    ConfigManager,
)

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Dashboard overview of one environment.")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str, log_file: str | None) -> None:
    """Configure the root logger.

    Without a log file only a NullHandler is installed so log lines never
    draw over the terminal UI.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(level.upper())
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    else:
        handler = logging.NullHandler()
    root.addHandler(handler)


def build_settings(
    config: Optional[Path],
    *,
    base_url: Optional[str] = None,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
) -> AppSettings:
    """Load settings and apply command line overrides."""
    try:
        settings = ConfigManager.load(config)
    except ConfigLoadError as exc:
        typer.echo(f"Ignoring unreadable settings: {exc}", err=True)
        settings = AppSettings()

    overrides: dict[str, object] = {}
    if base_url:
        overrides["base_url"] = base_url
    if log_level:
        overrides["log_level"] = log_level
    if log_file is not None:
        overrides["log_file"] = str(log_file)
    return settings.model_copy(update=overrides) if overrides else settings


@app.command()
def main(
    cluster_id: Optional[str] = typer.Option(None, "--cluster-id", help="Environment id."),
    stack_name: Optional[str] = typer.Option(None, "--stack-name", help="Project name."),
    cluster_name: Optional[str] = typer.Option(
        None, "--cluster-name", help="Environment name within the project."
    ),
    url: Optional[str] = typer.Option(
        None, "--url", help="Console location to resolve the environment from."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Control-plane origin, e.g. https://cp.example.com."
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="Settings YAML file."),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
    log_file: Optional[Path] = typer.Option(None, "--log-file"),
    save_config: bool = typer.Option(
        False, "--save-config", help="Persist the effective settings and exit."
    ),
) -> None:
    """Open the environment overview."""
    settings = build_settings(
        config, base_url=base_url, log_level=log_level, log_file=log_file
    )

    if save_config:
        try:
            path = ConfigManager.save(settings, config)
        except ConfigError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
        typer.echo(f"Wrote settings: {path}")
        raise typer.Exit(code=0)

    configure_logging(settings.log_level, settings.log_file)
    logger.info("Starting against %s%s", settings.base_url, settings.api_prefix)

    attributes = {
        ContextResolver.ATTR_CLUSTER_ID: cluster_id,
        ContextResolver.ATTR_STACK_NAME: stack_name,
        ContextResolver.ATTR_CLUSTER_NAME: cluster_name,
    }
    EnvLensApp(
        attributes=attributes,
        location=url,
        settings=settings,
        config_path=config,
    ).run()


def run() -> None:
    app()


if __name__ == "__main__":
    run()
