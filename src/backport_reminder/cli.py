"""Typer app: `run` performs one reminder pass, `show-config` prints settings."""

import json
import logging
from dataclasses import replace
from typing import List, Optional

import typer

from backport_reminder.config import AppConfig, ConfigurationError, setup_logging
from backport_reminder.github.client import GitHubAPIError
from backport_reminder.github.parser import PayloadError
from backport_reminder.runner import BackportReminder

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="backport-reminder",
    help="Remind authors and reviewers about pull requests waiting on a backport.",
    no_args_is_help=True,
)

CONFIG_OPTION = typer.Option(None, "--config", "-c", help="YAML config file (default: environment)")


def _load_config(config_path: Optional[str]) -> AppConfig:
    try:
        return AppConfig.load(config_path)
    except ConfigurationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1)


@app.command()
def run(
    config_path: Optional[str] = CONFIG_OPTION,
    dry_run: bool = typer.Option(False, "--dry-run", help="Evaluate without posting comments"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
) -> None:
    """Scan labeled pull requests and post due reminders."""
    config = _load_config(config_path)
    if dry_run:
        config = replace(config, reminder=replace(config.reminder, dry_run=True))
    if log_level:
        config = replace(config, logging=replace(config.logging, level=log_level))
        try:
            config.validate()
        except ConfigurationError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(1)

    setup_logging(config.logging)

    try:
        BackportReminder(config).run()
    except (GitHubAPIError, PayloadError) as e:
        logger.error(str(e))
        raise typer.Exit(1)
    except Exception:
        logger.exception("Reminder run failed")
        raise typer.Exit(1)


@app.command("show-config")
def show_config(config_path: Optional[str] = CONFIG_OPTION) -> None:
    """Print the effective configuration (token omitted)."""
    config = _load_config(config_path)
    typer.echo(json.dumps(config.to_dict(), indent=2))


def main(argv: Optional[List[str]] = None) -> None:
    app(args=argv)


if __name__ == "__main__":
    main()
