"""Command line entry point for TutorLink."""

from __future__ import annotations

import os
import sys

import click
import uvicorn

from tutorlink.config import ConfigError, Settings
from tutorlink.logging import get_logger, setup_logging
from tutorlink.platform import TutorPlatform

logger = get_logger("cli")


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(package_name="tutorlink")
def main() -> None:
    """TutorLink - tutor linkage and course enrollment service."""
    pass


@main.command("init-db")
def init_db() -> None:
    """Create the database tables if they don't exist."""
    settings = _load_settings()
    setup_logging(console=False)
    platform = TutorPlatform.from_settings(settings)
    platform.close()
    logger.info("Initialized database at %s", settings.db_path)
    click.echo(f"Database ready at {settings.db_path}")


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Reload on code changes (development only)")
@click.option("--log-level", default=None, help="Log level (default: TUTORLINK_LOG_LEVEL or INFO)")
def serve(host: str, port: int, reload: bool, log_level: str | None) -> None:
    """Run the REST API."""
    # Fail fast on bad configuration before uvicorn starts importing the app
    _load_settings()
    # Picked up by the app at startup, including in reload workers
    if log_level:
        os.environ["TUTORLINK_LOG_LEVEL"] = log_level

    click.echo(f"Serving TutorLink API on http://{host}:{port}")
    uvicorn.run("tutorlink.api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
