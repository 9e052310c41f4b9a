"""Command-line entry point: ``python -m gitlab_webhook [config_path]``."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

import structlog
import uvicorn

from gitlab_webhook.config import ConfigError, ConfigStore, settings
from gitlab_webhook.dependencies import init_deps
from gitlab_webhook.logging_config import configure_logging
from gitlab_webhook.main import app


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gitlab-webhook",
        description="Run shell commands on GitLab push events.",
    )
    parser.add_argument(
        "config_path",
        nargs="?",
        default=settings.config_path,
        help=f"path to the JSON config file (default: {settings.config_path})",
    )
    return parser.parse_args(argv)


def bootstrap(config_path: str) -> ConfigStore:
    """Load the config, open the log file and wire up the dependencies.

    Raises:
        SystemExit: on an unreadable/undecodable config or an unopenable
            log file. Nothing is served in that case.
    """
    try:
        store = ConfigStore.from_path(config_path)
    except ConfigError as exc:
        raise SystemExit(f"fatal: {exc}") from exc

    try:
        configure_logging(
            logfile=store.current.logfile,
            json_logs=settings.json_logs,
            log_level=settings.log_level,
        )
    except OSError as exc:
        raise SystemExit(f"fatal: cannot open log file {store.current.logfile}: {exc}") from exc

    init_deps(store)
    return store


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    store = bootstrap(args.config_path)
    config = store.current

    host = config.address or "0.0.0.0"
    structlog.get_logger().info("listening", address=f"{host}:{config.port}")

    uvicorn.run(app, host=host, port=config.port, log_config=None)


if __name__ == "__main__":
    main(sys.argv[1:])
