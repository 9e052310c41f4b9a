"""Centralized FastAPI dependencies for use with Depends()."""

from __future__ import annotations

from gitlab_webhook.config import ConfigStore
from gitlab_webhook.services.executor import CommandExecutor, ShellCommandRunner

_config_store: ConfigStore | None = None
_command_executor: CommandExecutor | None = None


def init_deps(config_store: ConfigStore) -> None:
    """Install the process-wide config store and a shell-backed executor.

    Called once by the CLI after the config file has been loaded.
    """
    global _config_store, _command_executor  # noqa: PLW0603

    _config_store = config_store
    _command_executor = CommandExecutor(ShellCommandRunner(), config_store)


def get_config_store() -> ConfigStore:
    """Return the application config store.

    Raises:
        RuntimeError: if ``init_deps()`` has not been called.
    """
    if _config_store is None:
        raise RuntimeError("config store is not initialised")
    return _config_store


def get_command_executor() -> CommandExecutor:
    """Return the application command executor.

    Raises:
        RuntimeError: if ``init_deps()`` has not been called.
    """
    if _command_executor is None:
        raise RuntimeError("command executor is not initialised")
    return _command_executor


__all__ = [
    "get_command_executor",
    "get_config_store",
    "init_deps",
]
