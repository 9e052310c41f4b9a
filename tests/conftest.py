"""Shared test fixtures for the config store, command executor and test client."""

import json
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from gitlab_webhook.config import ConfigStore
from gitlab_webhook.dependencies import get_command_executor, get_config_store
from gitlab_webhook.main import app
from gitlab_webhook.services.executor import CommandExecutor, InMemoryCommandRunner


def make_config(
    repositories: list[dict] | None = None,
    *,
    logfile: str = "webhook.log",
    exec_to_std: bool = False,
) -> dict:
    """Build a config file body in its on-disk JSON shape."""
    return {
        "Logfile": logfile,
        "execToStd": exec_to_std,
        "Address": "127.0.0.1",
        "Port": 7040,
        "Repositories": repositories if repositories is not None else [],
    }


@pytest.fixture
def anyio_backend() -> str:
    """Run anyio-marked tests on asyncio, the event loop the service is built on."""
    return "asyncio"


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[dict], Path]:
    """Return a helper that writes a config dict to a temp file and returns its path."""
    path = tmp_path / "config.json"

    def _write(config: dict) -> Path:
        path.write_text(json.dumps(config))
        return path

    return _write


@pytest.fixture
def config_store(write_config: Callable[[dict], Path]) -> ConfigStore:
    """A store with two rules for ``my-repo``: one on master, one detached on develop."""
    path = write_config(
        make_config(
            [
                {"Name": "my-repo", "Commands": ["deploy master"], "Long": False, "Branch": ""},
                {"Name": "my-repo", "Commands": ["deploy develop"], "Long": True, "Branch": "develop"},
            ]
        )
    )
    return ConfigStore.from_path(path)


@pytest.fixture
def command_runner() -> InMemoryCommandRunner:
    """Create a fresh in-memory command runner for test inspection."""
    return InMemoryCommandRunner()


@pytest.fixture
def command_executor(
    command_runner: InMemoryCommandRunner, config_store: ConfigStore
) -> CommandExecutor:
    return CommandExecutor(command_runner, config_store)


@pytest.fixture
async def client(
    config_store: ConfigStore,
    command_executor: CommandExecutor,
) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient with dependencies overridden.

    Uses a temp-file config store and an executor backed by the in-memory
    runner, so no real commands are spawned unless a test swaps the runner.
    """
    app.dependency_overrides[get_config_store] = lambda: config_store
    app.dependency_overrides[get_command_executor] = lambda: command_executor
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await command_executor.drain(timeout=5)
    app.dependency_overrides.clear()
