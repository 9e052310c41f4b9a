"""Shell command execution with protocol-based swappable runners.

Production code uses ``ShellCommandRunner`` which hands the command string
to the platform shell via ``asyncio.create_subprocess_shell`` so it never
blocks the event loop.  Tests use ``InMemoryCommandRunner`` which records
commands for assertion without spawning processes.

``CommandExecutor`` sits on top of a runner: it logs every result to the
destination selected by the active config and keeps track of commands
launched in the background.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import structlog

from gitlab_webhook.logging_config import EXEC_LOGGER_NAME

if TYPE_CHECKING:
    from gitlab_webhook.config import ConfigStore

logger = structlog.get_logger()
stdout_logger = structlog.get_logger(EXEC_LOGGER_NAME)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command run."""

    command: str
    output: str
    returncode: int | None = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CommandRunner(Protocol):
    """Protocol for running a single shell command string."""

    async def run(self, command: str) -> CommandResult:
        """Run *command* to completion and return its result.

        Failures are reported through ``CommandResult.error``, not raised.
        """
        ...


class ShellCommandRunner:
    """Production implementation backed by the platform shell.

    stderr is merged into stdout so the captured output is what a user would
    have seen on a terminal. No timeout, no output cap; the command inherits
    the server's environment and working directory.
    """

    async def run(self, command: str) -> CommandResult:
        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as exc:
            return CommandResult(command=command, output="", returncode=None, error=str(exc))

        stdout, _ = await process.communicate()
        output = stdout.decode("utf-8", errors="replace")
        if process.returncode != 0:
            return CommandResult(
                command=command,
                output=output,
                returncode=process.returncode,
                error=f"exit status {process.returncode}",
            )
        return CommandResult(command=command, output=output, returncode=0)


class InMemoryCommandRunner:
    """Test double that records commands and returns canned results."""

    def __init__(self, results: dict[str, CommandResult] | None = None) -> None:
        self.commands: list[str] = []
        self._results = results or {}

    async def run(self, command: str) -> CommandResult:
        """Record *command* and return its canned result (success by default)."""
        self.commands.append(command)
        return self._results.get(command, CommandResult(command=command, output=""))


class CommandExecutor:
    """Run commands through a ``CommandRunner`` and log what happened."""

    def __init__(self, runner: CommandRunner, config_store: ConfigStore) -> None:
        self._runner = runner
        self._config_store = config_store
        self._background: set[asyncio.Task[CommandResult | None]] = set()

    @property
    def pending(self) -> int:
        """Number of background commands still running."""
        return sum(1 for task in self._background if not task.done())

    def _log_destination(self) -> structlog.stdlib.BoundLogger:
        # Read per invocation: a reload may flip execToStd between runs.
        if self._config_store.current.exec_to_std:
            return stdout_logger
        return logger

    async def execute(self, command: str) -> CommandResult | None:
        """Run *command* synchronously and log its result.

        Returns ``None`` only when the runner itself blew up; that error is
        logged here and never reaches the caller.
        """
        try:
            result = await self._runner.run(command)
        except Exception:
            logger.exception("command_crashed", command=command)
            return None

        log = self._log_destination()
        if result.ok:
            log.info("command_executed", command=command)
            log.info("command_output", command=command, output=result.output)
        else:
            log.error("command_output_before_error", command=command, output=result.output)
            log.error("command_error", command=command, error=result.error)
        return result

    def launch(self, command: str) -> asyncio.Task[CommandResult | None]:
        """Start *command* in the background and return its task.

        The task is kept referenced until it finishes so it outlives the
        request that started it.
        """
        task = asyncio.create_task(self.execute(command))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def drain(self, timeout: float | None = None) -> int:
        """Wait up to *timeout* seconds for background commands.

        Returns how many are still running afterwards.
        """
        if self._background:
            await asyncio.wait(set(self._background), timeout=timeout)
        return self.pending
