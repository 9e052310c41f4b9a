"""Match push events against the configured rules and run their commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from gitlab_webhook.schemas.config import Rule, ServerConfig
    from gitlab_webhook.schemas.webhooks import PushEvent
    from gitlab_webhook.services.executor import CommandExecutor

logger = structlog.get_logger()

DEFAULT_BRANCH = "master"


def derive_branch(ref: str) -> str:
    """Return the last ``/``-separated segment of *ref*.

    ``refs/heads/main`` gives ``main``; a ref without ``/`` comes back as is.
    """
    return ref.rsplit("/", 1)[-1]


def rule_matches(rule: Rule, repository: str, branch: str) -> bool:
    """Check a rule against a repository name and branch.

    A rule without a branch only matches pushes to ``master``.
    """
    if rule.name != repository:
        return False
    return (rule.branch or DEFAULT_BRANCH) == branch


def matching_rules(config: ServerConfig, event: PushEvent) -> list[Rule]:
    """Return every rule matching *event*, in configured order."""
    branch = derive_branch(event.ref)
    return [
        rule
        for rule in config.repositories
        if rule_matches(rule, event.repository.name, branch)
    ]


async def dispatch(event: PushEvent, config: ServerConfig, executor: CommandExecutor) -> int:
    """Run the commands of all rules matching *event*.

    Commands of detached rules are launched in the background; the others
    are awaited one after the other. A failing command never stops the
    ones after it. Returns the number of commands started.
    """
    started = 0
    for rule in matching_rules(config, event):
        for command in rule.commands:
            logger.info("webhook_triggered", project=rule.name, command=command)
            if rule.detached:
                executor.launch(command)
            else:
                await executor.execute(command)
            started += 1
    return started
