"""Pydantic models for GitLab push webhook payloads."""

from pydantic import Field

from gitlab_webhook.schemas.base import ZeroValueModel


class CommitAuthor(ZeroValueModel):
    """Author information from a Git commit."""

    name: str = ""
    email: str = ""


class Commit(ZeroValueModel):
    """A single commit within a GitLab push event."""

    id: str = ""
    message: str = ""
    timestamp: str = ""
    url: str = ""
    author: CommitAuthor = Field(default_factory=CommitAuthor)


class Repository(ZeroValueModel):
    """Repository metadata from the webhook payload."""

    name: str = ""
    url: str = ""
    description: str = ""
    homepage: str = ""


class PushEvent(ZeroValueModel):
    """GitLab push webhook event payload.

    Every field is optional: a missing key decodes to its empty value and
    unknown keys are ignored, so only a body that is not a JSON object (or
    carries wrongly typed fields) fails to decode.

    Reference: https://docs.gitlab.com/ee/user/project/integrations/webhook_events.html#push-events
    """

    before: str = ""
    after: str = ""
    ref: str = ""
    user_name: str = ""
    user_id: int = 0
    project_id: int = 0
    repository: Repository = Field(default_factory=Repository)
    commits: tuple[Commit, ...] = ()
    total_commits_count: int = 0
