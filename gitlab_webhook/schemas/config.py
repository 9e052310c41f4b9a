"""Pydantic models for the JSON config file.

The file keeps its historical key names (``Logfile``, ``Repositories``,
``Long`` ...); the models expose them under snake_case attribute names.
"""

from pydantic import ConfigDict, Field

from gitlab_webhook.schemas.base import ZeroValueModel


class Rule(ZeroValueModel):
    """A repository + branch to command-list mapping."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Name")
    commands: tuple[str, ...] = Field(default=(), alias="Commands")
    # Long-running commands are launched in the background.
    detached: bool = Field(default=False, alias="Long")
    # Empty means "master"; resolved when matching, never rewritten here.
    branch: str = Field(default="", alias="Branch")


class ServerConfig(ZeroValueModel):
    """One complete, immutable snapshot of the config file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    logfile: str = Field(alias="Logfile", min_length=1)
    exec_to_std: bool = Field(default=False, alias="execToStd")
    address: str = Field(default="", alias="Address")
    port: int = Field(default=0, alias="Port")
    repositories: tuple[Rule, ...] = Field(default=(), alias="Repositories")
