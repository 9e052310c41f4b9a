"""Shared base for the payload and config models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class ZeroValueModel(BaseModel):
    """Frozen model where a JSON ``null`` means "use the field default".

    GitLab sends ``null`` for unset values (a project without a description,
    a commit without an author); those decode like a missing key instead of
    failing the whole payload.
    """

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data
