"""Tests for the push event and config Pydantic models."""

import pytest
from pydantic import ValidationError

from gitlab_webhook.schemas.config import Rule
from gitlab_webhook.schemas.webhooks import PushEvent


def test_push_event_parses_gitlab_payload() -> None:
    payload = """
    {
      "object_kind": "push",
      "before": "95790bf891e76fee5e1747ab589903a6a1f80f22",
      "after": "da1560886d4f094c3e6c9ef40349f7d38b5d27d7",
      "ref": "refs/heads/master",
      "user_name": "John Smith",
      "user_id": 4,
      "project_id": 15,
      "repository": {
        "name": "Diaspora",
        "url": "git@example.com:mike/diaspora.git",
        "description": "",
        "homepage": "http://example.com/mike/diaspora"
      },
      "commits": [
        {
          "id": "b6568db1bc1dcd7f8b4d5a946b0b91f9dacd7327",
          "message": "Update Catalan translation to e38cb41.",
          "timestamp": "2011-12-12T14:27:31+02:00",
          "url": "http://example.com/mike/diaspora/commit/b6568db1",
          "author": {"name": "Jordi Mallach", "email": "jordi@softcatala.org"}
        }
      ],
      "total_commits_count": 1
    }
    """

    event = PushEvent.model_validate_json(payload)

    assert event.ref == "refs/heads/master"
    assert event.user_id == 4
    assert event.project_id == 15
    assert event.repository.name == "Diaspora"
    assert event.repository.homepage == "http://example.com/mike/diaspora"
    assert len(event.commits) == 1
    assert event.commits[0].author.email == "jordi@softcatala.org"
    assert event.total_commits_count == 1


def test_push_event_empty_object_uses_defaults() -> None:
    event = PushEvent.model_validate_json("{}")

    assert event.ref == ""
    assert event.repository.name == ""
    assert event.commits == ()


@pytest.mark.parametrize(
    "payload",
    ["", "null", "[]", '"refs/heads/master"', '{"repository": "my-repo"}', '{"commits": {}}'],
)
def test_push_event_rejects_malformed_json(payload: str) -> None:
    with pytest.raises(ValidationError):
        PushEvent.model_validate_json(payload)


def test_push_event_is_immutable() -> None:
    event = PushEvent.model_validate_json('{"ref": "refs/heads/main"}')

    with pytest.raises(ValidationError):
        event.ref = "refs/heads/other"  # type: ignore[misc]


def test_rule_accepts_file_keys_and_attribute_names() -> None:
    from_file = Rule.model_validate({"Name": "r", "Commands": ["a"], "Long": True, "Branch": "b"})
    from_code = Rule(name="r", commands=("a",), detached=True, branch="b")

    assert from_file == from_code


def test_push_event_nulls_decode_to_defaults() -> None:
    payload = """
    {
      "ref": "refs/heads/master",
      "user_name": null,
      "repository": {"name": "my-repo", "description": null, "homepage": null},
      "commits": [{"id": "abc", "author": null, "message": null}]
    }
    """

    event = PushEvent.model_validate_json(payload)

    assert event.user_name == ""
    assert event.repository.description == ""
    assert event.repository.homepage == ""
    assert event.commits[0].author.name == ""
    assert event.commits[0].message == ""


def test_push_event_null_commits_is_empty() -> None:
    event = PushEvent.model_validate_json('{"commits": null, "repository": null}')

    assert event.commits == ()
    assert event.repository.name == ""
