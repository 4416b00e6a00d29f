# tests/test_models.py

import pytest

from app.errors import InvalidRequest
from app.models import ChatMessage, GenerateRequest, filter_history


def test_filter_history_drops_malformed_entries():
    history = [
        {"role": "user", "content": "keep me"},
        {"role": "user"},
        {"content": "no role"},
        {"role": "assistant", "content": None},
        {"role": ["user"], "content": "list role"},
        None,
        "text",
        42,
    ]
    assert filter_history(history) == [ChatMessage(role="user", content="keep me")]


def test_filter_history_coerces_unknown_roles_to_user():
    history = [
        {"role": "system", "content": "s"},
        {"role": "tool", "content": "t"},
        {"role": "assistant", "content": "a"},
        {"role": "user", "content": "u"},
    ]
    assert [m.role for m in filter_history(history)] == ["user", "user", "assistant", "user"]
    assert [m.content for m in filter_history(history)] == ["s", "t", "a", "u"]


def test_filter_history_is_idempotent():
    history = [{"role": "system", "content": "s"}, {"role": "x"}, {"role": "assistant", "content": "a"}]
    once = filter_history(history)
    assert filter_history(once) == once
    assert filter_history([m.model_dump() for m in once]) == once


@pytest.mark.parametrize("value", [None, "history", 3, {"role": "user", "content": "x"}])
def test_filter_history_non_sequence_is_empty(value):
    assert filter_history(value) == []


def test_filter_history_ignores_extra_keys():
    turns = filter_history([{"role": "user", "content": "hi", "timestamp": "now"}])
    assert turns[0].model_dump() == {"role": "user", "content": "hi"}


def test_from_payload_accepts_prompt_without_history():
    request = GenerateRequest.from_payload({"prompt": "add two numbers"})
    assert request.prompt == "add two numbers"
    assert request.history == []


@pytest.mark.parametrize("payload", [None, [], "prompt", {}, {"prompt": ""}, {"prompt": 1}])
def test_from_payload_rejects_missing_prompt(payload):
    with pytest.raises(InvalidRequest) as exc_info:
        GenerateRequest.from_payload(payload)
    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Prompt is required"


def test_chat_message_is_immutable():
    msg = ChatMessage(role="user", content="x")
    with pytest.raises(Exception):
        msg.content = "y"
