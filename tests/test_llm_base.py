"""Tests for request/response records."""

import dataclasses

import pytest

from softgen.llm.base import DEFAULT_SAMPLING, ChatModel, ChatRequest, Message, StreamFrame


def test_chat_model_names():
    assert ChatModel(0).model_name == "deepseek-chat"
    assert ChatModel(1).model_name == "deepseek-reasoner"
    with pytest.raises(ValueError):
        ChatModel(2)


def test_request_payload_flattens_sampling():
    request = ChatRequest.for_prompt("hello", ChatModel.CHAT, {"temperature": 0.2})
    payload = request.to_payload()

    assert payload["model"] == "deepseek-chat"
    assert payload["messages"] == [{"role": "user", "content": "hello"}]
    assert payload["stream"] is True
    assert payload["temperature"] == 0.2
    assert payload["presence_penalty"] == DEFAULT_SAMPLING["presence_penalty"]
    assert "sampling" not in payload


def test_request_is_immutable():
    request = ChatRequest.for_prompt("hello", ChatModel.CHAT)
    with pytest.raises(dataclasses.FrozenInstanceError):
        request.model = "other"


def test_message_to_dict():
    assert Message(role="system", content="be brief").to_dict() == {"role": "system", "content": "be brief"}


class TestStreamFrame:

    def test_decodes_delta(self):
        frame = StreamFrame.from_json('{"choices": [{"delta": {"content": "hi"}}]}')
        assert frame.text == "hi"

    def test_unknown_fields_are_ignored(self):
        data = (
            '{"id": "c1", "object": "chat.completion.chunk", "model": "deepseek-chat",'
            ' "choices": [{"index": 0, "delta": {"content": "x", "reasoning_content": "r"},'
            ' "finish_reason": null}], "usage": null}'
        )
        assert StreamFrame.from_json(data).text == "x"

    def test_empty_choices(self):
        assert StreamFrame.from_json('{"choices": []}').text == ""
        assert StreamFrame.from_json("{}").text == ""

    @pytest.mark.parametrize("data", [
        "{bad json}",
        "",
        "[1, 2]",
        '"text"',
        '{"choices": "nope"}',
        '{"choices": [1]}',
        '{"choices": [{"delta": "nope"}]}',
        '{"choices": [{"delta": {"content": 5}}]}',
    ])
    def test_malformed_payload_returns_none(self, data):
        assert StreamFrame.from_json(data) is None


def test_request_is_hashable_and_sampling_read_only():
    request = ChatRequest.for_prompt("hello", ChatModel.CHAT, {"top_p": 0.5})
    assert hash(request) == hash(ChatRequest.for_prompt("hello", ChatModel.CHAT, {"top_p": 0.5}))
    assert isinstance(request.sampling, tuple)
    assert dict(request.sampling)["top_p"] == 0.5
