"""Build OpenAI-compatible chat completion payloads and server-sent event frames."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolCall:
    """A function call requested by the model."""

    name: str
    arguments: Any = field(default_factory=dict)
    id: str | None = None


@dataclass
class ChatCompletionsOutput:
    """The complete result of a non-streaming chat completion."""

    text: str = ""
    tool_calls: list[ToolCall] = field(default_factory=list)
    id: str | None = None
    input_tokens: int | None = None
    output_tokens: int | None = None


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def _event(value: Any) -> str:
    return f"data: {_dumps(value)}\n\n"


def build_chat_completion_chunk_json(
    completion_id: str, model: str, created: int, choice: dict[str, Any]
) -> dict[str, Any]:
    """The JSON object of one ``chat.completion.chunk``."""
    return {
        "id": completion_id,
        "object": "chat.completion.chunk",
        "created": created,
        "model": model,
        "choices": [choice],
    }


def create_text_frame(completion_id: str, model: str, created: int, content: str) -> bytes:
    """An event carrying a piece of assistant text."""
    if content:
        delta: dict[str, Any] = {"content": content}
    else:
        delta = {"role": "assistant", "content": content}
    choice = {"index": 0, "delta": delta, "finish_reason": None}
    chunk = build_chat_completion_chunk_json(completion_id, model, created, choice)
    return _event(chunk).encode("utf-8")


def create_tool_calls_frame(
    completion_id: str, model: str, created: int, tool_calls: list[ToolCall]
) -> bytes:
    """Events announcing each tool call and then its arguments."""
    events = []
    for i, call in enumerate(tool_calls):
        announce = {
            "index": 0,
            "delta": {
                "role": "assistant",
                "content": None,
                "tool_calls": [
                    {
                        "index": i,
                        "id": call.id,
                        "type": "function",
                        "function": {"name": call.name, "arguments": ""},
                    }
                ],
            },
            "finish_reason": None,
        }
        arguments = {
            "index": 0,
            "delta": {
                "tool_calls": [
                    {"index": i, "function": {"arguments": _dumps(call.arguments)}}
                ]
            },
            "finish_reason": None,
        }
        for choice in (announce, arguments):
            events.append(_event(build_chat_completion_chunk_json(completion_id, model, created, choice)))
    return "".join(events).encode("utf-8")


def create_done_frame(completion_id: str, model: str, created: int, has_tool_calls: bool) -> bytes:
    """The final event with the finish reason, followed by ``[DONE]``."""
    choice = {
        "index": 0,
        "delta": {},
        "finish_reason": "tool_calls" if has_tool_calls else "stop",
    }
    chunk = build_chat_completion_chunk_json(completion_id, model, created, choice)
    return f"{_event(chunk)}data: [DONE]\n\n".encode("utf-8")


def ret_non_stream(
    completion_id: str, model: str, created: int, output: ChatCompletionsOutput
) -> bytes:
    """The JSON body of a non-streaming ``chat.completion`` response."""
    response_id = output.id if output.id is not None else completion_id
    input_tokens = output.input_tokens or 0
    output_tokens = output.output_tokens or 0
    if not output.tool_calls:
        choice: dict[str, Any] = {
            "index": 0,
            "message": {"role": "assistant", "content": output.text},
            "logprobs": None,
            "finish_reason": "stop",
        }
    else:
        choice = {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": output.text or None,
                "tool_calls": [
                    {
                        "id": call.id,
                        "type": "function",
                        "function": {"name": call.name, "arguments": _dumps(call.arguments)},
                    }
                    for call in output.tool_calls
                ],
            },
            "logprobs": None,
            "finish_reason": "tool_calls",
        }
    body = {
        "id": response_id,
        "object": "chat.completion",
        "created": created,
        "model": model,
        "choices": [choice],
        "usage": {
            "prompt_tokens": input_tokens,
            "completion_tokens": output_tokens,
            "total_tokens": input_tokens + output_tokens,
        },
    }
    return _dumps(body).encode("utf-8")


def ret_err(err: Any) -> bytes:
    """The JSON body of an ``invalid_request_error`` response."""
    body = {"error": {"message": str(err), "type": "invalid_request_error"}}
    return _dumps(body).encode("utf-8")