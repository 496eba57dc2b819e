import json

from promptkit.openai_compat import (
    ChatCompletionsOutput,
    ToolCall,
    build_chat_completion_chunk_json,
    create_done_frame,
    create_text_frame,
    create_tool_calls_frame,
    ret_err,
    ret_non_stream,
)


def _events(frame: bytes) -> list[str]:
    text = frame.decode("utf-8")
    assert text.endswith("\n\n")
    parts = text.split("\n\n")[:-1]
    assert all(p.startswith("data: ") for p in parts)
    return [p[len("data: "):] for p in parts]


def test_chunk_json_structure():
    choice = {"index": 0}
    value = build_chat_completion_chunk_json("cid", "m", 7, choice)
    assert value == {
        "id": "cid",
        "object": "chat.completion.chunk",
        "created": 7,
        "model": "m",
        "choices": [choice],
    }
    assert list(value) == ["id", "object", "created", "model", "choices"]


def test_text_frame_with_content():
    events = _events(create_text_frame("cid", "m", 5, "hello"))
    assert len(events) == 1
    value = json.loads(events[0])
    assert value["choices"] == [{"index": 0, "delta": {"content": "hello"}, "finish_reason": None}]
    assert value["id"] == "cid"


def test_text_frame_empty_content_has_role():
    value = json.loads(_events(create_text_frame("cid", "m", 5, ""))[0])
    assert value["choices"][0]["delta"] == {"role": "assistant", "content": ""}


def test_text_frame_compact_and_unicode():
    frame = create_text_frame("cid", "m", 5, "héllo")
    assert "héllo".encode("utf-8") in frame
    assert b", " not in frame


def test_tool_calls_frame():
    calls = [ToolCall("get_weather", {"city": "Paris"}, "call_1"), ToolCall("noop", {}, None)]
    events = [json.loads(e) for e in _events(create_tool_calls_frame("cid", "m", 1, calls))]
    assert len(events) == 4
    first = events[0]["choices"][0]["delta"]
    assert first["role"] == "assistant"
    assert first["content"] is None
    assert first["tool_calls"][0]["id"] == "call_1"
    assert first["tool_calls"][0]["function"] == {"name": "get_weather", "arguments": ""}
    args = events[1]["choices"][0]["delta"]["tool_calls"][0]
    assert args["index"] == 0
    assert json.loads(args["function"]["arguments"]) == {"city": "Paris"}
    assert events[2]["choices"][0]["delta"]["tool_calls"][0]["id"] is None
    assert events[3]["choices"][0]["delta"]["tool_calls"][0]["index"] == 1


def test_tool_calls_frame_empty():
    assert create_tool_calls_frame("cid", "m", 1, []) == b""


def test_done_frame_stop():
    frame = create_done_frame("cid", "m", 1, False)
    events = _events(frame)
    assert events[-1] == "[DONE]"
    value = json.loads(events[0])
    assert value["choices"][0] == {"index": 0, "delta": {}, "finish_reason": "stop"}


def test_done_frame_tool_calls():
    events = _events(create_done_frame("cid", "m", 1, True))
    assert json.loads(events[0])["choices"][0]["finish_reason"] == "tool_calls"


def test_non_stream_text():
    output = ChatCompletionsOutput(text="hi", input_tokens=3, output_tokens=4)
    value = json.loads(ret_non_stream("cid", "m", 9, output))
    assert value["id"] == "cid"
    assert value["object"] == "chat.completion"
    assert value["choices"][0]["message"] == {"role": "assistant", "content": "hi"}
    assert value["choices"][0]["finish_reason"] == "stop"
    usage = value["usage"]
    assert usage["prompt_tokens"] == 3
    assert usage["completion_tokens"] == 4
    assert usage["total_tokens"] == usage["prompt_tokens"] + usage["completion_tokens"]


def test_non_stream_prefers_output_id_and_defaults_usage():
    output = ChatCompletionsOutput(text="", id="resp-id")
    value = json.loads(ret_non_stream("cid", "m", 9, output))
    assert value["id"] == "resp-id"
    assert value["usage"]["total_tokens"] == 0


def test_non_stream_tool_calls():
    output = ChatCompletionsOutput(text="", tool_calls=[ToolCall("f", {"a": 1}, "call_1")])
    value = json.loads(ret_non_stream("cid", "m", 9, output))
    choice = value["choices"][0]
    assert choice["finish_reason"] == "tool_calls"
    assert choice["message"]["content"] is None
    call = choice["message"]["tool_calls"][0]
    assert call["id"] == "call_1"
    assert call["type"] == "function"
    assert json.loads(call["function"]["arguments"]) == {"a": 1}


def test_non_stream_tool_calls_keep_text():
    output = ChatCompletionsOutput(text="thinking", tool_calls=[ToolCall("f", {}, "x")])
    value = json.loads(ret_non_stream("cid", "m", 9, output))
    assert value["choices"][0]["message"]["content"] == "thinking"


def test_ret_err():
    value = json.loads(ret_err(ValueError("Not Found")))
    assert value == {"error": {"message": "Not Found", "type": "invalid_request_error"}}