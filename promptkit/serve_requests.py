"""Request bodies and helpers for the OpenAI-compatible HTTP endpoints."""

from __future__ import annotations

import ipaddress
import json
import re
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

_PORT_RE = re.compile(r"\+?[0-9]+")
_DEFAULT_PORT = 8000


def resolve_serve_addr(addr: str | None, default_addr: str) -> str:
    """Turn a port, an IP address or a full address into ``host:port``.

    A bare port binds to ``127.0.0.1``, a bare IP to port 8000, and anything else is
    used as given. Without ``addr`` the configured ``default_addr`` is used.
    """
    if addr is None:
        return default_addr
    if _PORT_RE.fullmatch(addr) and int(addr) <= 0xFFFF:
        return f"127.0.0.1:{int(addr)}"
    try:
        ip = ipaddress.ip_address(addr)
    except ValueError:
        return addr
    return f"{ip}:{_DEFAULT_PORT}"


def generate_completion_id() -> str:
    """A ``chatcmpl-`` identifier built from the current sub-second nanoseconds."""
    return f"chatcmpl-{time.time_ns() % 1_000_000_000}"


def cors_headers() -> dict[str, str]:
    """Headers that let any origin call the API."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET,POST,PUT,PATCH,DELETE",
        "Access-Control-Allow-Headers": "Content-Type,Authorization",
    }


def parse_tools(tools: list[Any] | None) -> list[dict[str, Any]] | None:
    """Extract the function declarations from an OpenAI ``tools`` list.

    Raises ``ValueError`` naming the first entry that is not a function tool.
    """
    if tools is None:
        return None
    functions = []
    for i, tool in enumerate(tools):
        function = tool.get("function") if isinstance(tool, dict) else None
        if not (isinstance(tool, dict) and tool.get("type") == "function" and isinstance(function, dict)):
            raise ValueError(f"Failed to parse '.tools[{i}]'")
        functions.append(dict(function))
    return functions


# --- request bodies -------------------------------------------------------------


@dataclass
class ChatCompletionsRequest:
    """Body of ``POST /v1/chat/completions``."""

    model: str
    messages: list[Any]
    temperature: float | None = None
    top_p: float | None = None
    max_tokens: int | None = None
    stream: bool = False
    tools: list[Any] | None = None


@dataclass
class EmbeddingsRequest:
    """Body of ``POST /v1/embeddings``."""

    input: str | list[str]
    model: str

    @property
    def texts(self) -> list[str]:
        """The input as a list of texts."""
        return [self.input] if isinstance(self.input, str) else list(self.input)


@dataclass
class RerankRequest:
    """Body of ``POST /v1/rerank``."""

    documents: list[str]
    query: str
    model: str
    top_n: int | None = None

    @property
    def effective_top_n(self) -> int:
        """``top_n``, or the number of documents when it is not given."""
        return len(self.documents) if self.top_n is None else self.top_n


@dataclass
class SearchRagRequest:
    """Body of ``POST /v1/rags/search``."""

    name: str
    input: str


# --- parsing --------------------------------------------------------------------


class _BodyError(ValueError):
    pass


def _load_object(body: bytes | str | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(body, Mapping):
        return body
    try:
        value = json.loads(body)
    except ValueError as exc:
        raise ValueError(f"Invalid request json, {exc}") from exc
    if not isinstance(value, dict):
        raise ValueError(f"Invalid request body, expected an object, found {_kind(value)}")
    return value


def _kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _missing(name: str) -> _BodyError:
    return _BodyError(f"missing field `{name}`")


def _wrong(name: str, value: Any, expected: str) -> _BodyError:
    return _BodyError(f"invalid type for `{name}`: {_kind(value)}, expected {expected}")


def _string(obj: Mapping[str, Any], name: str) -> str:
    if name not in obj:
        raise _missing(name)
    value = obj[name]
    if not isinstance(value, str):
        raise _wrong(name, value, "a string")
    return value


def _string_list(obj: Mapping[str, Any], name: str) -> list[str]:
    if name not in obj:
        raise _missing(name)
    value = obj[name]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise _wrong(name, value, "a sequence of strings")
    return list(value)


def _array(obj: Mapping[str, Any], name: str, optional: bool = False) -> list[Any] | None:
    value = obj.get(name)
    if value is None:
        if optional:
            return None
        if name not in obj:
            raise _missing(name)
    if not isinstance(value, list):
        raise _wrong(name, value, "a sequence")
    return list(value)


def _number(obj: Mapping[str, Any], name: str) -> float | None:
    value = obj.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _wrong(name, value, "a number")
    return float(value)


def _integer(obj: Mapping[str, Any], name: str, unsigned: bool = False) -> int | None:
    value = obj.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise _wrong(name, value, "an integer")
    if unsigned and value < 0:
        raise _BodyError(f"invalid value for `{name}`: {value}, expected a non-negative integer")
    return value


def _parse(body: bytes | str | Mapping[str, Any], build: Any) -> Any:
    obj = _load_object(body)
    try:
        return build(obj)
    except _BodyError as exc:
        raise ValueError(f"Invalid request body, {exc}") from None


def _build_chat(obj: Mapping[str, Any]) -> ChatCompletionsRequest:
    stream = obj.get("stream", False)
    if not isinstance(stream, bool):
        raise _wrong("stream", stream, "a boolean")
    return ChatCompletionsRequest(
        model=_string(obj, "model"),
        messages=_array(obj, "messages") or [],
        temperature=_number(obj, "temperature"),
        top_p=_number(obj, "top_p"),
        max_tokens=_integer(obj, "max_tokens"),
        stream=stream,
        tools=_array(obj, "tools", optional=True),
    )


def _build_embeddings(obj: Mapping[str, Any]) -> EmbeddingsRequest:
    if "input" not in obj:
        raise _missing("input")
    value = obj["input"]
    if isinstance(value, str):
        text_input: str | list[str] = value
    elif isinstance(value, list) and all(isinstance(v, str) for v in value):
        text_input = list(value)
    else:
        raise _BodyError("data did not match any variant of `input`")
    return EmbeddingsRequest(input=text_input, model=_string(obj, "model"))


def _build_rerank(obj: Mapping[str, Any]) -> RerankRequest:
    return RerankRequest(
        documents=_string_list(obj, "documents"),
        query=_string(obj, "query"),
        model=_string(obj, "model"),
        top_n=_integer(obj, "top_n", unsigned=True),
    )


def _build_search_rag(obj: Mapping[str, Any]) -> SearchRagRequest:
    return SearchRagRequest(name=_string(obj, "name"), input=_string(obj, "input"))


def parse_chat_completions_request(body: bytes | str | Mapping[str, Any]) -> ChatCompletionsRequest:
    """Parse a chat completions body; raises ``ValueError`` when it is invalid."""
    return _parse(body, _build_chat)


def parse_embeddings_request(body: bytes | str | Mapping[str, Any]) -> EmbeddingsRequest:
    """Parse an embeddings body; raises ``ValueError`` when it is invalid."""
    return _parse(body, _build_embeddings)


def parse_rerank_request(body: bytes | str | Mapping[str, Any]) -> RerankRequest:
    """Parse a rerank body; raises ``ValueError`` when it is invalid."""
    return _parse(body, _build_rerank)


def parse_search_rag_request(body: bytes | str | Mapping[str, Any]) -> SearchRagRequest:
    """Parse a RAG search body; raises ``ValueError`` when it is invalid."""
    return _parse(body, _build_search_rag)