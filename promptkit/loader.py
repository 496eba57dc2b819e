"""Load documents from files or through external loader commands."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from promptkit.command import run_loader_command
from promptkit.paths import get_patch_extension

EXTENSION_METADATA = "__extension__"
DEFAULT_EXTENSION = "txt"


@dataclass
class LoadedDocument:
    """A document's origin, its text and string metadata."""

    path: str
    contents: str
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def _from_json(cls, value: Any) -> LoadedDocument | None:
        if not isinstance(value, dict):
            return None
        path = value.get("path")
        contents = value.get("contents")
        if not isinstance(path, str) or not isinstance(contents, str):
            return None
        metadata = value.get("metadata", {})
        if not isinstance(metadata, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in metadata.items()
        ):
            return None
        return cls(path, contents, dict(metadata))


def load_file(loaders: Mapping[str, str], path: str) -> LoadedDocument:
    """Load ``path``, through the loader registered for its extension if there is one."""
    extension = get_patch_extension(path) or DEFAULT_EXTENSION
    loader_command = loaders.get(extension)
    if loader_command is not None:
        contents = run_loader_command(path, extension, loader_command)
        return LoadedDocument(path, contents, {EXTENSION_METADATA: DEFAULT_EXTENSION})
    contents = Path(path).read_text(encoding="utf-8")
    return LoadedDocument(path, contents, {EXTENSION_METADATA: extension})


def is_loader_protocol(loaders: Mapping[str, str], path: str) -> bool:
    """Whether ``path`` looks like ``protocol:...`` with a loader for ``protocol``."""
    protocol, sep, _ = path.partition(":")
    return bool(sep) and protocol in loaders


def _parse_documents(text: str) -> list[LoadedDocument] | None:
    try:
        value = json.loads(text)
    except ValueError:
        return None
    if not isinstance(value, list):
        return None
    documents = [LoadedDocument._from_json(item) for item in value]
    if any(doc is None for doc in documents):
        return None
    return documents  # type: ignore[return-value]


def load_protocol_path(loaders: Mapping[str, str], path: str) -> list[LoadedDocument]:
    """Load the documents behind a ``protocol:path`` with the protocol's loader.

    Raises ``ValueError`` when no loader is registered for the protocol.
    """
    protocol, sep, new_path = path.partition(":")
    loader_command = loaders.get(protocol) if sep else None
    if loader_command is None:
        raise ValueError(f"No document loader for '{path}'")
    contents = run_loader_command(new_path, protocol, loader_command)
    documents = _parse_documents(contents)
    if documents is None:
        return [LoadedDocument(path, contents)]
    for doc in documents:
        if doc.path.startswith(path):
            continue
        if doc.path.startswith(new_path):
            doc.path = f"{protocol}:{doc.path}"
        else:
            doc.path = f"{path}/{doc.path}"
    return documents