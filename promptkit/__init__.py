"""Utilities for LLM command-line tools: templates, paths, loaders, spinners and API payloads."""

__version__ = "0.30.0"

__all__ = [
    "abort_signal",
    "clipboard",
    "command",
    "common",
    "crypto",
    "loader",
    "openai_compat",
    "paths",
    "render_prompt",
    "serve_requests",
    "spinner",
    "variables",
]