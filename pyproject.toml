[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "promptkit"
version = "0.30.0"
description = "Utilities for LLM command-line tools: prompt templates, path globs, document loaders, spinners and OpenAI-compatible payload builders"
requires-python = ">=3.10"
dependencies = []
keywords = ["llm", "cli", "prompt", "openai", "chat-completions"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[tool.hatch.build.targets.wheel]
packages = ["promptkit"]

[tool.pytest.ini_options]
addopts = "-ra"
