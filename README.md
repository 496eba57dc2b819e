# promptkit

Building blocks for LLM command-line tools and OpenAI-compatible servers.
The package uses only the standard library.

## Installation

```
pip install .
```

## Modules

- `promptkit.render_prompt`: `render_prompt(template, variables)` renders a
  prompt template. `{var}` is replaced with the value of `var`, `{?var ...}`
  is rendered only when `var` is truthy, and `{!var ...}` only when it is
  falsy (empty, `0` or `false`).
- `promptkit.common`: `now`, `now_timestamp`, `get_env_name`,
  `normalize_env_name`, `parse_bool`, `estimate_token_length`,
  `strip_think_tag`, `extract_code_block`, `convert_option_string`,
  `fuzzy_filter`, `pretty_error`, `indent_text`, `multiline_text`,
  `error_text`, `warning_text`, `color_text`, `dimmed_text` (colours are
  left out when `NO_COLOR` is set or standard output is not a terminal),
  `temp_file` and `is_url`.
- `promptkit.crypto`: `sha256`, `hmac_sha256`, `hex_encode`, `encode_uri`,
  `base64_encode` and `base64_decode` (which raises `ValueError` on bad input).
- `promptkit.paths`: `safe_join_path`, `parse_glob`, `expand_glob_paths`,
  `list_file_names`, `get_patch_extension`, `to_absolute_path` and
  `resolve_home_dir`.
- `promptkit.command`: `Shell` and `detect_shell`, `run_command`,
  `run_command_with_output`, `run_loader_command` (where `$1` stands for the
  input path and `$2` for an output file), `edit_file` and
  `append_to_shell_history`.
- `promptkit.variables`: `interpolate_variables` fills in `{{__os__}}`,
  `{{__os_distro__}}`, `{{__os_family__}}`, `{{__arch__}}`, `{{__shell__}}`,
  `{{__locale__}}`, `{{__now__}}` and `{{__cwd__}}`; other placeholders are
  left as they are.
- `promptkit.clipboard`: `set_text` copies text through the terminal's OSC 52
  escape sequence and raises `RuntimeError` when that fails.
- `promptkit.loader`: `LoadedDocument`, `load_file`, `is_loader_protocol` and
  `load_protocol_path`, which run loader commands registered per extension or
  per `protocol:` prefix.
- `promptkit.abort_signal`: `AbortSignal`, `create_abort_signal` and the
  coroutine `wait_abort_signal`.
- `promptkit.spinner`: `SpinnerState`, `Spinner`, `spawn_spinner` (animates on
  a background thread) and the coroutine `abortable_run_with_spinner`, which
  raises `RuntimeError` when the abort signal is set or Ctrl-C is pressed.
- `promptkit.openai_compat`: `ToolCall`, `ChatCompletionsOutput` and builders
  for Chat Completions bodies and server-sent event frames:
  `build_chat_completion_chunk_json`, `create_text_frame`,
  `create_tool_calls_frame`, `create_done_frame`, `ret_non_stream` and
  `ret_err`.
- `promptkit.serve_requests`: `ChatCompletionsRequest`, `EmbeddingsRequest`,
  `RerankRequest`, `SearchRagRequest` with their `parse_*_request` functions
  (raising `ValueError` on invalid bodies), `parse_tools`,
  `resolve_serve_addr`, `generate_completion_id` and `cors_headers`.

## Examples

```python
from promptkit.render_prompt import render_prompt

template = "{?session {session}{?role /}}{role}{?session )}{!session >}"
render_prompt(template, {"role": "coder"})                     # 'coder>'
render_prompt(template, {"session": "temp", "role": "coder"})  # 'temp/coder)'
```

```python
from promptkit.paths import parse_glob

parse_glob("dir/**/*.{md,txt}")  # ('dir', ['md', 'txt'], False)
```

```python
from promptkit.serve_requests import resolve_serve_addr

resolve_serve_addr("8080", "127.0.0.1:8000")     # '127.0.0.1:8080'
resolve_serve_addr("0.0.0.0", "127.0.0.1:8000")  # '0.0.0.0:8000'
```

## What it does not do

- There is no command-line program and no HTTP server. `openai_compat` and
  `serve_requests` build and parse the payloads of an OpenAI-compatible API,
  but listening for requests and calling models is left to the application.
- There are no LLM, embedding or reranking clients, no RAG storage and no
  configuration files.
- `loader` does not fetch URLs or crawl websites; only local files and
  registered loader commands are supported.
- `clipboard` does not talk to the system clipboard directly; it relies on the
  terminal supporting OSC 52.

## Running the tests

```
pip install ".[test]"
pytest
```