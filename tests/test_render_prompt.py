import pytest

from promptkit.render_prompt import render_prompt

PROMPT = "{?session {session}{?role /}}{role}{?session )}{!session >}"


@pytest.mark.parametrize(
    "variables, expected",
    [
        ({}, ">"),
        ({"role": "coder"}, "coder>"),
        ({"session": "temp"}, "temp)"),
        ({"session": "temp", "role": "coder"}, "temp/coder)"),
    ],
)
def test_render(variables, expected):
    assert render_prompt(PROMPT, variables) == expected


def test_plain_text_passes_through():
    assert render_prompt("hello world", {}) == "hello world"


def test_variable_missing_is_empty():
    assert render_prompt("[{name}]", {}) == "[]"
    assert render_prompt("[{name}]", {"name": "x"}) == "[x]"


@pytest.mark.parametrize("value", ["", "0", "false"])
def test_falsy_values(value):
    assert render_prompt("{?flag yes}{!flag no}", {"flag": value}) == "no"


def test_truthy_value():
    assert render_prompt("{?flag yes}{!flag no}", {"flag": "1"}) == "yes"


def test_unknown_block_prefix_kept_as_text():
    assert render_prompt("{a b}", {"a": "x"}) == "{a b}"


def test_empty_braces_render_nothing():
    assert render_prompt("a{}b", {}) == "ab"


def test_unclosed_brace_keeps_text_without_brace():
    assert render_prompt("a{bc", {}) == "abc"