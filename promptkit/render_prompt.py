"""Render prompt templates.

A template is plain text mixed with ``{...}`` expressions:

- ``{var}`` is replaced by the value of ``var``;
- ``{?var <template>}`` renders ``template`` when ``var`` is truthy;
- ``{!var <template>}`` renders ``template`` when ``var`` is falsy.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Union


class _BlockKind(Enum):
    YES = "?"
    NO = "!"


@dataclass(frozen=True)
class _Text:
    value: str


@dataclass(frozen=True)
class _Variable:
    name: str


@dataclass(frozen=True)
class _Block:
    kind: _BlockKind
    name: str
    exprs: tuple[_Expr, ...]


_Expr = Union[_Text, _Variable, _Block]


def render_prompt(template: str, variables: Mapping[str, str]) -> str:
    """Render ``template`` with ``variables``."""
    return _eval_exprs(_parse_template(template), variables)


def _flush_text(exprs: list[_Expr], current: list[str]) -> None:
    if current:
        exprs.append(_Text("".join(current)))
        current.clear()


def _parse_template(template: str) -> tuple[_Expr, ...]:
    exprs: list[_Expr] = []
    current: list[str] = []
    depth = 0
    for ch in template:
        if depth:
            if ch == "}":
                depth -= 1
                if depth:
                    current.append(ch)
                elif current:
                    exprs.append(_parse_block("".join(current)))
                    current.clear()
            else:
                if ch == "{":
                    depth += 1
                current.append(ch)
        elif ch == "{":
            depth = 1
            _flush_text(exprs, current)
        else:
            current.append(ch)
    _flush_text(exprs, current)
    return tuple(exprs)


def _parse_block(value: str) -> _Expr:
    name, sep, tail = value.partition(" ")
    if not sep:
        return _Variable(value)
    for kind in _BlockKind:
        if name.startswith(kind.value):
            return _Block(kind, name[1:], _parse_template(tail))
    return _Text(f"{{{value}}}")


def _truthy(value: str) -> bool:
    return value not in ("", "0", "false")


def _eval_exprs(exprs: tuple[_Expr, ...], variables: Mapping[str, str]) -> str:
    parts = []
    for expr in exprs:
        if isinstance(expr, _Text):
            parts.append(expr.value)
        elif isinstance(expr, _Variable):
            parts.append(variables.get(expr.name, ""))
        else:
            wanted = expr.kind is _BlockKind.YES
            if _truthy(variables.get(expr.name, "")) == wanted:
                parts.append(_eval_exprs(expr.exprs, variables))
    return "".join(parts)