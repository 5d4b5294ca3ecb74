"""Classification of formula bodies.

A formula cell holds ``=`` followed by a body.  The body is one of:

- a cell reference: ``B2``
- a number literal: ``-3.5``
- a function call: ``ADD(A1, 2, -0.5)``, ``NAME()``

Anything else is invalid.  Classification never raises; errors surface when
the expression is evaluated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from lark import Lark, Token, Tree
from lark.exceptions import LarkError

_CELL_REF_RE = re.compile(r"\s*([A-Z]+[0-9]+)\s*")
_NUMBER_RE = re.compile(r"\s*(-?\d+(?:\.\d+)?)\s*")

# LALR(1) grammar for a single flat function call.  Arguments are number
# literals or cell addresses; nested calls are not part of the language.
GRAMMAR = r"""
start: FUNC_NAME "(" [args] ")"

args: arg ("," arg)*

?arg: NUMBER    -> number
    | CELL_REF  -> cell_ref

FUNC_NAME: /[A-Z]+/
CELL_REF.2: /[A-Z]+[0-9]+/
NUMBER: /-?\d+(?:\.\d+)?/

%import common.WS_INLINE
%ignore WS_INLINE
"""

_parser = Lark(GRAMMAR, parser="lalr", start="start", maybe_placeholders=True)


class ExpressionKind(str, Enum):
    cell_reference = "cell_reference"
    number_literal = "number_literal"
    function_call = "function_call"
    invalid = "invalid"


@dataclass(frozen=True)
class Expression:
    """A classified formula body.

    Attributes:
        body: The formula text after ``=``, trimmed.
        kind: Which grammar the body matched.
        key: The referenced address, the number text, or the function name.
            Empty for invalid bodies.
        arguments: Raw argument strings of a function call, in order.
    """

    body: str
    kind: ExpressionKind
    key: str = ""
    arguments: tuple[str, ...] = field(default=())


def classify(body: str) -> Expression:
    """Classify a formula body (text after the leading ``=``).

    Precedence: cell reference, then number literal, then function call.

    Args:
        body: The formula body.  Surrounding whitespace is ignored.

    Returns:
        The classified ``Expression``.
    """
    body = body.strip()

    m = _CELL_REF_RE.fullmatch(body)
    if m:
        return Expression(body, ExpressionKind.cell_reference, key=m.group(1))

    m = _NUMBER_RE.fullmatch(body)
    if m:
        return Expression(body, ExpressionKind.number_literal, key=m.group(1))

    tree = parse_call(body)
    if tree is None:
        return Expression(body, ExpressionKind.invalid)

    name = str(tree.children[0])
    return Expression(
        body,
        ExpressionKind.function_call,
        key=name,
        arguments=tuple(call_arguments(tree)),
    )


def parse_formula(content: str) -> Expression:
    """Classify full cell content that starts with ``=``.

    Raises:
        ValueError: If *content* does not start with ``=``.
    """
    if not content.startswith("="):
        raise ValueError(f"Formula must start with '=': {content!r}")
    return classify(content[1:])


def parse_call(body: str) -> Tree | None:
    """Parse *body* as a function call, returning None if it is not one."""
    try:
        return _parser.parse(body)
    except LarkError:
        return None


def call_arguments(tree: Tree) -> list[str]:
    """Return the raw argument strings of a parsed call, in order."""
    args_node = tree.children[1]
    if args_node is None:
        return []
    arguments: list[str] = []
    for node in args_node.children:
        token = node.children[0] if isinstance(node, Tree) else node
        if isinstance(token, Token):
            arguments.append(str(token).strip())
    return arguments
