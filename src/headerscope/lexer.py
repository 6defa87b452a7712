"""Comment/literal blanking and delimiter matching for C/C++ source text.

Everything downstream of this module works on *sanitized* text: the same
characters as the input, except that comments and string/char literals are
replaced by spaces. Newlines are never touched, so offsets and line numbers
computed on sanitized text are valid for the input text too.
"""

from __future__ import annotations

import re

# Sanitizer states
_CODE = 0
_LINE_COMMENT = 1
_BLOCK_COMMENT = 2
_STRING = 3
_CHAR = 4

_QUOTE_FOR_STATE = {_STRING: '"', _CHAR: "'"}

# Characters searched after a closing parenthesis before giving up
SIGNATURE_TAIL_WINDOW = 256

DEFINITION = "definition"
PROTOTYPE = "prototype"

# What may sit between a parameter list and its terminator:
# qualifiers, a trailing return type, a constructor initializer list,
# and `= default` / `= delete`.
_TAIL_PATTERN = re.compile(
    r"""
    (?:\s*(?:
        (?:const|volatile|override|final)\b
      | &&|&
      | noexcept\b\s*(?:\([^;{}]*?\))?
      | throw\s*\([^;{}]*?\)
    ))*
    (?:\s*->\s*[^;{}=]+?)?
    (?:\s*:[^;{]*?)?
    \s*(?:=\s*(?:default|delete)\s*)?
    (?P<term>[;{])
    """,
    re.VERBOSE,
)


def sanitize(text: str) -> str:
    """
    Blank comments and string/char literals, preserving length and newlines.

    Args:
        text: Raw source text.

    Returns:
        Text of the same length where every character inside a comment or
        literal (delimiters included) is a space, except newlines.
    """
    out = list(text)
    length = len(text)
    state = _CODE
    i = 0

    while i < length:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < length else ""

        if state == _CODE:
            if ch == "/" and nxt == "/":
                out[i] = out[i + 1] = " "
                state = _LINE_COMMENT
                i += 2
                continue
            if ch == "/" and nxt == "*":
                out[i] = out[i + 1] = " "
                state = _BLOCK_COMMENT
                i += 2
                continue
            if ch == '"':
                out[i] = " "
                state = _STRING
            elif ch == "'":
                out[i] = " "
                state = _CHAR
            i += 1

        elif state == _LINE_COMMENT:
            if ch == "\n":
                state = _CODE
            else:
                out[i] = " "
            i += 1

        elif state == _BLOCK_COMMENT:
            if ch == "*" and nxt == "/":
                out[i] = out[i + 1] = " "
                state = _CODE
                i += 2
                continue
            if ch != "\n":
                out[i] = " "
            i += 1

        else:
            if ch == "\\":
                # Escape: blank the backslash and whatever follows, uninterpreted
                out[i] = " "
                if nxt and nxt != "\n":
                    out[i + 1] = " "
                i += 2
                continue
            if ch == _QUOTE_FOR_STATE[state]:
                state = _CODE
            if ch != "\n":
                out[i] = " "
            i += 1

    return "".join(out)


def line_starts(text: str) -> list[int]:
    """Return the 0-based offset at which each line of `text` begins."""
    starts = [0]
    for index, ch in enumerate(text):
        if ch == "\n":
            starts.append(index + 1)
    return starts


def line_number_at(text: str, offset: int) -> int:
    """1-based line number of `offset`: newlines before it, plus one."""
    return text.count("\n", 0, offset) + 1


def brace_delta(line: str) -> int:
    """Net `{` minus `}` count for an already sanitized line."""
    return line.count("{") - line.count("}")


def match_paren(text: str, open_index: int) -> int | None:
    """
    Find the `)` that balances the `(` at `open_index`.

    Quotes inside the scanned region are tracked locally so that parentheses
    inside literals don't disturb the depth count.

    Returns:
        Offset of the matching `)`, or None if the text ends first.
    """
    if open_index < 0 or open_index >= len(text) or text[open_index] != "(":
        return None

    depth = 0
    quote: str | None = None
    i = open_index
    length = len(text)

    while i < length:
        ch = text[i]
        if quote is not None:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch == '"' or ch == "'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1

    return None


def classify_signature_tail(
    text: str, close_index: int, window: int = SIGNATURE_TAIL_WINDOW
) -> tuple[str, int] | None:
    """
    Classify what follows a parameter list.

    Args:
        text: Sanitized text containing the signature.
        close_index: Offset of the parameter list's closing `)`.
        window: Maximum number of characters to inspect.

    Returns:
        (DEFINITION, offset of `{`) or (PROTOTYPE, offset of `;`),
        or None if no terminator is recognised within the window.
    """
    start = close_index + 1
    match = _TAIL_PATTERN.match(text[start : start + window])
    if match is None:
        return None
    term_index = start + match.start("term")
    kind = DEFINITION if match.group("term") == "{" else PROTOTYPE
    return kind, term_index
