"""Call-site extraction from test sources, attributed to enclosing test blocks."""

from __future__ import annotations

import re

from .lexer import brace_delta, sanitize
from .logging import get_logger
from .models import GLOBAL_SCOPE, CallReference

logger = get_logger("references")

# TEST(Suite, Name), TEST_F(Fixture, Name), TEST_P(...), TYPED_TEST(...)
TEST_HEADER_PATTERN = re.compile(
    r"^\s*(?:TEST|TEST_F|TEST_P|TYPED_TEST)\s*\(\s*([A-Za-z_]\w*)\s*,\s*([A-Za-z_]\w*)\s*\)"
)

# identifier, optional single-level template arguments, then `(`
CALL_PATTERN = re.compile(r"(?<![\w~])([A-Za-z_]\w*)\s*(?:<[^<>;(){}]*>)?\s*\(")


def scope_label_for(file_label: str, suite: str, name: str) -> str:
    return f"{file_label}:{suite}.{name}"


def extract_calls(text: str, file_label: str) -> list[CallReference]:
    """
    Find call-like expressions and the test block each one appears in.

    A test block header switches the active scope to "<file>:<suite>.<name>"
    and resets a local brace counter; once the counter is back to zero after
    at least one closing brace, the scope reverts to GLOBAL_SCOPE.

    Args:
        text: Test source text (sanitized or raw).
        file_label: Opaque label used as the scope prefix.

    Returns:
        CallReferences in source order.
    """
    sanitized = sanitize(text)
    scope = GLOBAL_SCOPE
    depth = 0
    seen_close = False
    references: list[CallReference] = []

    for line_no, line in enumerate(sanitized.split("\n"), start=1):
        header = TEST_HEADER_PATTERN.match(line)
        if header:
            scope = scope_label_for(file_label, header.group(1), header.group(2))
            depth = 0
            seen_close = False
            logger.debug("entering test scope %s at line %d", scope, line_no)

        for call in CALL_PATTERN.finditer(line):
            references.append(CallReference(callee_name=call.group(1), scope=scope, line=line_no))

        if scope != GLOBAL_SCOPE:
            depth += brace_delta(line)
            if "}" in line:
                seen_close = True
            if seen_close and depth == 0:
                scope = GLOBAL_SCOPE

    return references
