"""Declaration extraction from C/C++ source using lexical heuristics."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .lexer import DEFINITION, PROTOTYPE, brace_delta, classify_signature_tail, match_paren, sanitize
from .logging import get_logger
from .models import (
    ACCESS_PRIVATE,
    ACCESS_PUBLIC,
    KIND_CLASS,
    KIND_CONCEPT,
    KIND_FUNCTION,
    KIND_METHOD,
    KIND_STRUCT,
    NON_PUBLIC,
    PUBLIC,
    Declaration,
    PendingClass,
    ScopeFrame,
)

logger = get_logger("extractor")

CONTROL_KEYWORDS = frozenset(
    {
        "if",
        "for",
        "while",
        "switch",
        "catch",
        "return",
        "sizeof",
        "alignof",
        "decltype",
        "static_assert",
        "static_cast",
        "dynamic_cast",
        "const_cast",
        "reinterpret_cast",
        "new",
        "delete",
    }
)

CLASS_PATTERN = re.compile(r"^(?:template\s*<.*>\s*)?(class|struct)\s+([A-Za-z_]\w*)\b")
CONCEPT_PATTERN = re.compile(r"^(?:template\s*<.*>\s*)?concept\s+([A-Za-z_]\w*)\s*=")
ACCESS_PATTERN = re.compile(r"^(public|private|protected)\s*:\s*$")
DEFAULTED_PATTERN = re.compile(r"\)\s*=\s*(?:default|delete)\s*;")
OPERATOR_TOKEN_PATTERN = re.compile(r"operator\s*[^\s\w(]+")

# A declarable name directly followed by its parameter list's `(`.
NAME_PATTERN = re.compile(
    r"""
    (?<![\w~])
    (?P<name>
        operator\s*(?:\(\s*\)|\[\s*\]|[^\s\w(]+)
      | operator\s+[A-Za-z_]\w*(?:\s*[*&]+)?
      | ~?[A-Za-z_]\w*
    )
    \s*\(
    """,
    re.VERBOSE,
)

_NON_DECLARATION_STARTS = ("#", "using ", "typedef ")


@dataclass
class ExtractionState:
    """Brace depth and class scopes carried from one line to the next."""

    brace_depth: int = 0
    frames: list[ScopeFrame] = field(default_factory=list)
    pending: PendingClass | None = None

    @property
    def current_class(self) -> str | None:
        return self.frames[-1].class_name if self.frames else None

    def in_declaration_scope(self) -> bool:
        """True at namespace level (depth <= 1) or directly inside the active class body."""
        if self.frames:
            return self.brace_depth == self.frames[-1].entry_brace_depth
        return self.brace_depth <= 1

    def visibility(self) -> str:
        if not self.frames or self.frames[-1].access == ACCESS_PUBLIC:
            return PUBLIC
        return NON_PUBLIC


@dataclass(frozen=True)
class Signature:
    """A recognised function-like signature on one line."""

    name: str
    prefix: str
    is_definition: bool


def _normalize_name(name: str) -> str:
    """Collapse whitespace in operator names: `operator ==` -> `operator==`."""
    if name == "operator" or not name.startswith("operator") or re.match(r"operator\w", name):
        return name
    rest = name[len("operator"):].split()
    if rest[0][0].isalpha() or rest[0][0] == "_":
        # Conversion or allocation operator: `operator bool`, `operator new`
        return "operator " + " ".join(rest)
    return "operator" + "".join(rest)


def _statement_candidate(line: str) -> str | None:
    """Apply the cheap line filters; return the stripped statement or None."""
    if "(" not in line:
        return None
    stmt = line.strip()
    if not stmt.endswith((";", "{", "}")):
        return None
    if stmt.startswith(_NON_DECLARATION_STARTS):
        return None

    lowered = stmt.lower()
    if any(lowered.startswith((f"{kw} ", f"{kw}(")) for kw in CONTROL_KEYWORDS):
        return None

    # Anything before the body that still has an `=` reads as an assignment.
    signature = stmt.split("{", 1)[0]
    if "=" in OPERATOR_TOKEN_PATTERN.sub("operator", signature) and not DEFAULTED_PATTERN.search(
        signature
    ):
        return None

    return stmt


def parse_signature(line: str, class_name: str | None = None) -> Signature | None:
    """
    Recognise a function or method signature on a single sanitized line.

    The first name whose parameter list balances and is followed by a valid
    terminator decides the outcome; later names on the line are not tried.

    Args:
        line: One sanitized source line.
        class_name: Name of the enclosing class, if any.

    Returns:
        The signature, or None if the line is not a recognisable declaration.
    """
    stmt = _statement_candidate(line)
    if stmt is None:
        return None

    for match in NAME_PATTERN.finditer(stmt):
        close_index = match_paren(stmt, match.end() - 1)
        if close_index is None:
            continue
        tail = classify_signature_tail(stmt, close_index)
        if tail is None:
            continue
        kind, term_index = tail
        if kind == PROTOTYPE and stmt[term_index + 1 :].strip():
            continue
        if kind == DEFINITION and not stmt.endswith(("{", "}")):
            continue

        name = _normalize_name(match.group("name"))
        prefix = stmt[: match.start("name")].strip()
        if name in CONTROL_KEYWORDS:
            return None

        is_ctor_or_dtor = class_name is not None and name in (class_name, f"~{class_name}")
        if not prefix and not is_ctor_or_dtor:
            # No return type: most likely a call expression.
            return None

        return Signature(name=name, prefix=prefix, is_definition=kind == DEFINITION)

    return None


class DeclarationExtractor:
    """Extracts function, method, class, struct and concept declarations.

    Works line by line over sanitized text, tracking brace depth and a
    stack of class scopes to decide visibility and whether a line sits at
    a depth where declarations are expected.
    """

    def __init__(self, definitions_only: bool = False, path: str | None = None) -> None:
        self.definitions_only = definitions_only
        self.path = path

    def extract(self, text: str) -> list[Declaration]:
        """Return declarations deduplicated by (name, line), sorted by (name, line)."""
        sanitized = sanitize(text)
        state = ExtractionState()
        found: dict[tuple[str, int], Declaration] = {}

        for line_no, line in enumerate(sanitized.split("\n"), start=1):
            for decl in self._process_line(line, line_no, state):
                found.setdefault(decl.key, decl)

        declarations = sorted(found.values(), key=lambda d: d.key)
        logger.debug(
            "extracted %d declaration(s) from %s", len(declarations), self.path or "<text>"
        )
        return declarations

    def _process_line(self, line: str, line_no: int, state: ExtractionState) -> list[Declaration]:
        declarations: list[Declaration] = []
        stripped = line.strip()
        in_scope = state.in_declaration_scope()

        if in_scope:
            class_match = CLASS_PATTERN.match(stripped)
            if class_match:
                keyword, name = class_match.group(1), class_match.group(2)
                declarations.append(
                    self._make(name, KIND_STRUCT if keyword == "struct" else KIND_CLASS, line_no, state)
                )
                default_access = ACCESS_PUBLIC if keyword == "struct" else ACCESS_PRIVATE
                if "{" in stripped:
                    state.pending = PendingClass(name=name, access=default_access, attach_now=True)
                elif ";" not in stripped:
                    state.pending = PendingClass(name=name, access=default_access, attach_now=False)

        if state.frames:
            access_match = ACCESS_PATTERN.match(stripped)
            if access_match:
                state.frames[-1].access = access_match.group(1)

        if in_scope:
            concept_match = CONCEPT_PATTERN.match(stripped)
            if concept_match:
                declarations.append(self._make(concept_match.group(1), KIND_CONCEPT, line_no, state))

            signature = parse_signature(line, state.current_class)
            if signature is not None and (signature.is_definition or not self.definitions_only):
                kind = KIND_METHOD if state.frames else KIND_FUNCTION
                declarations.append(
                    self._make(signature.name, kind, line_no, state, signature.is_definition)
                )

        self._update_depth(line, state)
        return declarations

    def _update_depth(self, line: str, state: ExtractionState) -> None:
        before = state.brace_depth
        state.brace_depth += brace_delta(line)

        pending = state.pending
        if pending is not None:
            opened = state.brace_depth > before and "{" in line
            if pending.attach_now and not opened:
                # Body opened and closed on the same line; nothing to enter.
                state.pending = None
            elif opened:
                state.frames.append(
                    ScopeFrame(
                        class_name=pending.name,
                        access=pending.access,
                        entry_brace_depth=state.brace_depth,
                    )
                )
                state.pending = None

        while state.frames and state.brace_depth < state.frames[-1].entry_brace_depth:
            state.frames.pop()

    def _make(
        self,
        name: str,
        kind: str,
        line_no: int,
        state: ExtractionState,
        is_definition: bool = False,
    ) -> Declaration:
        return Declaration(
            name=name,
            kind=kind,
            line=line_no,
            visibility=state.visibility(),
            file=self.path,
            is_definition=is_definition,
        )


def extract_declarations(
    text: str, definitions_only: bool = False, path: str | None = None
) -> list[Declaration]:
    """Extract declarations from source text (sanitized or raw)."""
    return DeclarationExtractor(definitions_only=definitions_only, path=path).extract(text)
