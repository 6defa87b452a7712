"""Lexical C++ header analysis: declarations, test coverage and doc coverage."""

from .coverage import CoverageScanner, build_matrix
from .doc_checker import DocCoverageGate, check_doc_coverage, has_doc_comment_before
from .extractor import DeclarationExtractor, extract_declarations
from .lexer import match_paren, sanitize
from .references import extract_calls

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Lexing
    "sanitize",
    "match_paren",
    # Extraction
    "DeclarationExtractor",
    "extract_declarations",
    "extract_calls",
    # Reports
    "CoverageScanner",
    "build_matrix",
    "DocCoverageGate",
    "check_doc_coverage",
    "has_doc_comment_before",
]
