"""Tests for path filters and helpers."""

import pytest

from headerscope.config_store import (
    DEFAULT_EXCLUDED_PREFIXES,
    DEFAULT_EXCLUDED_TOP_LEVEL,
    DEFAULT_HEADER_EXTENSIONS,
)
from headerscope.errors import SourceReadError
from headerscope.utils import in_scope_header, read_source, truncate_list


def in_scope(path):
    return in_scope_header(
        path, DEFAULT_HEADER_EXTENSIONS, DEFAULT_EXCLUDED_TOP_LEVEL, DEFAULT_EXCLUDED_PREFIXES
    )


class TestInScopeHeader:
    @pytest.mark.parametrize(
        "path",
        ["Vector.H", "include/list.h", "src/core/map.hpp", "a.hxx", "b.hh"],
    )
    def test_library_headers(self, path):
        assert in_scope(path)

    @pytest.mark.parametrize(
        "path",
        [
            "src/vector.cc",
            "README.md",
            "Tests/helper.h",
            "Examples/demo.H",
            "docs/api.h",
            ".github/x.h",
            "scripts/gen.h",
            "Testing/t.h",
            "build/gen.h",
            "src/cmake-build-debug/gen.h",
            "src/build_tools/x.hpp",
        ],
    )
    def test_excluded(self, path):
        assert not in_scope(path)

    def test_extension_case_sensitive(self):
        assert not in_scope_header("a.HPP", [".hpp"], [])


class TestReadSource:
    def test_reads_text(self, temp_dir):
        path = temp_dir / "a.h"
        path.write_text("int f();\n")
        assert read_source(path) == "int f();\n"

    def test_invalid_utf8_replaced(self, temp_dir):
        path = temp_dir / "latin.h"
        path.write_bytes(b"// caf\xe9\nint f();\n")
        assert read_source(path).endswith("int f();\n")

    def test_missing_raises(self, temp_dir):
        with pytest.raises(SourceReadError) as exc_info:
            read_source(temp_dir / "missing.h")
        assert exc_info.value.path.endswith("missing.h")


class TestTruncateList:
    def test_within_limit(self):
        assert truncate_list(["a", "b"], 5) == (["a", "b"], 0)

    def test_over_limit(self):
        assert truncate_list(["a", "b", "c"], 2) == (["a", "b"], 1)

    def test_non_positive_limit_keeps_all(self):
        assert truncate_list(["a", "b"], 0) == (["a", "b"], 0)
