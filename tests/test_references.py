"""Tests for call-site extraction from test sources."""

from headerscope.models import GLOBAL_SCOPE
from headerscope.references import extract_calls, scope_label_for


def calls_named(references, name):
    return [ref for ref in references if ref.callee_name == name]


class TestExtractCalls:
    def test_calls_attributed_to_test_block(self):
        text = """TEST(Sorting, Quick) {
  auto v = quicksort(data);
  EXPECT_TRUE(is_sorted(v));
}
void helper() { quicksort(x); }
"""
        refs = extract_calls(text, "tests/sort_test.cc")

        quick = calls_named(refs, "quicksort")
        assert [(r.scope, r.line) for r in quick] == [
            ("tests/sort_test.cc:Sorting.Quick", 2),
            (GLOBAL_SCOPE, 5),
        ]
        assert calls_named(refs, "is_sorted")[0].scope == "tests/sort_test.cc:Sorting.Quick"

    def test_single_line_test_block(self):
        text = """TEST(Suite, Case) { quicksort(v); }
quicksort(w);
"""
        refs = calls_named(extract_calls(text, "t.cc"), "quicksort")

        assert [r.scope for r in refs] == ["t.cc:Suite.Case", GLOBAL_SCOPE]

    def test_fixture_and_parameterized_headers(self):
        text = """TEST_F(WidgetTest, Grows)
{
  grow();
}
TEST_P(WidgetParam, Resizes) {
  resize(GetParam());
}
TYPED_TEST(Typed, Works) {
  run();
}
"""
        refs = extract_calls(text, "w.cc")

        assert calls_named(refs, "grow")[0].scope == "w.cc:WidgetTest.Grows"
        assert calls_named(refs, "resize")[0].scope == "w.cc:WidgetParam.Resizes"
        assert calls_named(refs, "run")[0].scope == "w.cc:Typed.Works"

    def test_nested_braces_keep_scope(self):
        text = """TEST(S, C) {
  if (ready()) {
    first();
  }
  second();
}
third();
"""
        refs = extract_calls(text, "f.cc")

        assert calls_named(refs, "second")[0].scope == "f.cc:S.C"
        assert calls_named(refs, "third")[0].scope == GLOBAL_SCOPE

    def test_template_arguments(self):
        refs = extract_calls("x = quicksort<int>(v);\n", "f.cc")
        assert [r.callee_name for r in refs] == ["quicksort"]

    def test_calls_in_comments_and_strings_ignored(self):
        text = """// quicksort(a);
puts("quicksort(b)");
"""
        refs = extract_calls(text, "f.cc")
        assert [r.callee_name for r in refs] == ["puts"]

    def test_scope_label(self):
        assert scope_label_for("a.cc", "Suite", "Name") == "a.cc:Suite.Name"
