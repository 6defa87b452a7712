"""Tests for declaration extraction."""

from headerscope.extractor import DeclarationExtractor, extract_declarations, parse_signature
from headerscope.models import NON_PUBLIC, PUBLIC


def names(declarations):
    return [d.name for d in declarations]


def by_name(declarations):
    return {d.name: d for d in declarations}


class TestCommentsAndLiterals:
    def test_no_declarations_inside_comments(self):
        text = """/* int foo(); */
// int bar();
int baz();
"""
        decls = extract_declarations(text)

        assert names(decls) == ["baz"]
        assert decls[0].line == 3

    def test_signature_inside_string_is_ignored(self):
        text = 'const char* doc = "int fake(int);";\n'
        assert extract_declarations(text) == []


class TestDefinitionsOnly:
    def test_prototype_dropped_definition_kept(self):
        text = """int f(int x);
int g(int x) { return x; }
int h(int x)
{
  return x;
}
int k(int x) {
  return x;
}
"""
        all_decls = extract_declarations(text)
        defs = extract_declarations(text, definitions_only=True)

        assert names(all_decls) == ["f", "g", "k"]
        assert names(defs) == ["g", "k"]
        assert by_name(defs)["g"].is_definition is True

    def test_one_line_definition(self):
        decls = extract_declarations("int f(int x) { return x; }", definitions_only=True)

        assert names(decls) == ["f"]
        assert decls[0].kind == "function"
        assert decls[0].visibility == PUBLIC

    def test_classes_kept_in_definitions_only_mode(self):
        text = """struct Point {
  int x() const;
};
"""
        decls = extract_declarations(text, definitions_only=True)
        assert names(decls) == ["Point"]


class TestVisibility:
    def test_access_specifiers(self):
        text = """class C {
public:
  void a();
private:
  void b();
protected:
  void c();
};
"""
        decls = by_name(extract_declarations(text))

        assert decls["C"].kind == "class"
        assert decls["C"].visibility == PUBLIC
        assert decls["a"].kind == "method"
        assert decls["a"].visibility == PUBLIC
        assert decls["b"].visibility == NON_PUBLIC
        assert decls["c"].visibility == NON_PUBLIC

    def test_class_defaults_private_struct_defaults_public(self):
        text = """class Hidden {
  void secret();
};
struct Open {
  void visible();
};
"""
        decls = by_name(extract_declarations(text))

        assert decls["secret"].visibility == NON_PUBLIC
        assert decls["visible"].visibility == PUBLIC
        assert decls["Open"].kind == "struct"

    def test_scope_closes_after_class(self):
        text = """class A {
  void inner();
};
void outer();
"""
        decls = by_name(extract_declarations(text))

        assert decls["inner"].kind == "method"
        assert decls["inner"].visibility == NON_PUBLIC
        assert decls["outer"].kind == "function"
        assert decls["outer"].visibility == PUBLIC

    def test_deferred_opening_brace(self):
        text = """class Deferred
{
public:
  void run();
};
"""
        decls = by_name(extract_declarations(text))

        assert decls["run"].kind == "method"
        assert decls["run"].visibility == PUBLIC

    def test_single_line_class_body_pushes_no_scope(self):
        text = """struct Empty {};
void free_fn();
"""
        decls = by_name(extract_declarations(text))

        assert decls["Empty"].kind == "struct"
        assert decls["free_fn"].kind == "function"

    def test_forward_declaration(self):
        text = """class Later;
void uses(Later& l);
"""
        decls = by_name(extract_declarations(text))

        assert decls["Later"].kind == "class"
        assert decls["uses"].kind == "function"


class TestConstructorExemption:
    def test_constructor_and_destructor_accepted(self):
        text = """class Widget {
public:
  Widget();
  explicit Widget(int size);
  ~Widget();
  int size() const;
private:
  void helper();
};
"""
        decls = extract_declarations(text)

        assert [(d.name, d.line) for d in decls] == [
            ("Widget", 1),
            ("Widget", 3),
            ("Widget", 4),
            ("helper", 8),
            ("size", 6),
            ("~Widget", 5),
        ]
        ctor = [d for d in decls if d.name == "Widget" and d.line == 3][0]
        assert ctor.kind == "method"
        assert ctor.visibility == PUBLIC

    def test_call_without_prefix_at_global_scope_rejected(self):
        assert extract_declarations("Widget();\n") == []

    def test_other_name_without_prefix_rejected_inside_class(self):
        text = """class Widget {
public:
  Gadget();
};
"""
        assert names(extract_declarations(text)) == ["Widget"]


class TestFilters:
    def test_control_statements_rejected(self):
        text = """int wrapper(int x) {
  if (x) {
  }
  while(x) {
  }
  return helper(x);
}
"""
        assert names(extract_declarations(text)) == ["wrapper"]

    def test_assignment_rejected(self):
        assert extract_declarations("int total = compute(3);\n") == []

    def test_defaulted_and_deleted_members(self):
        text = """class Widget {
public:
  Widget(const Widget&) = default;
  Widget& operator=(const Widget&) = delete;
  bool operator==(const Widget& o) const;
};
"""
        decls = extract_declarations(text)

        assert names(decls) == ["Widget", "Widget", "operator=", "operator=="]
        assert all(d.visibility == PUBLIC for d in decls)

    def test_statements_inside_method_bodies_ignored(self):
        text = """class A {
public:
  void f() {
    int local(3);
  }
};
"""
        assert names(extract_declarations(text)) == ["A", "f"]

    def test_preprocessor_and_using_lines_ignored(self):
        text = """#define MAKE(x) int x();
using Fn = int(int);
typedef int (*Callback)(int);
"""
        assert extract_declarations(text) == []


class TestConcepts:
    def test_concept_on_template_line(self):
        text = """template <typename T>
concept Sortable = requires(T a) { a < a; };
"""
        decls = extract_declarations(text)

        assert names(decls) == ["Sortable"]
        assert decls[0].kind == "concept"
        assert decls[0].line == 2


class TestExtractor:
    def test_results_sorted_and_labelled(self):
        text = """void zeta();
void alpha();
"""
        decls = DeclarationExtractor(path="include/a.h").extract(text)

        assert names(decls) == ["alpha", "zeta"]
        assert all(d.file == "include/a.h" for d in decls)

    def test_sanitized_input_gives_same_result(self):
        from headerscope.lexer import sanitize

        text = """/// doc
class C {
public:
  int f(const char* s); // returns "{"
  const char* g() { return "}"; }
};
"""
        decls = extract_declarations(text)

        assert names(decls) == ["C", "f", "g"]
        assert extract_declarations(sanitize(text)) == decls

    def test_default_arguments_read_as_assignment(self):
        assert extract_declarations("void resize(int n = 0);\n") == []

    def test_parse_signature_operator_spacing(self):
        signature = parse_signature("bool operator == (const A& o) const;")

        assert signature is not None
        assert signature.name == "operator=="
        assert signature.is_definition is False
