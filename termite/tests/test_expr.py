"""Tests for the expression data model."""

import pytest
from termite import (
    Symbol, Application, Rule, format_expr, symbols, subterms, parse_expr,
    UnexpectedCharacter,
)


class TestConstruction:
    """Tests for building expressions directly."""

    def test_symbol(self):
        """Symbol holds its name."""
        assert Symbol("a").name == "a"

    def test_application(self):
        """Application holds name and args."""
        expr = Application("f", (Symbol("a"), Symbol("b")))
        assert expr.name == "f"
        assert expr.args == (Symbol("a"), Symbol("b"))

    def test_application_default_no_args(self):
        """Application args default to empty."""
        assert Application("nil").args == ()

    def test_list_args_become_tuple(self):
        """List arguments are stored as a tuple."""
        expr = Application("f", [Symbol("a")])
        assert isinstance(expr.args, tuple)
        assert expr == Application("f", (Symbol("a"),))

    def test_digits_allowed_in_name(self):
        """Names may contain and even start with digits."""
        assert Symbol("x1").name == "x1"
        assert Symbol("1").name == "1"

    def test_empty_name_rejected(self):
        """Empty names are invalid."""
        with pytest.raises(ValueError):
            Symbol("")
        with pytest.raises(ValueError):
            Application("", ())

    def test_punctuation_in_name_rejected(self):
        """Names with non-identifier characters are invalid."""
        with pytest.raises(ValueError):
            Symbol("a b")
        with pytest.raises(ValueError):
            Application("f(", ())

    def test_non_expression_arg_rejected(self):
        """Arguments must be expressions."""
        with pytest.raises(TypeError):
            Application("f", ("a",))

    def test_immutable(self):
        """Expressions cannot be changed after construction."""
        expr = Symbol("a")
        with pytest.raises(AttributeError):
            expr.name = "b"


class TestEquality:
    """Tests for structural equality."""

    def test_equal_symbols(self):
        assert Symbol("a") == Symbol("a")
        assert Symbol("a") != Symbol("b")

    def test_symbol_vs_nullary_application(self):
        """A symbol differs from an application with no args."""
        assert Symbol("a") != Application("a", ())

    def test_nested_equality(self):
        e1 = Application("f", (Application("g", (Symbol("a"),)),))
        e2 = Application("f", (Application("g", (Symbol("a"),)),))
        assert e1 == e2

    def test_arity_matters(self):
        assert Application("f", (Symbol("a"),)) != Application("f", (Symbol("a"), Symbol("a")))

    def test_hashable(self):
        """Equal expressions hash equally."""
        assert len({parse_expr("f(a, b)"), parse_expr("f(a,b)")}) == 1


class TestRendering:
    """Tests for canonical text rendering."""

    def test_symbol(self):
        assert format_expr(Symbol("a")) == "a"

    def test_application(self):
        expr = Application("pair", (Symbol("a"), Symbol("b")))
        assert str(expr) == "pair(a, b)"

    def test_nullary(self):
        assert str(Application("nil")) == "nil()"

    def test_nested(self):
        expr = Application("f", (Symbol("a"), Application("g", (Symbol("b"),))))
        assert str(expr) == "f(a, g(b))"

    @pytest.mark.parametrize("text", [
        "a",
        "nil()",
        "f(a, g(b))",
        "foo(swap(pair(f(a), g(b))), swap(pair(q(c), z(d))))",
        "deep(a(b(c(d(e())))))",
    ])
    def test_round_trip(self, text):
        """Rendering then parsing gives back the same tree."""
        expr = parse_expr(text)
        assert parse_expr(format_expr(expr)) == expr
        assert format_expr(expr) == text

    def test_digit_name_renders_but_does_not_parse(self):
        expr = Application("bar", (Symbol("1"),))
        assert format_expr(expr) == "bar(1)"
        with pytest.raises(UnexpectedCharacter):
            parse_expr(format_expr(expr))


class TestRule:
    """Tests for the Rule record."""

    def test_render(self):
        rule = Rule(parse_expr("swap(pair(a, b))"), parse_expr("pair(b, a)"))
        assert str(rule) == "swap(pair(a, b)) = pair(b, a)"

    def test_parse(self):
        rule = Rule.parse("f(X) = g(X)")
        assert rule.head == parse_expr("f(X)")
        assert rule.body == parse_expr("g(X)")

    def test_variables(self):
        rule = Rule.parse("swap(pair(X, Y)) = pair(Y, X)")
        assert rule.variables == {"X", "Y"}

    def test_no_dangling_variables(self):
        rule = Rule.parse("swap(pair(X, Y)) = pair(Y, X)")
        assert rule.dangling_variables == set()

    def test_dangling_variables(self):
        """Body symbols the head never binds are reported."""
        rule = Rule.parse("f(X) = g(X, Z)")
        assert rule.dangling_variables == {"Z"}

    def test_rule_parts_must_be_expressions(self):
        with pytest.raises(TypeError):
            Rule("f", Symbol("a"))


class TestHelpers:
    """Tests for symbols() and subterms()."""

    def test_symbols(self):
        assert symbols(parse_expr("f(a, g(b, a))")) == {"a", "b"}

    def test_symbols_excludes_function_names(self):
        assert symbols(parse_expr("f()")) == set()

    def test_subterms_preorder(self):
        expr = parse_expr("f(a, g(b))")
        paths = [path for path, _ in subterms(expr)]
        assert paths == [(), (0,), (1,), (1, 0)]

    def test_subterms_nodes(self):
        expr = parse_expr("f(a, g(b))")
        nodes = dict(subterms(expr))
        assert nodes[(1,)] == parse_expr("g(b)")
        assert nodes[(1, 0)] == Symbol("b")
