import pytest

from jsontest.errors import JsonTestError, PathSyntaxError
from jsontest.path import Index, Key, RecursiveDescent, Wildcard, compile_path


# ── supported grammar ─────────────────────────────────────────────────────────


def test_root_only():
    expr = compile_path("$")
    assert expr.steps == ()
    assert expr.source == "$"


def test_dotted_names():
    expr = compile_path("$.user.name")
    assert expr.steps == (Key("user"), Key("name"))


def test_bracket_quoted_names():
    assert compile_path("$['user']").steps == (Key("user"),)
    assert compile_path('$["first name"]').steps == (Key("first name"),)


def test_quoted_name_escapes():
    expr = compile_path(r"$['it\'s']")
    assert expr.steps == (Key("it's"),)


def test_quoted_name_may_contain_dots_and_brackets():
    expr = compile_path("$['a.b[0]']")
    assert expr.steps == (Key("a.b[0]"),)


def test_indices():
    expr = compile_path("$.users[0].roles[-1]")
    assert expr.steps == (Key("users"), Index(0), Key("roles"), Index(-1))


def test_wildcards():
    assert compile_path("$.users[*]").steps == (Key("users"), Wildcard())
    assert compile_path("$.users.*").steps == (Key("users"), Wildcard())


def test_recursive_descent():
    assert compile_path("$..name").steps == (RecursiveDescent(), Key("name"))
    assert compile_path("$..[0]").steps == (RecursiveDescent(), Index(0))
    assert compile_path("$..*").steps == (RecursiveDescent(), Wildcard())


def test_is_definite():
    assert compile_path("$.a[0].b").is_definite
    assert not compile_path("$.a[*].b").is_definite
    assert not compile_path("$..b").is_definite


def test_canonical_form():
    assert compile_path("$['user'].roles.*").canonical() == "$.user.roles[*]"
    assert compile_path("$..name").canonical() == "$..name"
    assert compile_path("$['first name']").canonical() == "$['first name']"


def test_compile_is_deterministic():
    first = compile_path("$.users[*].age")
    second = compile_path("$.users[*].age")
    assert first == second
    assert first.steps == second.steps


def test_non_string_expression():
    with pytest.raises(TypeError):
        compile_path(42)


# ── rejected input ────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "expression, message",
    [
        ("", "Empty path expression"),
        ("users.name", "Path must start with '$'"),
        ("$.", "Empty segment after '.'"),
        ("$..", "Recursive descent must be followed by a segment"),
        ("$...a", "Too many dots"),
        ("$.users[", "Unbalanced '['"),
        ("$.users[0", "Unbalanced '['"),
        ("$.users[]", "Empty brackets"),
        ("$['']", "Empty property name"),
        ("$['abc", "Unterminated quoted name"),
        ("$. name", "Whitespace is not allowed"),
        ("$.a]", "Unbalanced ']'"),
    ],
)
def test_syntax_errors(expression, message):
    with pytest.raises(PathSyntaxError) as exc_info:
        compile_path(expression)
    assert exc_info.value.message == message
    assert exc_info.value.expression == expression


@pytest.mark.parametrize(
    "expression, position",
    [
        ("$.users[?(@.age > 18)]", 8),
        ("$.users[0:2]", 9),
        ("$.users[0,1]", 9),
        ("$.users[(@.length-1)]", 8),
    ],
)
def test_unsupported_operators(expression, position):
    with pytest.raises(PathSyntaxError) as exc_info:
        compile_path(expression)
    assert exc_info.value.position == position
    assert "not supported" in exc_info.value.message


def test_syntax_error_carries_position_and_fragment():
    with pytest.raises(PathSyntaxError) as exc_info:
        compile_path("$.users[0:2]")
    err = exc_info.value
    assert err.fragment == ":2]"
    assert "position 9" in str(err)
    assert "'$.users[0:2]'" in str(err)


def test_syntax_error_is_not_an_assertion_failure():
    with pytest.raises(JsonTestError):
        compile_path("$[")
    assert not issubclass(PathSyntaxError, AssertionError)
