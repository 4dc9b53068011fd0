import json
from decimal import Decimal

import pytest

from jsontest import JsonTest, MultipleFailures
from jsontest.assertions import AssertionResult, Diagnostic, DiagnosticKind
from jsontest.errors import UnmatchedPath, failure_for
from jsontest.values import JsonKind, describe, json_equals, kind_of, render_value


# ── rendering ─────────────────────────────────────────────────────────────────


def test_render_without_available():
    diag = Diagnostic(
        kind=DiagnosticKind.VALUE_MISMATCH,
        label="Value mismatch",
        path="$.a",
        expected="number 1",
        actual="number 2",
    )
    assert diag.render() == "Value mismatch at $.a\nExpected: number 1\nActual: number 2"
    assert str(diag) == diag.render()


def test_to_dict():
    diag = Diagnostic(
        kind=DiagnosticKind.UNMATCHED_PATH,
        label="Path not found",
        path="$.a.b",
        expected="value at $.a.b",
        actual="no property 'b' at $.a",
        available=("c",),
        expression="$.a.b",
    )
    assert diag.to_dict() == {
        "kind": "unmatched_path",
        "label": "Path not found",
        "path": "$.a.b",
        "expected": "value at $.a.b",
        "actual": "no property 'b' at $.a",
        "available": ["c"],
        "expression": "$.a.b",
    }


def test_unmatched_path_diagnostic_text(users_doc):
    with pytest.raises(UnmatchedPath) as exc_info:
        JsonTest(users_doc).assert_path("$.users[0].phone").is_string()
    assert str(exc_info.value) == (
        "Path not found at $.users[0].phone\n"
        "Expected: value at $.users[0].phone\n"
        "Actual: no property 'phone' at $.users[0]\n"
        "Available properties: name, age, email, roles"
    )


def test_unmatched_index_has_no_available_line(users_doc):
    ctx = JsonTest(users_doc, fail_fast=False).assert_path("$.users[7].name").exists()
    rendered = ctx.diagnostic.render()
    assert "Available properties" not in rendered
    assert "Actual: index 7 out of range for array of length 3 at $.users" in rendered


def test_failure_for_picks_subclass_by_kind():
    for kind in DiagnosticKind:
        diag = Diagnostic(kind=kind, label="x", path="$", expected="a", actual="b")
        err = failure_for(diag)
        assert isinstance(err, AssertionError)
        assert err.diagnostic is diag


def test_multiple_failures_lists_every_block():
    diags = [
        Diagnostic(DiagnosticKind.VALUE_MISMATCH, "Value mismatch", "$.a", "number 1", "number 2"),
        Diagnostic(DiagnosticKind.TYPE_MISMATCH, "Type mismatch", "$.b", "string", "null"),
    ]
    err = MultipleFailures(diags)
    blocks = str(err).split("\n\n")
    assert blocks[0] == "2 JSON assertion(s) failed"
    assert blocks[1].startswith("Value mismatch at $.a")
    assert blocks[2].startswith("Type mismatch at $.b")
    assert err.diagnostics == diags


def test_assertion_result_strings():
    assert str(AssertionResult.passed_result("All checks passed")) == "✅ PASS: All checks passed"
    assert str(AssertionResult.skipped_result("Optional value absent")) == "⏭️ SKIP: Optional value absent"
    error = AssertionResult.error_result("Boom", path="$.a", details={"hint": "x"})
    assert str(error) == '⚠️ ERROR: Boom\n   Path: $.a\n   hint: "x"'
    assert not error.passed


def test_long_values_are_truncated():
    ctx = JsonTest({"v": "x" * 500}, fail_fast=False).assert_path("$.v").equals("y")
    actual = ctx.diagnostic.actual
    assert actual.startswith('string "xxx')
    assert actual.endswith("...")
    assert len(actual) < 120


# ── value model ───────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "value, kind",
    [
        (None, JsonKind.NULL),
        (True, JsonKind.BOOLEAN),
        (0, JsonKind.NUMBER),
        (Decimal("1.1"), JsonKind.NUMBER),
        ("", JsonKind.STRING),
        ((1, 2), JsonKind.ARRAY),
        ({}, JsonKind.OBJECT),
    ],
)
def test_kind_of(value, kind):
    assert kind_of(value) is kind


def test_kind_of_rejects_non_json():
    with pytest.raises(TypeError):
        kind_of({1, 2})


def test_json_equals_treats_tuples_as_arrays():
    assert json_equals([1, 2], (1, 2))
    assert not json_equals({"a": 1}, {"a": 1, "b": 2})


def test_json_equals_nan_is_reflexive():
    nan = json.loads("NaN")
    assert json_equals(nan, nan)
    assert json_equals({"v": [nan]}, {"v": [float("nan")]})
    assert json_equals(Decimal("NaN"), nan)
    assert not json_equals(nan, 1.0)
    assert not json_equals(0, Decimal("NaN"))
    assert JsonTest(json.loads('{"v": NaN}')).assert_path("$.v").equals(nan).passed


def test_render_and_describe():
    assert render_value({"a": [1, None]}) == '{"a": [1, null]}'
    assert render_value(Decimal("1.10")) == "1.10"
    assert render_value("abcdef", max_length=5) == '"a...'
    assert describe(None) == "null"
    assert describe([1]) == "array [1]"
    assert describe("ü") == 'string "ü"'
