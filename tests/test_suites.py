import pytest

from jsontest.errors import SuiteLoadError
from jsontest.suites import CheckOp, load_document, load_suite, validate_suite_yaml


VALID_SUITE = """
version: 1
name: User API
document: users.json
settings:
  stop_on_failure: false
checks:
  - id: first_name
    path: $.users[0].name
    description: First user has a name
    expect:
      - exists
      - is_string
      - equals: John Doe
  - id: ages
    path: $.users[*].age
    expect:
      - is_number
      - is_between: [0, 120]
  - id: meta
    path: $.meta
    expect:
      - has_properties: [total, page]
      - has_property_value: {name: total, value: 3}
      - properties_matching: {prefix: pa, count: 1}
"""


def _messages(result):
    return [e.message for e in result.errors]


def _error_paths(result):
    return [e.path for e in result.errors]


# ── parsing ───────────────────────────────────────────────────────────────────


def test_valid_suite_parses():
    suite, result = validate_suite_yaml(VALID_SUITE)
    assert result.is_valid, str(result)
    assert suite.name == "User API"
    assert suite.version == 1
    assert [c.id for c in suite.checks] == ["first_name", "ages", "meta"]

    first = suite.checks[0]
    assert first.description == "First user has a name"
    assert [e.op for e in first.expect] == [CheckOp.EXISTS, CheckOp.IS_STRING, CheckOp.EQUALS]
    assert first.expect[2].value == "John Doe"
    assert suite.checks[1].expect[1].value == [0, 120]


def test_document_path_is_relative_to_suite_file(write_suite, suite_dir):
    path = write_suite(VALID_SUITE)
    suite, result = load_suite(path)
    assert result.is_valid
    assert suite.document_path() == suite_dir.resolve() / "users.json"


def test_suite_without_document():
    suite, result = validate_suite_yaml("""
version: 1
name: No doc
checks:
  - id: root
    path: $
    expect: [is_object]
""")
    assert result.is_valid
    assert suite.document_path() is None
    assert suite.settings.stop_on_failure is False


# ── validation errors ─────────────────────────────────────────────────────────


def test_missing_required_fields():
    suite, result = validate_suite_yaml("name: x\nextra: 1\n")
    assert suite is None
    assert "Required field 'version' is missing" in _messages(result)
    assert "Required field 'checks' is missing" in _messages(result)
    assert "Unknown top-level field 'extra'" in _messages(result)


def test_invalid_yaml():
    suite, result = validate_suite_yaml("version: [1\n")
    assert suite is None
    assert result.errors[0].message.startswith("Invalid YAML syntax")


def test_non_mapping_yaml():
    _, result = validate_suite_yaml("- a\n- b\n")
    assert _messages(result) == ["Content must be a YAML object"]


def test_invalid_path_reports_position():
    _, result = validate_suite_yaml("""
version: 1
name: Bad path
checks:
  - id: a
    path: $.users[0:2]
    expect: [exists]
""")
    assert _error_paths(result) == ["checks[0].path"]
    assert _messages(result) == ["Invalid path expression: array slices are not supported at position 9"]


def test_duplicate_ids_and_empty_expect():
    _, result = validate_suite_yaml("""
version: 1
name: Dupes
checks:
  - id: a
    path: $.x
    expect: [exists]
  - id: a
    path: $.y
    expect: []
""")
    assert "checks[1].id" in _error_paths(result)
    assert "Duplicate check id" in _messages(result)
    assert "checks[1].expect" in _error_paths(result)


@pytest.mark.parametrize(
    "expectation, error_path, message",
    [
        ("bogus", "checks[0].expect[0]", "Invalid operator"),
        ("equals", "checks[0].expect[0]", "Operator 'equals' requires a value"),
        ("{is_string: 3}", "checks[0].expect[0].is_string", "Operator 'is_string' takes no value"),
        ("{is_greater_than: abc}", "checks[0].expect[0].is_greater_than", "Must be a number"),
        ("{starts_with: 5}", "checks[0].expect[0].starts_with", "Must be a string"),
        ("{has_length: -1}", "checks[0].expect[0].has_length", "Must be a non-negative integer"),
        ("{is_between: [5, 1]}", "checks[0].expect[0].is_between", "Lower bound is greater than upper bound"),
        ("{is_between: 5}", "checks[0].expect[0].is_between", "Must be a list of two numbers"),
        ("{has_properties: []}", "checks[0].expect[0].has_properties", "Must be a non-empty list of property names"),
        ("{has_property_value: {name: a}}", "checks[0].expect[0].has_property_value", "Must be an object with 'name' and 'value'"),
        ("{equals: 2024-01-01}", "checks[0].expect[0].equals", "Must be a JSON value"),
        ("{properties_matching: {count: 1}}", "checks[0].expect[0].properties_matching", "Must have exactly one of 'prefix', 'suffix' or 'pattern'"),
        ("{properties_matching: {prefix: a}}", "checks[0].expect[0].properties_matching.count", "Required field 'count' is missing"),
        ("{a: 1, b: 2}", "checks[0].expect[0]", "Expectation must be an operator name or a single-key object"),
    ],
)
def test_expectation_validation(expectation, error_path, message):
    _, result = validate_suite_yaml(f"""
version: 1
name: Ops
checks:
  - id: a
    path: $.x
    expect:
      - {expectation}
""")
    assert not result.is_valid
    assert (error_path, message) in [(e.path, e.message) for e in result.errors]


def test_invalid_regex_is_reported():
    _, result = validate_suite_yaml("""
version: 1
name: Regex
checks:
  - id: a
    path: $.x
    expect:
      - matches_pattern: "([a-z"
""")
    assert result.errors[0].message.startswith("Invalid regular expression")


def test_settings_validation():
    _, result = validate_suite_yaml("""
version: 1
name: Settings
settings:
  stop_on_failure: maybe
  retries: 3
checks:
  - id: a
    path: $
    expect: [exists]
""")
    assert "settings.retries" in _error_paths(result)
    assert "settings.stop_on_failure" in _error_paths(result)


def test_validation_result_string():
    _, result = validate_suite_yaml("version: 0\nname: ''\nchecks: []\n")
    text = str(result)
    assert text.startswith("Schema validation failed with 3 error(s):")
    assert "❌ version: Must be >= 1" in text


def test_load_suite_missing_file(tmp_path):
    suite, result = load_suite(tmp_path / "nope.yaml")
    assert suite is None
    assert result.errors[0].message == "File not found"


# ── documents ─────────────────────────────────────────────────────────────────


def test_load_json_document(suite_dir, users_doc):
    assert load_document(suite_dir / "users.json") == users_doc


def test_load_yaml_document(tmp_path):
    path = tmp_path / "doc.yml"
    path.write_text("a:\n  b: [1, 2]\n", encoding="utf-8")
    assert load_document(path) == {"a": {"b": [1, 2]}}


def test_load_document_errors(tmp_path):
    with pytest.raises(SuiteLoadError, match="Document not found"):
        load_document(tmp_path / "missing.json")

    bad = tmp_path / "bad.json"
    bad.write_text('{"a": 1,,}', encoding="utf-8")
    with pytest.raises(SuiteLoadError, match=r"Invalid JSON in .* at line 1, column 9"):
        load_document(bad)
