import pytest

from jsontest import JsonTest, ValueMismatch


def chain(doc, path):
    return JsonTest(doc, fail_fast=False).assert_path(path)


# ── has_property / has_property_value ─────────────────────────────────────────


def test_has_property(config_doc):
    assert chain(config_doc, "$.config").has_property("port").passed
    assert chain(config_doc, "$.config").has_property("owner").passed


def test_missing_property_lists_available(config_doc):
    ctx = chain(config_doc, "$.config").has_property("host")
    diag = ctx.diagnostic
    assert diag.label == "Missing property"
    assert diag.path == "$.config"
    assert diag.expected == "property 'host'"
    assert diag.available == ("name", "port", "debug", "owner", "api_keys")
    assert diag.render().splitlines()[-1] == "Available properties: name, port, debug, owner, api_keys"


def test_has_property_on_non_object_is_type_mismatch(config_doc):
    ctx = chain(config_doc, "$.config.port").has_property("x")
    assert ctx.diagnostic.kind.value == "type_mismatch"
    assert ctx.diagnostic.expected == "object"


def test_has_property_value(config_doc):
    assert chain(config_doc, "$.config").has_property_value("port", 5432).passed
    ctx = chain(config_doc, "$.config").has_property_value("port", 3306)
    diag = ctx.diagnostic
    assert diag.path == "$.config.port"
    assert diag.label == "Property 'port': Value mismatch"
    assert diag.expected == "number 3306"
    assert diag.actual == "number 5432"


def test_has_property_matching(config_doc):
    assert chain(config_doc, "$.config").has_property_matching("port", lambda p: p > 1024).passed
    ctx = chain(config_doc, "$.config").has_property_matching(
        "port", lambda p: p < 1024, "Privileged port"
    )
    assert ctx.diagnostic.path == "$.config.port"
    assert ctx.diagnostic.label == "Property 'port': Privileged port"
    assert ctx.diagnostic.kind.value == "custom_matcher_failure"


# ── has_properties ────────────────────────────────────────────────────────────


def test_has_properties_reports_all_missing_in_one_diagnostic():
    doc = {"user": {"name": "John", "email": "john@example.com"}}
    with pytest.raises(ValueMismatch) as exc_info:
        JsonTest(doc).assert_path("$.user").has_properties(["name", "age", "roles"])
    diag = exc_info.value.diagnostic
    assert diag.label == "Missing properties"
    assert diag.actual == "missing age, roles"
    assert diag.available == ("name", "email")
    assert str(exc_info.value) == (
        "Missing properties at $.user\n"
        "Expected: properties name, age, roles\n"
        "Actual: missing age, roles\n"
        "Available properties: name, email"
    )


def test_has_properties_passes_when_all_present(users_doc):
    assert chain(users_doc, "$.users[*]").has_properties(["name", "age", "email"]).passed


def test_has_properties_rejects_single_string():
    with pytest.raises(TypeError):
        chain({"a": {}}, "$.a").has_properties("name")


def test_has_property_count(config_doc):
    assert chain(config_doc, "$.config.api_keys").has_property_count(3).passed
    ctx = chain(config_doc, "$.config.api_keys").has_property_count(2)
    assert ctx.diagnostic.label == "Property count mismatch"
    assert ctx.diagnostic.actual == "3 properties (key_dev, key_prod, timeout)"


def test_empty_object_available_renders_none():
    ctx = chain({"a": {}}, "$.a").has_property("x")
    assert ctx.diagnostic.render().splitlines()[-1] == "Available properties: (none)"


# ── properties_matching ───────────────────────────────────────────────────────


def test_properties_matching_collects_pairs(config_doc):
    scope = chain(config_doc, "$.config.api_keys").properties_matching(lambda k: k.startswith("key_"))
    assert scope.keys() == ["key_dev", "key_prod"]
    assert scope.values() == ["pk_dev_123", "pk_prod_456"]
    assert scope.pairs() == [("key_dev", "pk_dev_123"), ("key_prod", "pk_prod_456")]


def test_properties_matching_count_zero_passes_with_no_matches():
    doc = {"obj": {"a": 1, "b": 2}}
    scope = chain(doc, "$.obj").properties_matching(lambda k: k.startswith("meta_")).count(0)
    assert scope.passed
    assert scope.and_().passed


def test_properties_matching_count_one_fails_with_no_matches():
    doc = {"obj": {"a": 1, "b": 2}}
    ctx = chain(doc, "$.obj").properties_matching(lambda k: k.startswith("meta_")).count(1).and_()
    assert ctx.failed
    assert ctx.diagnostic.label == "Matching property count mismatch"
    assert ctx.diagnostic.expected == "1 matching properties"
    assert ctx.diagnostic.actual == "0 matching properties (none)"


def test_properties_matching_all(config_doc):
    ctx = (
        chain(config_doc, "$.config.api_keys")
        .properties_matching(lambda k: k.startswith("key_"))
        .count(2)
        .all(lambda k, v: isinstance(v, str) and v.startswith("pk_"))
        .and_()
        .has_property("key_prod")
    )
    assert ctx.passed


def test_properties_matching_all_names_rejected_property(config_doc):
    scope = (
        chain(config_doc, "$.config.api_keys")
        .properties_matching(lambda k: k.startswith("key_"))
        .all(lambda k, v: (v.endswith("_123"), "Dev key suffix"))
    )
    assert scope.failed
    assert scope.diagnostic.path == "$.config.api_keys.key_prod"
    assert scope.diagnostic.label == "Dev key suffix"
    assert scope.and_().failed


def test_properties_matching_failure_skips_rest_of_chain(config_doc):
    calls = []
    ctx = (
        chain(config_doc, "$.config.api_keys")
        .properties_matching(lambda k: k.startswith("key_"))
        .count(5)
        .all(lambda k, v: calls.append(k) or True)
        .and_()
        .matches(lambda v: calls.append(v) or True)
    )
    assert ctx.failed
    assert calls == []


def test_properties_matching_on_non_object(config_doc):
    scope = chain(config_doc, "$.config.port").properties_matching(lambda k: True)
    assert scope.and_().failed
    assert scope.and_().diagnostic.kind.value == "type_mismatch"
    assert scope.keys() == []


def test_properties_matching_fail_fast_raises(config_doc):
    with pytest.raises(ValueMismatch):
        (JsonTest(config_doc).assert_path("$.config.api_keys")
            .properties_matching(lambda k: k.startswith("key_"))
            .count(3))


def test_properties_matching_on_optional_absent_value(config_doc):
    scope = (
        chain(config_doc, "$.config.extras")
        .exists_or_none()
        .properties_matching(lambda k: True)
        .count(4)
    )
    assert scope.passed
    assert scope.and_().passed


def test_properties_matching_count_follows_added_key():
    doc = {"obj": {"a": 1, "meta_x": 2}}

    def meta(key):
        return key.startswith("meta_")

    assert chain(doc, "$.obj").properties_matching(meta).count(0).failed
    assert chain(doc, "$.obj").properties_matching(meta).count(1).passed
