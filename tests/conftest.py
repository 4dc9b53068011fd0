"""Pytest configuration and fixtures."""

import json

import pytest


@pytest.fixture
def users_doc():
    return {
        "users": [
            {"name": "John Doe", "age": 30, "email": "john@example.com", "roles": ["admin", "user"]},
            {"name": "Ann Lee", "age": 17, "email": "ann@example.com", "roles": ["user"]},
            {"name": "Bo Chen", "age": 45, "email": "bo@example.org", "roles": []},
        ],
        "meta": {"total": 3, "page": 1},
    }


@pytest.fixture
def config_doc():
    return {
        "config": {
            "name": "payments",
            "port": 5432,
            "debug": False,
            "owner": None,
            "api_keys": {
                "key_dev": "pk_dev_123",
                "key_prod": "pk_prod_456",
                "timeout": 30,
            },
        }
    }


@pytest.fixture
def suite_dir(tmp_path, users_doc):
    """tmp_path with users.json written into it."""
    (tmp_path / "users.json").write_text(json.dumps(users_doc), encoding="utf-8")
    return tmp_path


@pytest.fixture
def write_suite(suite_dir):
    def _write(content: str, name: str = "suite.yaml"):
        path = suite_dir / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
