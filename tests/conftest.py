"""Pytest configuration and fixtures."""

import json
import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_person():
    """Sample flat object for diff and patch tests."""
    return {"Name": "Alice", "Age": 30, "City": "Boston"}


@pytest.fixture
def sample_order_json():
    """Sample nested document with arrays, numbers and timestamps."""
    return {
        "user": {
            "id": 42,
            "name": "Alice",
            "email": "alice@example.com",
            "orders": [
                {"id": 1001, "total": 25.5, "placed": "2024-03-01T10:15:00Z", "items": ["pen", "ink"]},
                {"id": 1002, "total": 12, "placed": "2024-03-04T08:00:00Z", "items": []}
            ],
            "preferences": {
                "newsletter": True,
                "theme": "dark"
            }
        },
        "version": 3
    }


@pytest.fixture
def updated_order_json(sample_order_json):
    """The sample order document after a handful of edits."""
    updated = json.loads(json.dumps(sample_order_json))
    updated["user"]["email"] = "alice@example.org"
    updated["user"]["preferences"]["theme"] = "light"
    updated["user"]["preferences"]["language"] = "en"
    del updated["version"]
    updated["user"]["orders"].append({"id": 1003, "total": 7, "items": ["paper"]})
    return updated


@pytest.fixture
def json_files(temp_dir, sample_order_json, updated_order_json):
    """Write the original and updated sample documents to disk."""
    original = temp_dir / "original.json"
    updated = temp_dir / "updated.json"
    original.write_text(json.dumps(sample_order_json), encoding='utf-8')
    updated.write_text(json.dumps(updated_order_json), encoding='utf-8')
    return original, updated


@pytest.fixture
def make_nested():
    """Factory for documents of a given nesting depth: {"n": {"n": ... leaf}}."""
    def build(depth: int, leaf=0):
        document = leaf
        for _ in range(depth):
            document = {"n": document}
        return document
    return build
