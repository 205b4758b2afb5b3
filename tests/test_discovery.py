# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Tests for building schemas from Discovery documents."""

import json
import logging
from datetime import datetime, timezone

import pytest

from pygapis.codec import WireCodec
from pygapis.discovery import load_discovery, schemas_from_discovery
from pygapis.exceptions import SchemaError
from pygapis.schema import Field

DOCUMENT = {
    "kind": "discovery#restDescription",
    "id": "storage:v1",
    "schemas": {
        "Policy": {
            "id": "Policy",
            "type": "object",
            "properties": {
                "etag": {"type": "string", "format": "byte"},
                "version": {"type": "integer", "format": "int32"},
                "bindings": {"type": "array", "items": {"$ref": "Binding"}},
            },
        },
        "Binding": {
            "id": "Binding",
            "type": "object",
            "properties": {
                "role": {"type": "string"},
                "members": {"type": "array", "items": {"type": "string"}},
                "condition": {"$ref": "Expr"},
            },
        },
        "Expr": {
            "id": "Expr",
            "type": "object",
            "properties": {"expression": {"type": "string"}},
        },
        "Object": {
            "id": "Object",
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "generation": {"type": "string", "format": "int64"},
                "size": {"type": "string", "format": "uint64"},
                "timeCreated": {"type": "string", "format": "date-time"},
                "metadata": {"type": "object", "additionalProperties": {"type": "string"}},
                "owner": {
                    "type": "object",
                    "properties": {
                        "entity": {"type": "string"},
                        "entityId": {"type": "string", "format": "int64"},
                    },
                },
                "retention": {
                    "type": "object",
                    "properties": {"mode": {"type": "string"}},
                },
                "customTimes": {
                    "type": "object",
                    "additionalProperties": {"type": "string", "format": "google-datetime"},
                },
                "acl": {"type": "array", "items": {"$ref": "ObjectAccessControl"}},
            },
        },
        "ObjectAccessControl": {
            "id": "ObjectAccessControl",
            "type": "object",
            "properties": {
                "entity": {"type": "string"},
                "generation": {"type": "string", "format": "int64"},
            },
        },
        "Node": {
            "id": "Node",
            "type": "object",
            "properties": {
                "id": {"type": "string", "format": "int64"},
                "children": {"type": "array", "items": {"$ref": "Node"}},
            },
        },
        "Loop": {
            "id": "Loop",
            "type": "object",
            "properties": {"next": {"$ref": "Loop"}},
        },
    },
}


class TestSchemasFromDiscovery:
    """Tests for schemas_from_discovery."""

    def test_scalar_formats(self) -> None:
        """Test byte, int64, uint64 and date-time properties."""
        registry = schemas_from_discovery(DOCUMENT)
        obj = registry.resolve("Object")
        assert obj.get("generation") == Field.int64()
        assert obj.get("size") == Field.int64()
        assert obj.get("timeCreated") == Field.timestamp()
        assert "name" not in obj

    def test_int32_not_converted(self) -> None:
        """Test plain integers are left to JSON."""
        assert dict(schemas_from_discovery(DOCUMENT).resolve("Policy").fields) == {"etag": Field.bytes()}

    def test_inert_references_dropped(self) -> None:
        """Test record fields to types with nothing to convert are left out."""
        registry = schemas_from_discovery(DOCUMENT)
        assert len(registry.resolve("Binding")) == 0
        assert len(registry.resolve("Expr")) == 0
        assert len(registry.resolve("Loop")) == 0
        assert "bindings" not in registry.resolve("Policy")

    def test_containers(self) -> None:
        """Test arrays and additionalProperties maps."""
        obj = schemas_from_discovery(DOCUMENT).resolve("Object")
        assert obj.get("customTimes") == Field.timestamp(mapped=True)
        assert obj.get("acl") == Field.record("ObjectAccessControl", repeated=True)
        assert "metadata" not in obj

    def test_inline_objects(self) -> None:
        """Test inline object properties become their own schemas."""
        registry = schemas_from_discovery(DOCUMENT)
        assert registry.resolve("Object").get("owner") == Field.record("Object.owner")
        assert dict(registry.resolve("Object.owner").fields) == {"entityId": Field.int64()}
        assert "Object.retention" in registry
        assert "retention" not in registry.resolve("Object")

    def test_recursive_reference(self) -> None:
        """Test a self-referencing type keeps its record field."""
        node = schemas_from_discovery(DOCUMENT).resolve("Node")
        assert node.get("children") == Field.record("Node", repeated=True)

    def test_every_schema_registered(self) -> None:
        """Test each document schema is present in the registry."""
        registry = schemas_from_discovery(DOCUMENT)
        for name in DOCUMENT["schemas"]:
            assert name in registry

    def test_unknown_ref(self) -> None:
        """Test a $ref to a missing schema."""
        document = {"schemas": {"A": {"properties": {"b": {"$ref": "B"}}}}}
        with pytest.raises(SchemaError, match="unknown schema"):
            schemas_from_discovery(document)

    def test_malformed_documents(self) -> None:
        """Test documents with the wrong shape."""
        with pytest.raises(SchemaError):
            schemas_from_discovery([])  # type: ignore[arg-type]
        with pytest.raises(SchemaError):
            schemas_from_discovery({"schemas": []})
        with pytest.raises(SchemaError):
            schemas_from_discovery({"schemas": {"A": "object"}})
        with pytest.raises(SchemaError):
            schemas_from_discovery({"schemas": {"A": {"properties": {"b": {"type": "array"}}}}})

    def test_empty_document(self) -> None:
        """Test a document without schemas."""
        assert len(schemas_from_discovery({})) == 0

    def test_nested_containers_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test arrays of arrays are left unconverted with a warning."""
        document = {
            "schemas": {
                "Matrix": {
                    "properties": {
                        "rows": {
                            "type": "array",
                            "items": {"type": "array", "items": {"type": "string", "format": "int64"}},
                        }
                    }
                }
            }
        }
        with caplog.at_level(logging.WARNING, logger="pygapis.discovery"):
            registry = schemas_from_discovery(document)
        assert len(registry.resolve("Matrix")) == 0
        assert "Matrix.rows" in caplog.text

    def test_end_to_end(self) -> None:
        """Test a registry built from a document drives the codec."""
        codec = WireCodec(schemas_from_discovery(DOCUMENT))
        wire = {
            "name": "photo.png",
            "generation": "1700000000000001",
            "timeCreated": "2024-01-02T03:04:05.678Z",
            "owner": {"entity": "user-1", "entityId": "42"},
            "acl": [{"entity": "allUsers", "generation": "7"}],
            "metadata": {"k": "v"},
        }
        native = codec.deserialize(wire, "Object")
        assert native["generation"] == 1700000000000001
        assert native["timeCreated"] == datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)
        assert native["owner"] == {"entity": "user-1", "entityId": 42}
        assert native["acl"] == [{"entity": "allUsers", "generation": 7}]
        assert native["metadata"] == {"k": "v"}
        assert codec.serialize(native, "Object") == wire


class TestLoadDiscovery:
    """Tests for load_discovery."""

    def test_load(self, tmp_path) -> None:
        """Test reading a document from disk."""
        path = tmp_path / "storage.v1.json"
        path.write_text(json.dumps(DOCUMENT), encoding="utf-8")
        registry = load_discovery(path)
        assert registry.resolve("Policy").get("etag") == Field.bytes()
        assert "Object" in load_discovery(str(path))

    def test_invalid_json(self, tmp_path) -> None:
        """Test a file that is not JSON."""
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SchemaError, match="Invalid discovery document"):
            load_discovery(path)

    def test_missing_file(self, tmp_path) -> None:
        """Test a missing file raises OSError."""
        with pytest.raises(OSError):
            load_discovery(tmp_path / "missing.json")
