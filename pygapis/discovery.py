# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Schemas from Google API Discovery documents.

The ``schemas`` section of a Discovery document already says which
properties need wire conversion:

    "Policy": {
        "type": "object",
        "properties": {
            "etag":     {"type": "string", "format": "byte"},
            "version":  {"type": "integer", "format": "int32"},
            "bindings": {"type": "array", "items": {"$ref": "Binding"}}
        }
    }

schemas_from_discovery() turns that into a SchemaRegistry. Properties that
need no conversion are left out, and record fields are kept only when the
referenced type (transitively) contains something to convert.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .exceptions import SchemaError
from .schema import Container, Field, FieldKind, Schema, SchemaRegistry

_LOGGER = logging.getLogger(__name__)

FORMAT_KINDS: Mapping[str, FieldKind] = {
    "byte": FieldKind.BYTES,
    "int64": FieldKind.INT64,
    "uint64": FieldKind.INT64,
    "google-datetime": FieldKind.TIMESTAMP,
    "date-time": FieldKind.TIMESTAMP,
}


class _Builder:
    def __init__(self) -> None:
        self.schemas: dict[str, dict[str, Field]] = {}

    def build(self, name: str, definition: Any) -> None:
        if not isinstance(definition, Mapping):
            raise SchemaError(f"Schema {name}: definition must be an object")
        properties = definition.get("properties", {})
        if not isinstance(properties, Mapping):
            raise SchemaError(f"Schema {name}: properties must be an object")

        fields: dict[str, Field] = {}
        self.schemas[name] = fields
        for prop, prop_def in properties.items():
            decl = self.field(f"{name}.{prop}", prop_def)
            if decl is not None:
                fields[prop] = decl

    def field(self, qualified: str, prop_def: Any) -> Field | None:
        if not isinstance(prop_def, Mapping):
            raise SchemaError(f"Property {qualified}: definition must be an object")

        ref = prop_def.get("$ref")
        if ref is not None:
            if not isinstance(ref, str) or not ref:
                raise SchemaError(f"Property {qualified}: $ref must be a schema name")
            return Field.record(ref)

        kind = prop_def.get("type")
        if kind == "array":
            return self.container(qualified, prop_def.get("items"), Container.LIST)
        if kind == "object":
            extra = prop_def.get("additionalProperties")
            if isinstance(extra, Mapping):
                return self.container(qualified, extra, Container.MAP)
            if "properties" in prop_def:
                self.build(qualified, prop_def)
                return Field.record(qualified)
            return None

        fmt = prop_def.get("format")
        if fmt in FORMAT_KINDS:
            return Field(FORMAT_KINDS[fmt])
        return None

    def container(self, qualified: str, element: Any, container: Container) -> Field | None:
        if not isinstance(element, Mapping):
            raise SchemaError(f"Property {qualified}: element definition must be an object")
        inner = self.field(qualified, element)
        if inner is None:
            return None
        if inner.container is not Container.NONE:
            _LOGGER.warning(
                "Property %s nests %s inside %s; values pass through unconverted",
                qualified,
                inner.describe(),
                container.value,
            )
            return None
        return Field(inner.kind, container, inner.schema)

    def active(self) -> set[str]:
        """Names of schemas that have something to convert, directly or through references."""
        live = {
            name
            for name, fields in self.schemas.items()
            if any(decl.kind is not FieldKind.RECORD for decl in fields.values())
        }
        changed = True
        while changed:
            changed = False
            for name, fields in self.schemas.items():
                if name in live:
                    continue
                if any(decl.kind is FieldKind.RECORD and decl.schema in live for decl in fields.values()):
                    live.add(name)
                    changed = True
        return live

    def registry(self) -> SchemaRegistry:
        for name, fields in self.schemas.items():
            for prop, decl in fields.items():
                if decl.kind is FieldKind.RECORD and decl.schema not in self.schemas:
                    raise SchemaError(f"Property {name}.{prop}: unknown schema $ref {decl.schema!r}")

        live = self.active()
        registry = SchemaRegistry()
        for name, fields in self.schemas.items():
            kept = {
                prop: decl
                for prop, decl in fields.items()
                if decl.kind is not FieldKind.RECORD or decl.schema in live
            }
            registry.register(Schema(name, kept))
        return registry


def schemas_from_discovery(document: Mapping[str, Any]) -> SchemaRegistry:
    """
    Build a SchemaRegistry from a Discovery document.

    Args:
        document: Parsed Discovery document (restDescription).

    Returns:
        Registry holding one schema per document schema, plus one per inline
        object property, named ``Parent.property``.

    Raises:
        SchemaError: If the document is malformed or a $ref is unknown.
    """
    if not isinstance(document, Mapping):
        raise SchemaError(f"Discovery document must be an object, got {type(document).__name__}")
    schemas = document.get("schemas", {})
    if not isinstance(schemas, Mapping):
        raise SchemaError("Discovery document 'schemas' must be an object")

    builder = _Builder()
    for name, definition in schemas.items():
        builder.build(name, definition)
    registry = builder.registry()

    _LOGGER.debug(
        "Built %d schemas from discovery document %s",
        len(registry),
        document.get("id", "<unnamed>"),
    )
    return registry


def load_discovery(path: str | Path) -> SchemaRegistry:
    """
    Read a Discovery document from disk and build its schemas.

    Raises:
        SchemaError: If the file is not valid JSON or not a valid document.
        OSError: If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid discovery document {path}: {e}") from e
    return schemas_from_discovery(document)
