# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Schema declarations for the structured field codec.

A Schema lists only the fields of a record type that need conversion
between native and wire form. Every other field passes through untouched.

    >>> POLICY = Schema("Policy", {"etag": Field.bytes()})
    >>> SET_IAM_POLICY = Schema("SetIamPolicyRequest", {"policy": Field.record(POLICY)})
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Union

from .exceptions import SchemaError, SchemaNotFoundError


class FieldKind(str, Enum):
    """Wire conversions the codec knows how to apply."""

    BYTES = "bytes"
    INT64 = "int64"
    TIMESTAMP = "timestamp"
    RECORD = "record"


class Container(str, Enum):
    """How values of a field are laid out."""

    NONE = "none"
    LIST = "list"
    MAP = "map"


SchemaRef = Union["Schema", str]


def _container(repeated: bool, mapped: bool) -> Container:
    if repeated and mapped:
        raise SchemaError("A field cannot be both repeated and mapped")
    if repeated:
        return Container.LIST
    if mapped:
        return Container.MAP
    return Container.NONE


@dataclass(frozen=True)
class Field:
    """A field that needs conversion, with its kind and layout."""

    kind: FieldKind
    container: Container = Container.NONE
    schema: SchemaRef | None = None  # nested schema, or its registered name

    def __post_init__(self) -> None:
        if self.kind is FieldKind.RECORD:
            if not isinstance(self.schema, (Schema, str)) or self.schema == "":
                raise SchemaError("Record fields need a nested Schema or schema name")
        elif self.schema is not None:
            raise SchemaError(f"{self.kind.value} fields cannot carry a nested schema")

    @classmethod
    def bytes(cls, *, repeated: bool = False, mapped: bool = False) -> Field:
        return cls(FieldKind.BYTES, _container(repeated, mapped))

    @classmethod
    def int64(cls, *, repeated: bool = False, mapped: bool = False) -> Field:
        return cls(FieldKind.INT64, _container(repeated, mapped))

    @classmethod
    def timestamp(cls, *, repeated: bool = False, mapped: bool = False) -> Field:
        return cls(FieldKind.TIMESTAMP, _container(repeated, mapped))

    @classmethod
    def record(cls, schema: SchemaRef, *, repeated: bool = False, mapped: bool = False) -> Field:
        return cls(FieldKind.RECORD, _container(repeated, mapped), schema)

    def describe(self) -> str:
        """Human-readable form, e.g. ``list<record:Binding>``."""
        inner = self.kind.value
        if self.kind is FieldKind.RECORD:
            inner += f":{self.schema if isinstance(self.schema, str) else self.schema.name}"
        if self.container is Container.NONE:
            return inner
        return f"{self.container.value}<{inner}>"


@dataclass(frozen=True)
class Schema:
    """Per-record-type declaration of fields needing conversion."""

    name: str
    fields: Mapping[str, Field] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise SchemaError("Schema name must not be empty")
        for key, value in self.fields.items():
            if not isinstance(key, str):
                raise SchemaError(f"Schema {self.name}: field names must be str, got {key!r}")
            if not isinstance(value, Field):
                raise SchemaError(f"Schema {self.name}.{key}: expected Field, got {type(value).__name__}")
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self.fields.items())))

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, name: str) -> Field | None:
        return self.fields.get(name)


class SchemaRegistry:
    """
    Named schemas, so record fields can refer to each other by name.

    Named references are what makes recursive types possible:

        >>> registry = SchemaRegistry()
        >>> registry.register(Schema("Node", {"children": Field.record("Node", repeated=True)}))
    """

    def __init__(self, schemas: Iterable[Schema] = ()) -> None:
        self._schemas: dict[str, Schema] = {}
        for schema in schemas:
            self.register(schema)

    def register(self, schema: Schema, *, replace: bool = False) -> Schema:
        """
        Register a schema under its name.

        Raises:
            SchemaError: If a different schema is already registered under
                that name and replace is False.
        """
        if not isinstance(schema, Schema):
            raise SchemaError(f"Expected Schema, got {type(schema).__name__}")
        existing = self._schemas.get(schema.name)
        if existing is not None and existing != schema and not replace:
            raise SchemaError(f"Schema {schema.name} is already registered")
        self._schemas[schema.name] = schema
        return schema

    def get(self, name: str) -> Schema | None:
        return self._schemas.get(name)

    def resolve(self, ref: SchemaRef) -> Schema:
        """Return ref itself if it is a Schema, else look it up by name."""
        if isinstance(ref, Schema):
            return ref
        schema = self._schemas.get(ref)
        if schema is None:
            raise SchemaNotFoundError(ref)
        return schema

    def names(self) -> list[str]:
        return sorted(self._schemas)

    def __contains__(self, name: object) -> bool:
        return name in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def __iter__(self) -> Iterator[Schema]:
        return iter(list(self._schemas.values()))
