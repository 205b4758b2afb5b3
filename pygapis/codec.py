# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Structured field codec.

Converts whole records between native values and their JSON wire form,
driven by a Schema. One generic walker replaces the serialize/deserialize
function pair a code generator would emit per API type.

Conversion Rules (serialize -> wire, deserialize is the inverse):
- BYTES:     bytes     -> padded standard base64 text
- INT64:     int       -> decimal string
- TIMESTAMP: datetime  -> RFC 3339 UTC string
- RECORD:    mapping   -> recurse with the nested type's own schema
- LIST / MAP containers apply the rule to each element / value
- Undeclared fields are copied unchanged, absent fields stay absent,
  and None stays None

Example:
    >>> POLICY = Schema("Policy", {"etag": Field.bytes(), "version": Field.int64()})
    >>> serialize({"etag": b"Man", "version": 3}, POLICY)
    {'etag': 'TWFu', 'version': '3'}
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from .binary import decode_base64, encode_base64
from .exceptions import DecodeError, MalformedFieldError, SchemaNotFoundError
from .models import DEFAULT_CODEC_CONFIG, CodecConfig
from .schema import Container, Field, FieldKind, Schema, SchemaRef, SchemaRegistry
from .wire import format_instant, format_wide_int, parse_instant, parse_wide_int


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _resolve(ref: SchemaRef, registry: SchemaRegistry | None) -> Schema:
    if isinstance(ref, Schema):
        return ref
    if registry is None:
        raise SchemaNotFoundError(ref)
    return registry.resolve(ref)


class _Converter:
    """One conversion direction bound to a registry and config."""

    def __init__(self, encode: bool, registry: SchemaRegistry | None, config: CodecConfig) -> None:
        self.encode = encode
        self.registry = registry
        self.config = config

    def record(self, record: Any, schema: Schema, path: str) -> dict[str, Any]:
        if not isinstance(record, Mapping):
            raise MalformedFieldError(
                path,
                f"expected a mapping for {schema.name}, got {type(record).__name__}",
                kind="record",
                value=record,
            )
        out = dict(record)
        for name, decl in schema.fields.items():
            if name not in record:
                continue
            value = record[name]
            if value is not None:
                out[name] = self.field(value, decl, _join(path, name))
        return out

    def field(self, value: Any, decl: Field, path: str) -> Any:
        if decl.container is Container.LIST:
            if not isinstance(value, (list, tuple)):
                raise MalformedFieldError(
                    path,
                    f"expected a list of {decl.kind.value}, got {type(value).__name__}",
                    kind=decl.describe(),
                    value=value,
                )
            return [
                None if item is None else self.value(item, decl, f"{path}[{i}]")
                for i, item in enumerate(value)
            ]

        if decl.container is Container.MAP:
            if not isinstance(value, Mapping):
                raise MalformedFieldError(
                    path,
                    f"expected a mapping of {decl.kind.value}, got {type(value).__name__}",
                    kind=decl.describe(),
                    value=value,
                )
            return {
                key: None if item is None else self.value(item, decl, f'{path}["{key}"]')
                for key, item in value.items()
            }

        return self.value(value, decl, path)

    def value(self, value: Any, decl: Field, path: str) -> Any:
        kind = decl.kind

        if kind is FieldKind.BYTES:
            if self.encode:
                if not isinstance(value, (bytes, bytearray, memoryview)):
                    raise MalformedFieldError(
                        path,
                        f"expected bytes for byte field, got {type(value).__name__}",
                        kind="bytes",
                        value=value,
                    )
                return encode_base64(value)
            try:
                return decode_base64(value)
            except DecodeError as e:
                raise MalformedFieldError(path, e.reason, kind="bytes", value=value) from e

        if kind is FieldKind.INT64:
            if self.encode:
                return format_wide_int(value, path)
            return parse_wide_int(value, path, lenient=self.config.lenient_integers)

        if kind is FieldKind.TIMESTAMP:
            if self.encode:
                return format_instant(
                    value,
                    path,
                    precision=self.config.timestamp_precision,
                    assume_utc=self.config.assume_utc,
                )
            return parse_instant(value, path)

        return self.record(value, _resolve(decl.schema, self.registry), path)


def serialize(
    record: Mapping[str, Any],
    schema: SchemaRef,
    *,
    registry: SchemaRegistry | None = None,
    config: CodecConfig | None = None,
) -> dict[str, Any]:
    """
    Convert a native record into its JSON wire form.

    Args:
        record: Native record. It is not modified.
        schema: Schema of the record, or its name in registry.
        registry: Resolves schemas referenced by name.
        config: Codec configuration (defaults to CodecConfig()).

    Returns:
        A new dict safe to pass to json.dumps().

    Raises:
        MalformedFieldError: On the first value that cannot be converted.
        SchemaNotFoundError: If a schema name cannot be resolved.
    """
    converter = _Converter(True, registry, config or DEFAULT_CODEC_CONFIG)
    return converter.record(record, _resolve(schema, registry), "")


def deserialize(
    wire_record: Mapping[str, Any],
    schema: SchemaRef,
    *,
    registry: SchemaRegistry | None = None,
    config: CodecConfig | None = None,
) -> dict[str, Any]:
    """
    Convert a JSON wire record back into native values.

    Raises:
        MalformedFieldError: On the first wire value that does not parse.
        SchemaNotFoundError: If a schema name cannot be resolved.
    """
    converter = _Converter(False, registry, config or DEFAULT_CODEC_CONFIG)
    return converter.record(wire_record, _resolve(schema, registry), "")


def _float_text(value: float) -> str:
    # Integral values below 1e21 print without exponent or '.0': 1e16 -> "10000000000000000"
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return "%d" % value
    return repr(value)


def _query_text(value: Any, path: str, config: CodecConfig) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float_text(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return encode_base64(value)
    if isinstance(value, datetime):
        return format_instant(
            value, path, precision=config.timestamp_precision, assume_utc=config.assume_utc
        )
    raise MalformedFieldError(
        path,
        f"{type(value).__name__} cannot be sent as a query parameter",
        value=value,
    )


def to_query_params(
    options: Mapping[str, Any] | None,
    schema: SchemaRef | None = None,
    *,
    registry: SchemaRegistry | None = None,
    config: CodecConfig | None = None,
) -> list[tuple[str, str]]:
    """
    Render a method's options record as URL query pairs.

    None and absent options are skipped, sequences become repeated pairs,
    and fields declared in schema are converted like body fields.

    Example:
        >>> to_query_params({"pageSize": 10, "showDeleted": True, "fields": ["a", "b"]})
        [('pageSize', '10'), ('showDeleted', 'true'), ('fields', 'a'), ('fields', 'b')]
    """
    if options is None:
        return []
    if not isinstance(options, Mapping):
        raise MalformedFieldError(
            "", f"expected a mapping of options, got {type(options).__name__}", value=options
        )

    config = config or DEFAULT_CODEC_CONFIG
    resolved = _resolve(schema, registry) if schema is not None else None
    converter = _Converter(True, registry, config)

    pairs: list[tuple[str, str]] = []
    for name, value in options.items():
        if value is None:
            continue
        decl = resolved.get(name) if resolved is not None else None
        if decl is not None and (decl.kind is FieldKind.RECORD or decl.container is Container.MAP):
            raise MalformedFieldError(
                name, f"{decl.describe()} fields cannot be sent as query parameters", value=value
            )

        repeated = isinstance(value, (list, tuple))
        for i, item in enumerate(value if repeated else [value]):
            if item is None:
                continue
            item_path = f"{name}[{i}]" if repeated else name
            if decl is not None:
                item = converter.value(item, decl, item_path)
            pairs.append((name, _query_text(item, item_path, config)))
    return pairs


class WireCodec:
    """
    Codec bound to a schema registry and configuration.

    Example:
        >>> codec = WireCodec(registry)
        >>> wire = codec.serialize(request, "SetIamPolicyRequest")
        >>> policy = codec.deserialize(response, "Policy")
    """

    def __init__(
        self,
        registry: SchemaRegistry | None = None,
        config: CodecConfig | None = None,
    ) -> None:
        self.registry = registry if registry is not None else SchemaRegistry()
        self.config = config or DEFAULT_CODEC_CONFIG

    def serialize(self, record: Mapping[str, Any], schema: SchemaRef) -> dict[str, Any]:
        return serialize(record, schema, registry=self.registry, config=self.config)

    def deserialize(self, wire_record: Mapping[str, Any], schema: SchemaRef) -> dict[str, Any]:
        return deserialize(wire_record, schema, registry=self.registry, config=self.config)

    def query_params(
        self, options: Mapping[str, Any] | None, schema: SchemaRef | None = None
    ) -> list[tuple[str, str]]:
        return to_query_params(options, schema, registry=self.registry, config=self.config)
