# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
pygapis - Wire codec for Google REST API clients.

Google's JSON APIs carry a few value types that JSON cannot express
directly. pygapis converts them in both directions:
- Byte fields as padded standard base64 text
- 64-bit integers as decimal strings
- Timestamps as RFC 3339 UTC strings
- Nested records, lists and maps of records, each with their own schema

Quick Start (Simplest):
    >>> from pygapis import Field, Schema, serialize, deserialize
    >>>
    >>> POLICY = Schema("Policy", {"etag": Field.bytes()})
    >>> serialize({"etag": b"Man", "version": 3}, POLICY)
    {'etag': 'TWFu', 'version': 3}
    >>> deserialize({"etag": "TWFu"}, POLICY)
    {'etag': b'Man'}

Schemas from a Discovery document:
    >>> from pygapis import WireCodec, load_discovery
    >>>
    >>> codec = WireCodec(load_discovery("cloudresourcemanager.v3.json"))
    >>> wire = codec.serialize(request, "SetIamPolicyRequest")

API client (Recommended for applications):
    >>> from pygapis import ApiClient
    >>>
    >>> with ApiClient(base_url="https://eventarc.googleapis.com/", registry=registry) as client:
    ...     trigger = client.call(f"v1/{name}", response_schema="Trigger")
"""

import logging

from .binary import BASE64_ALPHABET, decode_base64, encode_base64, is_base64
from .client import ApiClient, AsyncApiClient
from .codec import WireCodec, deserialize, serialize, to_query_params
from .discovery import load_discovery, schemas_from_discovery
from .exceptions import (
    DecodeError,
    GapisError,
    MalformedFieldError,
    SchemaError,
    SchemaNotFoundError,
    TransportError,
)
from .models import ClientConfig, CodecConfig, TimestampPrecision
from .schema import Container, Field, FieldKind, Schema, SchemaRegistry
from .serde import BodyDeserializer, BodySerializer, JsonBodyDeserializer, JsonBodySerializer
from .tls import TLSConfig
from .transport import AsyncTransport, RequestsTransport, Transport
from .wire import format_instant, format_wide_int, parse_instant, parse_wide_int

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.4.0"
__author__ = "Firefly Software Solutions Inc."
__license__ = "Apache-2.0"

__all__ = [
    # Byte codec
    "BASE64_ALPHABET",
    "encode_base64",
    "decode_base64",
    "is_base64",
    # Scalars
    "format_wide_int",
    "parse_wide_int",
    "format_instant",
    "parse_instant",
    # Schemas
    "FieldKind",
    "Container",
    "Field",
    "Schema",
    "SchemaRegistry",
    "schemas_from_discovery",
    "load_discovery",
    # Codec
    "WireCodec",
    "serialize",
    "deserialize",
    "to_query_params",
    # Client
    "ApiClient",
    "AsyncApiClient",
    "Transport",
    "AsyncTransport",
    "RequestsTransport",
    "TLSConfig",
    "BodySerializer",
    "BodyDeserializer",
    "JsonBodySerializer",
    "JsonBodyDeserializer",
    # Configuration
    "ClientConfig",
    "CodecConfig",
    "TimestampPrecision",
    # Exceptions
    "GapisError",
    "DecodeError",
    "MalformedFieldError",
    "SchemaError",
    "SchemaNotFoundError",
    "TransportError",
]
