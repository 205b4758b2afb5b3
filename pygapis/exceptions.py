# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Custom exceptions for pygapis.

All exceptions inherit from GapisError, making it easy to catch every
wire-layer error with a single except clause:

    try:
        record = deserialize(payload, POLICY)
    except GapisError as e:
        print(f"pygapis error: {e}")

For more granular error handling, catch specific exception types:

    try:
        record = deserialize(payload, POLICY)
    except MalformedFieldError as e:
        print(f"Bad value at {e.path}")
    except TransportError as e:
        print(f"HTTP {e.status} from {e.url}")
"""

from __future__ import annotations

from typing import Any


class GapisError(Exception):
    """
    Base exception for all pygapis errors.

    All pygapis exceptions inherit from this class, allowing you to catch
    all wire-layer errors with a single except clause.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        self.hint = hint
        if hint:
            message = f"{message}\n\n  Hint: {hint}"
        super().__init__(message)


class DecodeError(GapisError, ValueError):
    """
    Raised when base64 text cannot be decoded.

    Common causes:
    - Characters outside the standard alphabet (URL-safe '-' or '_')
    - Missing or excess '=' padding
    - Whitespace or line breaks inside the text
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        self.position = position
        if position is not None:
            message = f"{message} (at offset {position})"
        self.reason = message
        super().__init__(
            message,
            hint="Byte fields must be standard base64 (A-Z a-z 0-9 + /) padded to a multiple of 4",
        )


class MalformedFieldError(GapisError, ValueError):
    """
    Raised when a field value does not match its declared wire format.

    The error carries the dotted path of the offending field so the caller
    can locate it inside deeply nested records, e.g. ``policy.bindings[2].etag``.
    """

    def __init__(
        self,
        path: str,
        message: str,
        *,
        kind: str | None = None,
        value: Any = None,
    ) -> None:
        self.path = path
        self.kind = kind
        self.value = value
        where = path or "<root>"
        super().__init__(f"Malformed field {where}: {message}")


class SchemaError(GapisError):
    """Base exception for schema declaration errors."""


class SchemaNotFoundError(SchemaError):
    """Raised when a schema name cannot be resolved."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Schema not found: {name}",
            hint=f"Register the schema first: registry.register(Schema('{name}', {{...}}))",
        )


class TransportError(GapisError):
    """
    Raised by a transport when an HTTP request fails.

    This covers non-2xx responses and network failures. The codec and the
    client never catch or reinterpret it; it reaches the caller unchanged.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        url: str | None = None,
        body: str | None = None,
    ) -> None:
        self.status = status
        self.url = url
        self.body = body
        hint = None
        if status in (401, 403):
            hint = "Check that the transport attaches valid credentials"
        elif status == 404:
            hint = "Check the resource name and the client's base_url"
        super().__init__(message, hint=hint)
