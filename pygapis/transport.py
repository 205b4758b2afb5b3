# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
HTTP transports.

A transport performs one HTTP request and returns the parsed JSON body:

    request(url, *, method, body=None, headers=None) -> JSON value

It raises TransportError for non-2xx responses and network failures.
Credentials, retries and quota handling belong to the transport; the codec
and the client only see the JSON value or the error.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import requests

from .exceptions import TransportError
from .serde import BodyDeserializer, JsonBodyDeserializer
from .tls import TLSConfig

_LOGGER = logging.getLogger(__name__)


class Transport(Protocol):
    """Synchronous transport contract."""

    def request(
        self,
        url: str,
        *,
        method: str,
        body: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any: ...


class AsyncTransport(Protocol):
    """Asynchronous transport contract."""

    async def request(
        self,
        url: str,
        *,
        method: str,
        body: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any: ...


def error_message(status: int, reason: str, text: str) -> str:
    """
    Build a readable message from a Google API error body.

    Google APIs answer errors with
    ``{"error": {"code": 404, "message": "...", "status": "NOT_FOUND"}}``.
    """
    try:
        payload = json.loads(text) if text else None
    except ValueError:
        payload = None

    if isinstance(payload, Mapping) and isinstance(payload.get("error"), Mapping):
        error = payload["error"]
        status_name = error.get("status")
        message = error.get("message")
        if message:
            if status_name:
                return f"HTTP {status} {status_name}: {message}"
            return f"HTTP {status}: {message}"
    return f"HTTP {status}: {reason}" if reason else f"HTTP {status}"


class RequestsTransport:
    """
    Transport backed by a requests.Session.

    Example:
        >>> transport = RequestsTransport(headers={"Authorization": f"Bearer {token}"})
        >>> data = transport.request("https://eventarc.googleapis.com/v1/...", method="GET")
        >>> transport.close()
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout: float = 30.0,
        headers: Mapping[str, str] | None = None,
        tls: TLSConfig | None = None,
        deserializer: BodyDeserializer | None = None,
    ) -> None:
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout
        self._headers = dict(headers or {})
        self._tls_kwargs = tls.requests_kwargs() if tls else {}
        self._deserializer = deserializer or JsonBodyDeserializer()

    def request(
        self,
        url: str,
        *,
        method: str,
        body: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """
        Send one request and parse the JSON response.

        Raises:
            TransportError: On network failure, non-2xx status, or a
                response body that is not JSON.
        """
        merged = {**self._headers, **(headers or {})}
        data = None
        if body is not None:
            merged.setdefault("Content-Type", "application/json")
            data = body.encode("utf-8")

        try:
            response = self._session.request(
                method,
                url,
                data=data,
                headers=merged,
                timeout=self._timeout,
                **self._tls_kwargs,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}", url=url) from e

        _LOGGER.debug("%s %s -> %d", method, url, response.status_code)
        if not 200 <= response.status_code < 300:
            raise TransportError(
                error_message(response.status_code, response.reason or "", response.text),
                status=response.status_code,
                url=url,
                body=response.text,
            )

        try:
            return self._deserializer.deserialize(response.content)
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON in response from {url}: {e}",
                status=response.status_code,
                url=url,
                body=response.text,
            ) from e

    def close(self) -> None:
        """Close the underlying session if this transport created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> RequestsTransport:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
