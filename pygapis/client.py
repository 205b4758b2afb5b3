# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
pygapis API client.

Glue between generated-style method wrappers, the wire codec and a
transport. A method wrapper only has to expand its URL path and name the
schemas involved:

    # Pattern 1: Default requests-based transport
    from pygapis import ApiClient
    with ApiClient(base_url="https://eventarc.googleapis.com/", registry=registry) as client:
        trigger = client.call(f"v1/{name}", response_schema="Trigger")

    # Pattern 2: Bring your own transport (auth, retries, test fakes)
    client = ApiClient(my_transport, registry=load_discovery("eventarc.json"))
    op = client.call(
        f"v1/{parent}/triggers",
        method="POST",
        body=trigger,
        request_schema="Trigger",
        response_schema="GoogleLongrunningOperation",
        params={"triggerId": "my-trigger", "validateOnly": True},
    )

    # Pattern 3: asyncio
    async with AsyncApiClient(my_async_transport, registry=registry) as client:
        trigger = await client.call(f"v1/{name}", response_schema="Trigger")

TransportError raised by the transport reaches the caller unchanged.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlencode

from .codec import WireCodec
from .exceptions import GapisError, TransportError
from .models import ClientConfig
from .schema import SchemaRef, SchemaRegistry
from .serde import BodySerializer, JsonBodySerializer
from .tls import TLSConfig
from .transport import RequestsTransport

_LOGGER = logging.getLogger(__name__)


def _request_callable(transport: Any) -> Callable[..., Any]:
    request = getattr(transport, "request", None)
    if callable(request):
        return request
    if callable(transport):
        return transport
    raise TypeError(
        f"transport must be callable or provide request(), got {type(transport).__name__}"
    )


class _BaseClient:
    """Config, URL building and codec handling shared by both clients."""

    def __init__(
        self,
        transport: Any = None,
        *,
        base_url: str | None = None,
        config: ClientConfig | None = None,
        registry: SchemaRegistry | None = None,
        serializer: BodySerializer | None = None,
        tls: TLSConfig | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the client.

        Args:
            transport: Object with request(url, *, method, body, headers), or a plain
                callable with that signature. Defaults to a RequestsTransport
                owned and closed by the client.
            base_url: Service root, e.g. "https://eventarc.googleapis.com/".
            config: Optional ClientConfig object.
            registry: Schemas that request/response schema names refer to.
            serializer: Body serializer (defaults to compact JSON).
            tls: TLS settings for the default transport.
            **kwargs: Override config options (timeout_ms, user_agent, etc.)
        """
        unknown = sorted(set(kwargs) - set(ClientConfig.model_fields))
        if unknown:
            raise TypeError(f"Unknown client option(s): {', '.join(unknown)}")
        if base_url is not None:
            kwargs["base_url"] = base_url

        if config is None:
            config = ClientConfig(**kwargs)
        else:
            # Overrides apply to a copy; the caller's config is never mutated
            config = config.model_copy()
            for key, value in kwargs.items():
                setattr(config, key, value)

        self._owns_transport = transport is None
        if transport is None:
            transport = RequestsTransport(
                timeout=config.timeout_seconds,
                headers={"User-Agent": config.user_agent},
                tls=tls,
            )

        self._config = config
        self._transport = transport
        self._request = _request_callable(transport)
        self._codec = WireCodec(registry, config.codec)
        self._serializer = serializer or JsonBodySerializer()
        self._closed = False

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def codec(self) -> WireCodec:
        return self._codec

    @property
    def closed(self) -> bool:
        return self._closed

    def url(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        params_schema: SchemaRef | None = None,
    ) -> str:
        """
        Join base_url with an already-expanded path and encode query options.

        Example:
            >>> client.url("v1/projects/p/triggers", {"pageSize": 50})
            'https://eventarc.googleapis.com/v1/projects/p/triggers?pageSize=50'
        """
        url = self._config.base_url + path.lstrip("/")
        pairs = self._codec.query_params(params, params_schema)
        if pairs:
            url += ("&" if "?" in url else "?") + urlencode(pairs)
        return url

    def _prepare(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None,
        request_schema: SchemaRef | None,
        params: Mapping[str, Any] | None,
        params_schema: SchemaRef | None,
    ) -> tuple[str, str | None, dict[str, str] | None]:
        if self._closed:
            raise GapisError("Client is closed", hint="Create a new client")
        url = self.url(path, params, params_schema)
        payload = None
        headers = None
        if body is not None:
            wire = self._codec.serialize(body, request_schema) if request_schema is not None else body
            payload = self._serializer.serialize(wire)
            headers = {"Content-Type": self._serializer.content_type}
        _LOGGER.debug("%s %s", method, url)
        return url, payload, headers

    def _finish(self, data: Any, response_schema: SchemaRef | None) -> Any:
        if response_schema is None:
            return data
        return self._codec.deserialize(data, response_schema)


class ApiClient(_BaseClient):
    """
    Synchronous API client.

    Example:
        >>> client = ApiClient(base_url="https://vault.googleapis.com/")
        >>> matter = client.call("v1/matters/123", response_schema=MATTER)
        >>> client.close()
    """

    def call(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Mapping[str, Any] | None = None,
        request_schema: SchemaRef | None = None,
        response_schema: SchemaRef | None = None,
        params: Mapping[str, Any] | None = None,
        params_schema: SchemaRef | None = None,
    ) -> Any:
        """
        Perform one API call.

        Args:
            path: URL path relative to base_url, already expanded.
            method: HTTP method.
            body: Native request record.
            request_schema: Schema used to serialize body.
            response_schema: Schema used to deserialize the response.
            params: Query options.
            params_schema: Schema used to convert query options.

        Returns:
            The deserialized response, or the raw JSON value if no
            response_schema is given.

        Raises:
            MalformedFieldError: If the request or response does not convert.
            TransportError: If the transport fails.
        """
        url, payload, headers = self._prepare(method, path, body, request_schema, params, params_schema)
        try:
            data = self._request(url, method=method, body=payload, headers=headers)
        except TransportError as e:
            _LOGGER.warning("%s %s failed (status=%s)", method, url, e.status)
            raise
        return self._finish(data, response_schema)

    def close(self) -> None:
        """Close the client, and the transport if the client created it."""
        if self._closed:
            return
        self._closed = True
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class AsyncApiClient(_BaseClient):
    """
    asyncio API client.

    Accepts an async transport, or a synchronous one which is then run in a
    worker thread so the event loop is never blocked.

    Example:
        >>> async with AsyncApiClient(transport, registry=registry) as client:
        ...     op = await client.call("v1/projects/p/locations/l/workflows/w/executions",
        ...                            method="POST", body={}, response_schema="Execution")
    """

    def __init__(self, transport: Any = None, **kwargs: Any) -> None:
        super().__init__(transport, **kwargs)
        # Callable objects report their coroutine-ness on __call__, not on themselves
        self._is_async = inspect.iscoroutinefunction(self._request) or inspect.iscoroutinefunction(
            getattr(self._request, "__call__", None)
        )

    async def call(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Mapping[str, Any] | None = None,
        request_schema: SchemaRef | None = None,
        response_schema: SchemaRef | None = None,
        params: Mapping[str, Any] | None = None,
        params_schema: SchemaRef | None = None,
    ) -> Any:
        """Perform one API call. Same contract as ApiClient.call()."""
        url, payload, headers = self._prepare(method, path, body, request_schema, params, params_schema)
        try:
            if self._is_async:
                data = await self._request(url, method=method, body=payload, headers=headers)
            else:
                data = await asyncio.to_thread(
                    self._request, url, method=method, body=payload, headers=headers
                )
                if inspect.isawaitable(data):
                    data = await data
        except TransportError as e:
            _LOGGER.warning("%s %s failed (status=%s)", method, url, e.status)
            raise
        return self._finish(data, response_schema)

    async def close(self) -> None:
        """Close the client, and the transport if the client created it."""
        if self._closed:
            return
        self._closed = True
        if self._owns_transport:
            await asyncio.to_thread(self._transport.close)

    async def __aenter__(self) -> AsyncApiClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
