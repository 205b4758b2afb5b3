# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Tests for the requests-based transport."""

import pytest
import requests

from pygapis.exceptions import TransportError
from pygapis.serde import JsonBodyDeserializer, JsonBodySerializer
from pygapis.tls import TLSConfig
from pygapis.transport import RequestsTransport, error_message

from tests.fake.fake_transport import FakeResponse, FakeSession

URL = "https://storage.googleapis.com/storage/v1/b/photos"


class TestRequestsTransport:
    """Tests for RequestsTransport."""

    def test_parses_json(self) -> None:
        """Test a successful response is parsed."""
        session = FakeSession(FakeResponse(content=b'{"name": "photos", "metageneration": "3"}'))
        transport = RequestsTransport(session)
        assert transport.request(URL, method="GET") == {"name": "photos", "metageneration": "3"}

        method, url, kwargs = session.calls[0]
        assert (method, url) == ("GET", URL)
        assert kwargs["data"] is None
        assert "Content-Type" not in kwargs["headers"]
        assert kwargs["timeout"] == 30.0

    def test_sends_body(self) -> None:
        """Test the body is sent as UTF-8 JSON with merged headers."""
        session = FakeSession()
        transport = RequestsTransport(session, timeout=2.5, headers={"User-Agent": "pygapis"})
        transport.request(URL, method="POST", body='{"name":"fotós"}', headers={"X-Goog-User-Project": "p"})

        _, _, kwargs = session.calls[0]
        assert kwargs["data"] == '{"name":"fotós"}'.encode("utf-8")
        assert kwargs["headers"] == {
            "User-Agent": "pygapis",
            "X-Goog-User-Project": "p",
            "Content-Type": "application/json",
        }
        assert kwargs["timeout"] == 2.5

    def test_empty_response(self) -> None:
        """Test an empty body decodes to an empty record."""
        transport = RequestsTransport(FakeSession(FakeResponse(204, b"", "No Content")))
        assert transport.request(URL, method="DELETE") == {}

    def test_google_error(self) -> None:
        """Test the Google error envelope is used for the message."""
        content = b'{"error": {"code": 404, "message": "No such bucket", "status": "NOT_FOUND"}}'
        transport = RequestsTransport(FakeSession(FakeResponse(404, content, "Not Found")))
        with pytest.raises(TransportError) as exc_info:
            transport.request(URL, method="GET")
        error = exc_info.value
        assert error.status == 404
        assert error.url == URL
        assert error.body == content.decode("utf-8")
        assert str(error).startswith("HTTP 404 NOT_FOUND: No such bucket")
        assert "base_url" in str(error)

    def test_plain_error(self) -> None:
        """Test non-JSON error bodies fall back to the reason phrase."""
        transport = RequestsTransport(FakeSession(FakeResponse(500, b"<html>oops</html>", "Internal Server Error")))
        with pytest.raises(TransportError, match="HTTP 500: Internal Server Error") as exc_info:
            transport.request(URL, method="GET")
        assert exc_info.value.status == 500

    def test_network_error(self) -> None:
        """Test requests exceptions become TransportError."""
        cause = requests.ConnectionError("connection refused")
        transport = RequestsTransport(FakeSession(error=cause))
        with pytest.raises(TransportError) as exc_info:
            transport.request(URL, method="GET")
        assert exc_info.value.status is None
        assert exc_info.value.url == URL
        assert exc_info.value.__cause__ is cause

    def test_invalid_json(self) -> None:
        """Test a 200 response that is not JSON."""
        transport = RequestsTransport(FakeSession(FakeResponse(content=b"not json")))
        with pytest.raises(TransportError, match="Invalid JSON") as exc_info:
            transport.request(URL, method="GET")
        assert exc_info.value.status == 200

    def test_tls_settings(self) -> None:
        """Test TLS settings reach the session."""
        session = FakeSession()
        tls = TLSConfig(ca_file="ca.pem", cert_file="client.pem", key_file="client.key")
        RequestsTransport(session, tls=tls).request(URL, method="GET")
        _, _, kwargs = session.calls[0]
        assert kwargs["verify"] == "ca.pem"
        assert kwargs["cert"] == ("client.pem", "client.key")

    def test_borrowed_session_left_open(self) -> None:
        """Test only sessions the transport created are closed."""
        session = FakeSession()
        with RequestsTransport(session):
            pass
        assert not session.closed


class TestErrorMessage:
    """Tests for error_message."""

    def test_envelope_without_status(self) -> None:
        """Test an error envelope with only a message."""
        assert error_message(400, "Bad Request", '{"error": {"message": "bad field"}}') == "HTTP 400: bad field"

    def test_no_body(self) -> None:
        """Test empty bodies and missing reason phrases."""
        assert error_message(503, "Service Unavailable", "") == "HTTP 503: Service Unavailable"
        assert error_message(503, "", "") == "HTTP 503"

    def test_unexpected_json(self) -> None:
        """Test JSON that is not an error envelope."""
        assert error_message(409, "Conflict", '["conflict"]') == "HTTP 409: Conflict"
        assert error_message(409, "Conflict", '{"error": "conflict"}') == "HTTP 409: Conflict"


class TestTLSConfig:
    """Tests for TLSConfig."""

    def test_default(self) -> None:
        """Test default settings add nothing."""
        assert TLSConfig().requests_kwargs() == {}

    def test_insecure(self) -> None:
        """Test verification can be disabled."""
        assert TLSConfig(insecure_skip_verify=True, ca_file="ca.pem").requests_kwargs() == {"verify": False}

    def test_cert_only(self) -> None:
        """Test a combined certificate and key file."""
        assert TLSConfig(cert_file="both.pem").requests_kwargs() == {"cert": "both.pem"}


class TestSerde:
    """Tests for the JSON body serdes."""

    def test_compact_json(self) -> None:
        """Test bodies are encoded without extra whitespace."""
        serializer = JsonBodySerializer()
        assert serializer.content_type == "application/json"
        assert serializer.serialize({"a": [1, "2"]}) == '{"a":[1,"2"]}'
        assert serializer.serialize(None) is None

    def test_deserialize(self) -> None:
        """Test bytes and text bodies."""
        deserializer = JsonBodyDeserializer()
        assert deserializer.deserialize(b'{"a": 1}') == {"a": 1}
        assert deserializer.deserialize('{"a": 1}') == {"a": 1}
        assert deserializer.deserialize(None) == {}
