# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
TLS configuration for HTTP transports.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class TLSConfig:
    """
    TLS/SSL settings for RequestsTransport.

    Security Levels:
    - Default: Server certificate validated against the system CA bundle
    - Custom CA: Server certificate validated against a private CA
    - Mutual TLS: Client certificate presented to the server
    - Insecure: Skip certificate verification (testing/debugging only)

    Examples:
        # Private CA plus client certificate
        >>> tls = TLSConfig(
        ...     ca_file="/path/to/ca.crt",
        ...     cert_file="/path/to/client.crt",
        ...     key_file="/path/to/client.key",
        ... )

        # Local emulator with a self-signed certificate
        >>> tls = TLSConfig(insecure_skip_verify=True)
    """

    cert_file: Optional[str] = None
    """Path to client certificate file (for mutual TLS)."""

    key_file: Optional[str] = None
    """Path to client private key file (for mutual TLS)."""

    ca_file: Optional[str] = None
    """Path to CA bundle for server verification."""

    insecure_skip_verify: bool = False
    """Skip certificate verification (INSECURE - use only for testing)."""

    def requests_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for requests.Session.request()."""
        kwargs: Dict[str, Any] = {}
        if self.insecure_skip_verify:
            kwargs["verify"] = False
        elif self.ca_file:
            kwargs["verify"] = self.ca_file
        if self.cert_file and self.key_file:
            kwargs["cert"] = (self.cert_file, self.key_file)
        elif self.cert_file:
            kwargs["cert"] = self.cert_file
        return kwargs
