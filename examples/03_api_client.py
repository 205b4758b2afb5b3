#!/usr/bin/env python3
"""
03_api_client.py - Calling an API with ApiClient

This example demonstrates:
- Wrapping an API method the way generated bindings do
- Query options converted with a schema
- Handling TransportError and MalformedFieldError
- Swapping in a custom transport (here an in-memory one)

Prerequisites:
    - pygapis installed: pip install pygapis
    - No network access needed; the transport is simulated

Run with:
    python 03_api_client.py
"""

import json

from pygapis import (
    ApiClient,
    Field,
    GapisError,
    Schema,
    SchemaRegistry,
    TransportError,
)

REGISTRY = SchemaRegistry([
    Schema("Policy", {"etag": Field.bytes(), "version": Field.int64()}),
    Schema("GetIamPolicyOptions", {"optionsRequestedPolicyVersion": Field.int64()}),
])


class InMemoryTransport:
    """Answers like the Cloud Storage IAM endpoint would."""

    def __init__(self):
        self.policies = {"photos": {"etag": "CAE=", "version": "1", "bindings": []}}

    def request(self, url, *, method, body=None, headers=None):
        print(f"  -> {method} {url}")
        bucket = url.split("/b/")[1].split("/")[0]
        if bucket not in self.policies:
            raise TransportError(f"HTTP 404 NOT_FOUND: bucket {bucket} not found", status=404, url=url)
        if method == "PUT":
            self.policies[bucket] = json.loads(body)
        return self.policies[bucket]


def get_iam_policy(client, bucket, **options):
    return client.call(
        f"v1/b/{bucket}/iam",
        response_schema="Policy",
        params=options,
        params_schema="GetIamPolicyOptions",
    )


def set_iam_policy(client, bucket, policy):
    return client.call(
        f"v1/b/{bucket}/iam",
        method="PUT",
        body=policy,
        request_schema="Policy",
        response_schema="Policy",
    )


def main():
    with ApiClient(
        InMemoryTransport(),
        base_url="https://storage.googleapis.com/storage",
        registry=REGISTRY,
    ) as client:
        print("=== Get ===")
        policy = get_iam_policy(client, "photos", optionsRequestedPolicyVersion=3)
        print(f"etag={policy['etag']!r} version={policy['version']}")

        print("\n=== Set ===")
        policy["bindings"].append({"role": "roles/storage.objectViewer", "members": ["allUsers"]})
        policy["version"] = 3
        updated = set_iam_policy(client, "photos", policy)
        print(f"version={updated['version']} bindings={len(updated['bindings'])}")

        print("\n=== Errors ===")
        try:
            get_iam_policy(client, "missing")
        except TransportError as e:
            print(f"✓ Caught TransportError (status={e.status})")
            print(f"  {e}")
        except GapisError as e:
            print(f"✗ Unexpected error: {e}")


if __name__ == "__main__":
    main()
