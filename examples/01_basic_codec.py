#!/usr/bin/env python3
"""
01_basic_codec.py - pygapis Field Codec Basics

This is the foundational example for understanding how pygapis converts
records between native Python values and their JSON wire form.

What this example demonstrates:
- Declaring schemas with Field.bytes(), Field.int64(), Field.timestamp()
- Nesting records and lists of records
- serialize() / deserialize() round trips
- Locating a bad value through MalformedFieldError.path

Key Concepts:
- Schema: Lists only the fields that need conversion
- Wire form: bytes as base64, int64 as decimal strings, instants as RFC 3339
- Pass-through: Undeclared fields are copied unchanged

Expected Output:
    === Serialize ===
    {"etag": "TWFu", "version": "9223372036854775807", ...}

    === Deserialize ===
    etag=b'Man' version=9223372036854775807

    === Errors ===
    ✓ Caught: Malformed field bindings[1].etag: ...

Run with:
    python 01_basic_codec.py
"""

import json
from datetime import datetime, timezone

from pygapis import Field, MalformedFieldError, Schema, deserialize, serialize

BINDING = Schema("Binding", {"etag": Field.bytes()})
POLICY = Schema(
    "Policy",
    {
        "etag": Field.bytes(),
        "version": Field.int64(),
        "updateTime": Field.timestamp(),
        "bindings": Field.record(BINDING, repeated=True),
    },
)


def main():
    policy = {
        "etag": b"Man",
        "version": 9223372036854775807,
        "updateTime": datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc),
        "bindings": [
            {"role": "roles/viewer", "members": ["user:ada@example.com"], "etag": b"\x00\x01"},
        ],
        "title": "storage admins",
    }

    print("=== Serialize ===")
    wire = serialize(policy, POLICY)
    print(json.dumps(wire))

    print("\n=== Deserialize ===")
    native = deserialize(json.loads(json.dumps(wire)), POLICY)
    print(f"etag={native['etag']!r} version={native['version']}")
    assert native == policy

    print("\n=== Errors ===")
    broken = {"bindings": [{"etag": "AAE="}, {"etag": "not-valid-base64!!"}]}
    try:
        deserialize(broken, POLICY)
    except MalformedFieldError as e:
        print(f"✓ Caught: {e}")
        print(f"  path={e.path} kind={e.kind}")


if __name__ == "__main__":
    main()
