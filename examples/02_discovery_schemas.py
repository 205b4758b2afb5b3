#!/usr/bin/env python3
"""
02_discovery_schemas.py - Schemas from a Discovery Document

This example demonstrates:
- Building a SchemaRegistry with schemas_from_discovery()
- Inline object properties registered as "Parent.property"
- Recursive types resolved by name
- Using WireCodec with the generated registry

Prerequisites:
    - Optionally, a Discovery document saved locally, e.g.
      curl -o storage.json https://storage.googleapis.com/$discovery/rest?version=v1

Run with:
    python 02_discovery_schemas.py [storage.json]
"""

import logging
import sys

from pygapis import WireCodec, load_discovery, schemas_from_discovery

DOCUMENT = {
    "id": "example:v1",
    "schemas": {
        "Object": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "generation": {"type": "string", "format": "int64"},
                "timeCreated": {"type": "string", "format": "date-time"},
                "md5Hash": {"type": "string", "format": "byte"},
                "owner": {
                    "type": "object",
                    "properties": {"entityId": {"type": "string", "format": "int64"}},
                },
            },
        },
        "Folder": {
            "type": "object",
            "properties": {
                "id": {"type": "string", "format": "uint64"},
                "children": {"type": "array", "items": {"$ref": "Folder"}},
                "objects": {"type": "array", "items": {"$ref": "Object"}},
            },
        },
    },
}


def main():
    logging.basicConfig(level=logging.DEBUG)

    if len(sys.argv) > 1:
        registry = load_discovery(sys.argv[1])
    else:
        registry = schemas_from_discovery(DOCUMENT)

    print("=== Registered Schemas ===")
    for name in registry.names():
        fields = registry.resolve(name).fields
        described = ", ".join(f"{prop}: {decl.describe()}" for prop, decl in fields.items())
        print(f"{name}: {described or '(nothing to convert)'}")

    if "Folder" not in registry:
        return

    print("\n=== Decode a Folder ===")
    codec = WireCodec(registry)
    wire = {
        "id": "18446744073709551615",
        "children": [{"id": "2", "children": []}],
        "objects": [
            {
                "name": "a.txt",
                "generation": "1700000000000001",
                "timeCreated": "2024-01-02T03:04:05.678Z",
                "md5Hash": "XrY7u+Ae7tCTyyK7j1rNww==",
                "owner": {"entityId": "42"},
            }
        ],
    }
    folder = codec.deserialize(wire, "Folder")
    print(folder)
    assert codec.serialize(folder, "Folder") == wire
    print("\n✓ Round trip through the discovery registry succeeded")


if __name__ == "__main__":
    main()
