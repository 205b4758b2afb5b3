# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Base64 encoding/decoding for byte fields.

Google REST APIs carry every ``format: byte`` field as base64 text inside
the JSON body. This module converts between native ``bytes`` and that text.

Encoding Conventions:
- Standard RFC 4648 alphabet: A-Z, a-z, 0-9, '+', '/'
- Every 3 input bytes become 4 output characters
- 1 trailing byte  -> 2 characters + "=="
- 2 trailing bytes -> 3 characters + "="
- Output length is always a multiple of 4

Decoding is strict: the URL-safe alphabet, missing padding, embedded
whitespace and non-canonical trailing bits are all rejected with
DecodeError instead of yielding different bytes.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Union

from .exceptions import DecodeError

BytesLike = Union[bytes, bytearray, memoryview]

BASE64_ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
PAD: str = "="

_DECODE_TABLE = MappingProxyType({ch: i for i, ch in enumerate(BASE64_ALPHABET)})


def encoded_length(size: int) -> int:
    """Length of the padded base64 text for ``size`` input bytes."""
    return (size + 2) // 3 * 4


def encode_base64(data: BytesLike) -> str:
    """
    Encode a byte sequence as padded standard base64.

    Args:
        data: Bytes to encode. bytearray and memoryview are accepted.

    Returns:
        Base64 text whose length is a multiple of 4.

    Raises:
        TypeError: If data is not a bytes-like object.
    """
    if isinstance(data, str) or not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"encode_base64 expects bytes, got {type(data).__name__}")
    data = bytes(data)

    size = len(data)
    full = size - size % 3
    abc = BASE64_ALPHABET
    out: list[str] = []

    for i in range(0, full, 3):
        chunk = (data[i] << 16) | (data[i + 1] << 8) | data[i + 2]
        out.append(abc[chunk >> 18])
        out.append(abc[(chunk >> 12) & 0x3F])
        out.append(abc[(chunk >> 6) & 0x3F])
        out.append(abc[chunk & 0x3F])

    remaining = size - full
    if remaining == 1:
        chunk = data[full] << 16
        out.append(abc[chunk >> 18])
        out.append(abc[(chunk >> 12) & 0x3F])
        out.append(PAD * 2)
    elif remaining == 2:
        chunk = (data[full] << 16) | (data[full + 1] << 8)
        out.append(abc[chunk >> 18])
        out.append(abc[(chunk >> 12) & 0x3F])
        out.append(abc[(chunk >> 6) & 0x3F])
        out.append(PAD)

    return "".join(out)


def decode_base64(text: str) -> bytes:
    """
    Decode padded standard base64 text.

    Args:
        text: Base64 text as produced by encode_base64().

    Returns:
        The original byte sequence.

    Raises:
        DecodeError: If the text is not well-formed padded base64.
    """
    if not isinstance(text, str):
        raise DecodeError(f"Expected base64 text, got {type(text).__name__}")

    size = len(text)
    if size == 0:
        return b""
    if size % 4:
        raise DecodeError(f"Invalid base64 length {size}: not a multiple of 4")

    pad = 0
    if text.endswith(PAD * 2):
        pad = 2
    elif text.endswith(PAD):
        pad = 1
    data_end = size - pad

    values: list[int] = []
    for pos in range(data_end):
        ch = text[pos]
        try:
            values.append(_DECODE_TABLE[ch])
        except KeyError:
            if ch == PAD:
                raise DecodeError("Unexpected padding inside base64 text", pos) from None
            raise DecodeError(f"Invalid base64 character {ch!r}", pos) from None

    out = bytearray()
    full = data_end - data_end % 4
    for i in range(0, full, 4):
        chunk = (values[i] << 18) | (values[i + 1] << 12) | (values[i + 2] << 6) | values[i + 3]
        out.append(chunk >> 16)
        out.append((chunk >> 8) & 0xFF)
        out.append(chunk & 0xFF)

    if pad == 1:
        if values[full + 2] & 0x03:
            raise DecodeError("Non-zero trailing bits before padding", data_end - 1)
        chunk = (values[full] << 18) | (values[full + 1] << 12) | (values[full + 2] << 6)
        out.append(chunk >> 16)
        out.append((chunk >> 8) & 0xFF)
    elif pad == 2:
        if values[full + 1] & 0x0F:
            raise DecodeError("Non-zero trailing bits before padding", data_end - 1)
        chunk = (values[full] << 18) | (values[full + 1] << 12)
        out.append(chunk >> 16)

    return bytes(out)


def is_base64(text: str) -> bool:
    """
    Check whether text is well-formed padded base64.

    Returns:
        True if decode_base64() would accept it, False otherwise.
    """
    try:
        decode_base64(text)
        return True
    except DecodeError:
        return False
