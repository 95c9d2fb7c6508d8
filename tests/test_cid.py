"""Tests for CID composition."""

import pytest

from common.hashing import digest
from pipeline.cid import artifact_uri, compose_cid, is_valid_cid
from pipeline.chunker import split_bytes

HEADER = bytes.fromhex("82a0ff0f")


def _payloads(data, size=32_000):
    return [chunk.data for chunk in split_bytes(data, size)]


def test_matches_formula():
    chunks = [b"a" * 32_000, b"b" * 32_000, b"c" * 6_000]
    expected = digest(b"\x01" + digest(b"".join(chunks)) + digest(HEADER)).hex()

    assert compose_cid(chunks, HEADER) == expected


def test_is_deterministic():
    chunks = _payloads(bytes(range(256)) * 300)
    assert compose_cid(chunks, HEADER) == compose_cid(list(chunks), HEADER)


def test_chunk_order_matters():
    chunks = [b"first", b"second", b"third"]
    assert compose_cid(chunks, HEADER) != compose_cid(list(reversed(chunks)), HEADER)


def test_bit_flip_in_chunk_changes_cid():
    data = bytearray(b"\x00" * 70_000)
    original = compose_cid(_payloads(bytes(data)), HEADER)
    data[45_123] ^= 0x01

    assert compose_cid(_payloads(bytes(data)), HEADER) != original


def test_bit_flip_in_header_changes_cid():
    chunks = [b"payload"]
    flipped = bytes([HEADER[0] ^ 0x80]) + HEADER[1:]

    assert compose_cid(chunks, HEADER) != compose_cid(chunks, flipped)


def test_hashes_raw_bytes_not_chunk_digests():
    chunks = [b"one", b"two"]
    wrong = digest(b"\x01" + digest(digest(b"one") + digest(b"two")) + digest(HEADER)).hex()

    assert compose_cid(chunks, HEADER) != wrong


def test_cid_is_64_lowercase_hex():
    assert is_valid_cid(compose_cid([b"x"], HEADER))


def test_artifact_uri():
    cid = compose_cid([b"x"], HEADER)
    assert artifact_uri(cid) == f"onchfs://{cid}"


def test_artifact_uri_rejects_malformed_cid():
    with pytest.raises(ValueError):
        artifact_uri("ABC")
