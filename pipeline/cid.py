"""File content identifier derivation."""

import re
from typing import Iterable

from common.constants import ARTIFACT_URI_SCHEME, CID_PREFIX
from common.hashing import IncrementalDigest, digest, digest_hex

CID_PATTERN = re.compile(r'^[0-9a-f]{64}$')


def compose_cid(chunk_payloads: Iterable[bytes], header: bytes) -> str:
    """
    Derive the file CID from raw chunk payloads and the encoded header.

    CID = keccak256(0x01 || keccak256(chunk_0 || ... || chunk_n) || keccak256(header))

    Payloads must be in file order: the contract rebuilds the file by
    concatenating chunk pointers in the order given to create_file.

    Args:
        chunk_payloads: Raw chunk bytes in file order
        header: Encoded metadata header bytes

    Returns:
        64-character lowercase hex CID
    """
    content_hasher = IncrementalDigest()
    for payload in chunk_payloads:
        content_hasher.update(payload)

    return digest_hex(CID_PREFIX + content_hasher.finalize() + digest(header))


def is_valid_cid(cid: str) -> bool:
    return bool(CID_PATTERN.match(cid))


def artifact_uri(cid: str) -> str:
    """Return the onchfs:// URI for a CID."""
    if not is_valid_cid(cid):
        raise ValueError(f"Invalid file CID: {cid!r}")
    return f"{ARTIFACT_URI_SCHEME}{cid}"
