"""Keccak-256 content hashing shared by chunks, files and CIDs."""

from Crypto.Hash import keccak


def digest(data: bytes) -> bytes:
    """
    Compute the Keccak-256 digest of data.

    This is the original Keccak padding used by the onchfs contract, which
    differs from hashlib.sha3_256. Using the wrong one yields CIDs the
    contract never finds.

    Args:
        data: Bytes to hash

    Returns:
        32-byte digest
    """
    return keccak.new(data=bytes(data), digest_bits=256).digest()


def digest_hex(data: bytes) -> str:
    """
    Compute the Keccak-256 digest of data as lowercase hex.

    Args:
        data: Bytes to hash

    Returns:
        64-character hexadecimal string
    """
    return digest(data).hex()


class IncrementalDigest:
    """
    Calculate a Keccak-256 digest incrementally for streamed data.

    Usage:
        hasher = IncrementalDigest()
        hasher.update(chunk1)
        hasher.update(chunk2)
        file_hash = hasher.finalize()
    """

    def __init__(self):
        self._hasher = keccak.new(digest_bits=256)
        self._finalized = False

    def update(self, data: bytes) -> None:
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(bytes(data))

    def finalize(self) -> bytes:
        self._finalized = True
        return self._hasher.digest()
