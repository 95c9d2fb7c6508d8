"""Split files into ordered fixed-size chunks."""

import io
from pathlib import Path
from typing import BinaryIO, Iterator, List, Union

from common.constants import CHUNK_SIZE_BYTES
from common.exceptions import FileReadError
from common.hashing import digest_hex
from common.logging_config import get_logger
from common.types import Chunk

logger = get_logger(__name__)


def iter_chunks(stream: BinaryIO, chunk_size: int = CHUNK_SIZE_BYTES) -> Iterator[Chunk]:
    """
    Yield chunks read sequentially from a binary stream.

    Args:
        stream: Readable binary stream positioned at the start of the file
        chunk_size: Maximum chunk payload size in bytes

    Yields:
        Chunk objects in increasing offset order
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    index = 0
    while True:
        data = stream.read(chunk_size)
        if not data:
            break
        # Short reads only happen at EOF for regular files; top up otherwise.
        while len(data) < chunk_size:
            more = stream.read(chunk_size - len(data))
            if not more:
                break
            data += more

        yield Chunk(index=index, data=bytes(data), digest=digest_hex(data))
        index += 1


def split_bytes(data: bytes, chunk_size: int = CHUNK_SIZE_BYTES) -> List[Chunk]:
    """Split an in-memory payload into chunks."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    return list(iter_chunks(io.BytesIO(data), chunk_size))


def read_chunks(path: Union[str, Path], chunk_size: int = CHUNK_SIZE_BYTES) -> List[Chunk]:
    """
    Read a file from disk into ordered chunks.

    Args:
        path: File path
        chunk_size: Maximum chunk payload size in bytes

    Returns:
        List of chunks covering the file exactly once

    Raises:
        FileReadError: If the file cannot be fully read
    """
    path = Path(path)
    try:
        expected_size = path.stat().st_size
        with open(path, 'rb') as f:
            chunks = list(iter_chunks(f, chunk_size))
    except OSError as e:
        raise FileReadError(f"Cannot read {path}: {e}") from e

    read_size = sum(chunk.size for chunk in chunks)
    if read_size != expected_size:
        raise FileReadError(f"Short read on {path}: got {read_size} of {expected_size} bytes")

    logger.debug(f"Split {path.name} into {len(chunks)} chunk(s) of up to {chunk_size} bytes")
    return chunks
