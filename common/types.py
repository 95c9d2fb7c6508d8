"""Shared data type definitions (SourceFile, Chunk, ChunkOutcome, MintedToken)."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class SourceFile:
    """
    Immutable description of the file being uploaded.
    """
    path: Path
    size: int
    media_type: str


@dataclass(frozen=True)
class Chunk:
    """
    A single ordered slice of a file with its content digest.
    """
    index: int
    data: bytes
    digest: str

    @property
    def size(self) -> int:
        return len(self.data)


class ChunkStatus(str, Enum):
    UPLOADED = "uploaded"
    ALREADY_STORED = "already_stored"


@dataclass(frozen=True)
class ChunkOutcome:
    """Result of storing one chunk."""
    index: int
    digest: str
    status: ChunkStatus
    op_hash: Optional[str] = None


@dataclass(frozen=True)
class InodeOutcome:
    """Result of registering a file inode."""
    cid: str
    created: bool
    op_hash: Optional[str] = None


@dataclass(frozen=True)
class MintedToken:
    """
    Identity of a freshly minted token.
    """
    contract: str
    token_id: int
    op_hash: str
