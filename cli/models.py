"""Command request data types for CLI."""

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True)
class EstimateCommand:
    """Estimate storage cost for a file."""

    file_path: str
    command: Literal["estimate"] = "estimate"


@dataclass(frozen=True)
class CidCommand:
    """Compute a file CID offline."""

    file_path: str
    media_type: str | None = None
    command: Literal["cid"] = "cid"


@dataclass(frozen=True)
class StoreCommand:
    """Store a file's chunks and inode."""

    file_path: str
    media_type: str | None = None
    command: Literal["store"] = "store"


@dataclass(frozen=True)
class MintCommand:
    """Store a file and mint a token referencing it."""

    file_path: str
    collection: str
    options: dict = field(default_factory=dict)
    media_type: str | None = None
    command: Literal["mint"] = "mint"


@dataclass(frozen=True)
class NetworkCommand:
    """Show or switch the active network."""

    network: str | None = None
    command: Literal["network"] = "network"


CommandRequest = (
    EstimateCommand
    | CidCommand
    | StoreCommand
    | MintCommand
    | NetworkCommand
)
