"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.models import (
    CidCommand,
    EstimateCommand,
    MintCommand,
    NetworkCommand,
    StoreCommand,
)
from cli.config import Config
from cli.minter_client import MinterClient

logger = get_logger(__name__)


_client: Optional[MinterClient] = None


def get_client() -> MinterClient:
    """
    Get or create global MinterClient instance.

    Returns:
        MinterClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new MinterClient instance")
        config = Config(Path.home() / '.onchfs-minter' / 'config.json')
        _client = MinterClient(config)
    return _client


def handle_estimate(cmd: EstimateCommand, client: Optional[MinterClient] = None) -> str:
    """
    Handle 'estimate' command.

    Args:
        cmd: EstimateCommand with file_path
        client: Optional MinterClient for dependency injection (testing)

    Returns:
        Formatted cost estimate
    """
    if client is None:
        client = get_client()
    return client.estimate(cmd.file_path)


def handle_cid(cmd: CidCommand, client: Optional[MinterClient] = None) -> str:
    """
    Handle 'cid' command.

    Args:
        cmd: CidCommand with file_path and optional media_type
        client: Optional MinterClient for dependency injection (testing)

    Returns:
        CID and artifact URI, or error message
    """
    if client is None:
        client = get_client()
    return client.compute_cid(cmd.file_path, cmd.media_type)


def handle_store(cmd: StoreCommand, client: Optional[MinterClient] = None) -> str:
    """
    Handle 'store' command.

    Args:
        cmd: StoreCommand with file_path and optional media_type
        client: Optional MinterClient for dependency injection (testing)

    Returns:
        Storage result or error message
    """
    logger.info(f"Executing store command: file={cmd.file_path}")
    if client is None:
        client = get_client()
    result = client.store(cmd.file_path, cmd.media_type)
    logger.debug("Store command completed")
    return result


def handle_mint(cmd: MintCommand, client: Optional[MinterClient] = None) -> str:
    """
    Handle 'mint' command.

    Args:
        cmd: MintCommand with file_path, collection and options
        client: Optional MinterClient for dependency injection (testing)

    Returns:
        Minted token details or error message
    """
    logger.info(f"Executing mint command: file={cmd.file_path} collection={cmd.collection}")
    if client is None:
        client = get_client()
    result = client.mint(cmd.file_path, cmd.collection, dict(cmd.options), cmd.media_type)
    logger.debug("Mint command completed")
    return result


def handle_network(cmd: NetworkCommand, client: Optional[MinterClient] = None) -> str:
    if client is None:
        client = get_client()
    return client.network(cmd.network)
