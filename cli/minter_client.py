"""Bridges CLI commands to the upload and mint pipeline."""

import asyncio
import sys
from pathlib import Path
from typing import Callable, Optional

from cli.config import Config
from cli.utils import format_file_size, format_progress, guess_media_type, marketplace_url
from common.exceptions import (
    AmbiguousSubmissionError,
    MinterError,
    MintConfigValidationError,
    UninitializedError,
)
from common.logging_config import get_logger
from ledger.client import LedgerClient
from ledger.gateway_client import GatewayLedgerClient
from pipeline.header_map import HeaderMapping
from pipeline.progress import PipelineProgress, ProgressTracker
from pipeline.schemas import build_mint_config
from pipeline.upload_pipeline import UploadPipeline, estimate_storage_cost

logger = get_logger(__name__)

LedgerFactory = Callable[[], LedgerClient]


class MinterClient:
    """Runs pipeline operations for the CLI and formats their results."""

    def __init__(
        self,
        config: Config,
        ledger_factory: Optional[LedgerFactory] = None,
        header_map: Optional[HeaderMapping] = None,
    ):
        """
        Initialize minter client.

        Args:
            config: Configuration instance
            ledger_factory: Creates a ledger client per run (defaults to the gateway client)
            header_map: Media type header mapping (defaults to the configured JSON file)
        """
        self.config = config
        self.ledger_factory = ledger_factory or self._gateway_factory
        self._header_map = header_map

    def _gateway_factory(self) -> LedgerClient:
        confirmation = self.config.get_confirmation_settings()
        return GatewayLedgerClient(
            base_url=self.config.get_gateway_url(),
            timeout=self.config.get_timeout(),
            api_key=self.config.get_gateway_api_key(),
            poll_interval=confirmation['poll_interval'],
            confirmation_timeout=confirmation['confirmation_timeout'],
        )

    def _get_header_map(self) -> HeaderMapping:
        if self._header_map is None:
            path = self.config.get_header_map_path()
            if path is None:
                raise UninitializedError("No header map configured (set 'header_map_path' in config)")
            try:
                self._header_map = HeaderMapping.from_json_file(path)
            except (OSError, ValueError) as e:
                raise UninitializedError(f"Cannot load header map {path}: {e}") from e
        return self._header_map

    def _resolve_media_type(self, file_path: str, media_type: Optional[str]) -> str:
        resolved = media_type or guess_media_type(file_path)
        if not resolved:
            raise UninitializedError(f"Cannot determine media type of {file_path}; pass it explicitly")
        return resolved

    def _print_progress(self, progress: PipelineProgress) -> None:
        sys.stdout.write('\r' + ' ' * 100 + '\r' + format_progress(progress)[:200])
        sys.stdout.flush()

    def _build_pipeline(self, ledger: Optional[LedgerClient]) -> UploadPipeline:
        settings = self.config.get_pipeline_settings()
        return UploadPipeline(
            ledger=ledger,
            onchfs_contract=self.config.get_onchfs_contract(),
            header_map=self._get_header_map(),
            chunk_size=settings['chunk_size'],
            confirmations=settings['confirmations'],
            submission_interval=settings['submission_interval'],
            tracker=ProgressTracker(self._print_progress),
        )

    def estimate(self, file_path: str) -> str:
        """
        Describe a file's chunking and estimated storage cost.

        Returns:
            Formatted estimate
        """
        path = Path(file_path)
        if not path.is_file():
            return f"Error: File not found: {file_path}"

        try:
            chunk_size = self.config.get_pipeline_settings()['chunk_size']
        except MinterError as e:
            return f"Error: {e}"

        size = path.stat().st_size
        chunk_count = -(-size // chunk_size)
        return (
            f"File: {path.name} ({format_file_size(size)})\n"
            f"Chunks: {chunk_count} x {format_file_size(chunk_size)}\n"
            f"Estimated cost to store: {estimate_storage_cost(size):.6f} tez"
        )

    def compute_cid(self, file_path: str, media_type: Optional[str] = None) -> str:
        try:
            media_type = self._resolve_media_type(file_path, media_type)
            pipeline = self._build_pipeline(ledger=None)
            cid = pipeline.compute_cid(file_path, media_type)
        except MinterError as e:
            return f"Error: {e}"
        return f"CID: {cid}\nURI: onchfs://{cid}"

    async def _store(self, file_path: str, media_type: str):
        ledger = self.ledger_factory()
        try:
            return await self._build_pipeline(ledger).store(file_path, media_type)
        finally:
            await ledger.close()

    def store(self, file_path: str, media_type: Optional[str] = None) -> str:
        """
        Upload a file's chunks and create its inode.

        Returns:
            Formatted result with the artifact URI
        """
        logger.info(f"Storing {file_path} on {self.config.get_network()}")
        try:
            media_type = self._resolve_media_type(file_path, media_type)
            stored = asyncio.run(self._store(file_path, media_type))
        except MinterError as e:
            sys.stdout.write('\n')
            return f"Error: {e}"

        sys.stdout.write('\n')
        inode_status = "created" if stored.inode and stored.inode.created else "already existed"
        return (
            f"Stored: {stored.source.path.name} ({format_file_size(stored.source.size)})\n"
            f"Chunks uploaded: {stored.uploaded_chunks}/{len(stored.chunk_outcomes)}\n"
            f"Inode {inode_status}\n"
            f"URI: {stored.artifact_uri}"
        )

    async def _mint(self, file_path: str, media_type: str, collection: str, mint_config):
        ledger = self.ledger_factory()
        try:
            return await self._build_pipeline(ledger).run(file_path, media_type, collection, mint_config)
        finally:
            await ledger.close()

    def mint(
        self,
        file_path: str,
        collection: str,
        options: dict,
        media_type: Optional[str] = None,
    ) -> str:
        """
        Store a file and mint a token referencing it.

        Args:
            file_path: File to upload
            collection: Token contract address
            options: Raw mint configuration fields
            media_type: Optional media type override

        Returns:
            Formatted result with the token link
        """
        logger.info(f"Minting {file_path} on {collection} ({self.config.get_network()})")
        try:
            mint_config = build_mint_config(**options)
            media_type = self._resolve_media_type(file_path, media_type)
            result = asyncio.run(self._mint(file_path, media_type, collection, mint_config))
        except MintConfigValidationError as e:
            return "Error: " + "\n  ".join(["Invalid mint configuration:"] + e.errors)
        except AmbiguousSubmissionError as e:
            sys.stdout.write('\n')
            hint = f" Check operation {e.op_hash} before retrying." if e.op_hash else " Check the collection before retrying."
            return f"Error: mint outcome unknown. {e}.{hint}"
        except MinterError as e:
            sys.stdout.write('\n')
            return f"Error: {e}"

        sys.stdout.write('\n')
        token = result.token
        return (
            f"Minted token {token.token_id} on {token.contract}\n"
            f"Artifact: {result.stored.artifact_uri}\n"
            f"Operation: {token.op_hash}\n"
            f"View: {marketplace_url(self.config.get_marketplace_url(), token.contract, token.token_id)}"
        )

    def network(self, name: Optional[str] = None) -> str:
        if name:
            self.config.set_network(name)
            logger.info(f"Switched network to {name}")
        return f"Network: {self.config.get_network()} (onchfs: {self.config.get_onchfs_contract()})"
