"""End-to-end upload and mint pipeline."""

import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from common.constants import (
    CHUNK_SIZE_BYTES,
    CONFIRMATIONS,
    STORAGE_COST_PER_CHUNK_TEZ,
    SUBMISSION_INTERVAL_SECONDS,
)
from common.exceptions import ChainCallFailureError, FileReadError, MinterError, UninitializedError
from common.logging_config import get_logger
from common.types import Chunk, ChunkOutcome, ChunkStatus, InodeOutcome, MintedToken, SourceFile
from ledger.client import LedgerClient, LedgerError
from pipeline.chunk_store import ChunkStore
from pipeline.chunker import read_chunks
from pipeline.cid import artifact_uri, compose_cid
from pipeline.header_map import HeaderMapping
from pipeline.inode import InodeRegistrar
from pipeline.mint import MintOrchestrator
from pipeline.progress import Phase, PipelineProgress, ProgressTracker
from pipeline.schemas import MintConfig, build_mint_config

logger = get_logger(__name__)

PHASE_LABELS = {
    Phase.IDLE: "Preparation",
    Phase.UPLOADING_CHUNKS: "Chunk upload",
    Phase.CREATING_INODE: "File inode creation",
    Phase.MINTING: "Minting",
}


def estimate_storage_cost(size: int) -> float:
    """
    Estimate the storage fee in tez for a file of the given size.

    Args:
        size: File size in bytes

    Returns:
        Estimated cost, rounded to 6 decimals
    """
    return round(size * STORAGE_COST_PER_CHUNK_TEZ / CHUNK_SIZE_BYTES, 6)


@dataclass
class StoredFile:
    """Result of the storage half of the pipeline."""
    source: SourceFile
    cid: str
    artifact_uri: str
    chunk_outcomes: List[ChunkOutcome] = field(default_factory=list)
    inode: Optional[InodeOutcome] = None

    @property
    def uploaded_chunks(self) -> int:
        return sum(1 for outcome in self.chunk_outcomes if outcome.status == ChunkStatus.UPLOADED)


@dataclass
class PipelineResult:
    """Result of a full upload and mint run."""
    stored: StoredFile
    token: MintedToken
    progress: PipelineProgress


class UploadPipeline:
    """
    Runs chunk upload, inode creation and minting in sequence.

    Every step is existence-checked, so a failed run can be retried from
    scratch: stored chunks and inodes are skipped.
    """

    def __init__(
        self,
        ledger: Optional[LedgerClient],
        onchfs_contract: str,
        header_map: HeaderMapping,
        chunk_size: int = CHUNK_SIZE_BYTES,
        confirmations: int = CONFIRMATIONS,
        submission_interval: float = SUBMISSION_INTERVAL_SECONDS,
        tracker: Optional[ProgressTracker] = None,
    ):
        self.ledger = ledger
        self.onchfs_contract = onchfs_contract
        self.header_map = header_map
        self.chunk_size = chunk_size
        self.confirmations = confirmations
        self.submission_interval = submission_interval
        self.tracker = tracker or ProgressTracker()

    def _require_ledger(self) -> LedgerClient:
        if self.ledger is None:
            raise UninitializedError("Ledger client is not initialized")
        if not self.onchfs_contract:
            raise UninitializedError("Content-store contract address is not configured")
        return self.ledger

    def _describe(self, path: Union[str, Path], media_type: str) -> SourceFile:
        path = Path(path)
        try:
            size = path.stat().st_size
        except OSError as e:
            raise FileReadError(f"Cannot read {path}: {e}") from e
        return SourceFile(path=path, size=size, media_type=media_type)

    def compute_cid(self, path: Union[str, Path], media_type: str) -> str:
        """Compute a file's CID without touching the ledger."""
        header = self.header_map.lookup(media_type)
        chunks = read_chunks(path, self.chunk_size)
        return compose_cid((chunk.data for chunk in chunks), header)

    async def _store(
        self,
        source: SourceFile,
        header: bytes,
        chunks: List[Chunk],
        progress: PipelineProgress,
        run_id: str,
    ) -> tuple[StoredFile, PipelineProgress]:
        ledger = self._require_ledger()
        publish = self.tracker.publish

        progress = publish(progress.start(len(chunks)))
        logger.info(
            f"Storing {source.path.name} ({source.size} bytes, {len(chunks)} chunk(s)) [run_id={run_id}]"
        )

        chunk_store = ChunkStore(ledger, self.onchfs_contract, self.confirmations, self.submission_interval)
        outcomes, progress = await chunk_store.store_chunks(chunks, progress, self.tracker)

        cid = compose_cid((chunk.data for chunk in chunks), header)
        progress = publish(progress.creating_inode("Checking if file already exists..."))

        registrar = InodeRegistrar(ledger, self.onchfs_contract, self.confirmations)
        inode = await registrar.register(cid, [chunk.digest for chunk in chunks], header)
        if inode.created:
            message = f"File inode created. Operation hash: {inode.op_hash}"
        else:
            message = "File already exists. Skipping inode creation."
        progress = publish(progress.inode_done(message))

        stored = StoredFile(
            source=source,
            cid=cid,
            artifact_uri=artifact_uri(cid),
            chunk_outcomes=outcomes,
            inode=inode,
        )
        return stored, progress

    def _fail(self, error: Exception, run_id: str) -> None:
        progress = self.tracker.current
        if progress.is_terminal:
            return
        label = PHASE_LABELS.get(progress.phase, progress.phase.value)
        logger.error(
            f"{label} failed: {error} [run_id={run_id}]",
            exc_info=not isinstance(error, MinterError),
        )
        self.tracker.publish(progress.fail(f"{label} failed: {error}"))

    async def store(self, path: Union[str, Path], media_type: str) -> StoredFile:
        """
        Upload a file's chunks and register its inode.

        Args:
            path: File to upload
            media_type: Declared media type, used to select the encoded header

        Returns:
            StoredFile with the CID and per-chunk outcomes
        """
        run_id = uuid.uuid4().hex[:12]
        self.tracker.reset()
        try:
            self._require_ledger()
            header = self.header_map.lookup(media_type)
            source = self._describe(path, media_type)
            chunks = read_chunks(source.path, self.chunk_size)

            stored, progress = await self._store(source, header, chunks, self.tracker.current, run_id)
            self.tracker.publish(progress.done(f"File stored at {stored.artifact_uri}"))
            return stored
        except Exception as e:
            self._fail(e, run_id)
            raise

    async def run(
        self,
        path: Union[str, Path],
        media_type: str,
        collection: str,
        mint_config: Union[MintConfig, dict],
    ) -> PipelineResult:
        """
        Upload a file and mint a token referencing it.

        Configuration, header and collaborators are validated before any
        ledger call is made.

        Args:
            path: File to upload
            media_type: Declared media type
            collection: Token contract address
            mint_config: MintConfig or raw fields to validate

        Returns:
            PipelineResult with the stored file, minted token and final progress
        """
        run_id = uuid.uuid4().hex[:12]
        self.tracker.reset()
        try:
            config = mint_config if isinstance(mint_config, MintConfig) else build_mint_config(**mint_config)
            ledger = self._require_ledger()
            if not collection:
                raise UninitializedError("No target collection selected")
            header = self.header_map.lookup(media_type)
            source = self._describe(path, media_type)
            chunks = read_chunks(source.path, self.chunk_size)

            try:
                creator = await ledger.get_active_address()
            except LedgerError as e:
                raise ChainCallFailureError(f"Cannot read active account: {e}") from e
            if not creator:
                raise UninitializedError("No active account on the ledger client")

            stored, progress = await self._store(source, header, chunks, self.tracker.current, run_id)

            progress = self.tracker.publish(progress.minting("Minting NFT..."))
            orchestrator = MintOrchestrator(ledger, self.confirmations)
            token = await orchestrator.mint(collection, config, stored.artifact_uri, creator, media_type)

            progress = self.tracker.publish(
                progress.done(f"NFT minted successfully! Operation hash: {token.op_hash}")
            )
            logger.info(
                f"Minted token {token.contract}/{token.token_id} for {stored.artifact_uri} [run_id={run_id}]"
            )
            return PipelineResult(stored=stored, token=token, progress=progress)
        except Exception as e:
            self._fail(e, run_id)
            raise
