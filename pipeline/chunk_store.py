"""Chunk existence checks and uploads against the content-store contract."""

import asyncio
import time
from typing import List, Optional, Sequence, Tuple

from common.constants import CONFIRMATIONS, SUBMISSION_INTERVAL_SECONDS
from common.exceptions import ChainCallFailureError
from common.logging_config import get_logger
from common.types import Chunk, ChunkOutcome, ChunkStatus
from ledger.client import LedgerClient, LedgerError
from ledger.models import ContractCall, TransactionBatch
from pipeline.existence import Existence, check_existence
from pipeline.progress import PipelineProgress, ProgressTracker

logger = get_logger(__name__)


class ChunkStore:
    """
    Stores chunks on the content-store contract, skipping ones already present.

    Writes are strictly sequential: each is confirmed before the next is
    submitted.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        contract: str,
        confirmations: int = CONFIRMATIONS,
        submission_interval: float = SUBMISSION_INTERVAL_SECONDS,
    ):
        """
        Initialize chunk store client.

        Args:
            ledger: Ledger client
            contract: Content-store contract address
            confirmations: Confirmations to await per write
            submission_interval: Minimum seconds between write submissions (0 disables)
        """
        self.ledger = ledger
        self.contract = contract
        self.confirmations = confirmations
        self.submission_interval = submission_interval
        self._last_submission: Optional[float] = None

    async def chunk_exists(self, chunk: Chunk) -> bool:
        existence = await check_existence(
            self.ledger,
            self.contract,
            'read_chunk',
            bytes.fromhex(chunk.digest),
            subject=f"chunk {chunk.index} ({chunk.digest[:12]}...)",
        )
        return existence == Existence.EXISTS

    async def _pace(self) -> None:
        if self._last_submission is None or self.submission_interval <= 0:
            return
        remaining = self.submission_interval - (time.monotonic() - self._last_submission)
        if remaining > 0:
            await asyncio.sleep(remaining)

    async def write_chunk(self, chunk: Chunk) -> str:
        """
        Submit a chunk write and wait for its confirmation.

        Returns:
            Operation hash

        Raises:
            ChainCallFailureError: If the write was rejected or not confirmed
        """
        await self._pace()

        batch = TransactionBatch([ContractCall(self.contract, 'write_chunk', chunk.data)])
        op_hash = None
        try:
            op_hash = await self.ledger.submit_batch(batch)
            self._last_submission = time.monotonic()
            await self.ledger.wait_for_confirmation(op_hash, self.confirmations)
        except LedgerError as e:
            logger.error(f"Chunk {chunk.index} write failed [op_hash={op_hash}]: {e}")
            raise ChainCallFailureError(f"Writing chunk {chunk.index} failed: {e}", op_hash=op_hash) from e

        return op_hash

    async def store_chunk(self, chunk: Chunk) -> ChunkOutcome:
        """
        Upload a chunk unless the contract already holds it.
        """
        if await self.chunk_exists(chunk):
            logger.info(f"Chunk {chunk.index} already stored ({chunk.digest[:12]}...)")
            return ChunkOutcome(chunk.index, chunk.digest, ChunkStatus.ALREADY_STORED)

        op_hash = await self.write_chunk(chunk)
        logger.info(f"Chunk {chunk.index} uploaded ({chunk.size} bytes) [op_hash={op_hash}]")
        return ChunkOutcome(chunk.index, chunk.digest, ChunkStatus.UPLOADED, op_hash)

    async def store_chunks(
        self,
        chunks: Sequence[Chunk],
        progress: PipelineProgress,
        tracker: Optional[ProgressTracker] = None,
    ) -> Tuple[List[ChunkOutcome], PipelineProgress]:
        """
        Store chunks in order, advancing progress one step per chunk.

        Args:
            chunks: Chunks in file order
            progress: Snapshot in the uploading-chunks phase
            tracker: Optional tracker to publish snapshots to

        Returns:
            Tuple of (outcomes in chunk order, latest progress snapshot)
        """
        publish = tracker.publish if tracker else (lambda p: p)
        outcomes = []
        total = len(chunks)

        for chunk in chunks:
            progress = publish(progress.uploading_chunk(chunk.index))
            outcome = await self.store_chunk(chunk)
            outcomes.append(outcome)

            if outcome.status == ChunkStatus.UPLOADED:
                message = f"Chunk {chunk.index + 1}/{total} uploaded. Operation hash: {outcome.op_hash}"
            else:
                message = f"Chunk {chunk.index + 1}/{total} already exists."
            progress = publish(progress.chunk_done(chunk.index, message))

        return outcomes, progress
