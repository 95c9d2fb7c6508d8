"""File inode registration on the content-store contract."""

from typing import Sequence

from common.constants import CONFIRMATIONS
from common.exceptions import ChainCallFailureError
from common.logging_config import get_logger
from common.types import InodeOutcome
from ledger.client import LedgerClient, LedgerError
from ledger.models import ContractCall, TransactionBatch
from pipeline.existence import Existence, check_existence

logger = get_logger(__name__)


class InodeRegistrar:
    """Creates file inodes that bind a CID to its ordered chunk pointers."""

    def __init__(self, ledger: LedgerClient, contract: str, confirmations: int = CONFIRMATIONS):
        self.ledger = ledger
        self.contract = contract
        self.confirmations = confirmations

    async def file_exists(self, cid: str) -> bool:
        existence = await check_existence(
            self.ledger,
            self.contract,
            'read_file',
            bytes.fromhex(cid),
            subject=f"file {cid[:12]}...",
        )
        return existence == Existence.EXISTS

    def build_create_call(self, chunk_digests: Sequence[str], header: bytes) -> ContractCall:
        return ContractCall(
            self.contract,
            'create_file',
            {
                'chunk_pointers': [bytes.fromhex(d) for d in chunk_digests],
                'metadata': header,
            },
        )

    async def register(self, cid: str, chunk_digests: Sequence[str], header: bytes) -> InodeOutcome:
        """
        Create the inode for a CID unless it is already registered.

        Args:
            cid: File CID computed from the same chunks and header
            chunk_digests: Hex digests of chunks already stored, in file order
            header: Encoded metadata header bytes

        Returns:
            InodeOutcome describing whether a write happened

        Raises:
            AmbiguousExistenceCheckError: If existence could not be determined
            ChainCallFailureError: If creation was rejected or not confirmed
        """
        if await self.file_exists(cid):
            logger.info(f"File {cid} already registered, skipping inode creation")
            return InodeOutcome(cid=cid, created=False)

        batch = TransactionBatch([self.build_create_call(chunk_digests, header)])
        op_hash = None
        try:
            op_hash = await self.ledger.submit_batch(batch)
            await self.ledger.wait_for_confirmation(op_hash, self.confirmations)
        except LedgerError as e:
            logger.error(f"Inode creation for {cid} failed [op_hash={op_hash}]: {e}")
            raise ChainCallFailureError(f"Creating file inode failed: {e}", op_hash=op_hash) from e

        logger.info(f"File inode created for {cid} ({len(chunk_digests)} chunk(s)) [op_hash={op_hash}]")
        return InodeOutcome(cid=cid, created=True, op_hash=op_hash)
