"""Token minting as a single atomic batch on the token contract."""

from common.constants import CONFIRMATIONS
from common.exceptions import (
    AmbiguousSubmissionError,
    ChainCallFailureError,
    UninitializedError,
)
from common.logging_config import get_logger
from common.types import MintedToken
from ledger.client import (
    LedgerClient,
    LedgerError,
    LedgerTransportError,
    OperationFailedError,
    OperationRejectedError,
)
from ledger.models import ContractCall, TransactionBatch
from pipeline.schemas import MintConfig
from pipeline.token_metadata import build_create_token_params

logger = get_logger(__name__)


class MintOrchestrator:
    """
    Assembles and submits the create/mint/lock batch for a token.
    """

    def __init__(self, ledger: LedgerClient, confirmations: int = CONFIRMATIONS):
        self.ledger = ledger
        self.confirmations = confirmations

    async def last_token_id(self, collection: str) -> int:
        """
        Read the highest token id from the collection's storage.

        Raises:
            ChainCallFailureError: If storage cannot be read or has no last_token_id
        """
        try:
            storage = await self.ledger.get_storage(collection)
            return int(storage['last_token_id'])
        except (LedgerError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Cannot read last_token_id of {collection}: {e}")
            raise ChainCallFailureError(
                f"Failed to get the last token ID of {collection}. "
                f"The contract might not support this operation."
            ) from e

    async def build_batch(
        self,
        collection: str,
        config: MintConfig,
        artifact_uri: str,
        creator: str,
        media_type: str = '',
    ) -> TransactionBatch:
        """
        Assemble the token-contract calls for one mint.

        Open editions only create the token; fixed editions also mint the
        edition count to the creator and lock further minting.
        """
        batch = TransactionBatch()
        batch.add(ContractCall(
            collection,
            'create_token',
            build_create_token_params(config, artifact_uri, creator, media_type),
        ))

        if not config.open_edition:
            token_id = await self.last_token_id(collection) + 1
            batch.add(ContractCall(
                collection,
                'mint',
                {
                    'token_id': token_id,
                    'mint_items': [{'amount': config.editions, 'to_': creator}],
                },
            ))
            batch.add(ContractCall(
                collection,
                'lock',
                {'token_id': token_id, 'metadata': False, 'mint': True},
            ))

        return batch

    async def submit(self, batch: TransactionBatch) -> str:
        """
        Submit a batch and wait for its confirmation.

        Returns:
            Operation hash

        Raises:
            ChainCallFailureError: The batch was rejected or failed; nothing was applied
            AmbiguousSubmissionError: The batch may or may not have been applied
        """
        if not len(batch):
            raise ValueError("Cannot submit an empty batch")

        try:
            op_hash = await self.ledger.submit_batch(batch)
        except OperationRejectedError as e:
            raise ChainCallFailureError(f"Mint batch rejected: {e}") from e
        except LedgerTransportError as e:
            raise AmbiguousSubmissionError(f"Mint batch submission outcome unknown: {e}") from e

        try:
            await self.ledger.wait_for_confirmation(op_hash, self.confirmations)
        except OperationFailedError as e:
            raise ChainCallFailureError(f"Mint batch failed: {e}", op_hash=op_hash) from e
        except LedgerTransportError as e:
            raise AmbiguousSubmissionError(
                f"Mint batch {op_hash} was submitted but not confirmed: {e}", op_hash=op_hash
            ) from e

        return op_hash

    async def mint(
        self,
        collection: str,
        config: MintConfig,
        artifact_uri: str,
        creator: str,
        media_type: str = '',
    ) -> MintedToken:
        """
        Mint a token referencing artifact_uri and report its identity.
        """
        if not collection:
            raise UninitializedError("No target collection selected")
        if not creator:
            raise UninitializedError("No active account to mint with")

        batch = await self.build_batch(collection, config, artifact_uri, creator, media_type)
        logger.info(f"Minting on {collection}: {batch.entrypoints}")

        op_hash = await self.submit(batch)
        logger.info(f"Mint batch confirmed [op_hash={op_hash}]")

        try:
            token_id = await self.last_token_id(collection)
        except ChainCallFailureError as e:
            raise ChainCallFailureError(
                f"Token minted in {op_hash} but its id could not be read: {e}", op_hash=op_hash
            ) from e

        return MintedToken(contract=collection, token_id=token_id, op_hash=op_hash)
