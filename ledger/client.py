"""Ledger client interface consumed by the pipeline."""

from typing import Any, Optional

from ledger.models import OperationStatus, TransactionBatch


class LedgerError(Exception):
    """
    Base exception class for ledger client errors.
    """
    pass


class ViewRevertedError(LedgerError):
    """
    Raised when a read-only view executed and failed on-chain (e.g. the
    looked-up record does not exist).
    """
    pass


class LedgerTransportError(LedgerError):
    """
    Raised when the ledger could not be reached or answered unexpectedly.
    The outcome of the request is unknown.
    """
    pass


class OperationRejectedError(LedgerError):
    """
    Raised when the ledger refused an operation before injecting it.
    Nothing was applied.
    """
    pass


class OperationFailedError(LedgerError):
    """
    Raised when an injected operation failed or was backtracked.
    """

    def __init__(self, message: str, op_hash: Optional[str] = None):
        super().__init__(message)
        self.op_hash = op_hash


class ConfirmationTimeoutError(LedgerTransportError):
    """
    Raised when an operation did not reach the requested confirmations in time.
    """

    def __init__(self, message: str, op_hash: Optional[str] = None):
        super().__init__(message)
        self.op_hash = op_hash


class LedgerClient:
    """
    Operations the pipeline needs from the ledger.

    Implementations sign with a single account; callers must not submit
    operations concurrently through the same client.
    """

    async def get_active_address(self) -> Optional[str]:
        """
        Return the address of the signing account, or None if no account
        is active.
        """
        raise NotImplementedError

    async def execute_view(self, contract: str, view: str, argument: Any) -> Any:
        """
        Execute a read-only on-chain view.

        Raises:
            ViewRevertedError: The view ran and failed
            LedgerTransportError: The view could not be evaluated
        """
        raise NotImplementedError

    async def get_storage(self, contract: str) -> dict:
        """
        Read a contract's current storage.

        Raises:
            LedgerTransportError: Storage could not be fetched
        """
        raise NotImplementedError

    async def submit_batch(self, batch: TransactionBatch) -> str:
        """
        Sign and inject a batch as one operation.

        Returns:
            Operation hash

        Raises:
            OperationRejectedError: The ledger refused the batch, nothing applied
            LedgerTransportError: Injection outcome unknown
        """
        raise NotImplementedError

    async def wait_for_confirmation(self, op_hash: str, confirmations: int = 1) -> OperationStatus:
        """
        Wait until an operation has the requested number of confirmations.

        Raises:
            OperationFailedError: The operation failed on-chain
            ConfirmationTimeoutError: Confirmations not reached in time
            LedgerTransportError: Status could not be fetched
        """
        raise NotImplementedError

    async def close(self) -> None:
        """Release client resources."""
        return None
