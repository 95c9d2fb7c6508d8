"""Existence checks against content-store views."""

from enum import Enum
from typing import Any

from common.exceptions import AmbiguousExistenceCheckError
from common.logging_config import get_logger
from ledger.client import LedgerClient, LedgerTransportError, ViewRevertedError

logger = get_logger(__name__)


class Existence(str, Enum):
    EXISTS = "exists"
    NOT_FOUND = "not_found"


async def check_existence(
    ledger: LedgerClient,
    contract: str,
    view: str,
    key: Any,
    subject: str,
) -> Existence:
    """
    Run an existence view and classify the outcome.

    A view that executed and reverted means the record is absent. A view
    that could not be evaluated is not evidence of absence.

    Args:
        ledger: Ledger client
        contract: Content-store contract address
        view: View name (read_chunk, read_file)
        key: View argument
        subject: Human-readable description for errors

    Returns:
        Existence.EXISTS or Existence.NOT_FOUND

    Raises:
        AmbiguousExistenceCheckError: If the view failed for any other reason
    """
    try:
        await ledger.execute_view(contract, view, key)
    except ViewRevertedError:
        logger.debug(f"{view} reverted for {subject}: not found")
        return Existence.NOT_FOUND
    except LedgerTransportError as e:
        logger.error(f"{view} could not be evaluated for {subject}: {e}")
        raise AmbiguousExistenceCheckError(subject, e) from e
    return Existence.EXISTS
