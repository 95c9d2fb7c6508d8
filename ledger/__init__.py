"""Ledger access: client interface, wire models and the gateway client."""

from ledger.client import LedgerClient
from ledger.gateway_client import GatewayLedgerClient
from ledger.models import ContractCall, OperationStatus, TransactionBatch

__all__ = [
    "LedgerClient",
    "GatewayLedgerClient",
    "ContractCall",
    "OperationStatus",
    "TransactionBatch",
]
