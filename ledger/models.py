"""Contract call and operation message definitions (wire formats)."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def to_wire(value: Any) -> Any:
    """
    Convert call parameters to their JSON wire form.

    Bytes become lowercase hex strings, the encoding the gateway expects for
    Michelson `bytes`. Containers are converted recursively.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, dict):
        return {k: to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(v) for v in value]
    return value


@dataclass(frozen=True)
class ContractCall:
    """A single entrypoint call against a contract."""
    destination: str
    entrypoint: str
    parameters: Any = None
    amount: int = 0

    def to_dict(self) -> dict:
        return {
            'destination': self.destination,
            'entrypoint': self.entrypoint,
            'parameters': to_wire(self.parameters),
            'amount': self.amount,
        }


@dataclass
class TransactionBatch:
    """
    Ordered calls applied by the ledger as one atomic operation.
    """
    calls: List[ContractCall] = field(default_factory=list)

    def add(self, call: ContractCall) -> 'TransactionBatch':
        self.calls.append(call)
        return self

    def __len__(self) -> int:
        return len(self.calls)

    def __iter__(self):
        return iter(self.calls)

    @property
    def entrypoints(self) -> List[str]:
        return [call.entrypoint for call in self.calls]

    def to_dict(self) -> dict:
        if not self.calls:
            raise ValueError("Cannot serialize an empty batch")
        return {'calls': [call.to_dict() for call in self.calls]}


OPERATION_PENDING = "pending"
OPERATION_APPLIED = "applied"
OPERATION_FAILED_STATES = ("failed", "backtracked", "skipped")


@dataclass
class OperationStatus:
    """Status report for a submitted operation."""
    op_hash: str
    status: str
    confirmations: int = 0
    errors: Optional[List[Dict[str, Any]]] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'OperationStatus':
        return cls(
            op_hash=data['op_hash'],
            status=data.get('status', OPERATION_PENDING),
            confirmations=int(data.get('confirmations', 0)),
            errors=data.get('errors'),
        )

    @property
    def failed(self) -> bool:
        return self.status in OPERATION_FAILED_STATES
