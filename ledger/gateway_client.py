"""HTTP client for the signing gateway that fronts the ledger."""

import asyncio
import time
import uuid
from typing import Any, Optional

import httpx

from common.constants import (
    CONFIRMATION_POLL_INTERVAL_SECONDS,
    CONFIRMATION_TIMEOUT_SECONDS,
    VIEW_CALLER_ADDRESS,
)
from common.logging_config import get_logger
from ledger.client import (
    ConfirmationTimeoutError,
    LedgerClient,
    LedgerTransportError,
    OperationFailedError,
    OperationRejectedError,
    ViewRevertedError,
)
from ledger.models import OperationStatus, TransactionBatch, to_wire

logger = get_logger(__name__)

# Error codes the gateway uses when a view executed and failed on-chain.
VIEW_REVERT_CODES = frozenset({'VIEW_REVERTED', 'SCRIPT_REJECTED', 'SCRIPT_FAILED'})


class GatewayLedgerClient(LedgerClient):
    """Async HTTP client for the gateway's JSON API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        api_key: Optional[str] = None,
        poll_interval: float = CONFIRMATION_POLL_INTERVAL_SECONDS,
        confirmation_timeout: float = CONFIRMATION_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize gateway client.

        Args:
            base_url: Gateway base URL (e.g., "http://localhost:8732")
            timeout: Per-request timeout in seconds
            api_key: Optional bearer token for the gateway
            poll_interval: Seconds between operation status polls
            confirmation_timeout: Seconds to wait for confirmations
            transport: Optional httpx transport (testing)
        """
        headers = {'Authorization': f'Bearer {api_key}'} if api_key else {}
        self.session = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )
        self.poll_interval = poll_interval
        self.confirmation_timeout = confirmation_timeout
        self.request_id = None
        logger.info(f"Initialized GatewayLedgerClient [base_url={base_url}]")

    async def _request(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """
        Send one request, mapping network failures to LedgerTransportError.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object
        """
        self.request_id = str(uuid.uuid4())
        headers = kwargs.pop('headers', {})
        headers['X-Request-ID'] = self.request_id

        logger.debug(f"Making request: {method} {endpoint} [request_id={self.request_id}]")
        try:
            response = await self.session.request(method, endpoint, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise LedgerTransportError(f"Request timed out: {method} {endpoint}") from e
        except httpx.TransportError as e:
            raise LedgerTransportError(f"Cannot reach ledger gateway: {e}") from e

        logger.debug(
            f"Response received: {method} {endpoint} status={response.status_code} [request_id={self.request_id}]"
        )
        return response

    def _error_detail(self, response: httpx.Response) -> tuple[str, str]:
        """
        Extract (code, detail) from an error response.
        """
        try:
            data = response.json()
        except ValueError:
            return 'UNKNOWN', response.text or f"HTTP {response.status_code}"
        if not isinstance(data, dict):
            return 'UNKNOWN', str(data)
        return data.get('code', 'UNKNOWN'), data.get('detail', f"HTTP {response.status_code}")

    def _json_body(self, response: httpx.Response, context: str) -> dict:
        """
        Decode a success response body as a JSON object.

        Raises:
            LedgerTransportError: If the body is not a JSON object
        """
        try:
            data = response.json()
        except ValueError as e:
            raise LedgerTransportError(
                f"{context}: unreadable response body (status={response.status_code})"
            ) from e
        if not isinstance(data, dict):
            raise LedgerTransportError(f"{context}: expected a JSON object, got {type(data).__name__}")
        return data

    async def get_active_address(self) -> Optional[str]:
        response = await self._request('GET', '/accounts/active')
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            code, detail = self._error_detail(response)
            raise LedgerTransportError(f"Cannot read active account: {detail} (Code: {code})")
        return self._json_body(response, "Cannot read active account").get('address')

    async def execute_view(self, contract: str, view: str, argument: Any) -> Any:
        response = await self._request(
            'POST',
            f'/contracts/{contract}/views/{view}',
            json={'argument': to_wire(argument), 'caller': VIEW_CALLER_ADDRESS},
        )

        if response.status_code == 200:
            return self._json_body(response, f"View {view} on {contract}").get('result')

        code, detail = self._error_detail(response)
        if 400 <= response.status_code < 500 and code in VIEW_REVERT_CODES:
            logger.debug(f"View {view} on {contract} reverted: {detail}")
            raise ViewRevertedError(detail)

        raise LedgerTransportError(
            f"View {view} on {contract} failed: {detail} (status={response.status_code}, code={code})"
        )

    async def get_storage(self, contract: str) -> dict:
        response = await self._request('GET', f'/contracts/{contract}/storage')
        if response.status_code != 200:
            code, detail = self._error_detail(response)
            raise LedgerTransportError(
                f"Cannot read storage of {contract}: {detail} (status={response.status_code}, code={code})"
            )
        return self._json_body(response, f"Cannot read storage of {contract}")

    async def submit_batch(self, batch: TransactionBatch) -> str:
        payload = batch.to_dict()
        logger.debug(f"Submitting batch: entrypoints={batch.entrypoints}")
        response = await self._request('POST', '/operations', json=payload)

        if response.status_code in (200, 201, 202):
            # Accepted but unidentifiable: the batch may still be applied.
            data = self._json_body(response, "Batch injection outcome unknown")
            op_hash = data.get('op_hash')
            if not isinstance(op_hash, str) or not op_hash:
                raise LedgerTransportError(
                    f"Batch injection outcome unknown: no operation hash in response "
                    f"(status={response.status_code})"
                )
            logger.info(f"Injected operation {op_hash} ({len(batch)} call(s))")
            return op_hash

        code, detail = self._error_detail(response)
        if 400 <= response.status_code < 500:
            raise OperationRejectedError(f"{detail} (Code: {code})")

        raise LedgerTransportError(
            f"Batch injection outcome unknown: {detail} (status={response.status_code})"
        )

    async def get_operation(self, op_hash: str) -> OperationStatus:
        response = await self._request('GET', f'/operations/{op_hash}')
        if response.status_code == 404:
            return OperationStatus(op_hash=op_hash, status='pending')
        if response.status_code != 200:
            code, detail = self._error_detail(response)
            raise LedgerTransportError(f"Cannot read operation {op_hash}: {detail} (Code: {code})")
        data = self._json_body(response, f"Cannot read operation {op_hash}")
        data.setdefault('op_hash', op_hash)
        try:
            return OperationStatus.from_dict(data)
        except (TypeError, ValueError) as e:
            raise LedgerTransportError(f"Cannot read operation {op_hash}: malformed status {data!r}") from e

    async def wait_for_confirmation(self, op_hash: str, confirmations: int = 1) -> OperationStatus:
        deadline = time.monotonic() + self.confirmation_timeout

        while True:
            status = await self.get_operation(op_hash)

            if status.failed:
                raise OperationFailedError(
                    f"Operation {op_hash} {status.status}: {status.errors or 'no details'}",
                    op_hash=op_hash,
                )

            if status.confirmations >= confirmations:
                logger.debug(f"Operation {op_hash} confirmed ({status.confirmations} confirmation(s))")
                return status

            if time.monotonic() >= deadline:
                raise ConfirmationTimeoutError(
                    f"Operation {op_hash} not confirmed after {self.confirmation_timeout:.0f}s",
                    op_hash=op_hash,
                )

            await asyncio.sleep(self.poll_interval)

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.session.aclose()
