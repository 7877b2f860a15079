"""JSON-RPC client for a rippled node."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import backoff
import requests

from ..constants import (
    LEDGER_OBJECT_TYPE_AMM,
    RETRYABLE_HTTP_STATUSES,
    RETRYABLE_NODE_ERRORS,
    VALIDATED_LEDGER,
)
from ..domain import PoolDescriptor
from ..logger import TRACE

logger = logging.getLogger(__name__)

LedgerSelector = int | str


class XrplNodeError(Exception):
    """Raised when rippled answers with an error or an unexpected payload."""

    def __init__(self, message: str, error: str | None = None):
        super().__init__(message)
        self.error = error

    @property
    def retry_recommended(self) -> bool:
        return self.error in RETRYABLE_NODE_ERRORS


@dataclass
class LedgerDataPage:
    """One page of ``ledger_data`` state objects."""

    state: list[dict[str, Any]]
    marker: Any | None = None


def _should_giveup(exc: Exception) -> bool:
    if isinstance(exc, XrplNodeError):
        return not exc.retry_recommended
    if isinstance(exc, requests.exceptions.HTTPError):
        return (
            exc.response is not None
            and exc.response.status_code not in RETRYABLE_HTTP_STATUSES
        )
    return False


class XrplNodeClient:
    """Client for the handful of rippled methods needed to value AMM pools."""

    def __init__(
        self,
        node_url: str,
        timeout: float = 30.0,
        max_tries: int = 5,
        session: requests.Session | None = None,
    ):
        self.node_url = node_url
        self.timeout = timeout
        self.max_tries = max_tries
        self.session = session or requests.Session()

    def _post(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        response = self.session.post(
            self.node_url,
            json={"method": method, "params": [params]},
            timeout=self.timeout,
        )
        response.raise_for_status()

        try:
            data = response.json()
        except json.JSONDecodeError:
            raise XrplNodeError(f"Invalid JSON from node for '{method}'")

        result = data.get("result") if isinstance(data, dict) else None
        if not isinstance(result, dict):
            raise XrplNodeError(f"Invalid response structure for '{method}': {data}")

        if result.get("status") == "error":
            error = result.get("error")
            message = result.get("error_message") or error
            raise XrplNodeError(f"Node returned '{error}' for '{method}': {message}", error)

        return result

    async def request(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        """Call a rippled method, retrying transient failures.

        Raises:
            XrplNodeError: If the node reports a non-transient error or the
                payload cannot be understood
            requests.exceptions.RequestException: If the request keeps failing
        """

        def _on_backoff(details: Any) -> None:
            logger.warning(
                "Request '%s' failed (attempt %d of %d): %s",
                method,
                details["tries"],
                self.max_tries,
                details.get("exception"),
            )

        @backoff.on_exception(
            backoff.expo,
            (requests.exceptions.RequestException, XrplNodeError),
            max_tries=self.max_tries,
            giveup=_should_giveup,
            on_backoff=_on_backoff,
            jitter=backoff.full_jitter,
        )
        async def _request_with_retry() -> dict[str, Any]:
            logger.log(TRACE, "Calling %s on %s with %s", method, self.node_url, params)
            return await asyncio.to_thread(self._post, method, params)

        return await _request_with_retry()

    async def ledger_data(
        self,
        marker: Any | None = None,
        binary: bool = True,
        ledger_index: LedgerSelector = VALIDATED_LEDGER,
    ) -> LedgerDataPage:
        """Fetch one page of AMM ledger objects."""
        params: dict[str, Any] = {
            "ledger_index": ledger_index,
            "binary": binary,
            "type": LEDGER_OBJECT_TYPE_AMM,
        }
        if marker:
            params["marker"] = marker

        result = await self.request("ledger_data", params)
        state = result.get("state") or []
        if not isinstance(state, list):
            raise XrplNodeError(f"Invalid 'state' in ledger_data response: {state!r}")
        return LedgerDataPage(state=state, marker=result.get("marker"))

    async def amm_info(
        self,
        pool: PoolDescriptor,
        ledger_index: LedgerSelector = VALIDATED_LEDGER,
    ) -> tuple[Any, Any]:
        """Fetch the raw reserve amounts of a pool.

        Returns:
            ``(amount, amount2)`` as returned by rippled: a string of drops for
            XRP, an issued currency object otherwise
        """
        params = {
            "ledger_index": ledger_index,
            "asset": pool.asset1.to_request(),
            "asset2": pool.asset2.to_request(),
        }
        result = await self.request("amm_info", params)
        try:
            amm = result["amm"]
            return amm["amount"], amm["amount2"]
        except (KeyError, TypeError) as e:
            raise XrplNodeError(
                f"Invalid amm_info response for pool {pool.account}: {result}"
            ) from e

    def close(self) -> None:
        self.session.close()
