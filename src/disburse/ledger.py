import asyncio
import logging
from decimal import ROUND_DOWN, Decimal
from typing import Protocol

import httpx
from xrpl import XRPLException
from xrpl.asyncio.clients import AsyncJsonRpcClient
from xrpl.asyncio.transaction import submit_and_wait
from xrpl.models.requests import AccountInfo
from xrpl.models.transactions import Payment
from xrpl.utils import drops_to_xrp
from xrpl.wallet import Wallet

import disburse.constants as C
from disburse.errors import BalanceQueryError, TransferError

log = logging.getLogger("disburse.ledger")

RPC_ERRORS = (asyncio.TimeoutError, httpx.HTTPError, XRPLException)


class LedgerClient(Protocol):
    async def get_balance(self, address: str) -> float: ...
    async def transfer(self, wallet: Wallet, destination: str, amount: float) -> None: ...


def xrp_to_drops(amount: float) -> str:
    """Whole drops, rounded down from the decimal value of amount (2.01 -> "2010000")."""
    drops = Decimal(str(amount)) * C.DROPS_PER_XRP
    return str(int(drops.to_integral_value(rounding=ROUND_DOWN)))


def _describe(e: BaseException) -> str:
    if not isinstance(e, RPC_ERRORS):
        # e.g. KeyError('result') from xrpl-py on a gateway reply like {"error": "overloaded"}
        return f"{e.__class__.__name__}: {e}"
    # TimeoutError and some httpx errors carry no message
    return str(e) or e.__class__.__name__


class XrplLedger:
    """LedgerClient backed by a rippled JSON-RPC endpoint."""

    def __init__(
        self,
        client: AsyncJsonRpcClient,
        *,
        rpc_timeout: float = C.RPC_TIMEOUT,
        submit_timeout: float = C.SUBMIT_TIMEOUT,
    ):
        self.client = client
        self.rpc_timeout = rpc_timeout
        self.submit_timeout = submit_timeout

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "XrplLedger":
        return cls(AsyncJsonRpcClient(url), **kwargs)

    async def _rpc(self, req, *, t: float | None = None):
        return await asyncio.wait_for(self.client.request(req), timeout=t or self.rpc_timeout)

    async def get_balance(self, address: str) -> float:
        """Validated XRP balance. An account the ledger has never seen holds 0."""
        try:
            r = await self._rpc(AccountInfo(account=address, ledger_index="validated"))
            if r.is_successful():
                return float(drops_to_xrp(r.result["account_data"]["Balance"]))
        except Exception as e:
            raise BalanceQueryError(address, _describe(e)) from e

        error = r.result.get("error")
        if error == C.ACCOUNT_NOT_FOUND:
            log.debug("%s not found on ledger, balance is 0", address)
            return 0.0
        raise BalanceQueryError(address, r.result.get("error_message") or error or "unknown error")

    async def transfer(self, wallet: Wallet, destination: str, amount: float) -> None:
        """Sign, submit and wait for validation of a single XRP payment."""
        try:
            payment = Payment(account=wallet.address, destination=destination, amount=xrp_to_drops(amount))
            r = await asyncio.wait_for(submit_and_wait(payment, self.client, wallet), timeout=self.submit_timeout)
        except Exception as e:
            raise TransferError(destination, _describe(e)) from e

        result = r.result.get("meta", {}).get("TransactionResult")
        if result != "tesSUCCESS":
            raise TransferError(destination, result or r.result.get("error", "no transaction result"))
        log.debug("Payment %s -> %s validated in ledger %s", wallet.address, destination, r.result.get("ledger_index"))


async def probe_rippled(
    url: str,
    max_retries: int = C.PROBE_RETRIES,
    retry_delay: float = C.PROBE_DELAY,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Probe rippled RPC endpoint with retries until it responds.

    Args:
        url: RPC endpoint URL
        max_retries: Maximum number of attempts before giving up
        retry_delay: Seconds to wait between attempts
        transport: Optional httpx transport, the default network one if None

    Raises the last error once every attempt failed.
    """
    payload = {"method": "server_info", "params": [{}]}

    for attempt in range(1, max_retries + 1):
        try:
            async with httpx.AsyncClient(timeout=C.RPC_TIMEOUT, transport=transport) as http:
                r = await http.post(url, json=payload)
                r.raise_for_status()
                log.info("RPC endpoint responding (attempt %s/%s)", attempt, max_retries)
                return
        except httpx.HTTPError as e:
            if attempt < max_retries:
                log.info(
                    "RPC not ready yet (attempt %s/%s): %s - retrying in %ss...",
                    attempt, max_retries, e.__class__.__name__, retry_delay,
                )
                await asyncio.sleep(retry_delay)
            else:
                log.error("RPC failed after %s attempts", max_retries)
                raise
