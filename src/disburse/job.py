import asyncio
import logging
import random
from typing import Awaitable, Callable

import disburse.constants as C
from disburse.addresses import AddressFactory
from disburse.config import RunConfig
from disburse.errors import BalanceQueryError, TransferError
from disburse.ledger import LedgerClient
from disburse.models import Account, AccountResult, RunCounters, TransferOutcome, TransferRequest
from disburse.randoms import draw_amount, draw_delay_ms
from disburse.reporter import ResultReporter

log = logging.getLogger("disburse.job")

Sleep = Callable[[float], Awaitable[None]]


class AccountJob:
    """Drives every payment of one funding account.

    Payments of an account go out strictly one after another: attempt N+1 is
    only built once attempt N has an outcome and the pacing delay elapsed.
    A failed payment is counted and the loop moves on. Only a failed balance
    query stops the account early, and then the whole requested count is
    booked as failures.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        counters: RunCounters,
        reporter: ResultReporter,
        addresses: AddressFactory,
        *,
        rng: random.Random | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.ledger = ledger
        self.counters = counters
        self.reporter = reporter
        self.addresses = addresses
        self.rng = rng
        self._sleep = sleep

    async def _pause(self, ms: int) -> None:
        await self._sleep(ms / 1000)

    async def run(self, account: Account, num_transactions: int, config: RunConfig) -> AccountResult:
        try:
            balance = await self.ledger.get_balance(account.address)
        except BalanceQueryError as e:
            log.debug("Balance query failed for %s (%s): %s", account.name, account.address, e.reason)
            await self.counters.add_failed(num_transactions)
            self.reporter.balance_error(account, e.reason)
            return AccountResult(account.name, C.JobStatus.BALANCE_ERROR, failed=num_transactions)

        if balance <= 0 or balance < config.min_amount * num_transactions:
            log.debug(
                "Skipping %s: balance %s below %s x %s",
                account.name, balance, config.min_amount, num_transactions,
            )
            self.reporter.insufficient_balance(account, balance, below_minimum=balance > 0)
            return AccountResult(account.name, C.JobStatus.INELIGIBLE, balance=balance)

        destinations = self.addresses.generate(num_transactions)
        self.reporter.addresses_generated(account, num_transactions, balance)

        result = AccountResult(account.name, C.JobStatus.COMPLETED, balance=balance)
        for destination in destinations:
            outcome = await self._send(account, destination, config)
            await self.counters.record(outcome)
            result.outcomes.append(outcome)
            if outcome.ok:
                result.success += 1
            else:
                result.failed += 1
            self.reporter.transfer(outcome)
            await self._pause(draw_delay_ms(config, self.rng))

        await self._pause(config.delay_each_account)
        log.debug("%s done: %s ok, %s failed", account.name, result.success, result.failed)
        return result

    async def _send(self, account: Account, destination: str, config: RunConfig) -> TransferOutcome:
        amount = draw_amount(config, self.rng)
        account.attempts += 1
        request = TransferRequest(account, destination, amount, account.attempts)
        try:
            await self.ledger.transfer(account.wallet, destination, amount)
        except TransferError as e:
            log.debug("Payment %s #%s to %s failed: %s", account.name, request.sequence_index, destination, e.reason)
            return TransferOutcome.failure(request, e.reason)
        return TransferOutcome.success(request)
