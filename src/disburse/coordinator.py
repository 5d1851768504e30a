import asyncio
import logging
from typing import Sequence

from disburse.addresses import AddressFactory
from disburse.config import RunConfig
from disburse.job import AccountJob
from disburse.ledger import LedgerClient
from disburse.models import Account, AccountResult, RunCounters, RunTotals
from disburse.reporter import ResultReporter

log = logging.getLogger("disburse.coordinator")


class RunCoordinator:
    """Runs AccountJobs for a set of accounts and owns the run totals.

    The counters live as long as the coordinator, so totals read after a run
    cover every job, and an interrupted run can still be summarized.
    Extra keyword arguments (``rng``, ``sleep``) are handed to AccountJob.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        reporter: ResultReporter,
        addresses: AddressFactory | None = None,
        *,
        counters: RunCounters | None = None,
        **job_kwargs,
    ):
        self.counters = counters or RunCounters()
        self.job = AccountJob(ledger, self.counters, reporter, addresses or AddressFactory(), **job_kwargs)

    @property
    def totals(self) -> RunTotals:
        return self.counters.snapshot()

    async def execute_sequential(
        self, accounts: Sequence[Account], num_transactions: int, config: RunConfig
    ) -> list[AccountResult]:
        """One account at a time, in the given order, trailing delay included."""
        log.info("Running %s account(s) sequentially, %s txns each", len(accounts), num_transactions)
        results = []
        for account in accounts:
            results.append(await self.job.run(account, num_transactions, config))
        return results

    async def execute_concurrent(
        self, accounts: Sequence[Account], num_transactions: int, config: RunConfig
    ) -> list[AccountResult]:
        """Every account at once. Returns after the last job finished, results in input order."""
        log.info("Running %s account(s) concurrently, %s txns each", len(accounts), num_transactions)
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(self.job.run(account, num_transactions, config)) for account in accounts]
        return [t.result() for t in tasks]
