"""Tests for sequential and concurrent runs across accounts."""

import asyncio
from unittest import IsolatedAsyncioTestCase
from unittest.mock import AsyncMock, patch

from xrpl import CryptoAlgorithm
from xrpl.models.response import Response, ResponseStatus

import disburse.constants as C
from disburse.addresses import AddressFactory
from disburse.coordinator import RunCoordinator
from disburse.ledger import XrplLedger
from fakes import FakeLedger, RecordingReporter, RecordingSleep, make_account, make_config


class RunCoordinatorTest(IsolatedAsyncioTestCase):
    def setUp(self):
        self.reporter = RecordingReporter()
        self.sleep = RecordingSleep()
        self.accounts = [make_account(name) for name in ("alice", "bob", "carol")]

    def coordinator(self, ledger: FakeLedger) -> RunCoordinator:
        return RunCoordinator(ledger, self.reporter, AddressFactory(CryptoAlgorithm.ED25519), sleep=self.sleep)

    async def test_concurrent_run_waits_for_every_job(self):
        ledger = FakeLedger(latency=0.001)
        coordinator = self.coordinator(ledger)

        results = await coordinator.execute_concurrent(self.accounts, 3, make_config())

        self.assertEqual(len(ledger.transfers), 9)
        self.assertEqual([r.account_name for r in results], ["alice", "bob", "carol"])
        self.assertTrue(all(r.status == C.JobStatus.COMPLETED for r in results))
        self.assertEqual(coordinator.totals.total_success, 9)
        self.assertEqual(coordinator.totals.total_failed, 0)

    async def test_concurrent_jobs_interleave_but_each_account_stays_sequential(self):
        ledger = FakeLedger(latency=0.001)
        await self.coordinator(ledger).execute_concurrent(self.accounts, 3, make_config())

        # some account starts a payment while another one is in flight
        in_flight = set()
        overlapped = False
        for kind, address in ledger.events:
            if kind == "start":
                self.assertNotIn(address, in_flight)
                overlapped = overlapped or bool(in_flight)
                in_flight.add(address)
            else:
                in_flight.discard(address)
        self.assertTrue(overlapped)

        for account in self.accounts:
            indices = [
                c[1].request.sequence_index
                for c in self.reporter.of("transfer")
                if c[1].request.account is account
            ]
            self.assertEqual(indices, [1, 2, 3])

    async def test_sequential_run_keeps_order_and_finishes_each_account_first(self):
        ledger = FakeLedger()
        selected = [self.accounts[2], self.accounts[0]]

        results = await self.coordinator(ledger).execute_sequential(selected, 2, make_config(delay_each_account=300))

        self.assertEqual([r.account_name for r in results], ["carol", "alice"])
        sources = [src for src, _, _ in ledger.transfers]
        self.assertEqual(sources, [selected[0].address] * 2 + [selected[1].address] * 2)
        # each account's trailing delay happens before the next account starts
        self.assertEqual(self.sleep.calls, [0.0, 0.0, 0.3, 0.0, 0.0, 0.3])

    async def test_failures_stay_inside_their_account(self):
        alice, bob, carol = self.accounts
        ledger = FakeLedger(
            balances={bob.address: 0.0},
            balance_errors={carol.address},
            fail_on={alice.address: {1}},
        )
        coordinator = self.coordinator(ledger)

        results = await coordinator.execute_concurrent(self.accounts, 3, make_config())

        self.assertEqual(
            [r.status for r in results],
            [C.JobStatus.COMPLETED, C.JobStatus.INELIGIBLE, C.JobStatus.BALANCE_ERROR],
        )
        # alice: 2 ok + 1 failed, bob: not counted, carol: 3 bulk failures
        self.assertEqual(coordinator.totals.total_success, 2)
        self.assertEqual(coordinator.totals.total_failed, 4)
        self.assertEqual(len(ledger.transfers), 3)

    async def test_totals_match_dispatched_attempts_plus_bulk_failures(self):
        alice, bob, carol = self.accounts
        ledger = FakeLedger(balance_errors={bob.address}, fail_on={carol.address: {2, 4}})
        coordinator = self.coordinator(ledger)

        await coordinator.execute_sequential(self.accounts, 4, make_config())

        self.assertEqual(coordinator.totals.total, len(ledger.transfers) + 4)
        self.assertEqual(coordinator.totals.total_failed, 2 + 4)

    async def test_duplicate_selection_runs_the_account_again(self):
        alice = self.accounts[0]
        ledger = FakeLedger()

        await self.coordinator(ledger).execute_sequential([alice, alice], 2, make_config())

        self.assertEqual(len(ledger.transfers_from(alice)), 4)
        self.assertEqual(alice.attempts, 4)

    async def test_empty_account_set(self):
        coordinator = self.coordinator(FakeLedger())

        self.assertEqual(await coordinator.execute_concurrent([], 5, make_config()), [])
        self.assertEqual(await coordinator.execute_sequential([], 5, make_config()), [])
        self.assertEqual(coordinator.totals.total, 0)


class NodeClient:
    """JSON-RPC client stand-in; account_info for the broken addresses fails inside xrpl-py."""

    def __init__(self, broken: set[str]):
        self.broken = broken

    async def request(self, req):
        await asyncio.sleep(0.001)
        if req.account in self.broken:
            raise KeyError("result")
        return Response(status=ResponseStatus.SUCCESS, result={"account_data": {"Balance": "1000000000"}})


class MalformedReplyIsolationTest(IsolatedAsyncioTestCase):
    async def test_sibling_accounts_finish_when_one_gets_a_malformed_reply(self):
        alice, bob = make_account("alice"), make_account("bob")
        ledger = XrplLedger(NodeClient({alice.address}))
        validated = Response(status=ResponseStatus.SUCCESS, result={"meta": {"TransactionResult": "tesSUCCESS"}})
        coordinator = RunCoordinator(
            ledger, RecordingReporter(), AddressFactory(CryptoAlgorithm.ED25519), sleep=RecordingSleep(),
        )

        with patch("disburse.ledger.submit_and_wait", new=AsyncMock(return_value=validated)) as submit:
            results = await coordinator.execute_concurrent([alice, bob], 20, make_config())

        self.assertEqual([r.status for r in results], [C.JobStatus.BALANCE_ERROR, C.JobStatus.COMPLETED])
        self.assertEqual(submit.await_count, 20)
        self.assertEqual(bob.attempts, 20)
        self.assertEqual(coordinator.totals.total_success, 20)
        self.assertEqual(coordinator.totals.total_failed, 20)
