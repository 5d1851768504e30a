import asyncio
from dataclasses import dataclass, field

from xrpl.wallet import Wallet

import disburse.constants as C


@dataclass(slots=True)
class Account:
    """A funding account. ``attempts`` is only ever touched by the account's own job."""

    name: str
    wallet: Wallet
    attempts: int = 0

    @property
    def address(self) -> str:
        return self.wallet.address

    def __str__(self):
        return f"{self.name} -- {self.address}"


@dataclass(slots=True, frozen=True)
class TransferRequest:
    account: Account
    destination: str
    amount: float  # XRP
    sequence_index: int


@dataclass(slots=True, frozen=True)
class TransferOutcome:
    request: TransferRequest
    result: C.TxResult
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is C.TxResult.SUCCESS

    @classmethod
    def success(cls, request: TransferRequest) -> "TransferOutcome":
        return cls(request, C.TxResult.SUCCESS)

    @classmethod
    def failure(cls, request: TransferRequest, reason: str) -> "TransferOutcome":
        return cls(request, C.TxResult.FAILED, reason)


@dataclass(slots=True, frozen=True)
class RunTotals:
    total_success: int = 0
    total_failed: int = 0

    @property
    def total(self) -> int:
        return self.total_success + self.total_failed


class RunCounters:
    """Success/failure totals shared by every job of a run."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._success = 0
        self._failed = 0

    async def record(self, outcome: TransferOutcome) -> None:
        async with self._lock:
            if outcome.ok:
                self._success += 1
            else:
                self._failed += 1

    async def add_failed(self, n: int) -> None:
        async with self._lock:
            self._failed += n

    def snapshot(self) -> RunTotals:
        return RunTotals(self._success, self._failed)


@dataclass(slots=True)
class AccountResult:
    account_name: str
    status: C.JobStatus
    success: int = 0
    failed: int = 0
    balance: float | None = None
    outcomes: list[TransferOutcome] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.outcomes)
