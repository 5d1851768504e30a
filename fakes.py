"""In-memory stand-ins for the rippled node used by the tests."""
import asyncio

from xrpl import CryptoAlgorithm
from xrpl.wallet import Wallet

from disburse.config import RunConfig
from disburse.errors import BalanceQueryError, TransferError
from disburse.models import Account

DEFAULT_BALANCE = 1_000.0


def make_account(name: str = "alice") -> Account:
    return Account(name, Wallet.create(algorithm=CryptoAlgorithm.ED25519))


def make_config(**overrides) -> RunConfig:
    values = dict(min_amount=1.0, max_amount=2.0, min_delay=0, max_delay=0, delay_each_account=0)
    values.update(overrides)
    return RunConfig(**values)


class FakeLedger:
    """Scripted ledger.

    balances:       address -> XRP, anything else holds DEFAULT_BALANCE
    balance_errors: addresses whose balance query fails
    fail_on:        address -> 1-based attempt numbers whose payment fails
    latency:        seconds every call takes, so concurrent jobs interleave
    """

    def __init__(self, balances=None, *, balance_errors=(), fail_on=None, latency: float = 0.0):
        self.balances = dict(balances or {})
        self.balance_errors = set(balance_errors)
        self.fail_on = {k: set(v) for k, v in (fail_on or {}).items()}
        self.latency = latency
        self.balance_queries: list[str] = []
        self.transfers: list[tuple[str, str, float]] = []
        self.events: list[tuple[str, str]] = []

    async def get_balance(self, address: str) -> float:
        self.balance_queries.append(address)
        await asyncio.sleep(self.latency)
        if address in self.balance_errors:
            raise BalanceQueryError(address, "connection refused")
        return self.balances.get(address, DEFAULT_BALANCE)

    async def transfer(self, wallet: Wallet, destination: str, amount: float) -> None:
        self.events.append(("start", wallet.address))
        await asyncio.sleep(self.latency)
        attempt = sum(1 for src, _, _ in self.transfers if src == wallet.address) + 1
        self.transfers.append((wallet.address, destination, amount))
        self.events.append(("end", wallet.address))
        if attempt in self.fail_on.get(wallet.address, ()):
            raise TransferError(destination, "tecNO_DST_INSUF_XRP")

    def transfers_from(self, account: Account) -> list[tuple[str, str, float]]:
        return [t for t in self.transfers if t[0] == account.address]


class RecordingSleep:
    """Replaces asyncio.sleep: remembers every pause and only yields to the loop."""

    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)


class RecordingReporter:
    """ResultReporter double keeping every call in order."""

    def __init__(self):
        self.calls: list[tuple] = []

    def transfer(self, outcome):
        self.calls.append(("transfer", outcome))

    def insufficient_balance(self, account, balance, *, below_minimum=False):
        self.calls.append(("insufficient_balance", account.name, balance, below_minimum))

    def balance_error(self, account, reason):
        self.calls.append(("balance_error", account.name, reason))

    def addresses_generated(self, account, count, balance):
        self.calls.append(("addresses_generated", account.name, count, balance))

    def account_list(self, accounts):
        self.calls.append(("account_list", [a.name for a in accounts]))

    def error(self, message):
        self.calls.append(("error", message))

    def summary(self, totals):
        self.calls.append(("summary", totals))

    def of(self, kind: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == kind]
