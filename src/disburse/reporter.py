import sys
from typing import Sequence, TextIO

from disburse.models import Account, RunTotals, TransferOutcome


class Colors:
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"


NAME_WIDTH = 10
SEPARATOR = "=" * 62


class ResultReporter:
    """Console output for the person running the disbursement."""

    def __init__(self, stream: TextIO | None = None, *, color: bool = True):
        self.stream = stream
        self.color = color

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _emit(self, line: str) -> None:
        print(line + self._c(Colors.RESET), file=self.stream or sys.stdout, flush=True)

    def transfer(self, outcome: TransferOutcome) -> None:
        c = self._c
        req = outcome.request
        name = req.account.name
        if outcome.ok:
            self._emit(
                f"{c(Colors.YELLOW)}{name:<{NAME_WIDTH}}{c(Colors.CYAN)} [ {req.sequence_index:>2} ] "
                f"{c(Colors.GREEN)}Success | {c(Colors.RED)}-{req.amount:.6f} {c(Colors.GREEN)}XRP | "
                f"{c(Colors.YELLOW)}{req.destination}"
            )
        else:
            self._emit(
                f"{c(Colors.RED)}[ {req.sequence_index:>2} ] Failed | send XRP | [{req.destination}] | "
                f"from account{c(Colors.RESET)} {name}: {outcome.reason}"
            )

    def insufficient_balance(self, account: Account, balance: float, *, below_minimum: bool = False) -> None:
        """Zero balance, or (below_minimum) a balance that cannot cover min_amount for every payment."""
        c = self._c
        if below_minimum:
            self._emit(f"{c(Colors.RED)}[{account.name}:] {balance} Insufficient balance XRP")
            return
        self._emit(
            f"{c(Colors.GREEN)}{account.name:<{NAME_WIDTH}} {c(Colors.RED)}| {balance} | "
            f"{c(Colors.YELLOW)}Insufficient balance XRP"
        )

    def balance_error(self, account: Account, reason: str) -> None:
        self._emit(f"{self._c(Colors.RED)}Failed to retrieve balance for {account.name}:{self._c(Colors.RESET)} {reason}")

    def addresses_generated(self, account: Account, count: int, balance: float) -> None:
        c = self._c
        self._emit(
            f"{c(Colors.YELLOW)}{account.name:<{NAME_WIDTH}} {c(Colors.CYAN)}[  {count} ] "
            f"{c(Colors.GREEN)}Success | {c(Colors.RED)}{balance} {c(Colors.GREEN)}XRP | "
            f"{c(Colors.YELLOW)}Generated random addresses"
        )

    def account_list(self, accounts: Sequence[Account]) -> None:
        self._emit(f"\n{self._c(Colors.YELLOW)}Available accounts:{self._c(Colors.RESET)}\n")
        for i, account in enumerate(accounts, start=1):
            self._emit(f"[{i}] {account.name}")

    def error(self, message: str) -> None:
        self._emit(f"{self._c(Colors.RED)}{message}")

    def summary(self, totals: RunTotals) -> None:
        c = self._c
        self._emit(f"{c(Colors.RED)}{SEPARATOR}")
        self._emit(f"{c(Colors.GREEN)}Total Successful Transactions: {totals.total_success}")
        self._emit(f"{c(Colors.RED)}Total Failed Transactions: {totals.total_failed}")
