import argparse
import asyncio
import logging
import re
from pathlib import Path
from typing import Sequence

import click

from disburse.accounts import load_accounts
from disburse.addresses import AddressFactory
from disburse.config import Settings, load_settings
from disburse.coordinator import RunCoordinator
from disburse.errors import DisburseError
from disburse.ledger import XrplLedger, probe_rippled
from disburse.logging_config import setup_logging
from disburse.models import Account, AccountResult, RunTotals
from disburse.reporter import ResultReporter

log = logging.getLogger("disburse.cli")

SELECTION_RE = re.compile(r"^\s*\d+\s*(,\s*\d+\s*)*$")


def parse_selection(text: str, num_accounts: int) -> list[int]:
    """Comma-separated 1-based account indices -> 0-based list, order and repeats kept."""
    if not SELECTION_RE.match(text):
        raise ValueError(f"Invalid input {text!r}. Please enter a comma-separated list of indices (e.g., 1,4,6)")
    indices = [int(i) for i in text.split(",")]
    if bad := [i for i in indices if not 1 <= i <= num_accounts]:
        raise ValueError(f"No account with index {', '.join(map(str, bad))} (valid: 1-{num_accounts})")
    return [i - 1 for i in indices]


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {n}")
    return n


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="disburse",
        description="Send many small XRP payments from funding accounts to fresh addresses.",
    )
    parser.add_argument("-c", "--config",
                        type=Path,
                        help="Path to config file (TOML, or JSON with camelCase keys).",
                        )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-a", "--all",
                      action="store_true",
                      help="Run every account concurrently.",
                      )
    mode.add_argument("-s", "--accounts",
                      metavar="INDICES",
                      help="Run these 1-based account indices one after another, e.g. 1,4,6.",
                      )
    parser.add_argument("-n", "--count",
                        type=_non_negative_int,
                        help="Number of transactions to execute for each account.",
                        )
    parser.add_argument("--wait-for-rpc",
                        action="store_true",
                        help="Wait for the rippled RPC endpoint to answer before starting.",
                        )
    parser.add_argument("--no-color",
                        action="store_true",
                        help="Plain output without ANSI colors.",
                        )
    args = parser.parse_args(argv)
    if args.accounts is not None and not SELECTION_RE.match(args.accounts):
        parser.error(f"argument -s/--accounts: invalid index list {args.accounts!r}")
    return args


def prompt_execute_all() -> bool:
    return click.confirm("Execute transactions for all accounts?", default=None)


def prompt_selection(accounts: Sequence[Account], reporter: ResultReporter) -> list[Account]:
    reporter.account_list(accounts)

    def _convert(text: str) -> list[int]:
        try:
            return parse_selection(text, len(accounts))
        except ValueError as e:
            raise click.BadParameter(str(e)) from e

    indices = click.prompt(
        "Enter the account indices (comma-separated, e.g., 1,4,6)",
        value_proc=_convert,
    )
    return [accounts[i] for i in indices]


def prompt_count() -> int:
    return click.prompt(
        "Enter the number of transactions to execute for each account",
        type=click.IntRange(min=0),
    )


async def run(
    coordinator: RunCoordinator,
    settings: Settings,
    accounts: Sequence[Account],
    count: int,
    *,
    concurrent: bool,
    wait_for_rpc: bool = False,
) -> list[AccountResult]:
    if wait_for_rpc:
        await probe_rippled(settings.rippled.url, settings.timeout.probe_retries, settings.timeout.probe_delay)
    if concurrent:
        return await coordinator.execute_concurrent(accounts, count, settings.run)
    return await coordinator.execute_sequential(accounts, count, settings.run)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()
    reporter = ResultReporter(color=not args.no_color)

    try:
        settings = load_settings(args.config)
        accounts = load_accounts(algorithm=settings.rippled.algorithm)
        selected = None
        if args.accounts is not None:
            selected = [accounts[i] for i in parse_selection(args.accounts, len(accounts))]
    except (DisburseError, ValueError) as e:
        log.error("Startup failed: %s", e)
        reporter.error(str(e))
        reporter.summary(RunTotals())
        return 1

    try:
        concurrent = args.all or (selected is None and prompt_execute_all())
        if concurrent:
            selected = accounts
        elif selected is None:
            selected = prompt_selection(accounts, reporter)
        count = args.count if args.count is not None else prompt_count()
    except click.Abort:
        reporter.summary(RunTotals())
        return 1

    ledger = XrplLedger.from_url(
        settings.rippled.url,
        rpc_timeout=settings.timeout.rpc,
        submit_timeout=settings.timeout.submit,
    )
    coordinator = RunCoordinator(ledger, reporter, AddressFactory(settings.rippled.algorithm))
    log.info("Using rippled at %s", settings.rippled.url)

    status = 0
    try:
        asyncio.run(run(coordinator, settings, selected, count, concurrent=concurrent, wait_for_rpc=args.wait_for_rpc))
    except KeyboardInterrupt:
        log.warning("Run interrupted by user")
        status = 130
    except Exception:
        log.exception("Run aborted by an unexpected error")
        status = 1
    finally:
        reporter.summary(coordinator.totals)
    return status
