from disburse.addresses import AddressFactory
from disburse.config import RunConfig, Settings, load_settings
from disburse.coordinator import RunCoordinator
from disburse.job import AccountJob
from disburse.ledger import LedgerClient, XrplLedger
from disburse.models import Account, AccountResult, RunCounters, RunTotals, TransferOutcome, TransferRequest
from disburse.reporter import ResultReporter

__version__ = "0.1.0"

__all__ = [
    "Account",
    "AccountJob",
    "AccountResult",
    "AddressFactory",
    "LedgerClient",
    "ResultReporter",
    "RunConfig",
    "RunCoordinator",
    "RunCounters",
    "RunTotals",
    "Settings",
    "TransferOutcome",
    "TransferRequest",
    "XrplLedger",
    "load_settings",
]
