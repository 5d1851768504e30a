class DisburseError(Exception):
    """Base class for every error raised by disburse."""


class ConfigError(DisburseError):
    """The configuration file is missing or holds invalid values."""


class NoAccountsError(DisburseError):
    """No funding account could be built from the configured credentials."""


class BalanceQueryError(DisburseError):
    """The ledger could not report an account's balance."""

    def __init__(self, address: str, reason: str):
        super().__init__(f"{address}: {reason}")
        self.address = address
        self.reason = reason


class TransferError(DisburseError):
    """A payment was rejected, timed out or failed to validate."""

    def __init__(self, destination: str, reason: str):
        super().__init__(f"{destination}: {reason}")
        self.destination = destination
        self.reason = reason
