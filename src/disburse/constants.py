from typing import Final
from enum import StrEnum

DROPS_PER_XRP: Final = 1_000_000

ACCOUNT_NOT_FOUND: Final = "actNotFound"
RAW_KEY_ACCOUNT_NAME: Final = "PrivateKey"

SEED_PHRASES_ENV: Final = "SEED_PHRASES"
PRIVATE_KEYS_ENV: Final = "PRIVATE_KEYS"
CONFIG_ENV: Final = "DISBURSE_CONFIG"
RPC_URL_ENV: Final = "RPC_URL"

RPC_TIMEOUT = 10.0
SUBMIT_TIMEOUT = 60.0
PROBE_RETRIES = 30
PROBE_DELAY = 2.0


class TxResult(StrEnum):
    SUCCESS = "SUCCESS"
    FAILED  = "FAILED"


class JobStatus(StrEnum):
    COMPLETED     = "COMPLETED"
    INELIGIBLE    = "INELIGIBLE"
    BALANCE_ERROR = "BALANCE_ERROR"


__all__ = [
    "ACCOUNT_NOT_FOUND",
    "CONFIG_ENV",
    "DROPS_PER_XRP",
    "PRIVATE_KEYS_ENV",
    "PROBE_DELAY",
    "PROBE_RETRIES",
    "RAW_KEY_ACCOUNT_NAME",
    "RPC_TIMEOUT",
    "RPC_URL_ENV",
    "SEED_PHRASES_ENV",
    "SUBMIT_TIMEOUT",

    ######
    "JobStatus",
    "TxResult",
]
