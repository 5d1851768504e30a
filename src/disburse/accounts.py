"""Funding accounts built from credentials found in the environment.

SEED_PHRASES holds named accounts as XRPL secret numbers::

    SEED_PHRASES='[{"name": "alice", "phrase": "123456 234567 ... 890123"}]'

PRIVATE_KEYS holds bare family seeds, each becoming an account named "PrivateKey"::

    PRIVATE_KEYS='["sEdT...", "snoP..."]'
"""

import json
import logging
import os
from typing import Mapping

from xrpl import CryptoAlgorithm, XRPLException
from xrpl.wallet import Wallet

import disburse.constants as C
from disburse.errors import NoAccountsError
from disburse.models import Account

log = logging.getLogger("disburse.accounts")

DERIVATION_ERRORS = (XRPLException, ValueError, TypeError)


def parse_env_array(name: str, environ: Mapping[str, str] | None = None) -> list:
    """JSON array stored in an environment variable. Unset or malformed gives []."""
    raw = (os.environ if environ is None else environ).get(name)
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        log.error("Failed to parse environment variable %s: %s", name, e)
        return []
    if not isinstance(value, list):
        log.error("%s must be a JSON array, got %s", name, type(value).__name__)
        return []
    return value


def wallet_from_secret_numbers(phrase: str, algorithm: CryptoAlgorithm) -> Wallet:
    return Wallet.from_secret_numbers(phrase, algorithm=algorithm)


def wallet_from_seed(seed: str, algorithm: CryptoAlgorithm) -> Wallet:
    return Wallet.from_seed(seed, algorithm=algorithm)


def _seed_phrase_accounts(entries: list, algorithm: CryptoAlgorithm) -> list[Account]:
    accounts = []
    for i, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict) or not entry.get("phrase"):
            log.error("%s entry %s has no phrase, skipping", C.SEED_PHRASES_ENV, i)
            continue
        name = str(entry.get("name") or f"Account{i}")
        try:
            wallet = wallet_from_secret_numbers(entry["phrase"], algorithm)
        except DERIVATION_ERRORS as e:
            log.error("Cannot derive wallet for %s: %s", name, e)
            continue
        accounts.append(Account(name, wallet))
    return accounts


def _private_key_accounts(entries: list, algorithm: CryptoAlgorithm) -> list[Account]:
    accounts = []
    for i, seed in enumerate(entries, start=1):
        try:
            wallet = wallet_from_seed(seed, algorithm)
        except DERIVATION_ERRORS as e:
            log.error("%s entry %s is not a usable seed: %s", C.PRIVATE_KEYS_ENV, i, e)
            continue
        accounts.append(Account(C.RAW_KEY_ACCOUNT_NAME, wallet))
    return accounts


def load_accounts(
    environ: Mapping[str, str] | None = None,
    algorithm: CryptoAlgorithm = CryptoAlgorithm.SECP256K1,
) -> list[Account]:
    """Named seed-phrase accounts first, then raw-key accounts, each in source order.

    Raises NoAccountsError when neither source yields a usable account.
    """
    accounts = [
        *_seed_phrase_accounts(parse_env_array(C.SEED_PHRASES_ENV, environ), algorithm),
        *_private_key_accounts(parse_env_array(C.PRIVATE_KEYS_ENV, environ), algorithm),
    ]
    if not accounts:
        raise NoAccountsError(
            f"No valid {C.SEED_PHRASES_ENV} or {C.PRIVATE_KEYS_ENV} found in the environment"
        )
    log.debug("Loaded %s account(s): %s", len(accounts), ", ".join(str(a) for a in accounts))
    return accounts
