import json
import os
import tomllib
from pathlib import Path

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveFloat,
    PositiveInt,
    ValidationError,
    model_validator,
)
from xrpl import CryptoAlgorithm

import disburse.constants as C
from disburse.errors import ConfigError

pkg_root = Path(__file__).parent
config_file = pkg_root / "config.toml"


def _key(name: str, camel: str):
    # config.json files use camelCase keys
    return Field(validation_alias=AliasChoices(name, camel))


class RunConfig(BaseModel):
    """Amount and pacing bounds for one run. Amounts are XRP, delays are milliseconds."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    min_amount: PositiveFloat = _key("min_amount", "minAmount")
    max_amount: PositiveFloat = _key("max_amount", "maxAmount")
    min_delay: NonNegativeInt = _key("min_delay", "minDelay")
    max_delay: NonNegativeInt = _key("max_delay", "maxDelay")
    delay_each_account: NonNegativeInt = _key("delay_each_account", "delayEachAccount")

    @model_validator(mode="after")
    def _check_bounds(self) -> "RunConfig":
        if self.min_amount > self.max_amount:
            raise ValueError(f"min_amount ({self.min_amount}) exceeds max_amount ({self.max_amount})")
        if self.min_delay > self.max_delay:
            raise ValueError(f"min_delay ({self.min_delay}) exceeds max_delay ({self.max_delay})")
        return self


class RippledConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = "http://localhost:5005"
    algorithm: CryptoAlgorithm = CryptoAlgorithm.SECP256K1


class TimeoutConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    rpc: PositiveFloat = C.RPC_TIMEOUT
    submit: PositiveFloat = C.SUBMIT_TIMEOUT
    probe_retries: PositiveInt = C.PROBE_RETRIES
    probe_delay: NonNegativeFloat = C.PROBE_DELAY


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    run: RunConfig
    rippled: RippledConfig = RippledConfig()
    timeout: TimeoutConfig = TimeoutConfig()


def _read(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    try:
        if path.suffix == ".json":
            return json.loads(text)
        return tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e


def load_settings(path: Path | str | None = None) -> Settings:
    """Load settings from a TOML (or JSON) file.

    The file is looked up in order: the ``path`` argument, the DISBURSE_CONFIG
    environment variable, then the config.toml shipped with the package.
    A file without a ``[run]`` table is read as a flat run section, which is
    the layout of a plain config.json. RPC_URL, when set, overrides
    ``rippled.url``.
    """
    path = Path(path or os.getenv(C.CONFIG_ENV) or config_file)
    data = _read(path)
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must hold a table of settings")
    if "run" not in data:
        data = {"run": data}
    if rpc_url := os.getenv(C.RPC_URL_ENV):
        data["rippled"] = {**data.get("rippled", {}), "url": rpc_url}
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {path}:\n{e}") from e
