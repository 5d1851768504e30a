"""Random draws for payment amounts and pacing delays."""

import random

from disburse.config import RunConfig

_rng = random.Random()


def draw_amount(config: RunConfig, rng: random.Random | None = None) -> float:
    """Uniform in [min_amount, max_amount). Equal bounds always give min_amount."""
    rng = rng or _rng
    lo, hi = config.min_amount, config.max_amount
    amount = lo + rng.random() * (hi - lo)
    # float rounding can land exactly on hi
    return amount if amount < hi else lo


def draw_delay_ms(config: RunConfig, rng: random.Random | None = None) -> int:
    """Whole milliseconds in [min_delay, max_delay). Equal bounds always give min_delay."""
    rng = rng or _rng
    if config.max_delay == config.min_delay:
        return config.min_delay
    return rng.randrange(config.min_delay, config.max_delay)
