"""Randomized delays between remote interactions."""

import random
import time
from typing import Callable


def random_delay(min_ms: int, max_ms: int,
                 sleep: Callable[[float], None] = time.sleep,
                 rng: random.Random = None) -> int:
    """
    Pause for a uniformly random number of milliseconds in [min_ms, max_ms].

    Returns:
        The delay actually used, in milliseconds
    """
    if min_ms < 0 or max_ms < min_ms:
        raise ValueError(f"Invalid delay range: [{min_ms}, {max_ms}]")
    delay_ms = (rng or random).randint(min_ms, max_ms)
    sleep(delay_ms / 1000)
    return delay_ms
