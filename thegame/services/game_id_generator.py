"""Short, human-typeable game ids.

Six characters from 0-9A-Z (36^6 ~ 2.1 billion codes). A candidate is checked
against the store and retried on collision; after MAX_ATTEMPTS a code with a
time-based suffix is returned without checking.
"""

import logging
import random
import string
from datetime import datetime

from thegame.services.game_store import GameStore

ID_LENGTH = 6
MAX_ATTEMPTS = 10
CHARACTERS = string.digits + string.ascii_uppercase


def generate_random_code(rng: random.Random) -> str:
    return "".join(rng.choice(CHARACTERS) for _ in range(ID_LENGTH))


def to_base36(number: int) -> str:
    digits = []
    while True:
        number, remainder = divmod(number, 36)
        digits.append(CHARACTERS[remainder])
        if number == 0:
            break
    return "".join(reversed(digits))


def fallback_code(rng: random.Random, now: datetime) -> str:
    """Four random characters followed by the last two base-36 digits of the time in ms."""
    millis = int(now.timestamp() * 1000)
    return generate_random_code(rng)[:4] + to_base36(millis)[-2:].rjust(2, "0")


async def generate_unique_id(store: GameStore, rng: random.Random, now: datetime) -> str:
    """Generate a game id not yet used in the store.

    Args:
        store (GameStore): Store to check candidates against
        rng (random.Random): Random source
        now (datetime): Used for the fallback suffix

    Returns:
        str: A 6-character game id
    """
    for _ in range(MAX_ATTEMPTS):
        candidate = generate_random_code(rng)
        if await store.find(candidate) is None:
            return candidate
    logging.warning(f"Failed to generate unique game id after {MAX_ATTEMPTS} attempts")
    return fallback_code(rng, now)
