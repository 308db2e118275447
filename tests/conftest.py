import random
from datetime import datetime, timezone

import pytest

from thegame.services.game_actions import GameActions
from thegame.services.game_store import InMemoryGameStore

CREATED_AT = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
ACTED_AT = datetime(2026, 1, 1, 12, 5, tzinfo=timezone.utc)


@pytest.fixture
def store():
    return InMemoryGameStore()


@pytest.fixture
def actions(store):
    return GameActions(store, rng=random.Random(7), clock=lambda: ACTED_AT)
