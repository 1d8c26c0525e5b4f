"""Pytest fixtures for blackjack escrow tests."""

from collections import deque
from dataclasses import dataclass
from random import Random

import pytest

from core.cards import DECK_SIZE, RANKS_PER_SUIT, Card, Deck, Rank, Suit
from core.game import GameLedger
from core.hand import Hand
from core.randomness import RandomnessProvider, SeededRandomness
from core.rules import TableRules

OWNER = "owner"
PLAYER = "alice"


@dataclass(frozen=True)
class Threshold:
    """Scripted dealer stand threshold."""

    value: int


class RiggedRandomness(RandomnessProvider):
    """
    Provider that deals a scripted sequence.

    Script entries are card ranks (1..13) for draws and ``Threshold`` for the
    dealer's stand threshold. It tracks each session's remaining cards the
    same way ``Deck`` does so it can return the position of the wanted rank.
    """

    def __init__(self, *script: int | Threshold, rules: TableRules | None = None) -> None:
        self._script = deque(script)
        self._rules = rules or TableRules()
        self._remaining: dict[str, list[int]] = {}
        self.calls = 0

    def extend(self, *script: int | Threshold) -> None:
        self._script.extend(script)

    @property
    def exhausted(self) -> bool:
        return not self._script

    def next_value(self, session) -> int:
        assert self._script, "Rigged script ran out of values"
        self.calls += 1
        item = self._script.popleft()
        if isinstance(item, Threshold):
            return item.value - self._rules.min_dealer_stand

        remaining = self._remaining.setdefault(session.session_id, list(range(DECK_SIZE)))
        for position, index in enumerate(remaining):
            if index % RANKS_PER_SUIT + 1 == item:
                del remaining[position]
                return position
        raise AssertionError(f"No card of rank {item} left in session {session.session_id}")


def make_hand(*ranks: int) -> Hand:
    """Build a hand from ranks, cycling suits."""
    suits = list(Suit)
    return Hand(cards=[Card(Rank(r), suits[i % len(suits)]) for i, r in enumerate(ranks)])


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck():
    """A full deck."""
    return Deck()


@pytest.fixture
def rules():
    """Default table rules (stake 100, payout 200)."""
    return TableRules()


@pytest.fixture
def seeded(rng):
    """Seeded randomness provider."""
    return SeededRandomness(rng)


@pytest.fixture
def rigged(rules):
    """Empty rigged provider; tests extend it with their script."""
    return RiggedRandomness(rules=rules)


@pytest.fixture
def ledger(rules, rigged):
    """A ledger funded with ten reserve floors, dealing from the rigged provider."""
    return GameLedger(
        owner=OWNER,
        rules=rules,
        randomness=rigged,
        initial_balance=rules.reserve_floor * 10,
    )


@pytest.fixture
def seeded_ledger(rules, seeded):
    """A well-funded ledger dealing from a seeded provider."""
    return GameLedger(
        owner=OWNER,
        rules=rules,
        randomness=seeded,
        initial_balance=rules.reserve_floor * 1000,
    )


# Hypothesis strategies for property-based testing
from hypothesis import strategies as st  # noqa: E402


@st.composite
def card_strategy(draw):
    """Generate a random card."""
    return Card.from_index(draw(st.integers(min_value=0, max_value=DECK_SIZE - 1)))


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=6):
    """Generate a hand of distinct cards."""
    indices = draw(
        st.lists(
            st.integers(min_value=0, max_value=DECK_SIZE - 1),
            min_size=min_cards,
            max_size=max_cards,
            unique=True,
        )
    )
    return Hand(cards=[Card.from_index(i) for i in indices])
