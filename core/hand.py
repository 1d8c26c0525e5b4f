"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, NamedTuple

from core.cards import Card
from core.rules import ACE_HIGH_VALUE, ACE_LOW_VALUE, BLACKJACK_VALUE


class HandValue(NamedTuple):
    """Score of a hand after ace demotion."""

    total: int
    is_bust: bool
    is_blackjack: bool
    is_soft: bool


def evaluate(cards: Iterable[Card]) -> HandValue:
    """
    Score a sequence of cards.

    Every ace starts at 11; while the total exceeds 21 and an ace is still
    counted as 11, one ace is demoted to 1.
    """
    cards = list(cards)
    total = 0
    soft_aces = 0

    for card in cards:
        total += card.value
        if card.is_ace:
            soft_aces += 1

    while total > BLACKJACK_VALUE and soft_aces > 0:
        total -= ACE_HIGH_VALUE - ACE_LOW_VALUE
        soft_aces -= 1

    return HandValue(
        total=total,
        is_bust=total > BLACKJACK_VALUE,
        is_blackjack=len(cards) == 2 and total == BLACKJACK_VALUE,
        is_soft=soft_aces > 0,
    )


@dataclass
class Hand:
    """An ordered hand of cards with value calculation."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def copy(self) -> "Hand":
        """Return an independent copy of this hand."""
        return Hand(cards=list(self.cards))

    @property
    def evaluation(self) -> HandValue:
        """Full evaluation of the hand."""
        return evaluate(self.cards)

    @property
    def value(self) -> int:
        """Best total for the hand."""
        return self.evaluation.total

    @property
    def is_soft(self) -> bool:
        """Check if the hand has an ace still counted as 11."""
        return self.evaluation.is_soft

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return self.evaluation.is_blackjack

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.evaluation.is_bust

    @property
    def ranks(self) -> list[int]:
        """Card ranks (1..13) in draw order."""
        return [card.rank.value for card in self.cards]

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        value_str = f"({self.value})"
        if self.is_soft:
            value_str = f"(soft {self.value})"
        if self.is_blackjack:
            value_str = "(BLACKJACK)"
        if self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"


class Outcome(Enum):
    """Result of a settled session, from the player's side."""

    PLAYER_WIN = "PlayerWin"
    PLAYER_LOSS = "PlayerLoss"
    PUSH = "Push"

    def __str__(self) -> str:
        return self.value


def determine_outcome(player: HandValue, dealer: HandValue) -> Outcome:
    """
    Decide the outcome of a session.

    The checks run in a fixed order: a busted player loses even when the
    dealer has also busted.
    """
    if player.is_bust:
        return Outcome.PLAYER_LOSS
    if dealer.is_bust:
        return Outcome.PLAYER_WIN
    if player.total > dealer.total:
        return Outcome.PLAYER_WIN
    if player.total == dealer.total:
        return Outcome.PUSH
    return Outcome.PLAYER_LOSS
