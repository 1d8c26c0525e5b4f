"""Card and Deck classes - immutable cards drawn from a per-session deck."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

from core.errors import DeckExhausted
from core.rules import ACE_HIGH_VALUE, FACE_CARD_VALUE

DECK_SIZE = 52
RANKS_PER_SUIT = 13


class Suit(Enum):
    """Card suits, valued by their symbol. Suit never affects a card's value."""

    CLUBS = "♣"
    DIAMONDS = "♦"
    HEARTS = "♥"
    SPADES = "♠"

    def __str__(self) -> str:
        return self.value

    @property
    def position(self) -> int:
        """Order of the suit within the 52-card universe (0..3)."""
        return _SUIT_ORDER.index(self)

    @classmethod
    def parse(cls, text: str) -> "Suit":
        """Accept a symbol or the first letter of the suit name."""
        for suit in cls:
            if text in (suit.value, suit.name[0]):
                return suit
        raise ValueError(f"Invalid suit: {text}")


_SUIT_ORDER = list(Suit)


class Rank(Enum):
    """Card ranks 1..13; the ace is rank 1."""

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    def __str__(self) -> str:
        if self.name in ("ACE", "JACK", "QUEEN", "KING"):
            return self.name[0]
        return str(self.value)

    @property
    def blackjack_value(self) -> int:
        """Point value before any ace demotion: ace 11, ten and faces 10."""
        if self is Rank.ACE:
            return ACE_HIGH_VALUE
        return min(self.value, FACE_CARD_VALUE)

    @property
    def is_ace(self) -> bool:
        return self is Rank.ACE

    @classmethod
    def parse(cls, text: str) -> "Rank":
        """Accept '2'..'10', 'T', 'J', 'Q', 'K' or 'A'."""
        if text == "T":
            return cls.TEN
        for rank in cls:
            if str(rank) == text:
                return rank
        raise ValueError(f"Invalid rank: {text}")


@dataclass(frozen=True, slots=True)
class Card:
    """A single card of the 52-card universe."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        return self.rank.is_ace

    @property
    def index(self) -> int:
        """Position of this card in the 52-card universe (0..51)."""
        return self.suit.position * RANKS_PER_SUIT + self.rank.value - 1

    @classmethod
    def from_index(cls, index: int) -> "Card":
        """Create the card at a position in the 52-card universe."""
        if not 0 <= index < DECK_SIZE:
            raise ValueError(f"Card index must be between 0 and {DECK_SIZE - 1}: {index}")
        suit_position, rank_offset = divmod(index, RANKS_PER_SUIT)
        return cls(Rank(rank_offset + 1), _SUIT_ORDER[suit_position])

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh' or '10d'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")
        return cls(Rank.parse(s[:-1]), Suit.parse(s[-1]))


class Deck:
    """
    The 52-card universe of a single session.

    Cards are never repeated: each draw removes the chosen card from the
    remaining set. Which card is chosen is decided entirely by the random
    value handed to ``draw``, so the deck holds no entropy of its own.
    """

    def __init__(self, remaining: Iterable[int] | None = None) -> None:
        """
        Initialize a deck.

        Args:
            remaining: Card indices still in the deck (defaults to all 52)
        """
        if remaining is None:
            self._remaining = list(range(DECK_SIZE))
        else:
            self._remaining = sorted(set(remaining))
            if any(not 0 <= i < DECK_SIZE for i in self._remaining):
                raise ValueError("Deck contains an invalid card index")

    def draw(self, random_value: int) -> Card:
        """
        Draw one card chosen by a random value.

        Args:
            random_value: Non-negative integer from the randomness provider

        Raises:
            DeckExhausted: If every card has already been drawn
        """
        if not self._remaining:
            raise DeckExhausted("Cannot draw from an exhausted deck")
        if random_value < 0:
            raise ValueError("random_value must be non-negative")
        index = self._remaining.pop(random_value % len(self._remaining))
        return Card.from_index(index)

    def copy(self) -> "Deck":
        """Return an independent copy of this deck."""
        return Deck(self._remaining)

    def __contains__(self, card: object) -> bool:
        return isinstance(card, Card) and card.index in self._remaining

    def __len__(self) -> int:
        return len(self._remaining)

    def __iter__(self) -> Iterator[Card]:
        return (Card.from_index(i) for i in self._remaining)

    @property
    def remaining_indices(self) -> list[int]:
        """Sorted indices of the cards still in the deck."""
        return list(self._remaining)

    @property
    def cards_remaining(self) -> int:
        return len(self._remaining)

    @property
    def cards_dealt(self) -> int:
        return DECK_SIZE - len(self._remaining)
