"""Tests for Card and Deck classes."""

import pytest

from core.cards import DECK_SIZE, Card, Deck, Rank, Suit
from core.errors import DeckExhausted


class TestRank:
    """Tests for the Rank enum."""

    def test_rank_domain(self):
        """Ranks cover 1..13 with the ace at 1."""
        assert [r.value for r in Rank] == list(range(1, 14))
        assert Rank.ACE.value == 1

    def test_number_card_values(self):
        """Number cards are worth their face value."""
        for value in range(2, 11):
            assert Rank(value).blackjack_value == value

    def test_face_card_values(self):
        """J, Q and K are worth 10."""
        assert Rank.JACK.blackjack_value == 10
        assert Rank.QUEEN.blackjack_value == 10
        assert Rank.KING.blackjack_value == 10

    def test_ace_high_value(self):
        """Aces start at 11; demotion happens in hand evaluation."""
        assert Rank.ACE.blackjack_value == 11
        assert Rank.ACE.is_ace

    def test_rank_strings(self):
        """Test rank string representations."""
        assert str(Rank.ACE) == "A"
        assert str(Rank.TEN) == "10"
        assert str(Rank.KING) == "K"


class TestCard:
    """Tests for the Card class."""

    def test_card_is_immutable(self):
        """Cards are frozen dataclasses."""
        card = Card(Rank.ACE, Suit.SPADES)
        with pytest.raises(AttributeError):
            card.rank = Rank.KING

    def test_card_str(self):
        """Test card string representation."""
        assert str(Card(Rank.ACE, Suit.SPADES)) == "A♠"
        assert str(Card(Rank.TEN, Suit.HEARTS)) == "10♥"

    def test_index_layout(self):
        """Index is suit-major: clubs 0..12, diamonds 13..25, and so on."""
        assert Card(Rank.ACE, Suit.CLUBS).index == 0
        assert Card(Rank.KING, Suit.CLUBS).index == 12
        assert Card(Rank.ACE, Suit.DIAMONDS).index == 13
        assert Card(Rank.KING, Suit.SPADES).index == 51

    def test_from_index_covers_every_card_once(self):
        """The 52 indices map onto 52 distinct cards, 4 of each rank."""
        cards = [Card.from_index(i) for i in range(DECK_SIZE)]
        assert len(set(cards)) == DECK_SIZE
        for rank in Rank:
            assert sum(1 for c in cards if c.rank == rank) == 4

    def test_from_index_rejects_out_of_range(self):
        """Indices outside 0..51 are invalid."""
        with pytest.raises(ValueError):
            Card.from_index(52)
        with pytest.raises(ValueError):
            Card.from_index(-1)

    def test_from_string(self):
        """Test parsing cards from strings."""
        assert Card.from_string("AS") == Card(Rank.ACE, Suit.SPADES)
        assert Card.from_string("10h") == Card(Rank.TEN, Suit.HEARTS)
        assert Card.from_string("T♦") == Card(Rank.TEN, Suit.DIAMONDS)
        assert Card.from_string("qc") == Card(Rank.QUEEN, Suit.CLUBS)

    def test_from_string_invalid(self):
        """Test invalid card strings raise."""
        with pytest.raises(ValueError):
            Card.from_string("X")
        with pytest.raises(ValueError):
            Card.from_string("1S")
        with pytest.raises(ValueError):
            Card.from_string("AX")


class TestDeck:
    """Tests for the per-session Deck."""

    def test_new_deck_is_full(self, deck):
        """A fresh deck holds all 52 cards."""
        assert len(deck) == DECK_SIZE
        assert deck.cards_dealt == 0

    def test_draw_removes_card(self, deck):
        """Drawn cards leave the deck."""
        card = deck.draw(0)
        assert card == Card.from_index(0)
        assert card not in deck
        assert len(deck) == DECK_SIZE - 1

    def test_draw_uses_value_modulo_remaining(self, deck):
        """The random value picks a position among the remaining cards."""
        assert deck.draw(DECK_SIZE + 5) == Card.from_index(5)
        # Index 5 is gone, so position 5 is now index 6
        assert deck.draw(5) == Card.from_index(6)

    def test_never_repeats(self, deck, rng):
        """Drawing the whole deck yields every card exactly once."""
        drawn = [deck.draw(rng.getrandbits(64)) for _ in range(DECK_SIZE)]
        assert len(set(drawn)) == DECK_SIZE

    def test_exhausted_deck_raises(self, deck):
        """Drawing from an empty deck raises DeckExhausted."""
        for _ in range(DECK_SIZE):
            deck.draw(0)
        with pytest.raises(DeckExhausted):
            deck.draw(0)

    def test_negative_value_rejected(self, deck):
        """Random values must be non-negative."""
        with pytest.raises(ValueError):
            deck.draw(-1)
        assert len(deck) == DECK_SIZE

    def test_copy_is_independent(self, deck):
        """Drawing from a copy leaves the original untouched."""
        clone = deck.copy()
        clone.draw(0)
        assert len(deck) == DECK_SIZE
        assert len(clone) == DECK_SIZE - 1

    def test_restore_from_remaining(self):
        """A deck can be rebuilt from its remaining indices."""
        deck = Deck([3, 1, 2, 2])
        assert deck.remaining_indices == [1, 2, 3]
        with pytest.raises(ValueError):
            Deck([60])
