"""Tests for hand evaluation and outcome determination."""

from hypothesis import given

from conftest import hand_strategy, make_hand
from core.hand import HandValue, Outcome, determine_outcome, evaluate


def value(total: int, cards: int = 3) -> HandValue:
    """Shorthand for a hand value with a given total."""
    return HandValue(
        total=total,
        is_bust=total > 21,
        is_blackjack=cards == 2 and total == 21,
        is_soft=False,
    )


class TestEvaluate:
    """Tests for the evaluate function."""

    def test_empty_hand(self):
        """Test empty hand evaluation."""
        result = evaluate([])
        assert result.total == 0
        assert not result.is_bust
        assert not result.is_blackjack

    def test_face_cards_count_ten(self):
        """J, Q and K count 10 each."""
        assert evaluate(make_hand(11, 12).cards).total == 20
        assert evaluate(make_hand(13, 5).cards).total == 15

    def test_ace_nine_is_twenty(self):
        """[A, 9] is a soft 20."""
        result = evaluate(make_hand(1, 9).cards)
        assert result.total == 20
        assert result.is_soft
        assert not result.is_bust

    def test_ace_demoted_instead_of_bust(self):
        """[A, 9, 5] counts the ace as 1 for 15."""
        result = evaluate(make_hand(1, 9, 5).cards)
        assert result.total == 15
        assert not result.is_soft
        assert not result.is_bust

    def test_multiple_aces(self):
        """Only as many aces as needed are demoted."""
        assert evaluate(make_hand(1, 1).cards).total == 12
        assert evaluate(make_hand(1, 1, 1).cards).total == 13
        assert evaluate(make_hand(1, 1, 1, 9).cards).total == 12
        assert evaluate(make_hand(1, 1, 9).cards).total == 21

    def test_blackjack(self):
        """Ace plus a ten-value card on two cards is blackjack."""
        for ten in (10, 11, 12, 13):
            result = evaluate(make_hand(1, ten).cards)
            assert result.total == 21
            assert result.is_blackjack

    def test_three_card_21_is_not_blackjack(self):
        """Test that 21 with 3+ cards is not blackjack."""
        result = evaluate(make_hand(7, 7, 7).cards)
        assert result.total == 21
        assert not result.is_blackjack

    def test_bust(self):
        """[10, 9, 5] busts at 24."""
        result = evaluate(make_hand(10, 9, 5).cards)
        assert result.total == 24
        assert result.is_bust

    def test_hand_properties_match_evaluate(self):
        """Hand delegates to evaluate."""
        hand = make_hand(1, 6)
        assert hand.value == 17
        assert hand.is_soft
        assert not hand.is_busted
        assert hand.ranks == [1, 6]
        assert str(hand).endswith("(soft 17)")

    @given(hand_strategy())
    def test_total_never_exceeds_21_while_an_ace_is_soft(self, hand):
        """Soft hands are never bust."""
        result = evaluate(hand.cards)
        if result.is_soft:
            assert result.total <= 21

    @given(hand_strategy())
    def test_total_is_hard_sum_plus_optional_ten(self, hand):
        """The total is the all-aces-low sum, plus 10 when one ace stays high."""
        hard = sum(1 if c.is_ace else c.value for c in hand.cards)
        result = evaluate(hand.cards)
        assert result.total in (hard, hard + 10)
        assert result.is_bust == (result.total > 21)

    @given(hand_strategy())
    def test_evaluate_is_deterministic(self, hand):
        """Evaluating twice gives the same answer."""
        assert evaluate(hand.cards) == evaluate(list(hand.cards))


class TestDetermineOutcome:
    """Tests for the outcome decision table."""

    def test_player_bust_loses(self):
        """Player bust loses against a standing dealer."""
        assert determine_outcome(value(24), value(18)) == Outcome.PLAYER_LOSS

    def test_player_bust_loses_even_if_dealer_busts(self):
        """Player bust takes precedence over dealer bust."""
        assert determine_outcome(value(22), value(25)) == Outcome.PLAYER_LOSS

    def test_dealer_bust_player_wins(self):
        """Dealer bust with a standing player is a win."""
        assert determine_outcome(value(12), value(23)) == Outcome.PLAYER_WIN

    def test_higher_total_wins(self):
        """Higher total wins."""
        assert determine_outcome(value(20), value(19)) == Outcome.PLAYER_WIN

    def test_equal_totals_push(self):
        """Equal totals push."""
        assert determine_outcome(value(20), value(20)) == Outcome.PUSH

    def test_blackjack_against_three_card_21_pushes(self):
        """Only totals matter: a natural ties a three-card 21."""
        assert determine_outcome(value(21, cards=2), value(21)) == Outcome.PUSH

    def test_lower_total_loses(self):
        """Lower total loses."""
        assert determine_outcome(value(19), value(21)) == Outcome.PLAYER_LOSS

    @given(hand_strategy(), hand_strategy())
    def test_bust_player_always_loses(self, player, dealer):
        """Whatever the dealer holds, a busted player loses."""
        player_value = evaluate(player.cards)
        if player_value.is_bust:
            assert determine_outcome(player_value, evaluate(dealer.cards)) == Outcome.PLAYER_LOSS
