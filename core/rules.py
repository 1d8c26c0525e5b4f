"""Table policy: stake, payout and dealer stand constants."""

from dataclasses import dataclass

from config import TableConfig

BLACKJACK_VALUE = 21
FACE_CARD_VALUE = 10
ACE_HIGH_VALUE = 11
ACE_LOW_VALUE = 1


@dataclass(frozen=True)
class TableRules:
    """
    Betting and dealer policy for one table.

    All amounts are integer minor units. A winner receives ``winning_payout``
    (stake included); a push returns ``required_bet``; a loser receives nothing.
    """

    # Betting
    required_bet: int = 100
    winning_payout: int = 200

    # Dealer stands somewhere in [min_dealer_stand, min_dealer_stand + range - 1]
    min_dealer_stand: int = 17
    dealer_stand_range: int = 5

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.required_bet < 1:
            raise ValueError("required_bet must be at least 1")
        if self.winning_payout < self.required_bet:
            raise ValueError("winning_payout must be at least required_bet")
        if self.dealer_stand_range < 1:
            raise ValueError("dealer_stand_range must be at least 1")
        if not 2 <= self.min_dealer_stand <= BLACKJACK_VALUE:
            raise ValueError(f"min_dealer_stand must be between 2 and {BLACKJACK_VALUE}")
        if self.max_dealer_stand > BLACKJACK_VALUE:
            raise ValueError(f"Dealer stand threshold cannot exceed {BLACKJACK_VALUE}")

    @property
    def reserve_floor(self) -> int:
        """Minimum balance the house must hold to accept a game."""
        return self.winning_payout

    @property
    def max_dealer_stand(self) -> int:
        """Highest stand threshold the dealer can draw."""
        return self.min_dealer_stand + self.dealer_stand_range - 1

    def stand_threshold(self, random_value: int) -> int:
        """Map a raw random value onto a dealer stand threshold."""
        return (random_value % self.dealer_stand_range) + self.min_dealer_stand

    @classmethod
    def from_config(cls, table: TableConfig) -> "TableRules":
        """Build rules from the environment-backed table configuration."""
        return cls(
            required_bet=table.required_bet,
            winning_payout=table.winning_payout,
            min_dealer_stand=table.min_dealer_stand,
            dealer_stand_range=table.dealer_stand_range,
        )

    @classmethod
    def fixed_stand(cls, stand_on: int = 17, **kwargs: int) -> "TableRules":
        """Rules where the dealer always stands on the same total."""
        return cls(min_dealer_stand=stand_on, dealer_stand_range=1, **kwargs)
