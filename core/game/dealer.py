"""Dealer policy: the house's automated turn."""

from enum import Enum, auto

from transitions import Machine

from core.cards import Card
from core.game.session import Session
from core.randomness import RandomnessProvider
from core.rules import TableRules

# A two-card start holding at least 2 points reaches 21 within this many draws
MAX_DEALER_DRAWS = 11


class DealerState(Enum):
    """Dealer policy states."""

    DRAWING = auto()
    STANDING = auto()


class DealerPolicy:
    """
    Draws cards for the house until a randomized stand threshold is reached.

    The threshold is drawn once, when the dealer's turn starts, and stays
    fixed for the rest of the turn. The policy works on the session it is
    given; the ledger hands it a working copy and commits the result.
    """

    STATES = [s.name.lower() for s in DealerState]

    TRANSITIONS = [
        {"trigger": "stand_down", "source": "drawing", "dest": "standing"},
    ]

    def __init__(
        self,
        rules: TableRules,
        randomness: RandomnessProvider,
        session: Session,
    ) -> None:
        if session.player_hand.is_busted:
            raise ValueError("Dealer does not play against a busted player")

        self.rules = rules
        self.randomness = randomness
        self.session = session
        self.threshold: int | None = None
        self.draws: list[Card] = []

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="drawing",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> DealerState:
        """Get current dealer state as enum."""
        return DealerState[self._machine_state.upper()]  # type: ignore

    @property
    def is_standing(self) -> bool:
        return self.state == DealerState.STANDING

    def play(self) -> list[Card]:
        """
        Run the dealer's turn to completion.

        Returns:
            The cards drawn during the turn, in order
        """
        if self.threshold is None:
            self.threshold = self.rules.stand_threshold(
                self.randomness.next_value(self.session)
            )
            self.session.dealer_threshold = self.threshold
            self._check_stand()

        while not self.is_standing:
            if len(self.draws) >= MAX_DEALER_DRAWS:
                raise RuntimeError(f"Dealer exceeded {MAX_DEALER_DRAWS} draws")
            self.step()

        return list(self.draws)

    def step(self) -> Card:
        """Draw one card for the dealer and re-evaluate."""
        if self.threshold is None or self.is_standing:
            raise RuntimeError("Dealer is not drawing")

        card = self.session.deck.draw(self.randomness.next_value(self.session))
        self.session.dealer_hand.add_card(card)
        self.draws.append(card)
        self._check_stand()
        return card

    def _check_stand(self) -> None:
        value = self.session.dealer_hand.evaluation
        if value.is_bust or value.total >= self.threshold:
            self.stand_down()
