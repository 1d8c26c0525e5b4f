"""Monte Carlo simulation of the table from the house's side."""

from dataclasses import dataclass
from decimal import Decimal
from random import Random

from core.game.ledger import GameLedger
from core.hand import Outcome
from core.randomness import SeededRandomness
from core.rules import BLACKJACK_VALUE, TableRules

SIMULATION_OWNER = "simulation-house"
SIMULATION_PLAYER = "simulation-player"


@dataclass
class SimulationResult:
    """Aggregate result of a simulation run."""

    games: int
    wins: int
    losses: int
    pushes: int
    player_busts: int
    player_blackjacks: int
    total_staked: int
    house_net: int

    @property
    def house_edge_percent(self) -> Decimal:
        """House profit per unit staked, as a percentage."""
        if self.total_staked == 0:
            return Decimal("0")
        return Decimal(self.house_net) / Decimal(self.total_staked) * 100

    @property
    def win_rate(self) -> float:
        return self.wins / self.games if self.games else 0.0


class TableSimulator:
    """
    Play many games against a fresh ledger.

    The simulated player hits below ``stand_on`` and stands otherwise, so the
    results measure the table policy rather than any clever strategy.
    """

    def __init__(
        self,
        rules: TableRules | None = None,
        stand_on: int = 17,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a simulator.

        Args:
            rules: Table rules to simulate (defaults if not provided)
            stand_on: Player total at which the simulated player stands
            rng: Random number generator for reproducible runs
        """
        if not 2 <= stand_on <= BLACKJACK_VALUE:
            raise ValueError(f"stand_on must be between 2 and {BLACKJACK_VALUE}")
        self.rules = rules or TableRules()
        self.stand_on = stand_on
        self._rng = rng or Random()

    def run(self, games: int) -> SimulationResult:
        """Simulate ``games`` consecutive games."""
        if games < 1:
            raise ValueError("games must be at least 1")

        worst_case_loss = games * (self.rules.winning_payout - self.rules.required_bet)
        starting_balance = self.rules.reserve_floor + worst_case_loss
        ledger = GameLedger(
            owner=SIMULATION_OWNER,
            rules=self.rules,
            randomness=SeededRandomness(self._rng),
            initial_balance=starting_balance,
            history_size=games,
        )

        busts = 0
        blackjacks = 0
        for _ in range(games):
            hand = ledger.start_game(SIMULATION_PLAYER, self.rules.required_bet)
            if hand.is_blackjack:
                blackjacks += 1
            while hand.player_total < self.stand_on:
                hand = ledger.hit(hand.session_id)
                if hand.is_bust:
                    busts += 1
                    break
            else:
                ledger.stand(hand.session_id)

        history = ledger.history(SIMULATION_PLAYER)
        return SimulationResult(
            games=games,
            wins=sum(1 for r in history if r.outcome == Outcome.PLAYER_WIN),
            losses=sum(1 for r in history if r.outcome == Outcome.PLAYER_LOSS),
            pushes=sum(1 for r in history if r.outcome == Outcome.PUSH),
            player_busts=busts,
            player_blackjacks=blackjacks,
            total_staked=games * self.rules.required_bet,
            house_net=ledger.get_balance() - starting_balance,
        )
