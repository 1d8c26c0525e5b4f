"""Process-wide ledger used by the HTTP routes."""

import logging

from config import config
from core.game import GameEvent, GameLedger
from core.randomness import CommitRevealRandomness
from core.rules import TableRules

logger = logging.getLogger(__name__)

# Global ledger instance
_ledger: GameLedger | None = None


def _log_event(event: GameEvent) -> None:
    logger.debug("%s", event)


def build_ledger() -> GameLedger:
    """Create a ledger from the environment configuration."""
    ledger = GameLedger(
        owner=config.house.owner_id,
        rules=TableRules.from_config(config.table),
        randomness=CommitRevealRandomness(),
        initial_balance=config.table.house_seed_funds,
    )
    ledger.subscribe(_log_event)
    return ledger


def get_ledger() -> GameLedger:
    """Get or create the ledger."""
    global _ledger
    if _ledger is None:
        _ledger = build_ledger()
    return _ledger


def set_ledger(ledger: GameLedger | None) -> None:
    """Replace the global ledger (None rebuilds it from configuration on next use)."""
    global _ledger
    _ledger = ledger
