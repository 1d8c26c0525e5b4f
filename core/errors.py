"""Errors raised by the game-and-ledger core.

Every error is terminal for the call that raised it: the ledger never
retries internally and never leaves a half-applied state behind.
"""


class LedgerError(Exception):
    """Base class for all core errors."""


class InsufficientBet(LedgerError):
    """The value sent with start_game is not exactly the required bet."""

    def __init__(self, value: int, required: int) -> None:
        super().__init__(f"Bet must be exactly {required}, got {value}")
        self.value = value
        self.required = required


class SessionAlreadyOpen(LedgerError):
    """The player already has an unsettled session."""

    def __init__(self, player: str, session_id: str) -> None:
        super().__init__(f"Player {player!r} already has open session {session_id}")
        self.player = player
        self.session_id = session_id


class InsolventHouse(LedgerError):
    """The house cannot guarantee the payout of a new or settling game."""


class NoActiveSession(LedgerError):
    """hit/stand was called for a session that is unknown or already settled."""


class DeckExhausted(LedgerError):
    """No card is left in the session's deck."""


class NotOwner(LedgerError):
    """A privileged operation was attempted by someone other than the owner."""


class InsufficientReserve(LedgerError):
    """A withdrawal would drop the balance below the reserve floor."""
