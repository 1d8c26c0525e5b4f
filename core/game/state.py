"""Session state enumeration."""

from enum import Enum, auto


class SessionState(Enum):
    """
    Session state machine states.

    Flow: OPEN → PLAYER_TURN → DEALER_TURN → SETTLED
    A player who busts goes straight from PLAYER_TURN to SETTLED.
    """

    # Created, opening cards not dealt yet
    OPEN = auto()

    # Player may hit or stand
    PLAYER_TURN = auto()

    # Dealer policy is drawing
    DEALER_TURN = auto()

    # Outcome decided and funds moved (terminal)
    SETTLED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[SessionState, list[SessionState]] = {
    SessionState.OPEN: [SessionState.PLAYER_TURN],
    SessionState.PLAYER_TURN: [
        SessionState.PLAYER_TURN,
        SessionState.DEALER_TURN,
        SessionState.SETTLED,  # Player busts
    ],
    SessionState.DEALER_TURN: [SessionState.SETTLED],
    SessionState.SETTLED: [],  # Terminal state
}


def is_valid_transition(from_state: SessionState, to_state: SessionState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
