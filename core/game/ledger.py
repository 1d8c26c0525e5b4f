"""Game ledger: sessions, outcomes and custody of the house balance."""

import logging
import threading
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator

from core.cards import Card
from core.errors import (
    InsolventHouse,
    InsufficientBet,
    InsufficientReserve,
    NoActiveSession,
    NotOwner,
    SessionAlreadyOpen,
)
from core.game.dealer import DealerPolicy
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.session import HandState, OutcomeRecord, Session
from core.game.state import SessionState
from core.hand import Outcome, determine_outcome
from core.randomness import CommitRevealRandomness, RandomnessProvider
from core.rules import TableRules

logger = logging.getLogger(__name__)


def payout_for(outcome: Outcome, rules: TableRules) -> int:
    """Amount returned to the player for an outcome (stake included)."""
    if outcome == Outcome.PLAYER_WIN:
        return rules.winning_payout
    if outcome == Outcome.PUSH:
        return rules.required_bet
    return 0


@dataclass
class _PlayerLock:
    lock: threading.RLock = field(default_factory=threading.RLock)
    users: int = 0


class GameLedger:
    """
    Single source of truth for outcomes and the only holder of funds.

    Every mutating call works on a copy of the session and commits the
    state transition and the fund movement together under the ledger lock,
    so a failed call leaves the balance and the session untouched.

    Solvency: a game only starts when the balance, net of the payouts owed
    to games already in flight, covers the reserve floor. A settlement that
    would take the balance below zero is refused rather than under-paid.
    """

    def __init__(
        self,
        owner: str,
        rules: TableRules | None = None,
        randomness: RandomnessProvider | None = None,
        initial_balance: int = 0,
        history_size: int = 10_000,
    ) -> None:
        """
        Initialize a ledger.

        Args:
            owner: Identity allowed to withdraw house funds (fixed for life)
            rules: Table policy (uses defaults if not provided)
            randomness: Randomness provider (commit/reveal if not provided)
            initial_balance: House funds available from the start
            history_size: Number of settled outcomes kept in memory
        """
        if not owner:
            raise ValueError("owner must be set")
        if initial_balance < 0:
            raise ValueError("initial_balance cannot be negative")

        self._owner = owner
        self.rules = rules or TableRules()
        self.randomness = randomness or CommitRevealRandomness()
        self.events = EventEmitter()

        self._balance = initial_balance
        self._liabilities = 0
        self._sessions: dict[str, Session] = {}
        self._open_by_player: dict[str, str] = {}
        self._outcomes: OrderedDict[str, OutcomeRecord] = OrderedDict()
        self._history_size = history_size

        self._lock = threading.RLock()
        self._player_locks: dict[str, _PlayerLock] = {}

    # Read-only state

    @property
    def owner(self) -> str:
        return self._owner

    def get_balance(self) -> int:
        """Total funds held, escrowed stakes included."""
        with self._lock:
            return self._balance

    @property
    def balance(self) -> int:
        return self.get_balance()

    @property
    def liabilities(self) -> int:
        """Winning payouts owed if every open session were won."""
        with self._lock:
            return self._liabilities

    @property
    def open_sessions(self) -> int:
        with self._lock:
            return len(self._sessions)

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to ledger events."""
        self.events.subscribe(handler, event_type)

    def get_session(self, session_id: str) -> HandState:
        """Public view of an unsettled session."""
        return self._active(session_id).snapshot()

    def active_session(self, player: str) -> HandState | None:
        """The player's unsettled session, if any."""
        with self._lock:
            session_id = self._open_by_player.get(player)
            if session_id is None:
                return None
            return self._sessions[session_id].snapshot()

    def get_outcome(self, session_id: str) -> OutcomeRecord | None:
        """Outcome of a settled session still held in memory."""
        with self._lock:
            return self._outcomes.get(session_id)

    def history(self, player: str | None = None) -> list[OutcomeRecord]:
        """Settled outcomes, oldest first, optionally for one player."""
        with self._lock:
            records = list(self._outcomes.values())
        if player is None:
            return records
        return [r for r in records if r.player == player]

    # House funds

    def deposit(self, amount: int, sender: str | None = None) -> int:
        """
        Add funds to the house balance.

        Returns:
            The new balance
        """
        if amount <= 0:
            raise ValueError("Deposit amount must be positive")

        with self._lock:
            self._balance += amount
            balance = self._balance

        logger.info("House deposit of %d from %s, balance %d", amount, sender or "anonymous", balance)
        self.events.emit_new(EventType.HOUSE_DEPOSIT, amount=amount, sender=sender, balance=balance)
        return balance

    def withdraw(self, caller: str, amount: int) -> int:
        """
        Withdraw house funds.

        Only the owner may withdraw. The balance left behind must cover the
        reserve floor plus the winning payout of every open game, so while
        games are in flight a withdrawal can fail even though
        ``balance - amount`` alone would clear the floor. With no open games
        the floor is exactly ``reserve_floor``.

        Raises:
            NotOwner: caller is not the owner
            InsufficientReserve: the withdrawal would break the floor above

        Returns:
            The new balance
        """
        if caller != self._owner:
            logger.warning("Withdrawal of %d refused: %s is not the owner", amount, caller)
            raise NotOwner(f"{caller!r} is not the owner")
        if amount <= 0:
            raise ValueError("Withdrawal amount must be positive")

        with self._lock:
            floor = self.rules.reserve_floor + self._liabilities
            if self._balance - amount < floor:
                raise InsufficientReserve(
                    f"Withdrawing {amount} would leave {self._balance - amount}, "
                    f"below the reserve floor of {floor}"
                )
            self._balance -= amount
            balance = self._balance

        logger.info("Owner withdrew %d, balance %d", amount, balance)
        self.events.emit_new(EventType.HOUSE_WITHDRAWAL, amount=amount, balance=balance)
        return balance

    # Game flow

    def start_game(self, player: str, value: int) -> HandState:
        """
        Escrow the stake and deal the opening hands.

        Raises:
            InsufficientBet: value is not exactly the required bet
            SessionAlreadyOpen: the player already has an unsettled session
            InsolventHouse: the house could not pay this game if it were won
        """
        if value != self.rules.required_bet:
            raise InsufficientBet(value, self.rules.required_bet)

        with self._player_lock(player):
            # Refuse before any card is dealt
            with self._lock:
                self._check_can_open(player)

            session = Session(player=player, stake=value)
            session.commitment = self.randomness.commit(session)
            dealt: list[tuple[str, Card]] = []
            try:
                for hand_name in ("player", "dealer", "player", "dealer"):
                    hand = session.player_hand if hand_name == "player" else session.dealer_hand
                    card = session.deck.draw(self.randomness.next_value(session))
                    hand.add_card(card)
                    dealt.append((hand_name, card))
                session.transition(SessionState.PLAYER_TURN)

                with self._lock:
                    self._check_can_open(player)
                    self._balance += value
                    self._liabilities += self.rules.winning_payout
                    self._sessions[session.session_id] = session
                    self._open_by_player[player] = session.session_id
                    balance = self._balance
            except Exception:
                self.randomness.discard(session)
                raise

        logger.debug(
            "Session %s opened for %s, stake %d, balance %d",
            session.session_id, player, value, balance,
        )
        self.events.emit_new(
            EventType.SESSION_OPENED,
            session_id=session.session_id,
            player=player,
            stake=value,
            commitment=session.commitment,
        )
        for position, (hand_name, card) in enumerate(dealt):
            # The dealer's second card stays face down until settlement
            face_up = position != len(dealt) - 1
            self.events.emit_new(
                EventType.CARD_DEALT,
                session_id=session.session_id,
                hand=hand_name,
                card=str(card) if face_up else "??",
            )
        return session.snapshot()

    def hit(self, session_id: str) -> HandState:
        """
        Draw one card for the player.

        A bust settles the session at once as a player loss; the dealer
        never draws.
        """
        player = self._active(session_id).player

        with self._player_lock(player):
            current = self._active(session_id)
            if current.state != SessionState.PLAYER_TURN:
                raise NoActiveSession(f"Session {session_id} is not in the player's turn")

            work = current.copy()
            card = work.deck.draw(self.randomness.next_value(work))
            work.player_hand.add_card(card)

            record = None
            if work.player_hand.is_busted:
                record = self._settle(work)
            else:
                work.transition(SessionState.PLAYER_TURN)
                with self._lock:
                    self._sessions[session_id] = work

        self.events.emit_new(
            EventType.PLAYER_HIT,
            session_id=session_id,
            card=str(card),
            hand_value=work.player_hand.value,
        )
        if record is not None:
            self.events.emit_new(
                EventType.PLAYER_BUSTS,
                session_id=session_id,
                hand_value=work.player_hand.value,
            )
            self._emit_settled(record)
        return work.snapshot()

    def stand(self, session_id: str) -> OutcomeRecord:
        """End the player's turn, play the dealer out and settle."""
        player = self._active(session_id).player

        with self._player_lock(player):
            current = self._active(session_id)
            if current.state != SessionState.PLAYER_TURN:
                raise NoActiveSession(f"Session {session_id} is not in the player's turn")

            work = current.copy()
            work.transition(SessionState.DEALER_TURN)
            policy = DealerPolicy(self.rules, self.randomness, work)
            draws = policy.play()
            record = self._settle(work)

        self.events.emit_new(
            EventType.PLAYER_STANDS,
            session_id=session_id,
            hand_value=work.player_hand.value,
        )
        self.events.emit_new(
            EventType.DEALER_THRESHOLD,
            session_id=session_id,
            threshold=policy.threshold,
        )
        for card in draws:
            self.events.emit_new(EventType.DEALER_HITS, session_id=session_id, card=str(card))
        dealer_value = work.dealer_hand.evaluation
        if dealer_value.is_bust:
            self.events.emit_new(EventType.DEALER_BUSTS, session_id=session_id)
        else:
            self.events.emit_new(
                EventType.DEALER_STANDS,
                session_id=session_id,
                hand_value=dealer_value.total,
            )
        self._emit_settled(record)
        return record

    # Internals

    @contextmanager
    def _player_lock(self, player: str) -> Iterator[None]:
        """Serialize one player's calls; the lock is dropped once nobody holds or awaits it."""
        with self._lock:
            entry = self._player_locks.get(player)
            if entry is None:
                entry = self._player_locks[player] = _PlayerLock()
            entry.users += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._lock:
                entry.users -= 1
                if entry.users == 0:
                    del self._player_locks[player]

    def _active(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise NoActiveSession(f"No open session {session_id}")
        return session

    def _check_can_open(self, player: str) -> None:
        open_id = self._open_by_player.get(player)
        if open_id is not None:
            raise SessionAlreadyOpen(player, open_id)

        available = self._balance - self._liabilities
        if available < self.rules.reserve_floor:
            logger.warning(
                "Refusing game for %s: available %d below reserve floor %d",
                player, available, self.rules.reserve_floor,
            )
            raise InsolventHouse(
                f"House holds {available} uncommitted, needs {self.rules.reserve_floor}"
            )

    def _settle(self, work: Session) -> OutcomeRecord:
        """Apply the outcome rule to a finished working copy and move funds."""
        player_value = work.player_hand.evaluation
        dealer_value = work.dealer_hand.evaluation
        outcome = determine_outcome(player_value, dealer_value)
        payout = payout_for(outcome, self.rules)

        with self._lock:
            if self._balance - payout < 0:
                logger.error(
                    "Settlement of %s refused: payout %d exceeds balance %d",
                    work.session_id, payout, self._balance,
                )
                raise InsolventHouse(
                    f"Payout {payout} exceeds the house balance of {self._balance}"
                )

            work.transition(SessionState.SETTLED)
            self._balance -= payout
            self._liabilities -= self.rules.winning_payout
            del self._sessions[work.session_id]
            del self._open_by_player[work.player]

            record = OutcomeRecord(
                session_id=work.session_id,
                player=work.player,
                outcome=outcome,
                player_hand=work.player_hand.ranks,
                dealer_hand=work.dealer_hand.ranks,
                player_total=player_value.total,
                dealer_total=dealer_value.total,
                stake=work.stake,
                payout=payout,
                dealer_threshold=work.dealer_threshold,
                commitment=work.commitment,
                reveal=self.randomness.reveal(work),
            )
            self._outcomes[work.session_id] = record
            while len(self._outcomes) > self._history_size:
                self._outcomes.popitem(last=False)
            balance = self._balance

        logger.debug(
            "Session %s settled: %s, player %d vs dealer %d, payout %d, balance %d",
            record.session_id, record.outcome, record.player_total,
            record.dealer_total, payout, balance,
        )
        return record

    def _emit_settled(self, record: OutcomeRecord) -> None:
        self.events.emit_new(EventType.SESSION_SETTLED, record=record)
