"""Randomness providers injected into the ledger.

The ledger never owns entropy. It asks a provider for one value per card
draw and one value for the dealer's stand threshold. A provider must make
sure the values for a session are fixed before the player's stake is
locked and cannot be advanced by the caller.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import threading
from abc import ABC, abstractmethod
from random import Random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.game.session import Session

VALUE_BYTES = 8


class RandomnessProvider(ABC):
    """Source of per-session random values."""

    @abstractmethod
    def next_value(self, session: Session) -> int:
        """Return the next non-negative random value for a session."""
        ...

    def commit(self, session: Session) -> str:
        """
        Fix the session's randomness before any card is dealt.

        Returns:
            A public commitment (empty when the provider has nothing to commit)
        """
        return ""

    def reveal(self, session: Session) -> str:
        """Disclose what was committed once the session is settled."""
        return ""

    def discard(self, session: Session) -> None:
        """Forget a session whose opening was rolled back."""


class SeededRandomness(RandomnessProvider):
    """Provider backed by a ``random.Random`` stream, for simulations and tests."""

    def __init__(self, rng: Random | None = None) -> None:
        self._rng = rng or Random()
        self._lock = threading.Lock()

    def next_value(self, session: Session) -> int:
        with self._lock:
            return self._rng.getrandbits(VALUE_BYTES * 8)


def derive_value(seed: bytes, session_id: str, counter: int) -> int:
    """
    Derive the ``counter``-th value of a session from its seed.

    Exposed so a player can replay a settled session from the revealed seed.
    """
    message = f"{session_id}:{counter}".encode()
    digest = hmac.new(seed, message, hashlib.sha256).digest()
    return int.from_bytes(digest[:VALUE_BYTES], "big")


def commitment_for(seed: bytes) -> str:
    """Public commitment to a seed."""
    return hashlib.sha256(seed).hexdigest()


class CommitRevealRandomness(RandomnessProvider):
    """
    Commit/reveal provider.

    A fresh secret seed is generated when the session opens and only its
    SHA-256 digest is published. Values are HMAC-SHA256 of the session id and
    an internal counter, so the sequence is fixed at commit time. The seed is
    revealed after settlement so the deal can be verified.
    """

    def __init__(self, seed_bytes: int = 32) -> None:
        self._seed_bytes = seed_bytes
        self._seeds: dict[str, bytes] = {}
        self._counters: dict[str, int] = {}
        self._lock = threading.Lock()

    def commit(self, session: Session) -> str:
        seed = secrets.token_bytes(self._seed_bytes)
        with self._lock:
            if session.session_id in self._seeds:
                raise RuntimeError(f"Session {session.session_id} is already committed")
            self._seeds[session.session_id] = seed
            self._counters[session.session_id] = 0
        return commitment_for(seed)

    def next_value(self, session: Session) -> int:
        with self._lock:
            seed = self._seeds.get(session.session_id)
            if seed is None:
                raise RuntimeError(f"Session {session.session_id} has no committed seed")
            counter = self._counters[session.session_id]
            self._counters[session.session_id] = counter + 1
        return derive_value(seed, session.session_id, counter)

    def reveal(self, session: Session) -> str:
        with self._lock:
            seed = self._seeds.pop(session.session_id, None)
            self._counters.pop(session.session_id, None)
        return seed.hex() if seed is not None else ""

    def discard(self, session: Session) -> None:
        with self._lock:
            self._seeds.pop(session.session_id, None)
            self._counters.pop(session.session_id, None)
