"""Player tokens and the settled-game archive (Redis backend, in-memory fallback)."""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any
from uuid import uuid4

import redis.asyncio as redis
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from config import config
from core.game.session import OutcomeRecord

logger = logging.getLogger(__name__)


class TokenSigner:
    """Sign and verify player identities using itsdangerous."""

    def __init__(self, secret_key: str | None = None) -> None:
        """Initialize the signer with a secret key."""
        self._secret_key = secret_key or config.security.secret_key
        self._serializer = URLSafeTimedSerializer(self._secret_key, salt="player-token")

    def sign(self, player_id: str) -> str:
        """Create a signed token from a player ID."""
        return self._serializer.dumps(player_id)

    def unsign(self, token: str, max_age: int | None = None) -> str | None:
        """
        Verify and extract the player ID from a signed token.

        Args:
            token: The signed token to verify
            max_age: Maximum age in seconds (defaults to token_max_age)

        Returns:
            The player ID if valid, None otherwise
        """
        max_age = max_age or config.security.token_max_age
        try:
            return self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None


# Global signer instance
_token_signer: TokenSigner | None = None


def get_token_signer() -> TokenSigner:
    """Get or create the token signer."""
    global _token_signer
    if _token_signer is None:
        _token_signer = TokenSigner()
    return _token_signer


def issue_player() -> tuple[str, str]:
    """Create a new player identity and its signed token."""
    player_id = str(uuid4())
    return player_id, get_token_signer().sign(player_id)


def resolve_player(token: str) -> str | None:
    """Return the player ID behind a token, or None if it is invalid."""
    return get_token_signer().unsign(token)


class ArchiveStore(ABC):
    """Abstract store of settled outcome records, keyed by player."""

    @abstractmethod
    async def get(self, key: str) -> list[dict[str, Any]] | None:
        """Get the archived records for a key."""
        ...

    @abstractmethod
    async def set(self, key: str, data: list[dict[str, Any]], ttl: int | None = None) -> None:
        """Replace the archived records for a key."""
        ...

    @abstractmethod
    async def append(self, key: str, record: dict[str, Any], ttl: int | None = None) -> None:
        """
        Append one record to a key's archive and refresh its TTL.

        Must be atomic: concurrent appends to the same key never lose a record.
        """
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a key."""
        ...

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a key exists."""
        ...


class InMemoryArchiveStore(ArchiveStore):
    """In-memory archive for local development and tests."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[list[dict[str, Any]], datetime]] = {}

    def _live(self, key: str) -> list[dict[str, Any]] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        data, expiry = entry
        if expiry < datetime.now():
            del self._entries[key]
            return None
        return data

    def _expiry(self, ttl: int | None) -> datetime:
        return datetime.now() + timedelta(seconds=ttl or config.archive_ttl)

    async def get(self, key: str) -> list[dict[str, Any]] | None:
        data = self._live(key)
        return None if data is None else list(data)

    async def set(
        self,
        key: str,
        data: list[dict[str, Any]],
        ttl: int | None = None,
    ) -> None:
        self._entries[key] = (list(data), self._expiry(ttl))

    async def append(
        self,
        key: str,
        record: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        # No await between read and write, so the event loop cannot interleave
        data = self._live(key) or []
        data.append(record)
        self._entries[key] = (data, self._expiry(ttl))

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def exists(self, key: str) -> bool:
        return self._live(key) is not None

    async def cleanup_expired(self) -> int:
        """Remove expired entries."""
        now = datetime.now()
        expired = [key for key, (_, expiry) in self._entries.items() if expiry < now]
        for key in expired:
            del self._entries[key]
        return len(expired)


class RedisArchiveStore(ArchiveStore):
    """Redis-backed archive: one list of JSON records per player."""

    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client
        self._prefix = "blackjack:archive:"

    def _key(self, key: str) -> str:
        """Get Redis key for an archive entry."""
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> list[dict[str, Any]] | None:
        items = await self._redis.lrange(self._key(key), 0, -1)
        if not items:
            return None
        return [json.loads(item) for item in items]

    async def set(
        self,
        key: str,
        data: list[dict[str, Any]],
        ttl: int | None = None,
    ) -> None:
        redis_key = self._key(key)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.delete(redis_key)
            if data:
                pipe.rpush(redis_key, *(json.dumps(item) for item in data))
                pipe.expire(redis_key, ttl or config.archive_ttl)
            await pipe.execute()

    async def append(
        self,
        key: str,
        record: dict[str, Any],
        ttl: int | None = None,
    ) -> None:
        redis_key = self._key(key)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.rpush(redis_key, json.dumps(record))
            pipe.expire(redis_key, ttl or config.archive_ttl)
            await pipe.execute()

    async def delete(self, key: str) -> None:
        await self._redis.delete(self._key(key))

    async def exists(self, key: str) -> bool:
        return await self._redis.exists(self._key(key)) > 0


# Global archive store instance
_archive_store: ArchiveStore | None = None


async def get_archive_store() -> ArchiveStore:
    """Get or create the archive store."""
    global _archive_store

    if _archive_store is not None:
        return _archive_store

    try:
        redis_client = redis.from_url(config.redis.url)
        await redis_client.ping()
        _archive_store = RedisArchiveStore(redis_client)
        return _archive_store
    except (redis.ConnectionError, redis.TimeoutError, OSError) as exc:
        logger.warning("Redis unavailable at %s (%s), archiving in memory", config.redis.url, exc)

    _archive_store = InMemoryArchiveStore()
    return _archive_store


def set_archive_store(store: ArchiveStore | None) -> None:
    """Replace the global archive store (None resets to lazy discovery)."""
    global _archive_store
    _archive_store = store


async def archive_outcome(record: OutcomeRecord) -> None:
    """Append a settled outcome to its player's archive."""
    store = await get_archive_store()
    await store.append(record.player, record.to_dict())


async def load_history(player: str) -> list[OutcomeRecord]:
    """Archived outcomes for a player, oldest first."""
    store = await get_archive_store()
    return [OutcomeRecord.from_dict(r) for r in await store.get(player) or []]
