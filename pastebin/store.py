"""
Paste storage on top of Redis (or an in-process stand-in for development).
Handles paste creation, expiry-aware lookup, deletion and counting.
"""
import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Union

from redis import Redis
from redis.exceptions import RedisError

from pastebin.errors import EmptyText, Expired, InvalidTTL, NotFound, SlugExhausted, StorageUnavailable
from pastebin.slugs import SlugGenerator

logger = logging.getLogger(__name__)

KEY_PREFIX = "paste:"
EXPIRY_INDEX = "pastes:expiry"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MICROSECOND = timedelta(microseconds=1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def expiry_score(moment: datetime) -> int:
    """Whole microseconds since the epoch; exact, unlike datetime.timestamp()."""
    return (moment - _EPOCH) // _MICROSECOND


class MemoryClient:
    """
    In-process store speaking the subset of Redis commands PasteStore uses.

    Every command runs under one lock, so it is safe to share between the
    request threads, the deletion worker and the reaper.
    """

    def __init__(self):
        self.strings: Dict[str, str] = {}
        self.zsets: Dict[str, Dict[str, float]] = {}
        self._lock = threading.Lock()

    def set(self, name: str, value: str, nx: bool = False) -> Optional[bool]:
        with self._lock:
            if nx and name in self.strings:
                return None
            self.strings[name] = value
            return True

    def get(self, name: str) -> Optional[str]:
        with self._lock:
            return self.strings.get(name)

    def delete(self, *names: str) -> int:
        with self._lock:
            return sum(1 for name in names if self.strings.pop(name, None) is not None)

    def zadd(self, name: str, mapping: Dict[str, float]) -> int:
        with self._lock:
            zset = self.zsets.setdefault(name, {})
            added = sum(1 for member in mapping if member not in zset)
            zset.update(mapping)
            return added

    def zrem(self, name: str, *values: str) -> int:
        with self._lock:
            zset = self.zsets.get(name, {})
            return sum(1 for value in values if zset.pop(value, None) is not None)

    def zcard(self, name: str) -> int:
        with self._lock:
            return len(self.zsets.get(name, {}))

    def zrangebyscore(self, name: str, min: Union[str, float], max: Union[str, float]) -> List[str]:
        # Only "-inf"/"+inf" arrive as strings; numbers are compared as given
        low = float(min) if isinstance(min, str) else min
        high = float(max) if isinstance(max, str) else max
        with self._lock:
            members = self.zsets.get(name, {}).items()
            return [m for m, score in sorted(members, key=lambda item: item[1]) if low <= score <= high]

    def ping(self) -> bool:
        return True

    def close(self):
        pass


@dataclass(frozen=True)
class Paste:
    """One stored text snippet."""

    slug: str
    text: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def to_json(self) -> str:
        return json.dumps({
            "text": self.text,
            "created_at": self.created_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        })

    @classmethod
    def from_json(cls, slug: str, raw: str) -> "Paste":
        data = json.loads(raw)
        return cls(
            slug=slug,
            text=data["text"],
            created_at=datetime.fromisoformat(data["created_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )


class PasteStore:
    """The single authoritative slug -> paste mapping."""

    def __init__(
        self,
        client,
        slug_generator: Optional[SlugGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
        slug_length: int = 10,
        max_attempts: int = 5,
    ):
        """
        Args:
            client: Redis client or MemoryClient
            slug_generator: Source of candidate slugs
            clock: Returns the current timezone-aware time
            slug_length: Length of generated slugs
            max_attempts: Slug generations tried before giving up on collisions
        """
        self.client = client
        self.slug_generator = slug_generator or SlugGenerator()
        self.clock = clock or _utcnow
        self.slug_length = slug_length
        self.max_attempts = max_attempts
        # Single worker for lazy deletions; readers never wait on it
        self._deleter = ThreadPoolExecutor(max_workers=1, thread_name_prefix="paste-delete")

    def create(self, text: str, ttl: Union[timedelta, int, float]) -> str:
        """
        Save a new paste.

        Args:
            text: Paste content, must be non-empty
            ttl: Time-to-live as a timedelta or in seconds; <= 0 is already expired

        Returns:
            The assigned slug

        Raises:
            EmptyText: If text is empty
            InvalidTTL: If the expiry cannot be represented
            SlugExhausted: If every generated slug collided
            StorageUnavailable: If the backing store failed
        """
        return self.create_paste(text, ttl).slug

    def create_paste(self, text: str, ttl: Union[timedelta, int, float]) -> Paste:
        """Like create(), but returns the whole stored record."""
        if text == "":
            raise EmptyText("paste text must be non-empty")

        now = self._get_current_time()
        try:
            if not isinstance(ttl, timedelta):
                ttl = timedelta(seconds=ttl)
            expires_at = now + ttl
        except (OverflowError, ValueError) as e:
            raise InvalidTTL(f"ttl out of range: {ttl}") from e

        for attempt in range(1, self.max_attempts + 1):
            slug = self.slug_generator.generate(self.slug_length)
            paste = Paste(slug=slug, text=text, created_at=now, expires_at=expires_at)
            if self._insert(paste):
                logger.info(f"Paste {slug} saved, expires at {expires_at.isoformat()}")
                return paste
            logger.warning(f"Slug collision on {slug} (attempt {attempt}/{self.max_attempts})")

        raise SlugExhausted(f"no free slug after {self.max_attempts} attempts")

    def get(self, slug: str) -> str:
        """
        Fetch the text of a live paste.

        Raises:
            NotFound: If no paste is stored under slug
            Expired: If the paste is past expiry; its removal is scheduled
            StorageUnavailable: If the backing store failed
        """
        return self.get_paste(slug).text

    def get_paste(self, slug: str) -> Paste:
        """Like get(), but returns the whole record."""
        with self._storage_errors(f"fetching paste {slug}"):
            raw = self.client.get(self._key(slug))

        if raw is None:
            raise NotFound(slug)

        paste = Paste.from_json(slug, raw)
        if paste.is_expired(self._get_current_time()):
            logger.info(f"Paste {slug} has expired, scheduling removal")
            self._schedule_delete(slug)
            raise Expired(slug)

        return paste

    def delete(self, slug: str):
        """Remove a paste. Deleting a missing slug is not an error."""
        with self._storage_errors(f"deleting paste {slug}"):
            self.client.delete(self._key(slug))
            self.client.zrem(EXPIRY_INDEX, slug)
        logger.info(f"Paste {slug} deleted")

    def count(self) -> int:
        """Number of stored pastes, including expired ones not yet removed."""
        with self._storage_errors("counting pastes"):
            return int(self.client.zcard(EXPIRY_INDEX))

    def expired_slugs(self, now: Optional[datetime] = None) -> List[str]:
        """Snapshot of slugs whose expiry is at or before now."""
        now = now or self._get_current_time()
        with self._storage_errors("scanning for expired pastes"):
            return list(self.client.zrangebyscore(EXPIRY_INDEX, "-inf", expiry_score(now)))

    def is_healthy(self) -> bool:
        """Check if the backing store is alive."""
        try:
            self.client.ping()
            return True
        except Exception as e:
            logger.error(f"Health check failed: {e}")
        return False

    def join_pending(self):
        """Block until every lazy deletion scheduled so far has run."""
        self._deleter.submit(lambda: None).result()

    def close(self):
        """Drain pending deletions and release the client."""
        self._deleter.shutdown(wait=True)
        self.client.close()
        logger.info("Paste store closed")

    def _insert(self, paste: Paste) -> bool:
        key = self._key(paste.slug)
        with self._storage_errors(f"saving paste {paste.slug}"):
            if not self.client.set(key, paste.to_json(), nx=True):
                return False
            try:
                self.client.zadd(EXPIRY_INDEX, {paste.slug: expiry_score(paste.expires_at)})
            except RedisError:
                # An unindexed paste would never be reaped
                self.client.delete(key)
                raise
        return True

    def _schedule_delete(self, slug: str):
        try:
            self._deleter.submit(self._delete_in_background, slug)
        except RuntimeError:
            logger.warning(f"Deletion worker stopped, leaving {slug} to the reaper")

    def _delete_in_background(self, slug: str):
        try:
            self.delete(slug)
        except StorageUnavailable as e:
            logger.warning(f"Background removal of {slug} failed, reaper will retry: {e}")

    @contextmanager
    def _storage_errors(self, action: str):
        try:
            yield
        except RedisError as e:
            logger.error(f"Error {action}: {type(e).__name__}: {e}")
            raise StorageUnavailable(f"error {action}") from e

    @staticmethod
    def _key(slug: str) -> str:
        return f"{KEY_PREFIX}{slug}"

    def _get_current_time(self) -> datetime:
        return self.clock()


def connect(settings) -> PasteStore:
    """
    Open the configured backing store and wrap it in a PasteStore.

    Raises:
        StorageUnavailable: If Redis cannot be reached
        ValueError: If STORAGE_BACKEND is unknown
    """
    if settings.STORAGE_BACKEND == "memory":
        logger.warning("Using IN-MEMORY storage. Data will NOT persist across restarts.")
        client = MemoryClient()
    elif settings.STORAGE_BACKEND == "redis":
        logger.info(f"Attempting to connect to Redis: {settings.REDIS_URL[:30]}...")
        try:
            client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
            client.ping()
        except RedisError as e:
            logger.error(f"Could not connect to Redis: {type(e).__name__}: {e}")
            raise StorageUnavailable("could not connect to Redis") from e
        logger.info("Redis connected")
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND: {settings.STORAGE_BACKEND!r}")

    return PasteStore(
        client,
        slug_length=settings.SLUG_LENGTH,
        max_attempts=settings.SLUG_MAX_ATTEMPTS,
    )
