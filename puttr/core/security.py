"""
Token authority for the write endpoint.

Implements:
- Anonymous issue of short-lived, opaque bearer tokens
- Validation against an in-memory expiry table
- Lazy garbage collection of expired tokens on issue
- Parsing of the "Authorization: Token <t>" header
"""
import secrets
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterator, Optional

# Number of random bytes behind each token (hex encoded -> 32 characters)
TOKEN_BYTES = 16

DEFAULT_TOKEN_TTL = timedelta(minutes=5)

AUTH_SCHEME = "token"


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ReadWriteLock:
    """
    Single-writer / multiple-reader lock.

    Readers share the lock; a writer waits for active readers to drain and
    blocks new readers while it is waiting, so issue() is never starved by a
    steady stream of validate() calls.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class TokenStore:
    """
    Table of issued tokens and their expiry instants.

    One instance is owned by the application and shared by every request.
    An entry whose expiry is at or before "now" is invalid whether or not it
    has been swept yet.
    """

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize the token store.

        Args:
            ttl: Lifetime of each issued token
            clock: Returns the current time (aware UTC datetime)
        """
        self._tokens: Dict[str, datetime] = {}
        self._ttl = ttl
        self._clock = clock
        self._lock = ReadWriteLock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def issue(self) -> str:
        """
        Mint a new token valid for one TTL from now.

        Expired entries are swept in the same critical section, so the table
        never holds more than roughly one TTL's worth of tokens.
        """
        token = secrets.token_hex(TOKEN_BYTES)

        with self._lock.write_locked():
            now = self._clock()
            self._tokens[token] = now + self._ttl
            self._sweep(now)

        return token

    def validate(self, token: Optional[str]) -> bool:
        """Return True iff the token is known and has not yet expired."""
        if not token:
            return False

        with self._lock.read_locked():
            expiry = self._tokens.get(token)
            if expiry is None:
                return False
            return expiry > self._clock()

    def expiry_of(self, token: str) -> Optional[datetime]:
        """Expiry instant of a stored token, or None if absent."""
        with self._lock.read_locked():
            return self._tokens.get(token)

    def _sweep(self, now: datetime):
        """Remove every entry expiring at or before now (write lock held)."""
        expired = [k for k, v in self._tokens.items() if v <= now]
        for k in expired:
            del self._tokens[k]

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._tokens)

    def __contains__(self, token: str) -> bool:
        """Physical presence only; use validate() for admission."""
        with self._lock.read_locked():
            return token in self._tokens


def parse_authorization(header: Optional[str]) -> Optional[str]:
    """
    Extract the token from an "Authorization: Token <t>" header value.

    The scheme is matched case-insensitively. Returns None when the header
    is missing or malformed.
    """
    if not header:
        return None

    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != AUTH_SCHEME:
        return None

    return parts[1]


def token_prefix(token: Optional[str]) -> str:
    """Short, log-safe prefix of a token."""
    if not token:
        return ""
    return token[:8]
