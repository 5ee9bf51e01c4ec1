"""Keycloak OIDC provider: bearer token introspection to actor identity."""

import logging
import threading
import time
from dataclasses import dataclass

from keycloak import KeycloakOpenID
from keycloak.exceptions import KeycloakError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OIDCUser:
    """Actor resolved from an active token."""

    user_id: str
    email: str | None
    username: str | None


class KeycloakProvider:
    """Introspects bearer tokens against a Keycloak realm.

    Active results are cached per token until ``cache_ttl`` seconds pass or the
    token's own ``exp`` is reached, whichever comes first. Expired entries are
    swept on every insert and the cache holds at most ``max_entries`` tokens,
    oldest evicted first. Inactive and failed lookups are never cached.
    """

    def __init__(
        self,
        server_url: str,
        realm: str,
        client_id: str,
        client_secret: str = "",
        cache_ttl: float = 30.0,
        max_entries: int = 1024,
    ) -> None:
        self._client = KeycloakOpenID(
            server_url=server_url,
            realm_name=realm,
            client_id=client_id,
            client_secret_key=client_secret,
        )
        self._cache_ttl = cache_ttl
        self._max_entries = max_entries
        self._cache: dict[str, tuple[float, OIDCUser]] = {}
        self._lock = threading.Lock()

    def decode_token(self, token: str) -> OIDCUser | None:
        """Return the token's actor, or None if inactive or rejected."""
        now = time.time()
        with self._lock:
            cached = self._cache.get(token)
            if cached is not None:
                expires_at, user = cached
                if expires_at > now:
                    return user
                del self._cache[token]

        try:
            info = self._client.introspect(token)
        except KeycloakError as e:
            logger.warning("Token introspection failed: %s", e)
            return None
        if not info.get("active") or not info.get("sub"):
            return None

        user = OIDCUser(
            user_id=info["sub"],
            email=info.get("email"),
            username=info.get("preferred_username"),
        )
        expires_at = now + self._cache_ttl
        if isinstance(info.get("exp"), (int, float)):
            expires_at = min(expires_at, float(info["exp"]))
        if expires_at > now and self._max_entries > 0:
            with self._lock:
                self._store(token, expires_at, user, now)
        return user

    def _store(self, token: str, expires_at: float, user: OIDCUser, now: float) -> None:
        # Caller holds self._lock
        for key in [k for k, (exp, _) in self._cache.items() if exp <= now]:
            del self._cache[key]
        self._cache.pop(token, None)
        while len(self._cache) >= self._max_entries:
            del self._cache[next(iter(self._cache))]
        self._cache[token] = (expires_at, user)

    def cached_tokens(self) -> int:
        """Number of tokens currently held in the introspection cache."""
        with self._lock:
            return len(self._cache)
