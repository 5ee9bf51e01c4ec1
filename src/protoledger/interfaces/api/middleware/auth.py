"""Auth middleware - resolves the actor recorded as created_by."""

import asyncio
import logging
from dataclasses import dataclass

import falcon.asgi

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"


@dataclass
class RequestUser:
    """Acting user for the request."""

    user_id: str
    email: str | None = None
    username: str | None = None


def _bearer_token(header: str | None) -> str | None:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class AuthMiddleware:
    """Sets req.context.user.

    No Authorization header: the anonymous actor, unless ``allow_anonymous``
    is off. A header that is not a valid bearer token leaves the user as
    None so mutating handlers answer 401.
    """

    def __init__(self, keycloak_provider=None, allow_anonymous: bool = True) -> None:
        self._keycloak = keycloak_provider
        self._allow_anonymous = allow_anonymous

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        header = req.get_header("Authorization")
        if header is None:
            req.context.user = RequestUser(user_id=ANONYMOUS) if self._allow_anonymous else None
            return

        req.context.user = None
        token = _bearer_token(header)
        if token is None or self._keycloak is None:
            return
        # Introspection is a blocking HTTP call
        oidc_user = await asyncio.to_thread(self._keycloak.decode_token, token)
        if oidc_user is None:
            logger.info("Rejected bearer token on %s %s", req.method, req.path)
            return
        req.context.user = RequestUser(
            user_id=oidc_user.user_id,
            email=oidc_user.email,
            username=oidc_user.username,
        )
