"""CORS middleware for browser editors talking to the document API."""

import falcon.asgi

ALLOW_METHODS = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
# If-Match carries the expected version on PUT; ETag returns the new one.
ALLOW_HEADERS = "Authorization, Content-Type, If-Match"
EXPOSE_HEADERS = "ETag"


class CORSMiddleware:
    """Echoes allowed origins and answers OPTIONS preflight."""

    def __init__(self, origins: list[str], max_age: int = 86400) -> None:
        self._origins = origins
        self._max_age = str(max_age)

    def _allowed_origin(self, origin: str | None) -> str | None:
        if "*" in self._origins:
            return "*"
        if origin and origin in self._origins:
            return origin
        return self._origins[0] if self._origins else None

    def _apply(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        allowed = self._allowed_origin(req.get_header("Origin"))
        if allowed:
            resp.set_header("Access-Control-Allow-Origin", allowed)
            resp.set_header("Vary", "Origin")
        resp.set_header("Access-Control-Allow-Methods", ALLOW_METHODS)
        resp.set_header("Access-Control-Allow-Headers", ALLOW_HEADERS)
        resp.set_header("Access-Control-Expose-Headers", EXPOSE_HEADERS)
        resp.set_header("Access-Control-Max-Age", self._max_age)

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        self._apply(req, resp)
        if req.method == "OPTIONS":
            resp.status = falcon.HTTP_204
            resp.complete = True

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        self._apply(req, resp)
