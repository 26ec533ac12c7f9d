import re

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from deepscan.http.errors import error_response
from deepscan.logging.logger import Log

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}

ALLOWED_METHODS = frozenset({"GET", "POST", "OPTIONS"})

SUSPICIOUS_USER_AGENT = re.compile(
    r"bot|crawler|spider|scraper|curl|wget|python|java|sqlmap|nikto|nmap",
    re.IGNORECASE,
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds security headers to every response and logs upload attempts."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "POST" and (
            "/analyze" in request.url.path or "upload" in request.url.path
        ):
            client = request.client.host if request.client else "unknown"
            Log.info(
                f"[SECURITY] {request.method} {request.url.path} from {client} - "
                f"User-Agent: {request.headers.get('user-agent', '')}"
            )
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        if "server" in response.headers:
            del response.headers["server"]
        return response


class RequestValidationMiddleware(BaseHTTPMiddleware):
    """Rejects requests before routing.

    Checks, in order: method allowlist, declared payload size, CORS origin
    on /api routes, suspicious client signatures. POST bodies must declare
    their length so the size cap applies before the body is read.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        max_body_bytes: int,
        allowed_origins: list[str],
        block_suspicious_user_agents: bool = True,
    ) -> None:
        super().__init__(app)
        self._max_body_bytes = max_body_bytes
        self._allowed_origins = frozenset(allowed_origins)
        self._block_suspicious_user_agents = block_suspicious_user_agents

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method not in ALLOWED_METHODS:
            return error_response(
                405,
                "Method not allowed",
                f"HTTP method {request.method} is not supported",
            )

        if request.method == "POST":
            declared_size = self._declared_size(request)
            if declared_size is None:
                return error_response(
                    411,
                    "Length required",
                    "POST requests must declare a Content-Length",
                )
            if declared_size > self._max_body_bytes:
                return error_response(
                    413,
                    "Payload too large",
                    f"Request body exceeds {self._max_body_bytes // (1024 * 1024)}MB limit",
                )

        origin = request.headers.get("origin")
        if (
            origin
            and request.url.path.startswith("/api")
            and origin not in self._allowed_origins
        ):
            Log.warning(f"Origin blocked: {origin}")
            return error_response(
                403,
                "CORS policy violation",
                "Origin not allowed by CORS policy",
            )

        user_agent = request.headers.get("user-agent", "")
        if self._block_suspicious_user_agents and SUSPICIOUS_USER_AGENT.search(user_agent):
            Log.warning(f"[SECURITY] Suspicious User-Agent blocked: {user_agent}")
            return error_response(
                403,
                "Access denied",
                "Request blocked for security reasons",
            )

        return await call_next(request)

    @staticmethod
    def _declared_size(request: Request) -> int | None:
        value = request.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None
