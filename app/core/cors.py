"""CORS configuration."""

from starlette.datastructures import MutableHeaders
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


class PermissiveCORSMiddleware:
    """Stamp permissive CORS headers on every HTTP response.

    Unlike Starlette's CORSMiddleware the headers are added whether or not
    the request carries an Origin header, and any OPTIONS request is answered
    directly with an empty 204, preflight or not.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            response = Response(status_code=204, headers=CORS_HEADERS)
            await response(scope, receive, send)
            return

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for key, value in CORS_HEADERS.items():
                    headers[key] = value
            await send(message)

        await self.app(scope, receive, send_with_cors)


def setup_cors(app) -> None:
    """Configure CORS middleware.

    - every origin is allowed
    - methods: GET, POST, OPTIONS
    - headers: Content-Type, Authorization
    """
    app.add_middleware(PermissiveCORSMiddleware)
