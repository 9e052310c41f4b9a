"""ASGI middleware that lets any HTTP method reach the webhook route."""

from starlette.types import ASGIApp, Receive, Scope, Send

from gitlab_webhook.routers.webhooks import ALL_METHODS

# Methods the router does not list (TRACE, CONNECT, WebDAV verbs ...) are
# routed as this one instead of being answered with a 405.
FALLBACK_METHOD = "POST"


class AnyMethodMiddleware:
    """Rewrite unlisted request methods to ``FALLBACK_METHOD`` before routing."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] not in ALL_METHODS:
            scope = {**scope, "method": FALLBACK_METHOD}
        await self.app(scope, receive, send)
