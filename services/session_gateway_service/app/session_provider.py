from __future__ import annotations

from uuid import UUID, uuid4

from dishka import Provider, Scope, provide
from fastapi import Request

from services.session_gateway_service.session_policy import SessionPolicy, SessionToken


class SessionProvider(Provider):
    """Per-request session dependencies. ``Request`` comes from FastapiProvider."""

    @provide(scope=Scope.REQUEST)
    def provide_correlation_id(self, request: Request) -> UUID:
        """Provide correlation ID from request state as UUID."""
        return getattr(request.state, "correlation_id", uuid4())

    @provide(scope=Scope.REQUEST)
    def provide_session_token(
        self, request: Request, policy: SessionPolicy
    ) -> SessionToken | None:
        """Session token from the HttpOnly cookie; an empty cookie counts as absent."""
        token = request.cookies.get(policy.cookie_name)
        if not token:
            return None
        return SessionToken(token)
