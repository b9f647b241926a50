"""Session Gateway proxy routes.

Forwards every request under the mount prefix to the backend API, injecting
the session token as a Bearer credential and keeping the token itself out of
browser-visible response bodies.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote
from uuid import UUID

import httpx
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from dispatch_service_libs.error_handling import (
    raise_external_service_error,
    raise_timeout_error,
)
from dispatch_service_libs.logging_utils import create_service_logger
from services.session_gateway_service.config import Settings
from services.session_gateway_service.session_policy import (
    SessionEffect,
    SessionPolicy,
    SessionToken,
)

from ..protocols import MetricsProtocol

router = APIRouter(route_class=DishkaRoute)
logger = create_service_logger("session_gateway.proxy_routes")

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
FORWARDED_HEADERS = ("content-type", "accept", "accept-language", "user-agent")
BODYLESS_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})
NO_CONTENT_STATUSES = frozenset({204, 205})
BACKEND_SERVICE_LABEL = "backend_api"
_NO_PAYLOAD = object()
# Characters a decoded segment may keep as-is; everything else is percent-encoded
SEGMENT_SAFE_CHARS = "!$&'()*+,;=:@"


def resolve_relative_path(raw_path: str) -> str:
    """Join the non-empty segments of the captured sub-path with ``/``."""
    return "/".join(segment for segment in raw_path.split("/") if segment)


def build_target_url(base_url: str, relative_path: str, raw_query: bytes) -> httpx.URL:
    """Resolve ``relative_path`` under ``base_url`` and attach the query verbatim."""
    encoded_path = "/".join(
        quote(segment, safe=SEGMENT_SAFE_CHARS) for segment in relative_path.split("/")
    )
    # "./" keeps a segment such as "a:b" from being read as a URL scheme
    target = httpx.URL(f"{base_url}/").join(f"./{encoded_path}")
    if raw_query:
        target = httpx.URL(f"{target}?{raw_query.decode('latin-1')}")
    return target


def forwarded_headers(request: Request, session_token: SessionToken | None) -> dict[str, str]:
    headers = {
        name: value for name in FORWARDED_HEADERS if (value := request.headers.get(name))
    }
    if session_token:
        headers["authorization"] = f"Bearer {session_token}"
    return headers


async def read_forward_body(request: Request) -> str | bytes | None:
    """Read the inbound body as text for JSON or untyped requests, bytes otherwise."""
    if request.method.upper() in BODYLESS_METHODS:
        return None

    raw = await request.body()
    if not raw:
        return None

    content_type = request.headers.get("content-type", "")
    if not content_type or "application/json" in content_type.lower():
        return raw.decode("utf-8", errors="replace")
    return raw


def _is_json(content_type: str) -> bool:
    return "application/json" in content_type.lower()


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {name}")


def parse_json_body(content: bytes) -> Any:
    """Strict JSON parse; NaN and Infinity are rejected like any other malformed body."""
    return json.loads(content, parse_constant=_reject_constant)


def build_client_response(
    request: Request,
    backend_response: httpx.Response,
    relative_path: str,
    policy: SessionPolicy,
) -> tuple[Response, Any]:
    """Translate the backend response into the browser response.

    Returns the response together with the parsed JSON payload, or
    ``_NO_PAYLOAD`` when the body was not parsed as JSON.
    """
    status_code = backend_response.status_code
    content_type = backend_response.headers.get("content-type", "")

    if status_code in NO_CONTENT_STATUSES or request.method.upper() == "HEAD":
        return Response(status_code=status_code), _NO_PAYLOAD

    if _is_json(content_type):
        if not backend_response.content:
            return JSONResponse(content=None, status_code=status_code), None
        try:
            payload = parse_json_body(backend_response.content)
        except ValueError:
            logger.warning(
                "Backend declared JSON but sent an unparseable body, passing it through",
                path=relative_path,
                status_code=status_code,
            )
            return (
                Response(
                    content=backend_response.content,
                    status_code=status_code,
                    headers={"content-type": content_type},
                ),
                _NO_PAYLOAD,
            )

        client_payload = payload
        if policy.issued_token(relative_path, status_code, payload) is not None:
            client_payload = policy.redact_token(payload)
        return JSONResponse(content=client_payload, status_code=status_code), payload

    return (
        Response(
            content=backend_response.content,
            status_code=status_code,
            headers={"content-type": content_type or "text/plain"},
        ),
        _NO_PAYLOAD,
    )


def apply_session_mutations(
    response: Response,
    relative_path: str,
    status_code: int,
    payload: Any,
    policy: SessionPolicy,
    metrics: MetricsProtocol,
) -> None:
    token = None
    if payload is not _NO_PAYLOAD:
        token = policy.issued_token(relative_path, status_code, payload)

    if token is not None:
        policy.set_session_cookie(response, token, policy.extract_expiry(payload))
        metrics.session_events_total.labels(event="created").inc()
        logger.info("Session cookie issued", path=relative_path)
    elif policy.effect_for(relative_path) is SessionEffect.DESTROY and _is_success(status_code):
        policy.clear_session_cookie(response)
        metrics.session_events_total.labels(event="destroyed").inc()
        logger.info("Session cookie cleared on logout", path=relative_path)
    elif status_code == 401:
        policy.clear_session_cookie(response)
        metrics.session_events_total.labels(event="expired").inc()
        logger.info("Session cookie cleared after 401 from backend", path=relative_path)


@router.api_route(
    "",
    methods=PROXY_METHODS,
    summary="Backend API proxy (bare prefix)",
    include_in_schema=False,
)
@router.api_route(
    "/{path:path}",
    methods=PROXY_METHODS,
    summary="Backend API proxy",
    description=(
        "Forward any request to the backend API with the session cookie "
        "translated into a Bearer credential"
    ),
    responses={
        404: {
            "description": "No path below the mount prefix",
            "content": {"application/json": {"example": {"error": "Missing API path"}}},
        },
        502: {"description": "Backend API unreachable"},
        504: {"description": "Backend API timed out"},
    },
)
async def proxy_backend_request(
    request: Request,
    http_client: FromDishka[httpx.AsyncClient],
    config: FromDishka[Settings],
    policy: FromDishka[SessionPolicy],
    metrics: FromDishka[MetricsProtocol],
    session_token: FromDishka[SessionToken | None],
    correlation_id: FromDishka[UUID],
) -> Response:
    """Proxy one browser request to the backend API.

    **Proxy Behavior**:
    - Only content-type, accept, accept-language and user-agent are forwarded
    - The session cookie becomes ``Authorization: Bearer <token>``
    - Redirects are returned to the browser, never followed
    - Session-creation responses lose their ``token`` field, which is set as
      an HttpOnly cookie instead
    - Logout and any 401 clear the session cookie
    """
    method = request.method.upper()
    endpoint = f"{config.MOUNT_PREFIX}/{{path}}"
    relative_path = resolve_relative_path(request.path_params.get("path", ""))

    if not relative_path:
        metrics.http_requests_total.labels(
            method=method, endpoint=endpoint, http_status="404"
        ).inc()
        return JSONResponse(content={"error": "Missing API path"}, status_code=404)

    target_url = build_target_url(
        config.backend_api_base_url, relative_path, request.scope.get("query_string", b"")
    )

    with metrics.http_request_duration_seconds.labels(method=method, endpoint=endpoint).time():
        body = await read_forward_body(request)
        outgoing = http_client.build_request(
            method=method,
            url=target_url,
            headers=forwarded_headers(request, session_token),
            content=body,
        )

        try:
            with metrics.downstream_service_call_duration_seconds.labels(
                service=BACKEND_SERVICE_LABEL, method=method
            ).time():
                backend_response = await http_client.send(outgoing, follow_redirects=False)
        except httpx.TimeoutException as e:
            logger.error(f"Timeout proxying {method} {relative_path}: {e}")
            metrics.http_requests_total.labels(
                method=method, endpoint=endpoint, http_status="504"
            ).inc()
            metrics.api_errors_total.labels(endpoint=endpoint, error_type="timeout").inc()
            raise_timeout_error(
                service=config.SERVICE_NAME,
                operation=f"proxy_{method.lower()}_backend_request",
                timeout_seconds=config.HTTP_CLIENT_TIMEOUT_SECONDS,
                message="Backend API request timed out",
                correlation_id=correlation_id,
                path=relative_path,
                method=method,
            )
        except httpx.RequestError as e:
            logger.error(f"Error proxying {method} {relative_path}: {e}", exc_info=True)
            metrics.http_requests_total.labels(
                method=method, endpoint=endpoint, http_status="502"
            ).inc()
            metrics.api_errors_total.labels(endpoint=endpoint, error_type="proxy_error").inc()
            raise_external_service_error(
                service=config.SERVICE_NAME,
                operation=f"proxy_{method.lower()}_backend_request",
                external_service=BACKEND_SERVICE_LABEL,
                message=f"Error proxying request to backend API: {type(e).__name__}",
                correlation_id=correlation_id,
                path=relative_path,
                method=method,
            )

        status_code = backend_response.status_code
        metrics.downstream_service_calls_total.labels(
            service=BACKEND_SERVICE_LABEL, method=method, status_code=str(status_code)
        ).inc()

        response, payload = build_client_response(request, backend_response, relative_path, policy)

        location = backend_response.headers.get("location")
        if location:
            response.headers["location"] = location

        apply_session_mutations(response, relative_path, status_code, payload, policy, metrics)

    metrics.http_requests_total.labels(
        method=method, endpoint=endpoint, http_status=str(status_code)
    ).inc()
    logger.info(f"Proxied {method} {relative_path} -> {status_code}")

    return response
