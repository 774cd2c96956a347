"""
Audit logging middleware.
Logs every request to the ledger endpoints (patients, providers, prescriptions)
with the caller identity. Record contents are never logged.
"""
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from .security import extract_caller_id

logger = logging.getLogger("medledger.audit")

LEDGER_PATH_PREFIXES = (
    "/api/v1/patients",
    "/api/v1/providers",
    "/api/v1/prescriptions",
)

ACTION_MAP = {
    "GET": "view",
    "POST": "create",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "delete",
}

# POST to a sub-resource, keyed by its last path segment
SUBRESOURCE_ACTIONS = {
    "providers": "authorize",
    "deactivate": "deactivate",
}


class AuditMiddleware(BaseHTTPMiddleware):
    """Middleware that writes one audit line per ledger request."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        path = request.url.path
        if not any(path.startswith(prefix) for prefix in LEDGER_PATH_PREFIXES):
            return response

        caller_id = extract_caller_id(request) or "anonymous"

        # Derive resource type and ID from path, e.g. /api/v1/prescriptions/7/deactivate
        parts = [p for p in path.split("/") if p]
        resource_type = parts[2] if len(parts) >= 3 else "unknown"
        resource_id = parts[3] if len(parts) >= 4 else "-"

        action = ACTION_MAP.get(request.method, request.method.lower())
        if request.method == "POST" and len(parts) >= 5:
            action = SUBRESOURCE_ACTIONS.get(parts[4], "update")

        ip_address = request.client.host if request.client else None

        logger.info(
            "audit caller=%s action=%s resource=%s/%s status=%s ip=%s",
            caller_id, action, resource_type, resource_id, response.status_code, ip_address,
        )
        return response
