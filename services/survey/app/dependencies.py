"""Request-scoped dependencies shared by the survey service routers."""
from __future__ import annotations

from fastapi import Request

from shared.auth.dependencies import get_current_user_required

get_current_user = get_current_user_required


def client_ip(request: Request) -> str | None:
    """Client IP, honouring X-Forwarded-For from the load balancer."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else None
