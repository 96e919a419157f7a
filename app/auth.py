"""Session-based authentication helpers for the admin API."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request, status

ADMIN_ROLE = "ADMIN"

SessionUser = dict[str, Any]


def get_current_admin(request: Request) -> SessionUser | None:
    """Return the admin snapshot stored in the signed session cookie."""
    role = request.session.get("role")
    username = request.session.get("username")
    if role == ADMIN_ROLE and username:
        return {"role": role, "username": username}
    return None


def login_admin(request: Request, username: str) -> None:
    request.session.clear()
    request.session.update({"role": ADMIN_ROLE, "username": username})


def logout_admin(request: Request) -> None:
    request.session.clear()


def require_admin(request: Request) -> SessionUser:
    """Router dependency rejecting requests without an admin session."""
    current = get_current_admin(request)
    if current is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="UNAUTHORIZED")
    return current
