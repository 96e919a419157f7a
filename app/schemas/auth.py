"""Admin session request and response schemas."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """Payload for admin login."""

    username: str
    password: str


class AdminMeResponse(BaseModel):
    authenticated: bool
    username: str | None = None


class OkResponse(BaseModel):
    ok: bool = True
