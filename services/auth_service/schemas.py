from pydantic import BaseModel

from shared.schemas import CamelModel


class AdminLogin(BaseModel):
    username: str
    password: str


class LoginResponse(CamelModel):
    success: bool
    message: str
    token: str | None = None
    expires_at: str | None = None
