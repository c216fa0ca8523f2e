from typing import Optional
from pydantic import EmailStr, Field
from civic.models.enums import UserRole
from civic.schemas.base import CamelModel

class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"

class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: Optional[str] = Field(None, min_length=1, max_length=100)

class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=8)

class UserOut(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    role: UserRole

class AuthResponse(CamelModel):
    user: UserOut
    tokens: TokenPair

class AuthUser(CamelModel):
    """Личность, которую get_current_user кладёт в request.state.user."""
    id: str
    email: str
    role: UserRole
