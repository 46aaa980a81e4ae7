"""Request/response schemas for auth endpoints."""

from pydantic import AliasChoices, BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """New account details. Field names are also accepted capitalized (Username, ...)."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("username", "Username"),
        description="Username",
    )
    email: EmailStr = Field(
        ...,
        validation_alias=AliasChoices("email", "Email"),
        description="Email address",
    )
    password: str = Field(
        ...,
        min_length=8,
        max_length=128,
        validation_alias=AliasChoices("password", "Password"),
        description="Password",
    )


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=255,
        validation_alias=AliasChoices("username", "Username"),
        description="Username",
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        validation_alias=AliasChoices("password", "Password"),
        description="Password",
    )


class AuthResponse(BaseModel):
    """Signed access token plus the display fields the client keeps."""

    token: str = Field(..., description="JWT access token (send as Authorization: Bearer <token>)")
    username: str
    role: str


class CurrentUser(BaseModel):
    """Authenticated identity taken from a validated token. Immutable."""

    id: int
    username: str
    email: str
    role: str

    class Config:
        from_attributes = True
        frozen = True
