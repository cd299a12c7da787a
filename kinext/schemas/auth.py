"""Auth API schemas: registration (provisioning), login, current user."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request body for registration. Provisions the user's tenant database.

    terms_accepted must be true; a false value is rejected by provisioning
    with VALIDATION_ERROR (400) rather than by schema validation.
    """

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")
    terms_accepted: bool
    phone_number: str | None = Field(
        default=None,
        min_length=4,
        max_length=32,
        pattern=r"^\+?[0-9 ()-]+$",
    )
    newsletter_subscription: bool | None = None
    image: str | None = Field(default=None, max_length=2048, description="Avatar URL")


class RegisterResponse(BaseModel):
    """Response after successful provisioning."""

    user_id: str
    db_name: str
    name: str
    email: str
    role: str


class LoginRequest(BaseModel):
    """Request body for email/password login against the admin directory."""

    email: EmailStr
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")


class TokenResponse(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Identity of the current user (no password) and the database requests resolve to."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: str
    phone_number: str | None = None
    newsletter_subscription: bool | None = None
    database: str | None = None


class ReconcileResponse(BaseModel):
    """Result of re-running the tenant phase of provisioning."""

    user_id: str
    db_name: str
