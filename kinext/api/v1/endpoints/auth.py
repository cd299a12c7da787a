"""Auth API: registration (tenant provisioning), login and current user.

Identities live in the admin database. Registration creates the user's
tenant database; the JWT only carries the user id, and every later
request resolves the tenant database from the registry.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from kinext.api.v1.dependencies import (
    get_admin_users,
    get_current_session,
    get_database,
    get_provisioning_service,
)
from kinext.application.dtos.session import AuthenticatedSession
from kinext.application.dtos.user import RegistrationData
from kinext.application.services.provisioning_service import TenantProvisioningService
from kinext.core.limiter import limit_auth, limit_register
from kinext.domain.enums import UserRole
from kinext.domain.exceptions import AuthenticationException
from kinext.infrastructure.firestore.repositories import FirestoreUserRepository
from kinext.infrastructure.security.jwt import create_access_token
from kinext.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserResponse,
)

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=201)
@limit_register
async def register(
    request: Request,
    body: RegisterRequest,
    service: Annotated[TenantProvisioningService, Depends(get_provisioning_service)],
):
    """Register a user and provision their tenant database.

    409 on a duplicate email or phone. A 500 whose details carry
    phase "tenant" means the account exists and the tenant database is
    finished by the reconcile endpoint.
    """
    result = await service.provision(
        RegistrationData(
            name=body.name,
            email=str(body.email),
            password=body.password,
            terms_accepted=body.terms_accepted,
            phone_number=body.phone_number,
            newsletter_subscription=body.newsletter_subscription,
            image=body.image,
        )
    )
    return RegisterResponse(
        user_id=result.user_id,
        db_name=result.db_name,
        name=body.name.strip(),
        email=str(body.email).strip().lower(),
        role=UserRole.USER.value,
    )


@router.post("/login", response_model=TokenResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    users: Annotated[FirestoreUserRepository, Depends(get_admin_users)],
):
    """Authenticate with email and password; return a JWT whose `sub` is the user id."""
    user = await users.authenticate(str(body.email), body.password)
    if user is None:
        raise AuthenticationException("Invalid credentials")
    token = create_access_token(
        data={"sub": user.id, "email": user.email, "role": user.role}
    )
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
async def get_me(
    session: Annotated[AuthenticatedSession, Depends(get_current_session)],
    users: Annotated[FirestoreUserRepository, Depends(get_admin_users)],
    database: Annotated[Any, Depends(get_database)],
):
    """Current identity from the admin directory and the database this session resolves to."""
    user = await users.get_by_id(session.user_id)
    if user is None:
        raise AuthenticationException("User no longer exists")
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        phone_number=user.phone_number,
        newsletter_subscription=user.newsletter_subscription,
        database=database.name,
    )
