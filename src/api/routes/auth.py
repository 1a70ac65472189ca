from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, EmailStr, Field

from src.api.error import to_http_error
from src.app.services.notifier import INotifier
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.token_issuer import ITokenIssuer
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AuthorizedResponse,
    ChangePasswordUseCase,
    ConfirmPasswordResetUseCase,
    JoinCommand,
    JoinUseCase,
    LoginCommand,
    LoginUseCase,
    LogoutResponse,
    LogoutUseCase,
    PasswordChanged,
    PasswordResetCompleted,
    PasswordResetRequested,
    Principal,
    RefreshTokenUseCase,
    RequestPasswordResetUseCase,
    ResendVerificationResponse,
    ResendVerificationUseCase,
    VerifyEmailResponse,
    VerifyEmailUseCase,
)
from src.app.use_cases.auth.password_policy import (
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
)
from src.depends import (
    get_config,
    get_current_principal,
    get_deferred_notifier,
    get_password_hasher,
    get_token_issuer,
    get_unit_of_work,
)
from src.domain.entities import RoleType

router = APIRouter(prefix="/auth/{role}", tags=["Authentication"])


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


class JoinRequest(BaseModel):
    """
    Join HTTP request payload

    email and password are optional only for guestVisitor.
    """

    email: Optional[EmailStr] = Field(None, description="User email address")
    password: Optional[str] = Field(
        None,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
        description="User password (8-64 chars)",
    )
    keep_me_signed_in: bool = False


@router.post(
    "/join", status_code=status.HTTP_201_CREATED, response_model=AuthorizedResponse
)
async def join(
    role: RoleType,
    body: JoinRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
    notifier: INotifier = Depends(get_deferred_notifier),
    config=Depends(get_config),
):
    """
    Join

    Creates a principal with a grant for the route role, opens a session and
    returns a token pair.

    Raises:
        - 400 Bad Request: Missing credentials or password policy violation
        - 409 Conflict: Email already exists
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
    """
    command = JoinCommand(
        role=role,
        email=body.email,
        password=body.password,
        keep_me_signed_in=body.keep_me_signed_in,
        ip=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    use_case = JoinUseCase(
        uow,
        token_issuer,
        password_hasher,
        notifier,
        verification_ttl=timedelta(hours=config.EMAIL_VERIFICATION_TTL_HOURS),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class LoginRequest(BaseModel):
    """Login HTTP request payload"""

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., max_length=256, description="User password")
    keep_me_signed_in: bool = False


@router.post("/login", status_code=status.HTTP_200_OK, response_model=AuthorizedResponse)
async def login(
    role: RoleType,
    body: LoginRequest,
    request: Request,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Login

    Raises:
        - 401 Unauthorized: Invalid credentials, or no live grant for the role
    """
    command = LoginCommand(
        role=role,
        email=body.email,
        password=body.password,
        keep_me_signed_in=body.keep_me_signed_in,
        ip=client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )
    result = await LoginUseCase(uow, token_issuer, password_hasher).execute(command)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token")


@router.post("/refresh", status_code=status.HTTP_200_OK, response_model=AuthorizedResponse)
async def refresh(
    role: RoleType,
    body: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_issuer: ITokenIssuer = Depends(get_token_issuer),
):
    """
    Refresh Token

    Exchanges a refresh token for a new pair. The presented token is
    consumed; presenting it again fails.

    Raises:
        - 401 Unauthorized: Unknown, consumed, revoked or expired token
        - 403 Forbidden: Role no longer active
    """
    result = await RefreshTokenUseCase(uow, token_issuer).execute(role, body.refresh_token)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.post("/logout", status_code=status.HTTP_200_OK, response_model=LogoutResponse)
async def logout(
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Logout - revokes the session bound to the presented access token"""
    result = await LogoutUseCase(uow).execute(principal)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=Principal)
async def me(principal: Principal = Depends(get_current_principal)):
    return principal


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., max_length=256)
    new_password: str = Field(
        ..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )
    revoke_other_sessions: bool = True


@router.put("/password", status_code=status.HTTP_200_OK, response_model=PasswordChanged)
async def change_password(
    body: ChangePasswordRequest,
    principal: Principal = Depends(get_current_principal),
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Change Password

    Raises:
        - 400 Bad Request: Password policy violation
        - 403 Forbidden: Current password is incorrect
    """
    result = await ChangePasswordUseCase(uow, password_hasher).execute(
        principal,
        body.current_password,
        body.new_password,
        revoke_other_sessions=body.revoke_other_sessions,
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class RequestPasswordResetRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")


@router.post(
    "/password/reset/request",
    status_code=status.HTTP_200_OK,
    response_model=PasswordResetRequested,
)
async def request_password_reset(
    body: RequestPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_deferred_notifier),
    config=Depends(get_config),
):
    """
    Request Password Reset

    Always answers with the same shape; whether the email has an account is
    never revealed.
    """
    use_case = RequestPasswordResetUseCase(
        uow,
        notifier,
        reset_ttl=timedelta(minutes=config.PASSWORD_RESET_TTL_MINUTES),
    )
    result = await use_case.execute(body.email)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class ConfirmPasswordResetRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(
        ..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH
    )


@router.post(
    "/password/reset/confirm",
    status_code=status.HTTP_200_OK,
    response_model=PasswordResetCompleted,
)
async def confirm_password_reset(
    body: ConfirmPasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Confirm Password Reset

    Sets the new password and revokes every session of the account.

    Raises:
        - 400 Bad Request: Invalid, consumed or expired token; password policy
    """
    result = await ConfirmPasswordResetUseCase(uow, password_hasher).execute(
        body.token, body.new_password
    )

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class VerifyEmailRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Email verification token")


@router.post(
    "/email/verify", status_code=status.HTTP_200_OK, response_model=VerifyEmailResponse
)
async def verify_email(
    body: VerifyEmailRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Email Verification

    Raises:
        - 400 Bad Request: Invalid, consumed or expired token
    """
    result = await VerifyEmailUseCase(uow).execute(body.token)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value


class ResendVerificationRequest(BaseModel):
    email: EmailStr = Field(..., description="Account email address")


@router.post(
    "/email/verify/resend",
    status_code=status.HTTP_200_OK,
    response_model=ResendVerificationResponse,
)
async def resend_verification(
    body: ResendVerificationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_deferred_notifier),
    config=Depends(get_config),
):
    """Resend Verification Email - uniform acknowledgment"""
    use_case = ResendVerificationUseCase(
        uow,
        notifier,
        verification_ttl=timedelta(hours=config.EMAIL_VERIFICATION_TTL_HOURS),
    )
    result = await use_case.execute(body.email)

    if result.is_err():
        raise to_http_error(result.error)

    return result.value
