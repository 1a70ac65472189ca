"""
Authentication Use Cases

All authentication-related business logic.
"""

from .join_use_case import JoinUseCase
from .login_use_case import LoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .authorize_principal_use_case import AuthorizePrincipalUseCase
from .change_password_use_case import ChangePasswordUseCase
from .verify_email_use_case import VerifyEmailUseCase
from .resend_verification_use_case import ResendVerificationUseCase
from .request_password_reset_use_case import RequestPasswordResetUseCase
from .confirm_password_reset_use_case import ConfirmPasswordResetUseCase
from .dtos import (
    JoinCommand,
    LoginCommand,
    AuthorizedResponse,
    AuthorizedToken,
    Principal,
    LogoutResponse,
    PasswordChanged,
    PasswordResetRequested,
    PasswordResetCompleted,
    VerifyEmailResponse,
    ResendVerificationResponse,
)

__all__ = [
    # Use Cases
    "JoinUseCase",
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "AuthorizePrincipalUseCase",
    "ChangePasswordUseCase",
    "VerifyEmailUseCase",
    "ResendVerificationUseCase",
    "RequestPasswordResetUseCase",
    "ConfirmPasswordResetUseCase",
    # DTOs - Commands
    "JoinCommand",
    "LoginCommand",
    # DTOs - Responses
    "AuthorizedResponse",
    "AuthorizedToken",
    "Principal",
    "LogoutResponse",
    "PasswordChanged",
    "PasswordResetRequested",
    "PasswordResetCompleted",
    "VerifyEmailResponse",
    "ResendVerificationResponse",
]
