from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.email_verification_repository import IEmailVerificationRepository
from src.app.repositories.login_attempt_repository import ILoginAttemptRepository
from src.app.repositories.password_reset_repository import IPasswordResetRepository
from src.app.repositories.refresh_token_repository import IRefreshTokenRepository
from src.app.repositories.role_grant_repository import IRoleGrantRepository
from src.app.repositories.session_repository import ISessionRepository
from src.app.repositories.session_revocation_repository import ISessionRevocationRepository
from src.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    role_grants: IRoleGrantRepository
    sessions: ISessionRepository
    refresh_tokens: IRefreshTokenRepository
    session_revocations: ISessionRevocationRepository
    password_resets: IPasswordResetRepository
    email_verifications: IEmailVerificationRepository
    login_attempts: ILoginAttemptRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
