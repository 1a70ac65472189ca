from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.email_verification_repository import EmailVerificationRepository
from src.adapter.repositories.login_attempt_repository import LoginAttemptRepository
from src.adapter.repositories.password_reset_repository import PasswordResetRepository
from src.adapter.repositories.refresh_token_repository import RefreshTokenRepository
from src.adapter.repositories.role_grant_repository import RoleGrantRepository
from src.adapter.repositories.session_repository import SessionRepository
from src.adapter.repositories.session_revocation_repository import SessionRevocationRepository
from src.adapter.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.users = UserRepository(self.session)
        self.role_grants = RoleGrantRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.refresh_tokens = RefreshTokenRepository(self.session)
        self.session_revocations = SessionRevocationRepository(self.session)
        self.password_resets = PasswordResetRepository(self.session)
        self.email_verifications = EmailVerificationRepository(self.session)
        self.login_attempts = LoginAttemptRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not explicitly committed is discarded
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
