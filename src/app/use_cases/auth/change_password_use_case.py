import logging

from libs.result import Error, Result, Return
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_utc, utc_now
from src.domain.entities import AuditEvent
from .dtos import PasswordChanged, Principal
from .password_policy import validate_password

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Authenticated password change.

    Business Rules:
    - Current password must verify (INVALID_CURRENT_PASSWORD)
    - New password must satisfy the password policy
    - Revokes every other active session unless asked not to; the caller's own
      session stays usable
    """

    def __init__(self, uow: UnitOfWork, password_hasher: IPasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(
        self,
        principal: Principal,
        current_password: str,
        new_password: str,
        revoke_other_sessions: bool = True,
    ) -> Result[PasswordChanged]:
        password_validation = validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            now = utc_now()
            user = await self.uow.users.get_by_id(principal.user_id)
            if user is None or user.deleted_at is not None:
                return Return.err(Error("NOT_FOUND", "User not found"))

            if not self.password_hasher.verify(current_password, user.password_hash):
                logger.warning(f"Password change rejected for user {user.id}")
                return Return.err(
                    Error("INVALID_CURRENT_PASSWORD", "Current password is incorrect")
                )

            user.password_hash = self.password_hasher.hash(new_password)
            user.updated_at = now
            await self.uow.users.update(user)

            revoked_count = 0
            if revoke_other_sessions:
                summary = await SessionManager(self.uow).revoke_others(
                    user.id,
                    False,
                    "password_change",
                    now,
                    current_session_id=principal.session_id,
                )
                revoked_count = summary.revoked_sessions_count

            await self.uow.audit_events.create(
                AuditEvent(
                    user_id=user.id,
                    action="change_password",
                    resource_type="users",
                    resource_id=user.id,
                    event_metadata={"sessions_revoked": revoked_count},
                    created_at=now,
                )
            )

            await self.uow.commit()

        return Return.ok(
            PasswordChanged(
                success=True,
                changed_at=as_utc(now),
                revoked_other_sessions=revoke_other_sessions,
                revoked_sessions_count=revoked_count,
                message=(
                    "Password changed and other sessions revoked"
                    if revoke_other_sessions
                    else "Password changed"
                ),
            )
        )
