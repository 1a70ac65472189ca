from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.domain.entities import AuditEvent


class AuditEventRepository(IAuditEventRepository):
    """Append-only audit trail; rows are written with the surrounding change"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        # Never read back, so no refresh after flush
        self.session.add(audit_event)
        await self.session.flush()
        return audit_event
