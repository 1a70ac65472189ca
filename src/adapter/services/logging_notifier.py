import logging
from datetime import datetime

from src.app.services.notifier import INotifier

logger = logging.getLogger(__name__)


def redact_email(email: str) -> str:
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


class LoggingNotifier(INotifier):
    """Development notifier: records the dispatch, never the token"""

    async def send_password_reset(
        self, email: str, token: str, expires_at: datetime
    ) -> None:
        logger.info(
            f"Password reset dispatched to {redact_email(email)}, "
            f"expires at {expires_at.isoformat()}"
        )

    async def send_email_verification(
        self, email: str, token: str, expires_at: datetime
    ) -> None:
        logger.info(
            f"Email verification dispatched to {redact_email(email)}, "
            f"expires at {expires_at.isoformat()}"
        )
