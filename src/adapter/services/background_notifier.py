import logging
from datetime import datetime

from fastapi import BackgroundTasks

from src.app.services.notifier import INotifier

logger = logging.getLogger(__name__)


class BackgroundNotifier(INotifier):
    """
    Queues deliveries on the request's BackgroundTasks so they run after the
    response is sent. A request that notifies and one that does not return
    at the same point.
    """

    def __init__(self, notifier: INotifier, background_tasks: BackgroundTasks):
        self.notifier = notifier
        self.background_tasks = background_tasks

    async def send_password_reset(
        self, email: str, token: str, expires_at: datetime
    ) -> None:
        self.background_tasks.add_task(
            self._deliver, self.notifier.send_password_reset, email, token, expires_at
        )

    async def send_email_verification(
        self, email: str, token: str, expires_at: datetime
    ) -> None:
        self.background_tasks.add_task(
            self._deliver, self.notifier.send_email_verification, email, token, expires_at
        )

    @staticmethod
    async def _deliver(send, email: str, token: str, expires_at: datetime) -> None:
        try:
            await send(email, token, expires_at)
        except Exception:
            # The response is already sent
            logger.exception("Deferred notification failed")
