from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import BackgroundTasks

from src.adapter.services.background_notifier import BackgroundNotifier
from src.domain.base import utc_now


@pytest.fixture
def inner():
    notifier = MagicMock()
    notifier.send_password_reset = AsyncMock()
    notifier.send_email_verification = AsyncMock()
    return notifier


@pytest.mark.asyncio
async def test_delivery_waits_for_background_tasks(inner):
    tasks = BackgroundTasks()
    expires_at = utc_now() + timedelta(hours=1)

    await BackgroundNotifier(inner, tasks).send_password_reset("a@x.com", "raw", expires_at)

    inner.send_password_reset.assert_not_called()
    await tasks()
    inner.send_password_reset.assert_called_once_with("a@x.com", "raw", expires_at)


@pytest.mark.asyncio
async def test_failed_delivery_is_contained(inner, caplog):
    inner.send_email_verification.side_effect = RuntimeError("smtp down")
    tasks = BackgroundTasks()

    await BackgroundNotifier(inner, tasks).send_email_verification(
        "a@x.com", "raw", utc_now()
    )
    await tasks()

    assert "Deferred notification failed" in caplog.text
