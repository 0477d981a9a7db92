"""Best-effort notification dispatch.

Domain services call :func:`notify` / :func:`notify_many` after their primary
write. Delivery is deferred until the surrounding transaction commits and runs
as a single batched insert; any failure is logged and dropped so it can never
undo or fail the operation that triggered it.
"""

import logging
from functools import partial
from typing import Iterable

from django.db import transaction

logger = logging.getLogger(__name__)


def notify(user_id, type: str, title: str, message: str) -> None:
    """Schedule one notification for delivery after commit."""
    notify_many([user_id], type, title, message)


def notify_many(user_ids: Iterable, type: str, title: str, message: str) -> None:
    """Schedule the same notification for many users as one batched job."""
    recipients = [uid for uid in dict.fromkeys(user_ids) if uid]
    if not recipients:
        return
    transaction.on_commit(partial(_deliver, recipients, type, title, message))


def _deliver(user_ids: list, type: str, title: str, message: str) -> None:
    from UniCourseApp.domain.services import notification_service

    try:
        notification_service.send_batch(user_ids, type, title, message)
    except Exception:
        logger.exception("Notification delivery failed: type=%s recipients=%d", type, len(user_ids))
