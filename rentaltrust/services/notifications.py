"""Payment notifications raised by the HTTP layer.

The storage core never decides to notify anyone; routes call these helpers
after a payment is created, updated, or processed.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from ..schemas.schemas import NotificationCreate, NotificationRead, PaymentRead
from .storage import Storage

logger = logging.getLogger(__name__)

PAYMENT_NOTIFICATION = "payment"


def _money(amount: Decimal) -> str:
    return f"${amount}"


def create_notification(storage: Storage, *, user_id: int, message: str, type: str = "general") -> NotificationRead:
    notification = storage.create_notification(
        NotificationCreate(user_id=user_id, message=message, type=type, is_read=False)
    )
    logger.debug("Notification %s queued for user %s", notification.id, user_id)
    return notification


def notify_payment_created(storage: Storage, tenant_user_id: int, payment: PaymentRead) -> NotificationRead:
    due = payment.due_date.strftime("%m/%d/%Y")
    return create_notification(
        storage,
        user_id=tenant_user_id,
        message=f"New payment of {_money(payment.amount)} due on {due}",
        type=PAYMENT_NOTIFICATION,
    )


def notify_payment_status_changed(
    storage: Storage, tenant_user_id: int, payment: PaymentRead, status: str
) -> NotificationRead:
    return create_notification(
        storage,
        user_id=tenant_user_id,
        message=f"Payment status updated to {status} for {_money(payment.amount)}",
        type=PAYMENT_NOTIFICATION,
    )


def notify_payment_processed(
    storage: Storage, tenant_user_id: int, landlord_id: int, payment: PaymentRead
) -> List[NotificationRead]:
    amount = _money(payment.amount)
    return [
        create_notification(
            storage,
            user_id=tenant_user_id,
            message=f"Payment of {amount} processed successfully",
            type=PAYMENT_NOTIFICATION,
        ),
        create_notification(
            storage,
            user_id=landlord_id,
            message=f"Payment of {amount} received from tenant",
            type=PAYMENT_NOTIFICATION,
        ),
    ]
