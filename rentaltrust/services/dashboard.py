from __future__ import annotations

import calendar
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple, TypeVar

from ..constants import (
    MONTHLY_INCOME_MONTHS,
    PAYMENT_OVERDUE,
    PAYMENT_PAID,
    PAYMENT_PENDING,
    TENANT_ACTIVITY_LIMIT,
)
from ..core.clock import as_utc
from ..schemas.schemas import DashboardSummary, MonthlyIncome, PaymentRead, PropertyWithUnits

if TYPE_CHECKING:
    from .storage import Storage

RecordT = TypeVar("RecordT")


def newest_first(records: Iterable[RecordT]) -> List[RecordT]:
    """Sort by ``created_at`` descending; ids break ties so equal timestamps stay deterministic."""
    return sorted(records, key=lambda record: (record.created_at, record.id), reverse=True)


def _sum_amounts(payments: Iterable[PaymentRead]) -> Decimal:
    return sum((Decimal(payment.amount) for payment in payments), Decimal("0"))


def is_upcoming(payment: PaymentRead, now: datetime) -> bool:
    return payment.status == PAYMENT_PENDING and payment.due_date > now


def is_overdue(payment: PaymentRead, now: datetime) -> bool:
    if payment.status == PAYMENT_OVERDUE:
        return True
    return payment.status == PAYMENT_PENDING and payment.due_date < now


def trailing_months(now: datetime, count: int = MONTHLY_INCOME_MONTHS) -> List[Tuple[int, int]]:
    """(year, month) pairs for the ``count`` calendar months ending with ``now``'s month, oldest first."""
    current = now.year * 12 + (now.month - 1)
    months = []
    for offset in range(count - 1, -1, -1):
        year, month_index = divmod(current - offset, 12)
        months.append((year, month_index + 1))
    return months


def month_label(year: int, month: int) -> str:
    return f"{calendar.month_name[month]} '{year % 100:02d}"


def monthly_income(payments: Sequence[PaymentRead], now: datetime) -> List[MonthlyIncome]:
    paid = [payment for payment in payments if payment.status == PAYMENT_PAID and payment.payment_date]
    series: List[MonthlyIncome] = []
    for year, month in trailing_months(now):
        in_month = [
            payment
            for payment in paid
            if payment.payment_date.year == year and payment.payment_date.month == month
        ]
        series.append(MonthlyIncome(month=month_label(year, month), amount=_sum_amounts(in_month)))
    return series


def build_dashboard_summary(storage: "Storage", landlord_id: int, now: Optional[datetime] = None) -> DashboardSummary:
    """Aggregate a landlord's portfolio into the dashboard/report snapshot."""
    now = as_utc(now or storage.clock())
    properties = storage.list_properties_by_landlord(landlord_id)
    tenants = storage.list_tenants_by_landlord(landlord_id)
    payments = storage.list_payments_by_landlord(landlord_id)

    properties_with_units = [
        PropertyWithUnits(**prop.model_dump(), units=storage.list_units_by_property(prop.id))
        for prop in properties
    ]

    return DashboardSummary(
        properties_count=len(properties),
        tenants_count=len(tenants),
        upcoming_payments_total=_sum_amounts(p for p in payments if is_upcoming(p, now)),
        overdue_payments_total=_sum_amounts(p for p in payments if is_overdue(p, now)),
        properties=properties_with_units,
        tenant_activity=newest_first(payments)[:TENANT_ACTIVITY_LIMIT],
        monthly_income=monthly_income(payments, now),
    )
