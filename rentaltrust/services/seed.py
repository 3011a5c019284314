"""Demo portfolio for local development: one landlord, one tenant, a property with two units."""
from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional

from ..auth.jwt import get_password_hash
from ..core.clock import as_utc
from ..schemas.schemas import (
    NotificationCreate,
    PaymentCreate,
    PropertyCreate,
    TenantCreate,
    UnitCreate,
    UserCreate,
)
from .dashboard import trailing_months
from .storage import Storage

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"


def _month_day(year: int, month: int, day: int, template: datetime) -> datetime:
    return template.replace(year=year, month=month, day=day, hour=0, minute=0, second=0, microsecond=0)


def seed_demo_data(storage: Storage, now: Optional[datetime] = None) -> Dict[str, int]:
    if storage.get_user_by_username("landlord"):
        logger.info("Demo data already present; skipping seed.")
        return {}

    now = as_utc(now or storage.clock())
    landlord = storage.create_user(
        UserCreate(
            username="landlord",
            hashed_password=get_password_hash(DEMO_PASSWORD),
            first_name="John",
            last_name="Smith",
            email="landlord@example.com",
            phone="555-123-4567",
            user_type="landlord",
        )
    )
    tenant_user = storage.create_user(
        UserCreate(
            username="tenant",
            hashed_password=get_password_hash(DEMO_PASSWORD),
            first_name="Jane",
            last_name="Doe",
            email="tenant@example.com",
            phone="555-987-6543",
            user_type="tenant",
        )
    )

    prop = storage.create_property(
        PropertyCreate(
            landlord_id=landlord.id,
            name="Maple Apartments",
            address="123 Maple Street",
            city="Springfield",
            state="IL",
            zip="62701",
            total_units=4,
        )
    )
    unit_101 = storage.create_unit(
        UnitCreate(
            property_id=prop.id,
            unit_number="101",
            bedrooms=2,
            bathrooms=Decimal("1"),
            sqft=950,
            monthly_rent=Decimal("1200"),
        )
    )
    storage.create_unit(
        UnitCreate(
            property_id=prop.id,
            unit_number="102",
            bedrooms=1,
            bathrooms=Decimal("1"),
            sqft=750,
            monthly_rent=Decimal("950"),
        )
    )

    tenant = storage.create_tenant(
        TenantCreate(
            user_id=tenant_user.id,
            unit_id=unit_101.id,
            lease_start_date=date(now.year, 1, 1),
            lease_end_date=date(now.year, 12, 31),
            rent_due_day=1,
        )
    )

    two_months_ago, last_month, this_month = trailing_months(now, count=3)
    for year, month in (two_months_ago, last_month):
        storage.create_payment(
            PaymentCreate(
                tenant_id=tenant.id,
                amount=Decimal("1200"),
                due_date=_month_day(year, month, 1, now),
                payment_date=_month_day(year, month, 2, now),
                status="paid",
                payment_method="Credit Card",
            )
        )
    storage.create_payment(
        PaymentCreate(
            tenant_id=tenant.id,
            amount=Decimal("1200"),
            due_date=_month_day(this_month[0], this_month[1], 1, now),
            status="pending",
        )
    )

    storage.create_notification(
        NotificationCreate(
            user_id=tenant_user.id,
            message="Your rent payment is due tomorrow",
            type="payment",
        )
    )
    logger.info("Seed data created successfully")
    return {"landlord_id": landlord.id, "tenant_user_id": tenant_user.id, "tenant_id": tenant.id}
