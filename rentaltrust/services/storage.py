from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..core.clock import Clock, utcnow
from ..models import models
from ..schemas.schemas import (
    DashboardSummary,
    NotificationCreate,
    NotificationRead,
    NotificationUpdate,
    PaymentCreate,
    PaymentDetail,
    PaymentRead,
    PaymentUpdate,
    PropertyCreate,
    PropertyRead,
    PropertyUpdate,
    TenantCreate,
    TenantDetail,
    TenantRead,
    TenantUpdate,
    UnitCreate,
    UnitRead,
    UnitUpdate,
    UnitWithProperty,
    UserCreate,
    UserInDB,
    UserRead,
)
from .dashboard import build_dashboard_summary, newest_first
from .occupancy import apply_tenant_changes, occupy_unit, release_unit
from .store import EntityStore, MemoryEntityStore, SqlEntityStore, StoreBackend

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)
Payload = Union[BaseModel, Mapping[str, Any]]

# record type and ORM model per entity store
ENTITY_TYPES = {
    "users": (UserInDB, models.User),
    "properties": (PropertyRead, models.Property),
    "units": (UnitRead, models.Unit),
    "tenants": (TenantRead, models.Tenant),
    "payments": (PaymentRead, models.Payment),
    "notifications": (NotificationRead, models.Notification),
}


def _insert_values(data: Payload, schema: Type[SchemaT]) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        data = data.model_dump()
    return schema.model_validate(dict(data)).model_dump()


def _update_values(changes: Payload, schema: Type[SchemaT], record_type: Type[BaseModel]) -> Dict[str, Any]:
    """Fields explicitly provided by the caller; ``None`` only survives for nullable record fields."""
    if not isinstance(changes, BaseModel):
        changes = schema.model_validate(dict(changes))
    values = changes.model_dump(exclude_unset=True)
    return {
        field: value
        for field, value in values.items()
        if value is not None or record_type.model_fields[field].default is None
    }


def public_user(user: Optional[UserInDB]) -> Optional[UserRead]:
    if user is None:
        return None
    return UserRead.model_validate(user.model_dump(exclude={"hashed_password"}))


class Storage:
    """Repository over the six entity stores.

    Answers landlord- and tenant-scoped queries by walking foreign keys
    (landlord -> properties -> units -> tenants -> payments) and keeps unit
    occupancy consistent as tenant rows change. Absent ids come back as
    ``None`` (or ``False`` for deletes); nothing here raises for a missing row.
    """

    def __init__(
        self,
        *,
        users: EntityStore[UserInDB],
        properties: EntityStore[PropertyRead],
        units: EntityStore[UnitRead],
        tenants: EntityStore[TenantRead],
        payments: EntityStore[PaymentRead],
        notifications: EntityStore[NotificationRead],
        backend: StoreBackend = StoreBackend.MEMORY,
        clock: Clock = utcnow,
    ) -> None:
        self.users = users
        self.properties = properties
        self.units = units
        self.tenants = tenants
        self.payments = payments
        self.notifications = notifications
        self.backend = backend
        self.clock = clock
        # Tenant writes touch two rows (tenant + unit occupancy).
        self._mutation_lock = threading.RLock()

    @classmethod
    def in_memory(cls, clock: Clock = utcnow) -> "Storage":
        stores = {
            name: MemoryEntityStore(record_type, clock=clock)
            for name, (record_type, _model) in ENTITY_TYPES.items()
        }
        return cls(**stores, backend=StoreBackend.MEMORY, clock=clock)

    @classmethod
    def from_session_factory(cls, session_factory: Callable[[], Session], clock: Clock = utcnow) -> "Storage":
        stores = {
            name: SqlEntityStore(record_type, model, session_factory, clock=clock)
            for name, (record_type, model) in ENTITY_TYPES.items()
        }
        return cls(**stores, backend=StoreBackend.DATABASE, clock=clock)

    # --- Users ---

    def get_user(self, user_id: int) -> Optional[UserInDB]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[UserInDB]:
        return self.users.first(username=username)

    def create_user(self, data: Payload) -> UserInDB:
        user = self.users.insert(_insert_values(data, UserCreate))
        logger.info("Created %s user %s (id=%s)", user.user_type, user.username, user.id)
        return user

    # --- Properties ---

    def get_property(self, property_id: int) -> Optional[PropertyRead]:
        return self.properties.get(property_id)

    def list_properties_by_landlord(self, landlord_id: int) -> List[PropertyRead]:
        return self.properties.find(landlord_id=landlord_id)

    def create_property(self, data: Payload) -> PropertyRead:
        return self.properties.insert(_insert_values(data, PropertyCreate))

    def update_property(self, property_id: int, changes: Payload) -> Optional[PropertyRead]:
        return self.properties.update(property_id, _update_values(changes, PropertyUpdate, PropertyRead))

    def delete_property(self, property_id: int) -> bool:
        return self.properties.delete(property_id)

    # --- Units ---

    def get_unit(self, unit_id: int) -> Optional[UnitRead]:
        return self.units.get(unit_id)

    def list_units_by_property(self, property_id: int) -> List[UnitRead]:
        return self.units.find(property_id=property_id)

    def create_unit(self, data: Payload) -> UnitRead:
        return self.units.insert(_insert_values(data, UnitCreate))

    def update_unit(self, unit_id: int, changes: Payload) -> Optional[UnitRead]:
        return self.units.update(unit_id, _update_values(changes, UnitUpdate, UnitRead))

    def delete_unit(self, unit_id: int) -> bool:
        return self.units.delete(unit_id)

    # --- Tenants ---

    def get_tenant(self, tenant_id: int) -> Optional[TenantRead]:
        return self.tenants.get(tenant_id)

    def get_tenant_by_user_id(self, user_id: int) -> Optional[TenantRead]:
        return self.tenants.first(user_id=user_id)

    def list_tenants_by_landlord(self, landlord_id: int) -> List[TenantDetail]:
        properties = {prop.id: prop for prop in self.list_properties_by_landlord(landlord_id)}
        if not properties:
            return []
        units = {unit.id: unit for unit in self.units.filter(lambda unit: unit.property_id in properties)}
        if not units:
            return []

        details: List[TenantDetail] = []
        for tenant in self.tenants.filter(lambda tenant: tenant.unit_id in units):
            unit = units[tenant.unit_id]
            details.append(
                TenantDetail(
                    **tenant.model_dump(),
                    user=public_user(self.users.get(tenant.user_id)),
                    unit=UnitWithProperty(**unit.model_dump(), property=properties[unit.property_id]),
                )
            )
        return details

    def create_tenant(self, data: Payload) -> TenantRead:
        values = _insert_values(data, TenantCreate)
        with self._mutation_lock:
            tenant = self.tenants.insert(values)
            occupy_unit(self.units, tenant.unit_id)
        logger.info("Created tenant %s on unit %s", tenant.id, tenant.unit_id)
        return tenant

    def update_tenant(self, tenant_id: int, changes: Payload) -> Optional[TenantRead]:
        values = _update_values(changes, TenantUpdate, TenantRead)
        with self._mutation_lock:
            tenant = self.tenants.get(tenant_id)
            if tenant is None:
                return None
            TenantRead.model_validate({**tenant.model_dump(), **values})
            apply_tenant_changes(self.units, self.tenants, tenant, values)
            return self.tenants.update(tenant_id, values)

    def delete_tenant(self, tenant_id: int) -> bool:
        with self._mutation_lock:
            tenant = self.tenants.get(tenant_id)
            if tenant is not None:
                release_unit(self.units, self.tenants, tenant.unit_id, excluding_tenant_id=tenant.id)
            return self.tenants.delete(tenant_id)

    # --- Payments ---

    def get_payment(self, payment_id: int) -> Optional[PaymentRead]:
        return self.payments.get(payment_id)

    def list_payments_by_tenant(self, tenant_id: int) -> List[PaymentRead]:
        return self.payments.find(tenant_id=tenant_id)

    def list_payments_by_landlord(self, landlord_id: int) -> List[PaymentDetail]:
        tenants = {tenant.id: tenant for tenant in self.list_tenants_by_landlord(landlord_id)}
        if not tenants:
            return []
        return [
            PaymentDetail(**payment.model_dump(), tenant=tenants[payment.tenant_id])
            for payment in self.payments.filter(lambda payment: payment.tenant_id in tenants)
        ]

    def create_payment(self, data: Payload) -> PaymentRead:
        payment = self.payments.insert(_insert_values(data, PaymentCreate))
        logger.info("Created payment %s for tenant %s (%s)", payment.id, payment.tenant_id, payment.status)
        return payment

    def update_payment(self, payment_id: int, changes: Payload) -> Optional[PaymentRead]:
        return self.payments.update(payment_id, _update_values(changes, PaymentUpdate, PaymentRead))

    def delete_payment(self, payment_id: int) -> bool:
        return self.payments.delete(payment_id)

    # --- Notifications ---

    def get_notification(self, notification_id: int) -> Optional[NotificationRead]:
        return self.notifications.get(notification_id)

    def list_notifications_by_user(self, user_id: int) -> List[NotificationRead]:
        return newest_first(self.notifications.find(user_id=user_id))

    def create_notification(self, data: Payload) -> NotificationRead:
        return self.notifications.insert(_insert_values(data, NotificationCreate))

    def update_notification(self, notification_id: int, changes: Payload) -> Optional[NotificationRead]:
        return self.notifications.update(notification_id, _update_values(changes, NotificationUpdate, NotificationRead))

    def delete_notification(self, notification_id: int) -> bool:
        return self.notifications.delete(notification_id)

    def mark_notification_read(self, notification_id: int) -> Optional[NotificationRead]:
        return self.notifications.update(notification_id, {"is_read": True})

    # --- Dashboard ---

    def get_dashboard_summary(self, landlord_id: int) -> DashboardSummary:
        return build_dashboard_summary(self, landlord_id)


def build_storage(
    backend: Union[StoreBackend, str, None] = None,
    *,
    session_factory: Optional[Callable[[], Session]] = None,
    clock: Clock = utcnow,
) -> Storage:
    """Construct a ``Storage`` for the configured (or given) backend."""
    if backend is None:
        from ..config import settings

        backend = settings.storage_backend
    backend = StoreBackend(backend)
    if backend == StoreBackend.DATABASE:
        if session_factory is None:
            from ..config import SessionLocal

            session_factory = SessionLocal
        logger.info("Using SQLAlchemy-backed storage")
        return Storage.from_session_factory(session_factory, clock=clock)
    logger.info("Using in-memory storage")
    return Storage.in_memory(clock=clock)
