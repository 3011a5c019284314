from typing import Tuple

from fastapi import HTTPException, Request

from ..schemas.schemas import PaymentRead, PropertyRead, TenantRead, UnitRead, UserInDB
from ..services.storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_owned_property(storage: Storage, landlord: UserInDB, property_id: int) -> PropertyRead:
    prop = storage.get_property(property_id)
    if not prop:
        raise HTTPException(status_code=404, detail="Property not found")
    if prop.landlord_id != landlord.id:
        raise HTTPException(status_code=403, detail="You don't have access to this property")
    return prop


def get_owned_unit(storage: Storage, landlord: UserInDB, unit_id: int) -> Tuple[UnitRead, PropertyRead]:
    unit = storage.get_unit(unit_id)
    if not unit:
        raise HTTPException(status_code=404, detail="Unit not found")
    prop = storage.get_property(unit.property_id)
    if not prop or prop.landlord_id != landlord.id:
        raise HTTPException(status_code=403, detail="You don't have access to this unit")
    return unit, prop


def get_owned_tenant(storage: Storage, landlord: UserInDB, tenant_id: int) -> Tuple[TenantRead, UnitRead, PropertyRead]:
    tenant = storage.get_tenant(tenant_id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant not found")
    unit = storage.get_unit(tenant.unit_id)
    if not unit:
        raise HTTPException(status_code=404, detail="Unit not found")
    prop = storage.get_property(unit.property_id)
    if not prop or prop.landlord_id != landlord.id:
        raise HTTPException(status_code=403, detail="You don't have access to this tenant")
    return tenant, unit, prop


def get_owned_payment(storage: Storage, landlord: UserInDB, payment_id: int) -> Tuple[PaymentRead, TenantRead]:
    payment = storage.get_payment(payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    tenant, _unit, _prop = get_owned_tenant(storage, landlord, payment.tenant_id)
    return payment, tenant
