from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from ..api.auth import register_user
from ..api.dependencies import get_owned_tenant, get_owned_unit, get_storage
from ..auth.jwt import require_landlord
from ..constants import TENANT
from ..schemas.schemas import (
    TenantCreate,
    TenantDetail,
    TenantOnboard,
    TenantOnboardResult,
    TenantProfile,
    TenantRead,
    TenantUpdate,
    UserInDB,
    UserRegister,
)
from ..services.storage import Storage, public_user

router = APIRouter()


@router.get("/", response_model=List[TenantDetail])
def list_tenants(
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> List[TenantDetail]:
    return storage.list_tenants_by_landlord(landlord.id)


@router.post("/", response_model=TenantOnboardResult, status_code=201)
def onboard_tenant(
    payload: TenantOnboard,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> TenantOnboardResult:
    get_owned_unit(storage, landlord, payload.tenant.unit_id)
    user = register_user(storage, UserRegister(**payload.user.model_dump(), user_type=TENANT))
    tenant = storage.create_tenant(TenantCreate(**payload.tenant.model_dump(), user_id=user.id))
    return TenantOnboardResult(tenant=tenant, user=public_user(user))


@router.get("/{tenant_id}", response_model=TenantProfile)
def get_tenant(
    tenant_id: int,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> TenantProfile:
    tenant, unit, prop = get_owned_tenant(storage, landlord, tenant_id)
    return TenantProfile(
        **tenant.model_dump(),
        user=public_user(storage.get_user(tenant.user_id)),
        unit=unit,
        property=prop,
        payments=storage.list_payments_by_tenant(tenant.id),
    )


@router.put("/{tenant_id}", response_model=TenantRead)
def update_tenant(
    tenant_id: int,
    payload: TenantUpdate,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> TenantRead:
    tenant, _unit, _prop = get_owned_tenant(storage, landlord, tenant_id)
    if payload.unit_id is not None and payload.unit_id != tenant.unit_id:
        get_owned_unit(storage, landlord, payload.unit_id)
    start = payload.lease_start_date or tenant.lease_start_date
    end = payload.lease_end_date or tenant.lease_end_date
    if end < start:
        raise HTTPException(status_code=400, detail="Lease end date must not be before the start date")
    return storage.update_tenant(tenant_id, payload)


@router.delete("/{tenant_id}", status_code=204)
def deactivate_tenant(
    tenant_id: int,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> Response:
    get_owned_tenant(storage, landlord, tenant_id)
    # Tenants are never hard-deleted over HTTP; lease history stays attached to payments.
    storage.update_tenant(tenant_id, TenantUpdate(is_active=False))
    return Response(status_code=204)
