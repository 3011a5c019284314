from fastapi import APIRouter, Depends, HTTPException

from ..api.dependencies import get_storage
from ..auth.jwt import require_landlord, require_tenant
from ..schemas.schemas import DashboardSummary, LandlordContact, TenantPortal, UserInDB
from ..services.dashboard import build_dashboard_summary
from ..services.storage import Storage

router = APIRouter()


@router.get("/dashboard", response_model=DashboardSummary)
def get_dashboard(
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> DashboardSummary:
    return build_dashboard_summary(storage, landlord.id)


@router.get("/tenant-portal", response_model=TenantPortal)
def get_tenant_portal(
    storage: Storage = Depends(get_storage),
    current_user: UserInDB = Depends(require_tenant),
) -> TenantPortal:
    tenant = storage.get_tenant_by_user_id(current_user.id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant profile not found")

    unit = storage.get_unit(tenant.unit_id)
    prop = storage.get_property(unit.property_id) if unit else None
    landlord = storage.get_user(prop.landlord_id) if prop else None

    return TenantPortal(
        tenant=tenant,
        unit=unit,
        property=prop,
        payments=storage.list_payments_by_tenant(tenant.id),
        notifications=storage.list_notifications_by_user(current_user.id),
        landlord=LandlordContact.model_validate(landlord.model_dump()) if landlord else None,
    )
