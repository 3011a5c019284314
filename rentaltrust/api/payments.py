import logging
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException

from ..api.dependencies import get_owned_payment, get_owned_tenant, get_storage
from ..auth.jwt import get_current_user, require_landlord, require_tenant
from ..constants import DEFAULT_PAYMENT_METHOD, LANDLORD, PAYMENT_PAID
from ..schemas.schemas import (
    PaymentCreate,
    PaymentDetail,
    PaymentProcess,
    PaymentRead,
    PaymentUpdate,
    UserInDB,
)
from ..services import notifications as notification_service
from ..services.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=Union[List[PaymentDetail], List[PaymentRead]])
def list_payments(
    storage: Storage = Depends(get_storage),
    current_user: UserInDB = Depends(get_current_user),
):
    if current_user.user_type == LANDLORD:
        return storage.list_payments_by_landlord(current_user.id)
    tenant = storage.get_tenant_by_user_id(current_user.id)
    if not tenant:
        raise HTTPException(status_code=404, detail="Tenant profile not found")
    return storage.list_payments_by_tenant(tenant.id)


@router.post("/", response_model=PaymentRead, status_code=201)
def create_payment(
    payload: PaymentCreate,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> PaymentRead:
    tenant, _unit, _prop = get_owned_tenant(storage, landlord, payload.tenant_id)
    payment = storage.create_payment(payload)
    notification_service.notify_payment_created(storage, tenant.user_id, payment)
    return payment


@router.put("/{payment_id}", response_model=PaymentRead)
def update_payment(
    payment_id: int,
    payload: PaymentUpdate,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> PaymentRead:
    payment, tenant = get_owned_payment(storage, landlord, payment_id)
    updated = storage.update_payment(payment_id, payload)
    if payload.status and payload.status != payment.status:
        notification_service.notify_payment_status_changed(storage, tenant.user_id, updated, payload.status)
    return updated


@router.post("/{payment_id}/process", response_model=PaymentRead)
def process_payment(
    payment_id: int,
    payload: Optional[PaymentProcess] = None,
    storage: Storage = Depends(get_storage),
    current_user: UserInDB = Depends(require_tenant),
) -> PaymentRead:
    payment = storage.get_payment(payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    tenant = storage.get_tenant_by_user_id(current_user.id)
    if not tenant or tenant.id != payment.tenant_id:
        raise HTTPException(status_code=403, detail="You don't have access to this payment")

    # No gateway: processing is a status flip.
    updated = storage.update_payment(
        payment_id,
        PaymentUpdate(
            status=PAYMENT_PAID,
            payment_date=storage.clock(),
            payment_method=(payload.payment_method if payload else None) or DEFAULT_PAYMENT_METHOD,
        ),
    )
    logger.info("Payment %s processed by tenant %s", payment_id, tenant.id)

    unit = storage.get_unit(tenant.unit_id)
    prop = storage.get_property(unit.property_id) if unit else None
    if prop:
        notification_service.notify_payment_processed(storage, tenant.user_id, prop.landlord_id, payment)
    else:
        logger.warning("Payment %s processed but tenant %s has no resolvable landlord", payment_id, tenant.id)
    return updated
