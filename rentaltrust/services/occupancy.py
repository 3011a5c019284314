"""Keeps ``Unit.is_occupied`` in step with the tenant rows that reference a unit.

A unit counts as occupied while at least one active tenant points at it. The
helpers here only run from inside the tenant mutations on ``Storage``, which
hold the storage mutation lock across the tenant write and the unit write.
"""
import logging
from typing import Any, Mapping, Optional

from ..schemas.schemas import TenantRead, UnitRead
from .store import EntityStore

logger = logging.getLogger(__name__)


def occupy_unit(units: EntityStore[UnitRead], unit_id: int) -> None:
    unit = units.get(unit_id)
    if unit is None:
        return
    if not unit.is_occupied:
        units.update(unit_id, {"is_occupied": True})
        logger.info("Unit %s marked occupied", unit_id)


def release_unit(
    units: EntityStore[UnitRead],
    tenants: EntityStore[TenantRead],
    unit_id: int,
    excluding_tenant_id: Optional[int] = None,
) -> None:
    """Mark the unit vacant unless another active tenant still references it."""
    unit = units.get(unit_id)
    if unit is None:
        return
    remaining = [
        tenant
        for tenant in tenants.find(unit_id=unit_id, is_active=True)
        if tenant.id != excluding_tenant_id
    ]
    if remaining:
        logger.debug("Unit %s still has %s active tenant(s)", unit_id, len(remaining))
        return
    if unit.is_occupied:
        units.update(unit_id, {"is_occupied": False})
        logger.info("Unit %s marked vacant", unit_id)


def apply_tenant_changes(
    units: EntityStore[UnitRead],
    tenants: EntityStore[TenantRead],
    tenant: TenantRead,
    changes: Mapping[str, Any],
) -> None:
    """Adjust unit occupancy for an already validated tenant update, before the tenant row is written."""
    new_unit_id = changes.get("unit_id")
    if new_unit_id is not None and new_unit_id != tenant.unit_id:
        release_unit(units, tenants, tenant.unit_id, excluding_tenant_id=tenant.id)
        if not changes.get("is_active", tenant.is_active):
            logger.warning(
                "Inactive tenant %s moved to unit %s; unit marked occupied anyway",
                tenant.id,
                new_unit_id,
            )
        occupy_unit(units, new_unit_id)
        return

    if "is_active" in changes and changes["is_active"] is not None and changes["is_active"] != tenant.is_active:
        if changes["is_active"]:
            occupy_unit(units, tenant.unit_id)
        else:
            release_unit(units, tenants, tenant.unit_id, excluding_tenant_id=tenant.id)
