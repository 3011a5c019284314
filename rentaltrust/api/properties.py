from typing import List

from fastapi import APIRouter, Depends, Response

from ..api.dependencies import get_owned_property, get_owned_unit, get_storage
from ..auth.jwt import require_landlord
from ..schemas.schemas import (
    PropertyBase,
    PropertyCreate,
    PropertyRead,
    PropertyUpdate,
    PropertyWithUnits,
    UnitBase,
    UnitCreate,
    UnitRead,
    UnitUpdate,
    UserInDB,
)
from ..services.storage import Storage

router = APIRouter()


@router.get("/properties", response_model=List[PropertyRead])
def list_properties(
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> List[PropertyRead]:
    return storage.list_properties_by_landlord(landlord.id)


@router.get("/properties/{property_id}", response_model=PropertyWithUnits)
def get_property(
    property_id: int,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> PropertyWithUnits:
    prop = get_owned_property(storage, landlord, property_id)
    return PropertyWithUnits(**prop.model_dump(), units=storage.list_units_by_property(prop.id))


@router.post("/properties", response_model=PropertyRead, status_code=201)
def create_property(
    payload: PropertyBase,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> PropertyRead:
    return storage.create_property(PropertyCreate(**payload.model_dump(), landlord_id=landlord.id))


@router.put("/properties/{property_id}", response_model=PropertyRead)
def update_property(
    property_id: int,
    payload: PropertyUpdate,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> PropertyRead:
    get_owned_property(storage, landlord, property_id)
    return storage.update_property(property_id, payload)


@router.delete("/properties/{property_id}", status_code=204)
def delete_property(
    property_id: int,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> Response:
    get_owned_property(storage, landlord, property_id)
    storage.delete_property(property_id)
    return Response(status_code=204)


@router.get("/properties/{property_id}/units", response_model=List[UnitRead])
def list_units(
    property_id: int,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> List[UnitRead]:
    get_owned_property(storage, landlord, property_id)
    return storage.list_units_by_property(property_id)


@router.post("/properties/{property_id}/units", response_model=UnitRead, status_code=201)
def create_unit(
    property_id: int,
    payload: UnitBase,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> UnitRead:
    get_owned_property(storage, landlord, property_id)
    return storage.create_unit(UnitCreate(**payload.model_dump(), property_id=property_id))


@router.put("/units/{unit_id}", response_model=UnitRead)
def update_unit(
    unit_id: int,
    payload: UnitUpdate,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> UnitRead:
    get_owned_unit(storage, landlord, unit_id)
    return storage.update_unit(unit_id, payload)


@router.delete("/units/{unit_id}", status_code=204)
def delete_unit(
    unit_id: int,
    storage: Storage = Depends(get_storage),
    landlord: UserInDB = Depends(require_landlord),
) -> Response:
    get_owned_unit(storage, landlord, unit_id)
    storage.delete_unit(unit_id)
    return Response(status_code=204)
