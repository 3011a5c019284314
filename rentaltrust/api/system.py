from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..api.dependencies import get_storage
from ..core.version import get_version_info
from ..services.storage import Storage

router = APIRouter()


@router.get("/health")
def health(storage: Storage = Depends(get_storage)) -> Dict[str, Any]:
    return {"status": "ok", "storage_backend": storage.backend.value}


@router.get("/version")
def version() -> Dict[str, str]:
    return get_version_info()
