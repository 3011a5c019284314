import os
from datetime import datetime, timezone
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from typing import Dict

from ..config import settings

_STARTED_AT = datetime.now(timezone.utc).isoformat()


def _package_version() -> str:
    try:
        return version("rentaltrust")
    except PackageNotFoundError:
        return "0+local"


@lru_cache
def get_version_info() -> Dict[str, str]:
    # Deploys stamp GIT_SHA and BUILD_TIME; local runs report the process start.
    return {
        "app": settings.app_name,
        "version": _package_version(),
        "git_sha": os.getenv("GIT_SHA", "unknown"),
        "build_time": os.getenv("BUILD_TIME", _STARTED_AT),
        "env": os.getenv("APP_ENV", "development"),
        "storage_backend": settings.storage_backend,
    }
