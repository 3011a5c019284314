import logging
import uuid
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .api import auth, dashboard, notifications, payments, properties, system, tenants
from .config import Base, engine, settings
from .core.errors import register_exception_handlers
from .core.logging import configure_logging
from .core.security import SecurityHeadersMiddleware, log_security_warnings
# Import the models module so every table registers with Base metadata.
from .models import models as _all_models  # noqa: F401
from .services.seed import seed_demo_data
from .services.storage import Storage, build_storage
from .services.store import StoreBackend

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(title=f"{settings.app_name} - Property Management")
    app.state.storage = storage or build_storage()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)

    @app.middleware("http")
    async def request_id(request: Request, call_next):
        # Keep a caller-supplied id; mint one otherwise.
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = rid
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response

    register_exception_handlers(app)

    @app.on_event("startup")
    def startup() -> None:
        active: Storage = app.state.storage
        log_security_warnings(settings.jwt_secret, active.backend.value)
        if active.backend == StoreBackend.DATABASE and storage is None:
            # In dev we make sure tables exist; there are no migrations.
            Base.metadata.create_all(bind=engine)
        if settings.seed_demo_data:
            seed_demo_data(active)

    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(properties.router, tags=["properties"])
    app.include_router(tenants.router, prefix="/tenants", tags=["tenants"])
    app.include_router(payments.router, prefix="/payments", tags=["payments"])
    app.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
    app.include_router(dashboard.router, tags=["dashboard"])
    app.include_router(system.router, prefix="/system", tags=["system"])
    return app


app = create_app()
