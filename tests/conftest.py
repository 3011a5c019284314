import sys
from collections.abc import Callable, Generator
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rentaltrust.auth.jwt import get_current_user, get_password_hash  # noqa: E402
from rentaltrust.config import Base  # noqa: E402
from rentaltrust.core.rate_limit import login_limiter  # noqa: E402
from rentaltrust.main import create_app  # noqa: E402
# Import the full models module so all tables register with Base metadata.
from rentaltrust.models import models as _all_models  # noqa: E402,F401
from rentaltrust.schemas.schemas import (  # noqa: E402
    PaymentCreate,
    PaymentRead,
    PropertyCreate,
    PropertyRead,
    TenantCreate,
    TenantRead,
    UnitCreate,
    UnitRead,
    UserCreate,
    UserInDB,
)
from rentaltrust.services.storage import Storage  # noqa: E402

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
PASSWORD = "changeme"


class FrozenClock:
    """Test clock: returns a fixed instant until advanced."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def storage(clock: FrozenClock) -> Storage:
    return Storage.in_memory(clock=clock)


@pytest.fixture
def sql_storage(tmp_path, clock: FrozenClock) -> Generator[Storage, None, None]:
    """Provide a SQLAlchemy-backed storage on a fresh SQLite database."""
    db_path = tmp_path / "test.db"
    engine = create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    try:
        yield Storage.from_session_factory(SessionLocal, clock=clock)
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture(params=["memory", "database"])
def any_storage(request) -> Storage:
    if request.param == "memory":
        return request.getfixturevalue("storage")
    return request.getfixturevalue("sql_storage")


@pytest.fixture(autouse=True)
def _reset_login_limiter():
    login_limiter.reset()
    yield
    login_limiter.reset()


@pytest.fixture
def create_user(storage: Storage) -> Callable[..., UserInDB]:
    def _create(username: str = "landlord", user_type: str = "landlord", storage: Storage = storage) -> UserInDB:
        return storage.create_user(
            UserCreate(
                username=username,
                hashed_password=get_password_hash(PASSWORD),
                first_name=username.capitalize(),
                last_name="Tester",
                email=f"{username}@example.com",
                phone="555-0100",
                user_type=user_type,
            )
        )

    return _create


@pytest.fixture
def create_property(storage: Storage) -> Callable[..., PropertyRead]:
    counter = {"value": 0}

    def _create(landlord_id: int, name: Optional[str] = None, storage: Storage = storage) -> PropertyRead:
        counter["value"] += 1
        return storage.create_property(
            PropertyCreate(
                landlord_id=landlord_id,
                name=name or f"Building {counter['value']}",
                address=f"{counter['value']} Main Street",
                city="Springfield",
                state="IL",
                zip="62701",
                total_units=4,
            )
        )

    return _create


@pytest.fixture
def create_unit(storage: Storage) -> Callable[..., UnitRead]:
    counter = {"value": 100}

    def _create(property_id: int, monthly_rent: str = "1200.00", storage: Storage = storage) -> UnitRead:
        counter["value"] += 1
        return storage.create_unit(
            UnitCreate(
                property_id=property_id,
                unit_number=str(counter["value"]),
                monthly_rent=Decimal(monthly_rent),
                bedrooms=2,
                bathrooms=Decimal("1"),
                sqft=900,
            )
        )

    return _create


@pytest.fixture
def create_tenant(storage: Storage) -> Callable[..., TenantRead]:
    def _create(user_id: int, unit_id: int, is_active: bool = True, storage: Storage = storage) -> TenantRead:
        return storage.create_tenant(
            TenantCreate(
                user_id=user_id,
                unit_id=unit_id,
                lease_start_date=date(2024, 1, 1),
                lease_end_date=date(2024, 12, 31),
                rent_due_day=1,
                is_active=is_active,
            )
        )

    return _create


@pytest.fixture
def create_payment(storage: Storage) -> Callable[..., PaymentRead]:
    def _create(
        tenant_id: int,
        amount: str = "1200.00",
        due_date: datetime = NOW + timedelta(days=15),
        status: str = "pending",
        payment_date: Optional[datetime] = None,
        storage: Storage = storage,
    ) -> PaymentRead:
        return storage.create_payment(
            PaymentCreate(
                tenant_id=tenant_id,
                amount=Decimal(amount),
                due_date=due_date,
                status=status,
                payment_date=payment_date,
            )
        )

    return _create


@pytest.fixture
def portfolio(create_user, create_property, create_unit, create_tenant) -> dict:
    """One landlord with a property, two units, and a tenant living in the first unit."""
    landlord = create_user("landlord", "landlord")
    tenant_user = create_user("tenant", "tenant")
    prop = create_property(landlord.id, name="Maple Apartments")
    unit = create_unit(prop.id)
    spare_unit = create_unit(prop.id, monthly_rent="950.00")
    tenant = create_tenant(tenant_user.id, unit.id)
    return {
        "landlord": landlord,
        "tenant_user": tenant_user,
        "property": prop,
        "unit": unit,
        "spare_unit": spare_unit,
        "tenant": tenant,
    }


@pytest.fixture
def app(storage: Storage) -> Generator[FastAPI, None, None]:
    application = create_app(storage=storage)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login_as(app: FastAPI) -> Callable[[Optional[UserInDB]], None]:
    def _login(user: Optional[UserInDB]) -> None:
        if user is None:
            app.dependency_overrides.pop(get_current_user, None)
        else:
            app.dependency_overrides[get_current_user] = lambda: user

    return _login
