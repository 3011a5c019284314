from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from ..core.clock import as_utc

UserType = Literal["landlord", "tenant"]
PaymentStatus = Literal["pending", "paid", "overdue"]


class _Schema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    @field_validator("*")
    @classmethod
    def _datetimes_as_utc(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return as_utc(value)
        return value


# --- Users ---


class UserRead(_Schema):
    id: int
    username: str
    first_name: str
    last_name: str
    email: EmailStr
    phone: Optional[str] = None
    user_type: UserType
    created_at: datetime


class UserInDB(UserRead):
    hashed_password: str


class UserCreate(_Schema):
    username: str = Field(min_length=3, max_length=64)
    hashed_password: str
    first_name: str
    last_name: str
    email: EmailStr
    phone: Optional[str] = None
    user_type: UserType


class TenantUserCreate(_Schema):
    username: str = Field(min_length=3, max_length=64)
    password: str = Field(min_length=6)
    first_name: str
    last_name: str
    email: EmailStr
    phone: Optional[str] = None


class UserRegister(TenantUserCreate):
    user_type: UserType


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_type: UserType


class LandlordContact(_Schema):
    id: int
    first_name: str
    last_name: str
    email: EmailStr
    phone: Optional[str] = None


# --- Properties ---


class PropertyBase(_Schema):
    name: str = Field(min_length=1)
    address: str
    city: str
    state: str
    zip: str
    total_units: int = Field(ge=0)
    is_active: bool = True


class PropertyCreate(PropertyBase):
    landlord_id: int


class PropertyUpdate(_Schema):
    name: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    total_units: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class PropertyRead(PropertyCreate):
    id: int
    created_at: datetime


# --- Units ---


class UnitBase(_Schema):
    unit_number: str = Field(min_length=1)
    monthly_rent: Decimal = Field(ge=0)
    bedrooms: int = Field(ge=0)
    bathrooms: Decimal = Field(ge=0)
    sqft: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    is_occupied: bool = False


class UnitCreate(UnitBase):
    property_id: int


class UnitUpdate(_Schema):
    unit_number: Optional[str] = Field(default=None, min_length=1)
    monthly_rent: Optional[Decimal] = Field(default=None, ge=0)
    bedrooms: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[Decimal] = Field(default=None, ge=0)
    sqft: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    is_occupied: Optional[bool] = None


class UnitRead(UnitCreate):
    id: int
    created_at: datetime


class UnitWithProperty(UnitRead):
    property: Optional[PropertyRead] = None


class PropertyWithUnits(PropertyRead):
    units: List[UnitRead] = []


# --- Tenants ---


class TenantBase(_Schema):
    unit_id: int
    lease_start_date: date
    lease_end_date: date
    rent_due_day: int = Field(ge=1, le=31)
    is_active: bool = True

    @model_validator(mode="after")
    def _check_lease_window(self) -> "TenantBase":
        if self.lease_end_date < self.lease_start_date:
            raise ValueError("lease_end_date must not be before lease_start_date")
        return self


class TenantCreate(TenantBase):
    user_id: int


class TenantUpdate(_Schema):
    unit_id: Optional[int] = None
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None
    rent_due_day: Optional[int] = Field(default=None, ge=1, le=31)
    is_active: Optional[bool] = None

    @model_validator(mode="after")
    def _check_lease_window(self) -> "TenantUpdate":
        if self.lease_start_date and self.lease_end_date and self.lease_end_date < self.lease_start_date:
            raise ValueError("lease_end_date must not be before lease_start_date")
        return self


class TenantRead(TenantCreate):
    id: int
    created_at: datetime


class TenantDetail(TenantRead):
    """A tenant joined with its user account and its unit (which embeds the property)."""

    user: Optional[UserRead] = None
    unit: Optional[UnitWithProperty] = None


class TenantOnboard(BaseModel):
    user: TenantUserCreate
    tenant: TenantBase


class TenantOnboardResult(BaseModel):
    tenant: TenantRead
    user: UserRead


# --- Payments ---


class PaymentCreate(_Schema):
    tenant_id: int
    amount: Decimal = Field(ge=0)
    due_date: datetime
    payment_date: Optional[datetime] = None
    status: PaymentStatus = "pending"
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class PaymentUpdate(_Schema):
    amount: Optional[Decimal] = Field(default=None, ge=0)
    due_date: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    status: Optional[PaymentStatus] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class PaymentRead(PaymentCreate):
    id: int
    created_at: datetime


class PaymentDetail(PaymentRead):
    tenant: TenantDetail


class PaymentProcess(BaseModel):
    payment_method: Optional[str] = None


# --- Notifications ---


class NotificationCreate(_Schema):
    user_id: int
    message: str = Field(min_length=1)
    type: str = "general"
    is_read: bool = False


class NotificationUpdate(_Schema):
    message: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = None
    is_read: Optional[bool] = None


class NotificationRead(NotificationCreate):
    id: int
    created_at: datetime


# --- Composite views ---


class TenantProfile(TenantRead):
    user: Optional[UserRead] = None
    unit: Optional[UnitRead] = None
    property: Optional[PropertyRead] = None
    payments: List[PaymentRead] = []


class TenantPortal(BaseModel):
    tenant: TenantRead
    unit: Optional[UnitRead] = None
    property: Optional[PropertyRead] = None
    payments: List[PaymentRead] = []
    notifications: List[NotificationRead] = []
    landlord: Optional[LandlordContact] = None


class MonthlyIncome(BaseModel):
    month: str
    amount: Decimal


class DashboardSummary(BaseModel):
    properties_count: int
    tenants_count: int
    upcoming_payments_total: Decimal
    overdue_payments_total: Decimal
    properties: List[PropertyWithUnits]
    tenant_activity: List[PaymentDetail]
    monthly_income: List[MonthlyIncome]
