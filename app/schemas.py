from datetime import date, datetime, time

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .models import MAX_ID, ROLES, STATUSES

MIN_PASSWORD_LENGTH = 6


def _required(value: str, message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(message)
    return value


class Register(BaseModel):
    name: str = Field(max_length=255)
    email: str = Field(max_length=255)
    password: str = Field(max_length=128)
    phone: str = Field(max_length=20)
    role: str

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _required(v, "Name is required")

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        v = (v or "").strip()
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError:
            raise ValueError("Valid email is required")
        # stored as entered; email is case-sensitive
        return v

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if len(v or "") < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v

    @field_validator("phone")
    @classmethod
    def _phone(cls, v: str) -> str:
        return _required(v, "Phone is required")

    @field_validator("role")
    @classmethod
    def _role(cls, v: str) -> str:
        if v not in ROLES:
            raise ValueError("Invalid role")
        return v


class Login(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str


class CreateBooking(BaseModel):
    customer_name: str = Field(max_length=255)
    service: str = Field(max_length=100)
    provider: str | None = Field(default=None, max_length=255)
    provider_id: int | None = Field(default=None, ge=1, le=MAX_ID)
    booking_date: date
    booking_time: time
    address: str = Field(max_length=500)
    notes: str | None = None

    @field_validator("customer_name")
    @classmethod
    def _customer_name(cls, v: str) -> str:
        return _required(v, "Customer name is required")

    @field_validator("service")
    @classmethod
    def _service(cls, v: str) -> str:
        return _required(v, "Service is required")

    @field_validator("address")
    @classmethod
    def _address(cls, v: str) -> str:
        return _required(v, "Address is required")

    @field_validator("provider")
    @classmethod
    def _provider(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("notes")
    @classmethod
    def _notes(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @model_validator(mode="after")
    def _provider_given(self):
        if self.provider is None and self.provider_id is None:
            raise ValueError("Provider is required")
        return self


class UpdateStatus(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def _status(cls, v: str) -> str:
        if v not in STATUSES:
            raise ValueError("Invalid status")
        return v


class BookingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    customer_id: int
    customer_name: str
    service: str
    provider: str
    provider_id: int | None = None
    booking_date: date
    booking_time: time
    address: str
    notes: str | None = None
    status: str
    created_at: datetime | None = None
