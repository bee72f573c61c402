"""
Document schemas.

Request payloads are validated with these Pydantic models before anything is
written to MongoDB. Each model's fields map one-to-one onto the stored
document; ids are kept as hex strings.
- UserCreate / UserUpdate -> "users"
- CarCreate / CarUpdate   -> "cars"
- RentalCreate            -> "rentals"
"""
from typing import Annotated, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    EmailStr,
    Field,
    ValidationError as SchemaError,
    field_validator,
)

from carrental.exceptions import ValidationError
from carrental.utils.dates import to_epoch_ms


def _as_text(v):
    """Accept numbers for free-text fields like phone numbers."""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


def _upper(v):
    if isinstance(v, str):
        v = v.strip().upper()
        return v or None
    return v


def _epoch_ms(v):
    try:
        return to_epoch_ms(v)
    except (TypeError, ValueError, OverflowError):
        raise ValueError("must be epoch milliseconds or an ISO date")


def _strip_text(v):
    return v.strip() if isinstance(v, str) else v


def _lower(v: str) -> str:
    return v.lower()


PhoneText = Annotated[str, BeforeValidator(_as_text)]
FuelType = Annotated[Optional[Literal["DIESEL", "GASOIL"]], BeforeValidator(_upper)]
CarStatus = Annotated[Literal["AVAILABLE", "NOT_AVAILABLE"], BeforeValidator(_upper)]
EpochMs = Annotated[int, BeforeValidator(_epoch_ms)]
Email = Annotated[EmailStr, BeforeValidator(_strip_text), AfterValidator(_lower)]


class UserCreate(BaseModel):
    """
    Registration payload.
    `role` is deliberately absent: every registered account is a CUSTOMER.
    """
    name: str = Field(..., min_length=1)
    email: Email
    password: str = Field(..., min_length=1)
    phone: PhoneText = Field(..., min_length=1)
    address: str = Field(..., min_length=1)

    @field_validator("name", "address")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[Email] = None
    password: Optional[str] = Field(None, min_length=1)
    phone: Annotated[Optional[str], BeforeValidator(_as_text)] = None
    address: Optional[str] = Field(None, min_length=1)
    role: Optional[Literal["ADMIN", "CUSTOMER"]] = None

    @field_validator("name", "address")
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class CarCreate(BaseModel):
    brand: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    price_per_day: float = Field(..., gt=0)
    fuel_type: FuelType = None
    status: CarStatus = "AVAILABLE"
    seating_capacity: int = Field(..., gt=0)


class CarUpdate(BaseModel):
    """Partial car update; the image URL is not patchable."""
    brand: Optional[str] = Field(None, min_length=1)
    model: Optional[str] = Field(None, min_length=1)
    price_per_day: Optional[float] = Field(None, gt=0)
    fuel_type: FuelType = None
    status: Annotated[Optional[Literal["AVAILABLE", "NOT_AVAILABLE"]], BeforeValidator(_upper)] = None
    seating_capacity: Optional[int] = Field(None, gt=0)


class RentalCreate(BaseModel):
    car_id: str = Field(..., min_length=1)
    start_date: EpochMs
    end_date: EpochMs


def _describe(err: SchemaError) -> list:
    out = []
    for e in err.errors():
        field = ".".join(str(p) for p in e.get("loc", ())) or "body"
        out.append({"field": field, "message": e.get("msg", "invalid value")})
    return out


def validate(schema, data, *, partial: bool = False) -> dict:
    """
    Validate `data` against `schema` and return the cleaned document.
    With `partial=True` only the fields present in `data` are returned.
    Raises the app's ValidationError (HTTP 400) on failure.
    """
    if not isinstance(data, dict):
        raise ValidationError("Error: request body must be a JSON object")
    try:
        obj = schema.model_validate(data)
    except SchemaError as e:
        errors = _describe(e)
        fields = ", ".join(x["field"] for x in errors)
        raise ValidationError(f"Error: invalid or missing fields: {fields}", errors=errors)
    if partial:
        return obj.model_dump(exclude_unset=True, exclude_none=True)
    return obj.model_dump()
