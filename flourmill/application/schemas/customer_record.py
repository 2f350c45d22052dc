"""Pydantic DTOs (Data Transfer Objects) for the customer record feature."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from flourmill.domain.entities import (
    CustomerType,
    FlourType,
    PaymentMethod,
    PaymentStatus,
)
from flourmill.domain.rules import parse_weight

# Older entry forms called regular customers "Permanent".
_CUSTOMER_TYPE_ALIASES = {"permanent": CustomerType.REGULAR.value}


def _normalize_customer_type(value: Any) -> Any:
    if isinstance(value, str):
        return _CUSTOMER_TYPE_ALIASES.get(value.strip().lower(), value.strip())
    return value


def _reject_negative_weight(value: Any) -> Any:
    if parse_weight(value) < 0:
        raise ValueError("wheat_weight must not be negative")
    return value


class CustomerRecordCreate(BaseModel):
    """Schema for recording a new milling transaction.

    There is deliberately no id, rate, total or status field: all four are
    derived by the service. Unknown keys such as ``rate_per_kg`` are ignored.
    """

    customer_name: str = Field(
        ..., min_length=1, max_length=255, examples=["Ravi"],
    )
    customer_type: CustomerType = CustomerType.REGULAR
    wheat_weight: Decimal | str | None = Field(
        None, examples=["10"], description="Kilograms; unparsable input counts as 0",
    )
    flour_type: FlourType = FlourType.ATTA
    payment_method: PaymentMethod = PaymentMethod.CASH
    is_ready: bool = False

    @field_validator("customer_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("customer_name must not be blank")
        return value

    @field_validator("customer_type", mode="before")
    @classmethod
    def _customer_type_alias(cls, value: Any) -> Any:
        return _normalize_customer_type(value)

    @field_validator("wheat_weight")
    @classmethod
    def _weight_not_negative(cls, value: Any) -> Any:
        return _reject_negative_weight(value)


class CustomerRecordPatch(BaseModel):
    """Schema for editing a record — all fields optional.

    ``rate_per_kg`` and ``total_price`` are not accepted; they are always
    recomputed from the weight.
    """

    customer_name: str | None = Field(None, min_length=1, max_length=255)
    customer_type: CustomerType | None = None
    wheat_weight: Decimal | str | None = None
    flour_type: FlourType | None = None
    payment_method: PaymentMethod | None = None
    payment_status: PaymentStatus | None = None
    is_ready: bool | None = None

    @field_validator("customer_name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("customer_name must not be blank")
        return value

    @field_validator("customer_type", mode="before")
    @classmethod
    def _customer_type_alias(cls, value: Any) -> Any:
        return _normalize_customer_type(value)

    @field_validator("wheat_weight")
    @classmethod
    def _weight_not_negative(cls, value: Any) -> Any:
        if value is None:
            return None
        return _reject_negative_weight(value)


class CustomerRecordResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    customer_id: int | str
    customer_name: str
    customer_type: CustomerType
    wheat_weight: Decimal
    flour_type: FlourType
    rate_per_kg: Decimal
    total_price: Decimal
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    is_ready: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RevenueResponse(BaseModel):
    total_revenue: Decimal


class LedgerSummaryResponse(BaseModel):
    """Dashboard figures: counts and amounts split by payment status."""

    total_records: int
    distinct_customers: int
    ready_count: int
    total_revenue: Decimal
    paid_count: int
    paid_amount: Decimal
    pending_count: int
    pending_amount: Decimal

    model_config = {"from_attributes": True}
