import math
import re
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PHONE_PATTERN = re.compile(r"^[\d\s+\-()]{8,15}$", re.ASCII)


class Unit(str, Enum):
    KILOGRAM = "kg"
    GRAM = "g"
    PIECE = "piece"
    LITER = "liter"
    PACKET = "packet"
    BAG = "bag"


def _as_id(value: Any) -> Optional[str]:
    """Backend identifiers may be uuids or integers; we only ever compare them."""
    if value is None or value == "":
        return None
    return str(value)


def _loose_number(value: Any) -> Optional[float]:
    """
    Parses numeric columns coming back from the backend.
    Missing or malformed values become None instead of failing the whole row,
    so historical dirty data still shows up in reports.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


# =====================================================================
# Stored records (as returned by the backend)
# =====================================================================


class Customer(BaseModel):
    id: str
    name: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None

    normalize_id = field_validator("id", mode="before")(_as_id)


class Product(BaseModel):
    id: str
    name: str
    serial_number: Optional[str] = Field(
        None, description="System generated, TZ-<epoch ms>-<random>"
    )
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    normalize_id = field_validator("id", mode="before")(_as_id)


class CustomerRef(BaseModel):
    """Customer columns embedded in a transaction row by the backend join."""

    name: Optional[str] = None
    phone: Optional[str] = None


class ProductRef(BaseModel):
    """Product columns embedded in a transaction row by the backend join."""

    name: Optional[str] = None
    serial_number: Optional[str] = None


class Transaction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    customer_id: Optional[str] = None
    product_id: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    price: Optional[float] = None
    # Fixed at creation time (price x quantity), never recomputed on read
    total_amount: Optional[float] = None
    created_at: Optional[datetime] = None

    # Foreign rows (PostgREST embeds them under the table name)
    customer: Optional[CustomerRef] = Field(None, alias="customers")
    product: Optional[ProductRef] = Field(None, alias="products")

    normalize_ids = field_validator("id", "customer_id", "product_id", mode="before")(
        _as_id
    )
    normalize_numbers = field_validator(
        "quantity", "price", "total_amount", mode="before"
    )(_loose_number)


# =====================================================================
# Inputs (validated before anything reaches storage)
# =====================================================================


class CustomerInput(BaseModel):
    name: str
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_is_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Customer name is required")
        return value

    @field_validator("phone")
    @classmethod
    def phone_is_valid_or_empty(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            return None
        if not PHONE_PATTERN.match(value):
            raise ValueError(
                "Please enter a valid phone number (8-15 digits) or leave it empty"
            )
        return value


class ProductInput(BaseModel):
    name: str
    description: Optional[str] = ""

    @field_validator("name")
    @classmethod
    def name_is_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Product name is required")
        return value

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: Optional[str]) -> str:
        return (value or "").strip()


class TransactionInput(BaseModel):
    customer_id: str
    product_id: str
    quantity: float = Field(gt=0, allow_inf_nan=False)
    price: float = Field(gt=0, allow_inf_nan=False)
    unit: Unit = Unit.KILOGRAM

    normalize_ids = field_validator("customer_id", "product_id", mode="before")(
        _as_id
    )

    @property
    def total_amount(self) -> float:
        return self.price * self.quantity

    def to_payload(self) -> dict:
        return {
            "customer_id": self.customer_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": self.price,
            "unit": self.unit.value,
            "total_amount": self.total_amount,
        }


# =====================================================================
# Aggregation Result (derived, never persisted)
# =====================================================================


class CustomerSpending(BaseModel):
    customer_id: str
    customer_name: str
    phone: Optional[str] = None
    total_spent: float = 0.0
    transaction_count: int = 0


class ProductPurchase(BaseModel):
    product_id: str
    product_name: str
    serial: Optional[str] = None
    total_quantity: float = 0.0
    total_amount: float = 0.0


class AggregationResult(BaseModel):
    total_amount: float = 0.0
    total_quantity: float = 0.0
    customer_spending: List[CustomerSpending] = Field(default_factory=list)
    product_purchases: List[ProductPurchase] = Field(default_factory=list)


# =====================================================================
# Report period (applied to the transaction query)
# =====================================================================


class PeriodKind(str, Enum):
    ALL = "all"
    MONTH = "month"
    LAST_MONTH = "last_month"
    CUSTOM = "custom"


class ReportPeriod(BaseModel):
    kind: PeriodKind = PeriodKind.ALL
    start: Optional[date] = None
    end: Optional[date] = None

    @model_validator(mode="after")
    def custom_requires_dates(self):
        if self.kind == PeriodKind.CUSTOM:
            if self.start is None or self.end is None:
                raise ValueError("A custom period requires both start and end dates")
            if self.start > self.end:
                raise ValueError("A custom period cannot start after it ends")
        return self

    def bounds(
        self, now: Optional[datetime] = None
    ) -> Tuple[Optional[datetime], Optional[datetime]]:
        """
        Returns the inclusive (start, end) range for the query:
        - all: (None, None)
        - month: first to last instant of the current month
        - last_month: first to last instant of the previous month
        - custom: start of `start` day to end of `end` day
        """
        now = now or datetime.now()
        first_day_this_month = now.replace(
            day=1, hour=0, minute=0, second=0, microsecond=0
        )

        if self.kind == PeriodKind.MONTH:
            first_day_next_month = (first_day_this_month + timedelta(days=32)).replace(
                day=1
            )
            return first_day_this_month, first_day_next_month - timedelta(
                microseconds=1
            )

        if self.kind == PeriodKind.LAST_MONTH:
            last_day_last_month = first_day_this_month - timedelta(microseconds=1)
            first_day_last_month = last_day_last_month.replace(
                day=1, hour=0, minute=0, second=0, microsecond=0
            )
            return first_day_last_month, last_day_last_month

        if self.kind == PeriodKind.CUSTOM:
            return datetime.combine(self.start, time.min), datetime.combine(
                self.end, time.max
            )

        return None, None

    def label(self) -> str:
        if self.kind == PeriodKind.MONTH:
            return "This Month"
        if self.kind == PeriodKind.LAST_MONTH:
            return "Last Month"
        if self.kind == PeriodKind.CUSTOM:
            return (
                f"Custom: {self.start.strftime('%d/%m/%Y')} - "
                f"{self.end.strftime('%d/%m/%Y')}"
            )
        return "All Time"
