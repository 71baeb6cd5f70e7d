from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from core.utils import ZERO


class QuotationStatus:
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    BOOKING_COMPLETED = "Booking Completed"
    CANCELLED = "Cancelled"

    CHOICES = (DRAFT, SUBMITTED, BOOKING_COMPLETED, CANCELLED)


class BookingStatus:
    BOOKED = "Booked"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    CHOICES = (BOOKED, SHIPPED, DELIVERED, CANCELLED)


SHIPMENT_TYPES = ("Import", "Export", "Cross-Trade")
FREIGHT_MODES = ("Sea", "Air", "Land")
FREQUENCIES = ("Daily", "Weekly", "Bi-Weekly", "Monthly")


@dataclass(frozen=True)
class Port:
    code: str
    name: str
    country: str


@dataclass(frozen=True)
class ScheduleRate:
    id: str
    carrier: str
    origin: str
    destination: str
    voyage_details: str
    buy_rate: Decimal
    allocation: int


@dataclass
class Quotation:
    id: str
    customer_name: str
    pol: str
    pod: str
    equipment: str
    type: str
    status: str = QuotationStatus.DRAFT
    buy_rate: Optional[Decimal] = None
    sell_rate: Optional[Decimal] = None
    profit_and_loss: Decimal = ZERO
    selected_rate_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Booking:
    id: str
    quotation_id: str
    customer_name: str
    pol: str
    pod: str
    equipment: str
    type: str
    buy_rate: Decimal = ZERO
    sell_rate: Decimal = ZERO
    profit_and_loss: Decimal = ZERO
    status: str = BookingStatus.BOOKED
    selected_carrier_rate_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class BuyRate:
    id: str
    carrier: str
    pol: str
    pod: str
    commodity: str
    freight_mode_type: str
    equipment: str
    weight_capacity: str
    min_booking: str
    rate: Decimal
    valid_from: date
    valid_to: date


@dataclass
class Schedule:
    id: str
    carrier: str
    origin: str
    destination: str
    service_route: str
    allocation: int
    etd: datetime
    eta: datetime
    frequency: str = "Weekly"


T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    total_count: int = 0
