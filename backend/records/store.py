"""
In-memory record store.

Each entity lives in its own collection with an async, repository-style
surface (``list``, ``get``, ``create``, ``update``, ``delete``). Every call is
a suspend point: an artificial latency can be configured to mimic network I/O
(``RECORD_STORE_LATENCY_MS``). There are no locks and no transactions; two
writers to the same record simply see last-write-wins.

Records handed out are copies, so callers can never mutate stored state
behind the store's back.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import fields, replace
from datetime import date, datetime, timezone as dt_timezone
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from core.exceptions import ValidationError
from core.utils import ZERO, money_or_none, profit_and_loss

from .entities import (
    FREIGHT_MODES,
    FREQUENCIES,
    SHIPMENT_TYPES,
    Booking,
    BookingStatus,
    BuyRate,
    Page,
    Port,
    Quotation,
    QuotationStatus,
    Schedule,
    ScheduleRate,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

READ_ONLY_FIELDS = ("id", "created_at", "updated_at")
REQUIRED = "This field is required."


def _text(val) -> str:
    return "" if val is None else str(val).strip()


def _optional_text(val) -> Optional[str]:
    if val is None:
        return None
    val = str(val)
    return val if val.strip() else None


def _require(values: Dict[str, Any], names: Iterable[str], errors: Dict[str, List[str]]) -> None:
    for name in names:
        val = values.get(name)
        if val is None or (isinstance(val, str) and not val.strip()):
            errors.setdefault(name, []).append(REQUIRED)


def _choice(values: Dict[str, Any], name: str, choices: Tuple[str, ...], errors: Dict[str, List[str]]) -> None:
    val = values.get(name)
    if val and val not in choices:
        errors.setdefault(name, []).append(f"Must be one of: {', '.join(choices)}.")


def _money(values: Dict[str, Any], name: str, errors: Dict[str, List[str]]) -> None:
    try:
        values[name] = money_or_none(values.get(name))
    except ValueError as e:
        errors.setdefault(name, []).append(str(e))
        values[name] = None
        return
    if values[name] is not None and values[name] < 0:
        errors.setdefault(name, []).append("Must not be negative.")


def _as_date(val) -> Optional[date]:
    if val is None or isinstance(val, date) and not isinstance(val, datetime):
        return val
    if isinstance(val, datetime):
        return val.date()
    parsed = parse_date(str(val))
    if parsed is None:
        raise ValueError(f"Not a date: {val!r}")
    return parsed


def _as_datetime(val) -> Optional[datetime]:
    if val is None:
        return None
    if isinstance(val, datetime):
        parsed = val
    else:
        parsed = parse_datetime(str(val))
        if parsed is None:
            raise ValueError(f"Not a date/time: {val!r}")
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


class ReadCollection(Generic[T]):
    """Keyed, ordered, read-only collection of one entity type."""

    entity = "Record"
    model: Type[T]
    key_attr = "id"
    order_by = "id"
    newest_first = False

    def __init__(self, store: "RecordStore"):
        self._store = store
        self._rows: Dict[str, T] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def load(self, records: Iterable[T]) -> None:
        """Put records in verbatim (seeding); no validation, no latency."""
        for record in records:
            self._rows[getattr(record, self.key_attr)] = record

    def clear(self) -> None:
        self._rows.clear()

    def _ordered(self) -> List[T]:
        return sorted(
            self._rows.values(),
            key=lambda r: (getattr(r, self.order_by), getattr(r, self.key_attr)),
            reverse=self.newest_first,
        )

    def _matches(self, record: T, term: str) -> bool:
        for f in fields(record):
            val = getattr(record, f.name)
            if val is not None and term in str(val).lower():
                return True
        return False

    async def list(self, page: int = 1, page_size: Optional[int] = None, filter_term: Optional[str] = None) -> Page[T]:
        await self._store.pause()
        rows = self._ordered()
        term = (filter_term or "").strip().lower()
        if term:
            rows = [r for r in rows if self._matches(r, term)]
        size = page_size or self._store.page_size
        start = (max(page, 1) - 1) * size
        return Page(items=[replace(r) for r in rows[start:start + size]], total_count=len(rows))

    async def all(self) -> List[T]:
        await self._store.pause()
        return [replace(r) for r in self._ordered()]

    async def get(self, record_id: str) -> Optional[T]:
        await self._store.pause()
        record = self._rows.get(record_id)
        return replace(record) if record is not None else None


class Collection(ReadCollection[T]):
    """Read/write collection; subclasses validate and derive fields in ``_clean``."""

    prefix = ""
    width = 6
    timestamps = False
    derived_fields: Tuple[str, ...] = ()

    def __init__(self, store: "RecordStore"):
        super().__init__(store)
        self._last_number = 0

    def load(self, records: Iterable[T]) -> None:
        records = list(records)
        super().load(records)
        for record in records:
            self._bump(record.id)

    def clear(self) -> None:
        super().clear()
        self._last_number = 0

    def _bump(self, record_id: str) -> None:
        match = re.fullmatch(re.escape(self.prefix) + r"(\d+)", record_id or "")
        if match:
            self._last_number = max(self._last_number, int(match.group(1)))

    def _next_id(self) -> str:
        self._last_number += 1
        return f"{self.prefix}{self._last_number:0{self.width}d}"

    def _editable(self) -> List[str]:
        return [f.name for f in fields(self.model) if f.name not in READ_ONLY_FIELDS]

    def _check_fields(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        editable = set(self._editable())
        errors: Dict[str, List[str]] = {}
        values: Dict[str, Any] = {}
        for key, val in data.items():
            if key in self.derived_fields:
                continue
            if key in READ_ONLY_FIELDS:
                errors[key] = ["This field is read-only."]
            elif key not in editable:
                errors[key] = ["Unknown field."]
            else:
                values[key] = val
        if errors:
            raise ValidationError(errors)
        return values

    def _snapshot(self, record: T) -> Dict[str, Any]:
        return {name: getattr(record, name) for name in self._editable()}

    def _clean(self, values: Dict[str, Any], current: Optional[T]) -> Dict[str, Any]:
        return values

    def _can_delete(self, record: T) -> bool:
        return True

    async def create(self, data: Mapping[str, Any]) -> T:
        await self._store.pause()
        values = self._clean(self._check_fields(data), current=None)
        record_id = self._next_id()
        if self.timestamps:
            stamp = timezone.now()
            values.update(created_at=stamp, updated_at=stamp)
        record = self.model(id=record_id, **values)
        self._rows[record_id] = record
        logger.info("Created %s %s", self.entity, record_id)
        return replace(record)

    async def update(self, record_id: str, partial: Mapping[str, Any]) -> Optional[T]:
        await self._store.pause()
        current = self._rows.get(record_id)
        if current is None:
            return None
        changes = self._check_fields(partial)
        values = self._clean({**self._snapshot(current), **changes}, current=current)
        if self.timestamps:
            values["updated_at"] = timezone.now()
        updated = replace(current, **values)
        self._rows[record_id] = updated
        logger.info("Updated %s %s (%s)", self.entity, record_id, ", ".join(sorted(changes)) or "touch")
        return replace(updated)

    async def delete(self, record_id: str) -> bool:
        await self._store.pause()
        current = self._rows.get(record_id)
        if current is None:
            return False
        if not self._can_delete(current):
            logger.warning("Refused to delete %s %s", self.entity, record_id)
            return False
        del self._rows[record_id]
        logger.info("Deleted %s %s", self.entity, record_id)
        return True

    async def restore(self, record: T) -> T:
        """Put a previously deleted record back exactly as it was."""
        await self._store.pause()
        self._rows[record.id] = replace(record)
        self._bump(record.id)
        logger.info("Restored %s %s", self.entity, record.id)
        return replace(record)


class QuotationCollection(Collection[Quotation]):
    entity = "Quotation"
    model = Quotation
    prefix = "QTN-"
    width = 6
    timestamps = True
    order_by = "updated_at"
    newest_first = True
    derived_fields = ("profit_and_loss",)

    def _clean(self, values, current):
        errors: Dict[str, List[str]] = {}
        for name in ("customer_name", "pol", "pod", "equipment", "type"):
            values[name] = _text(values.get(name))
        _require(values, ("customer_name", "pol", "pod", "equipment", "type"), errors)
        _choice(values, "type", SHIPMENT_TYPES, errors)
        values["status"] = values.get("status") or QuotationStatus.DRAFT
        _choice(values, "status", QuotationStatus.CHOICES, errors)
        _money(values, "buy_rate", errors)
        _money(values, "sell_rate", errors)
        if values["status"] != QuotationStatus.DRAFT and "buy_rate" not in errors and "sell_rate" not in errors:
            if values["buy_rate"] is None or values["sell_rate"] is None:
                message = "Buy and sell rates are required unless the quotation is a Draft."
                errors.setdefault("buy_rate", []).append(message)
                errors.setdefault("sell_rate", []).append(message)
        values["selected_rate_id"] = _optional_text(values.get("selected_rate_id"))
        values["notes"] = _optional_text(values.get("notes"))
        if errors:
            raise ValidationError(errors)
        values["profit_and_loss"] = profit_and_loss(values["sell_rate"], values["buy_rate"])
        return values

    def _can_delete(self, record):
        return record.status != QuotationStatus.BOOKING_COMPLETED

    async def search_by_text(self, term: str) -> List[Quotation]:
        """Quotations whose id or customer name contains ``term`` (case-insensitive)."""
        await self._store.pause()
        term = (term or "").strip().lower()
        if not term:
            return []
        return [
            replace(q) for q in self._ordered()
            if term in q.id.lower() or term in q.customer_name.lower()
        ]


class BookingCollection(Collection[Booking]):
    entity = "Booking"
    model = Booking
    prefix = "BKNG-"
    width = 6
    timestamps = True
    order_by = "updated_at"
    newest_first = True
    derived_fields = ("profit_and_loss",)

    def _clean(self, values, current):
        errors: Dict[str, List[str]] = {}
        for name in ("quotation_id", "customer_name", "pol", "pod", "equipment", "type"):
            values[name] = _text(values.get(name))
        _require(values, ("quotation_id", "customer_name", "pol", "pod", "equipment", "type"), errors)
        _choice(values, "type", SHIPMENT_TYPES, errors)
        values["status"] = values.get("status") or BookingStatus.BOOKED
        _choice(values, "status", BookingStatus.CHOICES, errors)
        _money(values, "buy_rate", errors)
        _money(values, "sell_rate", errors)
        values["selected_carrier_rate_id"] = _optional_text(values.get("selected_carrier_rate_id"))
        values["notes"] = _optional_text(values.get("notes"))
        if errors:
            raise ValidationError(errors)
        values["buy_rate"] = values["buy_rate"] if values["buy_rate"] is not None else ZERO
        values["sell_rate"] = values["sell_rate"] if values["sell_rate"] is not None else ZERO
        values["profit_and_loss"] = profit_and_loss(values["sell_rate"], values["buy_rate"])
        return values


class BuyRateCollection(Collection[BuyRate]):
    entity = "BuyRate"
    model = BuyRate
    prefix = "BR-"
    width = 4
    order_by = "valid_to"
    newest_first = True

    def _clean(self, values, current):
        errors: Dict[str, List[str]] = {}
        text_fields = ("carrier", "pol", "pod", "commodity", "freight_mode_type", "equipment", "weight_capacity", "min_booking")
        for name in text_fields:
            values[name] = _text(values.get(name))
        _require(values, text_fields + ("rate", "valid_from", "valid_to"), errors)
        _choice(values, "freight_mode_type", FREIGHT_MODES, errors)
        _money(values, "rate", errors)
        if values.get("rate") is not None and values["rate"] <= 0 and "rate" not in errors:
            errors["rate"] = ["Rate must be a positive number."]
        for name in ("valid_from", "valid_to"):
            try:
                values[name] = _as_date(values.get(name))
            except ValueError as e:
                errors.setdefault(name, []).append(str(e))
                values[name] = None
        if values["valid_from"] and values["valid_to"] and values["valid_to"] < values["valid_from"]:
            errors.setdefault("valid_to", []).append("Valid To date must be on or after Valid From date.")
        if errors:
            raise ValidationError(errors)
        return values


class ScheduleCollection(Collection[Schedule]):
    entity = "Schedule"
    model = Schedule
    prefix = "SCH-"
    width = 4
    order_by = "etd"
    newest_first = True

    def _clean(self, values, current):
        errors: Dict[str, List[str]] = {}
        text_fields = ("carrier", "origin", "destination", "service_route", "frequency")
        for name in text_fields:
            values[name] = _text(values.get(name))
        _require(values, text_fields + ("allocation", "etd", "eta"), errors)
        _choice(values, "frequency", FREQUENCIES, errors)
        allocation = values.get("allocation")
        if allocation is not None:
            try:
                whole = int(str(allocation).strip())
            except ValueError:
                whole = None
            if whole is None or whole <= 0:
                errors.setdefault("allocation", []).append("Allocation must be a positive integer.")
            else:
                values["allocation"] = whole
        for name in ("etd", "eta"):
            try:
                values[name] = _as_datetime(values.get(name))
            except ValueError as e:
                errors.setdefault(name, []).append(str(e))
                values[name] = None
        if values["etd"] and values["eta"] and values["eta"] < values["etd"]:
            errors.setdefault("eta", []).append("ETA must be on or after ETD.")
        if errors:
            raise ValidationError(errors)
        return values

    def _matches(self, record, term):
        if super()._matches(record, term):
            return True
        for code in (record.origin, record.destination):
            name = self._store.port_name(code)
            if name and term in name.lower():
                return True
        return False


class ScheduleRateCollection(ReadCollection[ScheduleRate]):
    entity = "ScheduleRate"
    model = ScheduleRate


class PortCollection(ReadCollection[Port]):
    entity = "Port"
    model = Port
    key_attr = "code"
    order_by = "name"


class RecordStore:
    """All collections of the back office behind one async facade."""

    def __init__(self, latency_ms: int = 0, rate_search_limit: int = 10, page_size: int = 10):
        self.latency = max(latency_ms, 0) / 1000.0
        self.rate_search_limit = rate_search_limit
        self.page_size = page_size
        self.ports = PortCollection(self)
        self.quotations = QuotationCollection(self)
        self.bookings = BookingCollection(self)
        self.buy_rates = BuyRateCollection(self)
        self.schedules = ScheduleCollection(self)
        self.schedule_rates = ScheduleRateCollection(self)

    async def pause(self) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        else:
            await asyncio.sleep(0)

    def clear(self) -> None:
        for collection in (self.ports, self.quotations, self.bookings, self.buy_rates, self.schedules, self.schedule_rates):
            collection.clear()

    def port_name(self, code: str) -> Optional[str]:
        port = self.ports._rows.get(code)
        return port.name if port else None

    def find_port(self, term: str) -> Optional[Port]:
        """Look a port up by exact code or name, ignoring case."""
        key = (term or "").strip().lower()
        for port in self.ports._rows.values():
            if port.code.lower() == key or port.name.lower() == key:
                return port
        return None

    def _route_matches(self, code: str, term: str) -> bool:
        if not term:
            return True
        if term in code.lower():
            return True
        name = self.port_name(code)
        return bool(name and term in name.lower())

    async def search_rates(self, origin: str = "", destination: str = "") -> List[ScheduleRate]:
        """Candidate carrier rates for a route.

        Origin and destination are matched as case-insensitive substrings of
        the candidate's port code or port name; an empty term matches any
        port. Zero matches is a normal outcome.
        """
        await self.pause()
        origin_term = (origin or "").strip().lower()
        dest_term = (destination or "").strip().lower()
        results = [
            replace(rate) for rate in self.schedule_rates._ordered()
            if self._route_matches(rate.origin, origin_term) and self._route_matches(rate.destination, dest_term)
        ]
        logger.debug("Rate search %r -> %r: %d candidates", origin, destination, len(results))
        return results[: self.rate_search_limit]


_store: Optional[RecordStore] = None


def build_store(seed: bool = True) -> RecordStore:
    from django.conf import settings

    from .seed import seed_store

    store = RecordStore(
        latency_ms=settings.RECORD_STORE_LATENCY_MS,
        rate_search_limit=settings.RATE_SEARCH_LIMIT,
        page_size=settings.DEFAULT_PAGE_SIZE,
    )
    if seed:
        seed_store(store)
    return store


def get_store() -> RecordStore:
    """Process-wide store, seeded on first use."""
    global _store
    if _store is None:
        _store = build_store()
    return _store


def reset_store(seed: bool = True) -> RecordStore:
    """Drop every record and start again from the seed data."""
    global _store
    _store = build_store(seed=seed)
    logger.info("Record store reset (seeded=%s)", seed)
    return _store
