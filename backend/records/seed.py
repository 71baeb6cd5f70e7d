"""
Seed data for the in-memory record store.

Quotations come from the rate-filing sheet (one per customer/route/equipment),
bookings from the booking sheet and are linked to the quotation with the same
customer, route and equipment. Buy rates are valid for the current month,
schedules depart weekly from today, and schedule rates are derived from each
schedule plus the carrier's 20GP buy rate on that route.
"""

from __future__ import annotations

import calendar
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from django.utils import timezone

from core.utils import ZERO, profit_and_loss, q2

from .entities import (
    Booking,
    BookingStatus,
    BuyRate,
    Port,
    Quotation,
    QuotationStatus,
    Schedule,
    ScheduleRate,
)

logger = logging.getLogger(__name__)

PORTS = [
    ("INMAA", "Chennai (Madras)", "India"),
    ("USLGB", "Long Beach", "USA"),
    ("CNSGH", "Shanghai", "China"),
    ("INNSA", "Nhava Sheva", "India"),
    ("GBFXS", "Felixstowe", "UK"),
    ("USSAV", "Savannah", "USA"),
    ("AEDXB", "Dubai", "UAE"),
    ("SGSIN", "Singapore", "Singapore"),
    ("HKHKG", "Hong Kong", "Hong Kong SAR"),
    ("NLRTM", "Rotterdam", "Netherlands"),
    ("DEHAM", "Hamburg", "Germany"),
    ("USNYC", "New York", "USA"),
    ("BEANR", "Antwerp", "Belgium"),
    ("MYPKG", "Port Klang", "Malaysia"),
]

EQUIPMENT = ("20GP", "40GP", "40HC")

# customer, pol, pod, sell rate per equipment
RATE_FILING = [
    ("ABC Limited", "INMAA", "USLGB", (1100, 1200, 1200)),
    ("FED Limited", "USSAV", "AEDXB", (920, 1100, 1100)),
    ("DEF Limited", "GBFXS", "USSAV", (850, 1150, 1150)),
    ("DEF Limited", "INNSA", "GBFXS", (900, 1200, 1200)),
]

# pol, pod, equipment, customer
BOOKING_SHEET = [
    ("INMAA", "USLGB", "20GP", "ABC Limited"),
    ("CNSGH", "USLGB", "LCL", "BCD Limited"),
    ("INNSA", "GBFXS", "40HC", "DEF Limited"),
    ("USSAV", "AEDXB", "40GP", "FED Limited"),
    ("GBFXS", "USSAV", "40GP", "DEF Limited"),
]

# carrier, pol, pod, rate per equipment
BUY_RATE_SHEET = [
    ("ONEY", "INMAA", "USLGB", (1200, 1150, 1150)),
    ("MAEU", "INMAA", "USLGB", (1100, 1200, 1200)),
    ("HLCU", "INMAA", "USLGB", (900, 1600, 1600)),
    ("ONEY", "INNSA", "GBFXS", (1100, 1375, 1375)),
    ("HLCU", "INNSA", "GBFXS", (1200, 1450, 1450)),
    ("MAEU", "INNSA", "GBFXS", (1000, 1400, 1400)),
    ("HLCU", "USSAV", "AEDXB", (880, 1000, 1000)),
    ("ONEY", "USSAV", "AEDXB", (980, 1150, 1150)),
    ("MAEU", "GBFXS", "USSAV", (1000, 1100, 1100)),
    ("MSCU", "GBFXS", "USSAV", (990, 1200, 1200)),
    ("ONEY", "GBFXS", "USSAV", (800, 1200, 1200)),
    ("HLCU", "DEHAM", "USNYC", (1050, 1500, 1500)),
    ("MAEU", "SGSIN", "NLRTM", (1000, 1350, 1350)),
    ("ONEY", "SGSIN", "NLRTM", (950, 1300, 1300)),
]

WEIGHT_CAPACITY = {"20GP": "21 TON", "40GP": "26 TON", "40HC": "28 TON"}

# carrier, origin, destination, service route, allocation
SCHEDULE_SHEET = [
    ("ONEY", "INMAA", "USLGB", "O1", 5),
    ("MAEU", "INMAA", "USLGB", "M1", 2),
    ("HLCU", "INMAA", "USLGB", "H1", 3),
    ("ONEY", "INNSA", "GBFXS", "O2", 1),
    ("MAEU", "INNSA", "GBFXS", "M2", 3),
    ("HLCU", "INNSA", "GBFXS", "H2", 4),
    ("ONEY", "USSAV", "AEDXB", "O3", 4),
    ("MAEU", "USSAV", "AEDXB", "M3", 4),
    ("HLCU", "USSAV", "AEDXB", "H3", 4),
    ("ONEY", "GBFXS", "USSAV", "O4", 3),
    ("MAEU", "GBFXS", "USSAV", "M4", 2),
    ("HLCU", "GBFXS", "USSAV", "H4", 3),
    ("HLCU", "DEHAM", "USNYC", "H5", 2),
    ("MAEU", "SGSIN", "NLRTM", "M5", 3),
    ("ONEY", "SGSIN", "NLRTM", "O5", 2),
]

FALLBACK_BUY_RATE = Decimal("1000.00")


def build_ports() -> List[Port]:
    return [Port(code=code, name=name, country=country) for code, name, country in PORTS]


def build_quotations(now) -> List[Quotation]:
    quotations: List[Quotation] = []
    for index, (customer, pol, pod, sell_rates) in enumerate(RATE_FILING):
        stamp = now - timedelta(days=len(RATE_FILING) - index)
        for equipment, sell in zip(EQUIPMENT, sell_rates):
            sell_rate = q2(sell)
            buy_rate = q2(round(sell * 0.8))
            quotations.append(Quotation(
                id=f"QTN-{1001 + len(quotations):06d}",
                customer_name=customer,
                pol=pol,
                pod=pod,
                equipment=equipment,
                type="Export",
                # 40GP lines were already sent to the customer
                status=QuotationStatus.SUBMITTED if equipment == "40GP" else QuotationStatus.DRAFT,
                buy_rate=buy_rate,
                sell_rate=sell_rate,
                profit_and_loss=profit_and_loss(sell_rate, buy_rate),
                created_at=stamp,
                updated_at=stamp,
            ))
    return quotations


def build_bookings(now, quotations: List[Quotation]) -> List[Booking]:
    by_route: Dict[Tuple[str, str, str, str], Quotation] = {
        (q.customer_name, q.pol, q.pod, q.equipment): q for q in quotations
    }
    bookings: List[Booking] = []
    for index, (pol, pod, equipment, customer) in enumerate(BOOKING_SHEET):
        quotation = by_route.get((customer, pol, pod, equipment))
        if quotation is None:
            logger.debug("No quotation for booking sheet row %d (%s %s-%s %s)", index, customer, pol, pod, equipment)
            continue
        stamp = now - timedelta(days=len(BOOKING_SHEET) - index)
        bookings.append(Booking(
            id=f"BKNG-{2001 + index:06d}",
            quotation_id=quotation.id,
            customer_name=quotation.customer_name,
            pol=quotation.pol,
            pod=quotation.pod,
            equipment=quotation.equipment,
            type=quotation.type,
            buy_rate=quotation.buy_rate if quotation.buy_rate is not None else ZERO,
            sell_rate=quotation.sell_rate if quotation.sell_rate is not None else ZERO,
            profit_and_loss=profit_and_loss(quotation.sell_rate, quotation.buy_rate),
            status=BookingStatus.BOOKED,
            created_at=stamp,
            updated_at=stamp,
        ))
        quotation.status = QuotationStatus.BOOKING_COMPLETED
        quotation.updated_at = stamp
    return bookings


def build_buy_rates(today) -> List[BuyRate]:
    first = today.replace(day=1)
    last = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    rates: List[BuyRate] = []
    for carrier, pol, pod, amounts in BUY_RATE_SHEET:
        for equipment, amount in zip(EQUIPMENT, amounts):
            rates.append(BuyRate(
                id=f"BR-{3001 + len(rates):04d}",
                carrier=carrier,
                pol=pol,
                pod=pod,
                commodity="GDSM",
                freight_mode_type="Sea",
                equipment=equipment,
                weight_capacity=WEIGHT_CAPACITY[equipment],
                min_booking="1 TEU",
                rate=q2(amount),
                valid_from=first,
                valid_to=last,
            ))
    return rates


def build_schedules(now) -> List[Schedule]:
    schedules: List[Schedule] = []
    for index, (carrier, origin, destination, route, allocation) in enumerate(SCHEDULE_SHEET):
        etd = now + timedelta(days=index * 7)
        schedules.append(Schedule(
            id=f"SCH-{4001 + index:04d}",
            carrier=carrier,
            origin=origin,
            destination=destination,
            service_route=route,
            allocation=allocation,
            etd=etd,
            eta=etd + timedelta(days=15 + (index * 3) % 11),
            frequency="Weekly",
        ))
    return schedules


def _representative_rate(schedule: Schedule, buy_rates: List[BuyRate]) -> Optional[BuyRate]:
    for rate in buy_rates:
        if (rate.carrier, rate.pol, rate.pod, rate.equipment) == (schedule.carrier, schedule.origin, schedule.destination, "20GP"):
            return rate
    return None


def build_schedule_rates(schedules: List[Schedule], buy_rates: List[BuyRate]) -> List[ScheduleRate]:
    rates: List[ScheduleRate] = []
    for index, schedule in enumerate(schedules):
        match = _representative_rate(schedule, buy_rates)
        rates.append(ScheduleRate(
            id=f"SRATE-{5001 + index:05d}",
            carrier=schedule.carrier,
            origin=schedule.origin,
            destination=schedule.destination,
            voyage_details=f"{schedule.service_route} / {schedule.etd:%d%b%y}".upper(),
            buy_rate=match.rate if match else FALLBACK_BUY_RATE,
            allocation=schedule.allocation,
        ))
    return rates


def seed_store(store) -> None:
    """Clear ``store`` and fill it with the seed data."""
    now = timezone.now()
    store.clear()
    quotations = build_quotations(now)
    bookings = build_bookings(now, quotations)
    buy_rates = build_buy_rates(timezone.localdate())
    schedules = build_schedules(now)
    store.ports.load(build_ports())
    store.quotations.load(quotations)
    store.bookings.load(bookings)
    store.buy_rates.load(buy_rates)
    store.schedules.load(schedules)
    store.schedule_rates.load(build_schedule_rates(schedules, buy_rates))
    logger.info(
        "Seeded store: %d quotations, %d bookings, %d buy rates, %d schedules",
        len(quotations), len(bookings), len(buy_rates), len(schedules),
    )
