"""Month price calendar built from recurring weekly schedules.

Months are 1-based (1 = January) throughout, as in ``datetime.date``.
"""

import calendar as _calendar
from datetime import MAXYEAR, MINYEAR, date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from shamfares.fares.errors import InvalidArgumentError
from shamfares.fares.models import CalendarDayPrice, FareRecord, PriceTier


def _check_month(year: int, month: int) -> None:
    if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
        raise InvalidArgumentError(f"Invalid month: {month!r}. Expected 1-12")
    if not isinstance(year, int) or isinstance(year, bool) or not MINYEAR <= year <= MAXYEAR:
        raise InvalidArgumentError(f"Invalid year: {year!r}")


def days_in_month(year: int, month: int) -> int:
    _check_month(year, month)
    return _calendar.monthrange(year, month)[1]


def build_calendar(
    records: Iterable[FareRecord],
    year: int,
    month: int,
    destination: Optional[str] = None,
) -> List[CalendarDayPrice]:
    """Cheapest price for every day of the month.

    A record counts for a day when its days_of_week contains the day's ISO
    weekday and, if destination is given, when either end of its route is
    that airport. Records without weekday data never count.
    """
    n_days = days_in_month(year, month)

    # Cheapest price per ISO weekday, then spread over the month
    by_weekday: Dict[int, float] = {}
    for r in records:
        if r.price_usd is None:
            continue
        if destination and not r.touches(destination):
            continue
        for wd in r.days_of_week:
            if wd not in by_weekday or r.price_usd < by_weekday[wd]:
                by_weekday[wd] = r.price_usd

    days = []
    for day in range(1, n_days + 1):
        weekday = date(year, month, day).isoweekday()
        days.append(CalendarDayPrice(day=day, price=by_weekday.get(weekday), weekday=weekday))
    return days


def price_tier(price: float, min_of_month: float, max_of_month: float) -> PriceTier:
    """Classify a price into three equal-width bands of [min, max]."""
    if max_of_month == min_of_month:
        return PriceTier.CHEAP
    third = (max_of_month - min_of_month) / 3
    if price <= min_of_month + third:
        return PriceTier.CHEAP
    if price <= min_of_month + third * 2:
        return PriceTier.MID
    return PriceTier.EXPENSIVE


def month_price_range(days: Sequence[CalendarDayPrice]) -> Optional[Tuple[float, float]]:
    """(min, max) over priced days, or None if no day has a price."""
    prices = [d.price for d in days if d.price is not None]
    if not prices:
        return None
    return min(prices), max(prices)


def tier_calendar(days: Sequence[CalendarDayPrice]) -> Dict[int, PriceTier]:
    """Map each priced day to its tier relative to the month."""
    bounds = month_price_range(days)
    if bounds is None:
        return {}
    low, high = bounds
    return {d.day: price_tier(d.price, low, high) for d in days if d.price is not None}


def fares_on_day(records: Iterable[FareRecord], year: int, month: int, day: int) -> List[FareRecord]:
    """Records operating on the weekday of the given date, in input order."""
    n_days = days_in_month(year, month)
    if not isinstance(day, int) or not 1 <= day <= n_days:
        raise InvalidArgumentError(f"Invalid day: {day!r}. Expected 1-{n_days}")
    weekday = date(year, month, day).isoweekday()
    return [r for r in records if r.operates_on(weekday)]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move (year, month) by delta months."""
    _check_month(year, month)
    index = year * 12 + (month - 1) + delta
    new_year, new_month = divmod(index, 12)
    _check_month(new_year, new_month + 1)
    return new_year, new_month + 1
