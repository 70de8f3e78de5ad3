"""Collapse fares sharing an origin-destination pair to the cheapest one."""

from typing import Dict, Iterable, List, Optional, Tuple

from shamfares.fares.errors import InvalidArgumentError
from shamfares.fares.models import FareRecord


def cheapest_per_route(records: Iterable[FareRecord], limit: Optional[int] = None) -> List[FareRecord]:
    """Return the cheapest priced record of each route, ascending by price.

    Routes where no record has a price are left out. On equal prices the
    record seen first wins.
    """
    if limit is not None and limit < 0:
        raise InvalidArgumentError(f"limit must be non-negative, got {limit}")

    best: Dict[Tuple[str, str], FareRecord] = {}
    for record in records:
        if record.price_usd is None:
            continue
        key = record.route_key()
        current = best.get(key)
        if current is None or record.price_usd < current.price_usd:
            best[key] = record

    deals = sorted(best.values(), key=lambda r: r.price_usd)
    if limit is not None:
        deals = deals[:limit]
    return deals
