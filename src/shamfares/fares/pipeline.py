"""Filter and sort fares under combined criteria."""

import logging
from typing import Iterable, List, Optional, Union

from shamfares.fares.errors import FormatError
from shamfares.fares.models import FareRecord, FilterCriteria, SortKey

logger = logging.getLogger(__name__)


def matches(record: FareRecord, criteria: FilterCriteria) -> bool:
    """Check a record against every populated criterion."""
    if criteria.direct_only and record.stops != 0:
        return False
    if criteria.airlines and record.airline_code not in criteria.airlines:
        return False
    if criteria.max_price is not None:
        # Unknown price cannot be proven under the bound
        if record.price_usd is None or record.price_usd > criteria.max_price:
            return False
    if criteria.destination_code and not record.touches(criteria.destination_code):
        return False
    return True


def _sort_value(record: FareRecord, key: SortKey):
    if key is SortKey.PRICE:
        if record.price_usd is None:
            return (1, 0.0)
        return (0, record.price_usd)
    if key is SortKey.DURATION:
        if isinstance(record.duration_minutes, bool) or not isinstance(record.duration_minutes, int):
            raise FormatError(
                f"Invalid duration_minutes: {record.duration_minutes!r}",
                record_id=record.id,
                field="duration_minutes",
            )
        return record.duration_minutes
    return record.departure_minutes()


def apply_filters(
    records: Iterable[FareRecord],
    criteria: Optional[FilterCriteria] = None,
    sort_key: Union[SortKey, str] = SortKey.PRICE,
    errors: Optional[list] = None,
) -> List[FareRecord]:
    """Filter then sort records into a new list.

    Sorting is stable, so ties keep their input order. Null prices sort after
    every priced record. Records whose sort field cannot be read are dropped
    with a FormatError appended to ``errors`` (when given).
    """
    key = SortKey.parse(sort_key)
    criteria = criteria or FilterCriteria()

    keyed = []
    dropped = 0
    for record in records:
        if not matches(record, criteria):
            continue
        try:
            keyed.append((_sort_value(record, key), record))
        except FormatError as e:
            logger.warning("Dropping record %s from %s sort: %s", record.id, key.value, e.message)
            if errors is not None:
                errors.append(e)
            dropped += 1

    if dropped:
        logger.warning("Dropped %d records that could not be sorted by %s", dropped, key.value)

    keyed.sort(key=lambda pair: pair[0])
    return [record for _, record in keyed]
