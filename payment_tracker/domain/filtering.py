"""Filter & aggregation engine - shared by the dashboard and the report generator"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from payment_tracker.domain.models import (
    ZERO,
    FilterCriteria,
    FilteredView,
    PaymentMethod,
    PaymentRecord,
    Summary,
)
from payment_tracker.domain.timezone import instant_to_display_date


def matches_search(record: PaymentRecord, search: str) -> bool:
    """Case-insensitive substring match on client name; empty search matches all"""
    return search.casefold() in record.client_name.casefold()


def matches_date_from(display_date: date, date_from: Optional[date]) -> bool:
    return date_from is None or display_date >= date_from


def matches_date_to(display_date: date, date_to: Optional[date]) -> bool:
    return date_to is None or display_date <= date_to


def matches_method(record: PaymentRecord, method: Optional[PaymentMethod]) -> bool:
    return method is None or record.payment_method == method


def matches(record: PaymentRecord, criteria: FilterCriteria) -> bool:
    """
    Inclusion test for a single record.

    Date bounds are inclusive and compared against the record's calendar date
    in the display timezone, never against the raw UTC instant.
    """
    display_date = instant_to_display_date(record.timestamp)
    return (
        matches_search(record, criteria.search)
        and matches_date_from(display_date, criteria.date_from)
        and matches_date_to(display_date, criteria.date_to)
        and matches_method(record, criteria.payment_method)
    )


def filter_payments(records: Iterable[PaymentRecord], criteria: FilterCriteria) -> List[PaymentRecord]:
    """
    Visible subset of records, in the order they were given.

    A date_from later than date_to is accepted and simply matches nothing.
    """
    return [r for r in records if matches(r, criteria)]


def summarize(records: Iterable[PaymentRecord]) -> Summary:
    """
    Sum amounts per payment method plus a grand total.

    Negative amounts (refunds, adjustments) subtract; nothing is clamped.
    """
    buckets: Dict[PaymentMethod, Decimal] = {method: ZERO for method in PaymentMethod}
    total = ZERO
    count = 0

    for record in records:
        buckets[record.payment_method] += record.amount_paid
        total += record.amount_paid
        count += 1

    return Summary(
        cash=buckets[PaymentMethod.CASH],
        zelle=buckets[PaymentMethod.ZELLE],
        check=buckets[PaymentMethod.CHECK],
        booker_cc=buckets[PaymentMethod.HOUSE_ACCOUNT],
        total=total,
        count=count,
    )


def apply_filters(records: Iterable[PaymentRecord], criteria: FilterCriteria) -> FilteredView:
    """Main entry point: filter the record set and summarize the visible subset"""
    visible = filter_payments(records, criteria)
    return FilteredView(records=tuple(visible), summary=summarize(visible))
