"""
Dashboard session: explicit UI state plus command dispatch.

The session owns the loaded record set and the filter criteria. Every command
produces a new state; the visible subset and summary are recomputed from
scratch whenever records or criteria change. Writes go to the store and are
always followed by a full reload, never merged into local state.
"""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Sequence, Tuple, Union

from payment_tracker.domain.exceptions import PaymentValidationError, StoreError
from payment_tracker.domain.filtering import apply_filters
from payment_tracker.domain.models import (
    FilterCriteria,
    FilteredView,
    PaymentFields,
    PaymentMethod,
    PaymentRecord,
    Report,
)
from payment_tracker.domain.timezone import (
    current_display_date,
    format_long_date,
    format_short_date,
    format_short_date_with_year,
    next_day,
    previous_day,
    to_datetime_local_value,
)
from payment_tracker.domain.validation import validate_payment_form

logger = logging.getLogger(__name__)


class PaymentStore(Protocol):
    async def list(self) -> List[PaymentRecord]: ...

    async def insert(self, fields: PaymentFields) -> PaymentRecord: ...

    async def update(self, payment_id: uuid.UUID, fields: PaymentFields) -> PaymentRecord: ...

    async def delete(self, payment_id: uuid.UUID) -> None: ...

    async def generate_report(
        self, date_from: date, date_to: date, payment_method: Optional[PaymentMethod] = None
    ) -> Report: ...


@dataclass(frozen=True)
class PaymentForm:
    """Raw payment form input; timestamp is a display-time wall clock"""

    client_name: str = ""
    payment_method: str = PaymentMethod.CASH.value
    amount_paid: Any = ""
    timestamp: str = ""
    service_type: str = ""

    @classmethod
    def from_record(cls, record: PaymentRecord) -> "PaymentForm":
        """Pre-populate an edit form from a stored record"""
        return cls(
            client_name=record.client_name,
            payment_method=record.payment_method.value,
            amount_paid=str(record.amount_paid),
            timestamp=to_datetime_local_value(record.timestamp),
            service_type=record.service_type or "",
        )

    def validate(self) -> PaymentFields:
        return validate_payment_form(
            self.client_name, self.payment_method, self.amount_paid, self.timestamp, self.service_type
        )


@dataclass(frozen=True)
class Notification:
    level: str  # "error" | "info"
    message: str


# Commands


@dataclass(frozen=True)
class Reload:
    pass


@dataclass(frozen=True)
class SetSearch:
    text: str


@dataclass(frozen=True)
class SetDateFrom:
    day: Optional[date]


@dataclass(frozen=True)
class SetDateTo:
    day: Optional[date]


@dataclass(frozen=True)
class SetPaymentMethod:
    method: Optional[PaymentMethod]


@dataclass(frozen=True)
class GoToToday:
    pass


@dataclass(frozen=True)
class GoToPreviousDay:
    pass


@dataclass(frozen=True)
class GoToNextDay:
    pass


@dataclass(frozen=True)
class ShowAllTime:
    pass


@dataclass(frozen=True)
class AddPayment:
    form: PaymentForm


@dataclass(frozen=True)
class EditPayment:
    payment_id: uuid.UUID
    form: PaymentForm


@dataclass(frozen=True)
class DeletePayment:
    payment_id: uuid.UUID
    confirmed: bool = False


@dataclass(frozen=True)
class GenerateReport:
    pass


Command = Union[
    Reload,
    SetSearch,
    SetDateFrom,
    SetDateTo,
    SetPaymentMethod,
    GoToToday,
    GoToPreviousDay,
    GoToNextDay,
    ShowAllTime,
    AddPayment,
    EditPayment,
    DeletePayment,
    GenerateReport,
]


class DashboardSession:
    """State holder for one signed-in dashboard"""

    def __init__(self, store: PaymentStore, today: Optional[date] = None):
        self.store = store
        # Fixed for the lifetime of the session; drives defaults and "Today"
        self.today = today or current_display_date()
        self.records: Tuple[PaymentRecord, ...] = ()
        self.criteria = FilterCriteria(date_from=self.today, date_to=self.today)
        self.view: FilteredView = apply_filters(self.records, self.criteria)
        self.notifications: List[Notification] = []
        self.last_report: Optional[Report] = None
        self._handlers: Dict[type, Callable[[Any], Awaitable[bool]]] = {
            Reload: self._reload,
            SetSearch: self._set_search,
            SetDateFrom: self._set_date_from,
            SetDateTo: self._set_date_to,
            SetPaymentMethod: self._set_payment_method,
            GoToToday: self._go_to_today,
            GoToPreviousDay: self._go_to_previous_day,
            GoToNextDay: self._go_to_next_day,
            ShowAllTime: self._show_all_time,
            AddPayment: self._add_payment,
            EditPayment: self._edit_payment,
            DeletePayment: self._delete_payment,
            GenerateReport: self._generate_report,
        }

    async def dispatch(self, command: Command) -> bool:
        """Apply a command; returns False when it failed and state was left as-is"""
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unknown dashboard command: {command!r}")
        return await handler(command)

    def find(self, payment_id: uuid.UUID) -> Optional[PaymentRecord]:
        return next((r for r in self.records if r.id == payment_id), None)

    def range_label(self) -> str:
        """Human label for the current date range"""
        date_from, date_to = self.criteria.date_from, self.criteria.date_to
        if date_from is None and date_to is None:
            return "All Time"
        if date_from is not None and date_from == date_to:
            return format_long_date(date_from)
        if date_from is not None and date_to is not None:
            return f"{format_short_date(date_from)} - {format_short_date_with_year(date_to)}"
        return "Custom Range"

    @property
    def is_today(self) -> bool:
        return self.criteria.date_from == self.today and self.criteria.date_to == self.today

    # State transitions

    def _set_records(self, records: Sequence[PaymentRecord]) -> None:
        self.records = tuple(records)
        self.view = apply_filters(self.records, self.criteria)

    def _set_criteria(self, **changes: Any) -> bool:
        self.criteria = replace(self.criteria, **changes)
        self.view = apply_filters(self.records, self.criteria)
        return True

    def _notify_error(self, message: str, error: Exception) -> bool:
        logger.error("%s: %s", message, error)
        self.notifications.append(Notification("error", message))
        return False

    # Handlers

    async def _reload(self, command: Reload) -> bool:
        try:
            records = await self.store.list()
        except StoreError as e:
            return self._notify_error("Failed to load payments. Please try again.", e)
        self._set_records(records)
        return True

    async def _set_search(self, command: SetSearch) -> bool:
        return self._set_criteria(search=command.text)

    async def _set_date_from(self, command: SetDateFrom) -> bool:
        return self._set_criteria(date_from=command.day)

    async def _set_date_to(self, command: SetDateTo) -> bool:
        return self._set_criteria(date_to=command.day)

    async def _set_payment_method(self, command: SetPaymentMethod) -> bool:
        return self._set_criteria(payment_method=command.method)

    async def _go_to_today(self, command: GoToToday) -> bool:
        return self._set_criteria(date_from=self.today, date_to=self.today)

    async def _go_to_previous_day(self, command: GoToPreviousDay) -> bool:
        if self.criteria.date_from is None:
            return False
        day = previous_day(self.criteria.date_from)
        return self._set_criteria(date_from=day, date_to=day)

    async def _go_to_next_day(self, command: GoToNextDay) -> bool:
        if self.criteria.date_from is None:
            return False
        day = next_day(self.criteria.date_from)
        return self._set_criteria(date_from=day, date_to=day)

    async def _show_all_time(self, command: ShowAllTime) -> bool:
        return self._set_criteria(date_from=None, date_to=None)

    async def _add_payment(self, command: AddPayment) -> bool:
        try:
            fields = command.form.validate()
        except PaymentValidationError as e:
            self.notifications.append(Notification("error", e.message))
            return False
        try:
            await self.store.insert(fields)
        except StoreError as e:
            return self._notify_error("Failed to add payment. Please try again.", e)
        return await self._reload(Reload())

    async def _edit_payment(self, command: EditPayment) -> bool:
        try:
            fields = command.form.validate()
        except PaymentValidationError as e:
            self.notifications.append(Notification("error", e.message))
            return False
        try:
            await self.store.update(command.payment_id, fields)
        except StoreError as e:
            return self._notify_error("Failed to update payment. Please try again.", e)
        return await self._reload(Reload())

    async def _delete_payment(self, command: DeletePayment) -> bool:
        if not command.confirmed:
            return False
        try:
            await self.store.delete(command.payment_id)
        except StoreError as e:
            return self._notify_error("Failed to delete payment. Please try again.", e)
        return await self._reload(Reload())

    async def _generate_report(self, command: GenerateReport) -> bool:
        date_from = self.criteria.date_from or self.today
        date_to = self.criteria.date_to or self.today
        try:
            report = await self.store.generate_report(date_from, date_to, self.criteria.payment_method)
        except StoreError as e:
            return self._notify_error("Failed to generate report. Please try again.", e)
        self.last_report = report
        return True
