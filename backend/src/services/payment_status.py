"""
Payment state derivation for staff assignments.

Pure functions, no database access. ``payment_status`` is never written
from user input; every code path that changes the due date, the paid
date or the assignment status re-derives it through
``derive_payment_status`` so the stored value cannot drift.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Union

from backend.src.models.staff_assignment import (
    AssignmentStatus, PaymentStatus, PaymentTerms
)


# Assignment states for which no money is owed
TERMINAL_FAILURE_STATUSES = frozenset({
    AssignmentStatus.DECLINED.value,
    AssignmentStatus.CANCELLED.value,
})

PAYMENT_TERM_OFFSETS = {
    PaymentTerms.IMMEDIATE.value: timedelta(days=0),
    PaymentTerms.DAYS_30.value: timedelta(days=30),
    PaymentTerms.DAYS_60.value: timedelta(days=60),
    PaymentTerms.DAYS_90.value: timedelta(days=90),
}


def _value(status: Union[str, AssignmentStatus, PaymentTerms]) -> str:
    return status.value if hasattr(status, "value") else status


def derive_payment_status(
    due_date: Optional[datetime],
    paid_date: Optional[datetime],
    assignment_status: Union[str, AssignmentStatus],
    now: Optional[datetime] = None
) -> PaymentStatus:
    """
    Derive the payment status of an assignment.

    Rules, first match wins:
    1. declined/cancelled assignment -> NOT_DUE (no work, nothing owed)
    2. paid date set -> PAID
    3. no due date -> NOT_DUE
    4. due date strictly before now -> OVERDUE, otherwise PENDING

    Args:
        due_date: Payment due date (naive UTC) or None
        paid_date: Date the payment was made or None
        assignment_status: Assignment lifecycle status
        now: Reference time, defaults to ``datetime.utcnow()``

    Returns:
        The derived PaymentStatus

    Example:
        >>> derive_payment_status(None, None, "confirmed")
        <PaymentStatus.NOT_DUE: 'not_due'>
    """
    if _value(assignment_status) in TERMINAL_FAILURE_STATUSES:
        return PaymentStatus.NOT_DUE

    if paid_date is not None:
        return PaymentStatus.PAID

    if due_date is None:
        return PaymentStatus.NOT_DUE

    if now is None:
        now = datetime.utcnow()

    return PaymentStatus.OVERDUE if due_date < now else PaymentStatus.PENDING


def calculate_payment_due_date(
    end_time: datetime,
    payment_terms: Union[str, PaymentTerms]
) -> datetime:
    """
    Compute ``end_time + offset(terms)``.

    Raises:
        ValueError: For custom terms, which have no offset
    """
    terms = _value(payment_terms)
    if terms not in PAYMENT_TERM_OFFSETS:
        raise ValueError(f"Payment terms '{terms}' do not define a due date offset")
    return end_time + PAYMENT_TERM_OFFSETS[terms]


def resolve_payment_due_date(
    payment_terms: Union[str, PaymentTerms],
    payment_amount: Optional[Decimal],
    end_time: datetime,
    supplied_due_date: Optional[datetime]
) -> Optional[datetime]:
    """
    Pick the due date to store for an assignment.

    Non-custom terms with an amount present derive the date from the end
    of the engagement. Otherwise (custom terms, or no amount yet) the
    caller-supplied date is kept verbatim, including None.
    """
    if _value(payment_terms) != PaymentTerms.CUSTOM.value and payment_amount is not None:
        return calculate_payment_due_date(end_time, payment_terms)
    return supplied_due_date
