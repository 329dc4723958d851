"""Aggregation of merchant transaction totals."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from decimal import Decimal

from shared.models import TransactionMaster, TransactionSummary


DEFAULT_CURRENCY = "USD"
UNKNOWN_STATUS = "unknown"


def summarize(transactions: Iterable[TransactionMaster]) -> TransactionSummary:
    """Return count, exact decimal total, representative currency and per-status counts.

    The currency is the first non-null one found; mixed-currency sets are not
    split per currency.
    """

    rows = list(transactions)
    total = sum((row.amount for row in rows if row.amount is not None), Decimal("0"))
    currency = next((row.currency for row in rows if row.currency is not None), DEFAULT_CURRENCY)
    by_status = Counter(row.status if row.status is not None else UNKNOWN_STATUS for row in rows)

    return TransactionSummary(
        total_transactions=len(rows),
        total_amount=total,
        currency=currency,
        by_status=dict(by_status),
    )
