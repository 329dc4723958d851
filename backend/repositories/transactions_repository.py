"""Transactions repository adapters.

Transactions are read-only here: masters live in `transaction_master`, their
itemized lines in `transaction_detail`.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Protocol

from backend.db.supabase_client import SupabaseClient
from shared.models import TransactionDetail, TransactionFilters, TransactionMaster


_MASTER_COLUMNS = (
    "txn_id,merchant_id,amount,currency,status,local_txn_date_time,card_type,card_last4,"
    "acquirer_member_id,issuer_member_id"
)
_DETAIL_COLUMNS = "detail_id,master_txn_id,detail_type,amount,currency,description"
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class TransactionsRepository(Protocol):
    def search_transactions(self, filters: TransactionFilters) -> tuple[list[TransactionMaster], int]:
        """Return one page of matching transactions, newest first, and the total match count."""

    def list_transactions(self, filters: TransactionFilters) -> list[TransactionMaster]:
        """Return every matching transaction, ignoring limit and offset."""

    def list_details(self, master_txn_ids: Iterable[int]) -> list[TransactionDetail]:
        """Return the detail lines of all given transactions in one lookup."""


class InMemoryTransactionsRepository:
    """In-memory transactions store used by tests/dev."""

    def __init__(
        self,
        transactions: Iterable[TransactionMaster] | None = None,
        details: Iterable[TransactionDetail] | None = None,
    ) -> None:
        self._transactions: list[TransactionMaster] = list(transactions or [])
        self._details: list[TransactionDetail] = list(details or [])

    def _filter_rows(self, filters: TransactionFilters) -> list[TransactionMaster]:
        rows = [row for row in self._transactions if row.merchant_id == filters.merchant_id]
        if filters.status:
            rows = [row for row in rows if row.status == filters.status]
        if filters.start is not None:
            rows = [
                row
                for row in rows
                if row.local_txn_date_time is not None and row.local_txn_date_time >= filters.start
            ]
        if filters.end is not None:
            rows = [
                row
                for row in rows
                if row.local_txn_date_time is not None and row.local_txn_date_time <= filters.end
            ]
        return sorted(
            rows,
            key=lambda row: (
                row.local_txn_date_time is not None,
                row.local_txn_date_time or _OLDEST,
                row.txn_id,
            ),
            reverse=True,
        )

    def search_transactions(self, filters: TransactionFilters) -> tuple[list[TransactionMaster], int]:
        rows = self._filter_rows(filters)
        return rows[filters.offset : filters.offset + filters.limit], len(rows)

    def list_transactions(self, filters: TransactionFilters) -> list[TransactionMaster]:
        return self._filter_rows(filters)

    def list_details(self, master_txn_ids: Iterable[int]) -> list[TransactionDetail]:
        wanted = set(master_txn_ids)
        return [detail for detail in self._details if detail.master_txn_id in wanted]


class SupabaseTransactionsRepository:
    """Supabase repository over `transaction_master` and `transaction_detail`."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    def _build_query(self, filters: TransactionFilters) -> list[tuple[str, str | int]]:
        query: list[tuple[str, str | int]] = [("merchant_id", f"eq.{filters.merchant_id}")]

        if filters.status:
            query.append(("status", f"eq.{filters.status}"))

        if filters.start is not None:
            query.append(("local_txn_date_time", f"gte.{filters.start.isoformat()}"))

        if filters.end is not None:
            query.append(("local_txn_date_time", f"lte.{filters.end.isoformat()}"))

        return query

    def search_transactions(self, filters: TransactionFilters) -> tuple[list[TransactionMaster], int]:
        query = [
            *self._build_query(filters),
            ("select", _MASTER_COLUMNS),
            ("order", "local_txn_date_time.desc.nullslast,txn_id.desc"),
            ("limit", filters.limit),
            ("offset", filters.offset),
        ]
        rows, total = self._client.get_rows(table="transaction_master", query=query, with_count=True)
        items = [TransactionMaster.model_validate(row) for row in rows]
        return items, total if total is not None else filters.offset + len(items)

    def list_transactions(self, filters: TransactionFilters) -> list[TransactionMaster]:
        query = [*self._build_query(filters), ("select", _MASTER_COLUMNS)]
        rows, _ = self._client.get_rows(table="transaction_master", query=query, with_count=False)
        return [TransactionMaster.model_validate(row) for row in rows]

    def list_details(self, master_txn_ids: Iterable[int]) -> list[TransactionDetail]:
        ids = sorted(set(master_txn_ids))
        if not ids:
            return []
        rows, _ = self._client.get_rows(
            table="transaction_detail",
            query=[
                ("master_txn_id", f"in.({','.join(str(txn_id) for txn_id in ids)})"),
                ("select", _DETAIL_COLUMNS),
                ("order", "detail_id.asc"),
            ],
            with_count=False,
        )
        return [TransactionDetail.model_validate(row) for row in rows]
