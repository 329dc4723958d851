"""Merchant transaction listing with summary and detail/member enrichment."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass

from backend.repositories.members_repository import MembersRepository
from backend.repositories.merchants_repository import MerchantsRepository
from backend.repositories.transactions_repository import TransactionsRepository
from backend.services.date_range import check_date_order, parse_boundary
from backend.services.listing import total_pages_for
from backend.services.summary import summarize
from shared.models import (
    DateRange,
    ErrorCode,
    MerchantTransactionsResponse,
    PaginationInfo,
    ServiceError,
    TransactionDetail,
    TransactionDetailResponse,
    TransactionFilters,
    TransactionMaster,
    TransactionResponse,
    TransactionStatus,
)


logger = logging.getLogger(__name__)

UNKNOWN_MEMBER = "Unknown"
DEFAULT_MAX_PAGE_SIZE = 100
_ALLOWED_STATUSES = tuple(status.value for status in TransactionStatus)


def _validation_error(message: str) -> ServiceError:
    return ServiceError(code=ErrorCode.VALIDATION_ERROR, message=message)


def _to_detail_response(detail: TransactionDetail) -> TransactionDetailResponse:
    return TransactionDetailResponse(
        detail_id=detail.detail_id,
        type=detail.detail_type,
        amount=detail.amount,
        currency=detail.currency,
        description=detail.description,
    )


def _to_transaction_response(
    transaction: TransactionMaster,
    details: list[TransactionDetail],
    member_names: dict[int, str],
) -> TransactionResponse:
    acquirer = None
    if transaction.acquirer_member_id is not None:
        acquirer = member_names.get(transaction.acquirer_member_id, UNKNOWN_MEMBER)
    issuer = None
    if transaction.issuer_member_id is not None:
        issuer = member_names.get(transaction.issuer_member_id, UNKNOWN_MEMBER)

    return TransactionResponse(
        txn_id=transaction.txn_id,
        amount=transaction.amount,
        currency=transaction.currency,
        status=transaction.status,
        timestamp=transaction.local_txn_date_time,
        card_type=transaction.card_type,
        card_last4=transaction.card_last4,
        acquirer=acquirer,
        issuer=issuer,
        details=[_to_detail_response(detail) for detail in details],
    )


@dataclass(slots=True)
class TransactionService:
    transactions_repository: TransactionsRepository
    merchants_repository: MerchantsRepository
    members_repository: MembersRepository
    max_page_size: int = DEFAULT_MAX_PAGE_SIZE

    def get_merchant_transactions(
        self,
        merchant_id: str,
        *,
        page: int = 0,
        size: int = 20,
        start_date: str | None = None,
        end_date: str | None = None,
        status: str | None = None,
    ) -> MerchantTransactionsResponse | ServiceError:
        """Return one 0-based page of a merchant's transactions.

        The summary covers every transaction matching the date and status
        filters, not only the returned page.
        """

        logger.debug(
            "merchant_transactions_requested merchant_id=%s page=%s size=%s start_date=%s end_date=%s status=%s",
            merchant_id,
            page,
            size,
            start_date,
            end_date,
            status,
        )

        if not merchant_id or not merchant_id.strip():
            return _validation_error("Merchant ID cannot be null or empty")
        if page < 0:
            return _validation_error("Page number must be >= 0")
        if size < 1 or size > self.max_page_size:
            return _validation_error(f"Page size must be between 1 and {self.max_page_size}")
        try:
            check_date_order(start_date, end_date)
        except ValueError as exc:
            return _validation_error(str(exc))
        if status is not None and status not in _ALLOWED_STATUSES:
            return _validation_error(f"Status must be one of: {', '.join(_ALLOWED_STATUSES)}")

        try:
            if self.merchants_repository.get_merchant(merchant_id) is None:
                return ServiceError(
                    code=ErrorCode.NOT_FOUND,
                    message=f"Merchant not found with ID: {merchant_id}",
                    details={"merchant_id": merchant_id},
                )

            filters = TransactionFilters(
                merchant_id=merchant_id,
                start=parse_boundary(start_date, is_start=True),
                end=parse_boundary(end_date, is_start=False),
                status=status,
                limit=size,
                offset=page * size,
            )
            transactions, total_count = self.transactions_repository.search_transactions(filters)

            details_by_txn: dict[int, list[TransactionDetail]] = defaultdict(list)
            for detail in self.transactions_repository.list_details(txn.txn_id for txn in transactions):
                details_by_txn[detail.master_txn_id].append(detail)

            member_ids = {
                member_id
                for txn in transactions
                for member_id in (txn.acquirer_member_id, txn.issuer_member_id)
                if member_id is not None
            }
            member_names = self.members_repository.get_member_names(member_ids) if member_ids else {}

            summary = summarize(self.transactions_repository.list_transactions(filters))
        except RuntimeError as exc:
            logger.exception("merchant_transactions_failed merchant_id=%s", merchant_id)
            return ServiceError(code=ErrorCode.BACKEND_ERROR, message=str(exc))

        return MerchantTransactionsResponse(
            merchant_id=merchant_id,
            date_range=DateRange(start=filters.start, end=filters.end),
            summary=summary,
            transactions=[
                _to_transaction_response(txn, details_by_txn.get(txn.txn_id, []), member_names)
                for txn in transactions
            ],
            pagination=PaginationInfo(
                page=page,
                size=size,
                total_pages=total_pages_for(total_count, size),
                total_count=total_count,
            ),
        )
