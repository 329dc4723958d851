"""Merchant CRUD and listing orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.repositories.merchants_repository import (
    DuplicateEmailError,
    MerchantNotFoundError,
    MerchantsRepository,
)
from backend.services.listing import list_merchants
from shared.models import (
    ErrorCode,
    Merchant,
    MerchantListQuery,
    MerchantPage,
    MerchantRequest,
    ServiceError,
)


logger = logging.getLogger(__name__)


def _not_found(merchant_id: str) -> ServiceError:
    return ServiceError(
        code=ErrorCode.NOT_FOUND,
        message=f"Merchant not found with ID: {merchant_id}",
        details={"merchant_id": merchant_id},
    )


def _backend_error(exc: Exception) -> ServiceError:
    return ServiceError(code=ErrorCode.BACKEND_ERROR, message=str(exc))


@dataclass(slots=True)
class MerchantService:
    merchants_repository: MerchantsRepository

    def list_merchants(self, query: MerchantListQuery) -> MerchantPage | ServiceError:
        logger.debug(
            "merchants_list page=%s limit=%s search=%s status=%s sort_field=%s sort_direction=%s",
            query.page,
            query.limit,
            query.search,
            query.status,
            query.sort_field,
            query.sort_direction,
        )
        try:
            merchants = self.merchants_repository.list_merchants()
        except RuntimeError as exc:
            logger.exception("merchants_list_failed")
            return _backend_error(exc)

        page = list_merchants(
            merchants,
            search=query.search,
            status=query.status,
            sort_field=query.sort_field,
            sort_direction=query.sort_direction,
            page=query.page,
            page_size=query.limit,
        )
        return MerchantPage(
            data=page.items,
            total_count=page.total_count,
            total_pages=page.total_pages,
            current_page=query.page,
            page_size=query.limit,
        )

    def get_merchant(self, merchant_id: str) -> Merchant | ServiceError:
        try:
            merchant = self.merchants_repository.get_merchant(merchant_id)
        except RuntimeError as exc:
            logger.exception("merchant_get_failed merchant_id=%s", merchant_id)
            return _backend_error(exc)
        if merchant is None:
            return _not_found(merchant_id)
        return merchant

    def create_merchant(self, request: MerchantRequest) -> Merchant | ServiceError:
        try:
            if self.merchants_repository.exists_by_email(request.email):
                raise DuplicateEmailError(request.email)
            merchant = self.merchants_repository.create_merchant(request)
        except DuplicateEmailError as exc:
            return ServiceError(
                code=ErrorCode.VALIDATION_ERROR,
                message=str(exc),
                details={"email": exc.email},
            )
        except RuntimeError as exc:
            logger.exception("merchant_create_failed")
            return _backend_error(exc)

        logger.info("merchant_created merchant_id=%s", merchant.id)
        return merchant

    def update_merchant(self, merchant_id: str, request: MerchantRequest) -> Merchant | ServiceError:
        try:
            current = self.merchants_repository.get_merchant(merchant_id)
            if current is None:
                return _not_found(merchant_id)
            if request.email != current.email and self.merchants_repository.exists_by_email(request.email):
                raise DuplicateEmailError(request.email)
            merchant = self.merchants_repository.update_merchant(merchant_id, request)
        except MerchantNotFoundError:
            return _not_found(merchant_id)
        except DuplicateEmailError as exc:
            return ServiceError(
                code=ErrorCode.VALIDATION_ERROR,
                message=str(exc),
                details={"email": exc.email},
            )
        except RuntimeError as exc:
            logger.exception("merchant_update_failed merchant_id=%s", merchant_id)
            return _backend_error(exc)

        logger.info("merchant_updated merchant_id=%s", merchant_id)
        return merchant

    def delete_merchant(self, merchant_id: str) -> None | ServiceError:
        try:
            self.merchants_repository.delete_merchant(merchant_id)
        except MerchantNotFoundError:
            return _not_found(merchant_id)
        except RuntimeError as exc:
            logger.exception("merchant_delete_failed merchant_id=%s", merchant_id)
            return _backend_error(exc)

        logger.info("merchant_deleted merchant_id=%s", merchant_id)
        return None
