"""Repository interfaces and adapters for merchants CRUD."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Protocol

from backend.db.supabase_client import ConflictError, SupabaseClient
from backend.services.merchant_ids import (
    MERCHANT_ID_PREFIX,
    format_merchant_id,
    merchant_id_number,
    next_merchant_id,
)
from shared.models import Merchant, MerchantRequest


logger = logging.getLogger(__name__)

_MERCHANT_COLUMNS = (
    "id,name,email,phone,business_name,registration_number,address,city,country,"
    "status,created_at,updated_at"
)


class MerchantNotFoundError(ValueError):
    def __init__(self, merchant_id: str) -> None:
        super().__init__(f"Merchant not found with ID: {merchant_id}")
        self.merchant_id = merchant_id


class DuplicateEmailError(ValueError):
    def __init__(self, email: str) -> None:
        super().__init__(f"Merchant with email {email} already exists")
        self.email = email


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MerchantsRepository(Protocol):
    def list_merchants(self) -> list[Merchant]:
        """Return every stored merchant."""

    def get_merchant(self, merchant_id: str) -> Merchant | None:
        """Return one merchant by id, or None."""

    def exists_by_email(self, email: str) -> bool:
        """Return whether a merchant already uses this exact email."""

    def create_merchant(self, request: MerchantRequest) -> Merchant:
        """Allocate the next merchant id and store a new merchant."""

    def update_merchant(self, merchant_id: str, request: MerchantRequest) -> Merchant:
        """Overwrite every field except id and creation time."""

    def delete_merchant(self, merchant_id: str) -> None:
        """Hard delete one merchant."""


class InMemoryMerchantsRepository:
    """In-memory merchants repository used by tests/dev.

    Id allocation, the email check and the insert share one lock, and the
    highest number ever issued is remembered so deleted ids are not reissued.
    """

    def __init__(
        self,
        merchants: Iterable[Merchant] | None = None,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._merchants: list[Merchant] = list(merchants or [])
        self._clock = clock
        self._lock = threading.Lock()
        self._highest_issued = max(
            (merchant_id_number(merchant.id) for merchant in self._merchants), default=0
        )

    def list_merchants(self) -> list[Merchant]:
        return list(self._merchants)

    def get_merchant(self, merchant_id: str) -> Merchant | None:
        return next((merchant for merchant in self._merchants if merchant.id == merchant_id), None)

    def exists_by_email(self, email: str) -> bool:
        return any(merchant.email == email for merchant in self._merchants)

    def create_merchant(self, request: MerchantRequest) -> Merchant:
        with self._lock:
            if self.exists_by_email(request.email):
                raise DuplicateEmailError(request.email)

            merchant_id = next_merchant_id(
                [*(merchant.id for merchant in self._merchants), format_merchant_id(self._highest_issued)]
            )
            now = self._clock()
            merchant = Merchant(
                id=merchant_id,
                **request.model_dump(),
                created_at=now,
                updated_at=now,
            )
            self._merchants.append(merchant)
            self._highest_issued = merchant_id_number(merchant_id)
            return merchant

    def update_merchant(self, merchant_id: str, request: MerchantRequest) -> Merchant:
        with self._lock:
            for index, merchant in enumerate(self._merchants):
                if merchant.id != merchant_id:
                    continue

                if request.email != merchant.email and self.exists_by_email(request.email):
                    raise DuplicateEmailError(request.email)

                updated = merchant.model_copy(
                    update={**request.model_dump(), "updated_at": self._clock()}
                )
                self._merchants[index] = updated
                return updated

        raise MerchantNotFoundError(merchant_id)

    def delete_merchant(self, merchant_id: str) -> None:
        with self._lock:
            kept = [merchant for merchant in self._merchants if merchant.id != merchant_id]
            if len(kept) == len(self._merchants):
                raise MerchantNotFoundError(merchant_id)
            self._merchants = kept


class SupabaseMerchantsRepository:
    """Supabase-backed merchants repository.

    The next id is computed from the stored `MCH-` ids. When a concurrent
    insert wins the same id, the primary-key constraint answers 409 and the
    id is recomputed, up to `max_create_attempts` times.
    """

    def __init__(
        self,
        client: SupabaseClient,
        *,
        max_create_attempts: int = 3,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._client = client
        self._max_create_attempts = max(1, max_create_attempts)
        self._clock = clock

    def list_merchants(self) -> list[Merchant]:
        rows, _ = self._client.get_rows(
            table="merchants",
            query=[("select", _MERCHANT_COLUMNS), ("order", "id.asc")],
            with_count=False,
        )
        return [Merchant.model_validate(row) for row in rows]

    def get_merchant(self, merchant_id: str) -> Merchant | None:
        rows, _ = self._client.get_rows(
            table="merchants",
            query={"id": f"eq.{merchant_id}", "select": _MERCHANT_COLUMNS, "limit": 1},
            with_count=False,
        )
        if not rows:
            return None
        return Merchant.model_validate(rows[0])

    def exists_by_email(self, email: str) -> bool:
        rows, _ = self._client.get_rows(
            table="merchants",
            query={"email": f"eq.{email}", "select": "id", "limit": 1},
            with_count=False,
        )
        return bool(rows)

    def _allocate_merchant_id(self) -> str:
        rows, _ = self._client.get_rows(
            table="merchants",
            query=[("id", f"like.{MERCHANT_ID_PREFIX}*"), ("select", "id")],
            with_count=False,
        )
        return next_merchant_id(row.get("id") for row in rows)

    def create_merchant(self, request: MerchantRequest) -> Merchant:
        now = self._clock().isoformat()
        for attempt in range(1, self._max_create_attempts + 1):
            merchant_id = self._allocate_merchant_id()
            try:
                rows = self._client.request_rows(
                    table="merchants",
                    method="POST",
                    query={"select": _MERCHANT_COLUMNS},
                    body={
                        "id": merchant_id,
                        **request.model_dump(mode="json"),
                        "created_at": now,
                        "updated_at": now,
                    },
                )
            except ConflictError as exc:
                if "email" in exc.body:
                    raise DuplicateEmailError(request.email) from exc
                logger.warning(
                    "merchant_id_conflict merchant_id=%s attempt=%s max_attempts=%s",
                    merchant_id,
                    attempt,
                    self._max_create_attempts,
                )
                continue

            if not rows:
                raise RuntimeError("Supabase did not return created merchant")
            return Merchant.model_validate(rows[0])

        raise RuntimeError(
            f"Unable to allocate a free merchant id after {self._max_create_attempts} attempts"
        )

    def update_merchant(self, merchant_id: str, request: MerchantRequest) -> Merchant:
        try:
            rows = self._client.request_rows(
                table="merchants",
                method="PATCH",
                query={"id": f"eq.{merchant_id}", "select": _MERCHANT_COLUMNS},
                body={**request.model_dump(mode="json"), "updated_at": self._clock().isoformat()},
            )
        except ConflictError as exc:
            raise DuplicateEmailError(request.email) from exc
        if not rows:
            raise MerchantNotFoundError(merchant_id)
        return Merchant.model_validate(rows[0])

    def delete_merchant(self, merchant_id: str) -> None:
        rows = self._client.request_rows(
            table="merchants",
            method="DELETE",
            query={"id": f"eq.{merchant_id}", "select": "id"},
            body=None,
        )
        if not rows:
            raise MerchantNotFoundError(merchant_id)
