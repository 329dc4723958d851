"""Pydantic contracts shared across the API, services and repositories."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ErrorCode(str, Enum):
    """Stable error codes returned by services."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    BACKEND_ERROR = "BACKEND_ERROR"


class ServiceError(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: ErrorCode
    message: str
    details: dict[str, object] | None = None


class ApiModel(BaseModel):
    """Base for payloads exchanged over HTTP: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)


class MerchantStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REVERSED = "reversed"


class Merchant(ApiModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    business_name: str | None = None
    registration_number: str | None = None
    address: str | None = None
    city: str | None = None
    country: str | None = None
    status: MerchantStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MerchantRequest(ApiModel):
    """Body accepted by merchant create and update (full replacement)."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: str | None = Field(default=None, max_length=50)
    business_name: str | None = Field(default=None, max_length=255)
    registration_number: str | None = Field(default=None, max_length=100)
    address: str | None = Field(default=None, max_length=500)
    city: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)
    status: MerchantStatus = MerchantStatus.ACTIVE

    @field_validator("name")
    @classmethod
    def reject_blank_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be blank")
        return value


class MerchantListQuery(BaseModel):
    model_config = ConfigDict(extra="forbid")

    page: int = 1
    limit: int = Field(default=20, ge=1)
    search: str | None = None
    status: str | None = None
    sort_field: str = "name"
    sort_direction: str = "asc"


class MerchantPage(ApiModel):
    data: list[Merchant]
    total_count: int
    total_pages: int
    current_page: int
    page_size: int


class Member(ApiModel):
    id: int
    member_name: str


class TransactionMaster(ApiModel):
    txn_id: int
    merchant_id: str
    amount: Decimal | None = None
    currency: str | None = None
    status: str | None = None
    local_txn_date_time: datetime | None = None
    card_type: str | None = None
    card_last4: str | None = None
    acquirer_member_id: int | None = None
    issuer_member_id: int | None = None


class TransactionDetail(ApiModel):
    detail_id: int
    master_txn_id: int
    detail_type: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    description: str | None = None


class TransactionFilters(BaseModel):
    """Predicate shared by the paginated listing and the summary of merchant transactions."""

    model_config = ConfigDict(extra="forbid")

    merchant_id: str
    start: datetime | None = None
    end: datetime | None = None
    status: str | None = None
    limit: int = Field(default=20, ge=1)
    offset: int = Field(default=0, ge=0)


class DateRange(ApiModel):
    start: datetime | None = None
    end: datetime | None = None


class TransactionSummary(ApiModel):
    total_transactions: int
    total_amount: Decimal
    currency: str
    by_status: dict[str, int]


class TransactionDetailResponse(ApiModel):
    detail_id: int
    type: str | None = None
    amount: Decimal | None = None
    currency: str | None = None
    description: str | None = None


class TransactionResponse(ApiModel):
    txn_id: int
    amount: Decimal | None = None
    currency: str | None = None
    status: str | None = None
    timestamp: datetime | None = None
    card_type: str | None = None
    card_last4: str | None = None
    acquirer: str | None = None
    issuer: str | None = None
    details: list[TransactionDetailResponse] = Field(default_factory=list)


class PaginationInfo(ApiModel):
    page: int
    size: int
    total_pages: int
    total_count: int


class MerchantTransactionsResponse(ApiModel):
    merchant_id: str
    date_range: DateRange
    summary: TransactionSummary
    transactions: list[TransactionResponse]
    pagination: PaginationInfo
