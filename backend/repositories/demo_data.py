"""Deterministic demo records used to seed in-memory stores in dev."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from shared.models import Member, Merchant, MerchantStatus, TransactionDetail, TransactionMaster


def _at(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


def demo_merchants() -> list[Merchant]:
    return [
        Merchant(
            id="MCH-00001",
            name="Acme Corp Ltd",
            email="billing@acme.example",
            phone="+1-555-0100",
            business_name="Acme Corporation",
            registration_number="REG-1001",
            address="1 Market Street",
            city="San Francisco",
            country="US",
            status=MerchantStatus.ACTIVE,
            created_at=_at("2025-10-01T09:00:00"),
            updated_at=_at("2025-10-01T09:00:00"),
        ),
        Merchant(
            id="MCH-00002",
            name="Blue Bottle Cafe",
            email="owner@bluebottle.example",
            phone="+1-555-0101",
            city="Oakland",
            country="US",
            status=MerchantStatus.ACTIVE,
            created_at=_at("2025-10-05T14:30:00"),
            updated_at=_at("2025-11-02T08:15:00"),
        ),
        Merchant(
            id="MCH-00003",
            name="Zenith Books",
            email="hello@zenith.example",
            city="Portland",
            country="US",
            status=MerchantStatus.INACTIVE,
            created_at=_at("2025-09-20T11:00:00"),
            updated_at=_at("2025-09-20T11:00:00"),
        ),
    ]


def demo_members() -> list[Member]:
    return [
        Member(id=101, member_name="First Acquiring Bank"),
        Member(id=202, member_name="Global Card Issuer"),
    ]


def demo_transactions() -> list[TransactionMaster]:
    # (txn_id, merchant, amount, status, timestamp, card, last4)
    rows = [
        (1001, "MCH-00001", "120.00", "completed", "2025-11-01T10:05:00", "VISA", "4242"),
        (1002, "MCH-00001", "45.50", "completed", "2025-11-03T12:40:00", "MASTERCARD", "5454"),
        (1003, "MCH-00001", "9.99", "pending", "2025-11-05T08:00:00", "VISA", "1111"),
        (1004, "MCH-00001", "300.00", "failed", "2025-11-07T17:20:00", "AMEX", "0005"),
        (1005, "MCH-00001", "75.25", "reversed", "2025-11-10T09:30:00", "VISA", "4242"),
        (1006, "MCH-00001", None, "completed", "2025-11-12T19:45:00", "VISA", "4000"),
        (1007, "MCH-00001", "15.00", None, "2025-11-15T07:10:00", "MASTERCARD", "5100"),
        (1008, "MCH-00002", "4.50", "completed", "2025-11-02T07:30:00", "VISA", "4242"),
        (1009, "MCH-00002", "6.75", "completed", "2025-11-02T08:05:00", "VISA", "4111"),
        (1010, "MCH-00002", "12.00", "pending", "2025-11-18T16:00:00", "MASTERCARD", "5454"),
        (1011, "MCH-00003", "22.90", "completed", "2025-09-25T13:00:00", "VISA", "4242"),
        (1012, "MCH-00003", "18.40", "reversed", "2025-09-26T15:20:00", "AMEX", "0005"),
    ]
    return [
        TransactionMaster(
            txn_id=txn_id,
            merchant_id=merchant_id,
            amount=Decimal(amount) if amount is not None else None,
            currency="USD",
            status=status,
            local_txn_date_time=_at(timestamp),
            card_type=card_type,
            card_last4=card_last4,
            acquirer_member_id=101,
            issuer_member_id=202 if txn_id % 3 else 303,
        )
        for txn_id, merchant_id, amount, status, timestamp, card_type, card_last4 in rows
    ]


def demo_details() -> list[TransactionDetail]:
    return [
        TransactionDetail(
            detail_id=1, master_txn_id=1001, detail_type="fee",
            amount=Decimal("2.50"), currency="USD", description="Processing fee",
        ),
        TransactionDetail(
            detail_id=2, master_txn_id=1001, detail_type="tax",
            amount=Decimal("9.60"), currency="USD", description="Sales tax",
        ),
        TransactionDetail(
            detail_id=3, master_txn_id=1005, detail_type="refund",
            amount=Decimal("-75.25"), currency="USD", description="Customer refund",
        ),
        TransactionDetail(
            detail_id=4, master_txn_id=1008, detail_type="fee",
            amount=Decimal("0.15"), currency="USD", description="Processing fee",
        ),
    ]
