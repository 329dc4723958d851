"""Unit tests for merchants repository adapters."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from backend.repositories.merchants_repository import (
    DuplicateEmailError,
    InMemoryMerchantsRepository,
    MerchantNotFoundError,
    SupabaseMerchantsRepository,
)
from tests.fakes import FIXED_NOW, ClientStub, FixedClock, conflict, make_merchant, make_request


def _merchant_row(merchant_id: str, email: str = "a@acme.com") -> dict[str, object]:
    return {
        "id": merchant_id,
        "name": "Acme",
        "email": email,
        "phone": None,
        "business_name": None,
        "registration_number": None,
        "address": None,
        "city": None,
        "country": None,
        "status": "active",
        "created_at": "2025-11-20T12:00:00+00:00",
        "updated_at": "2025-11-20T12:00:00+00:00",
    }


def test_in_memory_create_assigns_sequential_id_and_timestamps() -> None:
    repository = InMemoryMerchantsRepository(clock=FixedClock())

    first = repository.create_merchant(make_request())
    second = repository.create_merchant(make_request(email="b@acme.com"))

    assert first.id == "MCH-00001"
    assert second.id == "MCH-00002"
    assert first.created_at == first.updated_at == FIXED_NOW


def test_in_memory_create_rejects_duplicate_email() -> None:
    repository = InMemoryMerchantsRepository()
    repository.create_merchant(make_request())

    with pytest.raises(DuplicateEmailError, match="Merchant with email a@acme.com already exists"):
        repository.create_merchant(make_request(name="Other"))


def test_in_memory_does_not_reissue_deleted_ids() -> None:
    repository = InMemoryMerchantsRepository([make_merchant("MCH-00001", "a"), make_merchant("MCH-00003", "c")])

    repository.delete_merchant("MCH-00003")
    created = repository.create_merchant(make_request())

    assert created.id == "MCH-00004"


def test_in_memory_concurrent_creates_get_distinct_ids() -> None:
    repository = InMemoryMerchantsRepository()

    with ThreadPoolExecutor(max_workers=8) as pool:
        created = list(
            pool.map(
                lambda index: repository.create_merchant(make_request(email=f"m{index}@acme.com")),
                range(40),
            )
        )

    assert len({merchant.id for merchant in created}) == 40


def test_in_memory_update_keeps_id_and_created_at() -> None:
    clock = FixedClock()
    repository = InMemoryMerchantsRepository(clock=clock)
    created = repository.create_merchant(make_request(city="Paris"))
    clock.now = FIXED_NOW + timedelta(hours=1)

    updated = repository.update_merchant(created.id, make_request(status="inactive"))

    assert updated.id == created.id
    assert updated.created_at == created.created_at
    assert updated.updated_at == clock.now
    assert updated.status == "inactive"
    assert updated.city is None


def test_in_memory_update_and_delete_raise_when_missing() -> None:
    repository = InMemoryMerchantsRepository()

    with pytest.raises(MerchantNotFoundError, match="Merchant not found with ID: MCH-00009"):
        repository.update_merchant("MCH-00009", make_request())
    with pytest.raises(MerchantNotFoundError):
        repository.delete_merchant("MCH-00009")


def test_supabase_get_merchant_filters_by_id() -> None:
    client = ClientStub(rows=[_merchant_row("MCH-00001")])
    repository = SupabaseMerchantsRepository(client)

    merchant = repository.get_merchant("MCH-00001")

    assert merchant is not None
    assert merchant.id == "MCH-00001"
    assert client.calls[0]["table"] == "merchants"
    assert client.calls[0]["query"]["id"] == "eq.MCH-00001"


def test_supabase_create_computes_next_id_from_stored_ids() -> None:
    client = ClientStub(
        rows=[{"id": "MCH-00001"}, {"id": "MCH-00007"}, {"id": "MCH-BROKEN"}],
        write_results=[[_merchant_row("MCH-00008")]],
    )
    repository = SupabaseMerchantsRepository(client, clock=FixedClock())

    created = repository.create_merchant(make_request())

    assert created.id == "MCH-00008"
    assert ("id", "like.MCH-*") in client.calls[0]["query"]
    insert = client.calls[1]
    assert insert["method"] == "POST"
    assert insert["body"]["id"] == "MCH-00008"
    assert insert["body"]["status"] == "active"
    assert insert["body"]["created_at"] == FIXED_NOW.isoformat()


def test_supabase_create_retries_after_primary_key_conflict(caplog) -> None:
    client = ClientStub(
        rows=[{"id": "MCH-00001"}],
        write_results=[conflict('{"message":"merchants_pkey"}'), [_merchant_row("MCH-00002")]],
    )
    repository = SupabaseMerchantsRepository(client, max_create_attempts=2)

    created = repository.create_merchant(make_request())

    assert created.id == "MCH-00002"
    assert len([call for call in client.calls if call.get("method") == "POST"]) == 2
    assert "merchant_id_conflict" in caplog.text


def test_supabase_create_gives_up_after_max_attempts() -> None:
    client = ClientStub(
        rows=[{"id": "MCH-00001"}],
        write_results=[conflict("merchants_pkey"), conflict("merchants_pkey")],
    )
    repository = SupabaseMerchantsRepository(client, max_create_attempts=2)

    with pytest.raises(RuntimeError, match="after 2 attempts"):
        repository.create_merchant(make_request())


def test_supabase_create_maps_email_conflict_to_duplicate_email() -> None:
    client = ClientStub(write_results=[conflict('{"message":"merchants_email_key"}')])
    repository = SupabaseMerchantsRepository(client)

    with pytest.raises(DuplicateEmailError):
        repository.create_merchant(make_request())


def test_supabase_update_raises_not_found_when_no_row_changed() -> None:
    client = ClientStub(write_results=[[]])
    repository = SupabaseMerchantsRepository(client)

    with pytest.raises(MerchantNotFoundError):
        repository.update_merchant("MCH-00042", make_request())

    assert client.calls[0]["method"] == "PATCH"
    assert client.calls[0]["query"]["id"] == "eq.MCH-00042"


def test_supabase_delete_raises_not_found_when_no_row_deleted() -> None:
    client = ClientStub(write_results=[[]])
    repository = SupabaseMerchantsRepository(client)

    with pytest.raises(MerchantNotFoundError):
        repository.delete_merchant("MCH-00042")
