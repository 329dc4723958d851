"""Composition root for backend services."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.db.supabase_client import SupabaseClient, SupabaseSettings
from backend.repositories.demo_data import (
    demo_details,
    demo_members,
    demo_merchants,
    demo_transactions,
)
from backend.repositories.members_repository import (
    InMemoryMembersRepository,
    MembersRepository,
    SupabaseMembersRepository,
)
from backend.repositories.merchants_repository import (
    InMemoryMerchantsRepository,
    MerchantsRepository,
    SupabaseMerchantsRepository,
)
from backend.repositories.transactions_repository import (
    InMemoryTransactionsRepository,
    SupabaseTransactionsRepository,
    TransactionsRepository,
)
from backend.services.merchant_service import MerchantService
from backend.services.transaction_service import TransactionService
from shared import config


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BackendServices:
    merchant_service: MerchantService
    transaction_service: TransactionService


def build_services(
    *,
    merchants_repository: MerchantsRepository,
    transactions_repository: TransactionsRepository,
    members_repository: MembersRepository,
) -> BackendServices:
    return BackendServices(
        merchant_service=MerchantService(merchants_repository=merchants_repository),
        transaction_service=TransactionService(
            transactions_repository=transactions_repository,
            merchants_repository=merchants_repository,
            members_repository=members_repository,
            max_page_size=config.max_page_size(),
        ),
    )


def build_in_memory_services(*, seed: bool = False) -> BackendServices:
    """Build services over in-memory stores, optionally seeded with demo data."""

    return build_services(
        merchants_repository=InMemoryMerchantsRepository(demo_merchants() if seed else None),
        transactions_repository=InMemoryTransactionsRepository(
            demo_transactions() if seed else None,
            demo_details() if seed else None,
        ),
        members_repository=InMemoryMembersRepository(demo_members() if seed else None),
    )


def build_backend_services() -> BackendServices:
    """Build services with Supabase adapters when configured, in-memory stores otherwise."""

    supabase_url = config.supabase_url()
    supabase_key = config.supabase_service_role_key()
    if supabase_url and supabase_key:
        client = SupabaseClient(
            settings=SupabaseSettings(
                url=supabase_url,
                service_role_key=supabase_key,
            )
        )
        logger.info("backend_store=supabase")
        return build_services(
            merchants_repository=SupabaseMerchantsRepository(
                client,
                max_create_attempts=config.merchant_create_max_attempts(),
            ),
            transactions_repository=SupabaseTransactionsRepository(client),
            members_repository=SupabaseMembersRepository(client),
        )

    seed = config.seed_demo_data()
    logger.info("backend_store=in_memory seed_demo_data=%s", seed)
    return build_in_memory_services(seed=seed)
