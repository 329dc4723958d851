"""Member (acquirer/issuer institution) lookups."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from backend.db.supabase_client import SupabaseClient
from shared.models import Member


class MembersRepository(Protocol):
    def get_member_names(self, member_ids: Iterable[int]) -> dict[int, str]:
        """Return names for the ids that exist; unknown ids are left out."""


class InMemoryMembersRepository:
    def __init__(self, members: Iterable[Member] | None = None) -> None:
        self._names = {member.id: member.member_name for member in members or []}

    def get_member_names(self, member_ids: Iterable[int]) -> dict[int, str]:
        return {
            member_id: self._names[member_id]
            for member_id in set(member_ids)
            if member_id in self._names
        }


class SupabaseMembersRepository:
    """Resolves all requested members with a single `in.(...)` query."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    def get_member_names(self, member_ids: Iterable[int]) -> dict[int, str]:
        ids = sorted(set(member_ids))
        if not ids:
            return {}
        rows, _ = self._client.get_rows(
            table="members",
            query=[
                ("id", f"in.({','.join(str(member_id) for member_id in ids)})"),
                ("select", "id,member_name"),
            ],
            with_count=False,
        )
        members = [Member.model_validate(row) for row in rows]
        return {member.id: member.member_name for member in members}
