"""Minimal Supabase PostgREST client used by backend repositories only."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen


Query = dict[str, str | int] | list[tuple[str, str | int]]


class ConflictError(RuntimeError):
    """Raised when PostgREST rejects a write with 409 (unique or primary key violation)."""

    def __init__(self, message: str, body: str) -> None:
        super().__init__(message)
        self.body = body


@dataclass(slots=True)
class SupabaseSettings:
    url: str
    service_role_key: str


class SupabaseClient:
    def __init__(self, settings: SupabaseSettings) -> None:
        self.settings = settings

    def get_rows(
        self,
        *,
        table: str,
        query: Query,
        with_count: bool,
    ) -> tuple[list[dict[str, Any]], int | None]:
        """Fetch rows from PostgREST and optionally parse exact row count."""

        encoded_query = urlencode(query, doseq=True)
        api_key = self.settings.service_role_key
        request = Request(
            url=f"{self.settings.url}/rest/v1/{table}?{encoded_query}",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
                "Prefer": "count=exact" if with_count else "return=representation",
            },
            method="GET",
        )
        try:
            with urlopen(request) as response:  # noqa: S310 - URL comes from trusted env config
                rows = json.loads(response.read().decode("utf-8"))
                total: int | None = None
                if with_count:
                    content_range = response.headers.get("content-range")
                    if content_range and "/" in content_range:
                        _, total_str = content_range.split("/", maxsplit=1)
                        if total_str != "*":
                            total = int(total_str)
                return rows, total
        except HTTPError as exc:
            raise _normalize_http_error(exc) from exc
        except URLError as exc:
            raise RuntimeError(f"Supabase request failed: {exc.reason}") from exc

    def request_rows(
        self,
        *,
        table: str,
        method: str,
        query: Query,
        body: dict[str, object] | None = None,
    ) -> list[dict[str, Any]]:
        """Send a write (POST/PATCH/DELETE) and return the affected rows."""

        return self._send(path=table, method=method, query=query, body=body) or []

    def _send(
        self,
        *,
        path: str,
        method: str,
        query: Query,
        body: dict[str, object] | None,
    ) -> Any:
        encoded_query = urlencode(query, doseq=True)
        payload = json.dumps(body).encode("utf-8") if body is not None else None
        api_key = self.settings.service_role_key
        request = Request(
            url=f"{self.settings.url}/rest/v1/{path}?{encoded_query}",
            data=payload,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
                "Content-Type": "application/json",
                "Prefer": "return=representation",
            },
            method=method,
        )
        try:
            with urlopen(request) as response:  # noqa: S310 - URL comes from trusted env config
                raw = response.read().decode("utf-8")
                return json.loads(raw) if raw else None
        except HTTPError as exc:
            raise _normalize_http_error(exc) from exc
        except URLError as exc:
            raise RuntimeError(f"Supabase request failed: {exc.reason}") from exc


def _normalize_http_error(exc: HTTPError) -> RuntimeError:
    body = exc.read().decode("utf-8", errors="replace")[:500]
    message = f"Supabase request failed with status {exc.code}: {body}"
    if exc.code == 409:
        return ConflictError(message, body)
    return RuntimeError(message)
