"""Merchant identifier policy: `MCH-` followed by a zero-padded 5-digit sequence."""

from __future__ import annotations

from collections.abc import Iterable


MERCHANT_ID_PREFIX = "MCH-"


def merchant_id_number(merchant_id: str | None) -> int:
    """Return the numeric suffix of a merchant id, or 0 when it is not a `MCH-` number."""

    if not merchant_id or not merchant_id.startswith(MERCHANT_ID_PREFIX):
        return 0
    suffix = merchant_id[len(MERCHANT_ID_PREFIX) :]
    if not (suffix.isascii() and suffix.isdigit()):
        return 0
    return int(suffix)


def format_merchant_id(number: int) -> str:
    return f"{MERCHANT_ID_PREFIX}{number:05d}"


def next_merchant_id(existing_ids: Iterable[str | None]) -> str:
    """Return the id following the highest allocated number.

    Gaps left by deleted merchants are never reused and malformed ids are ignored.
    """

    highest = max((merchant_id_number(merchant_id) for merchant_id in existing_ids), default=0)
    return format_merchant_id(highest + 1)
