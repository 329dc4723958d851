"""Tests for the merchant listing pipeline (filter, sort, paginate)."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from backend.services.listing import (
    filter_merchants,
    list_merchants,
    paginate,
    sort_merchants,
    total_pages_for,
)
from shared.models import MerchantStatus
from tests.fakes import make_merchant


def _merchants():
    return [
        make_merchant("MCH-00001", "Acme Corp Ltd", email="billing@acme.example"),
        make_merchant("MCH-00002", "blue bottle", email="owner@bluebottle.example"),
        make_merchant("MCH-00003", "Zenith Books", status=MerchantStatus.INACTIVE),
        make_merchant("MCH-00004", "Corporate Gifts", email="sales@gifts.example"),
    ]


def test_search_is_case_insensitive_substring_on_name() -> None:
    matched = filter_merchants(_merchants(), search="corp")

    assert [merchant.name for merchant in matched] == ["Acme Corp Ltd", "Corporate Gifts"]


def test_search_matches_id_and_email() -> None:
    assert [m.id for m in filter_merchants(_merchants(), search="mch-00003")] == ["MCH-00003"]
    assert [m.id for m in filter_merchants(_merchants(), search="BLUEBOTTLE")] == ["MCH-00002"]


def test_status_filter_is_exact() -> None:
    matched = filter_merchants(_merchants(), status="inactive")

    assert [merchant.id for merchant in matched] == ["MCH-00003"]
    assert filter_merchants(_merchants(), status="INACTIVE") == []


def test_blank_filters_are_ignored() -> None:
    assert len(filter_merchants(_merchants(), search="  ", status="")) == 4


def test_sort_by_name_is_case_insensitive_and_desc_reverses() -> None:
    ascending = sort_merchants(_merchants(), sort_field="NAME", sort_direction="asc")
    descending = sort_merchants(_merchants(), sort_field="name", sort_direction="DESC")

    assert [m.name for m in ascending] == ["Acme Corp Ltd", "blue bottle", "Corporate Gifts", "Zenith Books"]
    assert [m.name for m in descending] == list(reversed([m.name for m in ascending]))


def test_unknown_sort_field_falls_back_to_name() -> None:
    ordered = sort_merchants(_merchants(), sort_field="phone", sort_direction="desc")

    assert ordered[0].name == "Zenith Books"


def test_sort_is_stable_for_equal_keys() -> None:
    twins = [
        make_merchant("MCH-00010", "Same"),
        make_merchant("MCH-00011", "same"),
        make_merchant("MCH-00012", "SAME"),
    ]

    first = sort_merchants(twins, sort_field="name")
    second = sort_merchants(first, sort_field="name")

    assert [m.id for m in first] == ["MCH-00010", "MCH-00011", "MCH-00012"]
    assert [m.id for m in second] == ["MCH-00010", "MCH-00011", "MCH-00012"]


def test_descending_sort_keeps_input_order_for_equal_keys() -> None:
    merchants = [
        make_merchant("MCH-00010", "Same"),
        make_merchant("MCH-00011", "Zed"),
        make_merchant("MCH-00012", "same"),
        make_merchant("MCH-00013", "SAME"),
    ]

    ordered = sort_merchants(merchants, sort_field="name", sort_direction="desc")

    assert [m.id for m in ordered] == ["MCH-00011", "MCH-00010", "MCH-00012", "MCH-00013"]


def test_timestamp_sort_places_missing_values_first_ascending() -> None:
    merchants = [
        make_merchant("MCH-00001", "a", created_at=datetime(2025, 3, 1, tzinfo=timezone.utc)),
        make_merchant("MCH-00002", "b", created_at=None),
        make_merchant("MCH-00003", "c", created_at=datetime(2025, 1, 1, tzinfo=timezone.utc)),
    ]

    ascending = sort_merchants(merchants, sort_field="createdAt")
    descending = sort_merchants(merchants, sort_field="created_at", sort_direction="desc")

    assert [m.id for m in ascending] == ["MCH-00002", "MCH-00003", "MCH-00001"]
    assert [m.id for m in descending] == ["MCH-00001", "MCH-00003", "MCH-00002"]


def test_total_pages_is_ceiling_of_count_over_size() -> None:
    assert total_pages_for(0, 20) == 0
    assert total_pages_for(20, 20) == 1
    assert total_pages_for(21, 20) == 2


def test_paginate_treats_page_as_one_based_and_clamps_low_pages() -> None:
    items = _merchants()

    assert [m.id for m in paginate(items, page=2, page_size=3)] == ["MCH-00004"]
    assert paginate(items, page=0, page_size=2) == paginate(items, page=1, page_size=2)


def test_paginate_rejects_non_positive_page_size() -> None:
    with pytest.raises(ValueError):
        paginate(_merchants(), page=1, page_size=0)


def test_page_beyond_range_is_empty_but_totals_reflect_filtered_set() -> None:
    page = list_merchants(_merchants(), search="corp", page=5, page_size=1)

    assert page.items == []
    assert page.total_count == 2
    assert page.total_pages == 2


def test_totals_are_computed_after_filtering() -> None:
    page = list_merchants(_merchants(), status="active", page=1, page_size=2)

    assert [m.name for m in page.items] == ["Acme Corp Ltd", "blue bottle"]
    assert page.total_count == 3
    assert page.total_pages == 2
