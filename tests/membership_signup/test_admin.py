"""Tests for membership-signup/app/admin.py -- listing, paging, search, delete, stats."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "membership-signup"))

import app.audit_log as audit_mod
import app.membership_store as store_mod
from app.admin import (
    delete_membership,
    get_membership,
    list_memberships,
    search_page,
    summarize_page,
    to_list_item,
)
from app.schema import AdminListItem


@pytest.fixture(autouse=True)
def _isolate_data_dirs(tmp_path):
    with patch.object(store_mod, "DATA_DIR", tmp_path / "memberships"), \
         patch.object(audit_mod, "DATA_DIR", tmp_path / "audit"):
        yield tmp_path


def _member(first: str, last: str = "Menon", **extra) -> dict:
    fields = {
        "firstName": first,
        "lastName": last,
        "contactEmail": f"{first.lower()}@example.com",
        "contactMobile": "+91 98765 43210",
        "city": "Panaji",
        "state": "Goa",
        "membershipCategory": "gold",
        "membershipYears": "5",
        "membershipPrice": "150000",
        "paymentMode": "cheque",
    }
    fields.update(extra)
    return store_mod.insert_membership(fields)


# ── Projection ───────────────────────────────────────────────────────────


class TestToListItem:
    def test_projection(self):
        doc = _member("Asha")
        item = to_list_item(doc)
        assert item.membershipId == doc["id"]
        assert item.name == "Asha Menon"
        assert item.email == "asha@example.com"
        assert item.mobile == "+91 98765 43210"
        assert item.status == "pending"

    def test_missing_last_name(self):
        item = to_list_item({"id": "CM1", "firstName": "Asha"})
        assert item.name == "Asha"
        assert item.city == ""


# ── Paging ───────────────────────────────────────────────────────────────


class TestListMemberships:
    def test_twenty_five_records_paged_by_ten(self):
        for i in range(25):
            _member(f"Guest{i:02d}")

        first = list_memberships(limit=10, skip=0)
        assert first.total == 25
        assert first.has_more is True
        assert len(first.items) == 10

        last = list_memberships(limit=10, skip=20)
        assert last.total == 25
        assert last.has_more is False
        assert len(last.items) == 5

    def test_pagination_dict(self):
        _member("Asha")
        page = list_memberships(limit=10, skip=0)
        assert page.pagination() == {"total": 1, "limit": 10, "skip": 0, "hasMore": False}

    def test_empty_collection(self):
        page = list_memberships()
        assert page.items == []
        assert page.total == 0
        assert page.has_more is False

    def test_sort_by_first_name(self):
        for name in ("Ravi", "Asha", "Meera"):
            _member(name)
        page = list_memberships(sort_by="firstName", sort_order="asc")
        assert [i.name.split()[0] for i in page.items] == ["Asha", "Meera", "Ravi"]

    def test_bad_paging_arguments(self):
        with pytest.raises(ValueError):
            list_memberships(limit=0)
        with pytest.raises(ValueError):
            list_memberships(skip=-1)


# ── Lookup and delete ────────────────────────────────────────────────────


class TestGetAndDelete:
    def test_get(self):
        doc = _member("Asha")
        assert get_membership(doc["id"])["firstName"] == "Asha"
        assert get_membership("CM00000000NONE") is None

    def test_delete_logs_audit_entry(self):
        doc = _member("Asha")
        assert delete_membership(doc["id"]) is True
        entries = audit_mod.membership_history(doc["id"])
        assert [e.action for e in entries] == ["membership_deleted"]

    def test_delete_missing_reports_not_found(self):
        assert delete_membership("CM00000000NONE") is False
        assert audit_mod.recent_entries() == []


# ── Page-local search ────────────────────────────────────────────────────


def _item(mid: str, name: str, email: str = "", city: str = "") -> AdminListItem:
    return AdminListItem(membershipId=mid, name=name, email=email, city=city)


class TestSearchPage:
    items = [
        _item("CM11111111AAAA", "Asha Menon", "asha@example.com", "Panaji"),
        _item("CM22222222BBBB", "Ravi Kumar", "ravi@hotelmail.in", "Kochi"),
    ]

    def test_blank_term_returns_all(self):
        assert search_page(self.items, "  ") == self.items

    def test_case_insensitive_name(self):
        assert [i.name for i in search_page(self.items, "ASHA")] == ["Asha Menon"]

    def test_matches_email_id_and_city(self):
        assert len(search_page(self.items, "hotelmail")) == 1
        assert len(search_page(self.items, "cm2222")) == 1
        assert len(search_page(self.items, "kochi")) == 1

    def test_only_searches_given_page(self):
        for i in range(12):
            _member(f"Guest{i:02d}")
        _member("Yusuf")
        page_one = list_memberships(limit=10, skip=0, sort_order="asc")
        assert search_page(page_one.items, "Yusuf") == []


# ── Stats cards ──────────────────────────────────────────────────────────


class TestSummarizePage:
    def test_figures(self):
        items = [
            AdminListItem(membershipId="1", name="A", membershipPrice="150000",
                          status="pending", submittedAt="2025-01-15T10:30:00+00:00"),
            AdminListItem(membershipId="2", name="B", membershipPrice="75,000",
                          status="approved", submittedAt="2024-12-31T23:00:00+00:00"),
            AdminListItem(membershipId="3", name="C", membershipPrice="",
                          status="pending", submittedAt=""),
        ]
        stats = summarize_page(items, total=40, today=date(2025, 1, 20))
        assert stats == {
            "total_members": 40,
            "pending": 2,
            "revenue": 150075,
            "this_month": 1,
        }
