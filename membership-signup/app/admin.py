"""Admin queries for the Membership Signup tool.

Paged, sorted listing of submissions with a summary projection, single
record lookup, and deletion. Search is applied by the caller to the page
it already holds (``search_page``); it does not reach unfetched pages.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from app import membership_store
from app.audit_log import record_deletion
from app.report import parse_price
from app.schema import AdminListItem, AdminPage

SORT_FIELDS = ("submittedAt", "membershipCategory", "membershipPrice", "firstName")
SORT_ORDERS = ("asc", "desc")


def _text(doc: dict[str, Any], key: str) -> str:
    value = doc.get(key)
    return "" if value is None else str(value)


def to_list_item(doc: dict[str, Any]) -> AdminListItem:
    """Project a stored submission onto the fields the directory shows."""
    name = f"{_text(doc, 'firstName')} {_text(doc, 'lastName')}".strip()
    return AdminListItem(
        membershipId=_text(doc, "id"),
        name=name,
        email=_text(doc, "contactEmail"),
        mobile=_text(doc, "contactMobile"),
        membershipCategory=_text(doc, "membershipCategory"),
        membershipYears=_text(doc, "membershipYears"),
        membershipPrice=_text(doc, "membershipPrice"),
        paymentMode=_text(doc, "paymentMode"),
        status=_text(doc, "status"),
        submittedAt=_text(doc, "submittedAt"),
        city=_text(doc, "city"),
        state=_text(doc, "state"),
    )


def list_memberships(
    limit: int = 10,
    skip: int = 0,
    sort_by: str = "submittedAt",
    sort_order: str = "desc",
) -> AdminPage:
    """Return one page of submissions plus the total count.

    Args:
        limit: Page size, at least 1.
        skip: Number of records to skip, at least 0.
        sort_by: Document field to sort on (defaults to submission time).
        sort_order: "asc" or "desc"; anything other than "asc" sorts descending.

    Raises:
        ValueError: for a non-positive limit or negative skip.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")
    if skip < 0:
        raise ValueError("skip must not be negative")

    docs = membership_store.find_memberships(
        sort_by=sort_by, sort_order=sort_order, skip=skip, limit=limit,
    )
    total = membership_store.count_memberships()
    return AdminPage(
        items=[to_list_item(d) for d in docs],
        total=total,
        limit=limit,
        skip=skip,
        has_more=skip + limit < total,
    )


def get_membership(membership_id: str) -> dict[str, Any] | None:
    """Full stored document for *membership_id*, or None if not found."""
    return membership_store.find_membership(membership_id)


def delete_membership(membership_id: str) -> bool:
    """Delete a submission. Returns False if it did not exist."""
    deleted = membership_store.delete_membership(membership_id)
    if deleted:
        record_deletion(membership_id)
    return deleted


def search_page(items: list[AdminListItem], term: str) -> list[AdminListItem]:
    """Filter a fetched page by name, email, membership id or city."""
    needle = term.strip().lower()
    if not needle:
        return list(items)
    return [
        item for item in items
        if needle in item.name.lower()
        or needle in item.email.lower()
        or needle in item.membershipId.lower()
        or needle in item.city.lower()
    ]


def _submitted_on(item: AdminListItem) -> date | None:
    if not item.submittedAt:
        return None
    try:
        return datetime.fromisoformat(item.submittedAt.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def summarize_page(items: list[AdminListItem], total: int, today: date | None = None) -> dict:
    """Figures for the directory's stat cards.

    ``total`` is the collection size; the other figures only cover *items*.
    """
    today = today or date.today()
    this_month = 0
    for item in items:
        submitted = _submitted_on(item)
        if submitted and (submitted.year, submitted.month) == (today.year, today.month):
            this_month += 1
    return {
        "total_members": total,
        "pending": sum(1 for i in items if i.status == "pending"),
        "revenue": sum(parse_price(i.membershipPrice) for i in items),
        "this_month": this_month,
    }
