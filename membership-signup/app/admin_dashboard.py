"""Membership Admin -- Streamlit dashboard for hotel staff.

Lists submitted membership applications with paging and sorting, shows
the full record for a member, deletes records, and downloads the printable
membership report. Reads the membership store directly, so it works
without the API server.
"""

from __future__ import annotations

import html as html_mod
import sys
from datetime import date
from pathlib import Path

import streamlit as st

from app import admin
from app.audit_log import membership_history, record_report
from app.report import build_report, format_inr, format_timestamp, parse_price, render_report_docx
from app.settings import load_settings

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))
from shared.theme import render_nav_bar, render_theme_css, tier_badge_html  # noqa: E402

# ── Page config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Membership Admin -- Coastal Grand Hotel",
    layout="wide",
    initial_sidebar_state="collapsed",
)

render_theme_css()
render_nav_bar("Membership Admin", link_label="← Signup Form",
               link_url="http://localhost:8501")

settings = load_settings()

# ── Session state defaults ───────────────────────────────────────────────────

_DEFAULTS: dict = {
    "admin_skip": 0,
    "admin_confirm_delete": "",
    "admin_message": "",
}
for _k, _v in _DEFAULTS.items():
    if _k not in st.session_state:
        st.session_state[_k] = _v

_SORT_LABELS = {
    "submittedAt": "Submission date",
    "membershipCategory": "Category",
    "membershipPrice": "Price",
    "firstName": "First name",
}


def _stat_card(label: str, value: str) -> str:
    return (
        f'<div class="stat-card"><div class="stat-label">{html_mod.escape(label)}</div>'
        f'<div class="stat-value">{html_mod.escape(value)}</div></div>'
    )


def _reset_paging() -> None:
    st.session_state.admin_skip = 0


# ── Controls ─────────────────────────────────────────────────────────────────

ctl_search, ctl_sort, ctl_order, ctl_report = st.columns([3, 2, 1, 2])
with ctl_search:
    search_term = st.text_input(
        "Search",
        placeholder="Name, email, membership ID or city",
        help="Searches the members shown on this page only.",
    )
with ctl_sort:
    sort_by = st.selectbox("Sort by", list(_SORT_LABELS), format_func=_SORT_LABELS.get,
                           on_change=_reset_paging)
with ctl_order:
    sort_order = st.selectbox("Order", list(admin.SORT_ORDERS), index=1,
                              on_change=_reset_paging)

page_size = settings.admin_page_size
page = admin.list_memberships(
    limit=page_size,
    skip=st.session_state.admin_skip,
    sort_by=sort_by,
    sort_order=sort_order,
)
# A delete can leave the pager past the last record
if not page.items and page.skip > 0:
    st.session_state.admin_skip = max(page.skip - page_size, 0)
    st.rerun()

with ctl_report:
    st.markdown('<div style="height:28px"></div>', unsafe_allow_html=True)
    if st.button("Prepare Report", use_container_width=True):
        report_page = admin.list_memberships(limit=settings.report_member_limit, skip=0)
        report = build_report(report_page.items)
        record_report(report.total_members, source="admin")
        st.session_state.admin_report_bytes = render_report_docx(report)
    if st.session_state.get("admin_report_bytes"):
        st.download_button(
            "Download Report (.docx)",
            data=st.session_state.admin_report_bytes,
            file_name=f"Coastal-Grand-Hotel-Membership-Report-{date.today().isoformat()}.docx",
            mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            use_container_width=True,
        )

# ── Stats cards ──────────────────────────────────────────────────────────────

stats = admin.summarize_page(page.items, page.total)
card_cols = st.columns(4)
for col, (label, value) in zip(card_cols, [
    ("Total Members", str(stats["total_members"])),
    ("Pending (this page)", str(stats["pending"])),
    ("Revenue (this page)", format_inr(stats["revenue"])),
    ("This Month (this page)", str(stats["this_month"])),
]):
    with col:
        st.markdown(_stat_card(label, value), unsafe_allow_html=True)

if st.session_state.admin_message:
    st.success(st.session_state.admin_message)
    st.session_state.admin_message = ""

# ── Member list ──────────────────────────────────────────────────────────────

st.markdown('<div class="section-label">Members</div>', unsafe_allow_html=True)

visible = admin.search_page(page.items, search_term)
if not page.items:
    st.info("No membership applications have been submitted yet.")
elif not visible:
    st.info("No members on this page match your search.")

for item in visible:
    header = (
        f"{item.name or '(no name)'}  ·  {item.membershipId}  ·  "
        f"{item.membershipCategory.title() or '--'}  ·  {format_timestamp(item.submittedAt)}"
    )
    with st.expander(header):
        st.markdown(tier_badge_html(item.membershipCategory), unsafe_allow_html=True)
        info_left, info_right = st.columns(2)
        with info_left:
            st.markdown(f"**Email:** {item.email or '--'}")
            st.markdown(f"**Mobile:** {item.mobile or '--'}")
            st.markdown(f"**Location:** {', '.join(p for p in (item.city, item.state) if p) or '--'}")
        with info_right:
            st.markdown(f"**Years:** {item.membershipYears or '--'}")
            st.markdown(f"**Price:** {format_inr(parse_price(item.membershipPrice))}")
            st.markdown(f"**Payment:** {item.paymentMode or '--'}")
            st.markdown(f"**Status:** {item.status.title() or '--'}")

        if st.checkbox("Show full record", key=f"full_{item.membershipId}"):
            st.json(admin.get_membership(item.membershipId) or {})
            history = membership_history(item.membershipId)
            if history:
                st.caption("History")
                for line in history:
                    detail = f" ({line.summary})" if line.summary else ""
                    st.caption(f"{line.when} -- {line.label}{detail}")

        if st.session_state.admin_confirm_delete == item.membershipId:
            st.warning(f"Delete membership {item.membershipId}? This cannot be undone.")
            yes_col, no_col = st.columns(2)
            with yes_col:
                if st.button("Yes, delete", key=f"confirm_del_{item.membershipId}",
                             type="primary", use_container_width=True):
                    if admin.delete_membership(item.membershipId):
                        st.session_state.admin_message = f"Deleted {item.membershipId}."
                    else:
                        st.session_state.admin_message = f"{item.membershipId} was already removed."
                    st.session_state.admin_confirm_delete = ""
                    st.rerun()
            with no_col:
                if st.button("Cancel", key=f"cancel_del_{item.membershipId}",
                             use_container_width=True):
                    st.session_state.admin_confirm_delete = ""
                    st.rerun()
        elif st.button("Delete", key=f"del_{item.membershipId}"):
            st.session_state.admin_confirm_delete = item.membershipId
            st.rerun()

# ── Pager ────────────────────────────────────────────────────────────────────

st.markdown("---")
pg_prev, pg_info, pg_next = st.columns([1, 2, 1])
with pg_prev:
    if st.button("← Previous", use_container_width=True, disabled=page.skip == 0):
        st.session_state.admin_skip = max(page.skip - page_size, 0)
        st.rerun()
with pg_info:
    first = page.skip + 1 if page.items else 0
    st.markdown(
        f'<div style="text-align:center">Showing {first}-{page.skip + len(page.items)} '
        f'of {page.total}</div>',
        unsafe_allow_html=True,
    )
with pg_next:
    if st.button("Next →", use_container_width=True, disabled=not page.has_more):
        st.session_state.admin_skip = page.skip + page_size
        st.rerun()
