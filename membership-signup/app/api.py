"""FastAPI backend for the Membership Signup tool.

Accepts completed membership applications from the signup wizard and
serves the admin directory: paged listing, single-record lookup, deletion,
and the printable membership report.

Part of the Coastal Grand Hotel membership tools.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel

from app import admin, audit_log, membership_store
from app.report import build_report, render_report_docx
from app.settings import load_settings

logger = logging.getLogger(__name__)

app = FastAPI(title="Membership Signup API")

_DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------

class SubmitMembershipRequest(BaseModel):
    """Payload for submitting a completed membership application."""

    data: dict[str, str | list[str] | bool]


# ---------------------------------------------------------------------------
# Submission endpoints
# ---------------------------------------------------------------------------

@app.post("/api/membership", status_code=201)
def submit_membership(request: SubmitMembershipRequest) -> dict[str, Any]:
    """Store a membership application and return its generated id."""
    try:
        doc = membership_store.insert_membership(request.data)
    except OSError as exc:
        logger.error("Membership submission error: %s", exc)
        raise HTTPException(
            status_code=500,
            detail=f"Failed to submit membership application: {exc}",
        ) from exc

    audit_log.record_submission(doc, source="api")
    return {
        "success": True,
        "message": "Membership application submitted successfully",
        "membershipId": doc["id"],
        "membershipData": doc,
    }


@app.get("/api/membership")
def membership_health() -> dict[str, Any]:
    """Report that the API is up and how many applications are stored."""
    return {
        "success": True,
        "message": "API is working",
        "totalMemberships": membership_store.count_memberships(),
    }


# ---------------------------------------------------------------------------
# Admin endpoints
# ---------------------------------------------------------------------------

@app.get("/api/membership/admin")
def admin_list(
    membershipId: str | None = None,
    limit: int = Query(10, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    sortBy: str = "submittedAt",
    sortOrder: str = "desc",
) -> dict[str, Any]:
    """List submissions (paged and sorted), or fetch one by ``membershipId``."""
    if membershipId:
        member = admin.get_membership(membershipId)
        if member is None:
            raise HTTPException(status_code=404, detail="Member not found")
        return {"success": True, "data": [member]}

    order = "asc" if sortOrder == "asc" else "desc"
    page = admin.list_memberships(limit=limit, skip=skip, sort_by=sortBy, sort_order=order)
    return {
        "success": True,
        "data": [item.to_dict() for item in page.items],
        "pagination": page.pagination(),
        "metadata": {
            "collection": "memberships",
            "sortBy": sortBy,
            "sortOrder": order,
        },
    }


@app.delete("/api/membership/admin")
def admin_delete(membershipId: str | None = None) -> dict[str, Any]:
    """Delete a submission by id."""
    if not membershipId:
        raise HTTPException(status_code=400, detail="Membership ID is required")
    if not admin.delete_membership(membershipId):
        raise HTTPException(status_code=404, detail="Membership not found")
    return {
        "success": True,
        "message": "Membership deleted successfully",
        "membershipId": membershipId,
    }


@app.get("/api/membership/admin/report")
def admin_report() -> Response:
    """Download the membership report as a Word document."""
    limit = load_settings().report_member_limit
    page = admin.list_memberships(limit=limit, skip=0)
    report = build_report(page.items)
    audit_log.record_report(report.total_members, source="api")
    filename = f"Coastal-Grand-Hotel-Membership-Report-{date.today().isoformat()}.docx"
    return Response(
        content=render_report_docx(report),
        media_type=_DOCX_MIME,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
