"""Data models for the Membership Signup tool.

Dataclasses for stored submissions, the admin listing projection, audit
entries, and the history lines the admin directory shows for one member.
Stored models round-trip through asdict/from_dict.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class Submission:
    """A persisted membership application."""

    id: str
    submitted_at: str          # ISO-8601, UTC
    status: str = "pending"
    fields: dict[str, Any] = field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        """Flat document as stored: field values plus id/submittedAt/status."""
        doc = dict(self.fields)
        doc["id"] = self.id
        doc["submittedAt"] = self.submitted_at
        doc["status"] = self.status
        return doc

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> Submission:
        fields = {k: v for k, v in doc.items() if k not in ("id", "submittedAt", "status")}
        return cls(
            id=doc.get("id", ""),
            submitted_at=doc.get("submittedAt", ""),
            status=doc.get("status", "pending"),
            fields=fields,
        )


@dataclass
class AdminListItem:
    """Summary projection of a submission for the admin directory."""

    membershipId: str
    name: str
    email: str = ""
    mobile: str = ""
    membershipCategory: str = ""
    membershipYears: str = ""
    membershipPrice: str = ""
    paymentMode: str = ""
    status: str = ""
    submittedAt: str = ""
    city: str = ""
    state: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> AdminListItem:
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})


@dataclass
class AdminPage:
    """One page of the admin listing."""

    items: list[AdminListItem]
    total: int
    limit: int
    skip: int
    has_more: bool

    def pagination(self) -> dict:
        return {
            "total": self.total,
            "limit": self.limit,
            "skip": self.skip,
            "hasMore": self.has_more,
        }


@dataclass
class AuditEntry:
    """A single audit trail entry."""

    timestamp: str
    action: str                # membership_submitted | membership_deleted | report_generated
    membership_id: str = ""
    details: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> AuditEntry:
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})


@dataclass(frozen=True)
class HistoryLine:
    """One event in a member's history, ready for the admin directory."""

    timestamp: str
    when: str      # "15 Jan 2025, 10:30"
    action: str
    label: str
    summary: str = ""
