"""Audit trail of membership events for the Membership Signup tool.

Three things are recorded: an application being stored (from the wizard
or the API), a membership being deleted from the admin directory, and a
membership report being generated. Each event is one JSON object per line
in a date-partitioned file under data/audit/ (YYYY-MM-DD.jsonl).

The admin directory reads the trail back through ``membership_history``,
which turns raw entries into display lines for one member.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Iterator

from app.report import format_inr, format_timestamp, parse_price
from app.schema import AuditEntry, HistoryLine

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "audit"


class AuditAction(str, Enum):
    MEMBERSHIP_SUBMITTED = "membership_submitted"
    MEMBERSHIP_DELETED = "membership_deleted"
    REPORT_GENERATED = "report_generated"


_ACTION_LABELS = {
    AuditAction.MEMBERSHIP_SUBMITTED: "Application submitted",
    AuditAction.MEMBERSHIP_DELETED: "Membership deleted",
    AuditAction.REPORT_GENERATED: "Report generated",
}


def _append(action: AuditAction, membership_id: str = "",
            details: dict[str, Any] | None = None) -> AuditEntry:
    now = datetime.now(timezone.utc)
    entry = AuditEntry(
        timestamp=now.isoformat(),
        action=action.value,
        membership_id=membership_id,
        details=details or {},
    )
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    path = DATA_DIR / f"{now.strftime('%Y-%m-%d')}.jsonl"
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")
    return entry


# -- Writers ------------------------------------------------------------------


def record_submission(doc: dict[str, Any], source: str) -> AuditEntry:
    """Record a stored application; *source* is "wizard" or "api"."""
    return _append(
        AuditAction.MEMBERSHIP_SUBMITTED,
        membership_id=doc["id"],
        details={
            "source": source,
            "membershipCategory": doc.get("membershipCategory", ""),
            "membershipPrice": doc.get("membershipPrice", ""),
        },
    )


def record_deletion(membership_id: str) -> AuditEntry:
    return _append(AuditAction.MEMBERSHIP_DELETED, membership_id=membership_id)


def record_report(total_members: int, source: str) -> AuditEntry:
    """Record a generated report; *source* is "admin" or "api"."""
    return _append(AuditAction.REPORT_GENERATED,
                   details={"source": source, "members": total_members})


# -- Readers ------------------------------------------------------------------


def _entries_newest_first() -> Iterator[AuditEntry]:
    """Yield every readable entry, newest file and newest line first.

    Lines that are not JSON, or name an action this tool never writes, are
    skipped with a warning.
    """
    if not DATA_DIR.exists():
        return
    for path in sorted(DATA_DIR.glob("*.jsonl"), key=lambda p: p.stem, reverse=True):
        lines = [ln for ln in path.read_text(encoding="utf-8").splitlines() if ln.strip()]
        for line in reversed(lines):
            try:
                entry = AuditEntry.from_dict(json.loads(line))
                AuditAction(entry.action)
                if not isinstance(entry.details, dict):
                    raise TypeError("details is not an object")
            except (ValueError, TypeError, AttributeError) as exc:
                logger.warning("Skipping audit line in %s: %s", path.name, exc)
                continue
            yield entry


def recent_entries(limit: int = 50) -> list[AuditEntry]:
    """The latest *limit* events across all members, newest first."""
    results: list[AuditEntry] = []
    for entry in _entries_newest_first():
        results.append(entry)
        if len(results) >= limit:
            break
    return results


def _summary(entry: AuditEntry) -> str:
    if entry.action != AuditAction.MEMBERSHIP_SUBMITTED.value:
        return ""
    parts = []
    category = entry.details.get("membershipCategory")
    if category:
        parts.append(f"{str(category).title()} tier")
    price = parse_price(entry.details.get("membershipPrice"))
    if price:
        parts.append(format_inr(price))
    source = entry.details.get("source")
    if source:
        parts.append(f"via {source}")
    return ", ".join(parts)


def membership_history(membership_id: str, limit: int = 100) -> list[HistoryLine]:
    """Display lines for one member's events, newest first."""
    if not membership_id:
        return []
    lines: list[HistoryLine] = []
    for entry in _entries_newest_first():
        if entry.membership_id != membership_id:
            continue
        action = AuditAction(entry.action)
        lines.append(HistoryLine(
            timestamp=entry.timestamp,
            when=format_timestamp(entry.timestamp),
            action=action.value,
            label=_ACTION_LABELS[action],
            summary=_summary(entry),
        ))
        if len(lines) >= limit:
            break
    return lines
