"""Submission storage for the Membership Signup tool.

A small document collection: one JSON file per submitted application under
data/memberships/, named by membership id. Supports insert, find (with
sort/skip/limit), count and delete. Both the signup wizard (through the
submission gateway) and the admin screens read and write here.

Part of the Coastal Grand Hotel membership tools.
"""

from __future__ import annotations

import json
import random
import re
import string
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from app.schema import Submission

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "memberships"

ID_PREFIX = "CM"  # Coastal Member
_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


def _ensure_dir() -> None:
    """Create the memberships directory if it does not exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def _doc_path(membership_id: str) -> Path | None:
    # Ids come from query strings; refuse anything that could escape DATA_DIR
    if not membership_id or not _SAFE_ID_RE.match(membership_id):
        return None
    return DATA_DIR / f"{membership_id}.json"


def new_membership_id() -> str:
    """Generate an id: prefix, last 8 digits of epoch millis, 4 random chars."""
    timestamp = str(int(time.time() * 1000))[-8:]
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"{ID_PREFIX}{timestamp}{suffix}"


def insert_membership(fields: dict[str, Any]) -> dict[str, Any]:
    """Stamp and store a new submission.

    Args:
        fields: Flattened field values from the signup wizard.

    Returns:
        The stored document (field values plus id, submittedAt, status).

    Raises:
        OSError: if the document cannot be written.
    """
    _ensure_dir()
    membership_id = new_membership_id()
    while (DATA_DIR / f"{membership_id}.json").exists():
        membership_id = new_membership_id()

    submission = Submission(
        id=membership_id,
        submitted_at=datetime.now(timezone.utc).isoformat(),
        status="pending",
        fields=dict(fields),
    )
    doc = submission.to_document()
    (DATA_DIR / f"{membership_id}.json").write_text(
        json.dumps(doc, indent=2, ensure_ascii=False)
    )
    return doc


def _load_all() -> list[dict[str, Any]]:
    _ensure_dir()
    docs: list[dict[str, Any]] = []
    for p in DATA_DIR.glob("*.json"):
        try:
            doc = json.loads(p.read_text())
        except (json.JSONDecodeError, OSError):
            continue
        if isinstance(doc, dict):
            docs.append(doc)
    return docs


def _sort_key(doc: dict[str, Any], sort_by: str) -> tuple:
    # Missing values sort lowest, as in a document database
    value = doc.get(sort_by)
    if value is None:
        return (0, "")
    return (1, str(value))


def find_memberships(
    sort_by: str = "submittedAt",
    sort_order: str = "desc",
    skip: int = 0,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Return stored documents sorted by *sort_by*, then sliced."""
    docs = _load_all()
    docs.sort(key=lambda d: _sort_key(d, sort_by), reverse=(sort_order != "asc"))
    end = None if limit is None else skip + limit
    return docs[skip:end]


def count_memberships() -> int:
    """Number of stored submissions."""
    return len(_load_all())


def find_membership(membership_id: str) -> dict[str, Any] | None:
    """Load one submission by id, or None if it does not exist."""
    path = _doc_path(membership_id)
    if path is None or not path.exists():
        return None
    try:
        return json.loads(path.read_text())
    except (json.JSONDecodeError, OSError):
        return None


def delete_membership(membership_id: str) -> bool:
    """Delete a submission.

    Returns:
        True if the document existed and was removed, False otherwise.
    """
    path = _doc_path(membership_id)
    if path is not None and path.exists():
        path.unlink()
        return True
    return False
