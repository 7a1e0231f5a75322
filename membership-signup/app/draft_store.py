"""Draft persistence for the Membership Signup wizard.

The in-progress application lives in a single named JSON slot on disk so a
page reload (or a crashed browser tab) picks up where the applicant left
off. Date fields are stored as ISO-8601 strings and turned back into
``datetime.date`` values on load.

Persistence is best-effort: a missing or corrupt slot loads as an empty
draft, and a failed write is logged and dropped.

Part of the Coastal Grand Hotel membership tools.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import date, datetime
from pathlib import Path
from typing import Any

from app.field_catalogue import Catalogue, FieldDescriptor, FieldKind

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "drafts"

DEFAULT_STORAGE_KEY = "hotel-membership-form"


def parse_iso_date(value: Any) -> date | None:
    """Parse an ISO-8601 date or timestamp string into a date.

    Returns None for anything that is not a parseable string.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _fits_kind(field_def: FieldDescriptor, value: Any) -> bool:
    """True if a stored JSON value has the shape the field's kind expects."""
    if value is None:
        return True
    if field_def.is_multi_valued:
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    if field_def.kind == FieldKind.CHECKBOX:
        return isinstance(value, bool)
    return isinstance(value, str)


class DraftStore:
    """One named JSON slot holding the latest known draft values."""

    def __init__(self, catalogue: Catalogue, storage_key: str = DEFAULT_STORAGE_KEY,
                 data_dir: Path | None = None):
        self.catalogue = catalogue
        self.storage_key = storage_key
        self._data_dir = data_dir

    @property
    def path(self) -> Path:
        # Resolved lazily so tests can patch DATA_DIR
        return (self._data_dir or DATA_DIR) / f"{self.storage_key}.json"

    def _is_date_field(self, name: str) -> bool:
        return name in self.catalogue and self.catalogue.field(name).kind == FieldKind.DATE

    def serialize(self, draft: dict[str, Any]) -> dict[str, Any]:
        """Convert a draft into its JSON-ready form."""
        out: dict[str, Any] = {}
        for key, value in draft.items():
            if isinstance(value, date):
                out[key] = value.isoformat()
            elif isinstance(value, tuple):
                out[key] = list(value)
            else:
                out[key] = value
        return out

    def hydrate(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Convert a stored payload back into a draft.

        Values whose JSON type does not fit their field's kind are dropped,
        so that field starts fresh instead of carrying a corrupt value.
        """
        draft: dict[str, Any] = {}
        for key, value in payload.items():
            if self._is_date_field(key):
                draft[key] = parse_iso_date(value)
            elif key in self.catalogue and not _fits_kind(self.catalogue.field(key), value):
                logger.warning("Dropping draft value for %s: unexpected %s",
                               key, type(value).__name__)
            else:
                draft[key] = value
        return draft

    def load(self) -> dict[str, Any]:
        """Load the persisted draft, or an empty draft if none is usable."""
        path = self.path
        if not path.exists():
            return {}
        try:
            payload = json.loads(path.read_text())
        except (OSError, ValueError) as exc:
            logger.warning("Discarding unreadable draft %s: %s", path, exc)
            return {}
        if not isinstance(payload, dict):
            logger.warning("Discarding malformed draft %s: expected an object", path)
            return {}
        return self.hydrate(payload)

    def save(self, draft: dict[str, Any]) -> None:
        """Overwrite the slot with *draft*. Failures are logged, not raised."""
        path = self.path
        try:
            text = json.dumps(self.serialize(draft), indent=2, ensure_ascii=False)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Could not save draft %s: %s", path, exc)

    def clear(self) -> None:
        """Remove the slot if present."""
        path = self.path
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not clear draft %s: %s", path, exc)


class DraftWriter:
    """Debounced, ordered writes of a draft to a ``DraftStore``.

    Each ``schedule`` call snapshots the draft and restarts a timer, so a
    burst of edits produces a single write of the newest snapshot. Every
    snapshot carries a generation number and a write only lands if no newer
    snapshot has been written already.
    """

    def __init__(self, store: DraftStore, delay: float = 0.4):
        self.store = store
        self.delay = delay
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._pending: dict[str, Any] | None = None
        self._generation = 0
        self._written = 0

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def schedule(self, draft: dict[str, Any]) -> None:
        snapshot = {k: (list(v) if isinstance(v, list) else v) for k, v in draft.items()}
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._pending = snapshot
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self.delay > 0:
                self._timer = threading.Timer(self.delay, self._write, args=(generation,))
                self._timer.daemon = True
                self._timer.start()
        if self.delay <= 0:
            self._write(generation)

    def _write(self, generation: int) -> None:
        with self._lock:
            if generation <= self._written or self._pending is None:
                return
            if generation != self._generation:
                # A newer snapshot is queued; its own timer will write it
                return
            snapshot = self._pending
            self._pending = None
            self._timer = None
            self._written = generation
            self.store.save(snapshot)

    def flush(self) -> None:
        """Write any pending snapshot immediately."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            generation = self._generation
        self._write(generation)

    def discard(self) -> None:
        """Drop pending work and clear the persisted slot."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
            self._generation += 1
            self._written = self._generation
            self.store.clear()
