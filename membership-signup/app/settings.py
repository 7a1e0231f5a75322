"""Runtime settings for the Membership Signup tool.

Values come from data/config/membership-signup.json (editable by staff)
with the defaults below as fallback.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))
from shared.config_store import get_tool_settings  # noqa: E402

TOOL_NAME = "membership-signup"

_DEFAULTS: dict = {
    "draft_storage_key": "hotel-membership-form",
    "draft_debounce_seconds": 0.4,
    "admin_page_size": 10,
    "report_member_limit": 1000,
    "submission_backend": "local",  # "local" or "http"
    "api_base_url": "http://localhost:8000",
}


@dataclass(frozen=True)
class SignupSettings:
    draft_storage_key: str
    draft_debounce_seconds: float
    admin_page_size: int
    report_member_limit: int
    submission_backend: str
    api_base_url: str


def load_settings() -> SignupSettings:
    """Read the tool's settings, falling back to defaults per key."""
    return SignupSettings(**get_tool_settings(TOOL_NAME, _DEFAULTS))
