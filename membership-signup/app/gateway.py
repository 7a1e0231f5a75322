"""Submission gateways for the Membership Signup wizard.

The wizard hands a finished application to a gateway and gets back the
generated membership id. Two gateways are provided:

- ``LocalSubmissionGateway`` writes straight into the membership store,
  so the Streamlit wizard works entirely offline without the API server.
- ``HttpSubmissionGateway`` posts to the FastAPI backend (``app.api``).

Any failure is raised as ``GatewayError`` carrying a message fit to show
the applicant.
"""

from __future__ import annotations

import asyncio
import logging
import os
from datetime import date
from pathlib import Path
from typing import Any, Protocol

import requests

from app import membership_store
from app.audit_log import record_submission

logger = logging.getLogger(__name__)

_ENV_PATH = Path(__file__).resolve().parent.parent.parent / ".env"


class GatewayError(Exception):
    """Submission could not be stored. ``str(exc)`` is shown to the user."""


class SubmissionGateway(Protocol):
    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Store *fields*; return {"success", "membershipId", "membershipData"}."""
        ...


def flatten_draft(draft: dict[str, Any]) -> dict[str, Any]:
    """Turn a draft into plain submission fields.

    Unset values are dropped, dates become ISO-8601 strings and lists are
    copied. The draft itself is never modified.
    """
    fields: dict[str, Any] = {}
    for key, value in draft.items():
        if value is None:
            continue
        if isinstance(value, date):
            fields[key] = value.isoformat()
        elif isinstance(value, (list, tuple)):
            fields[key] = [str(v) for v in value]
        elif isinstance(value, bool):
            fields[key] = value
        else:
            fields[key] = str(value)
    return fields


class LocalSubmissionGateway:
    """Stores submissions directly in ``app.membership_store``."""

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        try:
            doc = await asyncio.to_thread(membership_store.insert_membership, fields)
        except OSError as exc:
            logger.error("Storing membership failed: %s", exc)
            raise GatewayError(f"Failed to submit membership application: {exc}") from exc
        try:
            record_submission(doc, source="wizard")
        except OSError as exc:
            logger.warning("Audit entry for %s not written: %s", doc["id"], exc)
        return {"success": True, "membershipId": doc["id"], "membershipData": doc}


class HttpSubmissionGateway:
    """Posts submissions to the Membership Signup API."""

    def __init__(self, base_url: str, timeout: float = 15.0,
                 session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, fields: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/api/membership"
        try:
            resp = self.session.post(url, json={"data": fields}, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("POST %s failed: %s", url, exc)
            raise GatewayError(f"Network error: {exc}") from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not resp.ok or not body.get("success"):
            # FastAPI puts HTTPException text under "detail"
            message = (
                body.get("message")
                or body.get("detail")
                or f"Failed to submit membership application (HTTP {resp.status_code})"
            )
            raise GatewayError(str(message))
        return body

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        return await asyncio.to_thread(self._post, fields)


def _api_url_from_env(default: str) -> str:
    from dotenv import dotenv_values

    env = dotenv_values(_ENV_PATH)
    return env.get("MEMBERSHIP_API_URL") or os.environ.get("MEMBERSHIP_API_URL") or default


def build_gateway(backend: str, api_base_url: str) -> SubmissionGateway:
    """Pick the gateway configured for this installation."""
    if backend == "http":
        return HttpSubmissionGateway(_api_url_from_env(api_base_url))
    if backend == "local":
        return LocalSubmissionGateway()
    raise ValueError(f"Unknown submission backend: {backend}")
