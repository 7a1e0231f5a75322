"""Tests for membership-signup/app/gateway.py -- local and HTTP submission gateways."""

from __future__ import annotations

import asyncio
import sys
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "membership-signup"))

import app.audit_log as audit_mod
import app.gateway as gateway_mod
import app.membership_store as store_mod
from app.gateway import (
    GatewayError,
    HttpSubmissionGateway,
    LocalSubmissionGateway,
    build_gateway,
    flatten_draft,
)


@pytest.fixture(autouse=True)
def _isolate_data_dirs(tmp_path):
    with patch.object(store_mod, "DATA_DIR", tmp_path / "memberships"), \
         patch.object(audit_mod, "DATA_DIR", tmp_path / "audit"):
        yield tmp_path


def _response(status: int, body: dict | None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    if body is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = body
    return resp


# ── Flattening ───────────────────────────────────────────────────────────


class TestFlattenDraft:
    def test_kinds_flatten_to_plain_values(self):
        draft = {
            "firstName": "Asha",
            "dateOfBirth": date(1986, 3, 14),
            "kycDocumentType": ["passport", "pan_card"],
            "emiThirdPartyPayment": False,
            "coApplicantDateOfBirth": None,
        }
        assert flatten_draft(draft) == {
            "firstName": "Asha",
            "dateOfBirth": "1986-03-14",
            "kycDocumentType": ["passport", "pan_card"],
            "emiThirdPartyPayment": False,
        }

    def test_draft_is_not_modified(self):
        draft = {"dateOfBirth": date(1986, 3, 14), "kyc": ["passport"]}
        flat = flatten_draft(draft)
        flat["kyc"].append("aadhaar")
        assert draft == {"dateOfBirth": date(1986, 3, 14), "kyc": ["passport"]}


# ── Local gateway ────────────────────────────────────────────────────────


class TestLocalGateway:
    def test_stores_and_returns_id(self):
        result = asyncio.run(LocalSubmissionGateway().create({"firstName": "Asha"}))
        assert result["success"] is True
        doc = store_mod.find_membership(result["membershipId"])
        assert doc["firstName"] == "Asha"
        assert doc["status"] == "pending"
        assert result["membershipData"] == doc

    def test_writes_audit_entry(self):
        result = asyncio.run(LocalSubmissionGateway().create({"membershipCategory": "gold"}))
        entries = audit_mod.membership_history(result["membershipId"])
        assert [e.action for e in entries] == ["membership_submitted"]
        assert entries[0].summary == "Gold tier, via wizard"

    def test_store_failure_becomes_gateway_error(self):
        with patch.object(store_mod, "insert_membership", side_effect=OSError("disk full")):
            with pytest.raises(GatewayError, match="disk full"):
                asyncio.run(LocalSubmissionGateway().create({"firstName": "Asha"}))


# ── HTTP gateway ─────────────────────────────────────────────────────────


class TestHttpGateway:
    def test_posts_data_envelope(self):
        session = MagicMock()
        session.post.return_value = _response(
            201, {"success": True, "membershipId": "CM1", "membershipData": {"id": "CM1"}},
        )
        gw = HttpSubmissionGateway("http://api.local/", session=session)

        result = asyncio.run(gw.create({"firstName": "Asha"}))

        assert result["membershipId"] == "CM1"
        session.post.assert_called_once_with(
            "http://api.local/api/membership",
            json={"data": {"firstName": "Asha"}},
            timeout=15.0,
        )

    def test_server_error_detail_is_surfaced(self):
        session = MagicMock()
        session.post.return_value = _response(
            500, {"detail": "Failed to submit membership application: disk full"},
        )
        gw = HttpSubmissionGateway("http://api.local", session=session)
        with pytest.raises(GatewayError) as exc_info:
            asyncio.run(gw.create({}))
        assert str(exc_info.value) == "Failed to submit membership application: disk full"

    def test_success_false_is_an_error(self):
        session = MagicMock()
        session.post.return_value = _response(200, {"success": False, "message": "Rejected"})
        gw = HttpSubmissionGateway("http://api.local", session=session)
        with pytest.raises(GatewayError, match="Rejected"):
            asyncio.run(gw.create({}))

    def test_non_json_error_mentions_status(self):
        session = MagicMock()
        session.post.return_value = _response(502, None)
        gw = HttpSubmissionGateway("http://api.local", session=session)
        with pytest.raises(GatewayError, match="HTTP 502"):
            asyncio.run(gw.create({}))

    def test_non_object_json_body_is_an_error(self):
        session = MagicMock()
        session.post.return_value = _response(200, None)
        session.post.return_value.json.side_effect = None
        session.post.return_value.json.return_value = ["unexpected"]
        gw = HttpSubmissionGateway("http://api.local", session=session)
        with pytest.raises(GatewayError, match="HTTP 200"):
            asyncio.run(gw.create({}))

    def test_network_error(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")
        gw = HttpSubmissionGateway("http://api.local", session=session)
        with pytest.raises(GatewayError, match="Network error"):
            asyncio.run(gw.create({}))


# ── Factory ──────────────────────────────────────────────────────────────


class TestBuildGateway:
    def test_local(self):
        assert isinstance(build_gateway("local", "http://x"), LocalSubmissionGateway)

    def test_http_uses_env_override(self):
        with patch.object(gateway_mod, "_api_url_from_env", return_value="http://env:9000"):
            gw = build_gateway("http", "http://localhost:8000")
        assert isinstance(gw, HttpSubmissionGateway)
        assert gw.base_url == "http://env:9000"

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_gateway("carrier-pigeon", "")
