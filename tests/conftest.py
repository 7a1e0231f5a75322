"""Shared fixtures for all tests."""

from __future__ import annotations

import pytest


@pytest.fixture()
def sample_membership_fields():
    """Flattened fields of a completed application, as the wizard submits them."""
    return {
        "memberType": "individual",
        "salutation": "ms",
        "firstName": "Asha",
        "lastName": "Menon",
        "dateOfBirth": "1986-03-14",
        "contactEmail": "asha@example.com",
        "contactMobile": "+91 98765 43210",
        "city": "Panaji",
        "state": "Goa",
        "country": "India",
        "postalCode": "403001",
        "preferredContactMethod": ["email", "whatsapp"],
        "membershipCategory": "gold",
        "membershipYears": "5",
        "membershipPrice": "150000",
        "paymentMode": "cheque",
        "emiThirdPartyPayment": False,
        "kycDocumentType": ["passport"],
        "memberSignature": "Asha Menon",
    }
