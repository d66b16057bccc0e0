"""
Tests for phone reputation lookups.
"""

import json

import pytest
from unittest.mock import Mock

from scamshield.core.exceptions import BackendUnavailableError, ValidationError
from scamshield.core.phone_reputation import (
    DND_WARNING, SCAMMER_WARNINGS, UNVERIFIED_WARNING,
    InMemoryPhoneRegistry, PhoneReputationRecord, PhoneReputationService, VerifiedBrandInfo
)
from scamshield.database.seed import LIC


@pytest.fixture
def service(phone_registry):
    return PhoneReputationService(phone_registry)


class TestVerify:

    @pytest.mark.parametrize("formatted", [
        "+91 1800 227 717",
        "+91-1800-227-717",
        "+911800227717",
        "(+91) 1800.227.717",
    ])
    def test_formatting_variants_resolve_identically(self, service, formatted):
        result = service.verify(formatted)
        assert result == service.verify("+911800227717")
        assert result.phone_number == "+911800227717"

    def test_verified_brand_number(self, service):
        result = service.verify("+91 1800 227 717")

        assert result.is_verified
        assert not result.is_known_scammer
        assert result.brand_name == LIC
        assert result.official_contacts["website"] == "https://www.licindia.in"
        assert result.warnings[0] == f"Verified: This number belongs to {LIC}."
        assert result.warnings[1].startswith("Official contacts: ")
        assert json.loads(result.warnings[1][len("Official contacts: "):]) == result.official_contacts

    def test_known_scammer(self, service):
        result = service.verify("+91 99999 99999")

        assert result.is_known_scammer
        assert result.report_count == 47
        assert not result.is_verified
        assert result.warnings == list(SCAMMER_WARNINGS)
        assert UNVERIFIED_WARNING not in result.warnings

    def test_dnd_number(self, service):
        result = service.verify("+919876543210")

        assert result.is_dnd
        assert result.warnings == [UNVERIFIED_WARNING, DND_WARNING]

    def test_unregistered_number(self, service):
        result = service.verify("+91 90000 00001")

        assert not result.is_verified
        assert not result.is_known_scammer
        assert not result.is_dnd
        assert result.report_count == 0
        assert result.brand_name is None
        assert result.official_contacts is None
        assert result.warnings == [UNVERIFIED_WARNING]

    def test_verified_number_without_brand_record(self):
        registry = InMemoryPhoneRegistry([
            PhoneReputationRecord("+911234567", is_verified=True, brand_name="Unknown Brand")
        ])
        result = PhoneReputationService(registry).verify("+911234567")

        assert result.is_verified
        assert result.official_contacts is None
        assert result.warnings == ["Verified: This number belongs to Unknown Brand."]

    @pytest.mark.parametrize("bad", ["", "   ", "abc", "12", "+91 98765 abc", None, 9876543210])
    def test_invalid_numbers_rejected(self, service, bad):
        with pytest.raises(ValidationError) as exc_info:
            service.verify(bad)
        assert exc_info.value.field == "phone_number"

    def test_registry_failure_raises(self):
        registry = Mock()
        registry.find_number.side_effect = ConnectionError("registry down")

        with pytest.raises(BackendUnavailableError) as exc_info:
            PhoneReputationService(registry).verify("+919999999999")
        assert exc_info.value.backend == "phone registry"
        assert isinstance(exc_info.value.cause, ConnectionError)


class TestVerifyBrand:

    def test_verified_brand(self, service):
        result = service.verify_brand(LIC)

        assert result.is_verified
        assert result.verification_status == "VERIFIED"
        assert "1800-227-717" in result.official_contacts["phone"]

    def test_unknown_brand(self, service):
        result = service.verify_brand("  Totally Real Insurance  ")

        assert result.brand_name == "Totally Real Insurance"
        assert not result.is_verified
        assert result.official_contacts is None

    def test_unverified_brand_hides_contacts(self):
        registry = InMemoryPhoneRegistry(brands=[
            VerifiedBrandInfo("Pending Co", {"phone": ["1800"]}, verification_status="PENDING")
        ])
        result = PhoneReputationService(registry).verify_brand("Pending Co")

        assert not result.is_verified
        assert result.verification_status == "PENDING"
        assert result.official_contacts is None

    def test_blank_brand_rejected(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.verify_brand(" ")
        assert exc_info.value.field == "brand_name"
        assert str(exc_info.value) == "Brand name cannot be empty"
