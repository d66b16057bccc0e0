"""
Phone number reputation lookup against the telemarketer registry.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Protocol

from scamshield.core.exceptions import BackendUnavailableError, ScamShieldError
from scamshield.core.logging import get_logger
from scamshield.core.validation import validate_name, validate_phone
from scamshield.schemas import BrandVerification, PhoneVerification

logger = get_logger(__name__)

SCAMMER_WARNINGS = (
    "WARNING: This number has been reported as a scammer. Do not share personal or financial information.",
    "Block this number immediately and report to TRAI Chakshu if you received a suspicious call.",
)
UNVERIFIED_WARNING = "This number is not verified in our database. Exercise caution when sharing information."
DND_WARNING = "This number is registered on TRAI DND (Do Not Disturb) registry."


@dataclass(frozen=True)
class PhoneReputationRecord:
    """One registry row, keyed by normalized phone number."""
    phone_number: str
    is_verified: bool = False
    is_scammer: bool = False
    is_dnd: bool = False
    report_count: int = 0
    brand_name: Optional[str] = None
    last_verified_at: Optional[datetime] = None


@dataclass(frozen=True)
class VerifiedBrandInfo:
    """Verified brand with its official contact channels."""
    brand_name: str
    official_contacts: Dict[str, Any] = field(default_factory=dict)
    verification_status: str = "VERIFIED"
    verified_at: Optional[datetime] = None

    @property
    def is_verified(self) -> bool:
        return self.verification_status == "VERIFIED"


class PhoneRegistry(Protocol):
    """Read-only registry collaborator."""

    def find_number(self, phone_number: str) -> Optional[PhoneReputationRecord]:
        ...

    def find_brand(self, brand_name: str) -> Optional[VerifiedBrandInfo]:
        ...


class InMemoryPhoneRegistry:
    """Registry over in-process records."""

    def __init__(
        self,
        records: Iterable[PhoneReputationRecord] = (),
        brands: Iterable[VerifiedBrandInfo] = ()
    ):
        self._records = {record.phone_number: record for record in records}
        self._brands = {brand.brand_name: brand for brand in brands}

    def find_number(self, phone_number: str) -> Optional[PhoneReputationRecord]:
        return self._records.get(phone_number)

    def find_brand(self, brand_name: str) -> Optional[VerifiedBrandInfo]:
        return self._brands.get(brand_name)


class PhoneReputationService:
    """
    Resolves a phone number to its reputation flags and user-facing warnings.

    Equivalently formatted numbers resolve identically. Registry failures are
    raised as ``BackendUnavailableError``: there is no safe default answer for
    "is this number a scammer".
    """

    def __init__(self, registry: PhoneRegistry):
        self.registry = registry

    def verify(self, phone_number: str) -> PhoneVerification:
        normalized = validate_phone(phone_number)

        record = self._lookup(self.registry.find_number, normalized)
        brand = None
        if record is not None and record.brand_name:
            brand = self._lookup(self.registry.find_brand, record.brand_name)

        verification = PhoneVerification(
            phone_number=normalized,
            is_verified=bool(record and record.is_verified),
            is_dnd=bool(record and record.is_dnd),
            is_known_scammer=bool(record and record.is_scammer),
            report_count=record.report_count if record else 0,
            brand_name=record.brand_name if record else None,
            official_contacts=dict(brand.official_contacts) if brand and brand.official_contacts else None,
        )
        verification.warnings = self._warnings(verification)

        logger.info(
            "Phone verification completed",
            extra={
                "phone_number": normalized,
                "is_verified": verification.is_verified,
                "is_scammer": verification.is_known_scammer,
            }
        )
        return verification

    def verify_brand(self, brand_name: str) -> BrandVerification:
        """Look up a brand's verification status and official contacts."""
        name = validate_name(brand_name, field="brand_name")
        brand = self._lookup(self.registry.find_brand, name)
        if brand is None:
            return BrandVerification(brand_name=name)

        return BrandVerification(
            brand_name=brand.brand_name,
            is_verified=brand.is_verified,
            verification_status=brand.verification_status,
            official_contacts=dict(brand.official_contacts) if brand.is_verified else None,
        )

    @staticmethod
    def _warnings(verification: PhoneVerification):
        warnings = []
        if verification.is_known_scammer:
            warnings.extend(SCAMMER_WARNINGS)

        if not verification.is_verified and not verification.is_known_scammer:
            warnings.append(UNVERIFIED_WARNING)

        if verification.is_dnd:
            warnings.append(DND_WARNING)

        if verification.is_verified and verification.brand_name:
            warnings.append(f"Verified: This number belongs to {verification.brand_name}.")
            if verification.official_contacts:
                warnings.append(
                    f"Official contacts: {json.dumps(verification.official_contacts, sort_keys=True)}"
                )
        return warnings

    @staticmethod
    def _lookup(finder, key: str):
        try:
            return finder(key)
        except ScamShieldError:
            raise
        except Exception as e:
            logger.error(f"Phone registry lookup failed: {e}", exc_info=True)
            raise BackendUnavailableError("phone registry", e) from e
