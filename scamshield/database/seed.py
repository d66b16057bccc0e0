"""
Seed data for the phone registry, verified brands and scam pattern corpus.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as SQLAlchemySession

from scamshield.core.corpus import generate_corpus
from scamshield.core.logging import get_logger
from scamshield.core.patterns import compute_corpus_version
from scamshield.core.phone_reputation import PhoneReputationRecord, VerifiedBrandInfo
from .models import TelemarketerRegistry, VerifiedBrand
from .utils import SqlPatternStore

logger = get_logger(__name__)

LIC = "Life Insurance Corporation of India (LIC)"
HDFC_LIFE = "HDFC Life Insurance"
ICICI_PRU = "ICICI Prudential Life Insurance"
SBI_LIFE = "SBI Life Insurance"
MAX_LIFE = "Max Life Insurance"
BAJAJ_ALLIANZ = "Bajaj Allianz Life Insurance"
TATA_AIA = "Tata AIA Life Insurance"
STAR_HEALTH = "Star Health Insurance"
HDFC_ERGO = "HDFC ERGO Health Insurance"
CARE_HEALTH = "Care Health Insurance"

VERIFIED_BRANDS: List[Dict[str, Any]] = [
    {
        "brand_name": LIC,
        "official_contacts": {
            "phone": ["1800-227-717", "022-68276827"],
            "email": ["customerservice@licindia.com"],
            "website": "https://www.licindia.in",
            "social_media": {"twitter": "@LICIndiaForever", "facebook": "LICIndiaOfficial"},
        },
    },
    {
        "brand_name": HDFC_LIFE,
        "official_contacts": {
            "phone": ["1860-267-9999"],
            "email": ["customer.service@hdfclife.com"],
            "website": "https://www.hdfclife.com",
        },
    },
    {
        "brand_name": ICICI_PRU,
        "official_contacts": {
            "phone": ["1860-266-7766"],
            "email": ["care@iciciprulife.com"],
            "website": "https://www.iciciprulife.com",
        },
    },
    {
        "brand_name": SBI_LIFE,
        "official_contacts": {
            "phone": ["1800-267-9090", "022-3025-9090"],
            "email": ["care@sbilife.co.in"],
            "website": "https://www.sbilife.co.in",
        },
    },
    {
        "brand_name": MAX_LIFE,
        "official_contacts": {
            "phone": ["1860-120-5577"],
            "email": ["customerservice@maxlifeinsurance.com"],
            "website": "https://www.maxlifeinsurance.com",
        },
    },
    {
        "brand_name": BAJAJ_ALLIANZ,
        "official_contacts": {
            "phone": ["1800-209-7272"],
            "email": ["customercare@bajajallianz.co.in"],
            "website": "https://www.bajajallianzlife.com",
        },
    },
    {
        "brand_name": TATA_AIA,
        "official_contacts": {
            "phone": ["1860-266-9966"],
            "email": ["life.customerservice@tata-aia.com"],
            "website": "https://www.tataaia.com",
        },
    },
    {
        "brand_name": STAR_HEALTH,
        "official_contacts": {
            "phone": ["1800-425-2255", "044-28288800"],
            "email": ["support@starhealth.in"],
            "website": "https://www.starhealth.in",
        },
    },
    {
        "brand_name": HDFC_ERGO,
        "official_contacts": {
            "phone": ["1800-266-0700"],
            "email": ["customersupport@hdfcergo.com"],
            "website": "https://www.hdfcergo.com",
        },
    },
    {
        "brand_name": CARE_HEALTH,
        "official_contacts": {
            "phone": ["1800-102-4488"],
            "email": ["care@careinsurance.com"],
            "website": "https://www.careinsurance.com",
        },
    },
]

# Keys are normalized: separators stripped, country code kept.
TELEMARKETERS: List[Dict[str, Any]] = [
    {"phone_number": "+911800227717", "brand_name": LIC, "is_verified": True},
    {"phone_number": "+911800209090", "brand_name": HDFC_LIFE, "is_verified": True},
    {"phone_number": "+911800258585", "brand_name": ICICI_PRU, "is_verified": True},
    {"phone_number": "+911800220004", "brand_name": SBI_LIFE, "is_verified": True},
    {"phone_number": "+911800266666", "brand_name": MAX_LIFE, "is_verified": True},
    {"phone_number": "+919999999999", "is_scammer": True, "report_count": 47},
    {"phone_number": "+918888888888", "is_scammer": True, "report_count": 32},
    {"phone_number": "+917777777777", "is_scammer": True, "report_count": 28},
    {"phone_number": "+919876543210", "is_dnd": True},
    {"phone_number": "+918765432109", "is_dnd": True},
]


def seed_registry_records(now: Optional[datetime] = None) -> List[PhoneReputationRecord]:
    """Registry seed as core records."""
    now = now or datetime.utcnow()
    records = []
    for entry in TELEMARKETERS:
        records.append(PhoneReputationRecord(
            phone_number=entry["phone_number"],
            is_verified=entry.get("is_verified", False),
            is_scammer=entry.get("is_scammer", False),
            is_dnd=entry.get("is_dnd", False),
            report_count=entry.get("report_count", 0),
            brand_name=entry.get("brand_name"),
            last_verified_at=None if entry.get("is_scammer") else now,
        ))
    return records


def seed_brand_records(now: Optional[datetime] = None) -> List[VerifiedBrandInfo]:
    now = now or datetime.utcnow()
    return [
        VerifiedBrandInfo(
            brand_name=entry["brand_name"],
            official_contacts=entry["official_contacts"],
            verification_status="VERIFIED",
            verified_at=now,
        )
        for entry in VERIFIED_BRANDS
    ]


def seed_phone_registry(db: SQLAlchemySession) -> int:
    """Insert brands and registry rows that are not present yet."""
    added = 0
    try:
        for brand in seed_brand_records():
            exists = db.query(VerifiedBrand).filter(VerifiedBrand.brand_name == brand.brand_name).first()
            if exists is None:
                db.add(VerifiedBrand(
                    brand_name=brand.brand_name,
                    official_contacts=brand.official_contacts,
                    verification_status=brand.verification_status,
                    verified_at=brand.verified_at,
                ))
                added += 1

        for record in seed_registry_records():
            exists = db.query(TelemarketerRegistry).filter(
                TelemarketerRegistry.phone_number == record.phone_number
            ).first()
            if exists is None:
                db.add(TelemarketerRegistry(
                    phone_number=record.phone_number,
                    brand_name=record.brand_name,
                    is_verified=record.is_verified,
                    is_scammer=record.is_scammer,
                    is_dnd=record.is_dnd,
                    report_count=record.report_count,
                    last_verified_at=record.last_verified_at,
                ))
                added += 1
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to seed phone registry: {e}")
        raise

    logger.info(f"Seeded {added} brand and registry rows")
    return added


def seed_patterns(db: SQLAlchemySession) -> int:
    """Replace the stored corpus with the generated seed corpus."""
    patterns = generate_corpus()
    return SqlPatternStore(db).save_patterns(patterns, corpus_version=compute_corpus_version(patterns))


def seed_database(db: SQLAlchemySession, include_patterns: bool = True) -> Dict[str, int]:
    counts = {"registry": seed_phone_registry(db)}
    if include_patterns:
        counts["patterns"] = seed_patterns(db)
    return counts
