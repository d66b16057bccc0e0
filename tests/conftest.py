"""
Pytest configuration and fixtures for testing.
"""

import pytest
import os
import sys
from datetime import date
from pathlib import Path
from sqlalchemy.orm import sessionmaker

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment before importing project modules
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.pop("NOTIFICATION_GATEWAY_URL", None)

from config.test_settings import test_settings
from scamshield.core.corpus import default_pattern_store
from scamshield.core.matcher import PatternMatcher
from scamshield.core.patterns import InMemoryPatternStore, ScamCategory, ScamPattern, Severity
from scamshield.core.phone_reputation import InMemoryPhoneRegistry
from scamshield.core.scam_detection import ScamDetectionEngine
from scamshield.database.connection import build_engine, create_tables, drop_tables
from scamshield.database.seed import seed_brand_records, seed_registry_records


SAMPLE_PATTERNS = [
    ScamPattern(
        pattern_id=1,
        pattern_text="Your policy has been suspended",
        category=ScamCategory.POLICY_SUSPENSION,
        severity=Severity.HIGH,
        keywords=("suspended",),
        regex=r".*(suspend|block).*(policy).*",
    ),
    ScamPattern(
        pattern_id=2,
        pattern_text="Congratulations! You won cashback",
        category=ScamCategory.FAKE_CASHBACK,
        severity=Severity.HIGH,
        keywords=("congratulations", "cashback"),
    ),
    ScamPattern(
        pattern_id=3,
        pattern_text="Digital arrest warrant issued",
        category=ScamCategory.DIGITAL_ARREST,
        severity=Severity.CRITICAL,
        keywords=("arrest", "warrant"),
    ),
    ScamPattern(
        pattern_id=4,
        pattern_text="Update your KYC by sharing Aadhaar details",
        category=ScamCategory.KYC_PHISHING,
        severity=Severity.HIGH,
        keywords=("kyc", "aadhaar"),
    ),
    ScamPattern(
        pattern_id=5,
        pattern_text="Call our helpline for policy assistance",
        category=ScamCategory.FAKE_CALL_CENTER,
        severity=Severity.MEDIUM,
        keywords=("helpline",),
    ),
]


class FakeClock:
    """Settable replacement for ``date.today``."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def sample_store():
    return InMemoryPatternStore(SAMPLE_PATTERNS)


@pytest.fixture
def sample_matcher(sample_store):
    return PatternMatcher(sample_store)


@pytest.fixture
def sample_engine(sample_matcher):
    return ScamDetectionEngine(sample_matcher)


@pytest.fixture(scope="session")
def corpus_store():
    """The full generated corpus."""
    return default_pattern_store()


@pytest.fixture(scope="session")
def corpus_engine(corpus_store):
    """Detection engine over the full corpus with its index already built."""
    matcher = PatternMatcher(corpus_store)
    matcher.warm_up()
    return ScamDetectionEngine(matcher)


@pytest.fixture
def phone_registry():
    return InMemoryPhoneRegistry(seed_registry_records(), seed_brand_records())


@pytest.fixture
def clock():
    return FakeClock(date(2026, 3, 14))


@pytest.fixture(scope="function")
def test_engine():
    """In-memory database engine with all tables."""
    engine = build_engine(test_settings.database.url, echo=test_settings.database.echo)
    create_tables(bind=engine)

    yield engine

    drop_tables(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db(test_engine):
    """Create test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()
