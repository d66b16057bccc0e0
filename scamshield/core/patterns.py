"""
Scam pattern corpus model.

A corpus is an immutable snapshot of ``ScamPattern`` entries. Stores hand out
the snapshot together with a version string so that indexes built over it can
be cached and invalidated when the corpus changes.
"""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Protocol, Sequence, Tuple


class ScamCategory(Enum):
    """Scam archetypes. Declaration order is the warning priority order."""
    DIGITAL_ARREST = "DIGITAL_ARREST"
    POLICY_SUSPENSION = "POLICY_SUSPENSION"
    FAKE_CASHBACK = "FAKE_CASHBACK"
    FAKE_DISCOUNT = "FAKE_DISCOUNT"
    KYC_PHISHING = "KYC_PHISHING"
    ADVANCE_FEE_FRAUD = "ADVANCE_FEE_FRAUD"
    FAKE_REGULATOR = "FAKE_REGULATOR"
    MALWARE_LINK = "MALWARE_LINK"
    PHISHING_LINK = "PHISHING_LINK"
    FAKE_CLAIM_REJECTION = "FAKE_CLAIM_REJECTION"
    AGENT_IMPERSONATION = "AGENT_IMPERSONATION"
    FAKE_OVERDUE = "FAKE_OVERDUE"
    DATA_HARVESTING = "DATA_HARVESTING"
    FAKE_OMBUDSMAN = "FAKE_OMBUDSMAN"
    FAKE_CALL_CENTER = "FAKE_CALL_CENTER"
    INSURANCE_FRAUD = "INSURANCE_FRAUD"
    REGIONAL_SCAM = "REGIONAL_SCAM"

    @classmethod
    def ordered(cls, categories: Iterable["ScamCategory"]) -> Tuple["ScamCategory", ...]:
        """Return the distinct categories in declaration order."""
        present = set(categories)
        return tuple(category for category in cls if category in present)


class Severity(Enum):
    """Pattern severity with the risk points each matched pattern contributes."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def points(self) -> int:
        return _SEVERITY_POINTS[self]

    @property
    def is_high_risk(self) -> bool:
        return self in (Severity.HIGH, Severity.CRITICAL)


_SEVERITY_POINTS = {
    Severity.LOW: 5,
    Severity.MEDIUM: 15,
    Severity.HIGH: 25,
    Severity.CRITICAL: 40,
}


@dataclass(frozen=True)
class ScamPattern:
    """One known fraud message template."""
    pattern_id: int
    pattern_text: str
    category: ScamCategory
    severity: Severity
    keywords: Tuple[str, ...] = field(default_factory=tuple)
    regex: Optional[str] = None

    def __post_init__(self):
        # Keywords are matched against lower-cased messages.
        object.__setattr__(self, "keywords", tuple(k.lower() for k in self.keywords if k))


class PatternStore(Protocol):
    """Read-only source of the scam pattern corpus."""

    def load_patterns(self) -> Sequence[ScamPattern]:
        ...

    def corpus_version(self) -> str:
        ...


def compute_corpus_version(patterns: Iterable[ScamPattern]) -> str:
    """Content hash identifying a corpus snapshot."""
    digest = hashlib.sha256()
    for pattern in patterns:
        digest.update(pattern.pattern_text.encode("utf-8"))
        digest.update(pattern.category.value.encode("utf-8"))
        digest.update(pattern.severity.value.encode("utf-8"))
        digest.update("|".join(pattern.keywords).encode("utf-8"))
        digest.update((pattern.regex or "").encode("utf-8"))
    return digest.hexdigest()[:16]


class InMemoryPatternStore:
    """Pattern store over an in-process corpus snapshot."""

    def __init__(self, patterns: Iterable[ScamPattern], version: Optional[str] = None):
        self._patterns = tuple(patterns)
        self._version = version or compute_corpus_version(self._patterns)

    def load_patterns(self) -> Sequence[ScamPattern]:
        return self._patterns

    def corpus_version(self) -> str:
        return self._version

    def __len__(self) -> int:
        return len(self._patterns)
