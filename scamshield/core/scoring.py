"""
Risk scoring and confidence estimation.

Both models are pure functions of the matched pattern set and the normalized
message text, so repeated analysis of the same message over the same corpus
always yields the same numbers.
"""

import re
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable

from scamshield.core.patterns import ScamPattern
from scamshield.core.text_processing import count_terms_present

MAX_SCORE = 100
SCAM_THRESHOLD = 70

URGENCY_TERMS = ("urgent", "immediate", "now", "today", "asap", "hurry", "quick", "fast")
FINANCIAL_TERMS = ("rs", "rupees", "pay", "payment", "transfer", "amount", "fee", "charge")
SCAM_INDICATORS = (
    "click here", "urgent", "suspended", "blocked", "arrest", "police", "pay now",
    "transfer", "fee", "penalty", "kyc", "aadhaar", "pan",
)

URGENCY_POINTS = 5
FINANCIAL_POINTS = 3
LINK_POINTS = 15
PHONE_POINTS = 10
VOLUME_POINTS = 5
VOLUME_FREE_MATCHES = 3

LINK_RE = re.compile(r"https?://|bit\.ly|tinyurl|click here|download")
PHONE_RE = re.compile(r"\+?91[-\s]?[6-9]\d{9}|1800[-\s]?\d{3}[-\s]?\d{4}")


def is_scam(score: int, threshold: int = SCAM_THRESHOLD) -> bool:
    """Scam classification is strictly above the threshold."""
    return score > threshold


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-signal contributions behind a risk score."""
    severity_points: int
    urgency_points: int
    financial_points: int
    link_points: int
    phone_points: int
    volume_points: int

    @property
    def raw_total(self) -> int:
        return (
            self.severity_points + self.urgency_points + self.financial_points
            + self.link_points + self.phone_points + self.volume_points
        )

    @property
    def score(self) -> int:
        return min(self.raw_total, MAX_SCORE)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["score"] = self.score
        return data


class RiskScorer:
    """Severity points plus lexical bonuses, clamped to 0..100."""

    def breakdown(self, patterns: Iterable[ScamPattern], normalized_message: str) -> ScoreBreakdown:
        matched = set(patterns)
        text = normalized_message or ""

        extra_matches = len(matched) - VOLUME_FREE_MATCHES
        return ScoreBreakdown(
            severity_points=sum(pattern.severity.points for pattern in matched),
            urgency_points=URGENCY_POINTS * count_terms_present(URGENCY_TERMS, text),
            financial_points=FINANCIAL_POINTS * count_terms_present(FINANCIAL_TERMS, text),
            link_points=LINK_POINTS if LINK_RE.search(text) else 0,
            phone_points=PHONE_POINTS if PHONE_RE.search(text) else 0,
            volume_points=VOLUME_POINTS * extra_matches if extra_matches > 0 else 0,
        )

    def score(self, patterns: Iterable[ScamPattern], normalized_message: str) -> int:
        return self.breakdown(patterns, normalized_message).score


class ConfidenceEstimator:
    """How sure the scorer is, from match volume, severity and explicit scam indicators."""

    BASE = 50
    MATCH_POINTS = 10
    MATCH_CAP = 30
    HIGH_SEVERITY_POINTS = 5
    INDICATOR_POINTS = 3
    INDICATOR_CAP = 20

    def estimate(self, patterns: Iterable[ScamPattern], normalized_message: str) -> int:
        matched = set(patterns)
        indicators = count_terms_present(SCAM_INDICATORS, normalized_message or "")

        confidence = self.BASE
        confidence += min(len(matched) * self.MATCH_POINTS, self.MATCH_CAP)
        confidence += self.HIGH_SEVERITY_POINTS * sum(1 for p in matched if p.severity.is_high_risk)
        confidence += min(indicators * self.INDICATOR_POINTS, self.INDICATOR_CAP)
        return min(confidence, MAX_SCORE)
