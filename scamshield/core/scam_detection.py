"""
Scam detection engine for analyzing messages and calculating risk scores.
"""

import time
from typing import Optional

from scamshield.core.explainer import Explainer
from scamshield.core.logging import get_logger
from scamshield.core.matcher import PatternMatcher
from scamshield.core.patterns import PatternStore, ScamCategory
from scamshield.core.scoring import ConfidenceEstimator, RiskScorer, SCAM_THRESHOLD, is_scam
from scamshield.core.text_processing import normalize_message
from scamshield.schemas import AnalysisResult

logger = get_logger(__name__)


class ScamDetectionEngine:
    """
    Heuristic scam analysis pipeline.

    Runs matcher, scorer, confidence estimator and explainer in that order.
    The pipeline holds no per-request state: the same message over the same
    corpus snapshot always produces the same result.
    """

    def __init__(
        self,
        matcher: PatternMatcher,
        scorer: Optional[RiskScorer] = None,
        confidence: Optional[ConfidenceEstimator] = None,
        explainer: Optional[Explainer] = None,
        scam_threshold: int = SCAM_THRESHOLD
    ):
        self.matcher = matcher
        self.scorer = scorer or RiskScorer()
        self.confidence = confidence or ConfidenceEstimator()
        self.explainer = explainer or Explainer()
        self.scam_threshold = scam_threshold

    @classmethod
    def from_store(cls, store: PatternStore, **matcher_options) -> "ScamDetectionEngine":
        return cls(PatternMatcher(store, **matcher_options))

    def analyze(self, message: str) -> AnalysisResult:
        """
        Analyze a single message.

        Args:
            message: Raw message text (validated by the caller)

        Returns:
            AnalysisResult: Score, classification, explanation and diagnostics
        """
        start_time = time.perf_counter()
        normalized = normalize_message(message)

        patterns = self.matcher.match(normalized)
        risk_score = self.scorer.score(patterns, normalized)
        confidence = self.confidence.estimate(patterns, normalized)

        categories = ScamCategory.ordered(pattern.category for pattern in patterns)
        warnings, recommendations = self.explainer.explain(categories, risk_score)

        processing_time_ms = int((time.perf_counter() - start_time) * 1000)
        logger.debug(
            "Message analyzed",
            extra={
                "risk_score": risk_score,
                "match_count": len(patterns),
                "categories": [c.value for c in categories],
                "processing_time_ms": processing_time_ms,
            }
        )

        return AnalysisResult(
            risk_score=risk_score,
            is_scam=is_scam(risk_score, self.scam_threshold),
            matched_categories=[category.value for category in categories],
            warnings=warnings,
            recommendations=recommendations,
            confidence=confidence,
            match_count=len(patterns),
            processing_time_ms=processing_time_ms,
        )
