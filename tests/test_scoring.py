"""
Tests for risk scoring and confidence estimation.
"""

import pytest

from scamshield.core.patterns import ScamCategory, ScamPattern, Severity
from scamshield.core.scoring import ConfidenceEstimator, RiskScorer, is_scam


def _patterns(*severities):
    return [
        ScamPattern(i, f"pattern {i}", ScamCategory.FAKE_CASHBACK, severity)
        for i, severity in enumerate(severities, start=1)
    ]


SUSPENSION_MESSAGE = "urgent: your policy suspended. pay rs 5000 now. click here immediately."


class TestRiskScorer:

    def setup_method(self):
        self.scorer = RiskScorer()

    def test_no_matches_no_signals(self):
        assert self.scorer.score([], "see you at dinner") == 0

    def test_severity_points(self):
        patterns = _patterns(Severity.LOW, Severity.MEDIUM, Severity.HIGH)
        assert self.scorer.score(patterns, "") == 5 + 15 + 25

    def test_worked_example(self):
        patterns = _patterns(Severity.HIGH)
        breakdown = self.scorer.breakdown(patterns, SUSPENSION_MESSAGE)

        assert breakdown.severity_points == 25
        assert breakdown.urgency_points == 15  # urgent, now, immediate
        assert breakdown.financial_points == 6  # rs, pay
        assert breakdown.link_points == 15
        assert breakdown.phone_points == 0
        assert breakdown.volume_points == 0
        assert breakdown.score == 61

    def test_terms_counted_once(self):
        breakdown = self.scorer.breakdown([], "urgent urgent urgent pay pay")
        assert breakdown.urgency_points == 5
        assert breakdown.financial_points == 3

    def test_terms_match_anywhere_in_text(self):
        breakdown = self.scorer.breakdown([], "prepayments are known")
        # "prepayments" hits pay and payment, "known" hits now
        assert breakdown.financial_points == 6
        assert breakdown.urgency_points == 5

    def test_substring_hits_inside_longer_words(self):
        breakdown = self.scorer.breakdown([], "breakfast with yours truly")
        assert breakdown.urgency_points == 5  # fast
        assert breakdown.financial_points == 3  # rs

    @pytest.mark.parametrize("text", [
        "visit https://claim.example.in",
        "visit http://claim.example.in",
        "bit.ly/abc",
        "tinyurl.com/abc",
        "download the app",
        "click here",
    ])
    def test_link_signal(self, text):
        assert self.scorer.breakdown([], text).link_points == 15

    @pytest.mark.parametrize("text", [
        "call +919876543210",
        "call 91 9876543210",
        "call 1800-123-4567",
    ])
    def test_phone_signal(self, text):
        assert self.scorer.breakdown([], text).phone_points == 10

    def test_volume_bonus_after_three_matches(self):
        assert self.scorer.breakdown(_patterns(*[Severity.LOW] * 3), "").volume_points == 0
        assert self.scorer.breakdown(_patterns(*[Severity.LOW] * 5), "").volume_points == 10

    def test_score_clamped(self):
        patterns = _patterns(*[Severity.CRITICAL] * 5)
        breakdown = self.scorer.breakdown(patterns, SUSPENSION_MESSAGE)
        assert breakdown.raw_total > 100
        assert breakdown.score == 100
        assert breakdown.to_dict()["score"] == 100

    def test_duplicate_patterns_count_once(self):
        pattern = _patterns(Severity.HIGH)[0]
        assert self.scorer.score([pattern, pattern], "") == 25


class TestScamThreshold:

    def test_strictly_above_threshold(self):
        assert not is_scam(70)
        assert is_scam(71)
        assert not is_scam(0)
        assert is_scam(100)

    def test_custom_threshold(self):
        assert is_scam(51, threshold=50)
        assert not is_scam(50, threshold=50)


class TestConfidenceEstimator:

    def setup_method(self):
        self.estimator = ConfidenceEstimator()

    def test_base_confidence(self):
        assert self.estimator.estimate([], "") == 50

    def test_match_contribution_capped(self):
        assert self.estimator.estimate(_patterns(Severity.LOW), "") == 60
        assert self.estimator.estimate(_patterns(*[Severity.LOW] * 6), "") == 80

    def test_high_severity_bonus(self):
        patterns = _patterns(Severity.HIGH, Severity.CRITICAL, Severity.MEDIUM)
        assert self.estimator.estimate(patterns, "") == 50 + 30 + 10

    def test_indicator_bonus(self):
        # click here, urgent, suspended
        assert self.estimator.estimate(_patterns(Severity.HIGH), SUSPENSION_MESSAGE) == 50 + 10 + 5 + 9

    def test_indicators_match_as_substrings(self):
        # "panel" carries pan, "feedback" carries fee
        assert self.estimator.estimate([], "the panel wants feedback") == 50 + 6

    def test_indicator_bonus_capped(self):
        text = "click here urgent suspended blocked arrest police pay now transfer fee penalty kyc"
        assert self.estimator.estimate([], text) == 70

    def test_clamped_to_hundred(self):
        text = "click here urgent suspended blocked arrest police pay now transfer fee penalty kyc"
        patterns = _patterns(*[Severity.CRITICAL] * 8)
        assert self.estimator.estimate(patterns, text) == 100
