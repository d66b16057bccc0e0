"""
Tests for the generated scam pattern corpus.
"""

import re
from collections import Counter

import pytest

from scamshield.core.corpus import (
    CATEGORY_TEMPLATES, CORE_PATTERNS, GENERIC_FRAUD_COUNT, REGIONAL_COUNT,
    generate_corpus, _expand_template
)
from scamshield.core.patterns import (
    InMemoryPatternStore, ScamCategory, ScamPattern, Severity, compute_corpus_version
)
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS


@pytest.fixture(scope="module")
def corpus():
    return generate_corpus()


class TestCorpusGeneration:
    """Size, uniqueness and determinism of the seed corpus."""

    def test_corpus_has_at_least_ten_thousand_entries(self, corpus):
        assert len(corpus) >= 10000

    def test_pattern_texts_are_unique(self, corpus):
        texts = [pattern.pattern_text for pattern in corpus]
        assert len(texts) == len(set(texts))

    def test_pattern_ids_are_sequential(self, corpus):
        assert [pattern.pattern_id for pattern in corpus] == list(range(1, len(corpus) + 1))

    def test_generation_is_deterministic(self, corpus):
        again = generate_corpus()
        assert again == corpus
        assert compute_corpus_version(again) == compute_corpus_version(corpus)

    def test_core_patterns_come_first(self, corpus):
        for pattern, (text, category, severity, _, _) in zip(corpus, CORE_PATTERNS):
            assert pattern.pattern_text == text
            assert pattern.category == category
            assert pattern.severity == severity

    def test_category_counts(self, corpus):
        counts = Counter(pattern.category for pattern in corpus)
        core_counts = Counter(category for _, category, _, _, _ in CORE_PATTERNS)

        for template in CATEGORY_TEMPLATES:
            assert counts[template.category] == template.count + core_counts[template.category]
        assert counts[ScamCategory.INSURANCE_FRAUD] == GENERIC_FRAUD_COUNT
        assert counts[ScamCategory.REGIONAL_SCAM] == REGIONAL_COUNT

    def test_every_category_is_represented(self, corpus):
        assert {pattern.category for pattern in corpus} == set(ScamCategory)

    def test_digital_arrest_is_critical(self, corpus):
        severities = {p.severity for p in corpus if p.category == ScamCategory.DIGITAL_ARREST}
        assert severities == {Severity.CRITICAL}

    def test_no_unfilled_placeholders(self, corpus):
        assert not [p for p in corpus if re.search(r"\{\w+\}", p.pattern_text)]


class TestCorpusKeywords:
    """Keywords must be distinctive enough to leave ordinary text alone."""

    def test_keywords_are_lower_case(self, corpus):
        for pattern in corpus:
            assert all(keyword == keyword.lower() for keyword in pattern.keywords)

    def test_no_bare_stop_word_keywords(self, corpus):
        keywords = {keyword for pattern in corpus for keyword in pattern.keywords}
        assert not keywords & ENGLISH_STOP_WORDS
        assert all(len(keyword) >= 3 for keyword in keywords)

    def test_regexes_compile(self, corpus):
        for regex in {pattern.regex for pattern in corpus if pattern.regex}:
            re.compile(regex, re.IGNORECASE)

    def test_only_core_patterns_carry_keywords_and_regex(self, corpus):
        core = corpus[:len(CORE_PATTERNS)]
        generated = corpus[len(CORE_PATTERNS):]
        assert all(pattern.keywords and pattern.regex for pattern in core)
        assert not [pattern for pattern in generated if pattern.keywords or pattern.regex]

    def test_no_single_word_keyword_for_digital_arrest(self, corpus):
        arrest = next(pattern for pattern in corpus if pattern.category == ScamCategory.DIGITAL_ARREST)
        assert all(" " in keyword for keyword in arrest.keywords)

    @pytest.mark.parametrize("message", [
        "thank you for your help",
        "meeting at 3 pm",
        "see you at dinner tonight",
        "happy birthday, have a great day",
        "the warranty on my phone expires today",
    ])
    def test_benign_text_hits_no_keyword(self, corpus, message):
        keywords = {keyword for pattern in corpus for keyword in pattern.keywords}
        assert not [keyword for keyword in keywords if keyword in message]


class TestTemplateExpansion:

    def test_expansion_covers_product_of_placeholders(self):
        bodies = _expand_template("Your {policyType} policy has been {action}.")
        assert len(bodies) == 7 * 6
        assert "Your health policy has been suspended." in bodies

    def test_template_without_placeholders(self):
        assert _expand_template("Plain text") == ["Plain text"]


class TestPatternModel:

    def test_keywords_normalized(self):
        pattern = ScamPattern(1, "x", ScamCategory.FAKE_CASHBACK, Severity.LOW, keywords=("CashBack", ""))
        assert pattern.keywords == ("cashback",)

    def test_patterns_are_immutable(self):
        pattern = ScamPattern(1, "x", ScamCategory.FAKE_CASHBACK, Severity.LOW)
        with pytest.raises(AttributeError):
            pattern.severity = Severity.HIGH

    def test_severity_points(self):
        assert [s.points for s in Severity] == [5, 15, 25, 40]
        assert Severity.CRITICAL.is_high_risk and Severity.HIGH.is_high_risk
        assert not Severity.MEDIUM.is_high_risk

    def test_ordered_categories_follow_declaration(self):
        ordered = ScamCategory.ordered([ScamCategory.KYC_PHISHING, ScamCategory.DIGITAL_ARREST,
                                        ScamCategory.KYC_PHISHING])
        assert ordered == (ScamCategory.DIGITAL_ARREST, ScamCategory.KYC_PHISHING)

    def test_store_version_changes_with_content(self):
        a = InMemoryPatternStore([ScamPattern(1, "a", ScamCategory.FAKE_CASHBACK, Severity.LOW)])
        b = InMemoryPatternStore([ScamPattern(1, "b", ScamCategory.FAKE_CASHBACK, Severity.LOW)])
        assert a.corpus_version() != b.corpus_version()
        assert len(a) == 1
