"""
Human-readable warnings and recommendations for an analysis.
"""

from typing import Iterable, List, Tuple

from scamshield.core.patterns import ScamCategory

# Rows are evaluated top to bottom; a row fires once if any of its categories matched.
CATEGORY_WARNINGS: Tuple[Tuple[Tuple[ScamCategory, ...], Tuple[str, ...]], ...] = (
    ((ScamCategory.DIGITAL_ARREST,), (
        "CRITICAL: This appears to be a digital arrest scam. Real law enforcement never conducts arrests over video calls.",
        "Do NOT transfer any money or share personal information.",
        "Disconnect the call immediately and report to cybercrime.gov.in",
    )),
    ((ScamCategory.POLICY_SUSPENSION,), (
        "Suspicious policy suspension claim detected. Verify directly with your insurer using official contact numbers.",
    )),
    ((ScamCategory.FAKE_CASHBACK, ScamCategory.FAKE_DISCOUNT), (
        "Potential fake offer detected. Insurance companies rarely offer unsolicited cashbacks or extreme discounts.",
    )),
    ((ScamCategory.KYC_PHISHING,), (
        "KYC phishing attempt detected. Never share Aadhaar, PAN, or OTP via SMS or unofficial channels.",
    )),
    ((ScamCategory.ADVANCE_FEE_FRAUD,), (
        "Advance fee fraud detected. Legitimate insurance claims never require upfront processing fees.",
    )),
    ((ScamCategory.FAKE_REGULATOR,), (
        "Fake regulator impersonation detected. IRDAI never contacts policyholders directly via SMS for investigations.",
    )),
    ((ScamCategory.MALWARE_LINK, ScamCategory.PHISHING_LINK), (
        "Suspicious link detected. Do NOT click on links in unsolicited messages.",
    )),
)

GENERIC_WARNING = "This message contains suspicious patterns commonly used in insurance scams."

HIGH_RISK_RECOMMENDATIONS = (
    "HIGH RISK: Do not respond to this message or take any action requested.",
    "Contact your insurance company directly using the official number on your policy document.",
    "Report this scam to 1930 (National Cyber Crime Helpline) and TRAI Chakshu.",
    "Alert family members, especially elderly relatives, about this scam pattern.",
)

MEDIUM_RISK_RECOMMENDATIONS = (
    "MEDIUM RISK: Verify the authenticity of this message before taking any action.",
    "Call your insurer using official contact numbers to confirm.",
    "Do not click on any links or share personal information.",
)

LOW_RISK_RECOMMENDATIONS = (
    "LOW RISK: This message may be legitimate, but exercise caution.",
    "Verify sender identity through official channels.",
    "Check for spelling errors, unofficial email addresses, or suspicious links.",
)

MINIMAL_RISK_RECOMMENDATIONS = (
    "This message appears to be low risk.",
    "Always verify important insurance communications through official channels.",
)

CATEGORY_RECOMMENDATIONS = (
    (ScamCategory.DIGITAL_ARREST, (
        "Learn more about digital arrest scams at cybercrime.gov.in",
        "Real police/CBI never conduct video call arrests or demand money transfers.",
    )),
    (ScamCategory.KYC_PHISHING, (
        "KYC updates should only be done through official insurer portals or branches.",
        "Never share OTP, Aadhaar, or PAN details via SMS, email, or phone.",
    )),
)

# (exclusive lower bound, bundle), highest tier first
RISK_TIERS = (
    (70, HIGH_RISK_RECOMMENDATIONS),
    (40, MEDIUM_RISK_RECOMMENDATIONS),
    (20, LOW_RISK_RECOMMENDATIONS),
)


class Explainer:
    """Maps matched categories and a risk score to warnings and recommendations."""

    def explain(self, categories: Iterable[ScamCategory], score: int) -> Tuple[List[str], List[str]]:
        matched = set(categories)
        return self.warnings(matched), self.recommendations(matched, score)

    def warnings(self, categories: Iterable[ScamCategory]) -> List[str]:
        matched = set(categories)
        warnings: List[str] = []
        for row_categories, row_warnings in CATEGORY_WARNINGS:
            if matched.intersection(row_categories):
                warnings.extend(row_warnings)

        if not warnings and matched:
            warnings.append(GENERIC_WARNING)
        return warnings

    def recommendations(self, categories: Iterable[ScamCategory], score: int) -> List[str]:
        matched = set(categories)
        recommendations = list(MINIMAL_RISK_RECOMMENDATIONS)
        for lower_bound, bundle in RISK_TIERS:
            if score > lower_bound:
                recommendations = list(bundle)
                break

        for category, extras in CATEGORY_RECOMMENDATIONS:
            if category in matched:
                recommendations.extend(extras)
        return recommendations
