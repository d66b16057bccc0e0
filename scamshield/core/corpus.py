"""
Seed corpus of insurance scam patterns.

Category templates are expanded with placeholder values, greeting prefixes and
sign-off suffixes into a large set of distinct pattern texts. Expansion walks
the Cartesian product in a fixed order, so the same code always yields the same
corpus (and therefore the same corpus version).
"""

import itertools
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from scamshield.core.logging import get_logger
from scamshield.core.patterns import (
    InMemoryPatternStore, ScamCategory, ScamPattern, Severity
)

logger = get_logger(__name__)

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

PLACEHOLDERS: Dict[str, Tuple[str, ...]] = {
    "policyType": ("health", "life", "term", "motor", "travel", "home", "personal accident"),
    "action": ("suspended", "blocked", "deactivated", "cancelled", "terminated", "frozen"),
    "urgency": ("URGENT", "IMMEDIATE", "CRITICAL", "ALERT", "WARNING"),
    "link": ("here", "this link", "the link below", "bit.ly/xxxxx", "tinyurl.com/xxxxx"),
    "number": ("12345", "67890", "ABC123", "XYZ789", "001122"),
    "amount": ("5000", "10000", "15000", "20000", "25000", "50000", "1,00,000", "2,00,000"),
    "time": ("24", "48", "72", "12", "6"),
    "percent": ("50", "60", "70", "80", "90", "95"),
    "document": ("Aadhaar", "PAN", "Passport", "Driving License", "Voter ID"),
    "name": ("Rajesh Kumar", "Amit Sharma", "Priya Singh", "Suresh Patel", "Anjali Verma"),
    "phone": ("+91-9876543210", "+91-8765432109", "1800-XXX-XXXX", "022-XXXXXXXX"),
    "agency": ("CBI", "ED", "Police", "Cyber Crime", "Income Tax"),
    "code": ("SAVE50", "DISCOUNT70", "OFFER80", "SPECIAL90"),
    "service": ("health checkup", "medical test", "doctor consultation", "lab test", "screening"),
    "fee": ("2000", "3000", "5000", "7500", "10000"),
}

PREFIXES = (
    "", "Dear customer, ", "Dear policyholder, ", "Attention: ",
    "Sir/Madam, ", "Important: ", "Reminder: ", "Notice: ",
)

SUFFIXES = (
    "", " Reply STOP to opt out.", " Ignore if already done.", " - Customer Support",
    " Helpdesk open 24x7.", " Do not share this message.", " T&C apply.", " Regards, Policy Services",
)

REGIONAL_PREFIXES = (
    "", "Dhyan dein: ", "Jaruri soochna: ", "Namaste, ",
    "Sir ji, ", "Madam ji, ", "Suchna: ", "Alert: ",
)

REGIONAL_SUFFIXES = (
    "", " - Bima Sahayata", " Kripya turant karein.", " Dhanyavaad.",
    " Jaldi karein.", " Yeh aakhri chetavani hai.", " Helpline se sampark karein.", " Samay seema 24 ghante.",
)


@dataclass(frozen=True)
class CategoryTemplate:
    """Templates for one scam archetype, expanded into corpus variants."""
    category: ScamCategory
    severity: Severity
    count: int
    templates: Tuple[str, ...]


CATEGORY_TEMPLATES: Tuple[CategoryTemplate, ...] = (
    CategoryTemplate(
        category=ScamCategory.POLICY_SUSPENSION,
        severity=Severity.HIGH,
        count=500,
        templates=(
            "Your {policyType} policy has been {action}. {urgency} to reactivate",
            "Policy #{number} is {action}. Click {link} to restore",
            "{urgency}: Your insurance is {action}. Pay Rs {amount} penalty",
            "Policy {action} due to non-payment. Reactivate within {time} hours",
            "Your {policyType} coverage is {action}. Immediate action required",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.FAKE_CASHBACK,
        severity=Severity.HIGH,
        count=500,
        templates=(
            "Congratulations! You won Rs {amount} cashback on {policyType} insurance. Claim now",
            "Lucky draw winner! Rs {amount} reward on your insurance. Click to claim",
            "Special offer: {percent}% cashback on premium payment. Limited time",
            "You are eligible for Rs {amount} refund. Verify details to receive",
            "Bonus alert: Rs {amount} credited to your policy. Confirm to activate",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.FAKE_CLAIM_REJECTION,
        severity=Severity.HIGH,
        count=500,
        templates=(
            "URGENT: Claim #{number} rejected. Pay Rs {amount} to appeal",
            "Your claim of Rs {amount} is denied. Processing fee required",
            "Claim rejection notice. Pay {amount} to resubmit application",
            "Insurance claim failed. Rs {amount} needed for manual review",
            "Claim #{number} under review. Expedite with Rs {amount} fee",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.KYC_PHISHING,
        severity=Severity.HIGH,
        count=800,
        templates=(
            "KYC update mandatory for {policyType} policy. Share {document} details",
            "Verify your identity: Upload {document} for policy continuation",
            "IRDAI compliance: Update {document} within {time} hours",
            "Policy verification pending. Submit {document} and OTP",
            "KYC expired. Provide {document} to avoid policy lapse",
            "eKYC required: Share {document} number and photo",
            "Regulatory update: {document} verification needed urgently",
            "Complete KYC: Send {document} copy and selfie",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.AGENT_IMPERSONATION,
        severity=Severity.MEDIUM,
        count=400,
        templates=(
            "Your agent {name} has been replaced. New agent: {phone}",
            "Agent transfer notice: Contact {name} at {phone} for service",
            "Policy servicing agent changed to {name}. Call {phone}",
            "New insurance advisor assigned: {name}, {phone}",
            "Agent update: {name} will handle your policy. Reach at {phone}",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.FAKE_REGULATOR,
        severity=Severity.HIGH,
        count=600,
        templates=(
            "IRDAI notice: Policy #{number} under investigation. Respond in {time} hours",
            "Regulatory alert: Your {policyType} policy flagged for review",
            "IRDAI compliance: Submit documents within {time} hours or face penalty",
            "Insurance authority warning: Policy #{number} may be cancelled",
            "Regulator notice: Suspicious activity detected on policy #{number}",
            "IRDAI audit: Your {policyType} claim is being investigated",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.DIGITAL_ARREST,
        severity=Severity.CRITICAL,
        count=1000,
        templates=(
            "Arrest warrant issued for insurance fraud. Join video call: {link}",
            "{agency} officer: Your policy linked to crime. Video verification required",
            "Legal notice from {agency}: Appear on video call or face arrest",
            "CBI investigation: Insurance fraud case #{number}. Call immediately",
            "{agency} warrant: Money laundering via insurance. Do not disconnect",
            "Court order: Video hearing for policy fraud. Join {link}",
            "Cyber crime: Your insurance used in scam case #{number}. Immediate video call",
            "ED notice: Insurance fraud investigation. Video statement required",
            "Supreme Court: Policy under scanner. Video appearance mandatory",
            "Interpol alert: Insurance fraud. Video verification or arrest",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.FAKE_DISCOUNT,
        severity=Severity.MEDIUM,
        count=400,
        templates=(
            "Get {percent}% off on {policyType} insurance. Limited offer. Buy now",
            "Flash sale: {percent}% discount on insurance. Ends in {time} hours",
            "Exclusive deal: Save Rs {amount} on premium. Apply code {code}",
            "Special discount: {percent}% off for first {number} customers",
            "Mega sale: {policyType} cover at {percent}% discount. Hurry",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.FAKE_OVERDUE,
        severity=Severity.HIGH,
        count=500,
        templates=(
            "Premium overdue: Rs {amount}. Pay now to avoid legal action",
            "Policy lapsed: {time} days overdue. Credit score at risk",
            "Payment pending: Rs {amount}. Court notice will be sent",
            "Overdue alert: Pay Rs {amount} or face CIBIL impact",
            "Final notice: Premium due. Legal proceedings initiated",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.DATA_HARVESTING,
        severity=Severity.MEDIUM,
        count=600,
        templates=(
            "Free {service} for policyholders. Share policy #{number}",
            "Complimentary {service}: Verify with policy details",
            "Exclusive benefit: Free {service}. Provide policy number",
            "Policyholder privilege: {service} at no cost. Register now",
            "Special offer: Free {service}. Confirm policy details",
            "Health benefit: Free {service} for insured. Share details",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.ADVANCE_FEE_FRAUD,
        severity=Severity.HIGH,
        count=500,
        templates=(
            "Claim approved: Rs {amount}. Pay {percent}% processing fee",
            "Your claim of Rs {amount} sanctioned. Transfer Rs {fee} to receive",
            "Claim settlement: Rs {amount}. Service charge: Rs {fee}",
            "Congratulations! Claim passed. Pay Rs {fee} for disbursement",
            "Claim #{number} cleared. Processing fee Rs {fee} required",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.FAKE_OMBUDSMAN,
        severity=Severity.HIGH,
        count=300,
        templates=(
            "Ombudsman office: Complaint #{number} escalated. Pay Rs {amount}",
            "Insurance grievance: Pay Rs {amount} to expedite resolution",
            "Ombudsman hearing: Rs {amount} fee for priority processing",
            "Complaint registered: Pay Rs {amount} for fast-track",
            "Grievance cell: Rs {amount} needed for case review",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.MALWARE_LINK,
        severity=Severity.HIGH,
        count=400,
        templates=(
            "Policy documents expiring. Download from: {link}",
            "Updated policy certificate available. Click: {link}",
            "New policy terms. View document: {link}",
            "Policy renewal document ready. Download: {link}",
            "Important: Policy amendment. Access: {link}",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.PHISHING_LINK,
        severity=Severity.HIGH,
        count=800,
        templates=(
            "Verify your policy: {link}. Login required",
            "Policy portal update: Reset password at {link}",
            "Secure your account: Update credentials at {link}",
            "Policy dashboard: Login at {link} to view details",
            "Account verification: Click {link} and enter OTP",
            "Policy renewal: Pay online at {link}",
            "Claim status: Check at {link} with policy number",
            "Update contact details: Visit {link}",
        ),
    ),
    CategoryTemplate(
        category=ScamCategory.FAKE_CALL_CENTER,
        severity=Severity.MEDIUM,
        count=500,
        templates=(
            "Call our helpline {phone} for policy assistance",
            "Customer care: {phone}. Available 24/7 for claims",
            "Policy support: Contact {phone} for queries",
            "Claim helpdesk: {phone}. Immediate assistance",
            "Insurance helpline: {phone}. Call now for benefits",
        ),
    ),
)

GENERIC_FRAUD_PHRASES = (
    "insurance fraud", "policy scam", "fake claim", "premium theft",
    "agent fraud", "mis-selling", "forged documents", "identity theft",
    "claim manipulation", "premium diversion", "ghost policy", "churning",
)

GENERIC_FRAUD_TEMPLATES = (
    "Warning: Potential {phrase} detected. Verify immediately.",
    "Alert: Your account is flagged for {phrase}. Respond today.",
    "Notice: A {phrase} case has been opened against your policy.",
    "Action required: {phrase} reported on your insurance.",
)

REGIONAL_PHRASES = (
    "aapka policy suspend ho gaya hai",
    "turant payment karein",
    "claim reject ho gaya",
    "KYC update zaroori hai",
    "police case darj hai",
    "video call par aaiye",
    "arrest warrant jari hua",
)

REGIONAL_TEMPLATES = (
    "{phrase}",
    "{phrase}, turant sampark karein",
    "Sir, {phrase}",
    "{phrase}. Abhi call karein",
)

GENERIC_FRAUD_COUNT = 1200
REGIONAL_COUNT = 1000

CORE_PATTERNS: Tuple[Tuple[str, ScamCategory, Severity, Tuple[str, ...], str], ...] = (
    (
        "Your policy has been suspended. Click here to reactivate immediately or pay penalty",
        ScamCategory.POLICY_SUSPENSION, Severity.HIGH,
        ("suspended", "reactivate", "penalty", "click here"),
        r".*(suspend|block|deactivat).*(policy|insurance).*(click|link|reactivat).*",
    ),
    (
        "Congratulations! You have won a cashback of Rs 50,000 on your insurance premium. Claim now",
        ScamCategory.FAKE_CASHBACK, Severity.HIGH,
        ("congratulations", "you have won", "cashback", "claim now"),
        r".*(congratulation|won|winner).*(cashback|prize|reward).*(claim|collect).*",
    ),
    (
        "URGENT: Your claim has been rejected. Pay Rs 5,000 processing fee to appeal",
        ScamCategory.FAKE_CLAIM_REJECTION, Severity.HIGH,
        ("claim has been rejected", "processing fee", "appeal"),
        r".*(urgent|immediate).*(claim|policy).*(reject|denied).*(fee|payment).*",
    ),
    (
        "KYC update required for your insurance policy. Share Aadhaar and PAN details",
        ScamCategory.KYC_PHISHING, Severity.HIGH,
        ("kyc", "update required", "aadhaar", "pan details"),
        r".*(kyc|verification).*(update|required).*(aadhaar|pan|otp).*",
    ),
    (
        "Your insurance agent has changed. Contact new agent at +91-XXXXXXXXXX for policy details",
        ScamCategory.AGENT_IMPERSONATION, Severity.MEDIUM,
        ("agent changed", "agent has changed", "new agent"),
        r".*(agent|advisor).*(chang|new|replac).*(contact|call).*",
    ),
    (
        "IRDAI notice: Your policy is under investigation. Respond within 24 hours to avoid cancellation",
        ScamCategory.FAKE_REGULATOR, Severity.HIGH,
        ("irdai", "under investigation", "to avoid cancellation"),
        r".*(irdai|regulator|authority).*(investigation|notice|warning).*(cancel|suspend).*",
    ),
    (
        "Get 80% discount on health insurance. Limited time offer. Buy now at www.fake-insurance.com",
        ScamCategory.FAKE_DISCOUNT, Severity.MEDIUM,
        ("% discount", "limited time offer", "buy now"),
        r".*([0-9]+%).*(discount|offer).*(limited|hurry|now).*",
    ),
    (
        "Your policy premium is overdue. Pay immediately to avoid legal action and credit score impact",
        ScamCategory.FAKE_OVERDUE, Severity.HIGH,
        ("overdue", "legal action", "credit score"),
        r".*(overdue|pending|due).*(legal|court|action).*(credit|cibil).*",
    ),
    (
        "Free health checkup for policyholders. Book appointment and share policy number",
        ScamCategory.DATA_HARVESTING, Severity.MEDIUM,
        ("free health checkup", "share policy number"),
        r".*(free|complimentary).*(checkup|test|screening).*(policy|details).*",
    ),
    (
        "Your claim of Rs 2,00,000 has been approved. Pay 2% processing fee to receive amount",
        ScamCategory.ADVANCE_FEE_FRAUD, Severity.HIGH,
        ("claim approved", "processing fee", "receive amount"),
        r".*(claim|amount).*(approv|sanction).*(fee|charge|payment).*",
    ),
    (
        "Digital arrest warrant issued in your name for insurance fraud. Join video call immediately",
        ScamCategory.DIGITAL_ARREST, Severity.CRITICAL,
        ("arrest warrant", "digital arrest", "warrant issued", "join video call"),
        r".*(arrest|warrant|police|cbi).*(fraud|crime).*(video|call|zoom).*",
    ),
    (
        "Insurance Ombudsman: Your complaint will be closed. Pay Rs 1,500 fee to keep it open",
        ScamCategory.FAKE_OMBUDSMAN, Severity.HIGH,
        ("ombudsman", "complaint will be closed"),
        r".*(ombudsman|grievance).*(complaint|dispute).*(pay|fee|expedite).*",
    ),
    (
        "Your policy certificate has expired. Download the new certificate app from bit.ly/policy-apk",
        ScamCategory.MALWARE_LINK, Severity.HIGH,
        ("download", ".apk", "certificate app"),
        r".*(document|certificate).*(expir|invalid).*(download|click|link).*",
    ),
    (
        "Verify your policy login at http://insure-verify.in and enter the OTP to avoid lapse",
        ScamCategory.PHISHING_LINK, Severity.HIGH,
        ("verify your policy", "enter the otp", "login at"),
        r".*(login|verify|update).*(link|url|website|http).*(password|otp|credential).*",
    ),
    (
        "Insurance customer care helpline 1800-XXX-XXXX. Call now to claim your pending bonus",
        ScamCategory.FAKE_CALL_CENTER, Severity.MEDIUM,
        ("customer care helpline", "pending bonus"),
        r".*(call|contact|helpline).*(phone|number).*(policy|claim|insurance).*",
    ),
)


def _expand_template(template: str) -> List[str]:
    """Fill every placeholder combination into a template, in product order."""
    names = list(dict.fromkeys(_PLACEHOLDER_RE.findall(template)))
    if not names:
        return [template]

    bodies = []
    for values in itertools.product(*(PLACEHOLDERS[name] for name in names)):
        text = template
        for name, value in zip(names, values):
            text = text.replace("{" + name + "}", value)
        bodies.append(text)
    return bodies


def _decorate(bodies: Sequence[str], prefixes: Sequence[str], suffixes: Sequence[str]) -> Iterator[str]:
    # Plain bodies come out first, then each prefix/suffix pairing.
    for prefix, suffix in itertools.product(prefixes, suffixes):
        for body in bodies:
            yield f"{prefix}{body}{suffix}"


def _round_robin(sources: Sequence[Iterator[Tuple[str, Any]]], count: int, seen: set) -> List[Tuple[str, Any]]:
    """Draw up to ``count`` unseen (text, tag) pairs, one from each source in turn."""
    picked: List[Tuple[str, Any]] = []
    active = list(sources)
    while active and len(picked) < count:
        still_active = []
        for source in active:
            if len(picked) >= count:
                break
            for text, tag in source:
                if text not in seen:
                    seen.add(text)
                    picked.append((text, tag))
                    still_active.append(source)
                    break
        active = still_active
    return picked


def _tagged(texts: Iterator[str], tag: Any) -> Iterator[Tuple[str, Any]]:
    for text in texts:
        yield text, tag


def generate_category_patterns(template: CategoryTemplate, seen: set) -> List[Tuple[str, CategoryTemplate]]:
    sources = [
        _tagged(_decorate(_expand_template(t), PREFIXES, SUFFIXES), template)
        for t in template.templates
    ]
    picked = _round_robin(sources, template.count, seen)
    if len(picked) < template.count:
        logger.warning(
            f"Only {len(picked)} of {template.count} variations available for {template.category.value}"
        )
    return picked


def generate_generic_fraud_patterns(count: int, seen: set) -> List[Tuple[str, str]]:
    sources = []
    for phrase in GENERIC_FRAUD_PHRASES:
        bodies = [t.replace("{phrase}", phrase) for t in GENERIC_FRAUD_TEMPLATES]
        sources.append(_tagged(_decorate(bodies, PREFIXES, SUFFIXES), phrase))
    return _round_robin(sources, count, seen)


def generate_regional_patterns(count: int, seen: set) -> List[Tuple[str, str]]:
    sources = []
    for phrase in REGIONAL_PHRASES:
        bodies = [t.replace("{phrase}", phrase) for t in REGIONAL_TEMPLATES]
        sources.append(_tagged(_decorate(bodies, REGIONAL_PREFIXES, REGIONAL_SUFFIXES), phrase))
    return _round_robin(sources, count, seen)


def generate_corpus() -> List[ScamPattern]:
    """
    Build the full seed corpus (10,000+ entries) in a deterministic order.

    Only the curated core patterns carry keywords and a regex. Generated
    variants are reachable through relevance search alone.
    """
    patterns: List[ScamPattern] = []
    seen: set = set()

    def add(text: str, category: ScamCategory, severity: Severity, keywords=(), regex: Optional[str] = None):
        patterns.append(ScamPattern(
            pattern_id=len(patterns) + 1,
            pattern_text=text,
            category=category,
            severity=severity,
            keywords=tuple(keywords),
            regex=regex,
        ))

    for text, category, severity, keywords, regex in CORE_PATTERNS:
        seen.add(text)
        add(text, category, severity, keywords, regex)

    for template in CATEGORY_TEMPLATES:
        for text, source in generate_category_patterns(template, seen):
            add(text, source.category, source.severity)

    for text, _ in generate_generic_fraud_patterns(GENERIC_FRAUD_COUNT, seen):
        add(text, ScamCategory.INSURANCE_FRAUD, Severity.HIGH)

    for text, _ in generate_regional_patterns(REGIONAL_COUNT, seen):
        add(text, ScamCategory.REGIONAL_SCAM, Severity.HIGH)

    logger.info(f"Generated {len(patterns)} scam patterns")
    return patterns


@lru_cache(maxsize=1)
def default_pattern_store() -> InMemoryPatternStore:
    """Seed corpus as a shared read-only store."""
    return InMemoryPatternStore(generate_corpus())
