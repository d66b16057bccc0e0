"""
Helpers for callers deciding whether to escalate an analysis to family contacts.

The core never escalates on its own; these only encode the reference policy
and the alert wording.
"""

from scamshield.schemas import AnalysisResult

ESCALATION_THRESHOLD = 70
EXCERPT_LENGTH = 200


def should_escalate(result: AnalysisResult, threshold: int = ESCALATION_THRESHOLD) -> bool:
    return result.risk_score > threshold


def render_escalation_message(message: str, result: AnalysisResult, excerpt_length: int = EXCERPT_LENGTH) -> str:
    """Alert body quoting the start of the suspicious message."""
    excerpt = message[:excerpt_length]
    if len(message) > excerpt_length:
        excerpt += "..."

    categories = ", ".join(result.matched_categories) or "none"
    warnings = " ".join(result.warnings)
    return (
        f"A high-risk scam message was detected:\n\n\"{excerpt}\"\n\n"
        f"Matched patterns: {categories}\n\n"
        f"Warnings: {warnings}"
    )
