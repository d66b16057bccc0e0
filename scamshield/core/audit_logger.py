"""
Audit event emission for scam analyses, phone verifications and family alerts.

Events are written as structured records on the ``audit.*`` loggers. Storage,
retention and tamper protection belong to whatever consumes those logs.
"""

import logging
from datetime import datetime
from typing import Dict, List, Any, Optional, Union
from dataclasses import dataclass, asdict
from enum import Enum
import uuid

from scamshield.core.logging import get_logger


class AuditEventType(Enum):
    """Types of audit events that can be logged."""
    SCAM_ANALYSIS = "scam_analysis"
    PHONE_VERIFICATION = "phone_verification"
    FAMILY_ALERT = "family_alert"
    ALERT_RATE_LIMITED = "alert_rate_limited"
    SYSTEM_ERROR = "system_error"


class AuditSeverity(Enum):
    """Severity levels for audit events."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ScamAnalysisAudit:
    """Structured audit data for one message analysis."""
    caller_id: str
    risk_score: int
    is_scam: bool
    confidence: int
    matched_categories: List[str]
    match_count: int
    message_length: int


@dataclass
class PhoneVerificationAudit:
    """Structured audit data for a phone reputation lookup."""
    caller_id: str
    phone_number: str
    is_verified: bool
    is_known_scammer: bool
    is_dnd: bool


@dataclass
class FamilyAlertAudit:
    """Structured audit data for one family contact dispatch attempt."""
    user_id: str
    family_member_id: str
    risk_score: int
    success: bool
    channel_statuses: Dict[str, Optional[str]]
    error: Optional[str] = None


@dataclass
class AuditEvent:
    """Base audit event structure."""
    event_id: str
    event_type: AuditEventType
    severity: AuditSeverity
    timestamp: datetime
    actor_id: Optional[str]
    event_data: Union[ScamAnalysisAudit, PhoneVerificationAudit, FamilyAlertAudit, Dict[str, Any]]
    processing_time_ms: Optional[int] = None
    error_details: Optional[Dict[str, Any]] = None


class AuditLogger:
    """
    Fire-and-forget audit trail.

    Every public method returns the generated event id. Failures while emitting
    are logged on the module logger and swallowed so that auditing can never
    change the outcome of an analysis or a dispatch.
    """

    def __init__(self, logger_name: str = "scamshield"):
        self.logger = get_logger(f"audit.{logger_name}")
        self._fallback = get_logger(__name__)

    def log_scam_analysis(
        self,
        caller_id: str,
        risk_score: int,
        is_scam: bool,
        confidence: int,
        matched_categories: List[str],
        match_count: int,
        message_length: int,
        processing_time_ms: Optional[int] = None
    ) -> str:
        """Record the outcome of one message analysis."""
        if is_scam:
            severity = AuditSeverity.HIGH
        elif risk_score > 40:
            severity = AuditSeverity.MEDIUM
        else:
            severity = AuditSeverity.LOW

        data = ScamAnalysisAudit(
            caller_id=caller_id,
            risk_score=risk_score,
            is_scam=is_scam,
            confidence=confidence,
            matched_categories=list(matched_categories),
            match_count=match_count,
            message_length=message_length,
        )
        return self._emit(AuditEventType.SCAM_ANALYSIS, severity, caller_id, data, processing_time_ms)

    def log_phone_verification(
        self,
        caller_id: str,
        phone_number: str,
        is_verified: bool,
        is_known_scammer: bool,
        is_dnd: bool
    ) -> str:
        """Record a phone reputation lookup."""
        severity = AuditSeverity.HIGH if is_known_scammer else AuditSeverity.LOW
        data = PhoneVerificationAudit(
            caller_id=caller_id,
            phone_number=phone_number,
            is_verified=is_verified,
            is_known_scammer=is_known_scammer,
            is_dnd=is_dnd,
        )
        return self._emit(AuditEventType.PHONE_VERIFICATION, severity, caller_id, data)

    def log_family_alert(
        self,
        user_id: str,
        family_member_id: str,
        risk_score: int,
        success: bool,
        channel_statuses: Dict[str, Optional[str]],
        error: Optional[str] = None,
        rate_limited: bool = False
    ) -> str:
        """Record one family alert attempt, including rate-limited skips."""
        event_type = AuditEventType.ALERT_RATE_LIMITED if rate_limited else AuditEventType.FAMILY_ALERT
        severity = AuditSeverity.MEDIUM if success or rate_limited else AuditSeverity.HIGH
        data = FamilyAlertAudit(
            user_id=user_id,
            family_member_id=family_member_id,
            risk_score=risk_score,
            success=success,
            channel_statuses=dict(channel_statuses),
            error=error,
        )
        return self._emit(event_type, severity, user_id, data)

    def log_system_error(
        self,
        component: str,
        error: Exception,
        actor_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> str:
        """Record an unexpected failure inside a component."""
        return self._emit(
            AuditEventType.SYSTEM_ERROR,
            AuditSeverity.CRITICAL,
            actor_id,
            {"component": component, **(context or {})},
            error_details={"type": type(error).__name__, "message": str(error)},
        )

    def _emit(
        self,
        event_type: AuditEventType,
        severity: AuditSeverity,
        actor_id: Optional[str],
        event_data,
        processing_time_ms: Optional[int] = None,
        error_details: Optional[Dict[str, Any]] = None
    ) -> str:
        event = AuditEvent(
            event_id=str(uuid.uuid4()),
            event_type=event_type,
            severity=severity,
            timestamp=datetime.utcnow(),
            actor_id=actor_id,
            event_data=event_data,
            processing_time_ms=processing_time_ms,
            error_details=error_details,
        )
        try:
            self._log_audit_event(event)
        except Exception as e:
            self._fallback.warning(
                f"Failed to emit audit event {event_type.value}: {e}",
                extra={"audit_event_id": event.event_id}
            )
        return event.event_id

    def _log_audit_event(self, audit_event: AuditEvent) -> None:
        event_dict = {
            "audit_event_id": audit_event.event_id,
            "event_type": audit_event.event_type.value,
            "severity": audit_event.severity.value,
            "timestamp": audit_event.timestamp.isoformat() + "Z",
            "actor_id": audit_event.actor_id,
            "processing_time_ms": audit_event.processing_time_ms,
        }

        if isinstance(audit_event.event_data, dict):
            event_dict["event_data"] = audit_event.event_data
        else:
            event_dict["event_data"] = asdict(audit_event.event_data)

        if audit_event.error_details:
            event_dict["error_details"] = audit_event.error_details

        log_level = {
            AuditSeverity.LOW: logging.INFO,
            AuditSeverity.MEDIUM: logging.INFO,
            AuditSeverity.HIGH: logging.WARNING,
            AuditSeverity.CRITICAL: logging.ERROR
        }.get(audit_event.severity, logging.INFO)

        log_message = f"AUDIT: {audit_event.event_type.value.upper()} - {audit_event.severity.value.upper()}"

        self.logger.log(
            log_level,
            log_message,
            extra={"audit_data": event_dict}
        )
