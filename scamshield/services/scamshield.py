"""
ScamShield service facade.

Exposes message analysis, phone verification and family alert dispatch with
input validation, logging and audit events around the core components.
"""

import time
from typing import List, Optional

from sqlalchemy.orm import Session as SQLAlchemySession

from scamshield.core.audit_logger import AuditLogger
from scamshield.core.exceptions import BackendUnavailableError
from scamshield.core.logging import ContextLogger, get_logger
from scamshield.core.matcher import PatternMatcher
from scamshield.core.patterns import PatternStore
from scamshield.core.phone_reputation import PhoneReputationService
from scamshield.core.scam_detection import ScamDetectionEngine
from scamshield.core.validation import validate_message
from scamshield.schemas import AnalysisResult, BrandVerification, DispatchOutcome, PhoneVerification
from scamshield.services.family_alerts import AlertDispatcher
from scamshield.services.notification import NotificationSender, build_notification_sender
from config.settings import settings

logger = get_logger(__name__)


class ScamShieldService:
    """Entry point used by the surrounding API layer."""

    def __init__(
        self,
        engine: ScamDetectionEngine,
        phone_service: PhoneReputationService,
        dispatcher: AlertDispatcher,
        audit_logger: Optional[AuditLogger] = None,
        max_message_length: Optional[int] = None
    ):
        self.engine = engine
        self.phone_service = phone_service
        self.dispatcher = dispatcher
        self.audit_logger = audit_logger or AuditLogger()
        self.max_message_length = max_message_length or settings.detection.max_message_length

    async def analyze_message(self, message: str, caller_id: str) -> AnalysisResult:
        """
        Analyze a message for scam patterns.

        Raises:
            ValidationError: If the message is not a non-empty string within the length limit
        """
        validate_message(message, self.max_message_length)
        log = ContextLogger(logger, {"user_id": caller_id})

        result = self.engine.analyze(message)

        log.info(
            "Scam analysis completed",
            risk_score=result.risk_score,
            is_scam=result.is_scam,
            match_count=result.match_count,
            processing_time_ms=result.processing_time_ms,
        )
        self.audit_logger.log_scam_analysis(
            caller_id=caller_id,
            risk_score=result.risk_score,
            is_scam=result.is_scam,
            confidence=result.confidence,
            matched_categories=result.matched_categories,
            match_count=result.match_count,
            message_length=len(message),
            processing_time_ms=result.processing_time_ms,
        )
        return result

    async def verify_phone(self, phone_number: str, caller_id: str) -> PhoneVerification:
        start_time = time.perf_counter()
        try:
            verification = self.phone_service.verify(phone_number)
        except BackendUnavailableError as e:
            self.audit_logger.log_system_error(e.backend, e, actor_id=caller_id)
            raise

        self.audit_logger.log_phone_verification(
            caller_id=caller_id,
            phone_number=verification.phone_number,
            is_verified=verification.is_verified,
            is_known_scammer=verification.is_known_scammer,
            is_dnd=verification.is_dnd,
        )
        logger.debug(
            "Phone verification served",
            extra={"user_id": caller_id, "duration_ms": int((time.perf_counter() - start_time) * 1000)}
        )
        return verification

    async def verify_brand(self, brand_name: str) -> BrandVerification:
        try:
            return self.phone_service.verify_brand(brand_name)
        except BackendUnavailableError as e:
            self.audit_logger.log_system_error(e.backend, e, context={"brand_name": brand_name})
            raise

    async def dispatch_family_alerts(self, user_id: str, message: str, risk_score: int) -> List[DispatchOutcome]:
        try:
            outcomes = await self.dispatcher.dispatch(user_id, message, risk_score)
        except BackendUnavailableError as e:
            self.audit_logger.log_system_error(e.backend, e, actor_id=user_id, context={"risk_score": risk_score})
            raise

        sent = sum(1 for outcome in outcomes if outcome.success)
        logger.info(
            f"Family alerts dispatched: {sent}/{len(outcomes)} delivered",
            extra={"user_id": user_id, "risk_score": risk_score}
        )
        return outcomes


def build_service(
    db: SQLAlchemySession,
    notifier: Optional[NotificationSender] = None,
    pattern_store: Optional[PatternStore] = None
) -> ScamShieldService:
    """Wire the service against the SQL stores and the configured notifier."""
    from scamshield.database.utils import SqlFamilyContactStore, SqlPatternStore, SqlPhoneRegistry

    audit_logger = AuditLogger()
    matcher = PatternMatcher(
        pattern_store or SqlPatternStore(db),
        limit=settings.detection.match_limit,
        relevance_threshold=settings.detection.relevance_threshold,
        relevance_limit=settings.detection.relevance_limit,
    )
    matcher.warm_up()
    engine = ScamDetectionEngine(matcher, scam_threshold=settings.detection.scam_threshold)
    dispatcher = AlertDispatcher(
        SqlFamilyContactStore(db),
        notifier or build_notification_sender(),
        daily_limit=settings.alerts.daily_limit,
        audit_logger=audit_logger,
    )
    return ScamShieldService(
        engine=engine,
        phone_service=PhoneReputationService(SqlPhoneRegistry(db)),
        dispatcher=dispatcher,
        audit_logger=audit_logger,
    )
