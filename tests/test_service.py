"""
Tests for the service facade, its wiring and the escalation helpers.
"""

import pytest
from unittest.mock import Mock

from scamshield.core.audit_logger import AuditLogger
from scamshield.core.escalation import render_escalation_message, should_escalate
from scamshield.core.exceptions import BackendUnavailableError, ValidationError
from scamshield.core.phone_reputation import PhoneReputationService
from scamshield.database.seed import seed_phone_registry
from scamshield.database.utils import SqlFamilyContactStore
from scamshield.schemas import AnalysisResult
from scamshield.services.family_alerts import AlertDispatcher, InMemoryFamilyContactStore
from scamshield.services.notification import LoggingNotificationSender
from scamshield.services.scamshield import ScamShieldService, build_service


@pytest.fixture
def audit_logger():
    return Mock(spec=AuditLogger)


@pytest.fixture
def service(sample_engine, phone_registry, audit_logger, clock):
    dispatcher = AlertDispatcher(
        InMemoryFamilyContactStore(), LoggingNotificationSender(), clock=clock, audit_logger=audit_logger
    )
    return ScamShieldService(
        engine=sample_engine,
        phone_service=PhoneReputationService(phone_registry),
        dispatcher=dispatcher,
        audit_logger=audit_logger,
    )


def _result(score, categories=(), warnings=()):
    return AnalysisResult(
        risk_score=score,
        is_scam=score > 70,
        matched_categories=list(categories),
        warnings=list(warnings),
        recommendations=["Verify through official channels."],
        confidence=60,
    )


class TestAnalyzeMessage:

    @pytest.mark.asyncio
    async def test_analysis_is_audited(self, service, audit_logger):
        result = await service.analyze_message("Your policy has been suspended", caller_id="user-1")

        assert result.risk_score == 25
        kwargs = audit_logger.log_scam_analysis.call_args.kwargs
        assert kwargs["caller_id"] == "user-1"
        assert kwargs["risk_score"] == 25
        assert kwargs["matched_categories"] == ["POLICY_SUSPENSION"]
        assert kwargs["message_length"] == len("Your policy has been suspended")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   ", None, "x" * 10001])
    async def test_invalid_messages_rejected(self, service, audit_logger, message):
        with pytest.raises(ValidationError):
            await service.analyze_message(message, caller_id="user-1")
        audit_logger.log_scam_analysis.assert_not_called()

    @pytest.mark.asyncio
    async def test_custom_message_limit(self, sample_engine, phone_registry, audit_logger):
        service = ScamShieldService(
            engine=sample_engine,
            phone_service=PhoneReputationService(phone_registry),
            dispatcher=Mock(),
            audit_logger=audit_logger,
            max_message_length=10,
        )
        with pytest.raises(ValidationError):
            await service.analyze_message("this is too long", caller_id="user-1")


class TestVerifyPhone:

    @pytest.mark.asyncio
    async def test_verification_is_audited(self, service, audit_logger):
        result = await service.verify_phone("+91 99999 99999", caller_id="user-1")

        assert result.is_known_scammer
        kwargs = audit_logger.log_phone_verification.call_args.kwargs
        assert kwargs["phone_number"] == "+919999999999"
        assert kwargs["is_known_scammer"] is True

    @pytest.mark.asyncio
    async def test_invalid_number(self, service):
        with pytest.raises(ValidationError):
            await service.verify_phone("not a number", caller_id="user-1")

    @pytest.mark.asyncio
    async def test_verify_brand(self, service):
        result = await service.verify_brand("Star Health Insurance")
        assert result.is_verified


class TestDispatchFamilyAlerts:

    @pytest.mark.asyncio
    async def test_no_contacts(self, service):
        assert await service.dispatch_family_alerts("user-1", "msg", 90) == []


class TestBackendFailures:
    """Unreachable backends are audited as system errors and re-raised."""

    @pytest.fixture
    def broken_service(self, sample_engine, audit_logger, clock):
        registry = Mock()
        registry.find_number.side_effect = ConnectionError("registry down")
        registry.find_brand.side_effect = ConnectionError("registry down")
        contacts = Mock()
        contacts.list_alertable_contacts.side_effect = ConnectionError("db down")
        return ScamShieldService(
            engine=sample_engine,
            phone_service=PhoneReputationService(registry),
            dispatcher=AlertDispatcher(contacts, LoggingNotificationSender(), clock=clock, audit_logger=audit_logger),
            audit_logger=audit_logger,
        )

    @pytest.mark.asyncio
    async def test_phone_registry_failure(self, broken_service, audit_logger):
        with pytest.raises(BackendUnavailableError):
            await broken_service.verify_phone("+919876543210", caller_id="user-1")

        args, kwargs = audit_logger.log_system_error.call_args
        assert args[0] == "phone registry"
        assert isinstance(args[1], BackendUnavailableError)
        assert kwargs["actor_id"] == "user-1"
        audit_logger.log_phone_verification.assert_not_called()

    @pytest.mark.asyncio
    async def test_brand_lookup_failure(self, broken_service, audit_logger):
        with pytest.raises(BackendUnavailableError):
            await broken_service.verify_brand("Star Health Insurance")

        args, kwargs = audit_logger.log_system_error.call_args
        assert args[0] == "phone registry"
        assert kwargs["context"] == {"brand_name": "Star Health Insurance"}

    @pytest.mark.asyncio
    async def test_contact_store_failure(self, broken_service, audit_logger):
        with pytest.raises(BackendUnavailableError):
            await broken_service.dispatch_family_alerts("user-1", "msg", 90)

        args, kwargs = audit_logger.log_system_error.call_args
        assert args[0] == "family contact store"
        assert kwargs["actor_id"] == "user-1"
        assert kwargs["context"] == {"risk_score": 90}

    @pytest.mark.asyncio
    async def test_validation_errors_not_audited_as_system_errors(self, broken_service, audit_logger):
        with pytest.raises(ValidationError):
            await broken_service.verify_phone("not a number", caller_id="user-1")
        audit_logger.log_system_error.assert_not_called()


class TestBuildService:

    def test_index_warmed_at_build_time(self, test_db, sample_store):
        store = Mock(wraps=sample_store)
        build_service(test_db, notifier=LoggingNotificationSender(), pattern_store=store)
        assert store.load_patterns.call_count == 1

    def test_unreachable_pattern_store_does_not_fail_build(self, test_db):
        store = Mock()
        store.corpus_version.side_effect = ConnectionError("search backend down")
        service = build_service(test_db, notifier=LoggingNotificationSender(), pattern_store=store)
        assert service.engine.matcher.match("your policy has been suspended") == frozenset()

    @pytest.mark.asyncio
    async def test_end_to_end_over_database(self, test_db, sample_store):
        seed_phone_registry(test_db)
        contact = SqlFamilyContactStore(test_db).add_contact("user-1", "Asha Rao", "parent", "+919800000001")
        service = build_service(test_db, notifier=LoggingNotificationSender(), pattern_store=sample_store)

        message = (
            "Digital arrest warrant issued. Urgent: pay Rs 50000 fee now via https://pay.example "
            "or call +919876543210 immediately"
        )
        result = await service.analyze_message(message, caller_id="user-1")
        assert should_escalate(result)

        outcomes = await service.dispatch_family_alerts(
            "user-1", render_escalation_message(message, result), result.risk_score
        )
        assert [o.family_member_id for o in outcomes] == [contact.id]
        assert outcomes[0].success

        verification = await service.verify_phone("+91 1800 227 717", caller_id="user-1")
        assert verification.is_verified

    @pytest.mark.asyncio
    async def test_defaults_to_sql_pattern_store(self, test_db):
        service = build_service(test_db, notifier=LoggingNotificationSender())
        result = await service.analyze_message("Your policy has been suspended", caller_id="user-1")
        assert result.match_count == 0
        assert result.recommendations


class TestEscalation:

    def test_threshold_is_exclusive(self):
        assert not should_escalate(_result(70))
        assert should_escalate(_result(71))
        assert should_escalate(_result(50), threshold=40)

    def test_message_excerpt_truncated(self):
        body = render_escalation_message("a" * 250, _result(90, ["DIGITAL_ARREST"], ["CRITICAL: x"]))
        assert '"' + "a" * 200 + '..."' in body
        assert "Matched patterns: DIGITAL_ARREST" in body
        assert "Warnings: CRITICAL: x" in body

    def test_short_message_not_truncated(self):
        body = render_escalation_message("short", _result(90))
        assert '"short"' in body
        assert "Matched patterns: none" in body
