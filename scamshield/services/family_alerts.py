"""
Family alert dispatch with a per-contact daily cap.

Each family member moves between two states for a given day: eligible while
fewer than ``daily_limit`` alerts were sent today, capped afterwards. The
counter resets lazily: a count stamped with an earlier date counts as zero.

A slot is claimed from the store before anything is sent. The claim checks
the cap and increments the counter in one step, so concurrent dispatches for
the same user never exceed the cap. A claimed slot stays consumed even when
delivery or the alert record fails afterwards.
"""

import asyncio
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Protocol

from scamshield.core.audit_logger import AuditLogger
from scamshield.core.exceptions import BackendUnavailableError, ContactNotFoundError, ScamShieldError
from scamshield.core.logging import ContextLogger, get_logger
from scamshield.schemas import DispatchOutcome
from scamshield.services.notification import NotificationChannel, NotificationSender, send_multi_channel
from config.settings import settings

logger = get_logger(__name__)

STATUS_SENT = "sent"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"
STATUS_NOT_REQUESTED = "not_requested"

ALERT_TEMPLATE = (
    "SCAM ALERT for {name}!\n\n"
    "{message}\n\n"
    "Risk Score: {risk_score}/100\n\n"
    "Please contact your family member immediately to verify their safety.\n\n"
    "{signature}"
)


def daily_limit_reason(daily_limit: int) -> str:
    return f"Daily alert limit reached ({daily_limit} alerts per day)"


@dataclass(frozen=True)
class FamilyContact:
    """Snapshot of one registered family member."""
    id: str
    user_id: str
    name: str
    relationship: str
    phone: str
    email: Optional[str] = None
    alerts_enabled: bool = True
    daily_alert_count: int = 0
    last_alert_date: Optional[date] = None

    def alerts_sent_on(self, day: date) -> int:
        """Alerts already sent on ``day``; stale counts read as zero."""
        return self.daily_alert_count if self.last_alert_date == day else 0


class FamilyContactStore(Protocol):
    """Persistence collaborator for family contacts and alert records."""

    def list_alertable_contacts(self, user_id: str) -> List[FamilyContact]:
        ...

    def increment_daily_counter(self, contact_id: str, today: date, limit: Optional[int] = None) -> bool:
        ...

    def record_alert(
        self,
        user_id: str,
        contact_id: str,
        alert_type: str,
        message: str,
        channel_statuses: Dict[str, str]
    ) -> str:
        ...

    def reset_daily_counters(self, today: date) -> int:
        ...


class InMemoryFamilyContactStore:
    """Contact store kept in process memory, for tests and offline runs."""

    def __init__(self, contacts: Iterable[FamilyContact] = ()):
        self.contacts: Dict[str, FamilyContact] = {contact.id: contact for contact in contacts}
        self.alerts: List[Dict[str, object]] = []
        self._lock = threading.Lock()

    def add(self, contact: FamilyContact) -> FamilyContact:
        self.contacts[contact.id] = contact
        return contact

    def get(self, contact_id: str) -> FamilyContact:
        try:
            return self.contacts[contact_id]
        except KeyError:
            raise ContactNotFoundError(f"Family member {contact_id} not found")

    def list_alertable_contacts(self, user_id: str) -> List[FamilyContact]:
        return [
            contact for contact in self.contacts.values()
            if contact.user_id == user_id and contact.alerts_enabled
        ]

    def increment_daily_counter(self, contact_id: str, today: date, limit: Optional[int] = None) -> bool:
        """Count one alert for today unless ``limit`` alerts were already counted."""
        with self._lock:
            contact = self.get(contact_id)
            sent_today = contact.alerts_sent_on(today)
            if limit is not None and sent_today >= limit:
                return False
            self.contacts[contact_id] = replace(contact, daily_alert_count=sent_today + 1, last_alert_date=today)
            return True

    def record_alert(self, user_id, contact_id, alert_type, message, channel_statuses) -> str:
        alert_id = str(uuid.uuid4())
        self.alerts.append({
            "id": alert_id,
            "user_id": user_id,
            "family_member_id": contact_id,
            "alert_type": alert_type,
            "alert_message": message,
            "channel_statuses": dict(channel_statuses),
            "acknowledged": False,
        })
        return alert_id

    def reset_daily_counters(self, today: date) -> int:
        reset = 0
        for contact_id, contact in list(self.contacts.items()):
            if contact.daily_alert_count and contact.last_alert_date != today:
                self.contacts[contact_id] = replace(contact, daily_alert_count=0)
                reset += 1
        return reset


def render_alert_message(contact: FamilyContact, message: str, risk_score: int, signature: str) -> str:
    return ALERT_TEMPLATE.format(
        name=contact.name,
        message=message,
        risk_score=risk_score,
        signature=signature,
    )


class AlertDispatcher:
    """
    Sends escalation alerts to a user's family members.

    Contacts are processed one after another and each is committed on its
    own, so cancelling a dispatch leaves earlier contacts alerted and later
    ones untouched. Store calls block, so they run in a worker thread.
    """

    def __init__(
        self,
        contact_store: FamilyContactStore,
        notifier: NotificationSender,
        daily_limit: Optional[int] = None,
        clock: Callable[[], date] = date.today,
        audit_logger: Optional[AuditLogger] = None,
        alert_type: Optional[str] = None,
        signature: Optional[str] = None
    ):
        self.contact_store = contact_store
        self.notifier = notifier
        self.daily_limit = daily_limit if daily_limit is not None else settings.alerts.daily_limit
        self.clock = clock
        self.audit_logger = audit_logger or AuditLogger()
        self.alert_type = alert_type or settings.alerts.alert_type
        self.signature = signature or settings.alerts.signature

    async def dispatch(self, user_id: str, message: str, risk_score: int) -> List[DispatchOutcome]:
        """
        Alert every enabled family member of ``user_id``.

        Returns one outcome per enabled contact, or an empty list when the
        user has none. Raises ``BackendUnavailableError`` only when the
        contact list itself cannot be read.
        """
        log = ContextLogger(logger, {"user_id": user_id, "risk_score": risk_score})

        try:
            contacts = await asyncio.to_thread(self.contact_store.list_alertable_contacts, user_id)
        except ScamShieldError:
            raise
        except Exception as e:
            log.error(f"Could not load family contacts: {e}")
            raise BackendUnavailableError("family contact store", e) from e

        if not contacts:
            log.info("No family members to alert")
            return []

        today = self.clock()
        outcomes = []
        for contact in contacts:
            contact_log = log.with_context(contact_id=contact.id)
            try:
                outcome = await self._dispatch_one(user_id, contact, message, risk_score, today, contact_log)
            except Exception as e:
                contact_log.error(f"Family alert failed: {e}", exc_info=True)
                outcome = DispatchOutcome(
                    success=False,
                    family_member_id=contact.id,
                    family_member_name=contact.name,
                    sms_status=STATUS_FAILED,
                    whatsapp_status=STATUS_FAILED,
                    email_status=STATUS_FAILED if contact.email else STATUS_NOT_REQUESTED,
                    error=str(e),
                )
            outcomes.append(outcome)
            self.audit_logger.log_family_alert(
                user_id=user_id,
                family_member_id=contact.id,
                risk_score=risk_score,
                success=outcome.success,
                channel_statuses=outcome.channel_statuses(),
                error=outcome.error,
                rate_limited=outcome.sms_status == STATUS_SKIPPED,
            )

        return outcomes

    async def _dispatch_one(
        self,
        user_id: str,
        contact: FamilyContact,
        message: str,
        risk_score: int,
        today: date,
        log: ContextLogger
    ) -> DispatchOutcome:
        claimed = await asyncio.to_thread(
            self.contact_store.increment_daily_counter, contact.id, today, self.daily_limit
        )
        if not claimed:
            log.warning("Daily alert limit reached for family member", daily_limit=self.daily_limit)
            return DispatchOutcome(
                success=False,
                family_member_id=contact.id,
                family_member_name=contact.name,
                sms_status=STATUS_SKIPPED,
                whatsapp_status=STATUS_SKIPPED,
                email_status=STATUS_SKIPPED if contact.email else STATUS_NOT_REQUESTED,
                error=daily_limit_reason(self.daily_limit),
            )

        body = render_alert_message(contact, message, risk_score, self.signature)
        delivered = await send_multi_channel(self.notifier, contact.phone, body, contact.email)

        def status(channel: NotificationChannel) -> str:
            if channel not in delivered:
                return STATUS_NOT_REQUESTED
            return STATUS_SENT if delivered[channel] else STATUS_FAILED

        outcome = DispatchOutcome(
            success=any(delivered.values()),
            family_member_id=contact.id,
            family_member_name=contact.name,
            sms_status=status(NotificationChannel.SMS),
            whatsapp_status=status(NotificationChannel.WHATSAPP),
            email_status=status(NotificationChannel.EMAIL),
        )

        try:
            await asyncio.to_thread(
                self.contact_store.record_alert,
                user_id, contact.id, self.alert_type, body, outcome.channel_statuses()
            )
        except Exception as e:
            log.error(f"Could not persist family alert: {e}", exc_info=True)
            return outcome.model_copy(update={"success": False, "error": f"Alert not recorded: {e}"})

        log.info(
            "Family alert sent",
            sms_status=outcome.sms_status,
            whatsapp_status=outcome.whatsapp_status,
            email_status=outcome.email_status,
        )
        return outcome

    def reset_daily_counters(self) -> int:
        """Housekeeping sweep zeroing counters from earlier days."""
        reset = self.contact_store.reset_daily_counters(self.clock())
        logger.info(f"Reset daily alert counters for {reset} family members")
        return reset
