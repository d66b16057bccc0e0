"""
Database-backed implementations of the core's store collaborators.
"""

import functools
import threading
import weakref
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import case, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as SQLAlchemySession

from scamshield.core.exceptions import BackendUnavailableError, ContactNotFoundError
from scamshield.core.logging import get_logger
from scamshield.core.patterns import ScamCategory, ScamPattern, Severity
from scamshield.core.phone_reputation import PhoneReputationRecord, VerifiedBrandInfo
from scamshield.core.validation import (
    validate_email, validate_mobile, validate_name, validate_relationship
)
from scamshield.services.family_alerts import FamilyContact
from .models import ScamPatternRecord, TelemarketerRegistry, VerifiedBrand, FamilyMember, FamilyAlert

logger = get_logger(__name__)

_session_locks = weakref.WeakKeyDictionary()
_session_locks_guard = threading.Lock()


def session_lock(db: SQLAlchemySession):
    """The lock serializing every store that shares ``db``."""
    with _session_locks_guard:
        lock = _session_locks.get(db)
        if lock is None:
            lock = _session_locks[db] = threading.RLock()
        return lock


def _serialized(method):
    # A session is not thread-safe; store calls may come from worker threads.
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class SqlPatternStore:
    """
    Pattern store reading the ``scam_patterns`` table.

    The snapshot is cached until the table's row count, highest id or
    recorded corpus version changes.
    """

    def __init__(self, db: SQLAlchemySession):
        self.db = db
        self._lock = session_lock(db)
        self._cached_version: Optional[str] = None
        self._cached_patterns: Tuple[ScamPattern, ...] = ()

    @_serialized
    def corpus_version(self) -> str:
        try:
            count, max_id, version = self.db.query(
                func.count(ScamPatternRecord.id),
                func.max(ScamPatternRecord.id),
                func.max(ScamPatternRecord.corpus_version),
            ).one()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("pattern store", e) from e
        return f"{version or 'unversioned'}:{count}:{max_id or 0}"

    @_serialized
    def load_patterns(self) -> Sequence[ScamPattern]:
        version = self.corpus_version()
        if version == self._cached_version:
            return self._cached_patterns

        try:
            rows = self.db.query(ScamPatternRecord).order_by(ScamPatternRecord.id).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("pattern store", e) from e

        patterns = []
        for row in rows:
            try:
                patterns.append(ScamPattern(
                    pattern_id=row.id,
                    pattern_text=row.pattern_text,
                    category=ScamCategory(row.pattern_category),
                    severity=Severity(row.risk_level),
                    keywords=tuple(row.keywords or ()),
                    regex=row.regex_pattern,
                ))
            except ValueError:
                logger.warning(
                    f"Skipping scam pattern {row.id} with unknown category or severity",
                    extra={"category": row.pattern_category, "risk_level": row.risk_level}
                )

        self._cached_patterns = tuple(patterns)
        self._cached_version = version
        logger.info(f"Loaded {len(patterns)} scam patterns", extra={"corpus_version": version})
        return self._cached_patterns

    @_serialized
    def save_patterns(self, patterns: Sequence[ScamPattern], corpus_version: Optional[str] = None) -> int:
        """Replace the stored corpus with ``patterns``."""
        try:
            self.db.query(ScamPatternRecord).delete(synchronize_session=False)
            self.db.bulk_save_objects([
                ScamPatternRecord(
                    pattern_text=pattern.pattern_text,
                    pattern_category=pattern.category.value,
                    risk_level=pattern.severity.value,
                    keywords=list(pattern.keywords),
                    regex_pattern=pattern.regex,
                    corpus_version=corpus_version,
                )
                for pattern in patterns
            ])
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save scam patterns: {e}")
            raise
        self._cached_version = None
        logger.info(f"Saved {len(patterns)} scam patterns")
        return len(patterns)


class SqlPhoneRegistry:
    """Phone registry over ``telemarketer_registry`` and ``verified_brands``."""

    def __init__(self, db: SQLAlchemySession):
        self.db = db
        self._lock = session_lock(db)

    @_serialized
    def find_number(self, phone_number: str) -> Optional[PhoneReputationRecord]:
        try:
            row = self.db.query(TelemarketerRegistry).filter(
                TelemarketerRegistry.phone_number == phone_number
            ).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("phone registry", e) from e

        if row is None:
            return None
        return PhoneReputationRecord(
            phone_number=row.phone_number,
            is_verified=row.is_verified,
            is_scammer=row.is_scammer,
            is_dnd=row.is_dnd,
            report_count=row.report_count,
            brand_name=row.brand_name,
            last_verified_at=row.last_verified_at,
        )

    @_serialized
    def find_brand(self, brand_name: str) -> Optional[VerifiedBrandInfo]:
        try:
            row = self.db.query(VerifiedBrand).filter(
                VerifiedBrand.brand_name == brand_name
            ).first()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("phone registry", e) from e

        if row is None:
            return None
        return VerifiedBrandInfo(
            brand_name=row.brand_name,
            official_contacts=dict(row.official_contacts or {}),
            verification_status=row.verification_status,
            verified_at=row.verified_at,
        )


def _to_contact(member: FamilyMember) -> FamilyContact:
    return FamilyContact(
        id=member.id,
        user_id=member.user_id,
        name=member.name,
        relationship=member.relationship,
        phone=member.phone,
        email=member.email,
        alerts_enabled=member.alerts_enabled,
        daily_alert_count=member.daily_alert_count,
        last_alert_date=member.last_alert_date,
    )


class SqlFamilyContactStore:
    """
    Family contacts and alert records in the relational store.

    Every write commits on its own so that each contact's dispatch is
    independent of its siblings. Calls are serialized with every other
    store sharing the session, since dispatch runs them in worker threads.
    """

    def __init__(self, db: SQLAlchemySession):
        self.db = db
        self._lock = session_lock(db)

    @_serialized
    def list_alertable_contacts(self, user_id: str) -> List[FamilyContact]:
        try:
            members = self.db.query(FamilyMember).filter(
                FamilyMember.user_id == user_id,
                FamilyMember.alerts_enabled.is_(True),
            ).order_by(FamilyMember.created_at, FamilyMember.id).populate_existing().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("family contact store", e) from e
        return [_to_contact(member) for member in members]

    @_serialized
    def list_contacts(self, user_id: str) -> List[FamilyContact]:
        """All contacts of a user, including those with alerts disabled."""
        try:
            members = self.db.query(FamilyMember).filter(
                FamilyMember.user_id == user_id
            ).order_by(FamilyMember.created_at, FamilyMember.id).populate_existing().all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("family contact store", e) from e
        return [_to_contact(member) for member in members]

    @_serialized
    def add_contact(
        self,
        user_id: str,
        name: str,
        relationship: str,
        phone: str,
        email: Optional[str] = None,
        alerts_enabled: bool = True
    ) -> FamilyContact:
        """
        Register a family member for ``user_id``.

        Raises:
            ValidationError: If any field is invalid
            BackendUnavailableError: If the row cannot be written
        """
        member = FamilyMember(
            user_id=user_id,
            name=validate_name(name),
            relationship=validate_relationship(relationship),
            phone=validate_mobile(phone),
            email=validate_email(email),
            alerts_enabled=alerts_enabled,
            daily_alert_count=0,
        )
        try:
            self.db.add(member)
            self.db.commit()
            self.db.refresh(member)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to add family member for user {user_id}: {e}")
            raise BackendUnavailableError("family contact store", e) from e

        logger.info("Family member added", extra={"user_id": user_id, "contact_id": member.id})
        return _to_contact(member)

    @_serialized
    def remove_contact(self, user_id: str, contact_id: str) -> None:
        """Delete a contact owned by ``user_id``; other users' contacts are not found."""
        try:
            member = self.db.query(FamilyMember).filter(
                FamilyMember.id == contact_id,
                FamilyMember.user_id == user_id,
            ).first()
            if member is None:
                raise ContactNotFoundError(f"Family member {contact_id} not found")
            self.db.delete(member)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("family contact store", e) from e

        logger.info("Family member removed", extra={"user_id": user_id, "contact_id": contact_id})

    @_serialized
    def increment_daily_counter(self, contact_id: str, today: date, limit: Optional[int] = None) -> bool:
        """
        Claim one of today's alert slots in a single conditional UPDATE.

        A counter stamped with an earlier date restarts at 1. With ``limit``
        set, the row only changes while fewer than ``limit`` alerts were
        counted today, and False is returned once the cap is reached.
        """
        if limit is not None and limit < 1:
            return False

        conditions = [FamilyMember.id == contact_id]
        if limit is not None:
            conditions.append(or_(
                FamilyMember.last_alert_date.is_(None),
                FamilyMember.last_alert_date != today,
                FamilyMember.daily_alert_count < limit,
            ))

        try:
            updated = self.db.query(FamilyMember).filter(*conditions).update(
                {
                    FamilyMember.daily_alert_count: case(
                        (FamilyMember.last_alert_date == today, FamilyMember.daily_alert_count + 1),
                        else_=1,
                    ),
                    FamilyMember.last_alert_date: today,
                },
                synchronize_session=False,
            )
            self.db.commit()
            exists = updated > 0 or self.db.query(FamilyMember.id).filter(
                FamilyMember.id == contact_id
            ).first() is not None
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("family contact store", e) from e

        if not exists:
            raise ContactNotFoundError(f"Family member {contact_id} not found")
        return updated > 0

    @_serialized
    def record_alert(
        self,
        user_id: str,
        contact_id: str,
        alert_type: str,
        message: str,
        channel_statuses: Dict[str, str]
    ) -> str:
        alert = FamilyAlert(
            user_id=user_id,
            family_member_id=contact_id,
            alert_type=alert_type,
            alert_message=message,
            channel_statuses=dict(channel_statuses),
            acknowledged=False,
        )
        try:
            self.db.add(alert)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("family contact store", e) from e
        return alert.id

    @_serialized
    def reset_daily_counters(self, today: date) -> int:
        """Zero counters whose last alert was before ``today``."""
        try:
            reset = self.db.query(FamilyMember).filter(
                FamilyMember.daily_alert_count > 0,
                FamilyMember.last_alert_date < today,
            ).update({FamilyMember.daily_alert_count: 0}, synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("family contact store", e) from e
        return reset

    @_serialized
    def get_alerts(self, user_id: str) -> List[FamilyAlert]:
        try:
            return self.db.query(FamilyAlert).filter(
                FamilyAlert.user_id == user_id
            ).order_by(FamilyAlert.sent_at).all()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendUnavailableError("family contact store", e) from e
