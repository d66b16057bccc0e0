"""
SQLAlchemy models for ScamShield.
Defines the pattern corpus, phone registry and family alert tables.
"""

from sqlalchemy import (
    Column, String, DateTime, Date, Integer, Text, Boolean,
    ForeignKey, Index, CheckConstraint
)
from sqlalchemy.orm import declarative_base, relationship as orm_relationship
from sqlalchemy.sql import func

from scamshield.database.types import UUID, JSONB, new_id

Base = declarative_base()


class ScamPatternRecord(Base):
    """
    One entry of the scam pattern corpus.
    Rows are written at seed time and only read afterwards.
    """
    __tablename__ = 'scam_patterns'

    id = Column(Integer, primary_key=True, autoincrement=True)
    pattern_text = Column(Text, nullable=False)
    pattern_category = Column(String(50), nullable=False)
    risk_level = Column(String(20), nullable=False)
    keywords = Column(JSONB(), nullable=False, default=list)
    regex_pattern = Column(Text, nullable=True)
    corpus_version = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "risk_level IN ('LOW', 'MEDIUM', 'HIGH', 'CRITICAL')",
            name='valid_risk_level'
        ),
        CheckConstraint('LENGTH(pattern_text) > 0', name='non_empty_pattern_text'),
        Index('idx_scam_patterns_category', 'pattern_category'),
    )

    def __repr__(self):
        return f"<ScamPatternRecord(id={self.id}, category='{self.pattern_category}', risk='{self.risk_level}')>"


class TelemarketerRegistry(Base):
    """
    Reputation record for one phone number.
    Maintained by moderation outside the core; read-only here.
    """
    __tablename__ = 'telemarketer_registry'

    id = Column(UUID(), primary_key=True, default=new_id)
    phone_number = Column(String(20), nullable=False, unique=True)
    brand_name = Column(String(255), nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    is_scammer = Column(Boolean, default=False, nullable=False)
    is_dnd = Column(Boolean, default=False, nullable=False)
    report_count = Column(Integer, default=0, nullable=False)
    last_verified_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint('report_count >= 0', name='non_negative_report_count'),
        Index('idx_telemarketer_brand', 'brand_name'),
        Index('idx_telemarketer_scammer', 'is_scammer'),
    )

    def __repr__(self):
        return f"<TelemarketerRegistry(phone='{self.phone_number}', verified={self.is_verified}, scammer={self.is_scammer})>"


class VerifiedBrand(Base):
    """Insurer with its official contact channels."""
    __tablename__ = 'verified_brands'

    id = Column(UUID(), primary_key=True, default=new_id)
    brand_name = Column(String(255), nullable=False, unique=True)
    official_contacts = Column(JSONB(), nullable=False, default=dict)
    verification_status = Column(String(20), default='VERIFIED', nullable=False)
    verified_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "verification_status IN ('VERIFIED', 'PENDING', 'REVOKED')",
            name='valid_verification_status'
        ),
    )

    def __repr__(self):
        return f"<VerifiedBrand(name='{self.brand_name}', status='{self.verification_status}')>"


class FamilyMember(Base):
    """
    Family contact registered by a subscriber.
    The dispatcher only touches the daily counter columns.
    """
    __tablename__ = 'family_members'

    id = Column(UUID(), primary_key=True, default=new_id)
    user_id = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    relationship = Column(String(20), nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), nullable=True)
    alerts_enabled = Column(Boolean, default=True, nullable=False)
    daily_alert_count = Column(Integer, default=0, nullable=False)
    last_alert_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)

    alerts = orm_relationship("FamilyAlert", back_populates="family_member", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint('daily_alert_count >= 0', name='non_negative_daily_alert_count'),
        CheckConstraint('LENGTH(name) >= 2', name='min_name_length'),
        Index('idx_family_members_user', 'user_id', 'alerts_enabled'),
    )

    def __repr__(self):
        return f"<FamilyMember(id={self.id}, user='{self.user_id}', count={self.daily_alert_count})>"


class FamilyAlert(Base):
    """One dispatched or attempted alert to a family member."""
    __tablename__ = 'family_alerts'

    id = Column(UUID(), primary_key=True, default=new_id)
    user_id = Column(String(255), nullable=False)
    family_member_id = Column(UUID(), ForeignKey('family_members.id', ondelete='CASCADE'), nullable=False)
    alert_type = Column(String(50), nullable=False)
    alert_message = Column(Text, nullable=False)
    channel_statuses = Column(JSONB(), nullable=True)
    acknowledged = Column(Boolean, default=False, nullable=False)
    sent_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)

    family_member = orm_relationship("FamilyMember", back_populates="alerts")

    __table_args__ = (
        Index('idx_family_alerts_user', 'user_id'),
        Index('idx_family_alerts_member_sent', 'family_member_id', 'sent_at'),
    )

    def __repr__(self):
        return f"<FamilyAlert(member={self.family_member_id}, type='{self.alert_type}', ack={self.acknowledged})>"
