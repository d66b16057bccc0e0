"""
Database package for ScamShield.
Contains models, connection management and the SQL store implementations.
"""

from .connection import get_db, engine, SessionLocal, build_engine, check_database_health, create_tables, drop_tables
from .models import Base, ScamPatternRecord, TelemarketerRegistry, VerifiedBrand, FamilyMember, FamilyAlert
from .utils import SqlPatternStore, SqlPhoneRegistry, SqlFamilyContactStore

__all__ = [
    "get_db",
    "engine",
    "SessionLocal",
    "build_engine",
    "check_database_health",
    "create_tables",
    "drop_tables",
    "Base",
    "ScamPatternRecord",
    "TelemarketerRegistry",
    "VerifiedBrand",
    "FamilyMember",
    "FamilyAlert",
    "SqlPatternStore",
    "SqlPhoneRegistry",
    "SqlFamilyContactStore",
]
