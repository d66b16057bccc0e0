from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

# --- Analysis ---

class AnalysisResult(BaseModel):
    risk_score: int = Field(ge=0, le=100)
    is_scam: bool
    matched_categories: List[str] = []  # distinct labels, order not significant
    warnings: List[str] = []
    recommendations: List[str] = Field(min_length=1)
    confidence: int = Field(ge=0, le=100)
    match_count: int = 0
    processing_time_ms: int = 0

# --- Phone reputation ---

class PhoneVerification(BaseModel):
    phone_number: str  # normalized lookup key
    is_verified: bool = False
    is_dnd: bool = False
    is_known_scammer: bool = False
    report_count: int = 0
    brand_name: Optional[str] = None
    official_contacts: Optional[Dict[str, Any]] = None
    warnings: List[str] = []

class BrandVerification(BaseModel):
    brand_name: str
    is_verified: bool = False
    verification_status: Optional[str] = None
    official_contacts: Optional[Dict[str, Any]] = None

# --- Family alerts ---

class DispatchOutcome(BaseModel):
    success: bool
    family_member_id: str
    family_member_name: str
    sms_status: str  # sent | failed | skipped | not_requested
    whatsapp_status: str
    email_status: str = "not_requested"
    error: Optional[str] = None

    def channel_statuses(self) -> Dict[str, str]:
        return {
            "sms": self.sms_status,
            "whatsapp": self.whatsapp_status,
            "email": self.email_status,
        }
