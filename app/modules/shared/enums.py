# app/modules/shared/enums.py

from enum import Enum


class AuthFailure(str, Enum):
    """Enumeration of reasons a session token is not accepted."""
    INVALID_SESSION = "INVALID_SESSION"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    ACCOUNT_BANNED = "ACCOUNT_BANNED"


class ReportType(str, Enum):
    """Enumeration of abuse report categories."""
    SCAM = "scam"
    INAPPROPRIATE_CONTENT = "inappropriate_content"
    FAKE_LISTING = "fake_listing"
    SPAM = "spam"
    SAFETY_CONCERN = "safety_concern"
    OTHER = "other"

    @classmethod
    def sa_enum(cls):
        from sqlalchemy import Enum as SAEnum
        return SAEnum(cls, name="report_type_enum")


class ReportStatus(str, Enum):
    """Enumeration of abuse report review states."""
    PENDING = "pending"
    REVIEWING = "reviewing"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"

    @classmethod
    def sa_enum(cls):
        from sqlalchemy import Enum as SAEnum
        return SAEnum(cls, name="report_status_enum")
