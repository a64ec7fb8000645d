"""SQLAlchemy database models."""

from app.models.audit import AdminAuditEvent
from app.models.base import Base
from app.models.brief import Brief, BriefStatus
from app.models.subscriber import Subscriber
from app.models.user import User, UserRole

__all__ = [
    "Base",
    "AdminAuditEvent",
    "Brief",
    "BriefStatus",
    "Subscriber",
    "User",
    "UserRole",
]
