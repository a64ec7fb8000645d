"""Newsletter subscriber model."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, TypedModelMixin, UUIDMixin
from app.models.dtos import SubscriberCreateDTO, SubscriberPatchDTO

SUBSCRIBER_STATUS_ACTIVE = "active"


class Subscriber(
    TypedModelMixin[SubscriberCreateDTO, SubscriberPatchDTO],
    Base,
    UUIDMixin,
    TimestampMixin,
):
    """An email address opted into the newsletter.

    `email` is stored normalized (trimmed, lower-cased) and is unique.
    """

    __tablename__ = "subscribers"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    consent: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=SUBSCRIBER_STATUS_ACTIVE,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Subscriber {self.email}>"
