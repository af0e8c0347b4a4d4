from sqlalchemy import String, Integer, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from hostellite.db.session import Base

class ConfirmationEscalation(Base):
    __tablename__ = "confirmation_escalations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    booking_id: Mapped[str] = mapped_column(String(36), index=True)
    payment_intent_id: Mapped[str] = mapped_column(String(120), index=True)
    reservation_json: Mapped[str] = mapped_column(Text, default="{}")  # replayed on reconciliation
    status: Mapped[str] = mapped_column(String(20), default="queued", index=True)  # queued, resolved, escalated
    attempts: Mapped[int] = mapped_column(Integer, default=0)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    resolved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)
