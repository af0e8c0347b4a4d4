from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from hostellite.db.session import Base

CURRENT_KEY = "current"

class StoredCredential(Base):
    __tablename__ = "stored_credentials"

    key: Mapped[str] = mapped_column(String(20), primary_key=True, default=CURRENT_KEY)  # single row
    token: Mapped[str] = mapped_column(Text)
    role: Mapped[str] = mapped_column(String(20), default="user")  # user, hostelOwner, admin
    user_id: Mapped[str] = mapped_column(String(36), nullable=True)
    user_name: Mapped[str] = mapped_column(String(120), nullable=True)
    saved_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
