"""
Google account a professional connected for calendar sync.

Without one, accepted appointments go to the platform calendar
(GOOGLE_REFRESH_TOKEN).
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class GoogleCalendarIntegration(Base):
    __tablename__ = "google_calendar_integrations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    # Fernet-encrypted, see google_calendar_service.encrypt_token
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=False)
    token_expires_at = Column(DateTime, nullable=False)  # UTC

    google_user_email = Column(String(255), nullable=True)
    google_calendar_id = Column(String(500), nullable=True, default="primary")
    auto_sync_enabled = Column(Boolean, default=True, nullable=False)
    last_synced_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("Profile", back_populates="google_calendar")

    def __repr__(self):
        return f"<GoogleCalendarIntegration user={self.user_id} calendar={self.google_calendar_id}>"
