"""UserSettings model."""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from app.db.base import Base
from app.models.user import utcnow


class UserSettings(Base):
    """Per-user settings, 1:1 with users."""

    __tablename__ = "user_settings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), unique=True, nullable=False, index=True)
    openai_api_key = Column(String)  # encoded, see app.services.secret_codec
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
