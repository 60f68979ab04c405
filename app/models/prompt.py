"""Prompt model."""
import uuid
from sqlalchemy import Column, String, DateTime, Text, Boolean, ForeignKey, Index, Uuid
from app.db.base import Base
from app.models.user import utcnow


# Known categories; the column itself accepts any string
PROMPT_CATEGORIES = ["marketing", "code", "creative", "writing", "business", "other"]


class Prompt(Base):
    """Prompt owned by a single user."""

    __tablename__ = "prompts"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    prompt_text = Column(Text, nullable=False)
    category = Column(String(50), nullable=False, default="other")
    is_favorited = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("ix_prompts_user_id_created_at", "user_id", "created_at"),
        Index("ix_prompts_user_id_is_favorited", "user_id", "is_favorited"),
        Index("ix_prompts_user_id_category", "user_id", "category"),
    )
