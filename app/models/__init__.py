"""Database models."""
from app.models.user import User
from app.models.prompt import Prompt
from app.models.user_settings import UserSettings

__all__ = [
    "User",
    "Prompt",
    "UserSettings",
]
