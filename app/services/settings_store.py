"""Per-user settings service (currently just the OpenAI API key)."""
from typing import Optional
import logging
from sqlalchemy.orm import Session

from app.core.config import settings as app_settings
from app.core.exceptions import NotFound
from app.models import UserSettings
from app.models.user import utcnow
from app.services.secret_codec import encode_secret, decode_secret
from app.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found in database. Please sign out and sign back in."


class SettingsStore:
    def __init__(self, db: Session, obfuscation_key: Optional[str] = None):
        self.db = db
        self.users = UserDirectory(db)
        self.obfuscation_key = (
            obfuscation_key if obfuscation_key is not None else app_settings.SECRET_OBFUSCATION_KEY
        )

    def get(self, user_id) -> Optional[UserSettings]:
        return self.db.query(UserSettings).filter(UserSettings.user_id == user_id).first()

    def set_secret(self, user_id, plaintext: str) -> None:
        now = utcnow()
        encoded = encode_secret(plaintext, self.obfuscation_key)
        try:
            record = self.get(user_id)
            if record is None:
                # normally created alongside the user
                logger.warning("Settings missing for user %s, creating", user_id)
                record = UserSettings(user_id=user_id, created_at=now)
                self.db.add(record)
            record.openai_api_key = encoded
            record.updated_at = now
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Stored API key for user %s", user_id)

    def has_secret(self, user_id) -> bool:
        record = self.get(user_id)
        return bool(record and record.openai_api_key)

    def get_secret_plaintext(self, user_id) -> Optional[str]:
        record = self.get(user_id)
        if not record or not record.openai_api_key:
            return None
        return decode_secret(record.openai_api_key, self.obfuscation_key)

    def clear_secret(self, user_id) -> None:
        record = self.get(user_id)
        if record is None:
            return
        record.openai_api_key = None
        record.updated_at = utcnow()
        self.db.commit()
        logger.info("Cleared API key for user %s", user_id)

    # Caller-facing operations, keyed by external identity id

    def _require_user_id(self, external_id: str):
        user = self.users.find_by_external_id(external_id)
        if not user:
            raise NotFound(USER_NOT_FOUND)
        return user.id

    def get_for_external_id(self, external_id: str) -> Optional[UserSettings]:
        return self.get(self._require_user_id(external_id))

    def set_secret_for_external_id(self, external_id: str, plaintext: str) -> None:
        self.set_secret(self._require_user_id(external_id), plaintext)

    def has_secret_for_external_id(self, external_id: str) -> bool:
        user = self.users.find_by_external_id(external_id)
        return bool(user) and self.has_secret(user.id)

    def get_secret_plaintext_for_external_id(self, external_id: str) -> Optional[str]:
        user = self.users.find_by_external_id(external_id)
        if not user:
            return None
        return self.get_secret_plaintext(user.id)

    def clear_secret_for_external_id(self, external_id: str) -> None:
        self.clear_secret(self._require_user_id(external_id))
