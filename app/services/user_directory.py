"""User directory service.

Maps external identity ids (issued by Clerk) to local user records. These are
the only entry points identity webhook events may call.
"""
from typing import Optional
import logging
from sqlalchemy.orm import Session

from app.models import User, UserSettings, Prompt
from app.models.user import utcnow

logger = logging.getLogger(__name__)


class UserDirectory:
    def __init__(self, db: Session):
        self.db = db

    def find_by_external_id(self, external_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.external_id == external_id).first()

    def upsert_by_external_id(
        self,
        external_id: str,
        email: str,
        name: str,
        image_url: Optional[str] = None,
    ):
        """Create or update the user for ``external_id`` and return its internal id.

        A new user always gets an empty settings record in the same commit.
        """
        now = utcnow()
        try:
            user = self.find_by_external_id(external_id)
            if user:
                user.email = email
                user.name = name
                user.image_url = image_url
                user.updated_at = now
                self.db.commit()
                logger.info("Updated user %s", user.id)
                return user.id

            user = User(
                external_id=external_id,
                email=email,
                name=name,
                image_url=image_url,
                created_at=now,
                updated_at=now,
            )
            self.db.add(user)
            self.db.flush()
            self.db.add(UserSettings(user_id=user.id, created_at=now, updated_at=now))
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Created user %s for external identity", user.id)
        return user.id

    def delete_by_external_id(self, external_id: str) -> bool:
        """Delete the user with all of its prompts and settings.

        Everything is removed in a single transaction; on any failure the
        whole cascade is rolled back and the error propagates. Returns False
        when there was no such user.
        """
        user = self.find_by_external_id(external_id)
        if not user:
            return False

        user_id = user.id
        try:
            deleted_prompts = (
                self.db.query(Prompt)
                .filter(Prompt.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self.db.query(UserSettings).filter(UserSettings.user_id == user_id).delete(
                synchronize_session=False
            )
            self.db.delete(user)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Cascade delete failed for user %s", user_id)
            raise

        logger.info("Deleted user %s and %d prompts", user_id, deleted_prompts)
        return True
