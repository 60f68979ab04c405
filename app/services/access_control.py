"""Ownership check run before every prompt mutation or single-record read."""
import uuid
import logging
from sqlalchemy.orm import Session

from app.core.exceptions import NotFound, PermissionDenied
from app.models import Prompt
from app.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

PROMPT_NOT_FOUND = "Prompt not found"
NOT_OWNER = "You do not have permission to access this prompt"


def parse_prompt_id(prompt_id) -> uuid.UUID:
    if isinstance(prompt_id, uuid.UUID):
        return prompt_id
    try:
        return uuid.UUID(str(prompt_id))
    except ValueError:
        raise NotFound(PROMPT_NOT_FOUND)


class AccessControlGuard:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserDirectory(db)

    def authorize(self, prompt_id, external_id: str) -> Prompt:
        """Return the prompt if ``external_id`` owns it.

        Raises NotFound when the prompt does not exist and PermissionDenied
        when it belongs to someone else. A caller without a user record owns
        nothing, so every prompt is denied to them.
        """
        user = self.users.find_by_external_id(external_id)
        prompt = self.db.query(Prompt).filter(Prompt.id == parse_prompt_id(prompt_id)).first()
        if prompt is None:
            raise NotFound(PROMPT_NOT_FOUND)
        if user is None or prompt.user_id != user.id:
            logger.warning("Denied access to prompt %s", prompt.id)
            raise PermissionDenied(NOT_OWNER)
        return prompt
