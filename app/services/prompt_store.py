"""Prompt store service.

All operations are keyed by the caller's external identity id. Every
mutation and single-record read goes through ``AccessControlGuard.authorize``
first; listings only ever select the caller's own rows.
"""
from dataclasses import dataclass
from typing import List, Optional, Union
import logging
from sqlalchemy.orm import Session

from app.core.exceptions import NotFound, ValidationError
from app.models import Prompt
from app.models.prompt import PROMPT_CATEGORIES
from app.models.user import utcnow
from app.services.access_control import AccessControlGuard
from app.services.pagination import Page, PageNumberPage, CursorPage, CursorStrategy, Strategy, paginate
from app.services.settings_store import USER_NOT_FOUND
from app.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class AllPrompts:
    kind: str = "all"


@dataclass(frozen=True)
class ByCategory:
    category: str
    kind: str = "byCategory"


CategoryFilter = Union[AllPrompts, ByCategory]


def resolve_category_filter(category: Optional[str]) -> CategoryFilter:
    if not category or category == ALL_CATEGORIES:
        return AllPrompts()
    return ByCategory(category=category)


@dataclass
class PromptListing:
    page: Page
    filter: CategoryFilter


def _clean(value: Optional[str], field_name: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{field_name} is required")
    return value


class PromptStore:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserDirectory(db)
        self.guard = AccessControlGuard(db)

    @staticmethod
    def categories() -> List[str]:
        return list(PROMPT_CATEGORIES)

    def create(self, external_id: str, title: str, prompt_text: str, category: str):
        user = self.users.find_by_external_id(external_id)
        if not user:
            raise NotFound(USER_NOT_FOUND)

        now = utcnow()
        prompt = Prompt(
            user_id=user.id,
            title=_clean(title, "Title"),
            prompt_text=_clean(prompt_text, "Prompt text"),
            category=category,
            is_favorited=False,
            created_at=now,
            updated_at=now,
        )
        self.db.add(prompt)
        self.db.commit()
        self.db.refresh(prompt)
        logger.info("Created prompt %s for user %s", prompt.id, user.id)
        return prompt.id

    def update(self, prompt_id, external_id: str, title: str, prompt_text: str, category: str) -> Prompt:
        prompt = self.guard.authorize(prompt_id, external_id)
        # validate everything before touching the loaded row
        title = _clean(title, "Title")
        prompt_text = _clean(prompt_text, "Prompt text")
        prompt.title = title
        prompt.prompt_text = prompt_text
        prompt.category = category
        prompt.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(prompt)
        return prompt

    def toggle_favorite(self, prompt_id, external_id: str) -> bool:
        prompt = self.guard.authorize(prompt_id, external_id)
        prompt.is_favorited = not prompt.is_favorited
        prompt.updated_at = utcnow()
        self.db.commit()
        return prompt.is_favorited

    def delete(self, prompt_id, external_id: str) -> None:
        prompt = self.guard.authorize(prompt_id, external_id)
        self.db.delete(prompt)
        self.db.commit()
        logger.info("Deleted prompt %s", prompt_id)

    def get_by_id(self, prompt_id, external_id: str) -> Prompt:
        return self.guard.authorize(prompt_id, external_id)

    def list_favorited(self, external_id: str) -> List[Prompt]:
        user = self.users.find_by_external_id(external_id)
        if not user:
            return []
        return (
            self.db.query(Prompt)
            .filter(Prompt.user_id == user.id, Prompt.is_favorited.is_(True))
            .order_by(Prompt.created_at.desc(), Prompt.id.desc())
            .all()
        )

    def candidates(self, user_id, prompt_filter: CategoryFilter) -> List[Prompt]:
        """Full ordered candidate set for a listing, newest first."""
        query = self.db.query(Prompt).filter(Prompt.user_id == user_id)
        if isinstance(prompt_filter, ByCategory):
            query = query.filter(Prompt.category == prompt_filter.category)
        return query.order_by(Prompt.created_at.desc(), Prompt.id.desc()).all()

    def list(self, external_id: str, category: Optional[str], strategy: Strategy) -> PromptListing:
        prompt_filter = resolve_category_filter(category)
        user = self.users.find_by_external_id(external_id)
        if not user:
            empty = CursorPage() if isinstance(strategy, CursorStrategy) else PageNumberPage()
            return PromptListing(page=empty, filter=prompt_filter)

        page = paginate(self.candidates(user.id, prompt_filter), strategy)
        return PromptListing(page=page, filter=prompt_filter)
