"""Prompt routes."""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from pydantic import BaseModel

from app.db.sessions import get_db
from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.security import get_current_external_id
from app.models import Prompt
from app.services.pagination import CursorPage, CursorStrategy, PageNumberStrategy, clamp_page_size
from app.services.prompt_store import PromptStore, ByCategory, ALL_CATEGORIES


router = APIRouter(prefix="/prompts", tags=["Prompts"])


# Request/Response schemas
class PromptRequest(BaseModel):
    title: str
    prompt_text: str
    category: str = "other"


class PromptResponse(BaseModel):
    id: str
    user_id: str
    title: str
    prompt_text: str
    category: str
    is_favorited: bool
    created_at: str
    updated_at: str


class PromptListResponse(BaseModel):
    prompts: List[PromptResponse]
    category: str
    strategy: str
    # page strategy
    total: Optional[int] = None
    total_pages: Optional[int] = None
    current_page: Optional[int] = None
    # cursor strategy
    has_more: Optional[bool] = None
    next_cursor: Optional[str] = None


class CreatePromptResponse(BaseModel):
    id: str


class FavoriteResponse(BaseModel):
    id: str
    is_favorited: bool


class CategoriesResponse(BaseModel):
    categories: List[str]


def _to_response(prompt: Prompt) -> PromptResponse:
    return PromptResponse(
        id=str(prompt.id),
        user_id=str(prompt.user_id),
        title=prompt.title,
        prompt_text=prompt.prompt_text,
        category=prompt.category,
        is_favorited=prompt.is_favorited,
        created_at=prompt.created_at.isoformat(),
        updated_at=prompt.updated_at.isoformat(),
    )


@router.post("", response_model=CreatePromptResponse, status_code=status.HTTP_201_CREATED)
def create_prompt(
    request: PromptRequest,
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    prompt_id = PromptStore(db).create(external_id, request.title, request.prompt_text, request.category)
    return CreatePromptResponse(id=str(prompt_id))


@router.get("", response_model=PromptListResponse)
def list_prompts(
    category: Optional[str] = Query(None),
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    cursor: Optional[str] = Query(None),
    strategy: Optional[str] = Query(None, description="page or cursor"),
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    """
    List the caller's prompts, newest first.

    - ``category`` filters by category; absent or "all" lists everything
    - ``strategy`` picks page-number or cursor pagination, defaulting to
      the configured PAGINATION_STRATEGY
    """
    strategy_name = strategy or settings.PAGINATION_STRATEGY
    page_size = clamp_page_size(limit, settings.MAX_PAGE_SIZE, settings.DEFAULT_PAGE_SIZE)
    if strategy_name == "cursor":
        chosen = CursorStrategy(cursor=cursor, page_size=page_size)
    elif strategy_name == "page":
        chosen = PageNumberStrategy(page=page, page_size=page_size)
    else:
        raise ValidationError(f"Unknown pagination strategy: {strategy_name}")

    listing = PromptStore(db).list(external_id, category, chosen)
    result = listing.page
    applied = listing.filter.category if isinstance(listing.filter, ByCategory) else ALL_CATEGORIES

    response = PromptListResponse(
        prompts=[_to_response(p) for p in result.items],
        category=applied,
        strategy=strategy_name,
    )
    if isinstance(result, CursorPage):
        response.has_more = result.has_more
        response.next_cursor = result.next_cursor
    else:
        response.total = result.total
        response.total_pages = result.total_pages
        response.current_page = result.current_page
    return response


@router.get("/favorites", response_model=List[PromptResponse])
def list_favorites(
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    return [_to_response(p) for p in PromptStore(db).list_favorited(external_id)]


@router.get("/categories", response_model=CategoriesResponse)
def list_categories():
    return CategoriesResponse(categories=PromptStore.categories())


@router.get("/{prompt_id}", response_model=PromptResponse)
def get_prompt(
    prompt_id: str,
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    return _to_response(PromptStore(db).get_by_id(prompt_id, external_id))


@router.put("/{prompt_id}", response_model=PromptResponse)
def update_prompt(
    prompt_id: str,
    request: PromptRequest,
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    prompt = PromptStore(db).update(prompt_id, external_id, request.title, request.prompt_text, request.category)
    return _to_response(prompt)


@router.post("/{prompt_id}/favorite", response_model=FavoriteResponse)
def toggle_favorite(
    prompt_id: str,
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    is_favorited = PromptStore(db).toggle_favorite(prompt_id, external_id)
    return FavoriteResponse(id=prompt_id, is_favorited=is_favorited)


@router.delete("/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_prompt(
    prompt_id: str,
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    PromptStore(db).delete(prompt_id, external_id)
