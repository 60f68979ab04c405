"""AI-assisted prompt generation routes."""
from typing import Literal, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pydantic import BaseModel

from app.db.sessions import get_db
from app.core.exceptions import ConfigurationError
from app.core.security import get_current_external_id
from app.services.openai_service import PromptGenerator
from app.services.settings_store import SettingsStore


router = APIRouter(prefix="/generate", tags=["Generate"])


class GenerateRequest(BaseModel):
    mode: Literal["improve", "generate"]
    category: str = "other"
    existing_text: Optional[str] = None
    idea_text: Optional[str] = None


class GenerateResponse(BaseModel):
    success: bool = True
    text: str


def get_prompt_generator() -> PromptGenerator:
    return PromptGenerator()


@router.post("", response_model=GenerateResponse)
def generate_prompt(
    request: GenerateRequest,
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
    generator: PromptGenerator = Depends(get_prompt_generator),
):
    """
    Improve or generate a prompt with the caller's stored OpenAI API key.

    Failures are not retried; an invalid key returns 401 so the client can
    send the user back to Settings.
    """
    api_key = SettingsStore(db).get_secret_plaintext_for_external_id(external_id)
    if not api_key:
        raise ConfigurationError("No OpenAI API key found. Please add your API key in Settings.")

    text = generator.generate(
        api_key=api_key,
        mode=request.mode,
        category=request.category,
        existing_text=request.existing_text,
        idea_text=request.idea_text,
    )
    return GenerateResponse(text=text)
