"""User settings routes."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from pydantic import BaseModel

from app.db.sessions import get_db
from app.core.exceptions import ValidationError
from app.core.security import get_current_external_id
from app.services.settings_store import SettingsStore


router = APIRouter(prefix="/settings", tags=["Settings"])


class SetKeyRequest(BaseModel):
    api_key: str


class KeyStatusResponse(BaseModel):
    has_api_key: bool


class SettingsResponse(BaseModel):
    has_api_key: bool
    created_at: str
    updated_at: str


@router.get("", response_model=SettingsResponse)
def get_settings(
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    store = SettingsStore(db)
    record = store.get_for_external_id(external_id)
    if record is None:
        # user exists but the settings row was never created
        return SettingsResponse(has_api_key=False, created_at="", updated_at="")
    return SettingsResponse(
        has_api_key=bool(record.openai_api_key),
        created_at=record.created_at.isoformat(),
        updated_at=record.updated_at.isoformat(),
    )


@router.put("/openai-key", response_model=KeyStatusResponse)
def set_openai_key(
    request: SetKeyRequest,
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    api_key = request.api_key.strip()
    if not api_key:
        raise ValidationError("API key is required")
    SettingsStore(db).set_secret_for_external_id(external_id, api_key)
    return KeyStatusResponse(has_api_key=True)


@router.get("/openai-key/status", response_model=KeyStatusResponse)
def openai_key_status(
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    return KeyStatusResponse(has_api_key=SettingsStore(db).has_secret_for_external_id(external_id))


@router.delete("/openai-key", status_code=status.HTTP_204_NO_CONTENT)
def clear_openai_key(
    external_id: str = Depends(get_current_external_id),
    db: Session = Depends(get_db),
):
    SettingsStore(db).clear_secret_for_external_id(external_id)
