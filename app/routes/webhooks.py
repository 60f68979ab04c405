"""Identity provider webhook.

Clerk posts ``user.created``, ``user.updated`` and ``user.deleted`` events
here. Signatures are verified with the svix library before anything is
written.

Setup: point a Clerk webhook endpoint at ``/webhooks/clerk``, subscribe to
the three user events and put the signing secret in CLERK_WEBHOOK_SECRET.
"""
import json
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session
from svix.webhooks import Webhook, WebhookVerificationError

from app.db.sessions import get_db
from app.core.config import settings
from app.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


def _user_fields(data: dict) -> dict:
    addresses = data.get("email_addresses") or []
    email = addresses[0].get("email_address", "") if addresses else ""
    name = f"{data.get('first_name') or ''} {data.get('last_name') or ''}".strip()
    return {
        "external_id": data["id"],
        "email": email,
        "name": name,
        "image_url": data.get("image_url"),
    }


def apply_identity_event(db: Session, event: dict) -> None:
    """Route a verified identity event to the user directory."""
    event_type = event.get("type")
    data = event.get("data") or {}
    directory = UserDirectory(db)
    logger.info("Processing %s event", event_type)

    if event_type in ("user.created", "user.updated"):
        directory.upsert_by_external_id(**_user_fields(data))
    elif event_type == "user.deleted":
        directory.delete_by_external_id(data["id"])
    else:
        logger.info("Ignoring webhook event type %s", event_type)


@router.post("/clerk")
async def clerk_webhook(request: Request, db: Session = Depends(get_db)):
    headers = {name: request.headers.get(name) for name in SVIX_HEADERS}
    if not all(headers.values()):
        return PlainTextResponse("Missing Svix headers", status_code=400)

    secret = settings.CLERK_WEBHOOK_SECRET
    if not secret:
        logger.error("CLERK_WEBHOOK_SECRET not configured")
        return PlainTextResponse("Webhook secret not configured", status_code=500)

    body = await request.body()
    try:
        # only checks the signature; the return value differs between svix releases
        Webhook(secret).verify(body, headers)
    except WebhookVerificationError as e:
        logger.warning("Webhook verification failed: %s", e)
        return PlainTextResponse("Webhook verification failed", status_code=401)

    try:
        event = json.loads(body)
    except ValueError:
        return PlainTextResponse("Invalid JSON payload", status_code=400)
    if not isinstance(event, dict):
        return PlainTextResponse("Invalid JSON payload", status_code=400)

    # the session is synchronous, keep it off the event loop
    await run_in_threadpool(apply_identity_event, db, event)
    return JSONResponse({"success": True})
