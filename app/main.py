import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.routes import prompts, settings as settings_routes, generate, webhooks
from app.db.base import Base
from app.db.sessions import engine
from app.core.config import settings
from app.core.exceptions import PromptVaultError

# Import all models to ensure they're registered with Base
import app.models

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Store, browse and improve your AI prompts"
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(prompts.router)
app.include_router(settings_routes.router)
app.include_router(generate.router)
app.include_router(webhooks.router)


@app.exception_handler(PromptVaultError)
async def prompt_vault_error_handler(request: Request, exc: PromptVaultError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.on_event("startup")
async def startup_event():
    # Create tables
    Base.metadata.create_all(bind=engine)
    logger.info("%s v%s starting", settings.APP_NAME, settings.APP_VERSION)
    logger.info("Pagination strategy: %s", settings.PAGINATION_STRATEGY)


@app.get("/health")
def health():
    return {"status": "ok"}
