"""FastAPI application entrypoint. No business logic; only wiring, middleware and error handlers."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import router as api_router
from app.api.auth import enforce_access_policy
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logging import configure_logging

API_PREFIX = "/api"

configure_logging(settings)

# Every routed request passes through the access policy before its handler runs.
app = FastAPI(
    title="User Management API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    dependencies=[Depends(enforce_access_policy)],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router, prefix=API_PREFIX)
