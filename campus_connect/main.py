"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from campus_connect import __version__
from campus_connect.api.routes import router as api_router
from campus_connect.api.routes.chat import chat_hub_endpoint
from campus_connect.core.config import settings
from campus_connect.core.database import SessionLocal
from campus_connect.core.errors import CampusConnectError
from campus_connect.services.chat import SqlMessageStore
from campus_connect.services.chat_hub import ChatHub

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    await app.state.chat_hub.close_all()


app = FastAPI(
    title="Campus Connect API",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.state.chat_hub = ChatHub(
    SqlMessageStore(SessionLocal),
    max_message_length=settings.CHAT_MESSAGE_MAX_LENGTH,
    outbox_size=settings.CHAT_OUTBOX_SIZE,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CampusConnectError)
async def campus_connect_error_handler(request: Request, exc: CampusConnectError) -> PlainTextResponse:
    """Render domain errors as a plain-text reason with the mapped status code."""
    headers = None
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return PlainTextResponse(exc.message, status_code=exc.status_code, headers=headers)


app.include_router(api_router, prefix=settings.API_PREFIX)
app.add_api_websocket_route(settings.CHAT_HUB_PATH, chat_hub_endpoint)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Campus Connect API"}
