import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pullvalue.api import cards_router, health_router, sets_router
from pullvalue.config import settings
from pullvalue.models.failure import KnownError, create_unknown_failure
from pullvalue.services.card_sources import CardSourceResolver, LiveCardSource, StaticCardCache
from pullvalue.services.lookup import CardLookup
from pullvalue.services.rules_loader import load_eligibility_rules
from pullvalue.services.scryfall_client import ScryfallClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load eligibility rules once and share one lookup service."""
    rules = await load_eligibility_rules()
    async with ScryfallClient() as client:
        resolver = CardSourceResolver(
            cache=StaticCardCache(settings.cache_dir),
            live=LiveCardSource(client, rules),
        )
        app.state.lookup = CardLookup(resolver, rules)
        yield
        app.state.lookup = None


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("pullvalue"),
    lifespan=lifespan,
)

app.include_router(cards_router)
app.include_router(health_router)
app.include_router(sets_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(KnownError)
async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


@app.exception_handler(Exception)
async def unknown_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error")
    return JSONResponse(
        status_code=500,
        content=create_unknown_failure(exc).model_dump(mode="json"),
    )
