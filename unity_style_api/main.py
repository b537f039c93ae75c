"""FastAPI app: /health, /check, /check/batch."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from unity_style_checker import __version__

from .config import get_config_path
from .routes import check_router, health_router, root_router
from .services import get_checker_service

logger = logging.getLogger(__name__)


def validate_config() -> None:
    """Load the checker configuration and warn when it is missing or invalid."""
    config_path = get_config_path()
    if config_path is None:
        logger.info("STYLE_CHECKER_CONFIG not set; using the default rules")
    elif not config_path.exists():
        logger.warning("STYLE_CHECKER_CONFIG points to a missing file: %s", config_path)
    get_checker_service()


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_config()
    yield


app = FastAPI(
    title="Unity C# Style Checker API",
    description="Naming, formatting, comment and ordering checks for Unity C# scripts.",
    version=__version__,
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(root_router)
app.include_router(health_router)
app.include_router(check_router)
