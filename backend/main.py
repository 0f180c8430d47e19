import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from api.limiter import limiter
from api.router import router
from config import settings
from db.base import dispose_engine, init_db
from services import adzuna_client, huggingface_client, scoring_client

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    # Fails fast on missing Adzuna credentials
    adzuna_client.get_client()
    logger.info("%s started", settings.app_name)
    yield
    await huggingface_client.close_client()
    await adzuna_client.close_client()
    await scoring_client.close_client()
    await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    description="Job search, user management and AI-powered resume skill extraction",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
