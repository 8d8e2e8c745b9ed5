"""ElderEase: task coordination between elderly requesters and volunteers."""

from __future__ import annotations

import logging
import re
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException

from elderease.api.router import api_router
from elderease.config import settings
from elderease.content import render_response
from elderease.database import close_db, init_db, seed_from_file
from elderease.rate_limit import limiter

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("elderease")


@asynccontextmanager
async def lifespan(app: FastAPI):
    db_url = settings.database_url
    if not db_url.startswith("sqlite"):
        Path(db_url).parent.mkdir(parents=True, exist_ok=True)
        db_url = f"sqlite+aiosqlite:///{db_url}"
    await init_db(db_url)
    safe_url = re.sub(r"://[^:]+:[^@]+@", "://***:***@", db_url)
    logger.info("Database connected: %s", safe_url)

    if settings.seed_file:
        await seed_from_file(settings.seed_file)

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info("Serving uploads from %s", Path(settings.upload_dir).resolve())

    yield

    await close_db()
    logger.info("Database closed")


app = FastAPI(
    title="ElderEase",
    description="Task coordination between elderly requesters and volunteers",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Declared before the API routes so the /{collection} fallback cannot shadow it.
@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(api_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return render_response(
        {"success": False, "message": exc.detail},
        status_code=exc.status_code,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return render_response(
        {"success": False, "message": "Invalid request parameters"},
        status_code=400,
    )


def main():
    import uvicorn

    uvicorn.run(
        "elderease.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )


if __name__ == "__main__":
    main()
