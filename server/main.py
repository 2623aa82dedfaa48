"""
RepoRadar API

FastAPI application exposing the repository scoring pipeline.
"""

import asyncio
import logging
from collections.abc import AsyncIterator

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from config import get_settings
from logging_config import setup_logging
from scoring.errors import RATE_LIMIT_MESSAGE, ScanError, looks_rate_limited
from scoring.pipeline import run_scan
from scoring.ports import RepositorySource, TextGenerator
from scoring.schemas import ScanRequest, ScanResponse
from services.github import GitHubClient
from services.llm import build_text_generator

setup_logging()
logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(
    title="RepoRadar API",
    description="Scores GitHub repositories on security, code quality and best practices",
    version="1.0.0",
)

# Rate limiting
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests. Please try again later."},
    )


@app.exception_handler(ScanError)
async def scan_error_handler(request: Request, exc: ScanError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.allowed_origins),
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================

async def get_repository_source() -> AsyncIterator[RepositorySource]:
    """One GitHub client per scan, closed when the request finishes."""
    async with GitHubClient(
        token=settings.github_token,
        base_url=settings.github_api_url,
        timeout=settings.http_timeout,
    ) as client:
        yield client


def get_text_generator() -> TextGenerator | None:
    return build_text_generator(
        settings.gemini_api_key,
        settings.gemini_model,
        settings.http_timeout,
    )


# =============================================================================
# API ENDPOINTS
# =============================================================================

@app.get("/")
def read_root():
    """Health check endpoint."""
    return {"status": "ok", "version": "1.0.0", "message": "RepoRadar API"}


@app.post("/scan", response_model=ScanResponse)
@limiter.limit(settings.scan_rate_limit)
async def scan_repo(
    request: Request,
    body: ScanRequest,
    source: RepositorySource = Depends(get_repository_source),
    generator: TextGenerator | None = Depends(get_text_generator),
):
    """
    Scan a GitHub repository.

    Fetches a prioritized subset of its files, runs the security, code quality
    and best-practices analyzers, combines the scores and attaches a short
    summary with three recommendations.
    """
    try:
        result = await run_scan(
            body.url,
            source,
            generator,
            concurrency=settings.content_fetch_concurrency,
            timeout=settings.scan_timeout,
        )
    except ScanError as e:
        logger.error(f"Scan failed for {body.url}: {e.message}")
        raise
    except asyncio.TimeoutError:
        logger.error(f"Scan timed out for {body.url}")
        raise HTTPException(status_code=504, detail="Repository scan timed out. Please try again.")
    except Exception as e:
        logger.exception(f"Scan error for {body.url}")
        if looks_rate_limited(str(e)):
            raise HTTPException(status_code=429, detail=RATE_LIMIT_MESSAGE)
        raise HTTPException(status_code=500, detail="Failed to analyze repository")

    return ScanResponse(repository=result.repository, analysis=result.analysis)
