"""
MockPrep - AI-Powered Mock Interview Backend

Main application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mockprep.api.dependencies import cleanup
from mockprep.api.router import api_router
from mockprep.config.settings import get_settings
from mockprep.core.exceptions import MockPrepError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info("Starting MockPrep...")
    settings = get_settings()
    logger.info(f"Running in {'debug' if settings.debug else 'production'} mode")
    if not settings.gemini_configured:
        logger.warning("GEMINI_API_KEY is not set; model-backed endpoints will fail")

    yield

    # Shutdown
    logger.info("Shutting down MockPrep...")
    await cleanup()


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="AI-Powered Mock Interview Backend",
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount API routes
app.include_router(api_router, prefix="/api")


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(MockPrepError)
async def mockprep_error_handler(request: Request, exc: MockPrepError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted({
        str(error["loc"][-1])
        for error in exc.errors()
        if error.get("loc")
    })
    return JSONResponse(
        status_code=400,
        content={
            "error": f"Invalid request fields: {', '.join(fields)}" if fields else "Invalid request",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"field": ".".join(str(part) for part in error.get("loc", ())), "message": error.get("msg", "")}
        for error in exc.errors()
    ]


# ============================================================================
# ROOT ROUTES
# ============================================================================

@app.get("/")
async def root():
    """Service banner with the available endpoints."""
    return {
        "message": f"{settings.app_name} API Server",
        "version": settings.app_version,
        "endpoints": {
            "health": "GET /api/health",
            "generateQuestions": "POST /api/generate-questions",
            "saveSession": "POST /api/save-session",
            "analyzeResume": "POST /api/analyze-resume",
            "generateFeedback": "POST /api/generate-feedback",
            "sessionFeedback": "GET /api/feedback/session/{sessionId}",
            "userFeedback": "GET /api/feedback/user/{userId}",
            "userAnalytics": "GET /api/feedback/user/{userId}/analytics",
        },
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
