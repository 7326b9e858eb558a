"""
Voice2Action - FastAPI Application Entry Point

Citizens report local civic problems, follow them with a tracking id and
upvote what matters to them; administrators move issues through their
lifecycle; the public sees resolution metrics and can draft a budget that
follows the reported needs.

DESIGN PRINCIPLES:
- Category and urgency are assigned once, at submission
- Every mutation is a single atomic per-document write
- Metrics are computed per request from the store, never cached
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from voice2action.core.errors import Voice2ActionError
from voice2action.core.settings import cors_origins_list, settings
from voice2action.routes import admin, analytics, budget, health, issues, orgs

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect Firestore before serving (skipped with USE_MOCK_DB)."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    if settings.USE_MOCK_DB:
        logger.info("USE_MOCK_DB is set, issues and organizations live in memory")
    else:
        from voice2action.config.firebase import initialize_firestore
        try:
            initialize_firestore()
        except Exception as e:
            # Serve anyway; /health/db reports the failure
            logger.error(f"Firestore initialization failed: {e}", exc_info=True)

    yield
    logger.info(f"Shutting down {settings.APP_NAME}")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Civic issue reporting, tracking, public metrics and participatory budgeting",
    debug=settings.DEBUG,
    lifespan=lifespan
)


@app.exception_handler(Voice2ActionError)
async def domain_exception_handler(request: Request, exc: Voice2ActionError):
    """ValidationError -> 400, NotFoundError -> 404."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": exc.message}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"🔥 Rejected body/query on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"ok": False, "error": "Invalid request", "detail": exc.errors()}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort: log with traceback, fail only this request."""
    logger.error(
        f"🔥 Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"ok": False, "error": f"Internal server error: {str(exc)}"}
    )


# Only the configured frontends, never "*"
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (health, issues, admin, analytics, orgs, budget):
    app.include_router(module.router)


@app.get("/")
async def root():
    """Service info and entry points."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "health": "/health",
        "issues": "/api/issues",
        "metrics": "/api/metrics"
    }
