import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobboard.api.routes import applications, auth, bookmarks, health, jobs, payments, subscriptions
from jobboard.core import config
from jobboard.core.errors import AppError
from jobboard.core.logging_config import setup_logging
from jobboard.core.security import TokenCodec
from jobboard.services.payment_provider import build_payment_provider

logger = logging.getLogger(__name__)


# ============================================
# ✅ STARTUP
# ============================================

def prepare_database() -> None:
    """Migrate (RUN_MIGRATIONS=1) or create tables, then seed roles and plans."""
    from jobboard.db.init_db import init_db, seed_reference_data
    from jobboard.db.migrate import run_migrations
    from jobboard.db.session import SessionLocal

    if config.RUN_MIGRATIONS:
        run_migrations()
    else:
        init_db()

    db = SessionLocal()
    try:
        seed_reference_data(db)
    finally:
        db.close()


def configure_services(app: FastAPI) -> None:
    """
    Build the token codec and payment provider from config.

    Raises ValueError when SECRET_KEY or PAYMENT_SIGNING_SECRET is unset.
    """
    app.state.token_codec = TokenCodec(
        config.SECRET_KEY,
        algorithm=config.ALGORITHM,
        validity=timedelta(days=config.ACCESS_TOKEN_EXPIRE_DAYS),
    )
    app.state.payment_provider = build_payment_provider(
        config.STRIPE_SECRET_KEY,
        config.PAYMENT_SIGNING_SECRET,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_DIR)
    logger.info(f"Starting Job Board API (env={config.APP_ENV})")
    configure_services(app)
    prepare_database()
    yield
    logger.info("Shutting down Job Board API")


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Job Board API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ ERROR HANDLERS
# ============================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Input values are not echoed back; they may contain passwords
    details = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    logger.warning(f"Validation failed: {request.method} {request.url.path} {details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "code": "validation_error", "details": details},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    body = {"error": "Internal Server Error", "code": "internal_error"}
    if config.IS_DEVELOPMENT:
        body["details"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

for router in (
    auth.router,
    jobs.router,
    applications.router,
    bookmarks.router,
    subscriptions.router,
    payments.router,
    health.router,
):
    app.include_router(router, prefix="/api")


@app.get("/")
def root():
    return {"status": "Job Board API running"}
