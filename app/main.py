# app/main.py

from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from app.core.middleware.rate_limiter import limiter
from app.core.setup.instance import application
from app.api.routers import main_router
from app.core.config import settings
from app.core.middleware.logging import LoggingMiddleware
from app.core.utils import error_handlers
from app.core.utils.exceptions import PersistenceFailure
from app.core.utils.response import standard_response
from app.infra.database.session import get_db_status

main_app = application
main_app.state.limiter = limiter

# =======================================
# MIDDLEWARE
# =======================================
main_app.add_middleware(LoggingMiddleware)

if settings.ALLOWED_ORIGINS:
    allowed_origins = [
        origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",")
    ]
else:
    allowed_origins = ["http://localhost:3000"]

main_app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["authorization", "content-type", "accept", "x-requested-with"],
)


# =======================================
# ROUTERS
# =======================================
main_app.include_router(main_router, prefix="/v1")


# =======================================
# EXCEPTION HANDLERS
# =======================================
main_app.add_exception_handler(RateLimitExceeded, error_handlers.rate_limit_handler)
main_app.add_exception_handler(StarletteHTTPException, error_handlers.http_exception_handler)
main_app.add_exception_handler(RequestValidationError, error_handlers.validation_exception_handler)
main_app.add_exception_handler(PersistenceFailure, error_handlers.persistence_failure_handler)
main_app.add_exception_handler(Exception, error_handlers.generic_exception_handler)


# =======================================
# BASE ROUTES
# =======================================
@main_app.get("/")
def root():
    return standard_response(status="success", message="API is live.")


@main_app.get("/health")
async def health_check():
    db_active = await get_db_status()
    return standard_response(
        status="success",
        message="API health status",
        data={"db_status": "running" if db_active else "down"},
    )
