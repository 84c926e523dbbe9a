import logging
import time
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from liturgi.adapter.services.mailer import LoggingMailer
from liturgi.adapter.services.rate_limiter import InMemoryRateLimiter, RedisRateLimiter
from liturgi.domain.errors import PermissionDenied, TenantIsolationError

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


def error_body(code: str, message: str, details=None) -> dict:
    body = {"error": message, "code": code}
    if details:
        body["details"] = details
    return body


async def handle_client_error(request: Request, exc: ClientError):
    error = exc.base_error
    logger.warning(f"Client error: {error.code} {error.message} on {request.url.path}")

    if error.code == "RATE_LIMITED" and error.details:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(error.code, error.message),
            headers={"Retry-After": str(error.details[0]["retry_after"])},
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(error.code, error.message, error.details),
    )


async def handle_server_error(request: Request, exc: ServerError):
    logger.error(f"Server error: {exc.base_error.code} {exc.base_error.message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


async def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        {
            "field": ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    logger.warning(f"Validation failed on {request.url.path}: {details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("VALIDATION_FAILED", "Validation failed", details),
    )


async def handle_permission_denied(request: Request, exc: PermissionDenied):
    logger.warning(f"Permission denied: {exc.permission} on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content=error_body("PERMISSION_DENIED", "You do not have permission to do this"),
    )


async def handle_tenant_isolation_error(request: Request, exc: TenantIsolationError):
    logger.error(f"Tenant isolation violation on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=error_body("NOT_FOUND", "Not found"),
    )


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def build_rate_limiter(ApplicationConfig):
    if ApplicationConfig.CACHE_BACKEND == "redis":
        return RedisRateLimiter.from_url(ApplicationConfig.REDIS_URL)
    return InMemoryRateLimiter()


@asynccontextmanager
async def lifespan(app: FastAPI):
    from liturgi.depends import init_db

    await init_db()
    yield


def create_app(ApplicationConfig) -> FastAPI:
    configure_logging(ApplicationConfig.LOG_LEVEL)

    if ApplicationConfig.ENABLE_SENTRY:
        sentry_sdk.init(
            dsn=ApplicationConfig.DSN_SENTRY,
            environment=ApplicationConfig.SENTRY_ENVIRONMENT,
        )

    app = FastAPI(title="Liturgi API", version="0.1.0", lifespan=lifespan)
    app.state.rate_limiter = build_rate_limiter(ApplicationConfig)
    app.state.mailer = LoggingMailer()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
            )
            return response

    from liturgi.api.routes import (
        account,
        admin,
        attendance,
        audit,
        auth,
        custom_fields,
        dashboard,
        forms,
        groups,
        health_check,
        households,
        invites,
        organization,
        people,
        services,
        songs,
        tags,
        templates,
        users,
        workflows,
    )

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth.router, prefix=prefix, tags=["Authentication"])
    app.include_router(account.router, prefix=prefix, tags=["Account"])
    app.include_router(users.router, prefix=prefix, tags=["Users"])
    app.include_router(invites.router, prefix=prefix, tags=["Invites"])
    app.include_router(organization.router, prefix=prefix, tags=["Organization"])
    app.include_router(audit.router, prefix=prefix, tags=["Audit"])
    app.include_router(people.router, prefix=prefix, tags=["People"])
    app.include_router(households.router, prefix=prefix, tags=["Households"])
    app.include_router(tags.router, prefix=prefix, tags=["Tags"])
    app.include_router(custom_fields.router, prefix=prefix, tags=["Custom Fields"])
    app.include_router(groups.router, prefix=prefix, tags=["Groups"])
    app.include_router(services.router, prefix=prefix, tags=["Services"])
    app.include_router(songs.router, prefix=prefix, tags=["Songs"])
    app.include_router(templates.router, prefix=prefix, tags=["Templates"])
    app.include_router(forms.router, prefix=prefix, tags=["Forms"])
    app.include_router(workflows.router, prefix=prefix, tags=["Workflows"])
    app.include_router(attendance.router, prefix=prefix, tags=["Attendance"])
    app.include_router(dashboard.router, prefix=prefix, tags=["Dashboard"])
    app.include_router(admin.router, prefix=prefix, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(PermissionDenied, handle_permission_denied)
    app.add_exception_handler(TenantIsolationError, handle_tenant_isolation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
