# civic/main.py
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from civic.core.config import settings
from civic.core.errors import ServiceError, Unauthenticated
from civic.db.session import Base, engine

# регистрируем все модели в metadata
import civic.models  # noqa: F401
from civic.api.v1.router import api_router

log = logging.getLogger("civic")
error_log = logging.getLogger("civic.errors")

# базовый набор заголовков helmet
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "Cross-Origin-Resource-Policy": "same-origin",
}


def _validation_errors(exc: RequestValidationError):
    return [
        {"loc": [str(p) for p in e.get("loc", ())], "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]


def _declared_length(request: Request):
    raw = request.headers.get("content-length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def _service_error(request: Request, exc: ServiceError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
        return JSONResponse(status_code=exc.status_code, content=exc.body(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Validation failed", "errors": _validation_errors(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        # неизвестный маршрут
        message = "Not found" if exc.status_code == 404 else exc.detail
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(SQLAlchemyError)
    async def _store_error(request: Request, exc: SQLAlchemyError):
        error_log.exception("unhandled store error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        error_log.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app() -> FastAPI:
    app = FastAPI(title="Civic Issue Reporter API", version="0.1.0")

    origins = settings.cors_origins_list or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # порядок: последний добавленный middleware выполняется первым
    @app.middleware("http")
    async def _body_limit(request: Request, call_next):
        size = _declared_length(request)
        if size is not None and size > settings.MAX_BODY_BYTES:
            log.warning("body too large: %s %s (%d bytes)", request.method, request.url.path, size)
            return JSONResponse(status_code=413, content={"message": "Payload too large"})
        return await call_next(request)

    @app.middleware("http")
    async def _security_headers(request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response

    @app.middleware("http")
    async def _access_log(request: Request, call_next):
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            log.info("%s %s -> %s (%.1f ms)", request.method, request.url.path,
                     status_code, (time.perf_counter() - started) * 1000)

    register_error_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.on_event("startup")
    def on_startup():
        if settings.AUTO_CREATE_TABLES:
            log.info("Creating tables if missing (AUTO_CREATE_TABLES=1)")
            Base.metadata.create_all(bind=engine)
        log.info("Civic API ready, env=%s prefix=%r", settings.ENVIRONMENT, settings.API_PREFIX or "/")

    return app


app = create_app()
