from __future__ import annotations

import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from household_ledger.configs.settings import Settings, get_settings
from household_ledger.configs.logging_config import get_logger, setup_logging
from household_ledger.errors import AppError
from household_ledger.repositories.catalog_repository import CatalogRepository
from household_ledger.repositories.mongo import get_mongo_client, get_mongo_db
from household_ledger.repositories.redis_client import redis_client
from household_ledger.repositories.transaction_repository import TransactionRepository
from household_ledger.repositories.user_repository import UserRepository
from household_ledger.routers.catalog_router import router as catalog_router
from household_ledger.routers.health_router import router as health_router
from household_ledger.routers.transaction_router import router as transaction_router
from household_ledger.routers.user_router import router as user_router
from household_ledger.services.audit import AuditLogger
from household_ledger.utils.response import failure

log = get_logger(__name__)


def _cors_origins(raw_origins) -> list[str]:
    # .env can provide a comma-separated string
    if isinstance(raw_origins, str):
        return [o.strip() for o in raw_origins.split(",") if o.strip()]
    if isinstance(raw_origins, (list, tuple, set)):
        return list(raw_origins)
    return []


def create_app() -> FastAPI:
    app = FastAPI(title="household_ledger", version="0.1.0")
    settings: Settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(settings.CORS_ORIGINS),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = time.perf_counter()
        method = request.method
        path = request.url.path
        request_id = request.headers.get("x-request-id") or request.headers.get("x-correlation-id")

        log.info("request.start method=%s path=%s request_id=%s", method, path, request_id)
        status_code = "unknown"
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            log.info(
                "request.end method=%s path=%s status=%s request_id=%s elapsed_ms=%s",
                method,
                path,
                status_code,
                request_id,
                elapsed_ms,
            )
        return response

    app.include_router(health_router)
    app.include_router(user_router)
    app.include_router(transaction_router)
    app.include_router(catalog_router)

    @app.exception_handler(AppError)
    async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
        log.info("request.error type=app_error status=%s message=%s", exc.http_status, exc.message)
        return JSONResponse(status_code=exc.http_status, content=failure(exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
        log.info("request.error type=validation errors=%s", len(exc.errors()))
        body = failure("validation error")
        body["details"] = jsonable_errors(exc)
        return JSONResponse(status_code=422, content=body)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
        log.exception("Unhandled error: %s", str(exc))
        return JSONResponse(status_code=500, content=failure("internal server error"))

    @app.on_event("startup")
    async def startup() -> None:
        setup_logging()
        settings: Settings = get_settings()

        mongo_client = get_mongo_client(settings)
        mongo_db = get_mongo_db(mongo_client, settings)
        await redis_client.connect()

        app.state.settings = settings
        app.state.mongo_client = mongo_client
        app.state.mongo_db = mongo_db

        transaction_repo = TransactionRepository(mongo_db, settings)
        category_repo = CatalogRepository(mongo_db, settings, "categories")
        vendor_repo = CatalogRepository(mongo_db, settings, "vendors")
        log.info("startup.ensure_indexes begin")
        await transaction_repo.ensure_indexes()
        await category_repo.ensure_indexes()
        await vendor_repo.ensure_indexes()
        log.info("startup.ensure_indexes done")

        app.state.transaction_repo = transaction_repo
        app.state.category_repo = category_repo
        app.state.vendor_repo = vendor_repo
        app.state.user_repo = UserRepository(mongo_db, settings)
        app.state.audit = AuditLogger(redis_client.client, settings.redis_stream_audit)

    @app.on_event("shutdown")
    async def shutdown() -> None:
        log.info("shutdown.begin")
        audit = getattr(app.state, "audit", None)
        if audit is not None:
            await audit.drain()
        await redis_client.close()
        mongo_client = getattr(app.state, "mongo_client", None)
        if mongo_client is not None:
            mongo_client.close()
        log.info("shutdown.done")

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]


app = create_app()
