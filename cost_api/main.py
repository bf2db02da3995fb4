import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from cost_api.api.routes import router as costs_router
from cost_api.core.config import AppConfig, get_settings
from cost_api.core.errors import CostServiceError, ValidationError
from cost_api.core.logging import configure_logging
from cost_api.db.session import dispose_engine, init_db

app_config = AppConfig()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield
    await dispose_engine()


def create_app(run_startup: bool = True) -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description=app_config.description,
        version=app_config.version,
        lifespan=lifespan if run_startup else None,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        latency_ms = round((time.perf_counter() - start_time) * 1000, 2)
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "Handled request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            latency_ms=latency_ms,
        )
        return response

    @app.exception_handler(CostServiceError)
    async def handle_cost_service_error(request: Request, exc: CostServiceError) -> JSONResponse:
        logger.warning(
            "Request failed",
            error_type=type(exc).__name__,
            error=exc.message,
            path=request.url.path,
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return await handle_cost_service_error(request, ValidationError.from_errors(exc.errors()))

    app.include_router(costs_router)

    @app.get("/")
    async def root():
        return {"message": "Cost REST API is running", "version": app_config.version}

    @app.get("/healthz", response_model=dict)
    async def healthz() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
