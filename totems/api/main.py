from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog
import time

from totems.api.routers.totems import router as totems_router
from totems.config import settings
from totems.services.error_handler import ErrorHandler
from totems.utils.exceptions import TotemsException
from totems.utils.logging import setup_logging

setup_logging()
logger = structlog.get_logger()
error_handler = ErrorHandler()

app = FastAPI(
    title="Totems",
    description="Multi-asset totem registry API",
    version=settings.REGISTRY_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(totems_router, tags=["Totems"])


@app.exception_handler(TotemsException)
async def totems_exception_handler(request, exc: TotemsException):
    body = error_handler.handle_registry_error(exc, {"path": request.url.path, "method": request.method})
    return JSONResponse(status_code=error_handler.http_status(exc), content=body)


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.middleware("http")
async def log_requests(request, call_next):
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)

    started = time.perf_counter()
    response = await call_next(request)

    logger.info(
        "Request completed",
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return response


@app.get("/")
async def root():
    return {"message": "Totems Registry API", "version": settings.REGISTRY_VERSION}


@app.get("/v1/health")
async def health():
    return {"status": "healthy", "version": settings.REGISTRY_VERSION}
