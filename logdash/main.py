import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from logdash.api import analytics, chat_logs, devices, search_logs, search_settings, worker
from logdash.core.redis_client import close_redis_client, get_redis_client
from logdash.core.worker_client import WorkerAPIError

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await get_redis_client()
    logger.info("logdash started")
    yield
    await close_redis_client()
    logger.info("logdash stopped")


app = FastAPI(title="logdash", version="1.0.0", lifespan=lifespan)

app.include_router(search_logs.router, prefix="/search-logs", tags=["search-logs"])
app.include_router(chat_logs.router, prefix="/chat-logs", tags=["chat-logs"])
app.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
app.include_router(devices.router, prefix="/devices", tags=["devices"])
app.include_router(
    search_settings.router, prefix="/search-settings", tags=["search-settings"]
)
app.include_router(worker.router, prefix="/worker", tags=["worker"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "logdash"}


def _message(exc: Exception) -> str:
    return str(exc.args[0]) if exc.args else str(exc)


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"error": _message(exc)})


@app.exception_handler(KeyError)
async def key_error_handler(request: Request, exc: KeyError):
    return JSONResponse(status_code=404, content={"error": _message(exc)})


@app.exception_handler(PermissionError)
async def permission_error_handler(request: Request, exc: PermissionError):
    return JSONResponse(status_code=403, content={"error": _message(exc)})


@app.exception_handler(WorkerAPIError)
async def worker_error_handler(request: Request, exc: WorkerAPIError):
    logger.error(f"Worker API error on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"error": _message(exc)})
