import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.routes.sessions import router as sessions_router
from app.services.errors import GenerationBlocked, StudioError

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    # read directly: settings may not be loadable yet (no API key) and /health must still work
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def studio_error_handler(request: Request, exc: StudioError) -> JSONResponse:
    body = {"detail": exc.message, "error": exc.code}
    if isinstance(exc, GenerationBlocked):
        body["kind"] = exc.kind.value
        body["finish_reason"] = exc.finish_reason
    if exc.status_code >= 500:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=body)


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Face Fusion Studio", version="1.0.0")
    app.add_exception_handler(StudioError, studio_error_handler)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(sessions_router)
    return app


app = create_app()
