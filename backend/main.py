import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from code_highlighter.config import Settings, get_settings
from code_highlighter.routers import documents, highlights
from code_highlighter.services.highlight_manager import HighlightManager

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """Log to stdout, and also to ``settings.log_file`` when configured."""
    if logging.getLogger().handlers:
        # Already configured by the host (uvicorn --log-config, pytest, ...)
        return

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))

    logging.basicConfig(
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Code Highlighter service starting...")
        app.state.highlight_manager = HighlightManager(settings)
        try:
            yield
        finally:
            logger.info("Code Highlighter service shutting down...")
            app.state.highlight_manager.dispose()

    app = FastAPI(title="Code Highlighter API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = datetime.now()
        logger.info(f">>> Incoming request: {request.method} {request.url.path}")

        try:
            response = await call_next(request)
            duration = (datetime.now() - start_time).total_seconds()
            logger.info(
                f"<<< Response: {request.method} {request.url.path} - Status: {response.status_code} - Duration: {duration:.3f}s"
            )
            return response
        except Exception as e:
            duration = (datetime.now() - start_time).total_seconds()
            logger.error(
                f"!!! Request failed: {request.method} {request.url.path} - Duration: {duration:.3f}s - Error: {str(e)}",
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error. Check logs for details."},
            )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def read_root():
        logger.info("Root endpoint accessed")
        return {"message": "Code Highlighter API", "status": "running"}

    @app.get("/health")
    async def health_check():
        logger.info("Health check endpoint accessed")
        return {"status": "healthy"}

    # Include routers
    app.include_router(highlights.router)
    app.include_router(documents.router)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
