import logging
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config.database.session import create_db_engine, create_session_factory, init_db_schema
from config.logging_config import setup_logging
from config.settings import DatabaseSettings, ServerSettings, YouTubeSettings
from content.adapter.input.web.analytics_router import analytics_router
from content.adapter.input.web.video_router import video_router
from content.adapter.input.web.visitor_middleware import VisitorTrackingMiddleware
from content.application.port.content_repository_port import ContentRepositoryPort
from content.application.port.platform_client_port import PlatformClientPort
from content.application.usecase.daily_pick_usecase import utc_now
from content.domain.exceptions import YogaTubeError
from content.domain.rotation_state import RotationState
from content.infrastructure.client.youtube_client import YouTubeClient
from content.infrastructure.repository.content_repository_impl import ContentRepositoryImpl

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build whatever collaborators were not injected, and release them on shutdown.

    A schema creation failure propagates and aborts startup.
    """
    owned_repository = None
    if app.state.repository is None:
        db_settings = DatabaseSettings()
        engine = create_db_engine(db_settings)
        init_db_schema(engine)
        owned_repository = ContentRepositoryImpl(
            engine, create_session_factory(engine), db_settings.health_timeout_seconds
        )
        app.state.repository = owned_repository

    if app.state.platform_client is None:
        youtube_settings = YouTubeSettings()
        if not youtube_settings.api_key:
            logger.warning("YOUTUBE_API_KEY is not defined; /api/v1/fetch will fail upstream.")
        app.state.platform_client = YouTubeClient(youtube_settings)

    try:
        yield
    finally:
        if owned_repository is not None:
            owned_repository.close()
            app.state.repository = None


async def yogatube_error_handler(request: Request, exc: YogaTubeError) -> JSONResponse:
    level = logging.ERROR if exc.http_status_code >= 500 else logging.WARNING
    logger.log(level, "%s %s failed: [%s] %s", request.method, request.url.path, exc.error_code, exc.message)
    return JSONResponse(
        status_code=exc.http_status_code,
        content={"status_code": exc.http_status_code, "error_message": exc.message},
        headers={"X-Error-Code": exc.error_code},
    )


def create_app(
    repository: ContentRepositoryPort | None = None,
    platform_client: PlatformClientPort | None = None,
    rotation_state: RotationState | None = None,
    clock: Callable[[], datetime] = utc_now,
    settings: ServerSettings | None = None,
) -> FastAPI:
    settings = settings or ServerSettings()
    app = FastAPI(title="YogaTube API", version="0.1.0", lifespan=lifespan)

    app.state.repository = repository
    app.state.platform_client = platform_client
    app.state.rotation_state = rotation_state or RotationState()
    app.state.clock = clock

    app.add_exception_handler(YogaTubeError, yogatube_error_handler)

    app.add_middleware(VisitorTrackingMiddleware, tracked_paths=("/",))
    # added last so it wraps everything, preflight included
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Accept", "Authorization", "Content-Type", "X-CSRF-Token"],
    )

    @app.get("/health")
    def health_check(request: Request) -> dict[str, str]:
        """
        데이터베이스 상태와 커넥션 풀 통계를 돌려준다. 장애 시에도 200으로 응답한다.
        """
        repo = request.app.state.repository
        if repo is None:
            return {"status": "down", "error": "db down: database is not initialized"}
        return repo.health()

    app.include_router(video_router, prefix="/api/v1")
    app.include_router(analytics_router, prefix="/api/v1")

    frontend_dir = Path(settings.frontend_dir)
    if frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")
        logger.info("Serving frontend from %s", frontend_dir)
    else:
        logger.info("Frontend directory %s not found; static files are not served.", frontend_dir)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = ServerSettings()
    setup_logging(level=settings.log_level, structured=settings.log_structured, log_file=settings.log_file)
    logger.info("Listening on port: %d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
