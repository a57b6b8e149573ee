"""
FastAPI dependencies that hand route handlers their use cases.

Collaborators live on ``app.state`` and are placed there by ``create_app`` or
by the lifespan at startup; nothing here builds a connection on first use.
"""

from fastapi import Request, status

from content.application.port.content_repository_port import ContentRepositoryPort
from content.application.usecase.daily_pick_usecase import DailyPickUseCase
from content.application.usecase.ingestion_usecase import IngestionUseCase
from content.application.usecase.visitor_usecase import VisitorUseCase
from content.domain.exceptions import StorageFailure, UpstreamFailure


def get_repository(request: Request) -> ContentRepositoryPort:
    repository = getattr(request.app.state, "repository", None)
    if repository is None:
        raise StorageFailure(
            "Database is not initialized",
            http_status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return repository


def get_ingestion_usecase(request: Request) -> IngestionUseCase:
    client = getattr(request.app.state, "platform_client", None)
    if client is None:
        raise UpstreamFailure(
            "YouTube client is not configured",
            http_status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return IngestionUseCase(get_repository(request), client)


def get_daily_pick_usecase(request: Request) -> DailyPickUseCase:
    return DailyPickUseCase(
        get_repository(request),
        request.app.state.rotation_state,
        clock=request.app.state.clock,
    )


def get_visitor_usecase(request: Request) -> VisitorUseCase:
    return VisitorUseCase(get_repository(request))
