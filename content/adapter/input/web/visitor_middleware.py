"""
Visitor tracking for the frontend entry page.

Only ``GET`` requests on the tracked paths (the root by default) are
touched: the visitor cookie is read or minted, a visit is recorded through
``VisitorUseCase`` and the cookie is refreshed on the response.
"""

import logging
from typing import Iterable

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from content.application.usecase.visitor_usecase import VisitorUseCase
from content.domain.exceptions import YogaTubeError

logger = logging.getLogger(__name__)

VISITOR_COOKIE_NAME = "visitor_id"
ONE_YEAR_SECONDS = 365 * 24 * 60 * 60


class VisitorTrackingMiddleware(BaseHTTPMiddleware):
    """Record at most one visit per visitor per window on the tracked paths."""

    def __init__(self, app: ASGIApp, tracked_paths: Iterable[str] = ("/",),
                 cookie_name: str = VISITOR_COOKIE_NAME):
        super().__init__(app)
        self.tracked_paths = frozenset(tracked_paths)
        self.cookie_name = cookie_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method != "GET" or request.url.path not in self.tracked_paths:
            return await call_next(request)

        state = request.app.state
        repository = getattr(state, "repository", None)
        if repository is None:
            logger.warning("Visitor tracking skipped: database is not initialized")
            return await call_next(request)

        usecase = VisitorUseCase(repository)
        visitor_id = usecase.identify(request.cookies.get(self.cookie_name))
        try:
            await run_in_threadpool(usecase.track, visitor_id, state.clock())
        except YogaTubeError as exc:
            # the page is still served when analytics storage fails
            logger.error("Failed to track visitor %s: %s", visitor_id, exc.message)

        response = await call_next(request)
        response.set_cookie(
            key=self.cookie_name,
            value=visitor_id,
            max_age=ONE_YEAR_SECONDS,
            expires=ONE_YEAR_SECONDS,
            path="/",
            httponly=True,
            samesite="lax",
        )
        return response
