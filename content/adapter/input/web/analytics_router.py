from fastapi import APIRouter, Depends

from content.adapter.input.web.dependencies import get_visitor_usecase
from content.adapter.input.web.response.analytics_response import AnalyticsResponse
from content.application.usecase.visitor_usecase import VisitorUseCase

analytics_router = APIRouter(tags=["analytics"])


@analytics_router.get("/analytics", response_model=AnalyticsResponse)
def get_visit_analytics(usecase: VisitorUseCase = Depends(get_visitor_usecase)):
    """
    방문 수를 일별, 30분 단위로 집계해 돌려준다.
    """
    return usecase.summarize()
