import re

from fastapi import APIRouter, Depends, Query

from content.adapter.input.web.dependencies import (
    get_daily_pick_usecase,
    get_ingestion_usecase,
    get_repository,
)
from content.application.port.content_repository_port import ContentRepositoryPort
from content.application.usecase.daily_pick_usecase import DailyPickUseCase
from content.application.usecase.ingestion_usecase import IngestionUseCase
from content.domain.exceptions import ValidationFailure

video_router = APIRouter(tags=["videos"])


OFFSET_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def parse_offset(raw: str | None) -> int:
    # signed 64-bit decimal only; no spaces, no digit separators
    if raw is None or raw == "":
        return 0
    if not OFFSET_PATTERN.fullmatch(raw):
        raise ValidationFailure("Invalid offset parameter")
    offset = int(raw)
    if not INT64_MIN <= offset <= INT64_MAX:
        raise ValidationFailure("Invalid offset parameter")
    return offset


@video_router.get("/fetch")
def fetch_and_store_playlist_items(usecase: IngestionUseCase = Depends(get_ingestion_usecase)):
    """
    YouTube 재생목록을 가져와 저장하고, 받아온 item 목록을 그대로 돌려준다.
    """
    return usecase.fetch_and_store()


@video_router.get("/videos")
def get_all_videos(repository: ContentRepositoryPort = Depends(get_repository)):
    return [video.to_dict() for video in repository.find_all_videos()]


@video_router.get("/video")
def get_daily_video(
    offset: str | None = Query(default=None, description="Shift from today's video, e.g. -1 for yesterday"),
    usecase: DailyPickUseCase = Depends(get_daily_pick_usecase),
):
    """
    Today's video, or the one ``offset`` days away.

    Answers ``{"exceeded": ...}`` with 200 when no video exists that far ahead.
    """
    result = usecase.resolve(parse_offset(offset))
    return result.to_dict()
