import logging
from datetime import datetime, timezone
from typing import Callable

from content.application.port.content_repository_port import ContentRepositoryPort
from content.domain.exceptions import NotFoundError, StorageFailure
from content.domain.rotation_state import Exceeded, RotationState
from content.domain.video import Video

logger = logging.getLogger(__name__)

# row ids are signed 64-bit integers in every supported database
MAX_ROW_ID = 2 ** 63 - 1


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DailyPickUseCase:
    def __init__(
        self,
        repository: ContentRepositoryPort,
        state: RotationState,
        clock: Callable[[], datetime] = utc_now,
    ):
        # 오늘의 영상: 하루에 한 번 index를 올리고 offset으로 앞뒤 영상을 고른다.
        self.repository = repository
        self.state = state
        self.clock = clock

    def rotate(self, today: str) -> bool:
        """Advance the index when the UTC date differs from the last rotation."""
        if today == self.state.last_rotation_date:
            return False
        self.state.last_rotation_date = today
        self.state.index += 1
        logger.info("Daily video rotated to index %d on %s", self.state.index, today)
        return True

    def resolve(self, offset: int = 0) -> Video | Exceeded:
        """
        Return today's video shifted by ``offset``.

        Out of range targets wrap once: an index past the table resets to row 1,
        a target past the last row yields ``Exceeded`` and a target at or below
        zero counts back from the last row. Wider offsets are not folded again.
        """
        self.rotate(self.clock().astimezone(timezone.utc).date().isoformat())

        target = self.state.index + offset
        try:
            return self._find(target)
        except NotFoundError:
            pass

        total = self.repository.count_videos()

        if self.state.index > total:
            logger.info("Daily index %d exceeds %d videos, restarting at 1", self.state.index, total)
            self.state.index = 1
            return self._fetch_or_fail(1, "Failed to fetch video")
        if target > total:
            return Exceeded()
        if target <= 0:
            return self._fetch_or_fail(total + target, "Failed to fetch last video")
        raise StorageFailure(f"Video with id={target} is missing although {total} videos are stored")

    def _fetch_or_fail(self, row_id: int, message: str) -> Video:
        try:
            return self._find(row_id)
        except NotFoundError as exc:
            raise StorageFailure(f"{message}: {exc.message}") from exc

    def _find(self, row_id: int) -> Video:
        if not 1 <= row_id <= MAX_ROW_ID:
            raise NotFoundError(f"Video with id={row_id} not found")
        return self.repository.find_video_by_id(row_id)
