from abc import ABC, abstractmethod
from datetime import datetime

from content.domain.video import Video
from content.domain.visit import Visit


class ContentRepositoryPort(ABC):
    @abstractmethod
    def insert_video(self, video: Video) -> int:
        raise NotImplementedError

    @abstractmethod
    def find_video_by_id(self, row_id: int) -> Video:
        raise NotImplementedError

    @abstractmethod
    def find_all_videos(self) -> list[Video]:
        raise NotImplementedError

    @abstractmethod
    def count_videos(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def record_visit(self, visitor_id: str, visited_at: datetime) -> Visit:
        raise NotImplementedError

    @abstractmethod
    def last_visit(self, visitor_id: str) -> datetime | None:
        raise NotImplementedError

    # 방문 통계 조회
    @abstractmethod
    def aggregate_visits_by_day(self) -> list[tuple[str, int]]:
        raise NotImplementedError

    @abstractmethod
    def aggregate_visits_by_half_hour(self) -> list[tuple[str, int]]:
        raise NotImplementedError

    @abstractmethod
    def health(self) -> dict[str, str]:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError
