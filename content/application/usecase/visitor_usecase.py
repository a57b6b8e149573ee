import logging
import uuid
from datetime import datetime, timedelta, timezone

from content.application.port.content_repository_port import ContentRepositoryPort

logger = logging.getLogger(__name__)

VISIT_WINDOW = timedelta(minutes=30)


class VisitorUseCase:
    def __init__(self, repository: ContentRepositoryPort, window: timedelta = VISIT_WINDOW):
        self.repository = repository
        self.window = window

    def identify(self, cookie_value: str | None) -> str:
        if cookie_value and cookie_value.strip():
            return cookie_value.strip()
        # time-based id, only used for analytics
        return uuid.uuid1().hex

    def track(self, visitor_id: str, now: datetime) -> bool:
        """
        Record a visit unless the visitor was already seen within the window.

        Read then write without a transaction: two parallel requests from one
        visitor may both record a row.
        """
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        last = self.repository.last_visit(visitor_id)
        if last is not None and now - last < self.window:
            return False
        self.repository.record_visit(visitor_id, now)
        logger.debug("Recorded visit for %s", visitor_id)
        return True

    def summarize(self) -> dict:
        return {
            "per_day": [
                {"day": day, "visits": visits} for day, visits in self.repository.aggregate_visits_by_day()
            ],
            "per_30_min": [
                {"bucket": bucket, "visits": visits}
                for bucket, visits in self.repository.aggregate_visits_by_half_hour()
            ],
        }
