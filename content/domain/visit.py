from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

VISIT_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


@dataclass
class Visit:
    visitor_id: str
    visited_at: datetime
    id: Optional[int] = None


def format_visit_timestamp(moment: datetime) -> str:
    """Fixed-width UTC form, so string order and substrings match time order."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(VISIT_TIMESTAMP_FORMAT)


def parse_visit_timestamp(value: str) -> datetime:
    return datetime.strptime(value, VISIT_TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
