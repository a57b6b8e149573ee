from datetime import datetime, timezone
import threading
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from config.database.session import Base
from conftest import make_item, seed_videos
from content.domain.exceptions import DuplicateKeyError, NotFoundError, StorageFailure
from content.domain.video import Video


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def test_insert_assigns_sequential_row_ids(repository):
    first = repository.insert_video(Video.from_playlist_item(make_item("a")))
    second = repository.insert_video(Video.from_playlist_item(make_item("b")))

    assert (first, second) == (1, 2)


def test_count_matches_inserted_rows(repository):
    assert repository.count_videos() == 0

    seed_videos(repository, 4)

    assert repository.count_videos() == 4


def test_duplicate_upstream_id_is_rejected(repository):
    repository.insert_video(Video.from_playlist_item(make_item("a")))

    with pytest.raises(DuplicateKeyError):
        repository.insert_video(Video.from_playlist_item(make_item("a", title="Another title")))

    assert repository.count_videos() == 1


def test_find_video_by_id_returns_stored_fields(repository):
    repository.insert_video(Video.from_playlist_item(make_item("a", title="Sun salutation")))

    video = repository.find_video_by_id(1)

    assert video.id == 1
    assert video.title == "Sun salutation"
    assert video.video_id == "a"
    assert video.thumbnail_url == "https://i.ytimg.com/vi/a/default.jpg"
    assert video.owner_channel_title == "Yoga With Tests"


def test_find_missing_video_raises_not_found(repository):
    with pytest.raises(NotFoundError):
        repository.find_video_by_id(42)


def test_find_all_videos_ordered_by_row_id(repository):
    seed_videos(repository, 3)

    videos = repository.find_all_videos()

    assert [v.id for v in videos] == [1, 2, 3]
    assert [v.video_id for v in videos] == ["vid1", "vid2", "vid3"]


def test_query_error_is_reported_as_storage_failure(repository, engine):
    Base.metadata.drop_all(bind=engine)

    with pytest.raises(StorageFailure):
        repository.count_videos()


def test_last_visit_is_none_for_unknown_visitor(repository):
    assert repository.last_visit("nobody") is None


def test_last_visit_returns_latest_timestamp(repository):
    repository.record_visit("v1", utc(2026, 10, 19, 8, 0))
    repository.record_visit("v1", utc(2026, 10, 19, 9, 15, 30))
    repository.record_visit("v2", utc(2026, 10, 19, 11, 0))

    assert repository.last_visit("v1") == utc(2026, 10, 19, 9, 15, 30)


def test_aggregate_visits_by_day_and_half_hour(repository):
    repository.record_visit("v1", utc(2026, 10, 19, 10, 5))
    repository.record_visit("v2", utc(2026, 10, 19, 10, 29, 59))
    repository.record_visit("v3", utc(2026, 10, 19, 10, 30))
    repository.record_visit("v1", utc(2026, 10, 20, 0, 0))

    assert repository.aggregate_visits_by_day() == [("2026-10-19", 3), ("2026-10-20", 1)]
    assert repository.aggregate_visits_by_half_hour() == [
        ("2026-10-19T10:00", 2),
        ("2026-10-19T10:30", 1),
        ("2026-10-20T00:00", 1),
    ]


def test_health_reports_up(repository):
    stats = repository.health()

    assert stats["status"] == "up"
    assert stats["message"] == "It's healthy"
    assert "pool" in stats


def test_health_reports_down_without_raising(repository):
    error = OperationalError("SELECT 1", {}, Exception("unable to open database file"))
    with patch.object(repository, "_ping", side_effect=error):
        stats = repository.health()

    assert stats["status"] == "down"
    assert "unable to open database file" in stats["error"]


def test_hung_ping_does_not_poison_later_checks(repository):
    repository.health_timeout_seconds = 0.2
    release = threading.Event()
    real_ping = repository._ping
    calls = []

    def ping():
        calls.append(1)
        if len(calls) == 1:
            release.wait(5)
        real_ping()

    with patch.object(repository, "_ping", side_effect=ping):
        first = repository.health()
        second = repository.health()
    release.set()

    assert first["status"] == "down"
    assert "timed out" in first["error"]
    assert second["status"] == "up"


def test_unexpected_ping_error_reports_down(repository):
    with patch.object(repository, "_ping", side_effect=RuntimeError("cannot schedule new futures")):
        stats = repository.health()

    assert stats == {"status": "down", "error": "db down: cannot schedule new futures"}


def test_not_null_violation_is_storage_failure_not_duplicate(repository):
    video = Video.from_playlist_item(make_item("a"))
    video.title = None

    with pytest.raises(StorageFailure):
        repository.insert_video(video)
    assert repository.count_videos() == 0
