from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from config.database.session import create_db_engine, create_session_factory, init_db_schema
from config.settings import DatabaseSettings, ServerSettings
from content.application.port.platform_client_port import PlatformClientPort
from content.domain.rotation_state import RotationState
from content.domain.video import Video
from content.infrastructure.repository.content_repository_impl import ContentRepositoryImpl


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class FakePlaylistClient(PlatformClientPort):
    platform = "youtube"

    def __init__(self, items=None, error=None):
        self.items = items or []
        self.error = error
        self.calls = 0

    def fetch_playlist_items(self) -> list[dict]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.items


def make_item(video_id: str, title: str | None = None) -> dict:
    return {
        "kind": "youtube#playlistItem",
        "snippet": {
            "publishedAt": "2024-05-01T08:00:00Z",
            "title": title or f"Yoga {video_id}",
            "description": f"Session {video_id}",
            "thumbnails": {
                "default": {"url": f"https://i.ytimg.com/vi/{video_id}/default.jpg", "width": 120, "height": 90},
                "medium": {"url": f"https://i.ytimg.com/vi/{video_id}/mqdefault.jpg", "width": 320, "height": 180},
            },
            "resourceId": {"kind": "youtube#video", "videoId": video_id},
            "videoOwnerChannelTitle": "Yoga With Tests",
        },
    }


def seed_videos(repository, count: int) -> None:
    for n in range(1, count + 1):
        repository.insert_video(Video.from_playlist_item(make_item(f"vid{n}")))


@pytest.fixture
def engine():
    engine = create_db_engine(DatabaseSettings(url="sqlite://"))
    init_db_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def repository(engine):
    repo = ContentRepositoryImpl(engine, create_session_factory(engine))
    yield repo
    repo.close()


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def frontend_dir(tmp_path):
    (tmp_path / "index.html").write_text("<html><body>YogaTube</body></html>", encoding="utf-8")
    return tmp_path


@pytest.fixture
def playlist_client():
    return FakePlaylistClient(items=[make_item("a"), make_item("b"), make_item("c")])


@pytest.fixture
def client(repository, playlist_client, clock, frontend_dir):
    app = create_app(
        repository=repository,
        platform_client=playlist_client,
        rotation_state=RotationState(),
        clock=clock,
        settings=ServerSettings(frontend_dir=str(frontend_dir)),
    )
    with TestClient(app) as test_client:
        yield test_client
