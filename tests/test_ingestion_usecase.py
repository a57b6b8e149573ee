from unittest.mock import MagicMock

import pytest

from conftest import FakePlaylistClient, make_item
from content.application.port.content_repository_port import ContentRepositoryPort
from content.application.usecase.ingestion_usecase import IngestionUseCase
from content.domain.exceptions import StorageFailure, UpstreamFailure
from content.domain.video import Video


def test_items_are_stored_and_returned(repository):
    items = [make_item("a"), make_item("b")]
    usecase = IngestionUseCase(repository, FakePlaylistClient(items=items))

    result = usecase.fetch_and_store()

    assert result == items
    assert [v.video_id for v in repository.find_all_videos()] == ["a", "b"]


def test_duplicate_item_does_not_abort_batch(repository):
    repository.insert_video(Video.from_playlist_item(make_item("b")))
    items = [make_item("a"), make_item("b"), make_item("c")]
    usecase = IngestionUseCase(repository, FakePlaylistClient(items=items))

    result = usecase.fetch_and_store()

    assert result == items
    assert repository.count_videos() == 3
    assert sorted(v.video_id for v in repository.find_all_videos()) == ["a", "b", "c"]


def test_malformed_item_is_skipped(repository):
    items = [make_item("a"), {"kind": "youtube#playlistItem"}, {"snippet": {"title": "no id"}}, make_item("c")]
    usecase = IngestionUseCase(repository, FakePlaylistClient(items=items))

    result = usecase.fetch_and_store()

    assert len(result) == 4
    assert [v.video_id for v in repository.find_all_videos()] == ["a", "c"]


def test_storage_failure_on_one_item_keeps_going():
    repository = MagicMock(spec=ContentRepositoryPort)
    repository.insert_video.side_effect = [1, StorageFailure("disk I/O error"), 2]
    items = [make_item("a"), make_item("b"), make_item("c")]
    usecase = IngestionUseCase(repository, FakePlaylistClient(items=items))

    result = usecase.fetch_and_store()

    assert result == items
    assert repository.insert_video.call_count == 3


def test_upstream_failure_propagates(repository):
    client = FakePlaylistClient(error=UpstreamFailure("YouTube playlist fetch failed: timed out"))
    usecase = IngestionUseCase(repository, client)

    with pytest.raises(UpstreamFailure):
        usecase.fetch_and_store()
    assert repository.count_videos() == 0
