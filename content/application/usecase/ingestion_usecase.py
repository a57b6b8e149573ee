import logging

from content.application.port.content_repository_port import ContentRepositoryPort
from content.application.port.platform_client_port import PlatformClientPort
from content.domain.exceptions import DuplicateKeyError, StorageFailure
from content.domain.video import Video

logger = logging.getLogger(__name__)


class IngestionUseCase:
    def __init__(self, repository: ContentRepositoryPort, client: PlatformClientPort):
        self.repository = repository
        self.client = client

    def fetch_and_store(self) -> list[dict]:
        """
        Pull the playlist and insert every item as a video row.

        A duplicate or broken item is logged and skipped so the rest of the
        batch still lands. The upstream items are returned as fetched, whether
        or not their insert succeeded.
        """
        items = self.client.fetch_playlist_items()

        saved = 0
        for item in items:
            try:
                video = Video.from_playlist_item(item)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed playlist item: %s", exc)
                continue

            try:
                self.repository.insert_video(video)
                saved += 1
            except DuplicateKeyError as exc:
                logger.info("Skipping duplicate video %s: %s", video.video_id, exc.message)
            except StorageFailure as exc:
                logger.error("Failed saving video %s: %s", video.video_id, exc.message)

        logger.info("Ingested %d of %d playlist items", saved, len(items))
        return items
