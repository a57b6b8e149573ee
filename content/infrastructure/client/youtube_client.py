import logging

from googleapiclient.discovery import build
from googleapiclient.errors import Error as GoogleApiError

from config.settings import YouTubeSettings
from content.application.port.platform_client_port import PlatformClientPort
from content.domain.exceptions import UpstreamFailure

logger = logging.getLogger(__name__)


class YouTubeClient(PlatformClientPort):
    platform = "youtube"

    def __init__(self, settings: YouTubeSettings, service=None):
        # YouTube Data API v3 client. playlistItems 조회에만 사용한다.
        self.settings = settings
        self.service = service or build(
            "youtube",
            "v3",
            developerKey=settings.api_key,
            cache_discovery=False,
        )

    def fetch_playlist_items(self) -> list[dict]:
        """Fetch the first page of the configured playlist; no paging, no retry."""
        try:
            response = (
                self.service.playlistItems()
                .list(
                    part="snippet",
                    maxResults=self.settings.max_results,
                    playlistId=self.settings.playlist_id,
                )
                .execute()
            )
        except (GoogleApiError, OSError, ValueError) as exc:
            raise UpstreamFailure(f"YouTube playlist fetch failed: {exc}") from exc

        items = response.get("items", []) if isinstance(response, dict) else None
        if not isinstance(items, list):
            raise UpstreamFailure("YouTube playlist response has no items list")

        logger.info("Fetched %d playlist items from %s", len(items), self.settings.playlist_id)
        return items
