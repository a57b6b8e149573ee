from dataclasses import dataclass
from typing import Optional


@dataclass
class Video:
    published_at: str
    title: str
    description: str
    thumbnail_url: str
    video_id: str
    owner_channel_title: str
    id: Optional[int] = None

    @classmethod
    def from_playlist_item(cls, item: dict) -> "Video":
        # playlistItems 응답의 snippet 필드를 그대로 매핑한다.
        snippet = item["snippet"]
        thumbnails = snippet.get("thumbnails") or {}
        resource = snippet.get("resourceId") or {}
        video_id = resource.get("videoId")
        if not video_id:
            raise ValueError("playlist item has no resourceId.videoId")
        return cls(
            published_at=snippet.get("publishedAt") or "",
            title=snippet.get("title") or "",
            description=snippet.get("description") or "",
            thumbnail_url=(thumbnails.get("default") or {}).get("url") or "",
            video_id=video_id,
            owner_channel_title=snippet.get("videoOwnerChannelTitle") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "publishedAt": self.published_at,
            "title": self.title,
            "description": self.description,
            "thumbnails": {"default": {"url": self.thumbnail_url}},
            "resourceId": {"kind": "youtube#video", "videoId": self.video_id},
            "videoOwnerChannelTitle": self.owner_channel_title,
        }
