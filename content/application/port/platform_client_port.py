from abc import ABC, abstractmethod


class PlatformClientPort(ABC):
    platform: str

    @abstractmethod
    def fetch_playlist_items(self) -> list[dict]:
        """Return the raw ``items`` of the first page of the configured playlist."""
        raise NotImplementedError
