"""Base fetcher interface for market page payloads."""

from abc import ABC, abstractmethod


class FetchError(Exception):
    """Raised when a page could not be loaded at all."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to load {url}: {reason}")


class BasePayloadFetcher(ABC):
    """Abstract source of raw JSON payloads for one market page."""

    @abstractmethod
    async def capture(self, url: str) -> list[str]:
        """
        Load a page and return the JSON response bodies it produced.

        Args:
            url: Market page URL

        Returns:
            Raw JSON texts, possibly empty

        Raises:
            FetchError: If the page fails to load
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the fetcher."""
        return None
