"""Custom exceptions for wordcrawl."""


class ConfigNotFoundError(Exception):
    """Raised when a crawl config file cannot be found or read."""

    def __init__(self, config_path: str, reason: str = "not found"):
        self.config_path = config_path
        self.reason = reason
        super().__init__(f"Config '{config_path}' {reason}")


class CrawlConfigError(ValueError):
    """Raised when crawl settings fail validation, before any task is scheduled."""


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class PageFetchError(Exception):
    """Raised when a page was reached but cannot be used (bad status, unreadable file)."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Page {url} could not be fetched: {reason}")
