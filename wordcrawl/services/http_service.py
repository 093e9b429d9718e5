from typing import Callable

import requests

from wordcrawl.domain.http_response import HttpResponse
from wordcrawl.exceptions import HttpFetchError, PageFetchError

TEXT_CONTENT_TYPES = ("text/html", "application/xhtml+xml", "text/plain")


class HttpService:
    """
    Thin wrapper around an HTTP GET callable (normally `requests.get`).

    The callable is injected so tests hand in a Mock rather than patching
    `requests`. Transport failures surface as `HttpFetchError`; pages that
    answer but are unusable for word counting surface as `PageFetchError`.
    """

    def __init__(self, user_agent: str, http_client: Callable, timeout: int = 10):
        self.user_agent = user_agent
        self.timeout = timeout
        self.http_client = http_client

    def fetch(self, url: str) -> HttpResponse:
        headers = {"User-Agent": self.user_agent}
        try:
            resp = self.http_client(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        content_type = None
        if hasattr(resp, "headers"):
            content_type = resp.headers.get("Content-Type")
        return HttpResponse(resp.status_code, resp.text, content_type)

    def fetch_document(self, url: str) -> str:
        """Return the body of `url`, requiring a 2xx status and a textual content type."""
        response = self.fetch(url)
        if not response.ok:
            raise PageFetchError(url, f"status {response.status_code}")
        if response.content_type:
            media_type = response.content_type.split(";", 1)[0].strip().lower()
            if media_type not in TEXT_CONTENT_TYPES:
                raise PageFetchError(url, f"unsupported content type {media_type}")
        return response.text
