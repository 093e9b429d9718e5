from __future__ import annotations

from pathlib import Path
from typing import Optional, Pattern, Protocol, Sequence
from urllib.parse import urlparse
from urllib.request import url2pathname

from wordcrawl.domain.parsed_page import ParsedPage
from wordcrawl.exceptions import PageFetchError
from wordcrawl.services.content_review_service import ContentReviewService
from wordcrawl.services.http_service import HttpService


class PageSource(Protocol):
    """Fetch a URL and return its word counts and outgoing links.

    Implementations raise `HttpFetchError` or `PageFetchError` when the page
    cannot be used.
    """

    def fetch(self, url: str) -> ParsedPage: ...


class HtmlPageSource:
    """Page source for HTML served over HTTP(S) or saved on local disk (`file:` URLs)."""

    def __init__(
        self,
        http_service: HttpService,
        ignored_words: Sequence[Pattern[str]] = (),
        content_review_service: Optional[ContentReviewService] = None,
    ):
        self._http_service = http_service
        self._ignored_words = tuple(ignored_words)
        self._content_review_service = content_review_service or ContentReviewService()

    def _read_local(self, url: str) -> str:
        path = Path(url2pathname(urlparse(url).path))
        try:
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise PageFetchError(url, str(e)) from e

    def fetch(self, url: str) -> ParsedPage:
        if urlparse(url).scheme == "file":
            html = self._read_local(url)
        else:
            html = self._http_service.fetch_document(url)
        return ParsedPage(
            word_counts=self._content_review_service.extract_words(html, self._ignored_words),
            links=self._content_review_service.extract_links(url, html),
        )
