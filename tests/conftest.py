import threading
from collections import Counter

import pytest

from wordcrawl.domain.parsed_page import ParsedPage
from wordcrawl.exceptions import PageFetchError
from wordcrawl.utils.clock import ManualClock


class FakePageSource:
    """In-memory page graph. Values are ParsedPage or an exception to raise."""

    def __init__(self, pages=None, on_fetch=None):
        self.pages = dict(pages or {})
        self.on_fetch = on_fetch
        self._lock = threading.Lock()
        self.fetch_counts = Counter()

    def add(self, url, words=None, links=()):
        self.pages[url] = ParsedPage(word_counts=dict(words or {}), links=list(links))

    def fetch(self, url):
        with self._lock:
            self.fetch_counts[url] += 1
        if self.on_fetch is not None:
            self.on_fetch(url)
        page = self.pages.get(url)
        if page is None:
            raise PageFetchError(url, "status 404")
        if isinstance(page, Exception):
            raise page
        return page

    @property
    def total_fetches(self):
        with self._lock:
            return sum(self.fetch_counts.values())


@pytest.fixture
def page_source():
    return FakePageSource()


@pytest.fixture
def clock():
    return ManualClock()
