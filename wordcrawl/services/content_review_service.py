import re
from collections import Counter
from typing import Callable, Dict, List, Optional, Pattern, Sequence
from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

CRAWLABLE_SCHEMES = ("http", "https", "file")
NON_TEXT_TAGS = ("script", "style", "noscript", "template")
_NON_WORD_CHARS = re.compile(r"[\W_]+")


class ContentReviewService:
    """Pulls words and outgoing links out of an HTML document."""

    def __init__(self, soup_factory: Optional[Callable[[str], BeautifulSoup]] = None):
        self._soup_factory = soup_factory or (lambda html: BeautifulSoup(html, "html.parser"))

    def extract_links(self, base_url: str, html: str) -> List[str]:
        """Absolute, fragment-free URLs of every anchor, in document order."""
        soup = self._soup_factory(html)
        urls = []
        for a in soup.find_all("a", href=True):
            href = a.get("href").strip()
            if not href:
                continue
            abs_url, _ = urldefrag(urljoin(base_url, href))
            if urlparse(abs_url).scheme not in CRAWLABLE_SCHEMES:
                continue
            urls.append(abs_url)
        return urls

    def extract_words(self, html: str, ignored_words: Sequence[Pattern[str]] = ()) -> Dict[str, int]:
        """Count lower-cased alphanumeric words in the visible text.

        Words fully matching any pattern in `ignored_words` are left out.
        """
        soup = self._soup_factory(html)
        for tag in NON_TEXT_TAGS:
            for element in soup.find_all(tag):
                element.decompose()
        text = soup.get_text(separator=" ")

        counts: Counter = Counter()
        for token in text.split():
            word = _NON_WORD_CHARS.sub("", token).lower()
            if not word:
                continue
            if any(p.fullmatch(word) for p in ignored_words):
                continue
            counts[word] += 1
        return dict(counts)
