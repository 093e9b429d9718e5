from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional, Pattern, Tuple

from wordcrawl.exceptions import CrawlConfigError

DEFAULT_MAX_DEPTH = 10
DEFAULT_TIMEOUT_SECONDS = 1
DEFAULT_POPULAR_WORD_COUNT = 100


def compile_patterns(patterns, field_name: str) -> Tuple[Pattern[str], ...]:
    compiled = []
    for raw in patterns:
        if raw is None:
            raise CrawlConfigError(f"{field_name} must not contain null entries")
        try:
            compiled.append(re.compile(raw))
        except re.error as e:
            raise CrawlConfigError(f"invalid pattern in {field_name}: {raw!r} ({e})") from e
    return tuple(compiled)


@dataclass(frozen=True)
class CrawlerConfig:
    """Settings for one crawl, as read from a config file.

    Validation happens on construction, so a `CrawlerConfig` that exists is
    always usable. `parallelism` of None means "as many workers as the host
    has CPUs".
    """

    start_pages: Tuple[str, ...]
    ignored_urls: Tuple[str, ...] = ()
    ignored_words: Tuple[str, ...] = ()
    parallelism: Optional[int] = None
    max_depth: int = DEFAULT_MAX_DEPTH
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    popular_word_count: int = DEFAULT_POPULAR_WORD_COUNT
    result_path: Optional[str] = None
    ignored_url_patterns: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)
    ignored_word_patterns: Tuple[Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.start_pages is None:
            raise CrawlConfigError("start_pages is required")
        if isinstance(self.start_pages, str):
            raise CrawlConfigError("start_pages must be a list of URLs, not a single string")
        start_pages = tuple(self.start_pages)
        if any(url is None or str(url).strip() == "" for url in start_pages):
            raise CrawlConfigError("start_pages must not contain empty entries")
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "start_pages", start_pages)
        object.__setattr__(self, "ignored_urls", tuple(self.ignored_urls or ()))
        object.__setattr__(self, "ignored_words", tuple(self.ignored_words or ()))

        if self.parallelism is not None and self.parallelism <= 0:
            raise CrawlConfigError(f"parallelism must be positive, got {self.parallelism!r}")
        if self.max_depth is None or self.max_depth < 0:
            raise CrawlConfigError(f"max_depth must be non-negative, got {self.max_depth!r}")
        if self.timeout_seconds is None or self.timeout_seconds < 0:
            raise CrawlConfigError(f"timeout_seconds must be non-negative, got {self.timeout_seconds!r}")
        if self.popular_word_count is None or self.popular_word_count < 0:
            raise CrawlConfigError(f"popular_word_count must be non-negative, got {self.popular_word_count!r}")

        object.__setattr__(self, "ignored_url_patterns", compile_patterns(self.ignored_urls, "ignored_urls"))
        object.__setattr__(self, "ignored_word_patterns", compile_patterns(self.ignored_words, "ignored_words"))

    @property
    def timeout(self) -> timedelta:
        return timedelta(seconds=self.timeout_seconds)
