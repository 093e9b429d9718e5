from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import Pattern, Tuple

from wordcrawl.domain.crawl_context import CrawlContext
from wordcrawl.exceptions import CrawlConfigError
from wordcrawl.utils.clock import Clock


@dataclass(frozen=True)
class CrawlTaskSpec:
    """Everything one crawl task needs to decide whether to fetch `url`.

    `context`, `ignored_urls`, `deadline` and `clock` are shared by reference
    across the whole task tree of one crawl; only `url` and `depth` vary.
    """

    url: str
    depth: int
    deadline: datetime
    context: CrawlContext
    ignored_urls: Tuple[Pattern[str], ...]
    clock: Clock

    def __post_init__(self):
        if self.url is None:
            raise CrawlConfigError("url is required")
        if self.depth is None or self.depth < 0:
            raise CrawlConfigError(f"depth must be non-negative, got {self.depth!r}")
        if self.deadline is None:
            raise CrawlConfigError("deadline is required")
        if self.context is None:
            raise CrawlConfigError("context is required")
        if self.clock is None:
            raise CrawlConfigError("clock is required")

    def child(self, url: str) -> CrawlTaskSpec:
        """Spec for a link found on this page: one level shallower, same everything else."""
        return dataclasses.replace(self, url=url, depth=self.depth - 1)
