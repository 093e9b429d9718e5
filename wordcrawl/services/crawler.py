from __future__ import annotations

import logging
import os
import re
from datetime import timedelta
from typing import Iterable, Optional, Pattern, Sequence, Union

from wordcrawl.domain.config import CrawlerConfig, compile_patterns
from wordcrawl.domain.crawl_context import CrawlContext
from wordcrawl.domain.crawl_result import CrawlResult
from wordcrawl.domain.crawl_task_spec import CrawlTaskSpec
from wordcrawl.exceptions import CrawlConfigError
from wordcrawl.services.crawl_policy import CrawlPolicy
from wordcrawl.services.crawl_task import CrawlTask
from wordcrawl.services.fork_join_pool import ForkJoinPool
from wordcrawl.services.page_source import PageSource
from wordcrawl.services.word_counts import sort_word_counts
from wordcrawl.utils.clock import Clock

logger = logging.getLogger(__name__)


class ParallelWebCrawler:
    """Crawls from a set of start pages on a work-stealing thread pool.

    Construction validates every setting; a crawler that exists can run any
    number of crawls. Each `crawl()` call gets its own visited set, word
    counter and pool, so calls never see each other's state.
    """

    def __init__(
        self,
        *,
        clock: Clock,
        page_source: PageSource,
        timeout: timedelta,
        popular_word_count: int,
        parallelism: int,
        max_depth: int,
        ignored_urls: Sequence[Union[str, Pattern[str]]] = (),
        crawl_policy: Optional[CrawlPolicy] = None,
    ):
        if clock is None:
            raise CrawlConfigError("clock is required")
        if page_source is None:
            raise CrawlConfigError("page_source is required")
        if timeout is None or timeout < timedelta(0):
            raise CrawlConfigError(f"timeout must be non-negative, got {timeout!r}")
        if popular_word_count is None or popular_word_count < 0:
            raise CrawlConfigError(f"popular_word_count must be non-negative, got {popular_word_count!r}")
        if parallelism is None or parallelism <= 0:
            raise CrawlConfigError(f"parallelism must be positive, got {parallelism!r}")
        if max_depth is None or max_depth < 0:
            raise CrawlConfigError(f"max_depth must be non-negative, got {max_depth!r}")
        if ignored_urls is None:
            raise CrawlConfigError("ignored_urls must be a sequence (possibly empty)")

        self.clock = clock
        self.page_source = page_source
        self.timeout = timeout
        self.popular_word_count = popular_word_count
        self.parallelism = parallelism
        self.max_depth = max_depth
        self.ignored_urls = tuple(
            p if isinstance(p, re.Pattern) else compile_patterns([p], "ignored_urls")[0]
            for p in ignored_urls
        )
        self.crawl_policy = crawl_policy or CrawlPolicy()

    @classmethod
    def from_config(
        cls,
        config: CrawlerConfig,
        *,
        clock: Clock,
        page_source: PageSource,
        crawl_policy: Optional[CrawlPolicy] = None,
    ) -> ParallelWebCrawler:
        return cls(
            clock=clock,
            page_source=page_source,
            timeout=config.timeout,
            popular_word_count=config.popular_word_count,
            parallelism=config.parallelism or cls.max_parallelism(),
            max_depth=config.max_depth,
            ignored_urls=config.ignored_url_patterns,
            crawl_policy=crawl_policy,
        )

    @staticmethod
    def max_parallelism() -> int:
        """Number of CPUs on this host; an upper bound on useful parallelism."""
        return os.cpu_count() or 1

    @property
    def worker_count(self) -> int:
        return min(self.parallelism, self.max_parallelism())

    def crawl(self, start_urls: Iterable[str]) -> CrawlResult:
        if start_urls is None:
            raise CrawlConfigError("start_urls is required")
        start_urls = list(start_urls)
        if any(url is None for url in start_urls):
            raise CrawlConfigError("start_urls must not contain None")

        deadline = self.clock.now() + self.timeout
        context = CrawlContext()
        logger.info(
            "Starting crawl of %d start page(s): max_depth=%s workers=%s deadline=%s",
            len(start_urls),
            self.max_depth,
            self.worker_count,
            deadline.isoformat(),
        )

        with ForkJoinPool(self.worker_count, thread_name_prefix="crawler") as pool:
            task = CrawlTask(page_source=self.page_source, pool=pool, crawl_policy=self.crawl_policy)
            roots = [
                pool.submit(
                    task.run,
                    CrawlTaskSpec(
                        url=url,
                        depth=self.max_depth,
                        deadline=deadline,
                        context=context,
                        ignored_urls=self.ignored_urls,
                        clock=self.clock,
                    ),
                )
                for url in start_urls
            ]
            pool.join_all(roots)

        urls_visited = context.urls_visited
        logger.info("Crawl finished: %d URL(s) visited", urls_visited)
        if context.word_counts.is_empty():
            return CrawlResult(word_counts={}, urls_visited=urls_visited)
        return CrawlResult(
            word_counts=sort_word_counts(context.word_counts.snapshot(), self.popular_word_count),
            urls_visited=urls_visited,
        )
