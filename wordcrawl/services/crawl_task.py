import logging
from typing import Optional

from wordcrawl.domain.crawl_task_spec import CrawlTaskSpec
from wordcrawl.domain.parsed_page import ParsedPage
from wordcrawl.exceptions import HttpFetchError, PageFetchError
from wordcrawl.services.crawl_policy import CrawlPolicy
from wordcrawl.services.fork_join_pool import ForkJoinPool
from wordcrawl.services.page_source import PageSource

logger = logging.getLogger(__name__)


class CrawlTask:
    """Recursive crawl step: fetch one URL, merge its words, fork its links, join them.

    One instance serves every task of a crawl; per-task data lives in the
    `CrawlTaskSpec` passed to `run()`.
    """

    def __init__(self, *, page_source: PageSource, pool: ForkJoinPool, crawl_policy: Optional[CrawlPolicy] = None):
        self.page_source = page_source
        self.pool = pool
        self.crawl_policy = crawl_policy or CrawlPolicy()

    def fetch(self, url: str) -> Optional[ParsedPage]:
        """Fetch and parse `url`, or return None if the page source failed."""
        try:
            return self.page_source.fetch(url)
        except (HttpFetchError, PageFetchError) as e:
            logger.warning("Fetch failed for %s: %s", url, e)
            return None
        except Exception as e:
            logger.error("Fetch error for %s: %s", url, e, exc_info=True)
            return None

    def run(self, spec: CrawlTaskSpec) -> None:
        if self.crawl_policy.should_skip(spec):
            return
        if not spec.context.claim(spec.url):
            logger.debug("Skipping (visited) %s", spec.url)
            return

        page = self.fetch(spec.url)
        if page is None:
            return
        spec.context.add_word_counts(page.word_counts)
        logger.debug("Fetched %s: %d words, %d links", spec.url, len(page.word_counts), len(page.links))

        if not page.links:
            return
        try:
            self.pool.invoke_all((self.run, spec.child(link)) for link in page.links)
        except Exception as e:
            logger.error("Crawl below %s failed: %s", spec.url, e, exc_info=True)
