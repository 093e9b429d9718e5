import logging

from wordcrawl.domain.crawl_task_spec import CrawlTaskSpec

logger = logging.getLogger(__name__)


class CrawlPolicy:
    """Encapsulates crawl decision rules: depth limits, the deadline, and ignored URLs.

    Separates policy decisions from crawl orchestration logic. None of the
    checks touch shared crawl state.
    """

    def should_skip_due_to_depth(self, spec: CrawlTaskSpec) -> bool:
        """Check if URL should be skipped because no depth is left."""
        if spec.depth <= 0:
            logger.debug("Skipping (max depth reached) %s", spec.url)
            return True
        return False

    def should_skip_due_to_deadline(self, spec: CrawlTaskSpec) -> bool:
        """Check if the crawl deadline has already passed."""
        if spec.clock.now() > spec.deadline:
            logger.debug("Skipping (deadline passed) %s", spec.url)
            return True
        return False

    def should_skip_due_to_ignored_url(self, spec: CrawlTaskSpec) -> bool:
        """Check if URL fully matches any ignored-URL pattern, in configured order."""
        for pattern in spec.ignored_urls:
            if pattern.fullmatch(spec.url):
                logger.debug("Skipping (ignored by %s) %s", pattern.pattern, spec.url)
                return True
        return False

    def should_skip(self, spec: CrawlTaskSpec) -> bool:
        return (
            self.should_skip_due_to_depth(spec)
            or self.should_skip_due_to_deadline(spec)
            or self.should_skip_due_to_ignored_url(spec)
        )
