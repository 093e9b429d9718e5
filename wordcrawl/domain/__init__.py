"""Domain objects for wordcrawl - explicit re-exports to satisfy linters."""
from .config import CrawlerConfig as CrawlerConfig
from .crawl_context import CrawlContext as CrawlContext
from .crawl_result import CrawlResult as CrawlResult
from .crawl_task_spec import CrawlTaskSpec as CrawlTaskSpec
from .parsed_page import ParsedPage as ParsedPage

__all__ = ["CrawlerConfig", "CrawlContext", "CrawlResult", "CrawlTaskSpec", "ParsedPage"]
