"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from wordcrawl import config as env
from wordcrawl.domain.config import CrawlerConfig
from wordcrawl.services.content_review_service import ContentReviewService
from wordcrawl.services.crawl_policy import CrawlPolicy
from wordcrawl.services.crawler import ParallelWebCrawler
from wordcrawl.services.http_service import HttpService
from wordcrawl.services.page_source import HtmlPageSource
from wordcrawl.utils.clock import SystemClock


# Environment variables used by the container (values from `wordcrawl.config`).
#
# USER_AGENT (str, default: "wordcrawl/0.1")
#   User-Agent header for outbound HTTP requests.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout for a single page request. Independent of the crawl deadline.
ENV = {
    "USER_AGENT": env.USER_AGENT,
    "HTTP_TIMEOUT": env.HTTP_TIMEOUT,
}


def build_web_crawler(
    crawl_config: CrawlerConfig,
    *,
    clock,
    http_service: HttpService,
    content_review_service: ContentReviewService,
    crawl_policy: CrawlPolicy,
) -> ParallelWebCrawler:
    page_source = HtmlPageSource(
        http_service,
        ignored_words=crawl_config.ignored_word_patterns,
        content_review_service=content_review_service,
    )
    return ParallelWebCrawler.from_config(
        crawl_config,
        clock=clock,
        page_source=page_source,
        crawl_policy=crawl_policy,
    )


class Container(containers.DeclarativeContainer):
    """Dependency injection container for wordcrawl."""

    config = providers.Configuration(default=ENV)

    clock = providers.Singleton(SystemClock)

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int),
    )

    content_review_service = providers.Singleton(ContentReviewService)

    crawl_policy = providers.Singleton(CrawlPolicy)

    # Call with the CrawlerConfig: container.web_crawler(crawl_config)
    web_crawler = providers.Factory(
        build_web_crawler,
        clock=clock,
        http_service=http_service,
        content_review_service=content_review_service,
        crawl_policy=crawl_policy,
    )
