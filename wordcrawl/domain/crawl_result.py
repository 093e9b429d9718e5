"""Crawl result data model."""
from typing import Dict, NamedTuple


class CrawlResult(NamedTuple):
    """Result of a crawl operation.

    Produced once per crawl invocation and never modified afterwards.
    """
    word_counts: Dict[str, int]
    """Most popular words, highest count first (ties in alphabetical order)"""

    urls_visited: int
    """Number of distinct URLs claimed for fetching during the crawl"""
