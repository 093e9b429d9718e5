from typing import Mapping, Optional

from wordcrawl.domain.visited_tracker import VisitedTracker
from wordcrawl.domain.word_counter import WordCounter


class CrawlContext:
    """Mutable state shared by every task of a single crawl invocation."""

    def __init__(self, visited_tracker: Optional[VisitedTracker] = None, word_counter: Optional[WordCounter] = None):
        self.visited = visited_tracker if visited_tracker is not None else VisitedTracker()
        self.word_counts = word_counter if word_counter is not None else WordCounter()

    def claim(self, url: str) -> bool:
        return self.visited.mark_if_unvisited(url)

    def add_word_counts(self, counts: Mapping[str, int]) -> None:
        self.word_counts.merge(counts)

    @property
    def urls_visited(self) -> int:
        return len(self.visited)
