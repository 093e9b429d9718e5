import json
from pathlib import Path
from typing import IO, Union

from wordcrawl.domain.crawl_result import CrawlResult


class CrawlResultWriter:
    """Writes a `CrawlResult` as JSON: `{"wordCounts": {...}, "urlsVisited": n}`."""

    def __init__(self, result: CrawlResult):
        if result is None:
            raise ValueError("result is required")
        self.result = result

    def to_dict(self) -> dict:
        return {
            "wordCounts": dict(self.result.word_counts),
            "urlsVisited": self.result.urls_visited,
        }

    def write_to(self, stream: IO[str]) -> None:
        json.dump(self.to_dict(), stream, indent=2)
        stream.write("\n")

    def write(self, path: Union[str, Path]) -> None:
        """Append the result to `path`, creating the file if needed."""
        with open(path, "a", encoding="utf-8") as f:
            self.write_to(f)
