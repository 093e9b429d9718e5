import threading
from typing import Set


class VisitedTracker:
    """
    Tracks which URLs have been claimed for fetching during a crawl.

    Safe to share between any number of worker threads. The set only grows;
    URLs are never evicted, so a claimed URL can never be fetched twice in
    the same crawl.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._visited: Set[str] = set()

    def mark_if_unvisited(self, url: str) -> bool:
        """Claim `url` and return True, or return False if it was already claimed.

        The membership test and the insert happen under one lock acquisition.
        """
        with self._lock:
            if url in self._visited:
                return False
            self._visited.add(url)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._visited)
