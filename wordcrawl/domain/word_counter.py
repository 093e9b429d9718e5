import threading
from typing import Dict, Mapping


class WordCounter:
    """Running word -> count totals shared by concurrent crawl tasks.

    Keys are spread over `shards` independent dicts, each guarded by its own
    lock. Two tasks adding different words usually take different locks;
    two tasks adding the same word always take the same one.
    """

    def __init__(self, shards: int = 16):
        if shards <= 0:
            raise ValueError("shards must be positive")
        self._locks = [threading.Lock() for _ in range(shards)]
        self._counts: list[Dict[str, int]] = [{} for _ in range(shards)]

    def _shard(self, word: str) -> int:
        return hash(word) % len(self._locks)

    def add(self, word: str, count: int) -> None:
        idx = self._shard(word)
        with self._locks[idx]:
            shard = self._counts[idx]
            shard[word] = shard.get(word, 0) + count

    def merge(self, counts: Mapping[str, int]) -> None:
        """Add every (word, count) pair; each word is updated atomically on its own."""
        for word, count in counts.items():
            self.add(word, count)

    def snapshot(self) -> Dict[str, int]:
        """Return a plain dict copy of all totals."""
        result: Dict[str, int] = {}
        for lock, shard in zip(self._locks, self._counts):
            with lock:
                result.update(shard)
        return result

    def is_empty(self) -> bool:
        for lock, shard in zip(self._locks, self._counts):
            with lock:
                if shard:
                    return False
        return True
