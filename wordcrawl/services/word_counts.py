import heapq
from typing import Dict, Mapping


def sort_word_counts(counts: Mapping[str, int], limit: int) -> Dict[str, int]:
    """Return the `limit` most frequent words, most frequent first.

    Ties on count are broken by the word in ascending order, so the output
    never depends on the iteration order of `counts`.
    """
    if limit is None or limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit!r}")
    top = heapq.nsmallest(limit, counts.items(), key=lambda item: (-item[1], item[0]))
    return dict(top)
