from typing import Dict, List, NamedTuple


class ParsedPage(NamedTuple):
    """What a page source hands back for one URL."""
    word_counts: Dict[str, int]
    links: List[str]
