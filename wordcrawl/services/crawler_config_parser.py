from typing import Any, Dict

from wordcrawl.domain.config import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_POPULAR_WORD_COUNT,
    DEFAULT_TIMEOUT_SECONDS,
    CrawlerConfig,
)
from wordcrawl.exceptions import CrawlConfigError

# camelCase spellings accepted for configs written for the JSON format
KEY_ALIASES = {
    "startPages": "start_pages",
    "ignoredUrls": "ignored_urls",
    "ignoredWords": "ignored_words",
    "maxDepth": "max_depth",
    "timeoutSeconds": "timeout_seconds",
    "popularWordCount": "popular_word_count",
    "resultPath": "result_path",
}


class CrawlerConfigParser:
    """Parse a config dict into a CrawlerConfig.

    Responsibility: key normalisation and type checks. It does NOT perform
    filesystem IO.
    """

    def _normalise_keys(self, data: Dict[str, Any]) -> Dict[str, Any]:
        normalised: Dict[str, Any] = {}
        for key, value in data.items():
            name = KEY_ALIASES.get(key, key)
            if name in normalised:
                raise CrawlConfigError(f"config key {name!r} given more than once")
            normalised[name] = value
        return normalised

    def _int(self, data: Dict[str, Any], key: str, default):
        value = data.get(key, default)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise CrawlConfigError(f"{key} must be an integer, got {value!r}")
        return value

    def _str_list(self, data: Dict[str, Any], key: str) -> list:
        value = data.get(key) or []
        if isinstance(value, str) or not isinstance(value, list):
            raise CrawlConfigError(f"{key} must be a list of strings")
        return [str(v) if v is not None else None for v in value]

    def parse(self, data: Dict[str, Any]) -> CrawlerConfig:
        data = self._normalise_keys(data)
        if "start_pages" not in data:
            raise CrawlConfigError("start_pages is required")

        timeout_seconds = data.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
        if isinstance(timeout_seconds, bool) or not isinstance(timeout_seconds, (int, float)):
            raise CrawlConfigError(f"timeout_seconds must be a number, got {timeout_seconds!r}")

        return CrawlerConfig(
            start_pages=tuple(self._str_list(data, "start_pages")),
            ignored_urls=tuple(self._str_list(data, "ignored_urls")),
            ignored_words=tuple(self._str_list(data, "ignored_words")),
            parallelism=self._int(data, "parallelism", None),
            max_depth=self._int(data, "max_depth", DEFAULT_MAX_DEPTH),
            timeout_seconds=timeout_seconds,
            popular_word_count=self._int(data, "popular_word_count", DEFAULT_POPULAR_WORD_COUNT),
            result_path=data.get("result_path"),
        )
