import logging
from typing import IO, Optional, Union

from wordcrawl.domain.config import CrawlerConfig
from wordcrawl.services.config_file_store import ConfigFileStore
from wordcrawl.services.crawler_config_parser import CrawlerConfigParser

logger = logging.getLogger(__name__)


class ConfigurationLoader:
    """Loads a `CrawlerConfig` from a YAML/JSON file path."""

    def __init__(
        self,
        path: str,
        *,
        store: Optional[ConfigFileStore] = None,
        parser: Optional[CrawlerConfigParser] = None,
    ):
        if path is None:
            raise ValueError("path is required")
        self.path = path
        self.store = store or ConfigFileStore()
        self.parser = parser or CrawlerConfigParser()

    def load(self) -> CrawlerConfig:
        config = self.parser.parse(self.store.load_dict(self.path))
        logger.info("Loaded crawl config %s: %d start page(s)", self.path, len(config.start_pages))
        return config

    @staticmethod
    def read(stream: Union[str, IO[str]]) -> CrawlerConfig:
        """Parse config straight from a string or open text stream."""
        return CrawlerConfigParser().parse(ConfigFileStore().read_dict(stream))
