import os
from typing import IO, Union

import yaml

from wordcrawl.exceptions import ConfigNotFoundError


class ConfigFileStore:
    """Filesystem/YAML IO for crawl config files.

    Responsibility: locate, read, and parse YAML (or JSON, which YAML also
    reads) into a plain dict. It does NOT validate crawl settings.
    """

    def __init__(self, *, configs_dir: str = "."):
        self.configs_dir = configs_dir

    def _resolve_path(self, config_path: str) -> str:
        return config_path if os.path.isabs(config_path) else os.path.join(self.configs_dir, config_path)

    def load_dict(self, config_path: str) -> dict:
        """Return the parsed mapping stored at `config_path`."""
        full_path = self._resolve_path(config_path)
        if not os.path.isfile(full_path):
            raise ConfigNotFoundError(config_path)
        try:
            with open(full_path, "r", encoding="utf-8") as f:
                return self.read_dict(f, source=config_path)
        except OSError as e:
            raise ConfigNotFoundError(config_path, f"could not be read: {e}") from e

    def read_dict(self, stream: Union[str, IO[str]], source: str = "<stream>") -> dict:
        try:
            data = yaml.safe_load(stream)
        except yaml.YAMLError as e:
            raise ConfigNotFoundError(source, f"is not valid YAML/JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigNotFoundError(source, "does not contain a mapping")
        return data
