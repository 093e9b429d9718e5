import argparse
import logging
import sys
from typing import Optional

from wordcrawl import config as env
from wordcrawl.container import Container
from wordcrawl.exceptions import ConfigNotFoundError, CrawlConfigError
from wordcrawl.services.config_loader import ConfigurationLoader
from wordcrawl.services.result_writer import CrawlResultWriter

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crawl from a set of start pages and count popular words.")
    parser.add_argument("config", help="Path to a YAML or JSON crawl config file")
    parser.add_argument("--result-path", help="Append the JSON result here instead of the config's result_path")
    return parser


def main(argv: Optional[list] = None, container: Optional[Container] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, env.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s",
    )

    try:
        crawl_config = ConfigurationLoader(args.config).load()
    except (ConfigNotFoundError, CrawlConfigError) as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    container = container or Container()
    crawler = container.web_crawler(crawl_config)
    result = crawler.crawl(crawl_config.start_pages)

    writer = CrawlResultWriter(result)
    result_path = args.result_path or crawl_config.result_path
    if result_path:
        writer.write(result_path)
        logger.info("Wrote result to %s", result_path)
    else:
        writer.write_to(sys.stdout)
    return 0


if __name__ == '__main__':
    sys.exit(main())
