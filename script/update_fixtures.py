#!/usr/bin/env python3

import logging
import sys
import time
import urllib.parse
from pathlib import Path

from fairplaybot.config import Config
from fairplaybot.fetcher import LiveFetcher
from fairplaybot.parser.DayStripParser import extract_day_links
from fairplaybot.urls import Board
from tests.FixtureFetcher import fixtures

fetcher = LiveFetcher()
windows = 3  # pages saved per board, following the last day button


def save(name: str, content: str) -> None:
    path = fixtures / f"{name}.html"

    file = open(path, "w", encoding="utf-8")
    file.write(content)
    file.close()

    print(f"...written to {path}")


def main() -> None:
    fixtures.mkdir(parents=True, exist_ok=True)

    for board in Board:
        url = board.base_url
        name = Path(urllib.parse.urlsplit(url).path).stem

        for _ in range(windows):
            try:
                print(f"Fetching {url}")
                content = fetcher.fetch(url)
                save(name, content)
            except Exception as e:
                logging.warning("could not fetch %s: %s", url, e)
                break

            links = extract_day_links(content)
            if len(links) == 0 or links[-1].token is None:
                break

            url, name = links[-1].url, links[-1].token
            time.sleep(1)


if __name__ == "__main__":
    log_level = Config.log_level
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)-5.5s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    main()
