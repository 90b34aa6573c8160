import logging
from time import time_ns
from typing import Optional

import requests

from fairplaybot.config import Config
from fairplaybot.fetcher.Fetcher import Fetcher
from fairplaybot.fetcher.TransportException import TransportException
from fairplaybot.urls import with_cache_buster


class LiveFetcher(Fetcher):
    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout if timeout is not None else Config.request_timeout

    def fetch(self, url: str) -> str:
        # cache buster, distinct per request
        request_url = with_cache_buster(url, time_ns())
        logging.debug(f"Fetching {request_url}")

        headers = {
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "User-Agent": Config.user_agent,
            "Accept-Language": "fr-CH,fr;q=0.9,en;q=0.8",
            "Cache-Control": "no-cache",
        }

        try:
            response = requests.get(request_url, headers=headers, timeout=self.timeout)
        except requests.RequestException as err:
            logging.warning("could not reach %s: %s", url, err)
            raise TransportException(url, reason=str(err)) from err

        if not response.ok:
            logging.warning(
                "received an error from the server: %s %s",
                response.status_code,
                response.reason,
            )
            raise TransportException(url, response.status_code, response.reason)

        return response.text
