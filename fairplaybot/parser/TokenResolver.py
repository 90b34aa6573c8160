import logging
import threading
from datetime import date
from typing import Dict, Optional

from fairplaybot.config import Config
from fairplaybot.fetcher import Fetcher
from fairplaybot.model import ResolvedDay
from fairplaybot.parser.DateNotFoundException import (
    DateNotFoundException,
    ResolutionCancelledException,
)
from fairplaybot.parser.DayStripParser import extract_day_links, site_day_label
from fairplaybot.urls import Board, build_day_url


class TokenResolver:
    """Finds the date token the booking site uses for a given day.

    The site has no date-indexed page, only a strip of day buttons that moves
    forward eight days at a time when its last button is followed. Resolution
    walks that chain from the board's base page until a button with the wanted
    label shows up or `max_hops` pages have been read.
    """

    def __init__(
        self, fetcher: Fetcher, base_urls: Optional[Dict[Board, str]] = None
    ) -> None:
        self.fetcher = fetcher
        self.base_urls = {board: board.base_url for board in Board}
        self.base_urls.update(base_urls or {})

    def resolve(
        self,
        target_date: date,
        board: Board,
        max_hops: int = Config.max_hops,
        cancel: Optional[threading.Event] = None,
    ) -> ResolvedDay:
        if max_hops < 1:
            raise ValueError(f"max_hops must be positive, got {max_hops}")

        wanted = site_day_label(target_date)
        url = self.base_urls[board]

        for hop in range(max_hops):
            if cancel is not None and cancel.is_set():
                raise ResolutionCancelledException(wanted, hop)

            logging.debug(f"hop {hop + 1}/{max_hops} looking for {wanted}: {url}")

            # transport errors propagate, a failed hop is not retried
            links = extract_day_links(self.fetcher.fetch(url))

            hit = next((l for l in links if l.label == wanted and l.token), None)
            if hit is not None:
                logging.info(f"resolved {wanted} on {board.value} after {hop + 1} hops")
                return ResolvedDay(
                    token=hit.token,
                    board=board,
                    date=target_date.isoformat(),
                    label=wanted,
                    url=build_day_url(board, hit.token, self.base_urls[board]),
                )

            # the last button moves the window forward
            if len(links) == 0 or links[-1].url is None:
                logging.warning(f"day strip dead-ends after {hop + 1} hops, {wanted} not found")
                raise DateNotFoundException(wanted, hop + 1)

            url = links[-1].url

        logging.warning(f"{wanted} not found within {max_hops} hops")
        raise DateNotFoundException(wanted, max_hops)
