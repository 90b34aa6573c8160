import logging
import threading
from datetime import date
from typing import List, Optional, Tuple

from fairplaybot.config import Config
from fairplaybot.fetcher import Fetcher
from fairplaybot.model import ResolvedDay, Slot
from fairplaybot.parser.ScheduleParser import filter_slots_at, parse_free_slots
from fairplaybot.parser.TokenResolver import TokenResolver
from fairplaybot.urls import Board


class Parser:
    def __init__(self, fetcher: Fetcher, resolver: Optional[TokenResolver] = None) -> None:
        self.fetcher = fetcher
        self.resolver = resolver or TokenResolver(fetcher)

    def resolve(
        self,
        day: date,
        board: Board = Board.EXTERNAL,
        max_hops: int = Config.max_hops,
        cancel: Optional[threading.Event] = None,
    ) -> ResolvedDay:
        return self.resolver.resolve(day, board, max_hops=max_hops, cancel=cancel)

    def free_slots(
        self,
        day: date,
        board: Board = Board.EXTERNAL,
        time: Optional[str] = None,
        max_hops: int = Config.max_hops,
        cancel: Optional[threading.Event] = None,
    ) -> Tuple[ResolvedDay, List[Slot]]:
        resolved = self.resolve(day, board, max_hops=max_hops, cancel=cancel)

        logging.debug(f"fetching schedule for {resolved.date}: {resolved.url}")
        slots = parse_free_slots(self.fetcher.fetch(resolved.url), resolved.date)

        if time is not None:
            slots = filter_slots_at(slots, time)

        return resolved, slots

    def find_slot(
        self,
        day: date,
        time: str,
        court_number: int,
        board: Board = Board.EXTERNAL,
        cancel: Optional[threading.Event] = None,
    ) -> Tuple[ResolvedDay, Optional[Slot]]:
        resolved, slots = self.free_slots(day, board, time=time, cancel=cancel)
        court = f"Tennis n°{court_number}"

        return resolved, next((s for s in slots if s.court == court), None)
