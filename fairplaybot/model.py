from dataclasses import dataclass, field
from typing import Optional

from dataclasses_json import DataClassJsonMixin, config

from fairplaybot.urls import Board


@dataclass
class DayLink(DataClassJsonMixin):
    label: str  # e.g. "Ve 12"
    url: Optional[str] = None
    token: Optional[str] = None
    active: bool = False


@dataclass
class Slot(DataClassJsonMixin):
    date: str  # YYYY-MM-DD
    court: str  # e.g. "Tennis n°6"
    start: str  # HH:MM
    end: str  # HH:MM
    booking_url: Optional[str] = field(
        default=None, metadata=config(exclude=lambda url: url is None)
    )

    def summary(self) -> dict:
        return {"court": self.court, "start": self.start, "end": self.end}


@dataclass
class ResolvedDay(DataClassJsonMixin):
    token: str
    board: Board
    date: str
    label: str
    url: str
