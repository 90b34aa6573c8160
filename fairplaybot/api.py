"""Request handlers for the applications that ask for court availability.

Every handler takes raw request values, validates them and answers with a
``(payload, status)`` pair so it can sit behind any HTTP framework or chat
front end. Resolution and transport problems come back as payloads with the
requested board and date echoed, never as exceptions.
"""

import datetime
import logging
import re
import threading
from typing import Any, Dict, Optional, Tuple

import pytz

from fairplaybot.config import Config
from fairplaybot.fetcher import TransportException
from fairplaybot.parser import (
    DateNotFoundException,
    Parser,
    ResolutionCancelledException,
)
from fairplaybot.urls import Board

Response = Tuple[Dict[str, Any], int]

iso_date = re.compile(r"^\d{4}-\d{2}-\d{2}$")
clock_time = re.compile(r"^\d{2}:\d{2}$")


class InvalidRequest(Exception):
    pass


def today() -> str:
    return datetime.datetime.now(pytz.timezone(Config.timezone)).date().isoformat()


def parse_date(value: Optional[str]) -> datetime.date:
    if not value:
        raise InvalidRequest("Missing date parameter")

    try:
        if not iso_date.match(value):
            raise ValueError(value)
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise InvalidRequest("Invalid date format. Use YYYY-MM-DD.") from None


def parse_time(value: str) -> str:
    if not clock_time.match(value):
        raise InvalidRequest("Invalid time format. Use HH:MM.")

    hours, minutes = value.split(":")
    if int(hours) > 23 or int(minutes) > 59:
        raise InvalidRequest("Invalid time format. Use HH:MM.")

    return value


def parse_board(value: Optional[str]) -> Board:
    if not value:
        raise InvalidRequest("Missing board parameter")

    try:
        return Board.from_name(value)
    except ValueError:
        raise InvalidRequest(
            'Invalid board parameter. Must be "external" or "internal"'
        ) from None


def failure(error: Exception, status: int, **echo: Any) -> Response:
    return {"error": str(error), **echo}, status


def resolve_date_token(
    parser: Parser,
    date: Optional[str],
    board: Optional[str],
    cancel: Optional[threading.Event] = None,
) -> Response:
    try:
        day = parse_date(date)
        selected = parse_board(board)
    except InvalidRequest as e:
        return failure(e, 400, board=board, date=date)

    try:
        resolved = parser.resolve(day, selected, cancel=cancel)
    except DateNotFoundException as e:
        return failure(e, 404, board=selected.value, date=date)
    except ResolutionCancelledException as e:
        return failure(e, 504, board=selected.value, date=date)
    except TransportException as e:
        logging.error(f"failed to resolve date token for {selected.value} on {date}: {e}")
        return failure(e, 502, board=selected.value, date=date)

    return {
        "token": resolved.token,
        "board": selected.value,
        "date": resolved.date,
        "label": resolved.label,
    }, 200


def free_courts(
    parser: Parser,
    date: Optional[str] = None,
    time: Optional[str] = None,
    board: Optional[str] = Board.EXTERNAL.value,
    cancel: Optional[threading.Event] = None,
) -> Response:
    date = date or today()

    try:
        day = parse_date(date)
        selected = parse_board(board)
        wanted = parse_time(time) if time else None
    except InvalidRequest as e:
        return failure(e, 400, board=board, date=date, time=time)

    try:
        resolved, slots = parser.free_slots(day, selected, time=wanted, cancel=cancel)
    except DateNotFoundException as e:
        return failure(e, 404, board=selected.value, date=date)
    except ResolutionCancelledException as e:
        return failure(e, 504, board=selected.value, date=date)
    except TransportException as e:
        logging.error(f"failed to fetch free courts for {selected.value} on {date}: {e}")
        return failure(e, 502, board=selected.value, date=date)

    return {
        "date": resolved.date,
        "time": wanted,
        "board": selected.value,
        "slots": [slot.summary() for slot in slots],
    }, 200


def direct_booking(
    parser: Parser,
    date: Optional[str],
    time: Optional[str],
    court_number,
    board: Optional[str],
    cancel: Optional[threading.Event] = None,
) -> Response:
    echo = {"success": False, "board": board, "date": date, "time": time}

    try:
        if not time or court_number in (None, ""):
            raise InvalidRequest(
                "Missing required parameters: date, time, court_number, board"
            )
        day = parse_date(date)
        wanted = parse_time(time)
        selected = parse_board(board)
        number = int(court_number)
    except (InvalidRequest, ValueError, TypeError) as e:
        return failure(e, 400, **echo)

    echo["board"] = selected.value
    court = f"Tennis n°{number}"

    try:
        resolved, slot = parser.find_slot(day, wanted, number, selected, cancel=cancel)
    except DateNotFoundException as e:
        return failure(e, 404, **echo)
    except ResolutionCancelledException as e:
        return failure(e, 504, **echo)
    except TransportException as e:
        logging.error(f"direct booking lookup failed for {court} at {wanted} on {date}: {e}")
        return failure(e, 502, **echo)

    if slot is None:
        return {
            **echo,
            "error": f"Time slot {wanted} not available or not free on {court}",
        }, 404

    return {
        "success": True,
        "reservation_url": slot.booking_url or resolved.url,
        "board": selected.value,
        "date": resolved.date,
        "time": wanted,
        "court_number": number,
        "court": court,
        "has_direct_link": slot.booking_url is not None,
    }, 200
