import logging
import re
import unicodedata
from typing import Dict, List, Optional

import bs4

from fairplaybot.model import Slot
from fairplaybot.urls import absolute_url

# tolerates "n°", "nº", a mis-decoded "nÂ°", "no" or a bare "n"
court_header = re.compile(r"tennis\s*n[^\d\s]{0,2}\s*(\d+)", re.IGNORECASE)
site_time = re.compile(r"(\d{1,2})h(\d{2})")
clock_time = re.compile(r"^(\d{2}):(\d{2})$")

closed_marker = re.compile(r"\bferme\b")  # matched against folded text, "Fermé"


def fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).lower()


def cell_text(cell: bs4.element.Tag) -> str:
    return cell.get_text(" ", strip=True)


def normalize_time(text: str) -> Optional[str]:
    """Turns the site's "20h30" into "20:30", None when there is no valid time."""
    match = site_time.search(text)

    if match is None:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None

    return f"{hours:02d}:{minutes:02d}"


def add_hour(time: str) -> str:
    match = clock_time.match(time)

    if match is None:
        raise ValueError(f"not a HH:MM time: {time}")

    hours = (int(match.group(1)) + 1) % 24
    return f"{hours:02d}:{match.group(2)}"


def court_name(text: str) -> Optional[str]:
    match = court_header.search(text.strip())

    if match is None:
        return None

    return f"Tennis n°{match.group(1)}"


def is_cell_closed(text: str) -> bool:
    return closed_marker.search(fold(text)) is not None


def is_cell_free(text: str) -> bool:
    return not is_cell_closed(text)


def booking_url_for_cell(cell: bs4.element.Tag) -> Optional[str]:
    link = cell.find("a")

    if link is None or isinstance(link, bs4.element.NavigableString):
        return None

    href = link.get("href")

    if href is None:
        return None

    if isinstance(href, list):
        href = href[0]

    return absolute_url(href)


def largest_table(soup: bs4.BeautifulSoup) -> Optional[bs4.element.Tag]:
    tables: List[bs4.element.Tag] = soup.find_all("table")

    if len(tables) == 0:
        return None

    # max() keeps the first of equally sized tables
    return max(tables, key=lambda table: len(table.find_all("td")))


def row_cells(row: bs4.element.Tag) -> List[bs4.element.Tag]:
    return row.find_all(["th", "td"], recursive=False)


def court_columns(header: bs4.element.Tag) -> Dict[int, str]:
    columns: Dict[int, str] = {}

    for index, cell in enumerate(row_cells(header)):
        name = court_name(cell_text(cell))
        if name is not None:
            columns[index] = name

    return columns


def parse_free_slots(html, date: str) -> List[Slot]:
    """Free one-hour slots per court from one day's schedule page.

    `date` is the day the page shows, as YYYY-MM-DD. Missing or unexpected
    markup gives fewer (or no) slots, never an exception.
    """
    soup = bs4.BeautifulSoup(html, "html.parser")

    table = largest_table(soup)
    if table is None:
        logging.warning("no schedule table on the page")
        return []

    rows: List[bs4.element.Tag] = table.find_all("tr")
    if len(rows) < 2:
        logging.warning("schedule table has no data rows")
        return []

    columns = court_columns(rows[0])
    if len(columns) == 0:
        logging.warning("no court columns in the schedule header")
        return []

    slots: List[Slot] = []
    for row in rows[1:]:
        cells = row_cells(row)

        if len(cells) == 0:
            continue

        start = normalize_time(cell_text(cells[0]))
        if start is None:
            continue

        end = add_hour(start)

        for index, cell in enumerate(cells):
            court = columns.get(index)
            if court is None or index == 0:
                continue

            if not is_cell_free(cell_text(cell)):
                continue

            slots.append(
                Slot(
                    date=date,
                    court=court,
                    start=start,
                    end=end,
                    booking_url=booking_url_for_cell(cell),
                )
            )

    logging.debug(f"found {len(slots)} free slots on {date}")

    return slots


def filter_slots_at(slots: List[Slot], time: str) -> List[Slot]:
    return [slot for slot in slots if slot.start == time]


def parse_free_slots_at_time(html, date: str, time: str) -> List[Slot]:
    return filter_slots_at(parse_free_slots(html, date), time)
