import re
from datetime import date
from typing import List, Optional

import bs4

from fairplaybot.model import DayLink
from fairplaybot.urls import absolute_url, date_token_param, get_query_param

# the site's abbreviations, Sunday first
day_abbreviations = ["Di", "Lu", "Ma", "Me", "Je", "Ve", "Sa"]

onclick_target = re.compile(r"href\s*=\s*'([^']+)'")


def site_day_label(day: date) -> str:
    """Label of the day button the site renders for `day`, e.g. "Ve 12"."""
    # isoweekday() is 1 for Monday .. 7 for Sunday
    abbreviation = day_abbreviations[day.isoweekday() % 7]
    return f"{abbreviation} {day.day}"


def target_for_button(button: bs4.element.Tag) -> Optional[str]:
    # onclick="window.location.href='tableau.php?responsive=false&d=...'; return false;"
    onclick = button.get("onclick")

    if isinstance(onclick, list):
        onclick = onclick[0]

    if onclick:
        match = onclick_target.search(onclick)
        if match is not None:
            return absolute_url(match.group(1))

    href = button.get("href")

    if isinstance(href, list):
        href = href[0]

    if href:
        return absolute_url(href)

    return None


def extract_day_links(html) -> List[DayLink]:
    soup = bs4.BeautifulSoup(html, "html.parser")
    buttons: List[bs4.element.Tag] = soup.select(
        ".barre-top .btn-bar, .barre-top .btn-bar-active"
    )

    links: List[DayLink] = []
    for button in buttons:
        url = target_for_button(button)
        token = get_query_param(url, date_token_param) if url is not None else None

        links.append(
            DayLink(
                label=" ".join(button.get_text().split()),
                url=url,
                token=token,
                active="btn-bar-active" in (button.get("class") or []),
            )
        )

    return links
