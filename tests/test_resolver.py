import threading
from datetime import date
from typing import List

from ward import raises, test

from fairplaybot.fetcher import Fetcher, TransportException
from fairplaybot.parser import (
    DateNotFoundException,
    ResolutionCancelledException,
    TokenResolver,
)
from fairplaybot.parser.DayStripParser import extract_day_links
from fairplaybot.urls import Board, get_query_param
from tests.FixtureFetcher import (
    CancellingFetcher,
    FailingFetcher,
    FixtureFetcher,
    FlakyFetcher,
)


class EndlessFetcher(Fetcher):
    """Pages whose strip never shows the wanted day but always links onwards."""

    def __init__(self) -> None:
        self.urls: List[str] = []

    def fetch(self, url: str) -> str:
        self.urls.append(url)
        page = len(self.urls)

        buttons = "".join(
            f"<span class=\"btn-bar\" onclick=\"window.location.href='tableau.php?p={page}-{i}'\">Xx {i}</span>"
            for i in range(8)
        )
        return f'<div class="barre-top">{buttons}</div>'


@test("resolve() finds a day shown on the first page")
def _():
    fetcher = FixtureFetcher()
    resolved = TokenResolver(fetcher).resolve(date(2026, 10, 23), Board.EXTERNAL)

    assert resolved.token == "1679091c"
    assert resolved.label == "Ve 23"
    assert resolved.date == "2026-10-23"
    assert resolved.board == Board.EXTERNAL
    assert resolved.url == "https://online.centrefairplay.ch/tableau.php?responsive=false&d=1679091c"
    assert len(fetcher.urls) == 1


@test("resolve() follows the last button until the day appears")
def _():
    fetcher = FixtureFetcher()
    resolved = TokenResolver(fetcher).resolve(date(2026, 10, 29), Board.EXTERNAL)

    assert resolved.token == "c20ad4d7"
    assert len(fetcher.urls) == 2
    assert get_query_param(fetcher.urls[1], "d") == "45c48cce"


@test("resolve() crawls the internal board from its own base URL")
def _():
    fetcher = FixtureFetcher()
    resolved = TokenResolver(fetcher).resolve(date(2026, 10, 20), Board.INTERNAL)

    assert resolved.token == "a1d0c6e8"
    assert fetcher.urls[0] == "https://online.centrefairplay.ch/tableau_int.php?responsive=false"


@test("resolve() starts from substituted base URLs")
def _():
    fetcher = FixtureFetcher()
    base_urls = {
        Board.EXTERNAL: "http://fixtures.local/tableau.php?responsive=false",
        Board.INTERNAL: "http://fixtures.local/tableau_int.php?responsive=false",
    }
    resolved = TokenResolver(fetcher, base_urls=base_urls).resolve(
        date(2026, 10, 21), Board.EXTERNAL
    )

    assert fetcher.urls[0] == "http://fixtures.local/tableau.php?responsive=false"
    assert resolved.url == "http://fixtures.local/tableau.php?responsive=false&d=a87ff679"


@test("the page behind a resolved token shows that day as active")
def _():
    fetcher = FixtureFetcher()
    resolved = TokenResolver(fetcher).resolve(date(2026, 10, 23), Board.EXTERNAL)

    links = extract_day_links(fetcher.fetch(resolved.url))
    active = [l for l in links if l.active]

    assert [l.label for l in active] == ["Ve 23"]


@test("resolve() fails before the hop budget when the strip dead-ends")
def _():
    fetcher = FixtureFetcher()

    with raises(DateNotFoundException) as ex:
        TokenResolver(fetcher).resolve(date(2026, 11, 10), Board.EXTERNAL)

    assert ex.raised.label == "Ma 10"
    assert ex.raised.hops == 3
    assert len(fetcher.urls) == 3
    assert str(ex.raised) == 'Date "Ma 10" not found within 3 hops'


@test("resolve() gives up after exactly max_hops pages")
def _():
    fetcher = EndlessFetcher()

    with raises(DateNotFoundException) as ex:
        TokenResolver(fetcher).resolve(date(2026, 6, 12), Board.EXTERNAL, max_hops=4)

    assert len(fetcher.urls) == 4
    assert ex.raised.hops == 4
    assert str(ex.raised) == 'Date "Ve 12" not found within 4 hops'


@test("resolve() uses 10 hops by default")
def _():
    fetcher = EndlessFetcher()

    with raises(DateNotFoundException):
        TokenResolver(fetcher).resolve(date(2026, 6, 12), Board.EXTERNAL)

    assert len(fetcher.urls) == 10


@test("resolve() treats a page without a day strip as a dead end")
def _():
    class EmptyFetcher(Fetcher):
        def fetch(self, url: str) -> str:
            return "<html><body>Maintenance en cours</body></html>"

    with raises(DateNotFoundException) as ex:
        TokenResolver(EmptyFetcher()).resolve(date(2026, 10, 23), Board.EXTERNAL)

    assert ex.raised.hops == 1


@test("resolve() lets a transport failure through without retrying")
def _():
    fetcher = FailingFetcher(status_code=503)

    with raises(TransportException) as ex:
        TokenResolver(fetcher).resolve(date(2026, 10, 23), Board.EXTERNAL)

    assert ex.raised.status_code == 503
    assert len(fetcher.urls) == 1


@test("resolve() stops before fetching once cancelled")
def _():
    fetcher = FixtureFetcher()
    cancel = threading.Event()
    cancel.set()

    with raises(ResolutionCancelledException):
        TokenResolver(fetcher).resolve(date(2026, 10, 23), Board.EXTERNAL, cancel=cancel)

    assert fetcher.urls == []


@test("resolve() rejects a hop budget below one")
def _():
    with raises(ValueError):
        TokenResolver(FixtureFetcher()).resolve(date(2026, 10, 23), Board.EXTERNAL, max_hops=0)


@test("resolve() lets a transport failure on a later hop through")
def _():
    fetcher = FlakyFetcher(fail_after=1)

    with raises(TransportException) as ex:
        TokenResolver(fetcher).resolve(date(2026, 10, 29), Board.EXTERNAL)

    assert ex.raised.status_code == 500
    assert len(fetcher.urls) == 2
    assert get_query_param(fetcher.urls[1], "d") == "45c48cce"


@test("resolve() stops between hops once cancelled mid-walk")
def _():
    cancel = threading.Event()
    fetcher = CancellingFetcher(cancel)

    with raises(ResolutionCancelledException) as ex:
        TokenResolver(fetcher).resolve(date(2026, 10, 29), Board.EXTERNAL, cancel=cancel)

    assert ex.raised.hops == 1
    assert str(ex.raised) == 'Resolution of "Je 29" cancelled after 1 hops'
    assert len(fetcher.urls) == 1


@test("resolve() keeps the default base URL of a board left out of base_urls")
def _():
    fetcher = FixtureFetcher()
    base_urls = {Board.EXTERNAL: "http://fixtures.local/tableau.php?responsive=false"}
    resolved = TokenResolver(fetcher, base_urls=base_urls).resolve(
        date(2026, 10, 20), Board.INTERNAL
    )

    assert resolved.token == "a1d0c6e8"
    assert fetcher.urls[0] == "https://online.centrefairplay.ch/tableau_int.php?responsive=false"
