import urllib.parse
from enum import Enum

site_root = "https://online.centrefairplay.ch/"

external_url = "https://online.centrefairplay.ch/tableau.php?responsive=false"
internal_url = "https://online.centrefairplay.ch/tableau_int.php?responsive=false"

date_token_param = "d"
cache_buster_param = "_"


class Board(Enum):
    EXTERNAL = "external"
    INTERNAL = "internal"

    @classmethod
    def from_name(cls, name: str) -> "Board":
        normalized = name.strip().lower()
        aliases = {"ext": cls.EXTERNAL, "int": cls.INTERNAL}

        if normalized in aliases:
            return aliases[normalized]

        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f'invalid board "{name}", must be "external" or "internal"'
            ) from None

    @property
    def base_url(self) -> str:
        if self is Board.EXTERNAL:
            return external_url
        return internal_url


def set_query_param(url: str, name: str, value: str) -> str:
    parts = urllib.parse.urlsplit(url)
    query = [
        (k, v)
        for k, v in urllib.parse.parse_qsl(parts.query, keep_blank_values=True)
        if k != name
    ]
    query.append((name, value))

    return urllib.parse.urlunsplit(
        parts._replace(query=urllib.parse.urlencode(query, safe=","))
    )


def get_query_param(url: str, name: str):
    values = urllib.parse.parse_qs(urllib.parse.urlsplit(url).query).get(name)

    if not values:
        return None

    return values[0]


def absolute_url(href: str) -> str:
    return urllib.parse.urljoin(site_root, href)


def build_day_url(board: Board, token: str, base_url=None) -> str:
    return set_query_param(base_url or board.base_url, date_token_param, token)


def with_cache_buster(url: str, stamp: int) -> str:
    return set_query_param(url, cache_buster_param, str(stamp))
