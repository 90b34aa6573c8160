from fairplaybot.fetcher.Fetcher import Fetcher
from fairplaybot.fetcher.LiveFetcher import LiveFetcher
from fairplaybot.fetcher.TransportException import TransportException

__all__ = ["Fetcher", "LiveFetcher", "TransportException"]
