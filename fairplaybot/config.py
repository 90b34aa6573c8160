import logging
import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
TELEGRAM_API_KEY = os.environ.get("TELEGRAM_API_KEY")
TIMEZONE = "Europe/Zurich"  # the club's local day decides what "today" is
REQUEST_TIMEOUT = 15  # seconds, per fetch
MAX_HOPS = 10
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"


class MetaConfig(type):
    @property
    def log_level(cls):
        return LOG_LEVEL

    @property
    def timezone(cls):
        return TIMEZONE

    @property
    def request_timeout(cls):
        return REQUEST_TIMEOUT

    @property
    def max_hops(cls):
        return MAX_HOPS

    @property
    def user_agent(cls):
        return USER_AGENT

    @property
    def telegram_api_key(cls):
        if TELEGRAM_API_KEY is None:
            error = Exception("TELEGRAM_API_KEY is not set")
            logging.exception(error)
            raise error

        return TELEGRAM_API_KEY


class Config(metaclass=MetaConfig):
    pass
