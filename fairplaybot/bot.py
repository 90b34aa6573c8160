#!/usr/bin/env python3

import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

from dateutil import parser as dateparser
from telegram import Update
from telegram.constants import ParseMode
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.helpers import escape_markdown

from fairplaybot import api
from fairplaybot.config import Config
from fairplaybot.fetcher import LiveFetcher
from fairplaybot.parser import Parser
from fairplaybot.parser.ScheduleParser import normalize_time
from fairplaybot.urls import Board

HELP = """
/token <date> [board] - date token the booking site uses for that day
/courts [date] [time] [board] - free courts, today by default
/book <date> <time> <court> [board] - booking link for one free court
/help - this message

Dates: 2026-10-23 or 23.10, times: 20:30 or 20h30, board: external or internal
"""


def md(value: Any) -> str:
    return escape_markdown(str(value), version=2)


def to_iso_date(value: str) -> str:
    try:
        return dateparser.isoparse(value).date().isoformat()
    except ValueError:
        return dateparser.parse(value, dayfirst=True).date().isoformat()


def to_clock_time(value: str) -> str:
    return normalize_time(value.replace(":", "h")) or value


def looks_like_time(value: str) -> bool:
    return normalize_time(value.replace(":", "h")) is not None


def date_and_time_args(args: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """/courts takes an optional date then an optional time, or a time alone."""
    if len(args) == 1 and looks_like_time(args[0]):
        return None, args[0]

    date = args[0] if len(args) > 0 else None
    time = args[1] if len(args) > 1 else None
    return date, time


def split_args(args: List[str]) -> Tuple[List[str], Optional[str]]:
    """Separates a trailing board name from the positional arguments."""
    if len(args) > 0:
        try:
            return args[:-1], Board.from_name(args[-1]).value
        except ValueError:
            pass

    return args, None


def format_error(payload: Dict[str, Any]) -> str:
    return f"⚠️ {md(payload['error'])}"


def format_token(payload: Dict[str, Any]) -> str:
    return (
        f"*{md(payload['label'])}* \\({md(payload['date'])}, {md(payload['board'])}\\)\n"
        f"token: `{md(payload['token'])}`"
    )


def format_courts(payload: Dict[str, Any]) -> str:
    title = f"*Free courts on {md(payload['date'])}*"
    if payload["time"] is not None:
        title += f" at {md(payload['time'])}"

    if len(payload["slots"]) == 0:
        return f"{title}\n\nnothing free"

    lines = [
        f"• {md(slot['start'])}\\-{md(slot['end'])} {md(slot['court'])}"
        for slot in payload["slots"]
    ]
    return f"{title}\n\n" + "\n".join(lines)


def format_booking(payload: Dict[str, Any]) -> str:
    return (
        f"*{md(payload['court'])}* is free on {md(payload['date'])} at {md(payload['time'])}\n\n"
        f"[Book here]({escape_markdown(payload['reservation_url'], version=2, entity_type='text_link')})"
    )


class Bot:
    def __init__(self, telegram_api_key: str) -> None:
        self.parser = Parser(fetcher=LiveFetcher())
        self.application = Application.builder().token(telegram_api_key).build()
        self.application.add_handler(CommandHandler("start", self.__help))
        self.application.add_handler(CommandHandler("help", self.__help))
        self.application.add_handler(CommandHandler("token", self.__token))
        self.application.add_handler(CommandHandler("courts", self.__courts))
        self.application.add_handler(CommandHandler("book", self.__book))

    async def __reply(self, update: Update, text: str) -> None:
        if update.message is None:
            logging.info("update.message is None, bailing early")
            return

        try:
            await update.message.reply_text(text, parse_mode=ParseMode.MARKDOWN_V2)
        except Exception as e:
            logging.warning("error sending message: %s", e)

    async def __help(self, update: Update, _: ContextTypes.DEFAULT_TYPE) -> None:
        await self.__reply(update, md(HELP))

    async def __token(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        args, board = split_args(context.args or [])

        if len(args) != 1:
            await self.__reply(update, md("Wrong usage. Please type '/token 2026-10-23 external'"))
            return

        try:
            date = to_iso_date(args[0])
        except (ValueError, OverflowError):
            await self.__reply(update, md(f"Could not read the date '{args[0]}'"))
            return

        logging.info(f"resolving date token for {date} on {board or 'external'}")
        payload, status = await asyncio.to_thread(
            api.resolve_date_token, self.parser, date, board or Board.EXTERNAL.value
        )

        if status != 200:
            await self.__reply(update, format_error(payload))
            return

        await self.__reply(update, format_token(payload))

    async def __courts(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        args, board = split_args(context.args or [])

        if len(args) > 2:
            await self.__reply(update, md("Wrong usage. Please type '/courts 2026-10-23 20:30'"))
            return

        date_arg, time_arg = date_and_time_args(args)

        try:
            date = to_iso_date(date_arg) if date_arg is not None else None
        except (ValueError, OverflowError):
            await self.__reply(update, md(f"Could not read the date '{date_arg}'"))
            return

        time = to_clock_time(time_arg) if time_arg is not None else None

        logging.info(f"looking up free courts for {date or 'today'} at {time}")
        payload, status = await asyncio.to_thread(
            api.free_courts, self.parser, date, time, board or Board.EXTERNAL.value
        )

        if status != 200:
            await self.__reply(update, format_error(payload))
            return

        await self.__reply(update, format_courts(payload))

    async def __book(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        args, board = split_args(context.args or [])

        if len(args) != 3:
            await self.__reply(update, md("Wrong usage. Please type '/book 2026-10-23 20:30 6'"))
            return

        try:
            date = to_iso_date(args[0])
        except (ValueError, OverflowError):
            await self.__reply(update, md(f"Could not read the date '{args[0]}'"))
            return

        payload, status = await asyncio.to_thread(
            api.direct_booking,
            self.parser,
            date,
            to_clock_time(args[1]),
            args[2],
            board or Board.EXTERNAL.value,
        )

        if status != 200:
            await self.__reply(update, format_error(payload))
            return

        await self.__reply(update, format_booking(payload))

    def start(self) -> None:
        logging.info("starting bot")
        self.application.run_polling()


def main() -> None:
    bot = Bot(telegram_api_key=Config.telegram_api_key)
    bot.start()


if __name__ == "__main__":
    log_level = Config.log_level
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)-5.5s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    main()
