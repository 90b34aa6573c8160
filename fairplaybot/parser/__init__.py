from fairplaybot.parser.DateNotFoundException import (
    DateNotFoundException,
    ResolutionCancelledException,
)
from fairplaybot.parser.Parser import Parser
from fairplaybot.parser.TokenResolver import TokenResolver

__all__ = [
    "DateNotFoundException",
    "Parser",
    "ResolutionCancelledException",
    "TokenResolver",
]
