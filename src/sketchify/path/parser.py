"""
SVG path-data tokenizer and parser.

Turns a path `d` string into typed command segments. A tokenizer failure
yields an empty token list ("nothing to draw"); a malformed command raises
PathSyntaxError.
"""

import re
from typing import List

from sketchify.models import PARAMS_COUNT, CommandToken, NumberToken, Segment, Token


_COMMAND_RE = re.compile(r"[aAcChHlLmMqQsStTvVzZ]")
_NUMBER_RE = re.compile(r"(?:[-+]?[0-9]+(?:\.[0-9]*)?|[-+]?\.[0-9]+)(?:[eE][-+]?[0-9]+)?")
_SEPARATOR_RE = re.compile(r"[\t\n\r ,]+")


class PathSyntaxError(ValueError):
    """Raised when path data cannot be parsed into segments."""


def tokenize(d: str) -> List[Token]:
    """
    Split path data into command and number tokens.

    Returns an empty list if an unrecognized character is found.
    """
    tokens = []
    pos = 0
    length = len(d)

    while pos < length:
        match = _COMMAND_RE.match(d, pos)
        if match:
            tokens.append(CommandToken(value=match.group(0)))
            pos = match.end()
            continue

        match = _NUMBER_RE.match(d, pos)
        if match:
            tokens.append(NumberToken(value=float(match.group(0))))
            pos = match.end()
            continue

        match = _SEPARATOR_RE.match(d, pos)
        if match:
            pos = match.end()
            continue

        return []

    return tokens


def parse_path(d: str) -> List[Segment]:
    """
    Parse path data into a list of Segments.

    Repeated coordinate groups reuse the current command; after a move the
    current command becomes a line. Paths that do not start with a move get
    an implicit "M 0 0".

    Raises:
        PathSyntaxError: if parameters run short or a command appears where
            a number is expected.
    """
    tokens = tokenize(d)
    segments = []

    if not tokens:
        return segments

    mode = None
    first = tokens[0]
    if first.kind == "number" or first.value not in ("M", "m"):
        segments.append(Segment(key="M", data=[0.0, 0.0]))
        mode = "M"

    index = 0
    count = len(tokens)
    while index < count:
        token = tokens[index]
        if token.kind == "command":
            mode = token.value
            index += 1
        elif PARAMS_COUNT[mode] == 0:
            raise PathSyntaxError(f"Unexpected number {token.value!r} after command {mode!r}")

        params_count = PARAMS_COUNT[mode]
        if params_count > count - index:
            raise PathSyntaxError(f"Path data ended short for command {mode!r}")

        params = []
        for token in tokens[index:index + params_count]:
            if token.kind != "number":
                raise PathSyntaxError(f"Param not a number: {token.value!r} in command {mode!r}")
            params.append(token.value)
        index += params_count

        segments.append(Segment(key=mode, data=params))

        if mode == "M":
            mode = "L"
        elif mode == "m":
            mode = "l"

    return segments
