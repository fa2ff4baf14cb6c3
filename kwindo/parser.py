"""Command grammar parser.

Turns the positional part of the command line into command intents:

    search <term>
    getactivewindow
    <action> [options...] [<window>]

where <window> is ``%N`` (1-based window stack position), ``%@`` (every
window on the stack) or a literal KWin window id, defaulting to ``%1``.

Intents are yielded one at a time so the compiler can lower each one as
soon as it is recognized. The first bad token raises CompileError.
"""

import logging
import re
from typing import Iterator, List, Sequence

from .actions import is_action
from .errors import CompileError, ErrorCode
from .models import (
    ActionIntent,
    GetActiveWindowIntent,
    Intent,
    SearchIntent,
    Selector,
    StackAllSelector,
    StackIndexSelector,
    WindowIdSelector,
)
from .tokens import TokenStream, is_option

logger = logging.getLogger(__name__)

SEARCH = "search"
GETACTIVEWINDOW = "getactivewindow"

STACK_PREFIX = "%"
STACK_ALL = "%@"
DEFAULT_SELECTOR = StackIndexSelector(index=1)

_STACK_INDEX_RE = re.compile(r"%([0-9]+)")


def is_verb(token: str) -> bool:
    """True for every word that can start a command."""
    return token in (SEARCH, GETACTIVEWINDOW) or is_action(token)


def parse_selector(token: str) -> Selector:
    """Parse a window operand.

    Examples:
        >>> parse_selector("%@")
        StackAllSelector(kind='stack_all')
        >>> parse_selector("%2").index
        2
        >>> parse_selector("{8c3a9e2f-0000}").window_id
        '{8c3a9e2f-0000}'
    """
    if token == STACK_ALL:
        return StackAllSelector()

    if token.startswith(STACK_PREFIX):
        match = _STACK_INDEX_RE.fullmatch(token)
        if match is None:
            raise CompileError(
                ErrorCode.INVALID_SELECTOR,
                f"invalid window selector: {token}",
                token=token,
                suggestion="Use %N for a stack position, %@ for all windows, or a window id",
            )
        return StackIndexSelector(index=int(match.group(1)))

    return WindowIdSelector(window_id=token)


def _parse_search(stream: TokenStream) -> SearchIntent:
    term = stream.peek()
    if term is None:
        raise CompileError(
            ErrorCode.MISSING_OPERAND,
            "missing search term",
            token=SEARCH,
            suggestion="Usage: search <term>",
        )
    if is_option(term):
        raise CompileError(
            ErrorCode.UNEXPECTED_OPTION,
            f"unexpected option: {term} (expected a search term)",
            token=term,
        )
    stream.next()
    return SearchIntent(term=term)


def _parse_action(verb: str, stream: TokenStream) -> ActionIntent:
    # Action options are reserved; accept and ignore them.
    while stream.next_is_option():
        logger.debug(f"Ignoring option {stream.next()!r} for {verb}")

    operand = stream.peek()
    if operand is None or is_verb(operand):
        return ActionIntent(verb=verb, selector=DEFAULT_SELECTOR)

    stream.next()
    return ActionIntent(verb=verb, selector=parse_selector(operand))


def iter_intents(stream: TokenStream) -> Iterator[Intent]:
    """Yield intents in command line order until the stream is exhausted.

    Raises:
        CompileError: On an unknown verb, a misplaced option, a missing
            search term or a malformed ``%`` selector
    """
    while not stream.at_end:
        token = stream.next()

        if is_option(token):
            raise CompileError(
                ErrorCode.UNEXPECTED_OPTION,
                f"unexpected option: {token}",
                token=token,
                suggestion="Global options must come before the first command",
            )

        if token == SEARCH:
            yield _parse_search(stream)
        elif token == GETACTIVEWINDOW:
            yield GetActiveWindowIntent()
        elif is_action(token):
            yield _parse_action(token, stream)
        else:
            raise CompileError(
                ErrorCode.UNKNOWN_COMMAND,
                f"unknown command: {token}",
                token=token,
            )


def parse_commands(tokens: Sequence[str]) -> List[Intent]:
    """Parse a whole argument vector into a list of intents."""
    return list(iter_intents(TokenStream(tokens)))
