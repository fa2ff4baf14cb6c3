"""Token stream over command line arguments.

The grammar is positional, so the parser walks the arguments with a
cursor and a single token of lookahead to tell options from values.
"""

from typing import List, Optional, Sequence


def is_option(token: str) -> bool:
    """Option-like tokens start with a dash. A lone "-" is a value."""
    return token.startswith("-") and token != "-"


class TokenStream:
    """Cursor over an argument vector.

    Examples:
        >>> stream = TokenStream(["search", "firefox"])
        >>> stream.peek()
        'search'
        >>> stream.next()
        'search'
        >>> stream.remaining
        ['firefox']
    """

    def __init__(self, tokens: Sequence[str]):
        self._tokens: List[str] = list(tokens)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._tokens)

    @property
    def position(self) -> int:
        """Index of the next token to be consumed."""
        return self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    @property
    def remaining(self) -> List[str]:
        return self._tokens[self._pos:]

    def peek(self) -> Optional[str]:
        """Return the next token without consuming it, or None at the end."""
        if self.at_end:
            return None
        return self._tokens[self._pos]

    def next(self) -> Optional[str]:
        """Consume and return the next token, or None at the end."""
        token = self.peek()
        if token is not None:
            self._pos += 1
        return token

    def next_is_option(self) -> bool:
        token = self.peek()
        return token is not None and is_option(token)
