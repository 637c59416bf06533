import re
from typing import Pattern, Union

from .error import MalformedInputError


class Cursor:
    """Left-to-right view over a mangled name.

    Patterns are always matched at the current position, and a successful
    `consume` moves past the match. There is no way to move backwards."""

    def __init__(self, src: str) -> None:
        self._src = src
        self._pos = 0

    @staticmethod
    def _compile(pattern: Union[str, Pattern[str]]) -> Pattern[str]:
        if isinstance(pattern, str):
            return re.compile(pattern)
        return pattern

    def consume(self, pattern: Union[str, Pattern[str]]) -> "re.Match[str]":
        match = self._compile(pattern).match(self._src, self._pos)
        if match is None:
            raise MalformedInputError(remaining=self.remaining())
        self._pos = match.end()
        return match

    def peek_matches(self, pattern: Union[str, Pattern[str]]) -> bool:
        return self._compile(pattern).match(self._src, self._pos) is not None

    def remaining_length(self) -> int:
        return len(self._src) - self._pos

    def remaining(self) -> str:
        return self._src[self._pos :]
