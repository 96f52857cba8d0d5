"""Splitting of command lines into whitespace-separated arguments."""

from __future__ import annotations

import re

# The characters the C locale classifies as whitespace.
_WHITESPACE = " \t\n\v\f\r"
_WORD_PATTERN = re.compile(f"[^{re.escape(_WHITESPACE)}]+")


class TooManyArgumentsError(ValueError):
    """Raised when a line holds more arguments than allowed."""


def strip_whitespaces(text: str) -> str:
    """Strip whitespace from both ends of ``text``."""
    return text.strip(_WHITESPACE)


class Arguments:
    """Accumulates the arguments of command lines up to a fixed maximum."""

    def __init__(self, max_argc: int) -> None:
        self._max_argc = max_argc
        self.argv: list[str] = []

    @property
    def max_argc(self) -> int:
        return self._max_argc

    @property
    def argc(self) -> int:
        return len(self.argv)

    def use(self, line: str) -> None:
        """Split ``line`` on whitespace and add each word to ``argv``.

        Words found before the limit is reached are kept when it is exceeded.
        """
        for match in _WORD_PATTERN.finditer(strip_whitespaces(line)):
            if self.argc >= self._max_argc:
                raise TooManyArgumentsError(
                    f"more than {self._max_argc} arguments given"
                )
            self.argv.append(match.group())

    def clear(self) -> None:
        """Forget every argument collected so far."""
        self.argv.clear()

    def __repr__(self) -> str:
        return f"Arguments(max_argc={self._max_argc}, argv={self.argv!r})"