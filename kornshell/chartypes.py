"""Character classes and small text helpers used by the lexer and builtins."""

from __future__ import annotations

import enum
from typing import Iterable, List


class CharClass(enum.IntFlag):
    """Character class bits."""

    ALPHA = 1 << 0   # a-z A-Z _
    DIGIT = 1 << 1   # 0-9
    LEX1 = 1 << 2    # characters that end a word
    VAR1 = 1 << 3    # single-character special parameters
    IFSWS = 1 << 4   # IFS white space
    SUBOP1 = 1 << 5  # ${x-y} style operators
    SUBOP2 = 1 << 6  # ${x#y} style operators
    IFS = 1 << 7     # members of $IFS
    QUOTE = 1 << 8   # characters that need quoting


_NCHARS = 256


class CharTypes:
    """A table giving the class bits of every byte-sized character."""

    def __init__(self) -> None:
        self._types: List[CharClass] = [CharClass(0)] * _NCHARS
        letters = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"
        self.set(letters, CharClass.ALPHA)
        self.set("0123456789", CharClass.DIGIT)
        self.set(" \t\n|&;<>()", CharClass.LEX1)
        self._types[0] |= CharClass.LEX1
        self.set("*@#!$-?", CharClass.VAR1)
        self.set(" \t\n", CharClass.IFSWS)
        self.set("=-+?", CharClass.SUBOP1)
        self.set("#%", CharClass.SUBOP2)
        self.set(" \n\t\"#$&'()*;<>?[\\`|", CharClass.QUOTE)

    def set(self, chars: str, cls: CharClass) -> None:
        """Add cls to every character of chars.

        Setting IFS first removes IFS from every character, then adds it
        to NUL and to chars.
        """
        cls = CharClass(cls)
        if cls & CharClass.IFS:
            self._types = [t & ~CharClass.IFS for t in self._types]
            self._types[0] |= CharClass.IFS
        for ch in chars:
            code = ord(ch)
            if code < _NCHARS:
                self._types[code] |= cls

    def has(self, c: str, cls: CharClass) -> bool:
        """True if character c belongs to any of the classes in cls."""
        code = ord(c) if c else 0
        if code >= _NCHARS:
            return False
        return bool(self._types[code] & cls)


_DIGITS = "0123456789ABCDEF"


def to_base(n: int, base: int) -> str:
    """Format a non-negative integer in the given base (2 to 16)."""
    if not 2 <= base <= 16:
        raise ValueError(f"base out of range: {base}")
    if n < 0:
        raise ValueError(f"negative number: {n}")
    out = []
    while True:
        n, rem = divmod(n, base)
        out.append(_DIGITS[rem])
        if n == 0:
            break
    return "".join(reversed(out))


def parse_decimal(text: str) -> int:
    """Parse an optionally signed decimal number; raise ValueError if bad."""
    body = text[1:] if text[:1] in ("-", "+") else text
    if not body or not all("0" <= ch <= "9" for ch in body):
        raise ValueError(f"{text}: bad number")
    value = int(body)
    return -value if text.startswith("-") else value


def strip_nuls(text: str) -> str:
    """Remove every NUL character from text."""
    return text.replace("\0", "")


_QUOTE_CHARS = frozenset(" \n\t\"#$&'()*;<>?[\\`|")


def quote_value(text: str) -> str:
    """Quote text so that the shell reads it back as one word."""
    if not any(ch in _QUOTE_CHARS for ch in text):
        return text
    out = []
    inquote = False
    for ch in text:
        if ch == "'":
            out.append("'\\'" if inquote else "\\'")
            inquote = False
        else:
            if not inquote:
                out.append("'")
                inquote = True
            out.append(ch)
    if inquote:
        out.append("'")
    return "".join(out)


def format_columns(items: Iterable[str], max_width: int, width: int) -> str:
    """Lay items out in columns, filled down each column first."""
    cells = [item[:max_width] for item in items]
    n = len(cells)
    cols = width // (max_width + 1) or 1
    rows = (n + cols - 1) // cols
    if n and cols > rows:
        rows, cols = cols, rows
        rows = min(rows, n)
    nspace = int((width - max_width * cols) / cols) if cols else 1
    if nspace <= 0:
        nspace = 1
    lines = []
    for r in range(rows):
        parts = []
        for c in range(cols):
            i = c * rows + r
            if i < n:
                parts.append(cells[i].ljust(max_width))
                if c + 1 < cols:
                    parts.append(" " * nspace)
        lines.append("".join(parts) + "\n")
    return "".join(lines)