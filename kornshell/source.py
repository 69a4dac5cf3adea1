"""Stacked input sources for the lexer: strings, word lists, files and aliases."""

from __future__ import annotations

import enum
import sys
from collections import deque
from typing import Any, Iterable, List, Optional, TextIO

from kornshell.chartypes import strip_nuls

# Source flag bits.
SF_ECHO = 1 << 0      # echo input to the output stream
SF_ALIAS = 1 << 1     # an alias ended in a space: expand the next word too
SF_ALIASEND = 1 << 2  # alias text used up, one look-ahead character left
SF_TTY = 1 << 3       # standard input is a terminal


class LexError(Exception):
    """A lexical or syntax error found while reading input."""


class SourceType(enum.Enum):
    """Kinds of input source."""

    EOF = 0
    FILE = 1
    STDIN = 2
    STRING = 3
    WSTR = 4
    WORDS = 5
    WORDSEP = 6
    ALIAS = 7
    REREAD = 8


class Source:
    """One input source on the reader's stack.

    text is a string for STRING, WSTR, ALIAS and REREAD sources, a
    sequence of words for WORDS, and a text stream for FILE and STDIN.
    """

    def __init__(self, kind: SourceType, text: Any) -> None:
        self.kind = kind
        self.text: Optional[str] = None
        self.pos = 0
        self.words: deque = deque()
        self.stream: Optional[TextIO] = None
        self.alias: Any = None
        self.alias_value = ""
        self.flags = 0
        self.line = 0
        self.errline = 0
        self.file: Optional[str] = None
        self.next: Optional[Source] = None
        if kind in (SourceType.FILE, SourceType.STDIN):
            self.stream = text
        elif kind is SourceType.WORDS:
            self.words = deque(text or ())
        else:
            self.text = text
            if kind is SourceType.ALIAS:
                self.alias_value = text or ""

    def __repr__(self) -> str:
        return f"Source({self.kind.name}, line={self.line})"


class InputReader:
    """Reads characters from a stack of sources.

    Backslash-newline pairs are dropped unless ignore_backslash_newline is
    non-zero; backslash_skip tracks a backslash whose follower was pushed
    back so that the pair is not examined twice.
    """

    def __init__(self, source: Source) -> None:
        self.source = source
        self.backslash_skip = 0
        self.ignore_backslash_newline = 0
        self.interactive = False
        self.prompt = ""
        self.ps2 = "> "
        self.out: TextIO = sys.stderr

    def push(self, source: Source) -> None:
        """Make source the current input, reading the old one after it."""
        source.next = self.source
        self.source = source

    def _read_line(self, s: Source) -> None:
        interactive = self.interactive and s.kind is SourceType.STDIN
        if interactive:
            self.out.write(self.prompt)
            self.out.flush()
        else:
            s.line += 1
        line = ""
        if s.stream is not None:
            while True:
                try:
                    line = s.stream.readline()
                except InterruptedError:
                    continue
                break
        self.source = s
        if not line:
            if s.kind is SourceType.FILE and s.stream is not None:
                s.stream.close()
            s.text = None
        else:
            s.text = strip_nuls(line)
            s.pos = 0
            if interactive and s.text.strip(" \t\n"):
                s.line += 1
        if interactive:
            self.prompt = self.ps2

    def _raw(self) -> str:
        s = self.source
        while True:
            if s.text is not None and s.pos < len(s.text):
                c = s.text[s.pos]
                s.pos += 1
                return c
            s.text = None
            s.pos = 0
            kind = s.kind
            if kind is SourceType.EOF:
                return ""
            if kind in (SourceType.FILE, SourceType.STDIN):
                self._read_line(s)
            elif kind is SourceType.WORDS:
                s.text = s.words.popleft() if s.words else None
                s.kind = SourceType.WORDSEP
            elif kind is SourceType.WORDSEP:
                if not s.words:
                    s.text = "\n"
                    s.kind = SourceType.EOF
                else:
                    s.text = " "
                    s.kind = SourceType.WORDS
            elif kind is SourceType.ALIAS:
                if s.flags & SF_ALIASEND:
                    self.source = s.next
                    self.source.flags |= s.flags & SF_ALIAS
                    s = self.source
                    continue
                if s.alias_value and s.alias_value[-1].isspace():
                    self.source = s = s.next
                    s.flags |= SF_ALIAS
                    continue
                self.source = s.next
                self.source.flags |= s.flags & SF_ALIAS
                c = self._raw()
                if c:
                    s.flags |= SF_ALIASEND
                    s.text = c
                    s.pos = 0
                    s.next = self.source
                    self.source = s
                    continue
                s = self.source
                s.text = None
            elif kind is SourceType.REREAD:
                self.source = s = s.next
                continue
            if s.text is None:
                s.kind = SourceType.EOF
                s.pos = 0
                return ""
            if s.flags & SF_ECHO:
                self.out.write(s.text)
                self.out.flush()

    def getc(self) -> str:
        """Next input character, skipping backslash-newline; '' at end of input."""
        if self.ignore_backslash_newline:
            return self._raw()
        if self.backslash_skip == 1:
            self.backslash_skip = 2
            return self._raw()
        self.backslash_skip = 0
        while True:
            c = self._raw()
            if c == "\\":
                c2 = self._raw()
                if c2 == "\n":
                    continue
                self.ungetc(c2)
                self.backslash_skip = 1
            return c

    def ungetc(self, c: str) -> None:
        """Push back the character just read."""
        if self.backslash_skip:
            self.backslash_skip -= 1
        s = self.source
        if s.text is None and c == "":
            return
        if s.pos > 0:
            s.pos -= 1
        else:
            reread = Source(SourceType.REREAD, c)
            self.push(reread)

    def error(self, message: str) -> None:
        """Drop alias and pending input, then raise LexError with message."""
        while self.source.kind in (SourceType.ALIAS, SourceType.REREAD):
            self.source = self.source.next
        self.source.text = None
        self.source.pos = 0
        raise LexError(message)

    def read_heredoc(self, delim: str, skip_tabs: bool, evaluate: bool) -> str:
        """Read here-document lines up to a line holding only delim."""
        if not evaluate:
            self.ignore_backslash_newline += 1
        try:
            buf: List[str] = []
            while True:
                matched = 0
                skiptabs = skip_tabs
                xpos = len(buf)
                while (c := self.getc()) != "":
                    if skiptabs:
                        if c == "\t":
                            continue
                        skiptabs = False
                    if matched >= len(delim) or c != delim[matched]:
                        break
                    buf.append(c)
                    matched += 1
                if matched == len(delim) and c in ("", "\n"):
                    del buf[xpos:]
                    break
                self.ungetc(c)
                while (c := self.getc()) != "\n":
                    if c == "":
                        self.error(f"here document `{delim}' unclosed")
                    buf.append(c)
                buf.append(c)
            return "".join(buf)
        finally:
            if not evaluate:
                self.ignore_backslash_newline -= 1


def expand_prompt_bangs(ps1: str, lineno: int) -> str:
    """Replace '!' in a prompt with lineno and '!!' with a literal '!'."""
    out: List[str] = []
    i = 0
    n = len(ps1)
    while i < n:
        if ps1[i] != "!":
            out.append(ps1[i])
            i += 1
            continue
        i += 1
        if i < n and ps1[i] == "!":
            out.append("!")
            i += 1
        else:
            out.append(str(lineno))
    return "".join(out)


def _read_all(reader: InputReader) -> str:
    chars: List[str] = []
    while (c := reader.getc()) != "":
        chars.append(c)
    return "".join(chars)


__all__: Iterable[str] = (
    "LexError", "SourceType", "Source", "InputReader", "expand_prompt_bangs",
    "SF_ECHO", "SF_ALIAS", "SF_ALIASEND", "SF_TTY",
)