"""Mailbox checking for $MAIL and $MAILPATH."""

from __future__ import annotations

import os
import stat
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

DEFAULT_MESSAGE = "you have mail in $_"
PATHSEP = ":"


def _regular_mtime(path: Optional[str]) -> int:
    if path is None:
        return 0
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return 0
    return int(st.st_mtime) if stat.S_ISREG(st.st_mode) else 0


@dataclass
class Mailbox:
    """A watched mail file and the message to announce for it."""

    path: Optional[str]
    message: Optional[str] = None
    mtime: int = 0

    @property
    def announcement(self) -> str:
        """The message template to announce, before substitution."""
        return self.message if self.message is not None else DEFAULT_MESSAGE


def parse_mailpath(value: str, posix: bool) -> List[Tuple[str, Optional[str]]]:
    """Split a $MAILPATH value into (path, message) pairs in written order.

    A message follows '%'; '\\%' stands for a literal percent. Outside
    POSIX mode a '?' also introduces the message.
    """
    result = []
    for element in value.split(PATHSEP):
        s = element
        p = 0
        idx: Optional[int] = None
        while True:
            m = s.find("%", p)
            if m < 0:
                break
            if m > 0 and s[m - 1] == "\\":
                s = s[:m - 1] + s[m:]
                p = m + 1
                continue
            idx = m
            break
        if idx is None and not posix:
            q = s.find("?")
            if q >= 0:
                idx = q
        if idx is None:
            result.append((s, None))
        else:
            result.append((s[:idx], s[idx + 1:]))
    return result


class MailChecker:
    """Watches mailboxes and announces new mail at a set interval."""

    def __init__(self, announce: Callable[[Mailbox], None],
                 posix: bool = False) -> None:
        self.announce = announce
        self.posix = posix
        self.interval = 0
        self.last_checked = 0.0
        self.mailbox = Mailbox(None)
        self.mailpath: List[Mailbox] = []

    def set_interval(self, seconds: int) -> None:
        """Set the minimum time between checks."""
        self.interval = seconds

    def set_mail(self, path: Optional[str]) -> None:
        """Watch the single file named by $MAIL."""
        self.mailbox = Mailbox(path, None, _regular_mtime(path))

    def set_mailpath(self, value: str) -> None:
        """Watch the files of a $MAILPATH value; the last listed is checked first."""
        boxes = [Mailbox(path, msg, _regular_mtime(path))
                 for path, msg in parse_mailpath(value, self.posix)]
        boxes.reverse()
        self.mailpath = boxes

    def check(self, now: Optional[float] = None,
              mail_is_set: bool = False) -> List[Mailbox]:
        """Check the mailboxes if the interval has passed; return those announced."""
        if now is None:
            now = time.time()
        if self.last_checked == 0:
            self.last_checked = now
        announced: List[Mailbox] = []
        if now - self.last_checked < self.interval:
            return announced
        self.last_checked = now

        if self.mailpath:
            boxes = self.mailpath
        elif mail_is_set:
            boxes = [self.mailbox]
        else:
            boxes = []

        for box in boxes:
            st = None
            if box.path is not None:
                try:
                    st = os.stat(box.path)
                except (OSError, ValueError):
                    st = None
            if st is not None and stat.S_ISREG(st.st_mode):
                mtime = int(st.st_mtime)
                if (st.st_size and box.mtime != mtime
                        and int(st.st_atime) <= mtime):
                    self.announce(box)
                    announced.append(box)
                box.mtime = mtime
            else:
                box.mtime = 0
        return announced