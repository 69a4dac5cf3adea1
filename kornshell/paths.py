"""Path construction from CDPATH-like lists, and path simplification."""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from typing import Optional

DIRSEP = "/"
PATHSEP = ":"


def _is_relative(path: str) -> bool:
    return not path.startswith(DIRSEP)


@dataclass(frozen=True)
class MadePath:
    """Result of make_path.

    physical_offset is where the part that came after cwd starts;
    remaining is the rest of the CDPATH list, or None when exhausted.
    """

    path: str
    physical_offset: int
    used_cdpath: bool
    remaining: Optional[str]


def make_path(cwd: Optional[str], file: Optional[str],
              cdpath: Optional[str]) -> MadePath:
    """Build a file name from cwd, the first element of cdpath and file."""
    if file is None:
        file = ""
    remaining = cdpath
    used = False
    use_cdpath = True
    prefix = ""

    if not _is_relative(file):
        phys = 0
        use_cdpath = False
    else:
        if file.startswith("."):
            c = file[1:2]
            if c == ".":
                c = file[2:3]
            if c == DIRSEP or c == "":
                use_cdpath = False

        element = ""
        if cdpath is None:
            use_cdpath = False
        elif use_cdpath:
            element, sep, tail = cdpath.partition(PATHSEP)
            remaining = tail if sep else None

        if (not use_cdpath or not element or _is_relative(cdpath or "")) and cwd:
            prefix = cwd if cwd.endswith(DIRSEP) else cwd + DIRSEP
        phys = len(prefix)
        if use_cdpath and element:
            prefix += element if element.endswith(DIRSEP) else element + DIRSEP
            used = True

    if not use_cdpath:
        remaining = None
    return MadePath(prefix + file, phys, used, remaining)


def simplify_path(path: str) -> str:
    """Remove '.' and '..' components and repeated separators."""
    if not path:
        return path
    n = len(path)
    isrooted = path.startswith(DIRSEP)
    very_start = 1 if isrooted else 0
    out = list(path)

    def at(i: int) -> str:
        return path[i] if i < n else ""

    def put(i: int, ch: str) -> int:
        if i < len(out):
            out[i] = ch
        else:
            out.append(ch)
        return i + 1

    cur = t = start = very_start
    while True:
        while at(t) == DIRSEP:
            t += 1
        if at(t) == "":
            if cur == 0:
                cur = put(cur, ".")
            break
        if at(t) == ".":
            nxt = at(t + 1)
            if nxt in ("", DIRSEP):
                t += 1
                continue
            if nxt == "." and at(t + 2) in ("", DIRSEP):
                if not isrooted and cur == start:
                    if cur != very_start:
                        cur = put(cur, DIRSEP)
                    cur = put(cur, ".")
                    cur = put(cur, ".")
                    start = cur
                elif cur != start:
                    cur -= 1
                    while cur > start and out[cur] != DIRSEP:
                        cur -= 1
                t += 2
                continue
        if cur != very_start:
            cur = put(cur, DIRSEP)
        while at(t) not in ("", DIRSEP):
            cur = put(cur, at(t))
            t += 1
    return "".join(out[:cur])


def _phys(buf: str, path: str) -> Optional[str]:
    for comp in path.split(DIRSEP):
        if not comp or comp == ".":
            continue
        if comp == "..":
            buf = buf[:max(buf.rfind(DIRSEP), 0)]
            continue
        savepos = len(buf)
        buf = buf + DIRSEP + comp
        try:
            target = os.readlink(buf)
        except OSError as exc:
            if exc.errno != errno.EINVAL:
                return None
            continue
        buf = "" if target.startswith(DIRSEP) else buf[:savepos]
        resolved = _phys(buf, target)
        if resolved is None:
            return None
        buf = resolved
    return buf


def get_phys_path(path: str) -> Optional[str]:
    """Resolve symbolic links in path; None if a component cannot be read."""
    try:
        result = _phys("", path)
    except RecursionError:
        return None
    if result is None:
        return None
    return result or DIRSEP