"""Shell pattern matching over patterns whose special characters are marked.

A pattern character is special only when preceded by MAGIC. Extended
pattern operators *(..), +(..), ?(..), @(..), !(..) and a plain (..)
are written as MAGIC followed by the operator character with bit 0x80 set.
"""

from __future__ import annotations

from typing import Optional

MAGIC = "\x81"
NOT = "!"

_EXT_OPS = "*+?@! "


def _ext(c: str) -> str:
    return chr(0x80 | ord(c))


_EXT_PLUS = _ext("+")
_EXT_STAR = _ext("*")
_EXT_QUEST = _ext("?")
_EXT_AT = _ext("@")
_EXT_SPACE = _ext(" ")
_EXT_NOT = _ext("!")


def _is_ext_op(c: str) -> bool:
    if not c:
        return False
    code = ord(c)
    return bool(code & 0x80) and chr(code & 0x7F) in _EXT_OPS and code < 0x100


def _at(p: str, i: int) -> str:
    return p[i] if i < len(p) else ""


def _debunk(p: str) -> str:
    out = []
    i = 0
    while i < len(p):
        c = p[i]
        if c == MAGIC and i + 1 < len(p):
            i += 1
            c = p[i]
            if _is_ext_op(c):
                op = chr(ord(c) & 0x7F)
                out.append("(" if op == " " else op + "(")
            else:
                out.append(c)
        else:
            out.append(c)
        i += 1
    return "".join(out)


def gmatch(string: Optional[str], pattern: Optional[str],
           isfile: bool = False) -> bool:
    """True if string matches pattern.

    When isfile is false and pattern holds no valid globbing, the pattern
    is compared literally with its markers removed.
    """
    if string is None or pattern is None:
        return False
    if not isfile and not has_globbing(pattern):
        return _debunk(pattern) == string
    return _match(string, 0, len(string), pattern, 0, len(pattern))


def has_globbing(pattern: str) -> bool:
    """True if pattern holds globbing characters and is well formed."""
    p = pattern
    n = len(p)
    nest = bnest = 0
    saw_glob = False
    in_bracket = False
    i = 0
    while i < n:
        if p[i] != MAGIC:
            i += 1
            continue
        i += 1
        c = _at(p, i)
        if c in ("*", "?"):
            saw_glob = True
        elif c == "[":
            if not in_bracket:
                saw_glob = True
                in_bracket = True
                if _at(p, i + 1) == MAGIC and _at(p, i + 2) == NOT:
                    i += 2
                if _at(p, i + 1) == MAGIC and _at(p, i + 2) == "]":
                    i += 2
        elif c == "]":
            if in_bracket:
                if bnest:
                    return False
                in_bracket = False
        elif _is_ext_op(c):
            saw_glob = True
            if in_bracket:
                bnest += 1
            else:
                nest += 1
        elif c == "|":
            if in_bracket and not bnest:
                return False
        elif c == ")":
            if in_bracket:
                if not bnest:
                    return False
                bnest -= 1
            elif nest:
                nest -= 1
        i += 1
    return saw_glob and not in_bracket and not nest


def _pat_scan(p: str, i: int, pe: int, match_sep: bool) -> Optional[int]:
    nest = 0
    while i < pe:
        if p[i] != MAGIC:
            i += 1
            continue
        i += 1
        c = _at(p, i)
        if c == ")":
            if nest == 0:
                return i + 1
            nest -= 1
        elif c == "|" and match_sep and nest == 0:
            return i + 1
        if _is_ext_op(c):
            nest += 1
        i += 1
    return None


def pat_scan(pattern: str, start: int, match_sep: bool) -> Optional[int]:
    """Index just past the closing ')' (or '|' when match_sep) of a subpattern."""
    return _pat_scan(pattern, start, len(pattern), match_sep)


def _cclass(p: str, i: int, sub: str) -> Optional[int]:
    orig = i
    negate = False
    if _at(p, i) == MAGIC:
        i += 1
        if _at(p, i) == NOT:
            negate = True
            i += 1
    found = False
    while True:
        c = _at(p, i)
        i += 1
        if c == MAGIC:
            c = _at(p, i)
            i += 1
            if c and ord(c) & 0x80 and c != MAGIC:
                c = chr(ord(c) & 0x7F)
                if c == " ":
                    c = "("
        if c == "":
            return orig if sub == "[" else None
        if (_at(p, i) == MAGIC and _at(p, i + 1) == "-"
                and (_at(p, i + 2) != MAGIC or _at(p, i + 3) != "]")):
            i += 2
            d = _at(p, i)
            i += 1
            if d == MAGIC:
                d = _at(p, i)
                i += 1
                if d and ord(d) & 0x80 and d != MAGIC:
                    d = chr(ord(d) & 0x7F)
            if c > d:
                return None
        else:
            d = c
        if c == sub or c <= sub <= d:
            found = True
        if _at(p, i) == MAGIC and _at(p, i + 1) == "]":
            break
    return i + 2 if found != negate else None


def _match(s: str, si: int, se: int, p: str, pi: int, pe: int) -> bool:
    while pi < pe:
        pc = p[pi]
        pi += 1
        sc = s[si] if si < se else ""
        si += 1
        if pc != MAGIC:
            if sc != pc:
                return False
            continue
        op = _at(p, pi)
        pi += 1
        if op == "[":
            if sc == "":
                return False
            nxt = _cclass(p, pi, sc)
            if nxt is None:
                return False
            pi = nxt
        elif op == "?":
            if sc == "":
                return False
        elif op == "*":
            if pi == pe:
                return True
            si -= 1
            return any(_match(s, k, se, p, pi, pe) for k in range(si, se + 1))
        elif op in (_EXT_PLUS, _EXT_STAR):
            prest = _pat_scan(p, pi, pe, False)
            if prest is None:
                return False
            si -= 1
            if op == _EXT_STAR and _match(s, si, se, p, prest, pe):
                return True
            psub = pi
            while True:
                pnext = _pat_scan(p, psub, pe, True)
                if pnext is None:
                    return False
                for srest in range(si, se + 1):
                    if (_match(s, si, srest, p, psub, pnext - 2)
                            and (_match(s, srest, se, p, prest, pe)
                                 or (si != srest
                                     and _match(s, srest, se, p, pi - 2, pe)))):
                        return True
                if pnext == prest:
                    break
                psub = pnext
            return False
        elif op in (_EXT_QUEST, _EXT_AT, _EXT_SPACE):
            prest = _pat_scan(p, pi, pe, False)
            if prest is None:
                return False
            si -= 1
            if op == _EXT_QUEST and _match(s, si, se, p, prest, pe):
                return True
            psub = pi
            while True:
                pnext = _pat_scan(p, psub, pe, True)
                if pnext is None:
                    return False
                first = se if prest == pe else si
                for srest in range(first, se + 1):
                    if (_match(s, si, srest, p, psub, pnext - 2)
                            and _match(s, srest, se, p, prest, pe)):
                        return True
                if pnext == prest:
                    break
                psub = pnext
            return False
        elif op == _EXT_NOT:
            prest = _pat_scan(p, pi, pe, False)
            if prest is None:
                return False
            si -= 1
            for srest in range(si, se + 1):
                matched = False
                psub = pi
                while True:
                    pnext = _pat_scan(p, psub, pe, True)
                    if pnext is None:
                        break
                    if _match(s, si, srest, p, psub, pnext - 2):
                        matched = True
                        break
                    if pnext == prest:
                        break
                    psub = pnext
                if not matched and _match(s, srest, se, p, prest, pe):
                    return True
            return False
        else:
            if sc != op:
                return False
    return si == se