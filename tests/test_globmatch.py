import pytest

from kornshell.globmatch import MAGIC, gmatch, has_globbing, pat_scan


def pat(text):
    """Mark the special characters of a plain shell pattern."""
    out = []
    i = 0
    in_br = False
    while i < len(text):
        c = text[i]
        nxt = text[i + 1:i + 2]
        if not in_br and c in "*?+@!" and nxt == "(":
            out.append(MAGIC + chr(0x80 | ord(c)))
            i += 2
            continue
        if c == "[" and not in_br:
            out.append(MAGIC + "[")
            in_br = True
            if nxt == "!":
                out.append(MAGIC + "!")
                i += 1
        elif c == "]" and in_br:
            out.append(MAGIC + "]")
            in_br = False
        elif c == "-" and in_br:
            out.append(MAGIC + "-")
        elif c in "*?|)" and not in_br:
            out.append(MAGIC + c)
        else:
            out.append(c)
        i += 1
    return "".join(out)


@pytest.mark.parametrize(
    "string,pattern,expected",
    [
        ("foo.c", "*.c", True),
        ("foo.h", "*.c", False),
        ("", "*", True),
        ("a", "?", True),
        ("", "?", False),
        ("ab", "?", False),
        ("bx", "[a-c]x", True),
        ("dx", "[a-c]x", False),
        ("dx", "[!a-c]x", True),
        ("bx", "[!a-c]x", False),
        ("b", "[z-a]", False),
        ("foo", "@(foo|bar)", True),
        ("bar", "@(foo|bar)", True),
        ("baz", "@(foo|bar)", False),
        ("", "*(ab)", True),
        ("abab", "*(ab)", True),
        ("aba", "*(ab)", False),
        ("", "+(ab)", False),
        ("abab", "+(ab)", True),
        ("", "?(ab)", True),
        ("ab", "?(ab)", True),
        ("abab", "?(ab)", False),
        ("bar", "!(foo)", True),
        ("foo", "!(foo)", False),
        ("x.c", "*.@(c|h)", True),
        ("x.o", "*.@(c|h)", False),
    ],
)
def test_gmatch(string, pattern, expected):
    assert gmatch(string, pat(pattern), False) is expected


def test_gmatch_literal_without_globbing():
    assert gmatch("a*b", "a*b", False) is True
    assert gmatch("axb", "a*b", False) is False


def test_gmatch_literal_strips_markers_of_bad_pattern():
    # an unclosed bracket is not globbing, so the pattern is compared literally
    assert gmatch("[a", MAGIC + "[a", False) is True


def test_gmatch_none():
    assert gmatch(None, "x") is False
    assert gmatch("x", None) is False


def test_gmatch_star_matches_every_string():
    p = pat("*")
    for s in ["", "a", "abc", "x.y.z"]:
        assert gmatch(s, p, True)


def test_has_globbing():
    assert has_globbing(pat("*.c"))
    assert has_globbing(pat("[abc]"))
    assert has_globbing(pat("@(a|b)"))
    assert not has_globbing("abc")
    assert not has_globbing(MAGIC + "[a")
    assert not has_globbing(pat("@(a|b"))


def test_has_globbing_rejects_bad_nesting():
    # *(a[b|c]d): an alternation inside brackets
    bad = MAGIC + chr(0x80 | ord("*")) + "a" + MAGIC + "[b" + MAGIC + "|c" + MAGIC + "]d" + MAGIC + ")"
    assert not has_globbing(bad)


def test_pat_scan_finds_separator_and_close():
    p = pat("a|b)")
    sep = pat_scan(p, 0, True)
    close = pat_scan(p, 0, False)
    assert p[:sep].endswith(MAGIC + "|")
    assert p[:close].endswith(MAGIC + ")")
    assert close == len(p)
    assert sep < close


def test_pat_scan_skips_nested_groups():
    p = pat("@(x|y)|b)")
    sep = pat_scan(p, 0, True)
    assert p[sep:] == "b" + MAGIC + ")"


def test_pat_scan_missing_close():
    assert pat_scan("abc", 0, False) is None