"""Shell option table, option-letter parsing and the command line / set parser."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from kornshell.chartypes import format_columns

# Contexts in which an option may be changed.
OF_CMDLINE = 0x01
OF_SET = 0x02
OF_SPECIAL = 0x04
OF_INTERNAL = 0x08
OF_ANY = OF_CMDLINE | OF_SET | OF_SPECIAL | OF_INTERNAL

# Getopt behaviour flags.
GF_ERROR = 0x01
GF_PLUSOPT = 0x02
GF_NONAME = 0x04

_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class OptionError(Exception):
    """A bad option, a missing argument or an invalid identifier."""


@dataclass(frozen=True)
class Option:
    """One shell option: its key, visible long name, letter and contexts."""

    key: str
    name: Optional[str]
    letter: str
    flags: int


def _opt(name: str, letter: str = "", flags: int = OF_ANY) -> Option:
    return Option(name, name, letter, flags)


OPTIONS: tuple = (
    _opt("allexport", "a"),
    _opt("braceexpand"),
    _opt("bgnice"),
    Option("command", None, "c", OF_CMDLINE),
    _opt("emacs"),
    _opt("errexit", "e"),
    _opt("gmacs"),
    _opt("ignoreeof"),
    _opt("interactive", "i", OF_CMDLINE),
    _opt("keyword", "k"),
    _opt("login", "l", OF_CMDLINE),
    _opt("markdirs", "X"),
    _opt("monitor", "m"),
    _opt("noclobber", "C"),
    _opt("noexec", "n"),
    _opt("noglob", "f"),
    _opt("nohup"),
    _opt("nolog"),
    _opt("notify", "b"),
    _opt("nounset", "u"),
    _opt("physical"),
    _opt("posix"),
    _opt("privileged", "p"),
    _opt("restricted", "r", OF_CMDLINE),
    _opt("stdin", "s", OF_CMDLINE),
    _opt("trackall", "h"),
    _opt("verbose", "v"),
    _opt("vi"),
    _opt("viraw"),
    _opt("vi-show8"),
    _opt("vi-tabcomplete"),
    _opt("vi-esccomplete"),
    _opt("xtrace", "x"),
    Option("talking_i", None, "", OF_INTERNAL),
)

_CMD_OPTS = "o:" + "".join(
    o.letter for o in OPTIONS if o.letter and o.flags & OF_CMDLINE)
_SET_OPTS = "A:o;s" + "".join(
    o.letter for o in OPTIONS if o.letter and o.flags & OF_SET)

_EDIT_MODES = ("vi", "emacs", "gmacs")


def option_index(name: str) -> int:
    """Index of the option with this long name, or -1."""
    for i, opt in enumerate(OPTIONS):
        if opt.name is not None and opt.name == name:
            return i
    return -1


class Getopt:
    """Option-letter scanner used by builtins and command line parsing.

    In the options string ':' means a required argument, ';' an optional
    one, ',' an argument attached to the letter (possibly empty), and '#'
    an optional argument that must start with a digit. A leading ':'
    makes errors return '?' or ':' with optarg set to the letter.
    """

    def __init__(self, flags: int = 0) -> None:
        self.flags = flags
        self.optind = 1
        self.optarg: Optional[str] = None
        self.p = 0
        self.plus = False
        self.minusminus = False
        self.warnings: List[str] = []

    def _complain(self, argv: Sequence[str], message: str) -> None:
        prefix = "" if self.flags & GF_NONAME else f"{argv[0]}: "
        text = prefix + message
        if self.flags & GF_ERROR:
            raise OptionError(text)
        self.warnings.append(text)

    def getopt(self, argv: Sequence[str], options: str) -> Optional[str]:
        """Return the next option letter, '?' or ':' on error, None at the end."""
        if self.p == 0 or self.p >= len(argv[self.optind - 1]):
            arg = argv[self.optind] if self.optind < len(argv) else None
            flag = arg[:1] if arg else ""
            self.p = 1
            if arg == "--":
                self.optind += 1
                self.p = 0
                self.minusminus = True
                return None
            if (arg is None
                    or (flag != "-" and (not self.flags & GF_PLUSOPT or flag != "+"))
                    or len(arg) < 2):
                self.p = 0
                return None
            c = arg[1]
            self.optind += 1
            self.plus = flag == "+"
        else:
            c = argv[self.optind - 1][self.p]
        self.p += 1

        o = -1 if c in "?:;,#" else options.find(c)
        if o < 0:
            if options.startswith(":"):
                self.optarg = c
            else:
                self._complain(argv, f"-{c}: unknown option")
            return "?"

        spec = options[o + 1:o + 2]
        cur = argv[self.optind - 1]
        if spec in (":", ";"):
            if self.p < len(cur):
                self.optarg = cur[self.p:]
            elif self.optind < len(argv):
                self.optarg = argv[self.optind]
                self.optind += 1
            elif spec == ";":
                self.optarg = None
            else:
                if options.startswith(":"):
                    self.optarg = c
                    return ":"
                self._complain(argv, f"-`{c}' requires argument")
                return "?"
            self.p = 0
        elif spec == ",":
            self.optarg = cur[self.p:]
            self.p = 0
        elif spec == "#":
            if self.p < len(cur):
                if "0" <= cur[self.p] <= "9":
                    self.optarg = cur[self.p:]
                    self.p = 0
                else:
                    self.optarg = None
            elif (self.optind < len(argv)
                  and "0" <= argv[self.optind][:1] <= "9"
                  and argv[self.optind][:1]):
                self.optarg = argv[self.optind]
                self.optind += 1
                self.p = 0
            else:
                self.optarg = None
        return c


class ShellOptions:
    """Current on/off state of every shell option, keyed by option key."""

    def __init__(self) -> None:
        self._flags: Dict[str, bool] = {o.key: False for o in OPTIONS}
        self.columns = 80

    def __getitem__(self, name: str) -> bool:
        return self._flags[name]

    def __setitem__(self, name: str, value: bool) -> None:
        if name not in self._flags:
            raise KeyError(name)
        self._flags[name] = bool(value)

    def change(self, name: str, what: int, value: bool) -> None:
        """Set an option, carrying out the side effects that go with it."""
        if name not in self._flags:
            raise KeyError(name)
        value = bool(value)
        old = self._flags[name]
        self._flags[name] = value
        if name in _EDIT_MODES:
            if value:
                for mode in _EDIT_MODES:
                    self._flags[mode] = False
                self._flags[name] = True
        elif name == "privileged" and old and not value:
            if hasattr(os, "setuid"):
                os.setuid(os.getuid())
                os.setgid(os.getgid())
        elif name == "posix" and value:
            self._flags["braceexpand"] = False
        if name == "interactive" and what in (OF_CMDLINE, OF_SET):
            self._flags["talking_i"] = value

    def letters(self) -> str:
        """The letters of the options that are on, in table order."""
        return "".join(o.letter for o in OPTIONS
                       if o.letter and self._flags[o.key])

    def describe(self, verbose: bool) -> str:
        """Text listing the options, as printed by a lone 'set -o' or 'set +o'."""
        if verbose:
            named = [o for o in OPTIONS if o.name]
            width = max(len(o.name) for o in named)
            items = [f"{o.name:<{width}} {'on' if self._flags[o.key] else 'off'}"
                     for o in named]
            return ("Current option settings\n"
                    + format_columns(items, width + 5, self.columns))
        parts = ["set"]
        parts.extend(f" -o {o.name}" for o in OPTIONS
                     if o.name and self._flags[o.key])
        return "".join(parts) + "\n"


@dataclass
class ParseResult:
    """Outcome of parse_args.

    index is the position of the first argument not consumed; args are
    the remaining arguments (sorted for 'set -s'); set_args tells whether
    the positional parameters should be replaced; array/array_mode/
    array_values describe a 'set -A' or 'set +A'; output holds text
    produced by a lone -o or +o.
    """

    index: int
    args: List[str] = field(default_factory=list)
    set_args: bool = False
    array: Optional[str] = None
    array_mode: int = 0
    array_values: List[str] = field(default_factory=list)
    output: str = ""


def parse_args(argv: Sequence[str], what: int,
               options: ShellOptions) -> ParseResult:
    """Parse command line (OF_CMDLINE) or set (OF_SET) options into options."""
    argv = list(argv)
    array: Optional[str] = None
    arrayset = 0
    sortargs = False
    output = []

    if what == OF_CMDLINE:
        arg0 = argv[0]
        slash = arg0.rfind("/")
        options["login"] = arg0.startswith("-") or (
            slash >= 0 and arg0[slash + 1:slash + 2] == "-")
        opts = _CMD_OPTS
    else:
        opts = _SET_OPTS

    go = Getopt(GF_ERROR | GF_PLUSOPT)
    while (optc := go.getopt(argv, opts)) is not None:
        on = not go.plus
        if optc == "A":
            arrayset = 1 if on else -1
            array = go.optarg
        elif optc == "o":
            if go.optarg is None:
                output.append(options.describe(on))
                continue
            i = option_index(go.optarg)
            if i >= 0 and on == options[OPTIONS[i].key]:
                continue
            if i >= 0 and OPTIONS[i].flags & what:
                options.change(OPTIONS[i].key, what, on)
            else:
                raise OptionError(f"{go.optarg}: bad option")
        elif optc == "?":
            raise OptionError(f"{argv[0]}: bad option")
        elif what == OF_SET and optc == "s":
            sortargs = True
        else:
            for opt in OPTIONS:
                if optc == opt.letter and what & opt.flags:
                    options.change(opt.key, what, on)
                    break
            else:
                raise OptionError(f"parse_args: `{optc}'")

    if (not go.minusminus and go.optind < len(argv)
            and argv[go.optind] in ("-", "+")):
        if argv[go.optind] == "-" and not options["posix"]:
            options["verbose"] = False
            options["xtrace"] = False
        go.optind += 1

    set_args = not arrayset and (go.minusminus or go.optind < len(argv))

    if arrayset and (not array or not _IDENT.fullmatch(array)):
        raise OptionError(f"{array}: is not an identifier")

    rest = argv[go.optind:]
    if sortargs:
        rest.sort()
    result = ParseResult(go.optind, rest, bool(set_args), array, arrayset,
                         output="".join(output))
    if arrayset:
        result.array_values = rest
        result.args = []
        result.index = len(argv)
    return result