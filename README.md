# kornshell

Building blocks of a Korn-style command shell, in plain Python with no
third-party dependencies.

## Modules

- `kornshell.paths`: `make_path` builds a file name from the current
  directory, the first element of a CDPATH-style list and a file name, and
  returns a `MadePath` (`path`, `physical_offset`, `used_cdpath`,
  `remaining`). `simplify_path` removes `.`, `..` and repeated `/`.
  `get_phys_path` resolves symbolic links and returns `None` if a component
  cannot be read.
- `kornshell.chartypes`: the `CharTypes` table of `CharClass` bits (letters,
  digits, word terminators, special parameters, IFS and so on), plus
  `to_base`, `parse_decimal`, `strip_nuls`, `quote_value` and
  `format_columns`.
- `kornshell.globmatch`: shell pattern matching with `gmatch`,
  `has_globbing` and `pat_scan`. Special characters in a pattern must be
  preceded by the `MAGIC` marker. The extended forms `*(..)`, `+(..)`,
  `?(..)`, `@(..)` and `!(..)` are written as `MAGIC` followed by the
  operator character with bit `0x80` set. `[...]` classes with ranges and
  `!` negation are supported.
- `kornshell.options`: the shell option table (`OPTIONS`, `Option`,
  `option_index`) and a `Getopt` scanner. It understands `+x` options and
  the `:`, `;`, `,` and `#` argument kinds. `ShellOptions` holds the on/off
  state of each option. `parse_args` handles the command line (`OF_CMDLINE`)
  and `set` (`OF_SET`), including `-o name`, `-A name`, `-s` and `--`, and
  returns a `ParseResult`. Errors raise `OptionError`.
- `kornshell.mail`: `parse_mailpath` splits a `$MAILPATH` value into
  `(path, message)` pairs. `MailChecker` watches `$MAIL` or `$MAILPATH`
  files and calls a callback for each `Mailbox` that has new mail.
- `kornshell.source`: `Source` and `InputReader` form a stack of input
  sources (strings, word lists, text streams, alias text). The reader drops
  backslash-newline pairs and supports pushback. `read_heredoc` reads
  here-document text, and `expand_prompt_bangs` expands `!` in a prompt.
  Input errors raise `LexError`.

## Examples

```python
from kornshell.paths import make_path, simplify_path

simplify_path("/a/b/c/./../d/..")           # "/a/b"
make_path("/home", "docs", "/usr:/opt")     # path "/usr/docs", remaining "/opt"
```

```python
from kornshell.globmatch import MAGIC, gmatch

gmatch("main.c", MAGIC + "*.c")             # True
```

```python
from kornshell.chartypes import parse_decimal, quote_value, to_base

to_base(255, 16)        # "FF"
parse_decimal("-42")    # -42
quote_value("it's")     # 'it'\''s'
```

```python
from kornshell.options import OF_SET, ShellOptions, parse_args

opts = ShellOptions()
result = parse_args(["set", "-e", "--", "a"], OF_SET, opts)
opts["errexit"]         # True
result.args             # ["a"]
```

```python
from kornshell.source import InputReader, Source, SourceType

reader = InputReader(Source(SourceType.STRING, "ec\\\nho"))
"".join(iter(reader.getc, ""))   # "echo"
```

## What this package does not do

This package does not tokenize or parse shell commands, and it does not
execute them. It has no name table for keywords, aliases or commands, and
no command to run. It provides the input, matching, option, path and mail
pieces listed above, for use by a program that supplies the rest.

## Running the tests

```
pip install .[test]
pytest
```