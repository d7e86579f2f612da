# jamkit

Pieces of the Jam build tool, as a Python library with no dependencies
outside the standard library.

## What is inside

- `jamkit.regex_compile` and `jamkit.regex` handle Jam's small
  regular-expression dialect. It supports `^ $ . [] () | * + ?`, the `\<`
  and `\>` word boundaries, and up to nine groups. `compile_regex(pattern)`
  (or `Regex(pattern)`) compiles a pattern and raises `RegexError` when the
  pattern is bad. `Regex.search(string)` returns a `Match` or `None`.
  `Match.group(index)` and `Match.span(index)` give the text and the span of
  a group. For a group that took no part in the match they give `None`.
  `compile_program(pattern)` returns the compiled node `Program` itself.
- `jamkit.outfilter` provides `OutputFilter`, which sends output lines to
  destinations by rule. A destination is a file name or one of `stdout`,
  `stderr` and `nul`.
  - `add_rule(destination, pattern, flags, replacement)` adds a rule. A
    replacement may hold `$N` for a group and `$$` for a dollar sign.
  - There are two flags. `p` keeps checking later rules after a match.
    `dN` treats group N as a dependency file name and writes each distinct
    name only once.
  - `prepare()` opens the destinations. `process_line(line)` returns `True`
    when a rule took the line.
  - `close()`, or leaving a `with` block, closes the files the filter
    opened.
  - Bad rules raise `FilterError`.
  - `simplify_filename(name)` normalises a file name. It lowers the case,
    uses `/` separators and resolves `.` and `..`.
- `jamkit.spawn` runs commands.
  - `spawn(program, params, output_filter, one_core)` runs a program with
    its standard output and standard error merged, and returns the exit
    code.
  - When a filter is given, the output goes through it. Lines that no rule
    takes go to standard output.
  - `split_lines(chunks)` turns text chunks into lines.
    `filter_stream(chunks, output_filter, out)` does the filtering on its
    own.
  - `ExecStatus` names the OK, FAIL and INTR outcomes.
- `jamkit.pathname` provides `PathName`, which holds the parts of a name of
  the form `<grist>dir/base.suffix(member)` together with a root.
  `with_root()` and `without_grist()` return altered copies. There is one
  module for each naming style: `jamkit.path_unix` (`/`), `jamkit.path_mac`
  (`:`) and `jamkit.path_vms` (`dev:[dir]file.ext`). Each has `parse_path`,
  `build_path` and `parent_path`.
- `jamkit.variables` provides `VariableTable`, which holds variables whose
  values are lists.
  - `get`, `set` (with `SetMode.SET`, `APPEND` or `DEFAULT`) and `swap` read
    and change values.
  - `define(entries)` loads `NAME=value` strings. Names ending in `PATH` are
    split at `os.pathsep`, all others at blanks.
- `jamkit.rules` provides `RuleTable`, which has `bind_rule`, `bind_target`,
  `touch_target` and `target_list`.
  - The data classes are `Rule`, `Target` and `Action`.
  - `Settings` holds the variables for one target. `add`, `copy`, `push`
    and `pop` work on them.
  - `copy_target` makes an unregistered internal node.
- `jamkit.parse` provides `ParseNode`, a parse-tree node. `evaluate(args)`
  runs the node's function and `walk()` yields the node and every node
  below it.
- `jamkit.scan` provides `Scanner`, the Jamfile tokenizer.
  - It reads a stack of sources given to `include_file` or
    `include_lines`, and handles keywords, quoting, `\` escapes, comments
    and `{ ... }` action blocks (`ScanMode.STRING`).
  - `next_token()` returns a `Token`. `tokens()` yields the tokens up to the
    end of the current source.
- `jamkit.timestamp` provides `TimestampCache`, which caches file times. It
  scans each directory once and reads the times of archive members
  (`lib.a(member.o)`) from `ar` archives.
- `jamkit.search` provides `search(target, variables, stamps)`, which binds
  a target along `$(LOCATE)` or `$(SEARCH)` and returns the bound name and
  its time.

## Example

```python
from jamkit.regex import compile_regex
from jamkit.path_unix import parse_path, build_path

m = compile_regex(r"([a-z]+)\.c").search("see main.c here")
print(m.group(1))            # main

name = parse_path("src/main.c")
print(build_path(name.with_root("/work"), True))   # /work/src/main.c
```

```python
from jamkit.outfilter import OutputFilter

with OutputFilter() as flt:
    flt.add_rule("stdout", r"^warning: (.*)$", "", "W: $1")
    flt.prepare()
    flt.process_line("warning: unused value")   # prints "W: unused value"
```

## What it does not do

This is a library of parts, not a build tool. It has none of the following:

- a command to run
- a grammar that turns tokens into `ParseNode` trees
- variable expansion such as `$(VAR:modifiers)`
- header scanning
- the engine that decides which targets are out of date and runs their
  actions

## Installing and testing

```
pip install .
pip install .[test]
pytest
```