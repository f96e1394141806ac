# proctable

Building blocks for a colourful process listing on Linux: reading
procfs, filling columns with per-process values, loading and saving the
configuration, and formatting and colouring text for a terminal.

## Modules

### `proctable.config`

The configuration model as dataclasses and enums: `Config` with its
`ConfigColumn` list and the `ConfigStyle`, `ConfigSearch`,
`ConfigDisplay`, `ConfigSort`, `ConfigDocker` and `ConfigPager` tables.
Enums include `ConfigTheme`, `ColumnAlign`, `ColorMode`, `PagerMode`,
`SearchKind`, `SearchLogic` and `SortOrder`.

- `loads(text)` parses TOML text, `dumps(config)` writes it back, and
  `load_config(path)` reads a file. `config_from_dict` and
  `config_to_dict` convert between a `Config` and plain data.
- Tables other than the column list may be left out; missing entries
  take their defaults. Every problem is raised as `ConfigError`. If the
  text still uses the old `Color256` keyword, the error says that this
  keyword is obsolete.
- Colours are a `NamedColor` (written `BrightWhite`, `Red`, …) or a
  palette index 0–255 (written `208`). A `ColorByTheme` is written
  `dark|light`, e.g. `BrightBlue|Blue`, or as one colour used for both.
  See `parse_color`, `format_color`, `parse_color_by_theme` and
  `format_color_by_theme`.
- A `ColumnStyle` is either a fixed colour or one of `ByPercentage`,
  `ByState` and `ByUnit` (`parse_column_style`, `format_column_style`).

### `proctable.process`

- `parse_stat`, `parse_status` and `parse_io` parse the contents of
  `/proc/<pid>/stat`, `status` and `io` into `Stat`, `Status` and `Io`,
  raising `ValueError` when the text is malformed.
- `Process(pid, root="/proc")` reads a process's `stat` and owner and
  offers `io()`, `status()`, `cmdline()`, `loginuid()`, `wchan()` and
  `tasks()` (its threads).
- `collect_proc(interval, with_thread=False, root="/proc")` samples
  every process twice, `interval` seconds apart, and returns a list of
  `ProcessInfo` holding both samples. With `with_thread`, threads are
  listed too, as `ProcessTask` entries that only carry a `stat` and an
  owner; asking them for `cmdline`, `loginuid` or `wchan` raises
  `OSError`.

### `proctable.users` and `proctable.memory`

Each column is a `Column` with a `header`, a `unit`, and the formatted
(`fmt_contents`) and raw (`raw_contents`) value per pid, filled by
calling `add(proc)` for each `ProcessInfo`. A header can be passed to
override the default one.

- `users`: `UserLogin`, `UserReal`, `UserSaved` (user names, or the
  numeric id when no name is known) and `Wchan` (shown as `-` when the
  process is not waiting).
- `memory`: `VmData`, `VmExe`, `VmHwm`, `VmLib`, `VmLock`, `VmPeak`,
  `VmPin`, `VmPte`, `VmStack`, `VmSwap` (from `status`, in bytes),
  `VmRss` and `VmSize` (from `stat`), and `WriteBytes`, the bytes
  written per second between the two samples.

### `proctable.util`

- `truncate(text, width)` and `adjust(text, width, align)` work in
  display cells: wide characters count double and `ESC … m` escape
  sequences take no room.
- `bytify(value)` shortens byte counts with binary units
  (`1536` → `1.500K`); `parse_time(seconds)` gives `HH:MM:SS`, or days
  or years for long durations.
- `classify(keyword)` tells numeric from non-numeric keywords;
  `find_partial` and `find_exact` combine keyword matches over columns
  with AND, OR, NAND or NOR logic. Columns passed to them need
  `find_partial(pid, keyword)` and `find_exact(pid, keyword)` methods.
- `change_endian`, `format_sid` and `lap` are small helpers for byte
  swapping, security identifiers and timing messages on stderr.

### `proctable.style`

`apply_color(text, color, theme, faded)` wraps text in ANSI colour codes
for the dark or light theme (an unresolved `ConfigTheme.AUTO` raises
`ValueError`); `faded` drops bright colours to their normal variant.
`apply_style` picks the colour from a column style: fixed, by
percentage, by process state letter, or by unit letter.
`color_to_column_style` makes a fixed style.

### `proctable.term_info`

`TermInfo(clear_by_line=False, stream=None)` knows the height and width
of the output terminal (24×79 when it cannot tell) and offers
`write_line`, `clear_screen`, `move_cursor_to` and `clear_rest_lines`.

## Example

```python
from proctable.config import loads, dumps, parse_color_by_theme
from proctable.util import truncate, parse_time, bytify

with open("config.toml", encoding="utf-8") as f:
    config = loads(f.read())
print(dumps(config))

header_color = parse_color_by_theme("BrightWhite|Black")

print(truncate("hello world", 5))   # hello
print(parse_time(59))               # 00:00:59
print(bytify(1536))                 # 1.500K
```

## What it does not do

There is no command to run and no finished listing: the package does not
assemble columns into a table, sort or search the rows, compute column
widths, start a pager, or refresh the screen in a watch mode. It reads
processes only from a procfs tree, so it works on Linux alone.