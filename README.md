# fuzzysift

Building blocks for an interactive fuzzy filter. The package provides match
algorithms with scoring, folding of accented Latin letters, ANSI colour
extraction, chunked item storage with a query cache, and a query history
file. It depends only on the standard library.

## Installation

```
pip install fuzzysift
```

Install `fuzzysift[test]` as well if you want to run the tests with pytest.

## Matching

All match functions share one signature:

```
fn(case_sensitive, normalize, forward, text, pattern, with_pos=False, slab=None)
```

Prepare the pattern before you call one of them:

- For case-insensitive matching, pass the pattern in lower case.
- When `normalize` is true, pass the pattern already folded with
  `fuzzysift.normalize.normalize_text`.

`forward` picks which occurrence wins when two score the same. Each function
returns a tuple `(MatchResult, positions)`. `MatchResult` is a frozen
dataclass with `start`, `end` and `score`. A miss is `MatchResult(-1, -1, 0)`.

```python
from fuzzysift.fuzzy import fuzzy_match_v2
from fuzzysift.scoring import init_scheme

init_scheme("default")   # or "path" / "history"
result, positions = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", True, None)
print(result.start, result.end, result.score, positions)
```

The algorithms:

- `fuzzysift.fuzzy.fuzzy_match_v1` is a greedy scan. It finds the first
  occurrence and then looks back for a shorter one.
- `fuzzysift.fuzzy.fuzzy_match_v2` finds the best-scoring alignment by
  dynamic programming. It returns matched positions from last to first. If
  you pass a `fuzzysift.scoring.Slab` and the text length times the pattern
  length exceeds `slab.size16`, it falls back to `fuzzy_match_v1`.
- `fuzzysift.exact`:
  - `exact_match_naive` matches a substring.
  - `exact_match_boundary` matches a substring that starts and ends on word
    boundaries.
  - `prefix_match` and `suffix_match` ignore leading and trailing whitespace
    respectively.
  - `equal_match` ignores surrounding whitespace.
  - These functions always return `None` for positions.

### Scoring rules

Matches score higher in these cases:

- at word boundaries
- after delimiters
- at camelCase and letter-to-digit transitions
- when characters match consecutively

The first pattern character's bonus counts double. Gaps between matched
characters cost points.

### Schemes and scoring helpers

`fuzzysift.scoring.init_scheme(scheme)` switches the bonus tables between
`"default"`, `"path"` and `"history"`. It raises `ValueError` for any other
name.

The module also exposes the helpers the matchers are built from:

- `CharClass`
- `char_class_of`
- `bonus_for`
- `bonus_at`
- `ascii_fuzzy_index`
- `calculate_score`

## Normalization

```python
from fuzzysift.normalize import normalize_rune, normalize_text

normalize_text("Só Danço")   # "So Danco"
normalize_rune("é")          # "e"
```

`normalize_rune` raises `ValueError` unless it is given a single character.

## ANSI colours

```python
from fuzzysift.ansi import extract_color

text, offsets, state = extract_color("hello \x1b[31mworld", None, None)
# text == "hello world"
# offsets == [AnsiOffset(start=6, end=11, color=AnsiState(fg=1, ...))]
```

`extract_color` returns three things:

- the stripped text
- a list of `AnsiOffset` spans, or `None` when there are none
- the `AnsiState` in effect at the end of the line

Pass that state into the next call to carry colours across lines.

`AnsiState.to_string()` rebuilds an escape sequence from a state. Three
lower-level functions are also available: `interpret_code`,
`next_ansi_escape_sequence` and `parse_ansi_code`.

## Items, chunks and caching

`fuzzysift.item.Item` holds two forms of a line:

- `text`: the line as matched
- `orig_text`: the original line, which is optional

`Item.as_string(strip_ansi)` returns the original line, with escape
sequences removed if `strip_ansi` is true.

`fuzzysift.chunklist.ChunkList(cache, builder)` stores items in chunks of
100. `builder` takes raw data and returns an `Item`, or `None` to skip it.
Two calls do most of the work:

- `push(data)` adds one item.
- `snapshot(tail=0)` returns `(chunks, count, changed)`. With a positive
  `tail`, only the last `tail` items are kept.

`fuzzysift.cache.ChunkCache` keeps query results for full chunks. It has
three read and write methods:

- `add` stores results.
- `lookup` finds results for an exact key.
- `search` finds results for the longest cached prefix or suffix of a key.

## Temporary files

`fuzzysift.tempfiles.write_temporary_file(lines, separator)` writes the
lines, each followed by the separator, to a new temporary file. It returns
the file's path, or `None` if the file could not be created.
`remove_files(paths)` deletes files and ignores errors.

## History

```python
from fuzzysift.history import History

history = History("/tmp/queries", 1000)
history.append("foo")
history.previous()   # "foo"
history.next()       # ""
```

`append` saves the file, keeping at most `max_size` entries, and ignores
empty lines. `override` edits the entry under the cursor in memory only.
`History` raises `HistoryError` when the file cannot be read, created or
written.

## What is not included

This package contains no terminal user interface and no command-line
program. It does not read input from processes or files, and it does not
run a concurrent search across chunks or merge results. You supply those
parts and call the matchers, `ChunkList` and `ChunkCache` yourself.
`fuzzysift.constants` holds exit codes (`ExitCode`) and timing values for
such a program, but nothing in the package uses the timing values.