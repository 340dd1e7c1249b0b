# fuzzyseek

Building blocks for an interactive fuzzy filter: scoring matchers, Latin
letter normalisation, ANSI colour extraction, chunked item storage with a
query cache, and a persistent input history. It has no dependencies outside
the standard library.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Matching

Every matcher in `fuzzyseek.algo` takes the arguments
`(case_sensitive, normalize, forward, text, pattern, with_pos)` and returns a
`MatchResult` (`start`, `end`, `score`, and a `matched` property) together
with the matched positions, or `None` when positions are not tracked. When
`case_sensitive` is false the pattern is expected to be lower case already;
when `normalize` is true it is expected to be normalised already.

```python
from fuzzyseek.algo import fuzzy_match_v2, exact_match_naive, prefix_match

result, positions = fuzzy_match_v2(False, False, True, "foo bar baz", "fbb", True)
print(result.start, result.end, result.score)
print(positions)

result, _ = exact_match_naive(False, False, True, "fooBarbaz", "oba", False)
result, _ = prefix_match(False, False, True, " fooBar", "foo", False)
```

Available matchers:

- `fuzzy_match_v1` – greedy: first occurrence, shortened by a backward scan.
- `fuzzy_match_v2` – optimal alignment by a scoring matrix; only this one
  returns positions for multi-character patterns when `with_pos` is true
  (`fuzzy_match_v1` returns them too).
- `exact_match_naive` – substring match, picking the occurrence whose first
  character has the best bonus.
- `prefix_match` / `suffix_match` – match at the start or end, ignoring
  leading or trailing whitespace unless the pattern begins or ends with it.
- `equal_match` – the text, without surrounding whitespace, equals the pattern.

A result with `start == -1` means no match.

Scores come from the character classes and bonuses in
`fuzzyseek.charclass` (`CharClass`, `char_class_of`, `bonus_for`,
`bonus_at`). `init_scheme` switches the bonus settings to `"default"`,
`"path"` or `"history"` and raises `ValueError` for any other name; the
setting is process-wide.

## Normalisation

```python
from fuzzyseek.normalize import normalize_rune, normalize_runes

normalize_runes("Só Danço Samba")   # "So Danco Samba"
normalize_rune("é")                 # "e"
```

## ANSI colours

```python
from fuzzyseek.ansi import extract_color, next_ansi_escape_sequence

text, offsets, state = extract_color("hello \x1b[34;45;1mworld", None, None)
# text == "hello world"
# offsets[0].start == 6, offsets[0].end == 11, offsets[0].color.fg == 4

next_ansi_escape_sequence("ab\x1b[0mc")   # (2, 6)
```

`extract_color` returns the stripped text, a list of `AnsiOffset` spans (or
`None` when nothing is coloured) and the `AnsiState` in effect at the end,
which can be passed in for the next line. `interpret_code` applies a single
escape sequence to a state, `parse_ansi_code` splits one SGR parameter off a
parameter list, and `AnsiState.to_ansi()` turns a state back into an escape
sequence. Attributes are the `Attr` flags.

## Items, chunks and caching

`fuzzyseek.item.Item` holds the searched `text`, its `index`, an optional
`orig_text` and its colour spans; `Item.as_string(strip_ansi)` returns the
original line, optionally stripped of escape sequences.

`fuzzyseek.chunklist.ChunkList` is built with a function that turns pushed
data into an `Item` (or `None` to skip it). It stores items in chunks of
`CHUNK_SIZE` (100) and `snapshot()` returns the chunks and the item count
without being affected by later pushes. `count_items` counts the items in a
list of chunks.

```python
from fuzzyseek.chunklist import ChunkList
from fuzzyseek.item import Item

chunks = ChunkList(lambda line: Item(line))
chunks.push("hello")
chunks.push("world")
snapshot, count = chunks.snapshot()   # count == 2
```

`fuzzyseek.cache.ChunkCache` remembers results per full chunk and query:
`add` ignores empty queries, chunks that are not full, and result lists
longer than `QUERY_CACHE_MAX` (20); `lookup` finds an exact query and
`search` the longest cached prefix or suffix of a query.

## History

```python
from fuzzyseek.history import History

history = History("queries.txt", 1000)   # created if missing
history.append("foo")
history.append("bar")

history = History("queries.txt", 1000)
history.previous()   # "bar"
history.previous()   # "foo"
history.next()       # "bar"
```

`append` ignores empty lines, keeps at most `max_size` entries and rewrites
the file; `override` changes the entry under the cursor in memory only.
Unreadable or uncreatable history files raise `HistoryError`.

## What this package does not do

It provides no command-line program, no terminal interface, no input reader
and no background search loop that splits work across chunks and merges
sorted results. Those are left to the application built on these pieces.