"""Selenese string patterns.

Expected values of check commands are patterns. A pattern may carry a
prefix selecting the matching strategy:
- `glob:` (default) whole-string match where `*` matches any sequence
  and `?` any single character;
- `regexp:` and `regexpi:` regular expression search, the latter
  case-insensitive;
- `exact:` plain equality.

Text presence uses `contains`, which finds a pattern anywhere in the
text instead of matching the whole of it.
"""

from functools import lru_cache
from re import DOTALL, IGNORECASE, Pattern, escape
from re import compile as regexp


@lru_cache(maxsize=256)
def _glob(pattern: str) -> Pattern[str]:
    """Compile a glob pattern to an anchored regular expression."""
    translated = escape(pattern).replace(r'\*', '.*').replace(r'\?', '.')

    return regexp(f'^{translated}$', flags=DOTALL)


def matches(pattern: str, actual: str) -> bool:
    """Match an actual value against a Selenese pattern.

    Args:
        pattern: Pattern text with an optional strategy prefix.
        actual: Value read from the page.

    Returns:
        True if the value matches.
    """
    strategy, sep, rest = pattern.partition(':')

    if sep and strategy == 'exact':
        return actual == rest

    if sep and strategy == 'regexp':
        return regexp(rest).search(actual) is not None

    if sep and strategy == 'regexpi':
        return regexp(rest, flags=IGNORECASE).search(actual) is not None

    if sep and strategy == 'glob':
        pattern = rest

    return _glob(pattern).match(actual) is not None


def contains(pattern: str, text: str) -> bool:
    """Check whether a Selenese pattern occurs anywhere in a text.

    Unlike `matches`, globs are not anchored and `exact:` patterns are
    searched as substrings, the way text presence is probed on a page.
    """
    strategy, sep, rest = pattern.partition(':')

    if sep and strategy == 'exact':
        return rest in text

    if sep and strategy in {'regexp', 'regexpi'}:
        return matches(pattern, text)

    if sep and strategy == 'glob':
        pattern = rest

    return _glob(f'*{pattern}*').match(text) is not None
