"""
Glob to matcher compiler

Compiles a single glob into a callable matcher. The glob is tokenized and
validated here, translated to an RE2 regular expression and compiled with
google-re2, so matching time stays linear in the input length whatever the
pattern. Patterns come from user-edited files and are matched against
arbitrary command text and tool output.

Supported syntax:
    *       any run of characters except '/'
    **      as a whole segment: any number of segments ('**/x', 'x/**', 'a/**/b')
    ?       one character except '/'
    [...]   one character from a bracket expression (ranges, '!' or '^'
            negation, [:alpha:] style named classes)
    \\x     the literal character x
"""

import string
from enum import Enum
from functools import lru_cache
from typing import Any, List, Optional, Tuple

import re2

SEPARATOR = '/'

_GLOB_SPECIAL = frozenset('*?[]\\')

Range = Tuple[int, int]


def _chars(chars: str) -> List[Range]:
    return [(ord(c), ord(c)) for c in chars]


_NAMED_CLASSES = {
    'alpha': [(ord('a'), ord('z')), (ord('A'), ord('Z'))],
    'digit': [(ord('0'), ord('9'))],
    'alnum': [(ord('a'), ord('z')), (ord('A'), ord('Z')), (ord('0'), ord('9'))],
    'upper': [(ord('A'), ord('Z'))],
    'lower': [(ord('a'), ord('z'))],
    'space': _chars(' \t\n\r\f\v'),
    'blank': _chars(' \t'),
    'xdigit': [(ord('0'), ord('9')), (ord('A'), ord('F')), (ord('a'), ord('f'))],
    'punct': _chars(string.punctuation),
    'cntrl': [(0x00, 0x1f), (0x7f, 0x7f)],
    'word': [(ord('a'), ord('z')), (ord('A'), ord('Z')), (ord('0'), ord('9')), (ord('_'), ord('_'))],
}

_ANY = '(?s:.)'
_NOT_SEPARATOR = '[^/]'
_NOTHING = '[^\\x{0}-\\x{10ffff}]'


class MatchMode(Enum):
    """How a compiled glob is applied to the input text"""
    FULL = "full"          # the whole text must match
    CONTAINS = "contains"  # the glob may match anywhere inside the text


class GlobSyntaxError(ValueError):
    """Raised when a glob cannot be compiled"""

    def __init__(self, pattern: str, message: str):
        super().__init__(f"Invalid glob {pattern!r}: {message}")
        self.pattern = pattern
        self.reason = message


def escape_glob(text: str) -> str:
    """Escape glob metacharacters so text matches literally"""
    return ''.join('\\' + c if c in _GLOB_SPECIAL else c for c in text)


def _regex_literal(ch: str) -> str:
    if ch.isascii() and (ch.isalnum() or ch == '_'):
        return ch
    return f"\\x{{{ord(ch):x}}}"


def _range_source(low: int, high: int) -> str:
    if low == high:
        return f"\\x{{{low:x}}}"
    return f"\\x{{{low:x}}}-\\x{{{high:x}}}"


def _without_separator(ranges: List[Range]) -> List[Range]:
    sep = ord(SEPARATOR)
    result = []
    for low, high in ranges:
        if low <= sep <= high:
            if low < sep:
                result.append((low, sep - 1))
            if high > sep:
                result.append((sep + 1, high))
        else:
            result.append((low, high))
    return result


def _class_source(ranges: List[Range], negate: bool) -> str:
    """Regex for a bracket expression; the separator is never matched"""
    if negate:
        ranges = ranges + [(ord(SEPARATOR), ord(SEPARATOR))]
        return '[^' + ''.join(_range_source(lo, hi) for lo, hi in ranges) + ']'

    ranges = _without_separator(ranges)
    if not ranges:
        return _NOTHING
    return '[' + ''.join(_range_source(lo, hi) for lo, hi in ranges) + ']'


# Token kinds
_LIT = 'lit'
_ONE = 'one'
_STAR = 'star'
_GLOBSTAR = 'globstar'

Token = Tuple[str, Optional[str]]


def _parse_class(pattern: str, start: int) -> Tuple[str, int]:
    """
    Parse a bracket expression beginning right after '['

    Returns:
        Tuple of (regex source, index just past the closing ']')
    """
    pos = start
    negate = False
    if pos < len(pattern) and pattern[pos] in '!^':
        negate = True
        pos += 1

    ranges: List[Range] = []
    first = True
    while True:
        if pos >= len(pattern):
            raise GlobSyntaxError(pattern, "unterminated character class")
        ch = pattern[pos]

        if ch == ']' and not first:
            pos += 1
            break
        first = False

        if ch == '[' and pattern.startswith('[:', pos):
            end = pattern.find(':]', pos + 2)
            if end == -1:
                raise GlobSyntaxError(pattern, "unterminated named class")
            name = pattern[pos + 2:end]
            if name not in _NAMED_CLASSES:
                raise GlobSyntaxError(pattern, f"unknown named class [:{name}:]")
            ranges.extend(_NAMED_CLASSES[name])
            pos = end + 2
            continue

        if ch == '\\' and pos + 1 < len(pattern):
            pos += 1
            ch = pattern[pos]

        # Range a-b, unless the '-' is the last character before ']'
        if (pos + 2 < len(pattern) and pattern[pos + 1] == '-'
                and pattern[pos + 2] != ']'):
            high_pos = pos + 2
            if pattern[high_pos] == '\\' and high_pos + 1 < len(pattern):
                high_pos += 1
            low, high = ord(ch), ord(pattern[high_pos])
            if low > high:
                raise GlobSyntaxError(pattern, f"invalid range {ch}-{pattern[high_pos]}")
            ranges.append((low, high))
            pos = high_pos + 1
            continue

        ranges.append((ord(ch), ord(ch)))
        pos += 1

    return _class_source(ranges, negate), pos


def tokenize(pattern: str) -> List[Token]:
    """Split a glob into literal, single-char, star and globstar tokens"""
    tokens: List[Token] = []
    pos = 0
    length = len(pattern)

    while pos < length:
        ch = pattern[pos]

        if ch == '\\':
            if pos + 1 < length:
                tokens.append((_LIT, pattern[pos + 1]))
                pos += 2
            else:
                tokens.append((_LIT, '\\'))
                pos += 1
        elif ch == '*':
            run_end = pos
            while run_end < length and pattern[run_end] == '*':
                run_end += 1
            at_segment_start = not tokens or tokens[-1] == (_LIT, SEPARATOR)
            at_segment_end = run_end == length or pattern[run_end] == SEPARATOR
            if run_end - pos >= 2 and at_segment_start and at_segment_end:
                tokens.append((_GLOBSTAR, None))
            elif not tokens or tokens[-1][0] != _STAR:
                tokens.append((_STAR, None))
            pos = run_end
        elif ch == '?':
            tokens.append((_ONE, _NOT_SEPARATOR))
            pos += 1
        elif ch == '[':
            source, pos = _parse_class(pattern, pos + 1)
            tokens.append((_ONE, source))
        else:
            tokens.append((_LIT, ch))
            pos += 1

    return tokens


def to_regex(tokens: List[Token]) -> str:
    """Translate glob tokens to an unanchored RE2 expression"""
    parts: List[str] = []
    i = 0
    count = len(tokens)

    while i < count:
        kind, value = tokens[i]
        nxt = tokens[i + 1] if i + 1 < count else None

        if (kind == _LIT and value == SEPARATOR and nxt is not None
                and nxt[0] == _GLOBSTAR and i + 2 == count):
            # trailing '/**': the directory itself or anything below it
            parts.append(f"(?:/{_ANY}*)?")
            i += 2
        elif kind == _GLOBSTAR and nxt == (_LIT, SEPARATOR):
            # '**/': zero or more whole leading segments
            parts.append(f"(?:{_ANY}*/)?")
            i += 2
        elif kind == _GLOBSTAR:
            parts.append(f"{_ANY}*")
            i += 1
        elif kind == _STAR:
            parts.append(f"{_NOT_SEPARATOR}*")
            i += 1
        elif kind == _ONE:
            parts.append(value)
            i += 1
        else:
            parts.append(_regex_literal(value))
            i += 1

    return ''.join(parts)


@lru_cache(maxsize=1024)
def _compile_regex(source: str) -> Any:
    return re2.compile(source)


class GlobMatcher:
    """
    Compiled glob. Call it with a string to test for a match.

    Instances are immutable after construction and safe to share between
    threads.
    """

    def __init__(self, pattern: str, mode: MatchMode = MatchMode.FULL):
        self.pattern = pattern
        self.mode = mode

        tokens = tokenize(pattern)
        self._literal: Optional[str] = None
        if all(kind == _LIT for kind, _ in tokens):
            self._literal = ''.join(value for _, value in tokens)

        self.regex = to_regex(tokens)
        try:
            self._compiled = _compile_regex(self.regex)
        except re2.error as e:
            raise GlobSyntaxError(pattern, str(e)) from e

    def __repr__(self) -> str:
        return f"GlobMatcher({self.pattern!r}, {self.mode.name})"

    def __call__(self, text: str) -> bool:
        return self.match(text)

    def match(self, text: str) -> bool:
        """Return True if text matches according to this matcher's mode"""
        if self._literal is not None:
            if self.mode is MatchMode.FULL:
                return text == self._literal
            return self._literal in text

        if self.mode is MatchMode.FULL:
            return self._compiled.fullmatch(text) is not None
        return self._compiled.search(text) is not None


def compile_glob(pattern: str, mode: MatchMode = MatchMode.FULL) -> GlobMatcher:
    """
    Compile a glob into a matcher

    Args:
        pattern: Glob pattern (no negation prefix)
        mode: MatchMode.FULL to match whole strings, MatchMode.CONTAINS to
            match anywhere inside a string

    Returns:
        GlobMatcher

    Raises:
        GlobSyntaxError: If the pattern is malformed
    """
    return GlobMatcher(pattern, mode)
