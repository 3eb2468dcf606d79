"""Filter expressions over database records.

A query is a map literal whose entries constrain record fields::

    {'name': glob('*Mario*'), 'releaseyear': between(1990, 1995)}
    {'crc': b'7E4A3B1C'}
    {'users': or(2, 4), 'rumble': is_true()}

Grammar::

    query   := map
    map     := '{' [entry (',' entry)*] '}'
    entry   := key ':' expr
    key     := string | identifier
    expr    := literal | map | call
    call    := identifier '(' [expr (',' expr)*] ')'
    literal := string | integer | b'<hex>' | true | false | nil

A record matches when every entry matches the record's value for that key.
Literals compare by equality, nested maps match recursively and calls apply a
predicate to the value. A key missing from the record never matches.
"""

import fnmatch
from typing import Any, Callable

from .values import RawMap


class QueryError(ValueError):
    """The query text could not be compiled."""

    def __init__(self, message: str, offset: int):
        super().__init__(f"{message} at offset {offset}")
        self.offset = offset


class _Missing:
    def __repr__(self):
        return '<missing>'


MISSING = _Missing()

Matcher = Callable[[Any], bool]


def _equals(expected) -> Matcher:
    def match(value):
        if value is MISSING:
            return False
        # strict type match keeps true apart from 1 and 'AB' apart from b'AB'
        return type(value) is type(expected) and value == expected
    return match


def _map_matcher(entries: list[tuple[Any, Matcher]]) -> Matcher:
    def match(value):
        if not isinstance(value, RawMap):
            return False
        for key, matcher in entries:
            if not matcher(value.get(key, MISSING)):
                return False
        return True
    return match


def _glob(pattern) -> Matcher:
    if not isinstance(pattern, str):
        raise TypeError("glob() expects a string pattern")

    def match(value):
        return isinstance(value, str) and fnmatch.fnmatchcase(value, pattern)
    return match


def _between(low, high) -> Matcher:
    if not isinstance(low, int) or not isinstance(high, int):
        raise TypeError("between() expects two integers")

    def match(value):
        return isinstance(value, int) and not isinstance(value, bool) and low <= value <= high
    return match


def _is_true() -> Matcher:
    def match(value):
        return value is not MISSING and bool(value)
    return match


def _any_of(*matchers: Matcher) -> Matcher:
    if not matchers:
        raise TypeError("or() expects at least one argument")

    def match(value):
        return any(m(value) for m in matchers)
    return match


def _all_of(*matchers: Matcher) -> Matcher:
    if not matchers:
        raise TypeError("and() expects at least one argument")

    def match(value):
        return all(m(value) for m in matchers)
    return match


# name -> (factory, arguments are matchers rather than plain values)
_FUNCTIONS: dict[str, tuple[Callable[..., Matcher], bool]] = {
    'glob': (_glob, False),
    'between': (_between, False),
    'is_true': (_is_true, False),
    'equals': (_equals, False),
    'or': (_any_of, True),
    'operator_or': (_any_of, True),
    'and': (_all_of, True),
    'operator_and': (_all_of, True),
}

_KEYWORDS = {'true': True, 'false': False, 'nil': None}


def _is_ascii_digit(char: str) -> bool:
    # str.isdigit() also accepts characters such as '²' that int() rejects
    return char.isascii() and char.isdigit()


class _Literal:
    """A parsed literal together with its matcher."""

    def __init__(self, value):
        self.value = value
        self.matcher = _equals(value)


class _Parser:
    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    def parse(self) -> Matcher:
        self._skip_whitespace()
        if self._peek() != '{':
            raise QueryError("Expected '{'", self._pos)
        matcher = self._parse_map()
        self._skip_whitespace()
        if self._pos != len(self._text):
            raise QueryError("Unexpected trailing input", self._pos)
        return matcher

    def _peek(self) -> str:
        return self._text[self._pos] if self._pos < len(self._text) else ''

    def _skip_whitespace(self):
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1

    def _expect(self, char: str):
        self._skip_whitespace()
        if self._peek() != char:
            raise QueryError(f"Expected {char!r}", self._pos)
        self._pos += 1

    def _parse_map(self) -> Matcher:
        self._expect('{')
        entries: list[tuple[Any, Matcher]] = []
        self._skip_whitespace()
        if self._peek() == '}':
            self._pos += 1
            return _map_matcher(entries)

        while True:
            self._skip_whitespace()
            key = self._parse_key()
            self._expect(':')
            entries.append((key, self._as_matcher(self._parse_expr())))
            self._skip_whitespace()
            if self._peek() == ',':
                self._pos += 1
                continue
            self._expect('}')
            return _map_matcher(entries)

    def _parse_key(self):
        char = self._peek()
        if char in ('"', "'"):
            return self._parse_string()
        if char.isalpha() or char == '_':
            return self._parse_identifier()
        raise QueryError("Expected a key", self._pos)

    def _parse_expr(self) -> _Literal | Matcher:
        self._skip_whitespace()
        start = self._pos
        char = self._peek()
        if char == '{':
            return self._parse_map()
        if char == 'b' and self._text[self._pos + 1:self._pos + 2] in ('"', "'"):
            self._pos += 1
            return _Literal(self._parse_binary())
        if char in ('"', "'"):
            return _Literal(self._parse_string())
        if _is_ascii_digit(char) or char == '-':
            return _Literal(self._parse_integer())
        if char.isalpha() or char == '_':
            name = self._parse_identifier()
            if name in _KEYWORDS:
                return _Literal(_KEYWORDS[name])
            return self._parse_call(name, start)
        if not char:
            raise QueryError("Unexpected end of query", self._pos)
        raise QueryError(f"Unexpected character {char!r}", self._pos)

    def _parse_call(self, name: str, start: int) -> Matcher:
        if name not in _FUNCTIONS:
            raise QueryError(f"Unknown function {name!r}", start)
        factory, takes_matchers = _FUNCTIONS[name]

        self._expect('(')
        arguments = []
        self._skip_whitespace()
        if self._peek() == ')':
            self._pos += 1
        else:
            while True:
                arguments.append(self._parse_expr())
                self._skip_whitespace()
                if self._peek() == ',':
                    self._pos += 1
                    continue
                self._expect(')')
                break

        if takes_matchers:
            values = [self._as_matcher(arg) for arg in arguments]
        else:
            values = []
            for arg in arguments:
                if not isinstance(arg, _Literal):
                    raise QueryError(f"{name}() expects literal arguments", start)
                values.append(arg.value)

        try:
            return factory(*values)
        except TypeError as e:
            raise QueryError(str(e), start) from e

    @staticmethod
    def _as_matcher(expr: _Literal | Matcher) -> Matcher:
        return expr.matcher if isinstance(expr, _Literal) else expr

    def _parse_identifier(self) -> str:
        start = self._pos
        while self._pos < len(self._text) and (self._text[self._pos].isalnum() or self._text[self._pos] == '_'):
            self._pos += 1
        return self._text[start:self._pos]

    def _parse_string(self) -> str:
        quote = self._text[self._pos]
        start = self._pos
        self._pos += 1
        chars = []
        while True:
            if self._pos >= len(self._text):
                raise QueryError("Unterminated string", start)
            char = self._text[self._pos]
            self._pos += 1
            if char == quote:
                return ''.join(chars)
            if char == '\\':
                if self._pos >= len(self._text):
                    raise QueryError("Unterminated string", start)
                char = self._text[self._pos]
                self._pos += 1
            chars.append(char)

    def _parse_binary(self) -> bytes:
        start = self._pos
        text = self._parse_string()
        try:
            return bytes.fromhex(text)
        except ValueError as e:
            raise QueryError("Invalid binary literal", start) from e

    def _parse_integer(self) -> int:
        start = self._pos
        if self._peek() == '-':
            self._pos += 1
        while _is_ascii_digit(self._peek()):
            self._pos += 1
        digits = self._text[start:self._pos]
        if digits in ('', '-'):
            raise QueryError("Expected an integer", start)
        return int(digits)


class Query:
    """A compiled filter expression."""

    def __init__(self, text: str, matcher: Matcher):
        self._text = text
        self._matcher = matcher

    @property
    def text(self) -> str:
        return self._text

    def matches(self, value) -> bool:
        return self._matcher(value)

    def __repr__(self) -> str:
        return f"Query({self._text!r})"


def compile_query(text: str) -> Query:
    """Compile query text.

    Args:
        text: A map literal such as "{'name': glob('*Mario*')}"

    Raises:
        QueryError: syntax error, unknown function or bad arguments
    """
    return Query(text, _Parser(text).parse())
