"""Search query parsing.

A query is one or more groups separated by ``||``; a row matches when any group
matches. Inside a group, whitespace-separated tokens are AND-ed:

- ``level`` is a substring of any column; ``plan|section`` accepts either.
- ``"level 2"`` is a substring including the space.
- ``>10`` / ``<10``: some numeric cell compares true.
- ``$status:issued`` / ``$"sheet name"::"a 1"``: substring of the named columns.
- ``$rev:>2``: numeric comparison on the named columns.
- ``$name`` keeps only the named columns on screen and leaves rows alone.
- A leading ``!`` negates a row filter.

Columns are named by fragments: ``$num`` matches "Sheet Number", a quoted name
matches the columns containing each of its words. Any ``$`` token also limits
the visible columns. A column filter naming no existing column is ignored.
Tokens with nothing left to match (``!``, ``|``, ``$``) are dropped.
"""

from __future__ import annotations

import operator
import re
from dataclasses import dataclass, field
from typing import Callable, Sequence, Union

NEGATION_PREFIX = "!"
ALTERNATIVE_SEPARATOR = "|"
GROUP_SEPARATOR = "||"
COLUMN_PREFIX = "$"
QUOTE = '"'

# Column tokens first so quoted column names are not split on their spaces.
_TOKEN_RE = re.compile(
    r'!?\$(?:"[^"]*"|[^\s:"]+)(?:::?(?:"[^"]*"|\S*))?'
    r'|!?"[^"]*"'
    r"|\S+"
)
_COMPARISON_RE = re.compile(r"([<>])(\d+\.?\d*)")
_COMPARATORS = {">": operator.gt, "<": operator.lt}

ColumnFragments = tuple[str, ...]
RowPredicate = Callable[[str, Sequence[str]], bool]


def parse_number(text: str) -> float | None:
    """Read a cell as a number, tolerating thousands separators, ``$`` and ``%``."""
    cleaned = text.replace(",", "").replace("$", "").strip()
    scale = 1.0
    if cleaned.endswith("%"):
        cleaned = cleaned[:-1]
        scale = 0.01
    try:
        return float(cleaned) * scale
    except ValueError:
        return None


def matching_columns(fragments: ColumnFragments, columns: Sequence[str]) -> tuple[int, ...]:
    """Positions of the columns whose lowercased name contains every fragment."""
    return tuple(
        idx
        for idx, name in enumerate(columns)
        if all(part in name.lower() for part in fragments)
    )


def _always(_entry: str, _cells: Sequence[str]) -> bool:
    return True


@dataclass(frozen=True)
class QueryTerm:
    """Substring filter over the whole row or over the columns named by ``column``."""

    alternatives: tuple[str, ...]
    negated: bool = False
    column: ColumnFragments | None = None

    def hit(self, text: str) -> bool:
        return any(alternative in text for alternative in self.alternatives)

    def matches(self, entry: str) -> bool:
        hit = self.hit(entry)
        return not hit if self.negated else hit

    def bind(self, columns: Sequence[str]) -> RowPredicate:
        if self.column is None:
            return lambda entry, _cells: self.matches(entry)
        targets = matching_columns(self.column, columns)
        if not targets:
            return _always

        def _predicate(_entry: str, cells: Sequence[str]) -> bool:
            hit = any(self.hit(cells[idx]) for idx in targets)
            return not hit if self.negated else hit

        return _predicate

    def implies(self, other: "Term") -> bool:
        """Return True when every entry matching ``self`` also matches ``other``."""
        if not isinstance(other, QueryTerm):
            return False
        if self.negated != other.negated or self.column != other.column:
            return False
        if not self.negated:
            # Each of our needles contains one of theirs.
            return all(
                any(theirs in ours for theirs in other.alternatives)
                for ours in self.alternatives
            )
        # Excluding a shorter needle also excludes every longer one containing it.
        return all(
            any(ours in theirs for ours in self.alternatives)
            for theirs in other.alternatives
        )


@dataclass(frozen=True)
class ComparisonTerm:
    """``>N`` / ``<N`` over every numeric cell, or over the named columns."""

    op: str
    value: float
    negated: bool = False
    column: ColumnFragments | None = None

    def bind(self, columns: Sequence[str]) -> RowPredicate:
        if self.column is None:
            targets: tuple[int, ...] = tuple(range(len(columns)))
        else:
            targets = matching_columns(self.column, columns)
            if not targets:
                return _always
        compare = _COMPARATORS[self.op]

        def _predicate(_entry: str, cells: Sequence[str]) -> bool:
            hit = False
            for idx in targets:
                number = parse_number(cells[idx])
                if number is not None and compare(number, self.value):
                    hit = True
                    break
            return not hit if self.negated else hit

        return _predicate

    def implies(self, other: "Term") -> bool:
        if not isinstance(other, ComparisonTerm):
            return False
        if (self.op, self.negated, self.column) != (other.op, other.negated, other.column):
            return False
        # "> 10" implies "> 5"; negation flips the direction.
        tighter = self.value >= other.value if self.op == ">" else self.value <= other.value
        return tighter != self.negated or self.value == other.value


Term = Union[QueryTerm, ComparisonTerm]


@dataclass(frozen=True)
class QueryGroup:
    """Tokens AND-ed together, plus the column fragments they put on screen."""

    terms: tuple[Term, ...] = ()
    shown: tuple[ColumnFragments, ...] = ()

    def bind(self, columns: Sequence[str]) -> list[RowPredicate]:
        return [term.bind(columns) for term in self.terms]

    def implies(self, other: "QueryGroup") -> bool:
        return all(any(term.implies(old) for term in self.terms) for old in other.terms)


@dataclass(frozen=True)
class Query:
    text: str
    groups: tuple[QueryGroup, ...] = field(default=())

    @property
    def empty(self) -> bool:
        return not self.groups

    @property
    def terms(self) -> tuple[Term, ...]:
        return tuple(term for group in self.groups for term in group.terms)

    @property
    def unfiltered(self) -> bool:
        """True when every row matches, e.g. a group holds only ``$column`` tokens."""
        return not self.groups or any(not group.terms for group in self.groups)

    def compile(self, columns: Sequence[str]) -> RowPredicate:
        """Resolve column fragments once and return a per-row predicate."""
        if self.unfiltered:
            return _always
        bound = [group.bind(columns) for group in self.groups]

        def _predicate(entry: str, cells: Sequence[str]) -> bool:
            return any(all(check(entry, cells) for check in checks) for checks in bound)

        return _predicate

    def matches(
        self, entry: str, cells: Sequence[str] = (), columns: Sequence[str] = ()
    ) -> bool:
        return self.compile(columns)(entry, cells)

    def narrows(self, previous: "Query") -> bool:
        """True when every row matching this query also matches ``previous``."""
        if previous.unfiltered:
            return True
        if self.unfiltered:
            return False
        return all(
            any(group.implies(old) for old in previous.groups) for group in self.groups
        )

    def visible_columns(self, columns: Sequence[str]) -> tuple[int, ...]:
        """Column positions to display; every column when none is named or matched."""
        shown = [fragments for group in self.groups for fragments in group.shown]
        every = tuple(range(len(columns)))
        if not shown:
            return every
        visible = tuple(
            idx
            for idx, name in enumerate(columns)
            if any(all(part in name.lower() for part in fragments) for fragments in shown)
        )
        return visible or every


def _unquote(text: str) -> tuple[str, bool]:
    if len(text) > 1 and text.startswith(QUOTE) and text.endswith(QUOTE):
        return text[1:-1], True
    return text, False


def _alternatives(text: str, quoted: bool) -> tuple[str, ...]:
    if quoted:
        return (text,) if text else ()
    return tuple(part for part in text.split(ALTERNATIVE_SEPARATOR) if part)


def _comparison(text: str, negated: bool, column: ColumnFragments | None) -> ComparisonTerm | None:
    match = _COMPARISON_RE.fullmatch(text)
    if match is None:
        return None
    return ComparisonTerm(
        op=match.group(1), value=float(match.group(2)), negated=negated, column=column
    )


def _split_column_token(body: str) -> tuple[str, bool, str | None]:
    """Split ``name[:value]`` / ``"name"[::value]`` into name, quoted flag, value."""
    if body.startswith(QUOTE):
        end = body.find(QUOTE, 1)
        if end < 0:
            return body[1:], True, None
        name, rest = body[1:end], body[end + 1:]
        quoted = True
    else:
        colon = body.find(":")
        if colon < 0:
            return body, False, None
        name, rest = body[:colon], body[colon:]
        quoted = False
    if not rest.startswith(":"):
        return name, quoted, None
    return name, quoted, rest[2:] if rest.startswith("::") else rest[1:]


def _parse_column_token(body: str, negated: bool) -> tuple[Term | None, ColumnFragments | None]:
    name, quoted, value = _split_column_token(body)
    fragments = tuple(name.split()) if quoted else (name,)
    fragments = tuple(part for part in fragments if part)
    if not fragments:
        return None, None
    if not value:
        return None, fragments
    text, value_quoted = _unquote(value)
    if not value_quoted:
        comparison = _comparison(text, negated, fragments)
        if comparison is not None:
            return comparison, fragments
    alternatives = _alternatives(text, value_quoted)
    if not alternatives:
        return None, fragments
    return QueryTerm(alternatives=alternatives, negated=negated, column=fragments), fragments


def _parse_token(token: str) -> tuple[Term | None, ColumnFragments | None]:
    negated = token.startswith(NEGATION_PREFIX)
    body = token[len(NEGATION_PREFIX):] if negated else token
    if body.startswith(COLUMN_PREFIX):
        return _parse_column_token(body[len(COLUMN_PREFIX):], negated)
    comparison = _comparison(body, negated, None)
    if comparison is not None:
        return comparison, None
    text, quoted = _unquote(body)
    alternatives = _alternatives(text, quoted)
    if not alternatives:
        return None, None
    return QueryTerm(alternatives=alternatives, negated=negated), None


def parse_term(token: str) -> Term | None:
    """Parse one token into a row filter; ``None`` when it filters nothing."""
    return _parse_token(token.lower())[0]


def split_groups(text: str) -> list[str]:
    """Split on ``||`` outside double quotes."""
    groups: list[str] = []
    current: list[str] = []
    in_quotes = False
    idx = 0
    while idx < len(text):
        char = text[idx]
        if char == QUOTE:
            in_quotes = not in_quotes
        elif not in_quotes and text.startswith(GROUP_SEPARATOR, idx):
            groups.append("".join(current))
            current = []
            idx += len(GROUP_SEPARATOR)
            continue
        current.append(char)
        idx += 1
    groups.append("".join(current))
    return groups


def parse_group(text: str) -> QueryGroup | None:
    terms: list[Term] = []
    shown: list[ColumnFragments] = []
    for token in _TOKEN_RE.findall(text.lower()):
        term, fragments = _parse_token(token)
        if term is not None:
            terms.append(term)
        if fragments is not None:
            shown.append(fragments)
    if not terms and not shown:
        return None
    return QueryGroup(terms=tuple(terms), shown=tuple(shown))


def parse_query(text: str | None) -> Query:
    raw = text or ""
    groups = [group for group in map(parse_group, split_groups(raw)) if group is not None]
    return Query(text=raw, groups=tuple(groups))
