"""Expansion of the compact location-pattern grammar.

A pattern string is a comma separated list of tokens. Each token expands to
one or more concrete location names:

``PRT``            a single location named ``PRT``
``PRT{3}``         ``PRT1`` .. ``PRT3`` (numbers padded to the width of the count)
``PRT[2]``         ``PRTA``, ``PRTB``
``PRT{2}-[3]``     ``PRT1-A`` .. ``PRT2-C`` (every letter for each number)
``20{2}*(+-[2])``  parents ``201``, ``202`` with children ``201-A``, ``201-B`` ...

Tokens that match none of the rules are used verbatim, which is how literal
groupings such as ``A(B, C(D))`` reach the nested scan in
:func:`build_nested_nodes`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Callable, Iterable, Optional, Union


_HIERARCHY_PATTERN = re.compile(r"^(.+?)\*\((.+?)\)$")
_COMBINED_PATTERN = re.compile(r"^(.*?)\{([^}]+)\}(.*?)\[([^\]]+)\]$")
_PREFIXED_LETTER_PATTERN = re.compile(r"^(.+?)\[([^\]]+)\]$")
_LETTER_PATTERN = re.compile(r"^\[([^\]]+)\]$")
_NUMERIC_PATTERN = re.compile(r"^(.*?)\{([^}]+)\}(.*?)$")
_CHILD_COUNT_PATTERN = re.compile(r"\[(\d+)\]")
_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


@dataclass
class LocationNode:
    name: str
    children: list["LocationNode"] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class HierarchyPattern:
    parents: list[str]
    children_pattern: str


Expansion = Union[list[str], HierarchyPattern]


def parse_count(value: str | None) -> int:
    """Read a range count the way the pattern inputs are typed.

    Leading digits win (``"3x"`` is 3); anything unreadable, and zero, count
    as 1. Negative values are returned as-is and expand to nothing.
    """

    if value is None:
        return 1
    match = _LEADING_INTEGER.match(str(value))
    if not match:
        return 1
    count = int(match.group(1))
    return count or 1


def pad_number(number: int, count: int) -> str:
    return str(number).zfill(len(str(count)))


def letter_for(index: int) -> str:
    return chr(65 + index)


def _expand_hierarchy(match: re.Match[str]) -> Optional[Expansion]:
    base_pattern, sub_pattern = match.groups()
    base_expanded = expand_pattern(base_pattern)
    if isinstance(base_expanded, HierarchyPattern):
        # Nested ``*()`` bases are not supported; let the flat rules try.
        return None
    return HierarchyPattern(parents=base_expanded, children_pattern=sub_pattern)


def _expand_combined(match: re.Match[str]) -> Expansion:
    prefix, num_range, middle, letter_range = match.groups()
    num_count = parse_count(num_range)
    letter_count = parse_count(letter_range)
    return [
        f"{prefix}{pad_number(number, num_count)}{middle}{letter_for(index)}"
        for number in range(1, num_count + 1)
        for index in range(letter_count)
    ]


def _expand_prefixed_letters(match: re.Match[str]) -> Expansion:
    prefix, letter_range = match.groups()
    return [f"{prefix}{letter_for(index)}" for index in range(parse_count(letter_range))]


def _expand_letters(match: re.Match[str]) -> Expansion:
    (letter_range,) = match.groups()
    return [letter_for(index) for index in range(parse_count(letter_range))]


def _expand_numeric(match: re.Match[str]) -> Expansion:
    prefix, num_range, suffix = match.groups()
    num_count = parse_count(num_range)
    return [
        f"{prefix}{pad_number(number, num_count)}{suffix}"
        for number in range(1, num_count + 1)
    ]


# Evaluated top to bottom; the first rule whose regex matches and whose
# handler returns a value wins.
PATTERN_RULES: tuple[tuple[str, re.Pattern[str], Callable[[re.Match[str]], Optional[Expansion]]], ...] = (
    ("hierarchy", _HIERARCHY_PATTERN, _expand_hierarchy),
    ("combined", _COMBINED_PATTERN, _expand_combined),
    ("prefixed_letters", _PREFIXED_LETTER_PATTERN, _expand_prefixed_letters),
    ("letters", _LETTER_PATTERN, _expand_letters),
    ("numeric", _NUMERIC_PATTERN, _expand_numeric),
)


def match_rule(pattern: str) -> str:
    """Return the name of the rule that expands ``pattern`` (``"literal"`` if none)."""

    for name, regex, handler in PATTERN_RULES:
        match = regex.match(pattern)
        if match and handler(match) is not None:
            return name
    return "literal"


def expand_pattern(pattern: str) -> Expansion:
    """Expand a single token (no commas) into names or a hierarchy descriptor."""

    for _name, regex, handler in PATTERN_RULES:
        match = regex.match(pattern)
        if not match:
            continue
        expanded = handler(match)
        if expanded is not None:
            return expanded
    return [pattern]


def split_tokens(text: str | None) -> list[str]:
    if not text:
        return []
    return [part.strip() for part in text.split(",") if part.strip()]


def child_count(children_pattern: str) -> int:
    # An explicit ``[0]`` means no children, unlike the range counts.
    match = _CHILD_COUNT_PATTERN.search(children_pattern)
    return int(match.group(1)) if match else 1


def is_hierarchy_token(token: str) -> bool:
    """True when :func:`expand_pattern` returns a :class:`HierarchyPattern` for ``token``."""

    match = _HIERARCHY_PATTERN.match(token)
    return bool(match) and not is_hierarchy_token(match.group(1))


def _child_separator(children_pattern: str) -> str | None:
    if not children_pattern.endswith("]"):
        return None
    if children_pattern.startswith("+-["):
        return "-"
    if children_pattern.startswith("+["):
        return ""
    return None


def children_per_parent(children_pattern: str) -> int:
    if _child_separator(children_pattern) is None:
        return 0
    return max(child_count(children_pattern), 0)


def build_children(parent_name: str, children_pattern: str) -> list[LocationNode]:
    separator = _child_separator(children_pattern)
    if separator is None:
        return []
    return [
        LocationNode(name=f"{parent_name}{separator}{letter_for(index)}")
        for index in range(child_count(children_pattern))
    ]


def build_nested_nodes(text: str) -> list[LocationNode]:
    """Build a forest from literal ``NAME(CHILD, CHILD(...))`` groupings.

    ``stack`` holds the child lists currently open, the root list first. A
    ``(`` only opens a scope when a name is pending; a ``)`` at the root
    emits the pending name and leaves the root open.
    """

    roots: list[LocationNode] = []
    stack: list[list[LocationNode]] = [roots]
    current = ""

    def emit(name: str) -> Optional[LocationNode]:
        name = name.strip()
        if not name:
            return None
        node = LocationNode(name=name)
        stack[-1].append(node)
        return node

    for char in text:
        if char == "(":
            node = emit(current)
            if node is not None:
                stack.append(node.children)
                current = ""
        elif char == ")":
            emit(current)
            if len(stack) > 1:
                stack.pop()
            current = ""
        elif char == ",":
            emit(current)
            current = ""
        else:
            current += char

    emit(current)
    return roots


def parse_location_string_advanced(text: str | None) -> list[LocationNode]:
    """Parse a full pattern string into a forest of :class:`LocationNode`."""

    expanded_names: list[str] = []
    hierarchies: list[HierarchyPattern] = []

    for token in split_tokens(text):
        expanded = expand_pattern(token)
        if isinstance(expanded, HierarchyPattern):
            hierarchies.append(expanded)
        else:
            expanded_names.extend(expanded)

    if not hierarchies and expanded_names:
        return build_nested_nodes(", ".join(expanded_names))

    nodes: list[LocationNode] = []
    for hierarchy in hierarchies:
        for parent_name in hierarchy.parents:
            nodes.append(
                LocationNode(
                    name=parent_name,
                    children=build_children(parent_name, hierarchy.children_pattern),
                )
            )
    nodes.extend(LocationNode(name=name) for name in expanded_names)
    return nodes


def iter_node_names(nodes: Iterable[LocationNode]) -> Iterable[str]:
    for node in nodes:
        yield node.name
        yield from iter_node_names(node.children)
