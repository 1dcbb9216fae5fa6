"""Turn parsed location trees into creation plans and previews."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
import logging
from typing import Any, Iterable

from locapp.utils.aisle_config import AisleConfig
from locapp.utils.location_patterns import (
    LocationNode,
    PATTERN_RULES,
    build_nested_nodes,
    children_per_parent,
    is_hierarchy_token,
    iter_node_names,
    letter_for,
    pad_number,
    parse_count,
    parse_location_string_advanced,
    split_tokens,
)


logger = logging.getLogger(__name__)


class LocationType(str, Enum):
    WAREHOUSE = "WAREHOUSE"
    ZONE = "ZONE"
    AISLE = "AISLE"
    SHELF = "SHELF"
    BIN = "BIN"
    OTHER = "OTHER"

    @property
    def label(self) -> str:
        return LOCATION_TYPE_LABELS[self]


LOCATION_TYPE_LABELS: dict[LocationType, str] = {
    LocationType.WAREHOUSE: "Warehouse",
    LocationType.ZONE: "Zone",
    LocationType.AISLE: "Aisle",
    LocationType.SHELF: "Shelf",
    LocationType.BIN: "Bin",
    LocationType.OTHER: "Other",
}

LOCATION_HIERARCHY: dict[LocationType, LocationType] = {
    LocationType.WAREHOUSE: LocationType.ZONE,
    LocationType.ZONE: LocationType.AISLE,
    LocationType.AISLE: LocationType.SHELF,
    LocationType.SHELF: LocationType.BIN,
    LocationType.BIN: LocationType.OTHER,
}


def coerce_location_type(value: LocationType | str | None) -> LocationType | None:
    if value is None:
        return None
    if isinstance(value, LocationType):
        return value
    normalized = str(value).strip().upper()
    try:
        return LocationType(normalized)
    except ValueError:
        return None


def next_type_in_hierarchy(parent_type: LocationType | str | None) -> LocationType:
    """Return the type a new location gets under ``parent_type``.

    Top-level locations (no or unknown parent type) are warehouses, and
    ``OTHER`` has no successor so it falls back to a warehouse too.
    """

    resolved = coerce_location_type(parent_type)
    if resolved is None:
        return LocationType.WAREHOUSE
    return LOCATION_HIERARCHY.get(resolved, LocationType.WAREHOUSE)


@dataclass
class LocationCreation:
    title: str
    type: LocationType
    parent_id: str | None = None
    parent_name: str | None = None
    is_active: bool = True

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["type"] = self.type.value
        return payload


def collect_locations_to_create(
    nodes: Iterable[LocationNode],
    parent_id: str | None = None,
    parent_type: LocationType | str | None = None,
    *,
    _current_type: LocationType | None = None,
    _parent_name: str | None = None,
) -> list[LocationCreation]:
    """Flatten a location forest into creation records, parents before children.

    Children carry their parent's name instead of an id; the id is only known
    once the parent has been created.
    """

    location_type = _current_type or next_type_in_hierarchy(parent_type)
    plan: list[LocationCreation] = []
    for node in nodes:
        plan.append(
            LocationCreation(
                title=node.name,
                type=location_type,
                parent_id=parent_id,
                parent_name=_parent_name,
            )
        )
        if node.children:
            plan.extend(
                collect_locations_to_create(
                    node.children,
                    None,
                    _current_type=next_type_in_hierarchy(location_type),
                    _parent_name=node.name,
                )
            )
    return plan


def split_creation_plan(
    plan: Iterable[LocationCreation],
) -> tuple[list[LocationCreation], list[LocationCreation]]:
    roots: list[LocationCreation] = []
    children: list[LocationCreation] = []
    for entry in plan:
        (children if entry.parent_name else roots).append(entry)
    return roots, children


def generate_aisle_names(config: AisleConfig) -> list[str]:
    names: list[str] = []
    for column in range(1, config.columns + 1):
        padded = pad_number(column, config.columns)
        for row in range(config.rows):
            names.append(f"{config.name}{padded}{letter_for(row)}")
    return names


def preview_aisle_names(
    configs: Iterable[AisleConfig], limit: int = 10
) -> tuple[list[str], int]:
    """First ``limit`` names of ``configs`` and the number of names they hold in total."""

    configs = list(configs)
    names: list[str] = []
    for config in configs:
        if len(names) >= limit:
            break
        names.extend(generate_aisle_names(config))
    total = sum(max(config.columns, 0) * max(config.rows, 0) for config in configs)
    return names[:limit], total


def flatten_location_names(nodes: Iterable[LocationNode]) -> list[str]:
    return list(iter_node_names(nodes))


def _literal_name_count(token: str) -> int:
    return len(flatten_location_names(build_nested_nodes(token)))


def _expansion_size(token: str, nested: bool = False) -> int | None:
    """Size of the expansion of ``token`` computed from the counts; None for literals.

    With ``nested`` set, every expanded name is also split on its
    parentheses and commas, so the size is multiplied by the node count of
    one sample name. All names of a range share that count.
    """

    for name, regex, _handler in PATTERN_RULES:
        match = regex.match(token)
        if not match:
            continue
        groups = match.groups()
        if name == "hierarchy":
            base, children_pattern = groups
            if is_hierarchy_token(base):
                continue
            parents = _expansion_size(base)
            if parents is None:
                parents = 1
            return parents * (1 + children_per_parent(children_pattern))
        if name == "combined":
            prefix, columns, middle, rows = groups
            size = max(parse_count(columns), 0) * max(parse_count(rows), 0)
            sample = f"{prefix}1{middle}A"
        elif name == "numeric":
            prefix, count, suffix = groups
            size = max(parse_count(count), 0)
            sample = f"{prefix}1{suffix}"
        elif name == "prefixed_letters":
            prefix, count = groups
            size = max(parse_count(count), 0)
            sample = f"{prefix}A"
        else:
            size = max(parse_count(groups[-1]), 0)
            sample = "A"
        if nested and size:
            size *= _literal_name_count(sample)
        return size
    return None


def count_pattern_names(text: str | None) -> int:
    """Count the names ``text`` expands to without generating any ranges.

    Without a hierarchy token every name goes through the parenthesis scan,
    so literal tokens and range names count one per group they contain.
    With one, each name stays a single node.
    """

    tokens = split_tokens(text)
    nested = not any(is_hierarchy_token(token) for token in tokens)
    total = 0
    for token in tokens:
        size = _expansion_size(token, nested)
        if size is None:
            size = _literal_name_count(token) if nested else 1
        total += size
    return total


@dataclass
class LocationPreview:
    nodes: list[LocationNode]
    total: int
    names: list[str] = field(default_factory=list)
    truncated: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "total": self.total,
            "names": list(self.names),
            "truncated": self.truncated,
        }


def build_preview(text: str | None, limit: int = 10) -> LocationPreview:
    nodes = parse_location_string_advanced(text)
    names = flatten_location_names(nodes)
    limit = max(limit, 0)
    preview = LocationPreview(
        nodes=nodes,
        total=len(names),
        names=names[:limit],
        truncated=len(names) > limit,
    )
    logger.debug("Built location preview with %d names", preview.total)
    return preview
