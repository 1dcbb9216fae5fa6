from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app, jsonify, request

from locapp.services.location_plan import (
    LOCATION_HIERARCHY,
    LocationType,
    build_preview,
    collect_locations_to_create,
    count_pattern_names,
    preview_aisle_names,
    split_creation_plan,
)
from locapp.utils.aisle_config import (
    AisleConfig,
    generate_advanced_text_from_basic,
    parse_advanced_text_to_aisle_configs,
    read_aisle_configs,
)
from locapp.utils.location_patterns import parse_count, parse_location_string_advanced


bp = Blueprint("locations", __name__, url_prefix="/api/locations")

_MAX_PATTERN_LENGTH = 2000


def _json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def _pattern_from_request(key: str = "pattern") -> tuple[str | None, tuple | None]:
    raw = _json_body().get(key)
    if raw is None:
        raw = request.form.get(key)
    pattern = (raw if isinstance(raw, str) else "").strip()
    if not pattern:
        return None, (jsonify({"error": f"A non-empty '{key}' is required."}), 400)
    if len(pattern) > _MAX_PATTERN_LENGTH:
        return None, (
            jsonify({"error": f"'{key}' must be {_MAX_PATTERN_LENGTH} characters or fewer."}),
            400,
        )
    return pattern, None


def _guard_expansion(pattern: str):
    limit = current_app.config.get("LOCATION_PATTERN_MAX_NAMES", 5000)
    total = count_pattern_names(pattern)
    if total > limit:
        current_app.logger.warning(
            "Rejected location pattern expanding to %d names (limit %d)", total, limit
        )
        return (
            jsonify(
                {
                    "error": "Pattern expands to too many locations.",
                    "total": total,
                    "limit": limit,
                }
            ),
            413,
        )
    return None


def _clamp_config(config: AisleConfig) -> AisleConfig:
    max_columns = current_app.config.get("LOCATION_PATTERN_MAX_COLUMNS", 99)
    max_rows = current_app.config.get("LOCATION_PATTERN_MAX_ROWS", 26)
    return AisleConfig(
        name=config.name.strip(),
        columns=min(max(config.columns, 1), max_columns),
        rows=min(max(config.rows, 1), max_rows),
    )


def _configs_from_json(entries: Any) -> list[AisleConfig]:
    configs: list[AisleConfig] = []
    if not isinstance(entries, list):
        return configs
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        configs.append(
            AisleConfig(
                name="" if name is None else str(name),
                columns=parse_count(entry.get("columns")),
                rows=parse_count(entry.get("rows")),
            )
        )
    return configs


@bp.post("/patterns/preview")
def preview_pattern():
    """Expand a pattern into its location tree plus a short list of names."""

    pattern, error_response = _pattern_from_request()
    if error_response is not None:
        return error_response

    guard_response = _guard_expansion(pattern)
    if guard_response is not None:
        return guard_response

    preview_limit = current_app.config.get("LOCATION_PATTERN_PREVIEW_LIMIT", 10)
    preview = build_preview(pattern, preview_limit)
    payload = preview.to_dict()
    payload["preview_limit"] = preview_limit
    return jsonify(payload)


@bp.post("/patterns/basic")
def basic_to_advanced():
    body = _json_body()
    if body:
        configs = _configs_from_json(body.get("configs"))
        basic_name = body.get("basic_name")
    else:
        configs = read_aisle_configs(
            request.form, current_app.config.get("AISLE_FORM_MAX_ITEMS", 20)
        )
        basic_name = request.form.get("basic_name")

    configs = [_clamp_config(config) for config in configs if config.name.strip()]
    text = generate_advanced_text_from_basic(configs, basic_name)
    names, total = preview_aisle_names(
        configs, current_app.config.get("LOCATION_PATTERN_PREVIEW_LIMIT", 10)
    )
    return jsonify(
        {
            "text": text,
            "configs": [config.to_dict() for config in configs],
            "names": names,
            "total": total,
            "truncated": total > len(names),
        }
    )


@bp.post("/patterns/aisles")
def advanced_to_basic():
    raw = _json_body().get("text")
    if raw is None:
        raw = request.form.get("text", "")
    text = raw if isinstance(raw, str) else ""
    configs = parse_advanced_text_to_aisle_configs(text)
    return jsonify({"configs": [config.to_dict() for config in configs]})


@bp.post("/patterns/plan")
def creation_plan():
    """Return the records needed to create the locations of a pattern.

    Roots are created first; children reference their parent by name.
    """

    pattern, error_response = _pattern_from_request()
    if error_response is not None:
        return error_response

    guard_response = _guard_expansion(pattern)
    if guard_response is not None:
        return guard_response

    body = _json_body()
    parent_id = body.get("parent_id")
    plan = collect_locations_to_create(
        parse_location_string_advanced(pattern),
        parent_id=None if parent_id is None else str(parent_id),
        parent_type=body.get("parent_type"),
    )
    roots, children = split_creation_plan(plan)
    current_app.logger.info(
        "Planned %d root and %d child locations", len(roots), len(children)
    )
    return jsonify(
        {
            "roots": [entry.to_dict() for entry in roots],
            "children": [entry.to_dict() for entry in children],
            "total": len(plan),
        }
    )


@bp.get("/types")
def location_types():
    return jsonify(
        {
            "types": [
                {
                    "type": location_type.value,
                    "label": location_type.label,
                    "child_type": (
                        LOCATION_HIERARCHY[location_type].value
                        if location_type in LOCATION_HIERARCHY
                        else None
                    ),
                }
                for location_type in LocationType
            ]
        }
    )
