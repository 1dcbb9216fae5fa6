from __future__ import annotations

from dataclasses import asdict, dataclass
import logging
import re
from typing import Any, Iterable, Mapping

from locapp.utils.location_patterns import parse_count, split_tokens


logger = logging.getLogger(__name__)

_COLUMNS_AND_ROWS_PATTERN = re.compile(r"^(.+?)\{([^}]+)\}-\[([^\]]+)\]$")
_COLUMNS_ONLY_PATTERN = re.compile(r"^(.+?)\{([^}]+)\}$")
_ROWS_ONLY_PATTERN = re.compile(r"^(.+?)\[([^\]]+)\]$")

AISLE_NAME_FIELD = "aisle-name-{index}"
AISLE_COLUMNS_FIELD = "aisle-columns-{index}"
AISLE_ROWS_FIELD = "aisle-rows-{index}"


@dataclass(frozen=True)
class AisleConfig:
    name: str
    columns: int = 1
    rows: int = 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def aisle_config_to_text(config: AisleConfig) -> str:
    if config.columns == 1 and config.rows == 1:
        return config.name
    if config.columns > 1 and config.rows == 1:
        return f"{config.name}{{{config.columns}}}"
    if config.columns == 1 and config.rows > 1:
        return f"{config.name}[{config.rows}]"
    return f"{config.name}{{{config.columns}}}-[{config.rows}]"


def generate_advanced_text_from_basic(
    configs: Iterable[AisleConfig],
    basic_name: str | None = None,
) -> str:
    """Render basic aisle configs as advanced pattern text.

    ``basic_name`` is only recorded in the debug log.
    """

    configs = list(configs)
    valid_configs = [config for config in configs if (config.name or "").strip()]
    logger.debug(
        "Generating advanced text from %d aisle configs (%d valid, basic_name=%r)",
        len(configs),
        len(valid_configs),
        basic_name,
    )
    if not valid_configs:
        return ""
    return ", ".join(aisle_config_to_text(config) for config in valid_configs)


def _config_from_token(token: str) -> AisleConfig | None:
    columns = 1
    rows = 1

    name = token
    match = _COLUMNS_AND_ROWS_PATTERN.match(token)
    if match:
        name, columns_raw, rows_raw = match.groups()
        columns = parse_count(columns_raw)
        rows = parse_count(rows_raw)
    else:
        match = _COLUMNS_ONLY_PATTERN.match(token)
        if match:
            name, columns_raw = match.groups()
            columns = parse_count(columns_raw)
        else:
            match = _ROWS_ONLY_PATTERN.match(token)
            if match:
                name, rows_raw = match.groups()
                rows = parse_count(rows_raw)

    name = name.strip()
    if not name:
        return None
    return AisleConfig(name=name, columns=columns, rows=rows)


def parse_advanced_text_to_aisle_configs(text: str | None) -> list[AisleConfig]:
    configs: list[AisleConfig] = []
    for token in split_tokens(text):
        config = _config_from_token(token)
        if config is not None:
            configs.append(config)
    return configs


def read_aisle_configs(fields: Mapping[str, Any], max_items: int = 20) -> list[AisleConfig]:
    """Collect aisle configs from indexed form fields.

    Reads ``aisle-name-0``/``aisle-columns-0``/``aisle-rows-0`` and so on,
    stopping at the first index without a name field or at ``max_items``.
    Works with a plain dict or ``request.form``.
    """

    configs: list[AisleConfig] = []
    for index in range(max_items):
        name_key = AISLE_NAME_FIELD.format(index=index)
        if name_key not in fields:
            break
        name = fields.get(name_key)
        columns = fields.get(AISLE_COLUMNS_FIELD.format(index=index))
        rows = fields.get(AISLE_ROWS_FIELD.format(index=index))
        configs.append(
            AisleConfig(
                name="" if name is None else str(name),
                columns=parse_count(columns),
                rows=parse_count(rows),
            )
        )
    return configs
