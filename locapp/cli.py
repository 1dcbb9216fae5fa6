from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from locapp.services.location_plan import (
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
)
from locapp.utils.location_patterns import LocationNode, parse_count


EXIT_OK = 0
EXIT_TOO_MANY = 1
EXIT_USAGE = 2


def _aisle_config_arg(value: str) -> AisleConfig:
    """Parse ``NAME[:COLUMNS[:ROWS]]`` into an :class:`AisleConfig`."""

    parts = value.split(":")
    if len(parts) > 3 or not parts[0].strip():
        raise argparse.ArgumentTypeError(
            f"expected NAME[:COLUMNS[:ROWS]], got {value!r}"
        )
    columns = parse_count(parts[1]) if len(parts) > 1 else 1
    rows = parse_count(parts[2]) if len(parts) > 2 else 1
    return AisleConfig(name=parts[0].strip(), columns=columns, rows=rows)


def _add_tree(branch: Tree, nodes: Iterable[LocationNode]) -> None:
    for node in nodes:
        child = branch.add(escape(node.name))
        _add_tree(child, node.children)


def _too_many(console: Console, pattern: str, max_names: int) -> bool:
    total = count_pattern_names(pattern)
    if total > max_names:
        console.print(
            f"[red]Pattern expands to {total} locations (limit {max_names}).[/red]"
        )
        return True
    return False


def _run_expand(args: argparse.Namespace, console: Console) -> int:
    if _too_many(console, args.pattern, args.max_names):
        return EXIT_TOO_MANY

    preview = build_preview(args.pattern, args.limit)
    if args.json:
        console.print_json(json.dumps(preview.to_dict()))
        return EXIT_OK

    tree = Tree(f"[bold]{escape(args.pattern)}[/bold] ({preview.total} locations)")
    _add_tree(tree, preview.nodes)
    console.print(tree)
    return EXIT_OK


def _run_aisles(args: argparse.Namespace, console: Console) -> int:
    configs = parse_advanced_text_to_aisle_configs(args.text)
    if args.json:
        console.print_json(json.dumps([config.to_dict() for config in configs]))
        return EXIT_OK

    table = Table(box=box.SIMPLE, title="Aisle configs")
    table.add_column("Name")
    table.add_column("Columns", justify="right")
    table.add_column("Rows", justify="right")
    for config in configs:
        table.add_row(escape(config.name), str(config.columns), str(config.rows))
    console.print(table)
    return EXIT_OK


def _run_basic(args: argparse.Namespace, console: Console) -> int:
    text = generate_advanced_text_from_basic(args.configs)
    names, total = preview_aisle_names(args.configs, args.limit)
    if args.json:
        console.print_json(json.dumps({"text": text, "names": names, "total": total}))
        return EXIT_OK

    console.print(text, markup=False, highlight=False)
    listed = ", ".join(names)
    if total > len(names):
        listed += ", ..."
    console.print(f"{total} aisle locations: {listed}", markup=False, highlight=False)
    return EXIT_OK


def _run_plan(args: argparse.Namespace, console: Console) -> int:
    if _too_many(console, args.pattern, args.max_names):
        return EXIT_TOO_MANY

    preview = build_preview(args.pattern, 0)
    plan = collect_locations_to_create(preview.nodes, parent_type=args.parent_type)
    roots, children = split_creation_plan(plan)
    if args.json:
        console.print_json(
            json.dumps(
                {
                    "roots": [entry.to_dict() for entry in roots],
                    "children": [entry.to_dict() for entry in children],
                    "total": len(plan),
                }
            )
        )
        return EXIT_OK

    table = Table(box=box.SIMPLE, title=f"Creation plan ({len(plan)} locations)")
    table.add_column("Step", justify="right")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Parent")
    for step, entry in enumerate(roots + children, start=1):
        table.add_row(str(step), escape(entry.title), entry.type.label, escape(entry.parent_name or "-"))
    console.print(table)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locapp-patterns",
        description="Expand and convert warehouse location patterns.",
    )
    parser.add_argument(
        "--max-names",
        type=int,
        default=os.getenv("LOCATION_PATTERN_MAX_NAMES", "5000"),
        help="Refuse patterns that expand to more locations than this.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    expand_parser = subparsers.add_parser("expand", help="Show the location tree of a pattern")
    expand_parser.add_argument("pattern")
    expand_parser.add_argument("--limit", type=int, default=10, help="Names listed in JSON output")
    expand_parser.add_argument("--json", action="store_true")
    expand_parser.set_defaults(handler=_run_expand)

    aisles_parser = subparsers.add_parser("aisles", help="Convert advanced text to aisle configs")
    aisles_parser.add_argument("text")
    aisles_parser.add_argument("--json", action="store_true")
    aisles_parser.set_defaults(handler=_run_aisles)

    basic_parser = subparsers.add_parser("basic", help="Convert aisle configs to advanced text")
    basic_parser.add_argument(
        "configs",
        nargs="+",
        type=_aisle_config_arg,
        metavar="CONFIG",
        help="Aisle as NAME[:COLUMNS[:ROWS]], e.g. PRT:10:5",
    )
    basic_parser.add_argument("--limit", type=int, default=10, help="Aisle names listed after the text")
    basic_parser.add_argument("--json", action="store_true")
    basic_parser.set_defaults(handler=_run_basic)

    plan_parser = subparsers.add_parser("plan", help="List the locations a pattern would create")
    plan_parser.add_argument("pattern")
    plan_parser.add_argument("--parent-type", default=None, help="Type of the location the pattern is created under")
    plan_parser.add_argument("--json", action="store_true")
    plan_parser.set_defaults(handler=_run_plan)

    return parser


def main(argv: Optional[list[str]] = None, console: Optional[Console] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_USAGE
    return args.handler(args, console or Console())


if __name__ == "__main__":
    sys.exit(main())
