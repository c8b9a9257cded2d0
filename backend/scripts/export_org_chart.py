#!/usr/bin/env python3
"""Export the organization chart from the employee data file.

Run from the backend/ directory:

    python3 scripts/export_org_chart.py [--format text|json] [--data-file PATH] [--output PATH] [--verbose]

The text format is an indented outline headed by the organization name; the
json format is the same forest the /api/v1/organization endpoint returns.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from app.core.config import Settings  # noqa: E402
from app.models.employee import OrganizationNode  # noqa: E402
from app.services.employee_store import JsonFileEmployeeStore  # noqa: E402
from app.services.org_tree import build_organization_tree  # noqa: E402

logger = logging.getLogger(__name__)

INDENT = "    "


def render_outline(forest: list[OrganizationNode], title: str) -> str:
    lines = [title, "=" * len(title)]
    stack: list[tuple[OrganizationNode, int]] = [(node, 0) for node in reversed(forest)]
    while stack:
        node, depth = stack.pop()
        line = f"{INDENT * depth}- {node.name} ({node.designation})"
        if node.years_of_experience:
            line += f", {node.years_of_experience}y"
        lines.append(line)
        stack.extend((child, depth + 1) for child in reversed(node.subordinates))
    return "\n".join(lines) + "\n"


def render_json(forest: list[OrganizationNode], title: str) -> str:
    payload = {
        "name": title,
        "roots": [node.model_dump() for node in forest],
    }
    return json.dumps(payload, indent=2) + "\n"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Export the organization chart as a text outline or JSON",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--data-file",
        default=None,
        help="Employee JSON data file (default: EMPLOYEE_DATA_FILE setting)",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write to this file instead of stdout",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


async def export(args: argparse.Namespace) -> str:
    settings = Settings()
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    data_file = args.data_file or settings.EMPLOYEE_DATA_FILE
    logger.info("Reading employees from %s", data_file)
    employees = await JsonFileEmployeeStore(data_file).list_all()
    forest = build_organization_tree(employees)
    logger.info("Built %d root(s) from %d employees", len(forest), len(employees))

    if args.format == "json":
        rendered = render_json(forest, settings.ORGANIZATION_NAME)
    else:
        rendered = render_outline(forest, settings.ORGANIZATION_NAME)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(rendered)
        logger.info("Wrote %s export to %s", args.format, args.output)
    else:
        sys.stdout.write(rendered)
    return rendered


def main() -> None:
    args = parse_args()
    asyncio.run(export(args))


if __name__ == "__main__":
    main()
