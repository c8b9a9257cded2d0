"""Organization tree construction and reporting-line bookkeeping.

Everything here is a pure function over a list of employee records. The
reporting-manager reference on each record is the only source of structure.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from app.models.employee import Employee, OrganizationNode

logger = logging.getLogger(__name__)


def build_organization_tree(employees: Iterable[Employee]) -> list[OrganizationNode]:
    """Turn a flat employee list into an ordered forest.

    An employee whose manager is unset or does not resolve to an existing
    record becomes a root. Roots and subordinates keep the input order.
    Expansion starts from the roots only, so records caught in a stored
    reporting cycle are unreachable; they are left out and logged.
    """
    records = list(employees)
    known_ids = {emp.id for emp in records}

    roots: list[Employee] = []
    children: dict[str, list[Employee]] = {}
    for emp in records:
        manager_id = emp.reporting_manager_id
        if manager_id is None or manager_id not in known_ids:
            roots.append(emp)
        else:
            children.setdefault(manager_id, []).append(emp)

    forest: list[OrganizationNode] = []
    stack: list[OrganizationNode] = []
    for emp in roots:
        node = OrganizationNode(**emp.model_dump())
        forest.append(node)
        stack.append(node)

    placed = len(forest)
    while stack:
        node = stack.pop()
        for child in children.get(node.id, []):
            child_node = OrganizationNode(**child.model_dump())
            node.subordinates.append(child_node)
            stack.append(child_node)
            placed += 1

    if placed != len(records):
        logger.warning(
            "Organization tree left out %d employee(s) caught in a reporting cycle",
            len(records) - placed,
        )

    return forest


def detach_direct_reports(employees: Iterable[Employee], manager_id: str) -> int:
    """Make every direct report of ``manager_id`` a root. Returns how many changed."""
    changed = 0
    for emp in employees:
        if emp.reporting_manager_id == manager_id:
            emp.reporting_manager_id = None
            changed += 1
    return changed


def would_create_cycle(
    employees_by_id: Mapping[str, Employee],
    employee_id: str,
    new_manager_id: str | None,
) -> bool:
    """True if reporting to ``new_manager_id`` would put ``employee_id`` above itself."""
    seen: set[str] = set()
    current = new_manager_id
    while current is not None and current not in seen:
        if current == employee_id:
            return True
        seen.add(current)
        manager = employees_by_id.get(current)
        if manager is None:
            return False
        current = manager.reporting_manager_id
    return False


def collect_descendant_ids(employees: Iterable[Employee], employee_id: str) -> set[str]:
    """Ids of every direct and indirect report of ``employee_id``."""
    children: dict[str, list[str]] = {}
    for emp in employees:
        if emp.reporting_manager_id is not None:
            children.setdefault(emp.reporting_manager_id, []).append(emp.id)

    found: set[str] = set()
    stack = [employee_id]
    while stack:
        for child_id in children.get(stack.pop(), []):
            if child_id not in found and child_id != employee_id:
                found.add(child_id)
                stack.append(child_id)
    return found
