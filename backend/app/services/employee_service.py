"""Employee CRUD with reporting-line consistency."""

from __future__ import annotations

import logging

from app.models.employee import Employee, EmployeeCreate, EmployeeUpdate, OrganizationNode
from app.services.employee_store import EmployeeStore
from app.services.org_tree import build_organization_tree, collect_descendant_ids, would_create_cycle

logger = logging.getLogger(__name__)

_REQUIRED_TEXT_FIELDS = ("name", "designation")


class EmployeeValidationError(Exception):
    pass


class EmployeeNotFoundError(Exception):
    def __init__(self, employee_id: str) -> None:
        super().__init__(f"Employee '{employee_id}' not found")
        self.employee_id = employee_id


def _check_required_text(fields: dict[str, object]) -> None:
    blank = [
        key for key in _REQUIRED_TEXT_FIELDS if key in fields and not str(fields[key] or "").strip()
    ]
    if blank:
        raise EmployeeValidationError(f"{' and '.join(blank).capitalize()} must not be empty")


class EmployeeService:
    def __init__(self, store: EmployeeStore) -> None:
        self.store = store

    async def list_employees(self) -> list[Employee]:
        return await self.store.list_all()

    async def get_employee(self, employee_id: str) -> Employee:
        employee = await self.store.get(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def create_employee(self, data: EmployeeCreate) -> Employee:
        fields = data.model_dump()
        _check_required_text(fields)
        fields["name"] = fields["name"].strip()
        fields["designation"] = fields["designation"].strip()

        employee = await self.store.insert(fields)
        logger.info("Created employee %s (%s)", employee.id, employee.name)
        return employee

    async def update_employee(self, employee_id: str, data: EmployeeUpdate) -> Employee:
        fields = data.model_dump(exclude_unset=True)
        if fields.get("years_of_experience", 0) is None:
            del fields["years_of_experience"]
        _check_required_text(fields)
        for key in _REQUIRED_TEXT_FIELDS:
            if key in fields:
                fields[key] = fields[key].strip()

        employees = await self.store.list_all()
        by_id = {emp.id: emp for emp in employees}
        current = by_id.get(employee_id)
        if current is None:
            raise EmployeeNotFoundError(employee_id)

        new_manager = fields.get("reporting_manager_id")
        if new_manager is not None and new_manager != current.reporting_manager_id:
            if would_create_cycle(by_id, employee_id, new_manager):
                raise EmployeeValidationError(
                    f"Employee '{employee_id}' cannot report to '{new_manager}': "
                    "that would create a reporting cycle"
                )

        updated = await self.store.replace_fields(employee_id, fields)
        if updated is None:
            raise EmployeeNotFoundError(employee_id)
        logger.info("Updated employee %s fields=%s", employee_id, sorted(fields))
        return updated

    async def delete_employee(self, employee_id: str) -> Employee:
        removed = await self.store.remove(employee_id)
        if removed is None:
            raise EmployeeNotFoundError(employee_id)
        logger.info("Deleted employee %s (%s)", employee_id, removed.name)
        return removed

    async def set_image(self, employee_id: str, image_path: str | None) -> tuple[Employee, str | None]:
        """Point the employee at a new portrait (or none). Returns the record and the old reference."""
        current = await self.get_employee(employee_id)
        updated = await self.store.replace_fields(employee_id, {"image_path": image_path})
        if updated is None:
            raise EmployeeNotFoundError(employee_id)
        return updated, current.image_path

    async def list_manager_candidates(self, employee_id: str) -> list[Employee]:
        employees = await self.store.list_all()
        if not any(emp.id == employee_id for emp in employees):
            raise EmployeeNotFoundError(employee_id)

        excluded = collect_descendant_ids(employees, employee_id)
        excluded.add(employee_id)
        return [emp for emp in employees if emp.id not in excluded]

    async def build_organization_tree(self) -> list[OrganizationNode]:
        return build_organization_tree(await self.store.list_all())

    async def check_connection(self) -> bool:
        return await self.store.check_connection()
