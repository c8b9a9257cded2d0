"""Employee record stores.

Both backings keep records in insertion order and write the full record set
on every mutation. The JSON file holds snake_case records only; camelCase
or otherwise unknown keys make the file unreadable (StoreError). There is
no locking between requests: two concurrent writers against the JSON file
can race on read-modify-write.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from app.core.config import Settings
from app.models.employee import Employee
from app.services.org_tree import detach_direct_reports

logger = logging.getLogger(__name__)


class StoreError(Exception):
    pass


class EmployeeStore(ABC):
    """Record store contract: full scan plus keyed create/read/update/delete."""

    @abstractmethod
    async def _read_all(self) -> list[Employee]: ...

    @abstractmethod
    async def _write_all(self, employees: list[Employee]) -> None: ...

    async def list_all(self) -> list[Employee]:
        return await self._read_all()

    async def get(self, employee_id: str) -> Employee | None:
        for emp in await self._read_all():
            if emp.id == employee_id:
                return emp
        return None

    async def insert(self, fields: dict[str, Any]) -> Employee:
        employees = await self._read_all()
        employee = Employee(**{**fields, "id": str(uuid.uuid4())})
        employees.append(employee)
        await self._write_all(employees)
        return employee

    async def replace_fields(self, employee_id: str, fields: dict[str, Any]) -> Employee | None:
        employees = await self._read_all()
        for index, emp in enumerate(employees):
            if emp.id == employee_id:
                updated = emp.model_copy(update={k: v for k, v in fields.items() if k != "id"})
                employees[index] = updated
                await self._write_all(employees)
                return updated
        return None

    async def remove(self, employee_id: str) -> Employee | None:
        """Delete a record and reparent its direct reports to root in one write."""
        employees = await self._read_all()
        removed = next((emp for emp in employees if emp.id == employee_id), None)
        if removed is None:
            return None

        remaining = [emp for emp in employees if emp.id != employee_id]
        detached = detach_direct_reports(remaining, employee_id)
        await self._write_all(remaining)
        if detached:
            logger.info("Reparented %d direct report(s) of %s to root", detached, employee_id)
        return removed

    async def check_connection(self) -> bool:
        try:
            await self._read_all()
            return True
        except StoreError:
            logger.exception("Employee store connection check failed")
            return False


class InMemoryEmployeeStore(EmployeeStore):
    def __init__(self, employees: list[Employee] | None = None) -> None:
        self._records: dict[str, Employee] = {emp.id: emp for emp in employees or []}

    async def _read_all(self) -> list[Employee]:
        return [emp.model_copy() for emp in self._records.values()]

    async def _write_all(self, employees: list[Employee]) -> None:
        self._records = {emp.id: emp.model_copy() for emp in employees}


class JsonFileEmployeeStore(EmployeeStore):
    """Keeps the record set as a JSON array in a single file."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def _ensure_file(self) -> None:
        if self.path.exists():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("[]", encoding="utf-8")
        logger.info("Created empty employee data file at %s", self.path)

    def _load(self) -> list[Employee]:
        try:
            self._ensure_file()
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to read employee data from {self.path}: {e}") from e

        if not isinstance(raw, list):
            raise StoreError(f"Employee data in {self.path} is not a JSON array")
        try:
            return [Employee(**item) for item in raw]
        except (TypeError, ValidationError) as e:
            raise StoreError(f"Malformed employee record in {self.path}: {e}") from e

    def _dump(self, employees: list[Employee]) -> None:
        payload = json.dumps([emp.model_dump() for emp in employees], indent=2)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreError(f"Failed to write employee data to {self.path}: {e}") from e

    async def _read_all(self) -> list[Employee]:
        return await asyncio.to_thread(self._load)

    async def _write_all(self, employees: list[Employee]) -> None:
        await asyncio.to_thread(self._dump, employees)


def create_employee_store(settings: Settings) -> EmployeeStore:
    backend = settings.EMPLOYEE_STORE_BACKEND.lower()
    if backend == "memory":
        return InMemoryEmployeeStore()
    if backend == "json":
        return JsonFileEmployeeStore(settings.EMPLOYEE_DATA_FILE)
    raise ValueError(f"Unknown employee store backend: {settings.EMPLOYEE_STORE_BACKEND}")
