from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from app.models.employee import EmployeeCreate, EmployeeUpdate
from app.services.employee_service import EmployeeNotFoundError, EmployeeService, EmployeeValidationError
from app.services.employee_store import InMemoryEmployeeStore, StoreError


@pytest.fixture
def service(org_employees):
    return EmployeeService(InMemoryEmployeeStore(org_employees))


@pytest.fixture
def empty_service():
    return EmployeeService(InMemoryEmployeeStore())


@pytest.mark.anyio
async def test_create_employee_assigns_fresh_id(empty_service):
    first = await empty_service.create_employee(EmployeeCreate(name="Ann", designation="Eng"))
    second = await empty_service.create_employee(EmployeeCreate(name="Bob", designation="Eng"))

    assert first.id
    assert first.id != second.id
    assert first.name == "Ann"
    assert first.reporting_manager_id is None
    assert first.image_path is None


@pytest.mark.anyio
async def test_create_employee_strips_text_fields(empty_service):
    created = await empty_service.create_employee(EmployeeCreate(name="  Ann ", designation=" Eng"))

    assert created.name == "Ann"
    assert created.designation == "Eng"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "fields",
    [
        {"name": "", "designation": "Eng"},
        {"name": "Ann", "designation": ""},
        {"name": "   ", "designation": "Eng"},
        {},
    ],
)
async def test_create_employee_requires_name_and_designation(empty_service, fields):
    with pytest.raises(EmployeeValidationError, match="must not be empty"):
        await empty_service.create_employee(EmployeeCreate(**fields))

    assert await empty_service.list_employees() == []


@pytest.mark.anyio
async def test_create_employee_accepts_unknown_manager(empty_service):
    created = await empty_service.create_employee(
        EmployeeCreate(name="Ann", designation="Eng", reporting_manager_id="GHOST")
    )

    assert created.reporting_manager_id == "GHOST"
    forest = await empty_service.build_organization_tree()
    assert [node.id for node in forest] == [created.id]


@pytest.mark.anyio
async def test_get_employee_unknown_raises(service):
    with pytest.raises(EmployeeNotFoundError) as exc_info:
        await service.get_employee("missing")

    assert exc_info.value.employee_id == "missing"


@pytest.mark.anyio
async def test_update_employee_applies_only_sent_fields(service):
    updated = await service.update_employee("DEV1", EmployeeUpdate(designation="Senior Developer"))

    assert updated.designation == "Senior Developer"
    assert updated.name == "Dana"
    assert updated.reporting_manager_id == "CTO"
    assert updated.years_of_experience == 3


@pytest.mark.anyio
async def test_update_employee_explicit_null_manager_makes_root(service):
    updated = await service.update_employee("DEV1", EmployeeUpdate(reporting_manager_id=None))

    assert updated.reporting_manager_id is None
    forest = await service.build_organization_tree()
    assert "DEV1" in [node.id for node in forest]


@pytest.mark.anyio
async def test_update_employee_moves_to_new_manager(service):
    await service.update_employee("DEV2", EmployeeUpdate(reporting_manager_id="CFO"))

    forest = await service.build_organization_tree()
    ceo = forest[0]
    cfo = next(node for node in ceo.subordinates if node.id == "CFO")
    assert [node.id for node in cfo.subordinates] == ["DEV2"]


@pytest.mark.anyio
async def test_update_employee_unknown_raises(service):
    with pytest.raises(EmployeeNotFoundError):
        await service.update_employee("missing", EmployeeUpdate(name="X"))


@pytest.mark.anyio
async def test_update_employee_rejects_blank_name(service):
    with pytest.raises(EmployeeValidationError):
        await service.update_employee("DEV1", EmployeeUpdate(name=" "))

    assert (await service.get_employee("DEV1")).name == "Dana"


@pytest.mark.anyio
async def test_update_employee_ignores_null_experience(service):
    updated = await service.update_employee("DEV1", EmployeeUpdate(years_of_experience=None))

    assert updated.years_of_experience == 3


@pytest.mark.anyio
@pytest.mark.parametrize(("employee_id", "manager_id"), [("CEO", "DEV1"), ("CTO", "DEV2"), ("CFO", "CFO")])
async def test_update_employee_rejects_reporting_cycle(service, employee_id, manager_id):
    with pytest.raises(EmployeeValidationError, match="reporting cycle"):
        await service.update_employee(employee_id, EmployeeUpdate(reporting_manager_id=manager_id))

    forest = await service.build_organization_tree()
    assert [node.id for node in forest] == ["CEO", "CONTRACTOR"]


@pytest.mark.anyio
async def test_update_employee_keeps_unchanged_manager(service):
    updated = await service.update_employee("DEV1", EmployeeUpdate(reporting_manager_id="CTO", name="Dee"))

    assert updated.reporting_manager_id == "CTO"
    assert updated.name == "Dee"


@pytest.mark.anyio
async def test_delete_manager_reparents_reports_to_root(service):
    removed = await service.delete_employee("CTO")

    assert removed.id == "CTO"
    employees = {emp.id: emp for emp in await service.list_employees()}
    assert "CTO" not in employees
    assert employees["DEV1"].reporting_manager_id is None
    assert employees["DEV2"].reporting_manager_id is None

    forest = await service.build_organization_tree()
    assert [node.id for node in forest] == ["CEO", "DEV1", "DEV2", "CONTRACTOR"]
    assert [node.id for node in forest[0].subordinates] == ["CFO"]


@pytest.mark.anyio
async def test_delete_unknown_employee_raises(service):
    with pytest.raises(EmployeeNotFoundError):
        await service.delete_employee("missing")

    assert len(await service.list_employees()) == 6


@pytest.mark.anyio
async def test_end_to_end_create_link_delete(empty_service):
    a = await empty_service.create_employee(EmployeeCreate(name="A", designation="Boss"))
    b = await empty_service.create_employee(
        EmployeeCreate(name="B", designation="Report", reporting_manager_id=a.id)
    )

    forest = await empty_service.build_organization_tree()
    assert len(forest) == 1
    assert forest[0].id == a.id
    assert [node.id for node in forest[0].subordinates] == [b.id]

    await empty_service.delete_employee(a.id)

    forest = await empty_service.build_organization_tree()
    assert len(forest) == 1
    assert forest[0].id == b.id
    assert forest[0].subordinates == []


@pytest.mark.anyio
async def test_list_manager_candidates_excludes_self_and_descendants(service):
    candidates = await service.list_manager_candidates("CTO")

    assert [emp.id for emp in candidates] == ["CEO", "CFO", "CONTRACTOR"]


@pytest.mark.anyio
async def test_list_manager_candidates_unknown_raises(service):
    with pytest.raises(EmployeeNotFoundError):
        await service.list_manager_candidates("missing")


@pytest.mark.anyio
async def test_set_image_returns_previous_reference(service):
    employee, previous = await service.set_image("DEV1", "/uploads/new.png")
    assert employee.image_path == "/uploads/new.png"
    assert previous is None

    employee, previous = await service.set_image("DEV1", None)
    assert employee.image_path is None
    assert previous == "/uploads/new.png"


@pytest.mark.anyio
async def test_set_image_unknown_raises(service):
    with pytest.raises(EmployeeNotFoundError):
        await service.set_image("missing", "/uploads/x.png")


@pytest.mark.anyio
async def test_store_error_propagates_unchanged():
    store = InMemoryEmployeeStore()
    store.list_all = AsyncMock(side_effect=StoreError("disk on fire"))
    service = EmployeeService(store)

    with pytest.raises(StoreError, match="disk on fire"):
        await service.build_organization_tree()
