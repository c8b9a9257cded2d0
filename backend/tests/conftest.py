from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from app.main import app
from app.models.employee import Employee


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _store_settings(tmp_path):
    from app.core.config import settings

    original_backend = settings.EMPLOYEE_STORE_BACKEND
    original_upload_dir = settings.UPLOAD_DIR
    settings.EMPLOYEE_STORE_BACKEND = "memory"
    settings.UPLOAD_DIR = str(tmp_path / "uploads")
    yield
    settings.EMPLOYEE_STORE_BACKEND = original_backend
    settings.UPLOAD_DIR = original_upload_dir


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_employee(employee_id: str, manager_id: str | None = None, **fields) -> Employee:
    data = {
        "id": employee_id,
        "name": f"Employee {employee_id}",
        "designation": "Engineer",
        "date_of_birth": "1990-01-01",
        "years_of_experience": 3,
        "reporting_manager_id": manager_id,
    }
    data.update(fields)
    return Employee(**data)


@pytest.fixture
def org_employees() -> list[Employee]:
    """CEO -> (CTO -> (DEV1, DEV2), CFO); plus an unrelated contractor."""
    return [
        make_employee("CEO", None, name="Ada", designation="Chief Executive"),
        make_employee("CTO", "CEO", name="Brian", designation="Chief Technology Officer"),
        make_employee("CFO", "CEO", name="Chen", designation="Chief Financial Officer"),
        make_employee("DEV1", "CTO", name="Dana", designation="Developer"),
        make_employee("DEV2", "CTO", name="Eli", designation="Developer"),
        make_employee("CONTRACTOR", None, name="Fay", designation="Consultant"),
    ]
