"""Employee records and the derived organization tree."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

_NULL_MANAGER_VALUES = {"", "none", "null"}


def normalize_manager_id(value: object) -> str | None:
    """Collapse the loose "no manager" spellings into ``None``."""
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in _NULL_MANAGER_VALUES:
        return None
    return text


class EmployeeBase(BaseModel):
    date_of_birth: str | None = None
    years_of_experience: int = Field(default=0, ge=0)
    reporting_manager_id: str | None = None

    @field_validator("reporting_manager_id", mode="before")
    @classmethod
    def _normalize_manager(cls, value: object) -> str | None:
        return normalize_manager_id(value)


class EmployeeCreate(EmployeeBase):
    """Request body for a new employee. Blank name/designation is rejected by the service."""

    name: str = ""
    designation: str = ""


class EmployeeUpdate(BaseModel):
    """Partial update; only the fields present in the request are applied."""

    name: str | None = None
    designation: str | None = None
    date_of_birth: str | None = None
    years_of_experience: int | None = Field(default=None, ge=0)
    reporting_manager_id: str | None = None

    @field_validator("reporting_manager_id", mode="before")
    @classmethod
    def _normalize_manager(cls, value: object) -> str | None:
        return normalize_manager_id(value)


class Employee(EmployeeBase):
    """Stored employee record. Unknown keys are rejected so foreign data files fail loudly."""

    model_config = {"extra": "forbid"}

    id: str
    name: str
    designation: str
    image_path: str | None = None


class OrganizationNode(Employee):
    """Employee plus its direct reports, expanded recursively."""

    subordinates: list[OrganizationNode] = Field(default_factory=list)


class OrganizationSettings(BaseModel):
    name: str
