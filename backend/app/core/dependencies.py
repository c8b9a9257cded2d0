from __future__ import annotations

from fastapi import HTTPException, Request, status

from app.services.employee_service import EmployeeService
from app.services.image_store import ImageStore


def get_employee_service(request: Request) -> EmployeeService:
    service: EmployeeService | None = getattr(request.app.state, "employee_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Employee store not initialized",
        )
    return service


def get_image_store(request: Request) -> ImageStore:
    store: ImageStore | None = getattr(request.app.state, "image_store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Image store not initialized",
        )
    return store
