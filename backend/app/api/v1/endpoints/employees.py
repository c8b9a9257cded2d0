from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, UploadFile, status

from app.core.dependencies import get_employee_service, get_image_store
from app.models.employee import Employee, EmployeeCreate, EmployeeUpdate
from app.services.employee_service import EmployeeNotFoundError, EmployeeService, EmployeeValidationError
from app.services.employee_store import StoreError
from app.services.image_store import ImageStore, ImageUploadError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


def _not_found(err: EmployeeNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err))


def _store_failure(action: str) -> HTTPException:
    logger.exception("Failed to %s", action)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to {action}",
    )


def _release_image(images: ImageStore, reference: str | None) -> None:
    try:
        images.delete(reference)
    except OSError:
        logger.exception("Failed to delete portrait %s", reference)


@router.get("", response_model=list[Employee])
async def list_employees(service: EmployeeService = Depends(get_employee_service)):  # noqa: B008
    try:
        return await service.list_employees()
    except StoreError as err:
        raise _store_failure("retrieve employees") from err


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        return await service.get_employee(employee_id)
    except EmployeeNotFoundError as err:
        raise _not_found(err) from err
    except StoreError as err:
        raise _store_failure("retrieve employee") from err


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(
    request: EmployeeCreate,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        return await service.create_employee(request)
    except EmployeeValidationError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    except StoreError as err:
        raise _store_failure("add employee") from err


@router.put("/{employee_id}", response_model=Employee)
async def update_employee(
    employee_id: str,
    request: EmployeeUpdate,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        return await service.update_employee(employee_id, request)
    except EmployeeNotFoundError as err:
        raise _not_found(err) from err
    except EmployeeValidationError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    except StoreError as err:
        raise _store_failure("update employee") from err


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
    images: ImageStore = Depends(get_image_store),  # noqa: B008
):
    try:
        removed = await service.delete_employee(employee_id)
    except EmployeeNotFoundError as err:
        raise _not_found(err) from err
    except StoreError as err:
        raise _store_failure("delete employee") from err

    _release_image(images, removed.image_path)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{employee_id}/manager-candidates", response_model=list[Employee])
async def list_manager_candidates(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
):
    try:
        return await service.list_manager_candidates(employee_id)
    except EmployeeNotFoundError as err:
        raise _not_found(err) from err
    except StoreError as err:
        raise _store_failure("list manager candidates") from err


@router.post("/{employee_id}/image", response_model=Employee)
async def upload_employee_image(
    employee_id: str,
    file: UploadFile,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
    images: ImageStore = Depends(get_image_store),  # noqa: B008
):
    # one byte past the limit is enough for ImageStore.save to reject it
    content = await file.read(images.max_size + 1)
    try:
        await service.get_employee(employee_id)
        reference = images.save(content, file.content_type, file.filename)
    except EmployeeNotFoundError as err:
        raise _not_found(err) from err
    except ImageUploadError as err:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(err)) from err
    except StoreError as err:
        raise _store_failure("update employee image") from err

    try:
        employee, previous = await service.set_image(employee_id, reference)
    except EmployeeNotFoundError as err:
        _release_image(images, reference)
        raise _not_found(err) from err
    except StoreError as err:
        _release_image(images, reference)
        raise _store_failure("update employee image") from err

    _release_image(images, previous)
    logger.info("Portrait for %s set to %s", employee_id, reference)
    return employee


@router.delete("/{employee_id}/image", response_model=Employee)
async def delete_employee_image(
    employee_id: str,
    service: EmployeeService = Depends(get_employee_service),  # noqa: B008
    images: ImageStore = Depends(get_image_store),  # noqa: B008
):
    try:
        employee, previous = await service.set_image(employee_id, None)
    except EmployeeNotFoundError as err:
        raise _not_found(err) from err
    except StoreError as err:
        raise _store_failure("remove employee image") from err

    _release_image(images, previous)
    return employee
