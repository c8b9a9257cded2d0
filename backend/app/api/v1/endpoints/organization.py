from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.config import settings
from app.core.dependencies import get_employee_service
from app.models.employee import OrganizationNode, OrganizationSettings
from app.services.employee_service import EmployeeService
from app.services.employee_store import StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/organization", tags=["organization"])


@router.get("", response_model=list[OrganizationNode])
async def get_organization_tree(service: EmployeeService = Depends(get_employee_service)):  # noqa: B008
    try:
        return await service.build_organization_tree()
    except StoreError as err:
        logger.exception("Failed to build organization tree")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch organization tree",
        ) from err


@router.get("/settings", response_model=OrganizationSettings)
async def get_organization_settings():
    return OrganizationSettings(name=settings.ORGANIZATION_NAME)
