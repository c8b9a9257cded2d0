from __future__ import annotations

from fastapi import APIRouter, Request

from app.core.config import settings

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(request: Request):
    services: dict[str, str] = {}

    service = getattr(request.app.state, "employee_service", None)
    if service is None:
        services["employee_store"] = "not_configured"
    else:
        ok = await service.check_connection()
        services["employee_store"] = "ok" if ok else "error"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "store_backend": settings.EMPLOYEE_STORE_BACKEND,
        "services": services,
    }


@router.get("/ready")
async def readiness_probe(request: Request):
    return {"ready": getattr(request.app.state, "employee_service", None) is not None}
