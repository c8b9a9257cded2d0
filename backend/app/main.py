from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.dependencies import get_image_store
from app.services.employee_service import EmployeeService
from app.services.employee_store import create_employee_store
from app.services.image_store import SUPPORTED_EXTENSIONS, URL_PREFIX, ImageStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    store = create_employee_store(settings)
    application.state.employee_service = EmployeeService(store)
    application.state.image_store = ImageStore.from_settings(settings)
    logger.info(
        "Organization chart backend started (store=%s, uploads=%s)",
        settings.EMPLOYEE_STORE_BACKEND,
        settings.UPLOAD_DIR,
    )
    yield
    application.state.employee_service = None
    application.state.image_store = None


app = FastAPI(
    title="OrgChart API",
    description="Employee records and the organization tree built from their reporting lines",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "OrgChart API"}


@app.get(URL_PREFIX + "/{filename}", include_in_schema=False)
async def get_uploaded_image(filename: str, images: ImageStore = Depends(get_image_store)):  # noqa: B008
    path = images.resolve(filename)
    if path.suffix.lower() not in SUPPORTED_EXTENSIONS or not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return FileResponse(path)
