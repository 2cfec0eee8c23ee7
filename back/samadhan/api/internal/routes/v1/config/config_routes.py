# Third-party imports
from fastapi import APIRouter, HTTPException

# Local application imports
from samadhan.utils.complaint_config import (
    COMPLAINT_CATEGORIES,
    COMPLAINT_STATUSES,
    DEPARTMENTS,
    PRIORITY_LEVELS,
    SEVERITY_LEVELS,
    CategoryConfig,
    DepartmentConfig,
    PriorityConfig,
    SeverityConfig,
    StatusConfig,
    get_department_config,
)

router = APIRouter(prefix="/config", tags=["Configuration"])


@router.get("/categories", response_model=list[CategoryConfig])
async def list_categories():
    return list(COMPLAINT_CATEGORIES.values())


@router.get("/statuses", response_model=list[StatusConfig])
async def list_statuses():
    return list(COMPLAINT_STATUSES.values())


@router.get("/priorities", response_model=list[PriorityConfig])
async def list_priorities():
    return list(PRIORITY_LEVELS.values())


@router.get("/severities", response_model=list[SeverityConfig])
async def list_severities():
    return list(SEVERITY_LEVELS.values())


@router.get("/departments", response_model=list[DepartmentConfig])
async def list_departments():
    return list(DEPARTMENTS.values())


@router.get("/departments/{department}", response_model=DepartmentConfig)
async def get_department(department: str):
    config = get_department_config(department)
    if config is None:
        raise HTTPException(status_code=404, detail=f"Unknown department: {department}")
    return config
