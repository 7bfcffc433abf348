"""
Health Declaration API Endpoints
Public submission plus the administrative list, review and stats views
"""

from typing import Literal, Optional
from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_async_session
from app.models.health_declaration import DeclarationStatus
from app.schemas.health_declaration import (
    HealthDeclarationCreate,
    HealthDeclarationUpdate,
    HealthDeclarationResponse,
    PaginatedHealthDeclarations,
    HealthDeclarationStats,
)
from app.services.health_declaration_service import HealthDeclarationService

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10

router = APIRouter(prefix="/health-declarations", tags=["Health Declarations"])


def get_health_declaration_service(
    db: AsyncSession = Depends(get_async_session),
) -> HealthDeclarationService:
    return HealthDeclarationService(db)


@router.post("", response_model=HealthDeclarationResponse, status_code=status.HTTP_201_CREATED)
async def create_health_declaration(
    declaration_data: HealthDeclarationCreate,
    request: Request,
    service: HealthDeclarationService = Depends(get_health_declaration_service),
):
    """
    Submit a new health declaration
    The submitter's address and user agent are recorded for audit
    """
    ip_address = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent")
    return await service.create(declaration_data, ip_address=ip_address, user_agent=user_agent)


@router.get("", response_model=PaginatedHealthDeclarations)
async def list_health_declarations(
    page: int = Query(1, description="Page number (default: 1)"),
    limit: int = Query(DEFAULT_PAGE_SIZE, description="Items per page (default: 10, max: 100)"),
    sort_by: Literal["createdAt", "name", "temperature"] = Query("createdAt", alias="sortBy"),
    sort_order: Literal["ASC", "DESC"] = Query("DESC", alias="sortOrder"),
    status_filter: Optional[DeclarationStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Search in name, symptoms, or contact details"),
    service: HealthDeclarationService = Depends(get_health_declaration_service),
):
    """Get health declarations with pagination, filtering and sorting"""
    search = search.strip() if search else None
    return await service.find_all(
        page=max(1, page),
        limit=min(MAX_PAGE_SIZE, max(1, limit)),
        sort_by=sort_by,
        sort_order=sort_order,
        status=status_filter,
        search=search or None,
    )


@router.get("/stats", response_model=HealthDeclarationStats)
async def get_health_declaration_stats(
    service: HealthDeclarationService = Depends(get_health_declaration_service),
):
    """Totals overall, by status, and for today"""
    return await service.get_stats()


@router.get("/{declaration_id}", response_model=HealthDeclarationResponse)
async def get_health_declaration(
    declaration_id: str,
    service: HealthDeclarationService = Depends(get_health_declaration_service),
):
    """Get a health declaration by ID"""
    return await service.find_one(declaration_id)


@router.patch("/{declaration_id}", response_model=HealthDeclarationResponse)
async def update_health_declaration(
    declaration_id: str,
    declaration_data: HealthDeclarationUpdate,
    service: HealthDeclarationService = Depends(get_health_declaration_service),
):
    """
    Update a health declaration
    Typically used by administrators to approve or reject
    """
    return await service.update(declaration_id, declaration_data)


@router.delete("/{declaration_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_health_declaration(
    declaration_id: str,
    service: HealthDeclarationService = Depends(get_health_declaration_service),
):
    """Permanently delete a health declaration"""
    await service.remove(declaration_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
