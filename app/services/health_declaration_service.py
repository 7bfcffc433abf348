"""
Health Declaration Service
Service layer for storing, listing and aggregating health declarations
"""
import datetime
import logging
import math
from typing import Any, Dict, Optional

from sqlalchemy import select, func, or_, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.error_handling import AppException, StorageException, NotFoundException
from app.models.health_declaration import HealthDeclaration, DeclarationStatus
from app.schemas.health_declaration import HealthDeclarationCreate, HealthDeclarationUpdate
from app.services.declaration_validator import validate_declaration

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "createdAt": HealthDeclaration.created_at,
    "name": HealthDeclaration.name,
    "temperature": HealthDeclaration.temperature,
}

SEARCHABLE_COLUMNS = (
    HealthDeclaration.name,
    HealthDeclaration.symptoms,
    HealthDeclaration.contact_details,
)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the search term matches literally"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def start_of_today() -> datetime.datetime:
    """Local server midnight"""
    return datetime.datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)


class HealthDeclarationService:
    """
    Service for health declaration operations
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize health declaration service

        Args:
            db: Database session
        """
        self.db = db

    async def create(
        self,
        declaration_data: HealthDeclarationCreate,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> HealthDeclaration:
        """
        Validate and store a new declaration

        Args:
            declaration_data: Submitted form fields
            ip_address: Submitter address, kept for audit
            user_agent: Submitter user agent, kept for audit

        Returns:
            The stored declaration with status pending
        """
        try:
            values = declaration_data.model_dump()
            validate_declaration(values)

            declaration = HealthDeclaration(
                **values,
                ip_address=ip_address[:45] if ip_address else None,
                user_agent=user_agent,
                status=DeclarationStatus.PENDING,
            )
            self.db.add(declaration)
            await self.db.flush()
            await self.db.commit()
            await self.db.refresh(declaration)

            logger.info(f"Health declaration created with ID: {declaration.id} for {declaration.name}")
            return declaration

        except AppException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create health declaration: {str(e)}", exc_info=True)
            raise StorageException("Failed to create health declaration")

    async def find_all(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "createdAt",
        sort_order: str = "DESC",
        status: Optional[DeclarationStatus] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        List declarations with filtering, sorting and pagination

        Args:
            page: 1-based page number (already clamped by the caller)
            limit: Page size (already clamped by the caller)
            sort_by: createdAt, name or temperature
            sort_order: ASC or DESC
            status: Exact status filter
            search: Case-insensitive substring over name, symptoms and contact details

        Returns:
            Pagination envelope: data, total, page, limit, total_pages
        """
        try:
            conditions = []
            if status:
                conditions.append(HealthDeclaration.status == DeclarationStatus(status))
            if search:
                pattern = f"%{escape_like(search)}%"
                conditions.append(
                    or_(*[column.ilike(pattern, escape="\\") for column in SEARCHABLE_COLUMNS])
                )

            count_query = select(func.count(HealthDeclaration.id)).where(*conditions)
            total = (await self.db.execute(count_query)).scalar_one()

            sort_column = SORTABLE_COLUMNS[sort_by]
            ordering = asc(sort_column) if sort_order == "ASC" else desc(sort_column)
            query = (
                select(HealthDeclaration)
                .where(*conditions)
                .order_by(ordering)
                .limit(limit)
                .offset((page - 1) * limit)
            )
            result = await self.db.execute(query)
            data = list(result.scalars().all())

            total_pages = math.ceil(total / limit)
            logger.info(f"Retrieved {len(data)} health declarations (page {page} of {total_pages})")

            return {
                "data": data,
                "total": total,
                "page": page,
                "limit": limit,
                "total_pages": total_pages,
            }

        except AppException:
            raise
        except Exception as e:
            logger.error(f"Failed to fetch health declarations: {str(e)}", exc_info=True)
            raise StorageException("Failed to fetch health declarations")

    async def find_one(self, declaration_id: str) -> HealthDeclaration:
        """
        Get a declaration by ID

        Raises:
            NotFoundException: No declaration has this ID
        """
        try:
            declaration = await self.db.get(HealthDeclaration, declaration_id)
            if not declaration:
                raise NotFoundException(f"Health declaration with ID {declaration_id} not found")
            return declaration

        except AppException:
            raise
        except Exception as e:
            logger.error(f"Failed to find health declaration with ID {declaration_id}: {str(e)}", exc_info=True)
            raise StorageException("Failed to fetch health declaration")

    async def update(self, declaration_id: str, declaration_data: HealthDeclarationUpdate) -> HealthDeclaration:
        """
        Apply a partial update to a declaration

        Only the fields present in the request are validated and changed.
        """
        try:
            declaration = await self.find_one(declaration_id)

            changes = declaration_data.model_dump(exclude_unset=True)
            validate_declaration(changes, existing=declaration)

            for field, value in changes.items():
                setattr(declaration, field, value)

            await self.db.flush()
            await self.db.commit()
            await self.db.refresh(declaration)

            logger.info(f"Health declaration updated with ID: {declaration_id}")
            return declaration

        except AppException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update health declaration with ID {declaration_id}: {str(e)}", exc_info=True)
            raise StorageException("Failed to update health declaration")

    async def remove(self, declaration_id: str) -> None:
        """Delete a declaration permanently"""
        try:
            declaration = await self.find_one(declaration_id)
            await self.db.delete(declaration)
            await self.db.commit()

            logger.info(f"Health declaration deleted with ID: {declaration_id}")

        except AppException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to delete health declaration with ID {declaration_id}: {str(e)}", exc_info=True)
            raise StorageException("Failed to delete health declaration")

    async def _count(self, *conditions) -> int:
        query = select(func.count(HealthDeclaration.id)).where(*conditions)
        return (await self.db.execute(query)).scalar_one()

    async def get_stats(self) -> Dict[str, int]:
        """
        Totals overall, per status, and submitted since local midnight
        """
        try:
            return {
                "total": await self._count(),
                "pending": await self._count(HealthDeclaration.status == DeclarationStatus.PENDING),
                "approved": await self._count(HealthDeclaration.status == DeclarationStatus.APPROVED),
                "rejected": await self._count(HealthDeclaration.status == DeclarationStatus.REJECTED),
                "today_submissions": await self._count(HealthDeclaration.created_at >= start_of_today()),
            }

        except Exception as e:
            logger.error(f"Failed to get health declaration stats: {str(e)}", exc_info=True)
            raise StorageException("Failed to get statistics")
