from typing import Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolid.core.exceptions import ConfigurationError
from schoolid.models.enums import BatchStatus
from schoolid.models.school import School, StudentBatch
from schoolid.schemas.identifiers import IdentifierScopeConfig
from schoolid.services.id_service import initialize


class SchoolService:
    """Service layer for tenant lookups"""

    @staticmethod
    async def get_school_by_id(db: AsyncSession, school_id: UUID) -> Optional[School]:
        result = await db.execute(
            select(School).where(School.id == school_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_current_academic_year(db: AsyncSession, school_id: UUID) -> Optional[str]:
        """Academic year of the most recently created active batch."""
        result = await db.execute(
            select(StudentBatch.academic_year)
            .where(
                StudentBatch.school_id == school_id,
                StudentBatch.status == BatchStatus.ACTIVE,
            )
            .order_by(StudentBatch.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def load_identifier_config(db: AsyncSession, school_id: UUID) -> IdentifierScopeConfig:
        """
        Build the identifier config for one tenant from its school record.

        There is no fallback academic year: a school without an active batch
        cannot generate year-bearing identifiers.

        Raises:
            ConfigurationError: school missing, school code unset, or no active batch
        """
        school = await SchoolService.get_school_by_id(db, school_id)
        if not school:
            raise ConfigurationError(f"School {school_id} not found")
        if not school.school_code:
            raise ConfigurationError(f"School {school_id} has no school code")

        academic_year = await SchoolService.get_current_academic_year(db, school_id)
        if not academic_year:
            raise ConfigurationError(f"School {school_id} has no active batch to take the academic year from")

        return initialize(school.school_code, academic_year)
