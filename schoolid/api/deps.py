"""API Dependencies"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from schoolid.database import get_db
from schoolid.schemas.identifiers import IdentifierScopeConfig
from schoolid.services.school_service import SchoolService


async def get_scope_config(
    school_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> IdentifierScopeConfig:
    """
    Load the identifier config of the school named in the path.

    Args:
        school_id: Tenant school ID (path parameter)
        db: Database session

    Returns:
        The tenant's IdentifierScopeConfig

    Raises:
        ConfigurationError: handled by the app-level identifier error handler
    """
    return await SchoolService.load_identifier_config(db, school_id)
