"""Existing-identifier lookup: the one read the ID service needs from storage."""

from typing import Iterable, List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolid.models.enums import EntityKind


class IdentifierSource(Protocol):
    """Lists identifiers already issued that start with a scope prefix."""

    async def list_identifiers(self, prefix: str) -> List[str]:
        ...


class StaticIdentifierSource:
    """In-memory source, e.g. for a CSV import batch not yet flushed."""

    def __init__(self, identifiers: Iterable[Optional[str]] = ()):
        self._identifiers = [value for value in identifiers if value]

    def add(self, identifier: str) -> None:
        self._identifiers.append(identifier)

    async def list_identifiers(self, prefix: str) -> List[str]:
        return [value for value in self._identifiers if value.startswith(prefix)]


class SqlAlchemyIdentifierSource:
    """
    Reads one identifier column of any mapped table.

    Example:
        ```python
        source = SqlAlchemyIdentifierSource(db, Student.student_id, Student.school_id == school_id)
        student_id = await service.allocate_from_source(EntityKind.STUDENT, scope, source)
        ```
    """

    def __init__(self, db: AsyncSession, column, *criteria):
        self.db = db
        self.column = column
        self.criteria = criteria

    @property
    def entity_kind(self) -> Optional[EntityKind]:
        """Kind declared on the column by ``identifier_column``, if any."""
        return self.column.info.get("entity_kind")

    def statement(self, prefix: str):
        return select(self.column).where(
            self.column.isnot(None),
            self.column.startswith(prefix, autoescape=True),
            *self.criteria,
        )

    async def list_identifiers(self, prefix: str) -> List[str]:
        result = await self.db.execute(self.statement(prefix))
        return list(result.scalars().all())
