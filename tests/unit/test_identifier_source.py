"""Unit tests for existing-identifier sources and tenant config loading."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from schoolid.core.exceptions import ConfigurationError
from schoolid.models.enums import EntityKind
from schoolid.models.school import School, StudentBatch
from schoolid.services.id_service import IdentifierService
from schoolid.services.identifier_source import SqlAlchemyIdentifierSource, StaticIdentifierSource
from schoolid.services.school_service import SchoolService


def _result(scalar=None, scalars=None):
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalars.return_value.all.return_value = scalars or []
    return result


@pytest.mark.asyncio
async def test_static_source_filters_by_prefix():
    source = StaticIdentifierSource(["ABC25A001", None, "", "ABC25B001"])
    assert await source.list_identifiers("ABC25A") == ["ABC25A001"]
    assert await source.list_identifiers("ABC25") == ["ABC25A001", "ABC25B001"]


def test_sql_source_statement_uses_escaped_prefix_match():
    school_id = uuid4()
    db = AsyncMock(spec=AsyncSession)
    source = SqlAlchemyIdentifierSource(db, StudentBatch.batch_code, StudentBatch.school_id == school_id)

    sql = str(source.statement("25"))
    assert "student_batches.batch_code" in sql
    assert "LIKE" in sql
    assert "ESCAPE" in sql
    assert "student_batches.school_id" in sql


@pytest.mark.asyncio
async def test_sql_source_lists_identifiers():
    db = AsyncMock(spec=AsyncSession)
    db.execute.return_value = _result(scalars=["SCH89BC24X7A"])
    source = SqlAlchemyIdentifierSource(db, School.public_id)

    assert await source.list_identifiers("SCH") == ["SCH89BC24X7A"]
    assert db.execute.called


@pytest.mark.asyncio
async def test_allocate_from_sql_source(config):
    db = AsyncMock(spec=AsyncSession)
    db.execute.return_value = _result(scalars=["25A", "25B"])
    source = SqlAlchemyIdentifierSource(db, StudentBatch.batch_code)

    batch_code = await IdentifierService(config).allocate_from_source(EntityKind.BATCH_CODE, {}, source)
    assert batch_code == "25C"


@pytest.mark.asyncio
async def test_allocate_from_source_of_another_kind(config):
    db = AsyncMock(spec=AsyncSession)
    source = SqlAlchemyIdentifierSource(db, School.public_id)
    assert source.entity_kind == EntityKind.SCHOOL

    with pytest.raises(ConfigurationError):
        await IdentifierService(config).allocate_from_source(EntityKind.STUDENT, {"batch": "A"}, source)
    assert not db.execute.called


@pytest.mark.asyncio
async def test_load_identifier_config_success():
    db = AsyncMock(spec=AsyncSession)
    school_id = uuid4()
    school = School(id=school_id, name="ABC International School", school_code="ABC")
    db.execute.side_effect = [_result(scalar=school), _result(scalar="2024-25")]

    config = await SchoolService.load_identifier_config(db, school_id)

    assert config.school_code == "ABC"
    assert config.academic_year == "2024-25"
    assert config.year_code == "25"
    assert db.execute.call_count == 2


@pytest.mark.asyncio
async def test_load_identifier_config_school_not_found():
    db = AsyncMock(spec=AsyncSession)
    db.execute.return_value = _result(scalar=None)

    with pytest.raises(ConfigurationError):
        await SchoolService.load_identifier_config(db, uuid4())


@pytest.mark.asyncio
async def test_load_identifier_config_without_school_code():
    db = AsyncMock(spec=AsyncSession)
    school_id = uuid4()
    school = School(id=school_id, name="Unconfigured School", school_code=None)

    with patch(
        "schoolid.services.school_service.SchoolService.get_school_by_id", new_callable=AsyncMock
    ) as mock_get_school:
        mock_get_school.return_value = school
        with pytest.raises(ConfigurationError):
            await SchoolService.load_identifier_config(db, school_id)

    assert not db.execute.called


@pytest.mark.asyncio
async def test_load_identifier_config_without_active_batch():
    db = AsyncMock(spec=AsyncSession)
    school_id = uuid4()
    school = School(id=school_id, name="ABC International School", school_code="ABC")
    db.execute.side_effect = [_result(scalar=school), _result(scalar=None)]

    with pytest.raises(ConfigurationError):
        await SchoolService.load_identifier_config(db, school_id)


@pytest.mark.asyncio
async def test_load_identifier_config_malformed_academic_year():
    db = AsyncMock(spec=AsyncSession)
    school_id = uuid4()
    school = School(id=school_id, name="ABC International School", school_code="ABC")
    db.execute.side_effect = [_result(scalar=school), _result(scalar="2024")]

    with pytest.raises(ConfigurationError):
        await SchoolService.load_identifier_config(db, school_id)
