"""Unit tests for IdentifierService allocation."""

import logging
import random
from datetime import date
from types import MappingProxyType

import pytest

from schoolid.core.exceptions import (
    AllocationExhaustedError,
    CapacityExceededError,
    ConfigurationError,
    DuplicateIdentifierError,
    FormatError,
)
from schoolid.models.enums import (
    AlertType,
    AllocationStrategy,
    BusCapacity,
    EmployeeRole,
    EntityKind,
    ExamType,
    FacilityCode,
    SubjectCategory,
)
from schoolid.schemas.identifiers import StudentScope
from schoolid.services import id_grammar
from schoolid.services.id_service import (
    IdentifierService,
    allocate_id,
    allocation_strategy,
    build_scope,
    initialize,
)
from schoolid.services.identifier_source import StaticIdentifierSource

ON = date(2024, 3, 15)


class FixedRandom(random.Random):
    """Always draws the first choice, so every suffix comes out identical."""

    def random(self):
        return 0.5

    def choice(self, seq):
        return seq[0]


# Sequence kinds


def test_first_student_in_empty_scope():
    service = IdentifierService(initialize("ABC", "2023-24"))
    assert service.next_student_id("A", []) == "ABC24A001"


def test_year_code_is_last_two_digits_of_academic_year(service):
    assert service.config.year_code == "25"
    assert service.next_student_id("A") == "ABC25A001"


def test_next_after_highest_not_gap_fill(service):
    existing = ["ABC25A001", "ABC25A002", "ABC25A004"]
    assert service.next_student_id("A", existing) == "ABC25A005"


def test_order_of_existing_does_not_matter(service):
    existing = ["ABC25A010", "ABC25A003", "ABC25A007"]
    assert service.next_student_id("A", existing) == "ABC25A011"


def test_scope_isolation(service):
    existing = ["XYZ25A005", "ABC25B007", "ABC24A009"]
    assert service.next_student_id("A", existing) == "ABC25A001"


def test_malformed_identifiers_are_skipped(service, caplog):
    caplog.set_level(logging.WARNING, logger="schoolid.services.id_service")
    existing = ["ABC25A0X1", "ABC25A", None, "", "ABC25A012"]
    assert service.next_student_id("A", existing) == "ABC25A013"
    assert "Skipping malformed identifier" in caplog.text


def test_sequence_capacity_exceeded(service):
    with pytest.raises(CapacityExceededError) as exc_info:
        service.next_student_id("A", ["ABC25A999"])
    assert exc_info.value.prefix == "ABC25A"
    assert exc_info.value.capacity == 999
    assert exc_info.value.code == "CAPACITY_EXCEEDED"


def test_batch_code_letters_advance(service):
    assert service.next_batch_code([]) == "25A"
    assert service.next_batch_code(["25A", "25B", "24C"]) == "25C"


def test_batch_code_capacity(service):
    with pytest.raises(CapacityExceededError) as exc_info:
        service.next_batch_code(["25Y", "25Z"])
    assert exc_info.value.capacity == 26


def test_batch_code_for_another_academic_year(service):
    assert service.next_batch_code(["25A"], academic_year="2025-26") == "26A"


def test_bus_number(service):
    existing = ["ABCR01L001", "ABCR01M005", "ABCR02L009"]
    assert service.next_bus_number(1, BusCapacity.LARGE, existing) == "ABCR01L002"


def test_roll_number_needs_no_tenant_config():
    service = IdentifierService()
    existing = ["A5A24001", "A5A24002", "A5B24010"]
    assert service.next_roll_number("A5A", "2024", existing) == "A5A24003"


def test_assignment_id(service):
    existing = ["CMAT01A5A20240315001", "CMAT01A5A20240316004"]
    assert service.next_assignment_id("CMAT01", "A5A", ON, existing) == "CMAT01A5A20240315002"


def test_fee_collection_id(service):
    existing = ["ABC2403001", "ABC2403002", "ABC2404009"]
    assert service.next_fee_collection_id("2024", 3, existing) == "ABC2403003"


def test_payroll_id(service):
    existing = ["TCH2403001", "ADM2403004"]
    assert service.next_payroll_id(EmployeeRole.TEACHER, "2024", 3, existing) == "TCH2403002"


def test_year_scopes_reject_junk(service):
    with pytest.raises(FormatError):
        service.next_fee_collection_id("hello99", 3, [])
    with pytest.raises(FormatError):
        service.next_roll_number("A5A", "garbage-24", [])
    with pytest.raises(FormatError):
        service.next_batch_code([], academic_year="2025-27")


def test_maintenance_log_id(service):
    existing = ["ABCBUS20240315003", "ABCLAB20240315007"]
    assert service.next_maintenance_log_id(FacilityCode.BUS, ON, existing) == "ABCBUS20240315004"


def test_safety_alert_id(service):
    assert service.next_safety_alert_id(AlertType.FIRE_DRILL, ON) == "ABCFD20240315001"


def test_scope_prefix(service):
    assert service.scope_prefix(EntityKind.STUDENT, {"batch": "A"}) == "ABC25A"
    assert service.scope_prefix(EntityKind.EMPLOYEE, {"role": "TEACHER"}) == "TCH25"
    assert service.scope_prefix(EntityKind.BATCH_CODE, {}) == "25"
    assert service.scope_prefix(EntityKind.BUS_NUMBER, {"route": 3, "capacity": "S"}) == "ABCR03S"


# Random-suffix kinds


def test_employee_id_shape(service):
    employee_id = service.next_employee_id(EmployeeRole.TEACHER, [])
    assert employee_id.startswith("TCH25")
    assert len(employee_id) == 12
    assert id_grammar.is_valid_employee_id(employee_id)


def test_employee_ids_never_repeat(service):
    issued = []
    for _ in range(200):
        issued.append(service.next_employee_id(EmployeeRole.ADMIN, issued))
    assert len(set(issued)) == len(issued)


def test_employee_collision_draws_again(config):
    first = IdentifierService(config, rng=random.Random(5)).next_employee_id(EmployeeRole.TEACHER)
    retried = IdentifierService(config, rng=random.Random(5)).next_employee_id(
        EmployeeRole.TEACHER, [first]
    )
    assert retried != first
    assert id_grammar.is_valid_employee_id(retried)


def test_employee_allocation_exhausted(config):
    service = IdentifierService(config, rng=FixedRandom(), max_attempts=5)
    first = service.next_employee_id(EmployeeRole.TRANSPORT)
    assert first == "TRP25B2BB2BB"

    with pytest.raises(AllocationExhaustedError) as exc_info:
        service.next_employee_id(EmployeeRole.TRANSPORT, [first])
    assert exc_info.value.attempts == 5


def test_max_attempts_must_be_positive(config):
    with pytest.raises(ValueError):
        IdentifierService(config, max_attempts=0)


def test_school_id(service):
    school_id = service.new_school_id("ABC International School", "REG123456789", year=2024)
    assert school_id.startswith("SCH89BC24")
    assert id_grammar.is_valid_school_id(school_id)


def test_school_id_exhausted_with_fixed_rng():
    service = IdentifierService(rng=FixedRandom(), max_attempts=3)
    taken = service.new_school_id("Greenfield", "77", year=2025)
    assert taken == "SCH77GR25AAA"
    with pytest.raises(AllocationExhaustedError):
        service.new_school_id("Greenfield", "77", existing=[taken], year=2025)


# Deterministic kinds


def test_class_code(service):
    assert service.new_class_code("A", 5, "B") == "A5B"
    assert service.new_class_code("A", 0, "Z") == "ANUR"


def test_class_code_duplicate(service):
    with pytest.raises(DuplicateIdentifierError) as exc_info:
        service.new_class_code("A", 5, "B", ["A5A", "A5B"])
    assert exc_info.value.identifier == "A5B"


def test_subject_code(service):
    assert service.new_subject_code(SubjectCategory.CORE, "Mathematics", 1) == "CMAT01"
    with pytest.raises(FormatError):
        service.new_subject_code(SubjectCategory.PHYSICAL, "PE", 1)


def test_exam_id(service):
    exam_id = service.new_exam_id(ExamType.MID_TERM, "CMAT01", "A5A", ON)
    assert exam_id == "MTCMAT01A5A20240315"
    with pytest.raises(DuplicateIdentifierError):
        service.new_exam_id(ExamType.MID_TERM, "CMAT01", "A5A", ON, [exam_id])


def test_exam_id_with_unlisted_exam_type(service):
    assert service.new_exam_id("UT", "CMAT01", "A5A", ON) == "UTCMAT01A5A20240315"
    assert service.allocate(EntityKind.EXAM, {"exam_type": "QZ", "subject_code": "CMAT01",
                                              "class_code": "A5A", "date": ON}) == "QZCMAT01A5A20240315"


# Configuration and scope handling


def test_missing_config_for_tenant_kinds():
    service = IdentifierService()
    with pytest.raises(ConfigurationError):
        service.next_student_id("A")
    with pytest.raises(ConfigurationError):
        service.next_employee_id(EmployeeRole.ADMIN)
    with pytest.raises(ConfigurationError):
        service.next_batch_code()


@pytest.mark.parametrize(
    "school_code, academic_year",
    [
        ("", "2024-25"),
        ("ABC", ""),
        ("abc", "2024-25"),
        ("ABCD", "2024-25"),
        ("ABC", "2024-26"),
        ("ABC", "24-25"),
        ("ABC", "2024"),
    ],
)
def test_initialize_rejects_bad_config(school_code, academic_year):
    with pytest.raises(ConfigurationError):
        initialize(school_code, academic_year)


def test_initialize_accepts_digits_in_school_code():
    config = initialize("X1Z", "2099-00")
    assert config.school_code == "X1Z"
    assert config.year_code == "00"


def test_allocate_accepts_mapping_scope(service):
    assert service.allocate("student", {"batch": "A"}, ["ABC25A001"]) == "ABC25A002"


def test_allocate_accepts_read_only_mapping_scope(service):
    scope = MappingProxyType({"batch": "A"})
    assert service.allocate(EntityKind.STUDENT, scope, []) == "ABC25A001"
    assert build_scope(EntityKind.STUDENT, scope) == StudentScope(batch="A")


def test_allocate_rejects_bad_scope(service):
    with pytest.raises(FormatError):
        service.allocate(EntityKind.STUDENT, {"batch": 5}, [])
    with pytest.raises(FormatError):
        service.allocate(EntityKind.STUDENT, {"route": 1}, [])
    with pytest.raises(FormatError):
        service.allocate(EntityKind.STUDENT, StudentScope(batch="AB"), [])


def test_build_scope_rejects_wrong_model():
    with pytest.raises(FormatError):
        build_scope(EntityKind.EMPLOYEE, StudentScope(batch="A"))


def test_allocation_strategy():
    assert allocation_strategy("student") == AllocationStrategy.SEQUENCE
    assert allocation_strategy(EntityKind.EMPLOYEE) == AllocationStrategy.RANDOM_SUFFIX
    assert allocation_strategy(EntityKind.SCHOOL) == AllocationStrategy.RANDOM_SUFFIX
    assert allocation_strategy(EntityKind.EXAM) == AllocationStrategy.DETERMINISTIC


def test_allocate_id_function(config):
    assert allocate_id(EntityKind.STUDENT, {"batch": "C"}, ["ABC25C041"], config) == "ABC25C042"
    with pytest.raises(ConfigurationError):
        allocate_id(EntityKind.STUDENT, {"batch": "C"}, [])


# Existing identifiers from a source


@pytest.mark.asyncio
async def test_allocate_from_source(service):
    source = StaticIdentifierSource(["ABC25A001", "ABC25A002", "ABC25B003", "XYZ25A050"])
    assert await service.allocate_from_source(EntityKind.STUDENT, {"batch": "A"}, source) == "ABC25A003"

    source.add("ABC25A003")
    assert await service.allocate_from_source(EntityKind.STUDENT, {"batch": "A"}, source) == "ABC25A004"


@pytest.mark.asyncio
async def test_allocate_from_source_duplicate(service):
    source = StaticIdentifierSource(["A5B"])
    with pytest.raises(DuplicateIdentifierError):
        await service.allocate_from_source(
            EntityKind.CLASS_CODE, {"batch": "A", "level": 5, "section": "B"}, source
        )
