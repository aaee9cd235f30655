"""Identifier component, scope and configuration schemas.

Component models describe the already-computed parts of one identifier and
are what the grammar formats from and parses back into. Scope models describe
what a caller knows when asking for the *next* identifier; the tenant parts
(school code, academic year) come from ``IdentifierScopeConfig`` instead.

Integer fields are ``StrictInt`` so ``"5"``, ``5.0`` and ``True`` are
rejected instead of coerced. Range and width checks live in the grammar so
they surface as ``FormatError``.
"""

import re
import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StrictInt, field_validator

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

SCHOOL_CODE_PATTERN = re.compile(r"[A-Z0-9]{3}")
ACADEMIC_YEAR_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})")


def _exam_type_code(value: Any) -> Any:
    return value.value if isinstance(value, ExamType) else value


# Any two uppercase letters; ExamType members are named shortcuts
ExamTypeCode = Annotated[str, BeforeValidator(_exam_type_code)]


class IdentifierModel(BaseModel):
    """Immutable base for every identifier schema"""
    model_config = ConfigDict(frozen=True)


# Tenant configuration

class IdentifierScopeConfig(IdentifierModel):
    """
    Per-tenant identifier configuration.

    Built once per request from the tenant's school record and passed
    explicitly into every formatting and allocation call.
    """
    school_code: str = Field(..., description="3 uppercase alphanumerics, e.g. ABC")
    academic_year: str = Field(..., description="YYYY-YY, e.g. 2024-25")

    @field_validator("school_code")
    @classmethod
    def check_school_code(cls, v: str) -> str:
        if not SCHOOL_CODE_PATTERN.fullmatch(v):
            raise ValueError(f"school_code must be 3 uppercase letters or digits, got {v!r}")
        return v

    @field_validator("academic_year")
    @classmethod
    def check_academic_year(cls, v: str) -> str:
        match = ACADEMIC_YEAR_PATTERN.fullmatch(v)
        if not match:
            raise ValueError(f"academic_year must look like 2024-25, got {v!r}")
        start, end = int(match.group(1)), int(match.group(2))
        if (start + 1) % 100 != end:
            raise ValueError(f"academic_year {v!r} must span consecutive years")
        return v

    @property
    def year_code(self) -> str:
        """Two-digit year segment: the last two characters, 2024-25 -> 25"""
        return self.academic_year[-2:]


# Components (one model per identifier kind)

class StudentIdComponents(IdentifierModel):
    school_code: str
    year: str
    batch: str
    sequence: StrictInt


class EmployeeIdComponents(IdentifierModel):
    role: EmployeeRole
    year: str
    suffix: str


class EmployeeIdInfo(IdentifierModel):
    """What can be recovered from an employee ID; the suffix is opaque"""
    role: EmployeeRole
    year: str


class ClassCodeComponents(IdentifierModel):
    batch: str
    level: StrictInt
    section: Optional[str] = None


class SubjectCodeComponents(IdentifierModel):
    category: SubjectCategory
    subject: str
    level: StrictInt


class BusNumberComponents(IdentifierModel):
    school_code: str
    route: StrictInt
    capacity: BusCapacity
    sequence: StrictInt


class RollNumberComponents(IdentifierModel):
    class_code: str
    year: str
    sequence: StrictInt


class BatchCodeComponents(IdentifierModel):
    year: str
    sequence: StrictInt


class ExamIdComponents(IdentifierModel):
    exam_type: ExamTypeCode
    subject_code: str
    class_code: str
    date: datetime.date


class AssignmentIdComponents(IdentifierModel):
    subject_code: str
    class_code: str
    date: datetime.date
    sequence: StrictInt


class FeeCollectionIdComponents(IdentifierModel):
    school_code: str
    year: str
    month: StrictInt
    sequence: StrictInt


class PayrollIdComponents(IdentifierModel):
    role: EmployeeRole
    year: str
    month: StrictInt
    sequence: StrictInt


class MaintenanceLogIdComponents(IdentifierModel):
    school_code: str
    facility: FacilityCode
    date: datetime.date
    sequence: StrictInt


class SafetyAlertIdComponents(IdentifierModel):
    school_code: str
    alert_type: AlertType
    date: datetime.date
    sequence: StrictInt


class SchoolIdComponents(IdentifierModel):
    registration_digits: str
    name_code: str
    year: str
    suffix: str


# Allocation scopes

class StudentScope(IdentifierModel):
    batch: str = Field(..., description="Batch letter, e.g. A")


class EmployeeScope(IdentifierModel):
    role: EmployeeRole


class BusScope(IdentifierModel):
    route: StrictInt
    capacity: BusCapacity


class RollNumberScope(IdentifierModel):
    class_code: str
    admission_year: str = Field(..., description="e.g. 2024 or 2024-25; last two digits are used")


class BatchScope(IdentifierModel):
    academic_year: Optional[str] = Field(None, description="Defaults to the tenant's academic year")


class AssignmentScope(IdentifierModel):
    subject_code: str
    class_code: str
    date: datetime.date


class FeeCollectionScope(IdentifierModel):
    year: str = Field(..., description="Calendar year, e.g. 2024")
    month: StrictInt


class PayrollScope(IdentifierModel):
    role: EmployeeRole
    year: str
    month: StrictInt


class MaintenanceScope(IdentifierModel):
    facility: FacilityCode
    date: datetime.date


class SafetyAlertScope(IdentifierModel):
    alert_type: AlertType
    date: datetime.date


class ClassCodeScope(IdentifierModel):
    batch: str
    level: StrictInt
    section: Optional[str] = None


class SubjectCodeScope(IdentifierModel):
    category: SubjectCategory
    subject_name: str
    level: StrictInt


class ExamScope(IdentifierModel):
    exam_type: ExamTypeCode
    subject_code: str
    class_code: str
    date: datetime.date


class SchoolScope(IdentifierModel):
    school_name: str
    registration_number: str
    year: Optional[StrictInt] = Field(None, description="Calendar year; defaults to the current year")


# API payloads

class FormatRequest(BaseModel):
    components: Dict[str, Any]


class AllocationRequest(BaseModel):
    scope: Dict[str, Any] = Field(default_factory=dict)
    existing: List[str] = Field(default_factory=list, description="Identifiers already issued in this scope")


class IdentifierResult(BaseModel):
    kind: EntityKind
    identifier: str


class ValidationResult(BaseModel):
    kind: EntityKind
    identifier: str
    valid: bool


class KindInfo(BaseModel):
    kind: EntityKind
    strategy: AllocationStrategy
    reversible: bool
