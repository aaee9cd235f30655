"""ID Service - allocates the next identifier within a scope.

Allocation is a pure function of (tenant config, kind, scope, existing IDs):

- Sequence kinds take one past the highest sequence already issued under the
  scope prefix. Gaps are never refilled.
- Random-suffix kinds (employee and school IDs) draw fresh suffixes until one
  is not already taken, up to a fixed number of attempts.
- Deterministic kinds (class codes, subject codes, exam IDs) are fully decided
  by the scope and are refused when already present.

The service only reads. Persisting the entity is what claims the identifier,
so two callers working from the same snapshot can compute the same value; the
storage layer's unique constraint rejects the second write and the caller
retries with a fresh snapshot.
"""

import datetime
import logging
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Type, Union

from pydantic import BaseModel, ValidationError

from schoolid.config import settings
from schoolid.core.exceptions import (
    AllocationExhaustedError,
    CapacityExceededError,
    ConfigurationError,
    DuplicateIdentifierError,
    FormatError,
    ParseError,
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
from schoolid.schemas.identifiers import (
    AssignmentIdComponents,
    AssignmentScope,
    BatchCodeComponents,
    BatchScope,
    BusNumberComponents,
    BusScope,
    ClassCodeComponents,
    ClassCodeScope,
    EmployeeIdComponents,
    EmployeeScope,
    ExamIdComponents,
    ExamScope,
    FeeCollectionIdComponents,
    FeeCollectionScope,
    IdentifierScopeConfig,
    MaintenanceLogIdComponents,
    MaintenanceScope,
    PayrollIdComponents,
    PayrollScope,
    RollNumberComponents,
    RollNumberScope,
    SafetyAlertIdComponents,
    SafetyAlertScope,
    SchoolScope,
    StudentIdComponents,
    StudentScope,
    SubjectCodeScope,
)
from schoolid.services import id_grammar
from schoolid.services.identifier_source import IdentifierSource

logger = logging.getLogger(__name__)


def initialize(school_code: str, academic_year: str) -> IdentifierScopeConfig:
    """
    Build the tenant config threaded through every generation call.

    Raises:
        ConfigurationError: if either value is missing or malformed
    """
    if not school_code or not academic_year:
        raise ConfigurationError("school_code and academic_year are both required")
    try:
        return IdentifierScopeConfig(school_code=school_code, academic_year=academic_year)
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors(include_url=False))
        raise ConfigurationError(f"Invalid identifier config: {messages}")


def _require(config: Optional[IdentifierScopeConfig]) -> IdentifierScopeConfig:
    if config is None:
        raise ConfigurationError("Identifier config is not initialized for this tenant")
    if not isinstance(config, IdentifierScopeConfig):
        raise ConfigurationError(f"Expected IdentifierScopeConfig, got {type(config).__name__}")
    return config


# ---------------------------------------------------------------------------
# Per-kind rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SequenceRule:
    """How a sequence kind maps (config, scope, n) onto components."""
    scope_model: Type[BaseModel]
    build: Callable[[Optional[IdentifierScopeConfig], Any, int], BaseModel]
    width: int = id_grammar.SEQUENCE_WIDTH
    capacity: int = id_grammar.MAX_SEQUENCE


@dataclass(frozen=True)
class RandomRule:
    scope_model: Type[BaseModel]
    build: Callable[[Optional[IdentifierScopeConfig], Any, random.Random], BaseModel]


@dataclass(frozen=True)
class DeterministicRule:
    scope_model: Type[BaseModel]
    build: Callable[[Any], BaseModel]


def _batch_year(config: Optional[IdentifierScopeConfig], scope: BatchScope) -> str:
    if scope.academic_year is not None:
        return id_grammar.two_digit_year(scope.academic_year)
    return _require(config).year_code


SEQUENCE_RULES: Dict[EntityKind, SequenceRule] = {
    EntityKind.STUDENT: SequenceRule(
        StudentScope,
        lambda config, scope, n: StudentIdComponents(
            school_code=_require(config).school_code,
            year=_require(config).year_code,
            batch=scope.batch,
            sequence=n,
        ),
    ),
    EntityKind.BUS_NUMBER: SequenceRule(
        BusScope,
        lambda config, scope, n: BusNumberComponents(
            school_code=_require(config).school_code,
            route=scope.route,
            capacity=scope.capacity,
            sequence=n,
        ),
    ),
    EntityKind.ROLL_NUMBER: SequenceRule(
        RollNumberScope,
        lambda config, scope, n: RollNumberComponents(
            class_code=scope.class_code,
            year=id_grammar.two_digit_year(scope.admission_year),
            sequence=n,
        ),
    ),
    EntityKind.BATCH_CODE: SequenceRule(
        BatchScope,
        lambda config, scope, n: BatchCodeComponents(year=_batch_year(config, scope), sequence=n),
        width=1,
        capacity=id_grammar.MAX_BATCH_SEQUENCE,
    ),
    EntityKind.ASSIGNMENT: SequenceRule(
        AssignmentScope,
        lambda config, scope, n: AssignmentIdComponents(
            subject_code=scope.subject_code,
            class_code=scope.class_code,
            date=scope.date,
            sequence=n,
        ),
    ),
    EntityKind.FEE_COLLECTION: SequenceRule(
        FeeCollectionScope,
        lambda config, scope, n: FeeCollectionIdComponents(
            school_code=_require(config).school_code,
            year=id_grammar.two_digit_year(scope.year),
            month=scope.month,
            sequence=n,
        ),
    ),
    EntityKind.PAYROLL: SequenceRule(
        PayrollScope,
        lambda config, scope, n: PayrollIdComponents(
            role=scope.role,
            year=id_grammar.two_digit_year(scope.year),
            month=scope.month,
            sequence=n,
        ),
    ),
    EntityKind.MAINTENANCE_LOG: SequenceRule(
        MaintenanceScope,
        lambda config, scope, n: MaintenanceLogIdComponents(
            school_code=_require(config).school_code,
            facility=scope.facility,
            date=scope.date,
            sequence=n,
        ),
    ),
    EntityKind.SAFETY_ALERT: SequenceRule(
        SafetyAlertScope,
        lambda config, scope, n: SafetyAlertIdComponents(
            school_code=_require(config).school_code,
            alert_type=scope.alert_type,
            date=scope.date,
            sequence=n,
        ),
    ),
}

RANDOM_RULES: Dict[EntityKind, RandomRule] = {
    EntityKind.EMPLOYEE: RandomRule(
        EmployeeScope,
        lambda config, scope, rng: EmployeeIdComponents(
            role=scope.role,
            year=_require(config).year_code,
            suffix=id_grammar.generate_strong_suffix(rng),
        ),
    ),
    EntityKind.SCHOOL: RandomRule(
        SchoolScope,
        lambda config, scope, rng: id_grammar.school_id_components(
            scope.school_name,
            scope.registration_number,
            scope.year if scope.year is not None else datetime.date.today().year,
            id_grammar.generate_school_suffix(rng),
        ),
    ),
}

DETERMINISTIC_RULES: Dict[EntityKind, DeterministicRule] = {
    EntityKind.CLASS_CODE: DeterministicRule(
        ClassCodeScope,
        lambda scope: ClassCodeComponents(batch=scope.batch, level=scope.level, section=scope.section),
    ),
    EntityKind.SUBJECT_CODE: DeterministicRule(
        SubjectCodeScope,
        lambda scope: id_grammar.subject_code_components(scope.category, scope.subject_name, scope.level),
    ),
    EntityKind.EXAM: DeterministicRule(
        ExamScope,
        lambda scope: ExamIdComponents(
            exam_type=scope.exam_type,
            subject_code=scope.subject_code,
            class_code=scope.class_code,
            date=scope.date,
        ),
    ),
}


def allocation_strategy(kind: Union[EntityKind, str]) -> AllocationStrategy:
    kind = id_grammar.entity_kind(kind)
    if kind in SEQUENCE_RULES:
        return AllocationStrategy.SEQUENCE
    if kind in RANDOM_RULES:
        return AllocationStrategy.RANDOM_SUFFIX
    return AllocationStrategy.DETERMINISTIC


def _scope_model(kind: EntityKind) -> Type[BaseModel]:
    for rules in (SEQUENCE_RULES, RANDOM_RULES, DETERMINISTIC_RULES):
        if kind in rules:
            return rules[kind].scope_model
    raise FormatError(f"No allocation rule for {kind.value}")


def build_scope(kind: Union[EntityKind, str], scope: Any) -> BaseModel:
    """Accept a scope model or a plain mapping; bad shapes become FormatError."""
    kind = id_grammar.entity_kind(kind)
    model = _scope_model(kind)
    if isinstance(scope, model):
        return scope
    if scope is None:
        scope = {}
    if isinstance(scope, BaseModel) or not isinstance(scope, Mapping):
        raise FormatError(f"{kind.value} scope must be {model.__name__}, got {type(scope).__name__}")
    try:
        return model.model_validate(dict(scope))
    except ValidationError as e:
        raise FormatError(f"Invalid {kind.value} scope: {e.errors(include_url=False)}")


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class IdentifierService:
    """
    Allocates identifiers for one tenant.

    Create one per request (or per tenant context); the config is never shared
    through module state. ``rng`` and ``max_attempts`` are injectable so
    random-suffix collisions can be forced in tests.
    """

    def __init__(
        self,
        config: Optional[IdentifierScopeConfig] = None,
        rng: Optional[random.Random] = None,
        max_attempts: Optional[int] = None,
    ):
        if config is not None:
            _require(config)
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.max_attempts = max_attempts if max_attempts is not None else settings.ID_ALLOCATION_MAX_ATTEMPTS
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def scope_prefix(self, kind: Union[EntityKind, str], scope: Any) -> str:
        """
        Leading substring shared by every identifier in the scope.

        For random-suffix kinds this is everything before the suffix; for
        deterministic kinds it is the whole identifier.
        """
        kind = id_grammar.entity_kind(kind)
        scope = build_scope(kind, scope)
        if kind in SEQUENCE_RULES:
            rule = SEQUENCE_RULES[kind]
            return id_grammar.format_id(kind, rule.build(self.config, scope, 1))[:-rule.width]
        if kind == EntityKind.EMPLOYEE:
            return f"{EmployeeRole(scope.role).code}{_require(self.config).year_code}"
        if kind == EntityKind.SCHOOL:
            return id_grammar.SCHOOL_ID_PREFIX
        return id_grammar.format_id(kind, DETERMINISTIC_RULES[kind].build(scope))

    def allocate(self, kind: Union[EntityKind, str], scope: Any, existing: Iterable[Optional[str]] = ()) -> str:
        """
        Return the next free identifier of ``kind`` within ``scope``.

        Args:
            kind: Entity kind to allocate for
            scope: Scope model (or mapping) for the kind, e.g. StudentScope
            existing: Identifiers already issued in this scope

        Raises:
            ConfigurationError: tenant config needed but missing
            FormatError: scope components are malformed
            CapacityExceededError: sequence scope is full
            AllocationExhaustedError: no free random suffix found
            DuplicateIdentifierError: deterministic identifier already taken
        """
        kind = id_grammar.entity_kind(kind)
        scope = build_scope(kind, scope)
        existing = [value for value in existing if isinstance(value, str) and value]

        if kind in SEQUENCE_RULES:
            identifier = self._allocate_sequence(kind, scope, existing)
        elif kind in RANDOM_RULES:
            identifier = self._allocate_random(kind, scope, existing)
        else:
            identifier = self._allocate_deterministic(kind, scope, existing)

        logger.debug(
            "Allocated identifier",
            extra={"kind": kind.value, "identifier": identifier, "scanned": len(existing)},
        )
        return identifier

    async def allocate_from_source(
        self, kind: Union[EntityKind, str], scope: Any, source: IdentifierSource
    ) -> str:
        """Fetch the scope's existing identifiers from ``source``, then allocate."""
        kind = id_grammar.entity_kind(kind)
        source_kind = getattr(source, "entity_kind", None)
        if source_kind is not None and source_kind != kind:
            raise ConfigurationError(f"Source holds {source_kind.value} identifiers, not {kind.value}")
        prefix = self.scope_prefix(kind, scope)
        existing = await source.list_identifiers(prefix)
        return self.allocate(kind, scope, existing)

    def _allocate_sequence(self, kind: EntityKind, scope: BaseModel, existing: list) -> str:
        rule = SEQUENCE_RULES[kind]
        prefix = self.scope_prefix(kind, scope)
        next_sequence = self.next_sequence(kind, prefix, existing)
        if next_sequence > rule.capacity:
            raise CapacityExceededError(
                f"Scope {prefix} is full: {kind.value} sequence cannot exceed {rule.capacity}",
                prefix=prefix,
                capacity=rule.capacity,
            )
        return id_grammar.format_id(kind, rule.build(self.config, scope, next_sequence))

    @staticmethod
    def next_sequence(kind: Union[EntityKind, str], prefix: str, existing: Iterable[str]) -> int:
        """
        One past the highest sequence among identifiers under ``prefix``.

        Identifiers outside the prefix are ignored; malformed ones are skipped.
        """
        kind = id_grammar.entity_kind(kind)
        highest = 0
        for identifier in existing:
            if not identifier.startswith(prefix):
                continue
            try:
                parsed = id_grammar.parse_id(kind, identifier)
            except ParseError:
                logger.warning(
                    "Skipping malformed identifier",
                    extra={"kind": kind.value, "identifier": identifier, "prefix": prefix},
                )
                continue
            highest = max(highest, parsed.sequence)
        return highest + 1

    def _allocate_random(self, kind: EntityKind, scope: BaseModel, existing: list) -> str:
        rule = RANDOM_RULES[kind]
        taken = set(existing)
        for attempt in range(1, self.max_attempts + 1):
            candidate = id_grammar.format_id(kind, rule.build(self.config, scope, self.rng))
            if candidate not in taken:
                return candidate
            logger.warning(
                "Identifier collision, drawing a new suffix",
                extra={"kind": kind.value, "attempt": attempt},
            )
        raise AllocationExhaustedError(
            f"Unable to generate a unique {kind.value} ID after {self.max_attempts} attempts",
            attempts=self.max_attempts,
        )

    @staticmethod
    def _allocate_deterministic(kind: EntityKind, scope: BaseModel, existing: list) -> str:
        identifier = id_grammar.format_id(kind, DETERMINISTIC_RULES[kind].build(scope))
        if identifier in existing:
            raise DuplicateIdentifierError(
                f"{kind.value.replace('_', ' ').capitalize()} {identifier} already exists",
                identifier=identifier,
            )
        return identifier

    # Convenience wrappers, one per kind

    def next_student_id(self, batch: str, existing: Iterable[str] = ()) -> str:
        return self.allocate(EntityKind.STUDENT, StudentScope(batch=batch), existing)

    def next_employee_id(self, role: EmployeeRole, existing: Iterable[str] = ()) -> str:
        return self.allocate(EntityKind.EMPLOYEE, EmployeeScope(role=role), existing)

    def next_bus_number(self, route: int, capacity: BusCapacity, existing: Iterable[str] = ()) -> str:
        return self.allocate(EntityKind.BUS_NUMBER, BusScope(route=route, capacity=capacity), existing)

    def next_roll_number(self, class_code: str, admission_year: str, existing: Iterable[str] = ()) -> str:
        scope = RollNumberScope(class_code=class_code, admission_year=admission_year)
        return self.allocate(EntityKind.ROLL_NUMBER, scope, existing)

    def next_batch_code(self, existing: Iterable[str] = (), academic_year: Optional[str] = None) -> str:
        return self.allocate(EntityKind.BATCH_CODE, BatchScope(academic_year=academic_year), existing)

    def next_assignment_id(
        self, subject_code: str, class_code: str, on: datetime.date, existing: Iterable[str] = ()
    ) -> str:
        scope = AssignmentScope(subject_code=subject_code, class_code=class_code, date=on)
        return self.allocate(EntityKind.ASSIGNMENT, scope, existing)

    def next_fee_collection_id(self, year: str, month: int, existing: Iterable[str] = ()) -> str:
        return self.allocate(EntityKind.FEE_COLLECTION, FeeCollectionScope(year=year, month=month), existing)

    def next_payroll_id(self, role: EmployeeRole, year: str, month: int, existing: Iterable[str] = ()) -> str:
        scope = PayrollScope(role=role, year=year, month=month)
        return self.allocate(EntityKind.PAYROLL, scope, existing)

    def next_maintenance_log_id(
        self, facility: FacilityCode, on: datetime.date, existing: Iterable[str] = ()
    ) -> str:
        scope = MaintenanceScope(facility=facility, date=on)
        return self.allocate(EntityKind.MAINTENANCE_LOG, scope, existing)

    def next_safety_alert_id(self, alert_type: AlertType, on: datetime.date, existing: Iterable[str] = ()) -> str:
        scope = SafetyAlertScope(alert_type=alert_type, date=on)
        return self.allocate(EntityKind.SAFETY_ALERT, scope, existing)

    def new_class_code(
        self, batch: str, level: int, section: Optional[str] = None, existing: Iterable[str] = ()
    ) -> str:
        scope = ClassCodeScope(batch=batch, level=level, section=section)
        return self.allocate(EntityKind.CLASS_CODE, scope, existing)

    def new_subject_code(
        self, category: SubjectCategory, subject_name: str, level: int, existing: Iterable[str] = ()
    ) -> str:
        scope = SubjectCodeScope(category=category, subject_name=subject_name, level=level)
        return self.allocate(EntityKind.SUBJECT_CODE, scope, existing)

    def new_exam_id(
        self,
        exam_type: Union[ExamType, str],
        subject_code: str,
        class_code: str,
        on: datetime.date,
        existing: Iterable[str] = (),
    ) -> str:
        scope = ExamScope(exam_type=exam_type, subject_code=subject_code, class_code=class_code, date=on)
        return self.allocate(EntityKind.EXAM, scope, existing)

    def new_school_id(
        self,
        school_name: str,
        registration_number: str,
        existing: Iterable[str] = (),
        year: Optional[int] = None,
    ) -> str:
        scope = SchoolScope(school_name=school_name, registration_number=registration_number, year=year)
        return self.allocate(EntityKind.SCHOOL, scope, existing)


def allocate_id(
    kind: Union[EntityKind, str],
    scope: Any,
    existing: Iterable[Optional[str]],
    config: Optional[IdentifierScopeConfig] = None,
    *,
    rng: Optional[random.Random] = None,
    max_attempts: Optional[int] = None,
) -> str:
    """Functional form of ``IdentifierService(config, ...).allocate(kind, scope, existing)``."""
    return IdentifierService(config, rng=rng, max_attempts=max_attempts).allocate(kind, scope, existing)
