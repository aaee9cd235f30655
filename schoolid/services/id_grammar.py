"""ID Grammar - pure formatting, parsing and validation of structured identifiers.

Every identifier kind has three functions:

- ``format_<kind>(components) -> str`` renders a component record, raising
  ``FormatError`` when a component is out of shape (negative, not an int,
  too wide for its fixed field, wrong letters).
- ``parse_<kind>(value) -> components`` slices a string back into its record,
  raising ``ParseError`` when the layout does not match.
- ``is_valid_<kind>(value) -> bool`` is true exactly when the parser accepts.

``format_id`` / ``parse_id`` / ``validate_id`` dispatch on ``EntityKind``.
Nothing here performs I/O or reads tenant state.
"""

import datetime
import random
import re
import string
from typing import Any, Callable, Dict, Mapping, Type, Union

from pydantic import BaseModel, ValidationError

from schoolid.core.exceptions import FormatError, IdentifierError, ParseError
from schoolid.models.enums import (
    AlertType,
    BusCapacity,
    EmployeeRole,
    EntityKind,
    FacilityCode,
    SubjectCategory,
)
from schoolid.schemas.identifiers import (
    AssignmentIdComponents,
    BatchCodeComponents,
    BusNumberComponents,
    ClassCodeComponents,
    EmployeeIdComponents,
    EmployeeIdInfo,
    ExamIdComponents,
    FeeCollectionIdComponents,
    MaintenanceLogIdComponents,
    PayrollIdComponents,
    RollNumberComponents,
    SafetyAlertIdComponents,
    SchoolIdComponents,
    StudentIdComponents,
    SubjectCodeComponents,
)

SEQUENCE_WIDTH = 3
MAX_SEQUENCE = 999
MAX_BATCH_SEQUENCE = 26
NURSERY_CODE = "NUR"
SCHOOL_ID_PREFIX = "SCH"
EMPLOYEE_SUFFIX_LENGTH = 7
SCHOOL_SUFFIX_LENGTH = 3

# Strong suffix alphabet: no 0/1/I/O anywhere
CONSONANTS = "BCDFGHJKLMNPQRSTVWXYZ"
VOWELS = "AEU"
SUFFIX_DIGITS = "23456789"
VOWEL_PROBABILITY = 0.3
SCHOOL_SUFFIX_CHARS = string.ascii_uppercase + string.digits

_CLASS_CODE = r"[A-Z](?:NUR|[1-9][0-9]?[A-Z])"
_SUBJECT_CODE = rf"[{''.join(c.value for c in SubjectCategory)}][A-Z]{{3}}[0-9]{{2}}"
_ROLE_ALTERNATION = "|".join(role.code for role in EmployeeRole)

STUDENT_ID_RE = re.compile(r"([A-Z0-9]{3})([0-9]{2})([A-Z])([0-9]{3})")
EMPLOYEE_ID_RE = re.compile(rf"({_ROLE_ALTERNATION})([0-9]{{2}})([A-Z0-9]{{{EMPLOYEE_SUFFIX_LENGTH}}})")
CLASS_CODE_RE = re.compile(r"([A-Z])(?:(NUR)|([1-9][0-9]?)([A-Z]))")
SUBJECT_CODE_RE = re.compile(r"([A-Z])([A-Z]{3})([0-9]{2})")
BUS_NUMBER_RE = re.compile(r"([A-Z0-9]{3})R([0-9]{2})([A-Z])([0-9]{3})")
ROLL_NUMBER_RE = re.compile(rf"({_CLASS_CODE})([0-9]{{2}})([0-9]{{3}})")
BATCH_CODE_RE = re.compile(r"([0-9]{2})([A-Z])")
EXAM_ID_RE = re.compile(rf"([A-Z]{{2}})({_SUBJECT_CODE})({_CLASS_CODE})([0-9]{{8}})")
ASSIGNMENT_ID_RE = re.compile(rf"({_SUBJECT_CODE})({_CLASS_CODE})([0-9]{{8}})([0-9]{{3}})")
FEE_COLLECTION_ID_RE = re.compile(r"([A-Z0-9]{3})([0-9]{2})([0-9]{2})([0-9]{3})")
PAYROLL_ID_RE = re.compile(rf"({_ROLE_ALTERNATION})([0-9]{{2}})([0-9]{{2}})([0-9]{{3}})")
MAINTENANCE_LOG_ID_RE = re.compile(r"([A-Z0-9]{3})([A-Z]{3})([0-9]{8})([0-9]{3})")
SAFETY_ALERT_ID_RE = re.compile(r"([A-Z0-9]{3})([A-Z]{2})([0-9]{8})([0-9]{3})")
SCHOOL_ID_RE = re.compile(r"SCH([0-9]{2})([A-Z]{2})([0-9]{2})([A-Z0-9]{3})")
YEAR_RE = re.compile(r"(?:([0-9]{4})(?:-([0-9]{2}))?|[0-9]{2})")


# ---------------------------------------------------------------------------
# Component checks (formatting side)
# ---------------------------------------------------------------------------

def _integer(name: str, value: Any, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise FormatError(f"{name} must be an integer, got {value!r}")
    if value < low or value > high:
        raise FormatError(f"{name} must be between {low} and {high}, got {value}")
    return value


def _padded(name: str, value: Any, width: int, low: int = 0) -> str:
    high = 10 ** width - 1
    return str(_integer(name, value, low, high)).zfill(width)


def _sequence(value: Any) -> str:
    return _padded("sequence", value, SEQUENCE_WIDTH, low=1)


def _match(name: str, value: Any, pattern: str, expected: str) -> str:
    if not isinstance(value, str) or not re.fullmatch(pattern, value):
        raise FormatError(f"{name} must be {expected}, got {value!r}")
    return value


def _letter(name: str, value: Any) -> str:
    return _match(name, value, r"[A-Z]", "a single uppercase letter")


def _year(value: Any) -> str:
    return _match("year", value, r"[0-9]{2}", "two digits")


def _school_code(value: Any) -> str:
    return _match("school_code", value, r"[A-Z0-9]{3}", "3 uppercase letters or digits")


def _class_code(value: Any) -> str:
    return _match("class_code", value, _CLASS_CODE, "a class code such as A5A or ANUR")


def _subject_code(value: Any) -> str:
    return _match("subject_code", value, _SUBJECT_CODE, "a subject code such as CMAT01")


def _member(name: str, enum_cls, value: Any):
    try:
        return enum_cls(value)
    except ValueError:
        raise FormatError(f"{name} must be one of {[m.value for m in enum_cls]}, got {value!r}")


def _date(value: Any) -> str:
    if isinstance(value, datetime.datetime) or not isinstance(value, datetime.date):
        raise FormatError(f"date must be a date, got {value!r}")
    return f"{value.year:04d}{value.month:02d}{value.day:02d}"


def two_digit_year(value: Any) -> str:
    """
    Two-digit year segment of a YYYY, YYYY-YY or YY string.

    "2024" -> "24", "2024-25" -> "25", "24" -> "24". Anything else is a
    FormatError; an academic year must span consecutive years.
    """
    match = YEAR_RE.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise FormatError(f"year must look like 2024, 2024-25 or 24, got {value!r}")
    start, end = match.group(1), match.group(2)
    if start and end and (int(start) + 1) % 100 != int(end):
        raise FormatError(f"academic year {value!r} must span consecutive years")
    return value[-2:]


def batch_letter(sequence: int) -> str:
    """1 -> A, 2 -> B ... 26 -> Z. Single-letter batches cap at 26."""
    return chr(ord("A") + _integer("batch sequence", sequence, 1, MAX_BATCH_SEQUENCE) - 1)


def is_strong_suffix(value: Any) -> bool:
    """Check the position rules of a generated employee suffix."""
    if not isinstance(value, str) or len(value) != EMPLOYEE_SUFFIX_LENGTH:
        return False
    for position, char in enumerate(value):
        if position % 3 == 0:
            allowed = CONSONANTS
        elif position % 3 == 1:
            allowed = SUFFIX_DIGITS
        else:
            allowed = CONSONANTS + VOWELS
        if char not in allowed:
            return False
    return True


def generate_strong_suffix(rng: random.Random, length: int = EMPLOYEE_SUFFIX_LENGTH) -> str:
    """
    Draw a readable random suffix.

    Position i: consonant when i % 3 == 0, digit (2-9) when i % 3 == 1,
    otherwise a vowel 30% of the time and a consonant the rest.
    """
    chars = []
    for position in range(length):
        if position % 3 == 0:
            pool = CONSONANTS
        elif position % 3 == 1:
            pool = SUFFIX_DIGITS
        else:
            pool = VOWELS if rng.random() < VOWEL_PROBABILITY else CONSONANTS
        chars.append(rng.choice(pool))
    return "".join(chars)


def generate_school_suffix(rng: random.Random) -> str:
    return "".join(rng.choice(SCHOOL_SUFFIX_CHARS) for _ in range(SCHOOL_SUFFIX_LENGTH))


# ---------------------------------------------------------------------------
# Component builders
# ---------------------------------------------------------------------------

def subject_code_components(category: Any, subject_name: str, level: int) -> SubjectCodeComponents:
    """Derive subject code components from a subject name ("Mathematics" -> MAT)."""
    letters = [ch for ch in str(subject_name).upper() if "A" <= ch <= "Z"]
    if len(letters) < 3:
        raise FormatError(f"subject name needs at least 3 letters, got {subject_name!r}")
    return SubjectCodeComponents(
        category=_member("category", SubjectCategory, category),
        subject="".join(letters[:3]),
        level=level,
    )


def school_id_components(
    school_name: str, registration_number: str, year: int, suffix: str
) -> SchoolIdComponents:
    """
    Derive school ID components.

    Registration digits are the last two digits of the registration number
    (zero-padded); the name code is the first two consonants of the school
    name (padded with X).
    """
    digits = "".join(ch for ch in str(registration_number) if ch.isascii() and ch.isdigit())
    consonants = [
        ch for ch in str(school_name).upper()
        if "A" <= ch <= "Z" and ch not in "AEIOU"
    ]
    return SchoolIdComponents(
        registration_digits=digits[-2:].rjust(2, "0"),
        name_code="".join(consonants[:2]).ljust(2, "X"),
        year=str(_integer("year", year, 0, 9999)).zfill(4)[-2:],
        suffix=suffix,
    )


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

def format_student_id(c: StudentIdComponents) -> str:
    """ABC + 25 + A + 001 -> ABC25A001"""
    return f"{_school_code(c.school_code)}{_year(c.year)}{_letter('batch', c.batch)}{_sequence(c.sequence)}"


def format_employee_id(c: EmployeeIdComponents) -> str:
    """TCH + 25 + 7-char strong suffix"""
    role = _member("role", EmployeeRole, c.role)
    if not is_strong_suffix(c.suffix):
        raise FormatError(f"suffix is not a valid strong suffix: {c.suffix!r}")
    return f"{role.code}{_year(c.year)}{c.suffix}"


def format_class_code(c: ClassCodeComponents) -> str:
    """A + 5 + B -> A5B; level 0 is nursery -> ANUR, section ignored"""
    batch = _letter("batch", c.batch)
    level = _integer("level", c.level, 0, 99)
    if level == 0:
        return f"{batch}{NURSERY_CODE}"
    return f"{batch}{level}{_letter('section', c.section)}"


def format_subject_code(c: SubjectCodeComponents) -> str:
    """C + MAT + 01 -> CMAT01"""
    category = _member("category", SubjectCategory, c.category)
    subject = _match("subject", c.subject, r"[A-Z]{3}", "3 uppercase letters")
    return f"{category.value}{subject}{_padded('level', c.level, 2)}"


def format_bus_number(c: BusNumberComponents) -> str:
    """ABC + R01 + L + 001 -> ABCR01L001"""
    capacity = _member("capacity", BusCapacity, c.capacity)
    return (
        f"{_school_code(c.school_code)}R{_padded('route', c.route, 2)}"
        f"{capacity.value}{_sequence(c.sequence)}"
    )


def format_roll_number(c: RollNumberComponents) -> str:
    """A5A + 24 + 001 -> A5A24001"""
    return f"{_class_code(c.class_code)}{_year(c.year)}{_sequence(c.sequence)}"


def format_batch_code(c: BatchCodeComponents) -> str:
    """25 + 1 -> 25A"""
    return f"{_year(c.year)}{batch_letter(c.sequence)}"


def format_exam_id(c: ExamIdComponents) -> str:
    """MT + CMAT01 + A5A + 20240315"""
    exam_type = _match("exam_type", c.exam_type, r"[A-Z]{2}", "2 uppercase letters")
    return f"{exam_type}{_subject_code(c.subject_code)}{_class_code(c.class_code)}{_date(c.date)}"


def format_assignment_id(c: AssignmentIdComponents) -> str:
    return (
        f"{_subject_code(c.subject_code)}{_class_code(c.class_code)}"
        f"{_date(c.date)}{_sequence(c.sequence)}"
    )


def format_fee_collection_id(c: FeeCollectionIdComponents) -> str:
    """ABC + 24 + 03 + 001 -> ABC2403001"""
    month = str(_integer("month", c.month, 1, 12)).zfill(2)
    return f"{_school_code(c.school_code)}{_year(c.year)}{month}{_sequence(c.sequence)}"


def format_payroll_id(c: PayrollIdComponents) -> str:
    """TCH + 24 + 03 + 001 -> TCH2403001"""
    role = _member("role", EmployeeRole, c.role)
    month = str(_integer("month", c.month, 1, 12)).zfill(2)
    return f"{role.code}{_year(c.year)}{month}{_sequence(c.sequence)}"


def format_maintenance_log_id(c: MaintenanceLogIdComponents) -> str:
    """ABC + BUS + 20240315 + 001"""
    facility = _member("facility", FacilityCode, c.facility)
    return f"{_school_code(c.school_code)}{facility.value}{_date(c.date)}{_sequence(c.sequence)}"


def format_safety_alert_id(c: SafetyAlertIdComponents) -> str:
    """ABC + FD + 20240315 + 001"""
    alert_type = _member("alert_type", AlertType, c.alert_type)
    return f"{_school_code(c.school_code)}{alert_type.value}{_date(c.date)}{_sequence(c.sequence)}"


def format_school_id(c: SchoolIdComponents) -> str:
    """SCH + 89 + BC + 24 + X7A"""
    return (
        f"{SCHOOL_ID_PREFIX}"
        f"{_match('registration_digits', c.registration_digits, r'[0-9]{2}', 'two digits')}"
        f"{_match('name_code', c.name_code, r'[A-Z]{2}', '2 uppercase letters')}"
        f"{_year(c.year)}"
        f"{_match('suffix', c.suffix, r'[A-Z0-9]{3}', '3 uppercase letters or digits')}"
    )


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

def _fullmatch(kind: str, pattern: "re.Pattern[str]", value: Any) -> "re.Match[str]":
    if not isinstance(value, str):
        raise ParseError(f"{kind} must be a string, got {value!r}")
    match = pattern.fullmatch(value)
    if match is None:
        raise ParseError(f"{value!r} is not a valid {kind}")
    return match


def _parsed_sequence(kind: str, text: str) -> int:
    sequence = int(text)
    if sequence < 1:
        raise ParseError(f"{kind} sequence must be at least 001, got {text!r}")
    return sequence


def _parsed_month(kind: str, text: str) -> int:
    month = int(text)
    if not 1 <= month <= 12:
        raise ParseError(f"{kind} month must be 01-12, got {text!r}")
    return month


def _parsed_date(kind: str, text: str) -> datetime.date:
    try:
        return datetime.datetime.strptime(text, "%Y%m%d").date()
    except ValueError:
        raise ParseError(f"{kind} has an invalid date {text!r}")


def _parsed_member(kind: str, enum_cls, text: str):
    try:
        return enum_cls(text)
    except ValueError:
        raise ParseError(f"{kind} has an unknown {enum_cls.__name__} code {text!r}")


def parse_student_id(value: str) -> StudentIdComponents:
    school_code, year, batch, sequence = _fullmatch("student ID", STUDENT_ID_RE, value).groups()
    return StudentIdComponents(
        school_code=school_code,
        year=year,
        batch=batch,
        sequence=_parsed_sequence("student ID", sequence),
    )


def parse_employee_id(value: str) -> EmployeeIdInfo:
    """Recover role and year; the random suffix carries no information."""
    role_code, year, suffix = _fullmatch("employee ID", EMPLOYEE_ID_RE, value).groups()
    if not is_strong_suffix(suffix):
        raise ParseError(f"{value!r} does not end in a valid strong suffix")
    return EmployeeIdInfo(role=EmployeeRole.from_code(role_code), year=year)


def parse_class_code(value: str) -> ClassCodeComponents:
    batch, nursery, level, section = _fullmatch("class code", CLASS_CODE_RE, value).groups()
    if nursery:
        return ClassCodeComponents(batch=batch, level=0, section=None)
    return ClassCodeComponents(batch=batch, level=int(level), section=section)


def parse_subject_code(value: str) -> SubjectCodeComponents:
    category, subject, level = _fullmatch("subject code", SUBJECT_CODE_RE, value).groups()
    return SubjectCodeComponents(
        category=_parsed_member("subject code", SubjectCategory, category),
        subject=subject,
        level=int(level),
    )


def parse_bus_number(value: str) -> BusNumberComponents:
    school_code, route, capacity, sequence = _fullmatch("bus number", BUS_NUMBER_RE, value).groups()
    return BusNumberComponents(
        school_code=school_code,
        route=int(route),
        capacity=_parsed_member("bus number", BusCapacity, capacity),
        sequence=_parsed_sequence("bus number", sequence),
    )


def parse_roll_number(value: str) -> RollNumberComponents:
    class_code, year, sequence = _fullmatch("roll number", ROLL_NUMBER_RE, value).groups()
    return RollNumberComponents(
        class_code=class_code,
        year=year,
        sequence=_parsed_sequence("roll number", sequence),
    )


def parse_batch_code(value: str) -> BatchCodeComponents:
    year, letter = _fullmatch("batch code", BATCH_CODE_RE, value).groups()
    return BatchCodeComponents(year=year, sequence=ord(letter) - ord("A") + 1)


def parse_exam_id(value: str) -> ExamIdComponents:
    exam_type, subject_code, class_code, date = _fullmatch("exam ID", EXAM_ID_RE, value).groups()
    return ExamIdComponents(
        exam_type=exam_type,
        subject_code=subject_code,
        class_code=class_code,
        date=_parsed_date("exam ID", date),
    )


def parse_assignment_id(value: str) -> AssignmentIdComponents:
    subject_code, class_code, date, sequence = _fullmatch(
        "assignment ID", ASSIGNMENT_ID_RE, value
    ).groups()
    return AssignmentIdComponents(
        subject_code=subject_code,
        class_code=class_code,
        date=_parsed_date("assignment ID", date),
        sequence=_parsed_sequence("assignment ID", sequence),
    )


def parse_fee_collection_id(value: str) -> FeeCollectionIdComponents:
    school_code, year, month, sequence = _fullmatch(
        "fee collection ID", FEE_COLLECTION_ID_RE, value
    ).groups()
    return FeeCollectionIdComponents(
        school_code=school_code,
        year=year,
        month=_parsed_month("fee collection ID", month),
        sequence=_parsed_sequence("fee collection ID", sequence),
    )


def parse_payroll_id(value: str) -> PayrollIdComponents:
    role_code, year, month, sequence = _fullmatch("payroll ID", PAYROLL_ID_RE, value).groups()
    return PayrollIdComponents(
        role=EmployeeRole.from_code(role_code),
        year=year,
        month=_parsed_month("payroll ID", month),
        sequence=_parsed_sequence("payroll ID", sequence),
    )


def parse_maintenance_log_id(value: str) -> MaintenanceLogIdComponents:
    school_code, facility, date, sequence = _fullmatch(
        "maintenance log ID", MAINTENANCE_LOG_ID_RE, value
    ).groups()
    return MaintenanceLogIdComponents(
        school_code=school_code,
        facility=_parsed_member("maintenance log ID", FacilityCode, facility),
        date=_parsed_date("maintenance log ID", date),
        sequence=_parsed_sequence("maintenance log ID", sequence),
    )


def parse_safety_alert_id(value: str) -> SafetyAlertIdComponents:
    school_code, alert_type, date, sequence = _fullmatch(
        "safety alert ID", SAFETY_ALERT_ID_RE, value
    ).groups()
    return SafetyAlertIdComponents(
        school_code=school_code,
        alert_type=_parsed_member("safety alert ID", AlertType, alert_type),
        date=_parsed_date("safety alert ID", date),
        sequence=_parsed_sequence("safety alert ID", sequence),
    )


def parse_school_id(value: str) -> SchoolIdComponents:
    digits, name_code, year, suffix = _fullmatch("school ID", SCHOOL_ID_RE, value).groups()
    return SchoolIdComponents(
        registration_digits=digits, name_code=name_code, year=year, suffix=suffix
    )


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

FORMATTERS: Dict[EntityKind, Callable[[Any], str]] = {
    EntityKind.STUDENT: format_student_id,
    EntityKind.EMPLOYEE: format_employee_id,
    EntityKind.CLASS_CODE: format_class_code,
    EntityKind.SUBJECT_CODE: format_subject_code,
    EntityKind.BUS_NUMBER: format_bus_number,
    EntityKind.ROLL_NUMBER: format_roll_number,
    EntityKind.BATCH_CODE: format_batch_code,
    EntityKind.EXAM: format_exam_id,
    EntityKind.ASSIGNMENT: format_assignment_id,
    EntityKind.FEE_COLLECTION: format_fee_collection_id,
    EntityKind.PAYROLL: format_payroll_id,
    EntityKind.MAINTENANCE_LOG: format_maintenance_log_id,
    EntityKind.SAFETY_ALERT: format_safety_alert_id,
    EntityKind.SCHOOL: format_school_id,
}

PARSERS: Dict[EntityKind, Callable[[str], BaseModel]] = {
    EntityKind.STUDENT: parse_student_id,
    EntityKind.EMPLOYEE: parse_employee_id,
    EntityKind.CLASS_CODE: parse_class_code,
    EntityKind.SUBJECT_CODE: parse_subject_code,
    EntityKind.BUS_NUMBER: parse_bus_number,
    EntityKind.ROLL_NUMBER: parse_roll_number,
    EntityKind.BATCH_CODE: parse_batch_code,
    EntityKind.EXAM: parse_exam_id,
    EntityKind.ASSIGNMENT: parse_assignment_id,
    EntityKind.FEE_COLLECTION: parse_fee_collection_id,
    EntityKind.PAYROLL: parse_payroll_id,
    EntityKind.MAINTENANCE_LOG: parse_maintenance_log_id,
    EntityKind.SAFETY_ALERT: parse_safety_alert_id,
    EntityKind.SCHOOL: parse_school_id,
}

COMPONENT_MODELS: Dict[EntityKind, Type[BaseModel]] = {
    EntityKind.STUDENT: StudentIdComponents,
    EntityKind.EMPLOYEE: EmployeeIdComponents,
    EntityKind.CLASS_CODE: ClassCodeComponents,
    EntityKind.SUBJECT_CODE: SubjectCodeComponents,
    EntityKind.BUS_NUMBER: BusNumberComponents,
    EntityKind.ROLL_NUMBER: RollNumberComponents,
    EntityKind.BATCH_CODE: BatchCodeComponents,
    EntityKind.EXAM: ExamIdComponents,
    EntityKind.ASSIGNMENT: AssignmentIdComponents,
    EntityKind.FEE_COLLECTION: FeeCollectionIdComponents,
    EntityKind.PAYROLL: PayrollIdComponents,
    EntityKind.MAINTENANCE_LOG: MaintenanceLogIdComponents,
    EntityKind.SAFETY_ALERT: SafetyAlertIdComponents,
    EntityKind.SCHOOL: SchoolIdComponents,
}

# Employee IDs end in a random suffix that parse cannot recover
REVERSIBLE_KINDS = frozenset(kind for kind in EntityKind if kind != EntityKind.EMPLOYEE)


def entity_kind(kind: Union[EntityKind, str]) -> EntityKind:
    try:
        return EntityKind(kind)
    except ValueError:
        raise IdentifierError(f"Unknown identifier kind: {kind!r}")


def build_components(kind: Union[EntityKind, str], components: Any) -> BaseModel:
    """Accept a component model or a plain mapping; bad shapes become FormatError."""
    model = COMPONENT_MODELS[entity_kind(kind)]
    if isinstance(components, model):
        return components
    if isinstance(components, BaseModel) or not isinstance(components, Mapping):
        raise FormatError(f"{kind} components must be {model.__name__}, got {type(components).__name__}")
    try:
        return model.model_validate(dict(components))
    except ValidationError as e:
        raise FormatError(f"Invalid {kind} components: {e.errors(include_url=False)}")


def format_id(kind: Union[EntityKind, str], components: Any) -> str:
    kind = entity_kind(kind)
    return FORMATTERS[kind](build_components(kind, components))


def parse_id(kind: Union[EntityKind, str], value: str) -> BaseModel:
    return PARSERS[entity_kind(kind)](value)


def validate_id(kind: Union[EntityKind, str], value: str) -> bool:
    parser = PARSERS[entity_kind(kind)]
    try:
        parser(value)
    except ParseError:
        return False
    return True


def _validator(kind: EntityKind) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        return validate_id(kind, value)
    check.__name__ = f"is_valid_{kind.value}"
    check.__doc__ = f"True when value parses as a {kind.value.replace('_', ' ')}."
    return check


is_valid_student_id = _validator(EntityKind.STUDENT)
is_valid_employee_id = _validator(EntityKind.EMPLOYEE)
is_valid_class_code = _validator(EntityKind.CLASS_CODE)
is_valid_subject_code = _validator(EntityKind.SUBJECT_CODE)
is_valid_bus_number = _validator(EntityKind.BUS_NUMBER)
is_valid_roll_number = _validator(EntityKind.ROLL_NUMBER)
is_valid_batch_code = _validator(EntityKind.BATCH_CODE)
is_valid_exam_id = _validator(EntityKind.EXAM)
is_valid_assignment_id = _validator(EntityKind.ASSIGNMENT)
is_valid_fee_collection_id = _validator(EntityKind.FEE_COLLECTION)
is_valid_payroll_id = _validator(EntityKind.PAYROLL)
is_valid_maintenance_log_id = _validator(EntityKind.MAINTENANCE_LOG)
is_valid_safety_alert_id = _validator(EntityKind.SAFETY_ALERT)
is_valid_school_id = _validator(EntityKind.SCHOOL)
