"""Centralized Enum Definitions"""

import enum


# Domain 1: Identifier kinds
class EntityKind(str, enum.Enum):
    """Entity kinds that carry a structured identifier"""
    STUDENT = "student"
    EMPLOYEE = "employee"
    CLASS_CODE = "class_code"
    SUBJECT_CODE = "subject_code"
    BUS_NUMBER = "bus_number"
    ROLL_NUMBER = "roll_number"
    BATCH_CODE = "batch_code"
    EXAM = "exam"
    ASSIGNMENT = "assignment"
    FEE_COLLECTION = "fee_collection"
    PAYROLL = "payroll"
    MAINTENANCE_LOG = "maintenance_log"
    SAFETY_ALERT = "safety_alert"
    SCHOOL = "school"


class AllocationStrategy(str, enum.Enum):
    """How the next identifier in a scope is chosen"""
    SEQUENCE = "sequence"
    RANDOM_SUFFIX = "random_suffix"
    DETERMINISTIC = "deterministic"


# Domain 2: Staff & Transport
class EmployeeRole(str, enum.Enum):
    """Employee roles; the code is the 3-letter ID segment"""
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    TRANSPORT = "TRANSPORT"

    @property
    def code(self) -> str:
        return _ROLE_CODES[self]

    @classmethod
    def from_code(cls, code: str) -> "EmployeeRole":
        for role, role_code in _ROLE_CODES.items():
            if role_code == code:
                return role
        raise ValueError(f"Unknown role code: {code}")


_ROLE_CODES = {
    EmployeeRole.ADMIN: "ADM",
    EmployeeRole.TEACHER: "TCH",
    EmployeeRole.TRANSPORT: "TRP",
}


class BusCapacity(str, enum.Enum):
    """Bus capacity classes, keyed by their ID letter"""
    LARGE = "L"
    MEDIUM = "M"
    SMALL = "S"


# Domain 3: Academic
class SubjectCategory(str, enum.Enum):
    """Subject categories and their single-letter codes"""
    CORE = "C"        # Math, Science, English
    LANGUAGE = "L"    # Hindi, Sanskrit, French
    PHYSICAL = "P"    # PE, Sports
    ARTS = "A"        # Music, Drawing, Dance
    COMPUTER = "I"
    SOCIAL = "S"      # History, Geography, Civics
    COMMERCE = "M"    # Economics, Business
    SCIENCE = "N"     # Biology, Chemistry, Physics


class ExamType(str, enum.Enum):
    """Exam types and their 2-letter ID codes"""
    QUIZ = "QZ"
    TEST = "TS"
    MID_TERM = "MT"
    FINAL = "FN"
    ASSIGNMENT = "AS"
    PROJECT = "PJ"
    PRACTICAL = "PR"
    ORAL = "OR"


class BatchStatus(str, enum.Enum):
    """Student batch lifecycle"""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    COMPLETED = "COMPLETED"


# Domain 4: Operations
class FacilityCode(str, enum.Enum):
    """Facility codes used in maintenance log IDs"""
    BUS = "BUS"
    CLASSROOM = "CLS"
    LABORATORY = "LAB"
    LIBRARY = "LIB"
    AUDITORIUM = "AUD"
    PLAYGROUND = "PLG"
    CAFETERIA = "CAF"
    OFFICE = "OFF"
    WASHROOM = "WAS"
    GATE = "GAT"


class AlertType(str, enum.Enum):
    """Safety alert types and their 2-letter ID codes"""
    FIRE_DRILL = "FD"
    ACCIDENT = "AC"
    DELAY = "DL"
    MAINTENANCE = "MT"
    OTHER = "OT"
