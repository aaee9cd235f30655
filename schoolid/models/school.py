"""Tenant Models read when building identifier config"""

from sqlalchemy import Column, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import relationship

from schoolid.models.base import BaseModel, SchoolScopedMixin, StatusMixin, identifier_column
from schoolid.models.enums import BatchStatus, EntityKind


class School(BaseModel, StatusMixin):
    """
    Tenant/School model - the multi-tenant anchor.
    ``school_code`` is the 3-character segment embedded in student, bus,
    fee, maintenance and safety alert IDs.
    """
    __tablename__ = "schools"

    name = Column(String(255), nullable=False)
    school_code = Column(String(3), unique=True, nullable=True)
    registration_number = Column(String(50), nullable=True)
    # 12-char public school ID, e.g. SCH89BC24X7A
    public_id = identifier_column(EntityKind.SCHOOL, 12, unique=True, index=True)

    batches = relationship("StudentBatch", back_populates="school", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<School {self.name} ({self.school_code})>"


class StudentBatch(BaseModel, SchoolScopedMixin):
    """
    Admission batch within a school, e.g. 25A for academic year 2024-25.
    The newest ACTIVE batch decides the tenant's current academic year.
    """
    __tablename__ = "student_batches"
    __table_args__ = (
        UniqueConstraint("school_id", "batch_code", name="uq_student_batches_school_batch_code"),
    )

    batch_code = identifier_column(EntityKind.BATCH_CODE, 3, nullable=False)
    academic_year = Column(String(7), nullable=False, index=True)
    status = Column(ENUM(BatchStatus, name="batch_status"), nullable=False, default=BatchStatus.ACTIVE)

    school = relationship("School", back_populates="batches")

    def __repr__(self) -> str:
        return f"<StudentBatch {self.batch_code} {self.academic_year}>"
