"""Models Package - Export all models for easy imports"""

from schoolid.models.base import BaseModel, SchoolScopedMixin, StatusMixin
from schoolid.models.enums import *
from schoolid.models.school import School, StudentBatch


__all__ = [
    # Base classes
    "BaseModel",
    "SchoolScopedMixin",
    "StatusMixin",

    # Tenant
    "School",
    "StudentBatch",
]
