"""ORM models for the records the health engine reads."""

from project_kernel.models.invoice import Invoice
from project_kernel.models.material_entry import MaterialEntry
from project_kernel.models.project import Project
from project_kernel.models.time_entry import TimeEntry

__all__ = [
    "Invoice",
    "MaterialEntry",
    "Project",
    "TimeEntry",
]
