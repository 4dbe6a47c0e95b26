"""
Module: project_kernel.models.material_entry
Responsibility: ORM model for material consumed on a project.
Architecture position: Kernel > Models.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from project_kernel.db.base import TimestampedBase, UUIDString


class MaterialEntry(TimestampedBase):
    """Material booked against a project.  ``total_cost`` may be unset."""

    __tablename__ = "material_entries"

    __table_args__ = (
        Index("idx_material_entry_project", "project_id"),
    )

    project_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("projects.id"),
        nullable=False,
    )

    material_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    quantity: Mapped[Decimal | None] = mapped_column(
        nullable=True,
    )

    unit_cost: Mapped[Decimal | None] = mapped_column(
        nullable=True,
    )

    total_cost: Mapped[Decimal | None] = mapped_column(
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<MaterialEntry {self.material_name}: {self.total_cost}>"
