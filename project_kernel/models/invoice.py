"""
Module: project_kernel.models.invoice
Responsibility: ORM model for an outgoing invoice, optionally linked to a
    project.
Architecture position: Kernel > Models.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from project_kernel.db.base import TimestampedBase, UUIDString


class Invoice(TimestampedBase):
    """An invoice.  Only invoices with a ``project_id`` count for health."""

    __tablename__ = "invoices"

    __table_args__ = (
        Index("idx_invoice_project", "project_id"),
    )

    project_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("projects.id"),
        nullable=True,
    )

    invoice_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    invoice_date: Mapped[date | None] = mapped_column(
        Date,
        nullable=True,
    )

    total_amount: Mapped[Decimal | None] = mapped_column(
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Invoice {self.invoice_number}>"
