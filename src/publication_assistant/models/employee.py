from sqlalchemy import String, DateTime, Integer, Table, Column, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from publication_assistant.database.base import Base
from typing import TYPE_CHECKING

# Avoid circular import issues when using type hints for related models
if TYPE_CHECKING:
    from .publication import PublicationBase


# Many-to-many link between employees and the publications they (co-)authored.
employee_publications = Table(
    "employee_publications",
    Base.metadata,
    Column(
        "employee_id",
        Integer,
        ForeignKey("employees.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "publication_id",
        Integer,
        ForeignKey("publications.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Employee(Base):
    """
    SQLAlchemy model for an Employee.

    Represents a member of staff who can author any number of publications.
    """
    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True  # employees are usually looked up / sorted by surname
    )

    # e.g. "dr inż.", "prof."
    academic_title: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True
    )

    email: Mapped[str | None] = mapped_column(
        String(100),
        unique=True,
        nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # --- Relationships ---

    # Many-to-Many: an employee authors many publications
    publications: Mapped[list["PublicationBase"]] = relationship(
        "PublicationBase",
        secondary=employee_publications,
        back_populates="authors",
        lazy="select",
        order_by="PublicationBase.id",
    )

    def __repr__(self) -> str:
        return f"<Employee(id={self.id!r}, first_name={self.first_name!r}, last_name={self.last_name!r})>"
