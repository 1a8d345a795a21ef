from sqlalchemy import String, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from enum import Enum as PyEnum
from publication_assistant.database.base import Base
from .employee import employee_publications
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .employee import Employee


# ------------------------------
# Discriminator values
# ------------------------------
class PublicationType(str, PyEnum):
    """Concrete publication kinds stored in the `publications` table."""
    PUBLICATION = "publication"             # plain record with no subtype data
    ARTICLE = "article"                     # journal article
    BOOK = "book"                           # monograph / book
    CONFERENCE_PAPER = "conference_paper"   # paper in conference proceedings


# ------------------------------
# Publication hierarchy (single-table inheritance)
# ------------------------------
class PublicationBase(Base):
    """
    Base entity of every publication.

    All subtypes share one table; `publication_type` tells SQLAlchemy which
    Python class to build for each row, so querying `PublicationBase` returns
    a heterogeneous list of `Article`, `Book` and `ConferencePaper` objects.
    """
    __tablename__ = "publications"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False
    )

    year: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True
    )

    publication_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=PublicationType.PUBLICATION.value,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # --- Relationships ---

    # Many-to-Many: employees who authored this publication
    authors: Mapped[list["Employee"]] = relationship(
        "Employee",
        secondary=employee_publications,
        back_populates="publications",
        lazy="select",
    )

    __mapper_args__ = {
        "polymorphic_on": "publication_type",
        "polymorphic_identity": PublicationType.PUBLICATION.value,
    }

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id!r}, title={self.title!r}, year={self.year!r})>"


class Article(PublicationBase):
    """Journal article."""

    journal: Mapped[str | None] = mapped_column(String(300), nullable=True)
    volume: Mapped[str | None] = mapped_column(String(50), nullable=True)
    pages: Mapped[str | None] = mapped_column(
        String(50), nullable=True, use_existing_column=True
    )
    doi: Mapped[str | None] = mapped_column(String(100), nullable=True)

    __mapper_args__ = {"polymorphic_identity": PublicationType.ARTICLE.value}


class Book(PublicationBase):
    """Book or monograph."""

    publisher: Mapped[str | None] = mapped_column(String(300), nullable=True)
    isbn: Mapped[str | None] = mapped_column(String(20), nullable=True)

    __mapper_args__ = {"polymorphic_identity": PublicationType.BOOK.value}


class ConferencePaper(PublicationBase):
    """Paper published in conference proceedings."""

    conference_name: Mapped[str | None] = mapped_column(String(300), nullable=True)

    # Article also declares `pages`; single-table inheritance shares the column
    pages: Mapped[str | None] = mapped_column(
        String(50), nullable=True, use_existing_column=True
    )

    __mapper_args__ = {"polymorphic_identity": PublicationType.CONFERENCE_PAPER.value}
