"""
Keep API — Page SQLAlchemy Model
==================================

What:  ORM model representing the `pages` table of the CMS.
Why:   Pages are the public site content managed from the admin panel.

Table Design Rationale:
    - position: dense, zero-based ordering among all pages. Only the reorder
      operation rewrites it across the whole set; a new page is appended at
      the end (position = current page count).
    - homepage: marks the page served at /homepage. Uniqueness is NOT a
      database constraint; when several pages are flagged the lowest id wins.
    - slug: free text, no uniqueness constraint.

    Index on position: every listing is ORDER BY position.
"""

from typing import Optional

from sqlalchemy import Boolean, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from keep_api.database import Base


class Page(Base):
    """
    Represents a CMS page.

    Query Patterns:
        - Public/admin listing: SELECT ... ORDER BY position, id
        - Homepage lookup: SELECT ... WHERE homepage ORDER BY id LIMIT 1
        - Reorder: UPDATE pages SET position = :i WHERE id = :id (per entry)
    """

    __tablename__ = "pages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    slug: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    homepage: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )

    __table_args__ = (
        Index("idx_pages_position", "position"),
    )

    def __repr__(self) -> str:
        return (
            f"<Page(id={self.id}, slug='{self.slug}', "
            f"position={self.position}, homepage={self.homepage})>"
        )
