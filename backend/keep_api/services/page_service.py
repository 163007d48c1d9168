"""
Keep API — Page Service
=========================

What:  Business logic for CMS pages: public reads, admin CRUD and reordering.
How:   Same shape as NoteService; every method receives the request session.

Ordering model:
    `position` is a dense, zero-based display order. create_page() appends
    (position = current page count). reorder() is the only operation that
    rewrites positions across the set. Deleting a page leaves a gap until
    the next reorder.

Reorder transaction:
    reorder([3, 1, 2]) issues one UPDATE per entry, setting position = index.
    Ids that match no page update nothing, including ids too large for the
    INTEGER key, which are skipped without a statement. Pages not named keep their
    position. All statements share the request transaction: if any of them
    fails the session is rolled back, so a partially applied order is never
    committed.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from keep_api.exceptions import DatabaseError, NotFoundError, ValidationError
from keep_api.models.page import Page
from keep_api.services.validation import check_updatable_columns, is_storable_id

logger = logging.getLogger(__name__)


class PageService:
    """
    Business logic layer for page operations.

    Partial updates are restricted to UPDATABLE_COLUMNS; `id` and `position`
    can never be written through PATCH.
    """

    UPDATABLE_COLUMNS = frozenset({"title", "content", "slug", "homepage"})

    async def list_pages(self, db: AsyncSession) -> List[Page]:
        """All pages in display order (position, then id)."""
        try:
            result = await db.execute(select(Page).order_by(Page.position, Page.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing pages: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching pages from the database",
                context={"error_type": type(e).__name__},
            )

    async def get_page(self, db: AsyncSession, page_id: int) -> Page:
        if not is_storable_id(page_id):
            raise NotFoundError(resource="page", resource_id=page_id)
        try:
            page = await db.get(Page, page_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching page %s: %s", page_id, str(e))
            raise DatabaseError(
                message=f"Page with id: {page_id} could not be fetched, an error occurred.",
                context={"page_id": page_id},
            )
        if page is None:
            raise NotFoundError(resource="page", resource_id=page_id)
        return page

    async def get_homepage(self, db: AsyncSession) -> Page:
        """
        Return the page flagged as homepage.

        Nothing enforces a single flagged page; when several are flagged the
        one with the lowest id is returned.

        Raises:
            NotFoundError: no page is flagged
        """
        try:
            result = await db.execute(
                select(Page).where(Page.homepage.is_(True)).order_by(Page.id).limit(1)
            )
            page = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching homepage: %s", str(e))
            raise DatabaseError(message="Error fetching the homepage from the database")
        if page is None:
            raise NotFoundError(resource="homepage")
        return page

    async def create_page(
        self,
        db: AsyncSession,
        title: Optional[str],
        content: Optional[str],
        slug: Optional[str],
        homepage: bool = False,
    ) -> Page:
        """Insert a page at the end of the display order."""
        try:
            count = await db.scalar(select(func.count(Page.id)))
            page = Page(
                title=title,
                content=content,
                slug=slug,
                homepage=homepage,
                position=count or 0,
            )
            db.add(page)
            await db.flush()
            await db.refresh(page)
            logger.info("Page created: %s (position=%d)", page.id, page.position)
            return page
        except SQLAlchemyError as e:
            logger.error("Database error creating page: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="An error occurred while creating the page.",
                context={"error_type": type(e).__name__},
            )

    async def replace_page(
        self,
        db: AsyncSession,
        page_id: int,
        title: str,
        content: str,
        slug: str,
        homepage: bool = False,
    ) -> Page:
        """Full replacement (PUT) of the editable columns; position is kept."""
        return await self.update_page(
            db,
            page_id,
            {"title": title, "content": content, "slug": slug, "homepage": homepage},
        )

    async def update_page(
        self,
        db: AsyncSession,
        page_id: int,
        changes: Dict[str, Any],
    ) -> Page:
        """
        Partial update (PATCH): write exactly the columns present in `changes`.

        Raises:
            ValidationError: empty payload, key outside the allow-list, or a
                null homepage flag
            NotFoundError: no page with that id
            DatabaseError: statement failed
        """
        check_updatable_columns(changes, self.UPDATABLE_COLUMNS)
        if "homepage" in changes and changes["homepage"] is None:
            raise ValidationError(message="homepage must be true or false", field="homepage")

        page = await self.get_page(db, page_id)
        try:
            for column, value in changes.items():
                setattr(page, column, value)
            await db.flush()
            logger.info("Page %s updated: %s", page_id, ", ".join(sorted(changes)))
            return page
        except SQLAlchemyError as e:
            logger.error("Database error updating page %s: %s", page_id, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Page with id: {page_id} not updated, an error occurred.",
                context={"page_id": page_id},
            )

    async def delete_page(self, db: AsyncSession, page_id: int) -> None:
        page = await self.get_page(db, page_id)
        try:
            await db.delete(page)
            await db.flush()
            logger.info("Page %s deleted", page_id)
        except SQLAlchemyError as e:
            logger.error("Database error deleting page %s: %s", page_id, str(e), exc_info=True)
            raise DatabaseError(
                message=f"Page with id: {page_id} not deleted, an error occurred.",
                context={"page_id": page_id},
            )

    async def reorder(self, db: AsyncSession, ordered_ids: Sequence[int]) -> List[int]:
        """
        Set position = index for every id in `ordered_ids`, all or nothing.

        Args:
            db: Async database session
            ordered_ids: Page ids in their new display order (may be empty)

        Returns:
            The applied order.

        Raises:
            ValidationError: `ordered_ids` is missing or not a list
            DatabaseError: an update failed; nothing was applied
        """
        if ordered_ids is None or not isinstance(ordered_ids, (list, tuple)):
            raise ValidationError(message="Invalid order data", field="order")

        ordered_ids = list(ordered_ids)
        if not ordered_ids:
            return []

        try:
            for index, page_id in enumerate(ordered_ids):
                if not is_storable_id(page_id):
                    continue
                await db.execute(
                    update(Page)
                    .where(Page.id == page_id)
                    .values(position=index)
                    .execution_options(synchronize_session="fetch")
                )
            await db.flush()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Reorder failed, rolled back: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error updating page order",
                context={"order": ordered_ids},
            )

        logger.info("Pages reordered: %s", ordered_ids)
        return ordered_ids


page_service = PageService()
