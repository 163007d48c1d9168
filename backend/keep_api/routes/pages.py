"""
Keep API — Public Page Routes
===============================

Read-only site content. Only `title` and `content` are exposed here; the
full row (slug, flags, position) is reserved for the admin routes.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from keep_api.database import get_db_session
from keep_api.schemas.common import ErrorResponse
from keep_api.schemas.page import PagePublic
from keep_api.services.page_service import page_service

router = APIRouter(tags=["Pages"])


@router.get(
    "/homepage",
    response_model=PagePublic,
    responses={404: {"description": "No page is flagged as homepage", "model": ErrorResponse}},
    summary="Get the page flagged as homepage",
)
async def get_homepage(db: AsyncSession = Depends(get_db_session)) -> PagePublic:
    page = await page_service.get_homepage(db)
    return PagePublic.model_validate(page)


@router.get("/pages", response_model=List[PagePublic], summary="List pages in display order")
async def list_pages(db: AsyncSession = Depends(get_db_session)) -> List[PagePublic]:
    pages = await page_service.list_pages(db)
    return [PagePublic.model_validate(page) for page in pages]


@router.get(
    "/page/{page_id}",
    response_model=PagePublic,
    responses={404: {"description": "Page not found", "model": ErrorResponse}},
    summary="Get a single page",
)
async def get_page(page_id: int, db: AsyncSession = Depends(get_db_session)) -> PagePublic:
    page = await page_service.get_page(db, page_id)
    return PagePublic.model_validate(page)
