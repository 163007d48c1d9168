"""
Keep API — Admin Page Routes
==============================

What:  Full page CRUD plus bulk reorder, all behind the AuthGate.
How:   The router-level `require_admin` dependency runs before every
       handler: 403 without a token, 401 with a bad one.

    GET    /admin/pages           list pages (all fields)
    POST   /admin/pages/reorder   bulk reposition
    GET    /admin/page/{id}       fetch one page
    POST   /admin/page            create (201)
    PUT    /admin/page/{id}       full replace
    PATCH  /admin/page/{id}       partial update (allow-listed fields)
    DELETE /admin/page/{id}       delete
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from keep_api.database import get_db_session
from keep_api.schemas.common import ErrorResponse, MessageResponse
from keep_api.schemas.page import (
    PageAdmin,
    PageCreate,
    PageMutationResponse,
    PageReplace,
    PageUpdate,
    ReorderRequest,
    ReorderResponse,
)
from keep_api.security.auth_gate import require_admin
from keep_api.services.page_service import page_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "Invalid or expired token", "model": ErrorResponse},
        403: {"description": "No token provided", "model": ErrorResponse},
    },
)


@router.get("/pages", response_model=List[PageAdmin], summary="List pages with all fields")
async def list_pages(db: AsyncSession = Depends(get_db_session)) -> List[PageAdmin]:
    pages = await page_service.list_pages(db)
    return [PageAdmin.model_validate(page) for page in pages]


@router.post(
    "/pages/reorder",
    response_model=ReorderResponse,
    responses={400: {"description": "Order is missing or not a list", "model": ErrorResponse}},
    summary="Reorder pages",
    description=(
        "Sets position = index for each page id in `order`. Pages not listed keep "
        "their position; unknown ids are ignored. Applied as a single transaction."
    ),
)
async def reorder_pages(
    payload: ReorderRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> ReorderResponse:
    applied = await page_service.reorder(db, payload.order)
    logger.info("User %s reordered %d pages", request.state.user_id, len(applied))
    return ReorderResponse(order=applied)


@router.get(
    "/page/{page_id}",
    response_model=PageAdmin,
    responses={404: {"description": "Page not found", "model": ErrorResponse}},
)
async def get_page(page_id: int, db: AsyncSession = Depends(get_db_session)) -> PageAdmin:
    page = await page_service.get_page(db, page_id)
    return PageAdmin.model_validate(page)


@router.post(
    "/page",
    response_model=PageMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a page",
)
async def create_page(
    payload: PageCreate,
    db: AsyncSession = Depends(get_db_session),
) -> PageMutationResponse:
    page = await page_service.create_page(
        db,
        title=payload.title,
        content=payload.content,
        slug=payload.slug,
        homepage=payload.homepage,
    )
    return PageMutationResponse(
        message="Page successfully created.",
        page=PageAdmin.model_validate(page),
    )


@router.put(
    "/page/{page_id}",
    response_model=PageMutationResponse,
    responses={404: {"description": "Page not found", "model": ErrorResponse}},
    summary="Replace a page",
)
async def replace_page(
    page_id: int,
    payload: PageReplace,
    db: AsyncSession = Depends(get_db_session),
) -> PageMutationResponse:
    page = await page_service.replace_page(
        db,
        page_id,
        title=payload.title,
        content=payload.content,
        slug=payload.slug,
        homepage=payload.homepage,
    )
    return PageMutationResponse(
        message=f"Page with id: {page_id} successfully updated.",
        page=PageAdmin.model_validate(page),
    )


@router.patch(
    "/page/{page_id}",
    response_model=PageMutationResponse,
    responses={
        400: {"description": "Unknown or empty field set", "model": ErrorResponse},
        404: {"description": "Page not found", "model": ErrorResponse},
    },
    summary="Partially update a page",
)
async def update_page(
    page_id: int,
    payload: PageUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> PageMutationResponse:
    page = await page_service.update_page(db, page_id, payload.model_dump(exclude_unset=True))
    return PageMutationResponse(
        message=f"Page with id: {page_id} successfully updated.",
        page=PageAdmin.model_validate(page),
    )


@router.delete(
    "/page/{page_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Page not found", "model": ErrorResponse}},
    summary="Delete a page",
)
async def delete_page(page_id: int, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await page_service.delete_page(db, page_id)
    return MessageResponse(message=f"Page with id: {page_id} successfully deleted.")
