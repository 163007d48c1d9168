"""
Keep API — Page Request/Response Schemas
==========================================

What:  Pydantic models for the public and admin page endpoints.

Two views of the same row:
    PagePublic  → {title, content}            (GET /pages, /page/{id}, /homepage)
    PageAdmin   → every column                (all /admin/... routes)

`position` is never accepted from create/replace/patch payloads; it is owned
by the reorder operation and by append-on-create.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class PagePublic(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PageAdmin(BaseModel):
    id: int
    title: Optional[str] = None
    content: Optional[str] = None
    slug: Optional[str] = None
    homepage: bool = False
    position: int = 0

    model_config = ConfigDict(from_attributes=True)


class PageCreate(BaseModel):
    """Body of POST /admin/page."""
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    slug: Optional[str] = Field(default=None, max_length=255)
    homepage: StrictBool = False


class PageReplace(BaseModel):
    """Body of PUT /admin/page/{id}: full replacement of the editable columns."""
    title: str = Field(max_length=255)
    content: str
    slug: str = Field(max_length=255)
    homepage: StrictBool = False


class PageUpdate(BaseModel):
    """
    Body of PATCH /admin/page/{id}.

    Only the keys present are written (see PageService.UPDATABLE_COLUMNS).
    Keys outside the allow-list fail validation with HTTP 400.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    slug: Optional[str] = Field(default=None, max_length=255)
    homepage: Optional[StrictBool] = None

    model_config = ConfigDict(extra="forbid")


class PageMutationResponse(BaseModel):
    message: str
    page: PageAdmin


class ReorderRequest(BaseModel):
    """
    Body of POST /admin/pages/reorder.

    order[i] is the id of the page that should end up at position i.
    An empty list is accepted and changes nothing.
    """
    order: List[int] = Field(description="Page ids in their new display order")


class ReorderResponse(BaseModel):
    message: str = "Pages reordered successfully."
    order: List[int]
