# app/routers/categories.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.schemas.category import (
    CategoryCreate,
    CategoryNode,
    CategoryPage,
    CategoryRead,
    CategoryUpdate,
)
from app.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])

repo = CategoryRepository()
service = CategoryService(repo)


# -------- Public endpoints --------


@router.get("", response_model=CategoryPage)
def list_categories(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    parent_id: uuid.UUID | None = None,
    is_active: bool | None = None,
    search: str | None = None,
):
    """
    List categories sorted by name.

    Filters: parent_id, is_active, free-text `search` on name/description.
    """
    return service.list_categories(
        session,
        page=page,
        limit=limit,
        parent_id=parent_id,
        is_active=is_active,
        search=search,
    )


@router.get("/tree", response_model=list[CategoryNode])
def category_tree(session: Session = Depends(get_session)):
    """
    The whole taxonomy as nested nodes.
    """
    return service.get_tree(session)


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_category(session, category_id)


# -------- Authenticated endpoints --------


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
):
    return service.create_category(session, payload)


@router.put(
    "/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_auth)],
)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
):
    """
    Partial update. Moving a category under itself or one of its
    descendants is rejected.
    """
    return service.update_category(session, category_id, payload)


@router.delete(
    "/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_auth)],
)
def delete_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Delete a category. Fails while it still has sub-categories.
    """
    return service.delete_category(session, category_id)
