# app/services/category_service.py
import math
import re
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.category import Category
from app.repositories.category_repo import CategoryRepository
from app.schemas.category import (
    CategoryCreate,
    CategoryNode,
    CategoryPage,
    CategoryRead,
    CategoryUpdate,
)


class CategoryService:
    """
    Business logic for the category tree.

    Responsibilities:
      - name/slug uniqueness
      - parent existence and cycle guard on writes
      - refusing to delete categories that still have children
    """

    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    # ----- Helpers -----

    @staticmethod
    def _slugify(raw: str) -> str:
        """
        Basic slugification:
          - lowercase
          - non-alphanumeric -> '-'
          - collapse multiple '-'
          - strip leading/trailing '-'
        """
        value = raw.strip().lower()
        value = re.sub(r"[^a-z0-9]+", "-", value)
        value = re.sub(r"-+", "-", value)
        value = value.strip("-")
        return value or "category"

    def _ensure_unique(
        self,
        session: Session,
        name: str | None,
        slug: str | None,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        if self.repo.find_conflict(session, name=name, slug=slug, exclude_id=exclude_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category with this name or slug already exists",
            )

    def _parent_map(self, session: Session) -> dict[uuid.UUID, Category]:
        """Id-indexed arena of every category."""
        return {c.id: c for c in self.repo.list_all(session)}

    def _would_cycle(
        self,
        arena: dict[uuid.UUID, Category],
        category_id: uuid.UUID,
        new_parent_id: uuid.UUID,
    ) -> bool:
        """
        True when `new_parent_id` is the category itself or one of its
        descendants (walk parent pointers up from the new parent).
        """
        seen: set[uuid.UUID] = set()
        current: uuid.UUID | None = new_parent_id
        while current is not None and current not in seen:
            if current == category_id:
                return True
            seen.add(current)
            node = arena.get(current)
            current = node.parent_id if node else None
        return False

    def _to_read(self, category: Category, parent: Category | None) -> CategoryRead:
        return CategoryRead(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            parent_id=category.parent_id,
            parent_name=parent.name if parent else None,
            is_active=category.is_active,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )

    def _read_with_parent(self, session: Session, category: Category) -> CategoryRead:
        parent = None
        if category.parent_id is not None:
            parent = self.repo.get_by_id(session, category.parent_id)
        return self._to_read(category, parent)

    def _get(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.repo.get_by_id(session, category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    def _require_parent(self, session: Session, parent_id: uuid.UUID) -> None:
        if self.repo.get_by_id(session, parent_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Parent category not found",
            )

    # ----- Reads -----

    def list_categories(
        self,
        session: Session,
        page: int = 1,
        limit: int = 50,
        parent_id: uuid.UUID | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> CategoryPage:
        total = self.repo.count(
            session, parent_id=parent_id, is_active=is_active, search=search
        )
        rows = self.repo.list_categories(
            session,
            skip=(page - 1) * limit,
            limit=limit,
            parent_id=parent_id,
            is_active=is_active,
            search=search,
        )
        return CategoryPage(
            categories=[self._read_with_parent(session, c) for c in rows],
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
            current_page=page,
        )

    def get_category(self, session: Session, category_id: uuid.UUID) -> CategoryRead:
        return self._read_with_parent(session, self._get(session, category_id))

    def get_tree(self, session: Session) -> list[CategoryNode]:
        """
        Whole taxonomy as nested nodes, roots first, siblings by name.
        """
        arena = self._parent_map(session)
        nodes = {
            cid: CategoryNode(id=c.id, name=c.name, slug=c.slug, is_active=c.is_active)
            for cid, c in arena.items()
        }
        roots: list[CategoryNode] = []
        # arena preserves name order from the repository
        for cid, c in arena.items():
            parent_node = nodes.get(c.parent_id) if c.parent_id else None
            if parent_node is None:
                roots.append(nodes[cid])
            else:
                parent_node.children.append(nodes[cid])
        return roots

    # ----- Writes -----

    def create_category(self, session: Session, payload: CategoryCreate) -> CategoryRead:
        slug = self._slugify(payload.slug or payload.name)
        self._ensure_unique(session, payload.name, slug)

        if payload.parent_id is not None:
            self._require_parent(session, payload.parent_id)

        category = Category(
            name=payload.name,
            slug=slug,
            description=payload.description,
            parent_id=payload.parent_id,
            is_active=True,
        )
        category = self.repo.create(session, category)
        return self._read_with_parent(session, category)

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> CategoryRead:
        """
        Partial update.

        - name/slug must stay unique among the other categories
        - a new parent must exist and must not be the category itself
          or one of its descendants
        """
        category = self._get(session, category_id)
        fields = payload.model_fields_set

        new_slug = self._slugify(payload.slug) if payload.slug is not None else None
        if payload.name is not None or new_slug is not None:
            self._ensure_unique(session, payload.name, new_slug, exclude_id=category.id)

        if "parent_id" in fields and payload.parent_id is not None:
            self._require_parent(session, payload.parent_id)
            if self._would_cycle(self._parent_map(session), category.id, payload.parent_id):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A category cannot be moved under itself or its descendants",
                )

        if payload.name is not None:
            category.name = payload.name
        if new_slug is not None:
            category.slug = new_slug
        if "description" in fields:
            category.description = payload.description
        if "parent_id" in fields:
            category.parent_id = payload.parent_id
        if payload.is_active is not None:
            category.is_active = payload.is_active

        category.updated_at = datetime.now(timezone.utc)
        category = self.repo.update(session, category)
        return self._read_with_parent(session, category)

    def delete_category(self, session: Session, category_id: uuid.UUID) -> CategoryRead:
        if self.repo.has_children(session, category_id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot delete category with subcategories",
            )

        category = self._get(session, category_id)
        deleted = self._to_read(category, None)
        self.repo.delete(session, category)
        return deleted
