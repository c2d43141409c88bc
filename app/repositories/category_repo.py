# app/repositories/category_repo.py
import uuid

from sqlalchemy import delete, func, or_
from sqlmodel import Session, select

from app.models.category import Category
from app.models.product import ProductCategoryLink


class CategoryRepository:
    """
    Data access layer for Category.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    def find_conflict(
        self,
        session: Session,
        *,
        name: str | None,
        slug: str | None,
        exclude_id: uuid.UUID | None = None,
    ) -> Category | None:
        """Any other category already using `name` or `slug`."""
        conditions = []
        if name is not None:
            conditions.append(Category.name == name)
        if slug is not None:
            conditions.append(Category.slug == slug)
        if not conditions:
            return None

        stmt = select(Category).where(or_(*conditions))
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        return session.exec(stmt).first()

    def _filtered(
        self,
        stmt,
        parent_id: uuid.UUID | None,
        is_active: bool | None,
        search: str | None,
    ):
        if parent_id is not None:
            stmt = stmt.where(Category.parent_id == parent_id)
        if is_active is not None:
            stmt = stmt.where(Category.is_active == is_active)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(Category.name.ilike(pattern), Category.description.ilike(pattern))
            )
        return stmt

    def list_categories(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
        parent_id: uuid.UUID | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> list[Category]:
        stmt = self._filtered(select(Category), parent_id, is_active, search)
        stmt = stmt.order_by(Category.name).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count(
        self,
        session: Session,
        parent_id: uuid.UUID | None = None,
        is_active: bool | None = None,
        search: str | None = None,
    ) -> int:
        stmt = self._filtered(
            select(func.count()).select_from(Category), parent_id, is_active, search
        )
        return int(session.exec(stmt).one() or 0)

    def list_all(self, session: Session) -> list[Category]:
        """Every category, for building the tree / cycle checks."""
        stmt = select(Category).order_by(Category.name)
        return list(session.exec(stmt).all())

    def has_children(self, session: Session, category_id: uuid.UUID) -> bool:
        stmt = select(Category.id).where(Category.parent_id == category_id).limit(1)
        return session.exec(stmt).first() is not None

    def create(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def update(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def delete(self, session: Session, category: Category) -> None:
        """Delete the category together with its product links."""
        session.exec(  # type: ignore[call-overload]
            delete(ProductCategoryLink).where(
                ProductCategoryLink.category_id == category.id
            )
        )
        session.delete(category)
        session.commit()
