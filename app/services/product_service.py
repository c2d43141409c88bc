# app/services/product_service.py
import math
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.errors import ProductNotFound
from app.models.product import (
    Product,
    ProductCategoryLink,
    ProductImage,
    ProductVariant,
)
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.product import (
    ImageIn,
    ImageRead,
    ProductCreate,
    ProductPage,
    ProductRead,
    ProductUpdate,
    VariantIn,
    VariantRead,
)


class ProductService:
    """
    Business logic for the product catalog.

    Responsibilities:
      - global SKU uniqueness
      - category references must exist
      - variant/image/category list replacement on update
    """

    def __init__(self, repo: ProductRepository, category_repo: CategoryRepository):
        self.repo = repo
        self.category_repo = category_repo

    # ----- Helpers -----

    def to_read(self, session: Session, product: Product) -> ProductRead:
        return ProductRead(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            categories=self.repo.list_category_ids(session, product.id),
            variants=[
                VariantRead(id=v.id, sku=v.sku, size=v.size, color=v.color, stock=v.stock)
                for v in self.repo.list_variants(session, product.id)
            ],
            images=[
                ImageRead(
                    id=img.id,
                    url=img.url,
                    is_primary=img.is_primary,
                    sort_order=img.sort_order,
                )
                for img in self.repo.list_images(session, product.id)
            ],
            created_at=product.created_at,
            updated_at=product.updated_at,
        )

    def _get(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise ProductNotFound()
        return product

    def _check_categories(self, session: Session, category_ids: list[uuid.UUID]) -> None:
        for cid in category_ids:
            if self.category_repo.get_by_id(session, cid) is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Category {cid} not found",
                )

    def _check_skus(
        self,
        session: Session,
        variants: list[VariantIn],
        product_id: uuid.UUID | None = None,
    ) -> None:
        taken = self.repo.find_skus_taken(
            session, [v.sku for v in variants], exclude_product_id=product_id
        )
        if taken:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"SKU already exists: {', '.join(sorted(taken))}",
            )

    @staticmethod
    def _build_images(product_id: uuid.UUID, images: list[ImageIn]) -> list[ProductImage]:
        return [
            ProductImage(
                product_id=product_id,
                url=img.url,
                is_primary=img.is_primary,
                sort_order=idx,
            )
            for idx, img in enumerate(images)
        ]

    def _replace_variants(
        self,
        session: Session,
        product_id: uuid.UUID,
        variants: list[VariantIn],
    ) -> None:
        """
        Sync the stored variants with `variants`, matched by SKU:
        existing rows are updated, new ones added, missing ones removed.
        """
        existing = {v.sku: v for v in self.repo.list_variants(session, product_id)}
        wanted = {v.sku for v in variants}

        for sku, row in existing.items():
            if sku not in wanted:
                session.delete(row)
        # Deletions first so a SKU freed here can't clash on insert
        session.flush()

        for v in variants:
            row = existing.get(v.sku)
            if row is None:
                session.add(
                    ProductVariant(
                        product_id=product_id,
                        sku=v.sku,
                        size=v.size,
                        color=v.color,
                        stock=v.stock,
                    )
                )
            else:
                row.size = v.size
                row.color = v.color
                row.stock = v.stock
                session.add(row)

    # ----- Reads -----

    def list_products(
        self,
        session: Session,
        page: int = 1,
        limit: int = 10,
        category_id: uuid.UUID | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        search: str | None = None,
    ) -> ProductPage:
        filters = dict(
            category_id=category_id,
            min_price=min_price,
            max_price=max_price,
            search=search,
        )
        total = self.repo.count(session, **filters)
        rows = self.repo.list_products(
            session, skip=(page - 1) * limit, limit=limit, **filters
        )
        return ProductPage(
            products=[self.to_read(session, p) for p in rows],
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
            current_page=page,
        )

    def get_product(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        return self.to_read(session, self._get(session, product_id))

    # ----- Writes -----

    def create_product(self, session: Session, payload: ProductCreate) -> ProductRead:
        self._check_categories(session, payload.categories)
        self._check_skus(session, payload.variants)

        product = Product(
            name=payload.name,
            description=payload.description,
            price=payload.price,
        )
        session.add(product)
        session.flush()  # Assign PK

        session.add_all(
            ProductVariant(
                product_id=product.id,
                sku=v.sku,
                size=v.size,
                color=v.color,
                stock=v.stock,
            )
            for v in payload.variants
        )
        session.add_all(self._build_images(product.id, payload.images))
        session.add_all(
            ProductCategoryLink(product_id=product.id, category_id=cid)
            for cid in dict.fromkeys(payload.categories)
        )

        product = self.repo.create(session, product)
        return self.to_read(session, product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> ProductRead:
        """
        Partial update; list fields replace what is stored.
        """
        product = self._get(session, product_id)

        if payload.categories is not None:
            self._check_categories(session, payload.categories)
        if payload.variants is not None:
            self._check_skus(session, payload.variants, product_id=product.id)

        if payload.name is not None:
            product.name = payload.name
        if payload.description is not None:
            product.description = payload.description
        if payload.price is not None:
            product.price = payload.price

        if payload.variants is not None:
            self._replace_variants(session, product.id, payload.variants)

        if payload.images is not None:
            for img in self.repo.list_images(session, product.id):
                session.delete(img)
            session.add_all(self._build_images(product.id, payload.images))

        if payload.categories is not None:
            for cid in self.repo.list_category_ids(session, product.id):
                link = session.get(ProductCategoryLink, (product.id, cid))
                if link is not None:
                    session.delete(link)
            session.flush()
            session.add_all(
                ProductCategoryLink(product_id=product.id, category_id=cid)
                for cid in dict.fromkeys(payload.categories)
            )

        product.updated_at = datetime.now(timezone.utc)
        product = self.repo.update(session, product)
        return self.to_read(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        product = self._get(session, product_id)
        deleted = self.to_read(session, product)
        self.repo.delete(session, product)
        return deleted
