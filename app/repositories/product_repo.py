# app/repositories/product_repo.py
import uuid

from sqlalchemy import delete, func, or_, update
from sqlmodel import Session, select

from app.models.product import (
    Product,
    ProductCategoryLink,
    ProductImage,
    ProductVariant,
)


class ProductRepository:
    """
    Data access layer for Product and its variants, images and
    category links.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    - Stock adjustments do not commit; the order flow owns the transaction.
    """

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def _filtered(
        self,
        stmt,
        category_id: uuid.UUID | None,
        min_price: float | None,
        max_price: float | None,
        search: str | None,
    ):
        if category_id is not None:
            stmt = stmt.join(
                ProductCategoryLink,
                ProductCategoryLink.product_id == Product.id,
            ).where(ProductCategoryLink.category_id == category_id)
        if min_price is not None:
            stmt = stmt.where(Product.price >= min_price)
        if max_price is not None:
            stmt = stmt.where(Product.price <= max_price)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(Product.name.ilike(pattern), Product.description.ilike(pattern))
            )
        return stmt

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 10,
        category_id: uuid.UUID | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        search: str | None = None,
    ) -> list[Product]:
        stmt = self._filtered(select(Product), category_id, min_price, max_price, search)
        stmt = stmt.order_by(Product.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count(
        self,
        session: Session,
        category_id: uuid.UUID | None = None,
        min_price: float | None = None,
        max_price: float | None = None,
        search: str | None = None,
    ) -> int:
        stmt = self._filtered(
            select(func.count()).select_from(Product),
            category_id,
            min_price,
            max_price,
            search,
        )
        return int(session.exec(stmt).one() or 0)

    def create(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def delete(self, session: Session, product: Product) -> None:
        """Delete a product with its variants, images and category links."""
        for model in (ProductVariant, ProductImage, ProductCategoryLink):
            session.exec(delete(model).where(model.product_id == product.id))  # type: ignore[call-overload]
        session.delete(product)
        session.commit()

    # ----- Variants -----

    def list_variants(self, session: Session, product_id: uuid.UUID) -> list[ProductVariant]:
        stmt = (
            select(ProductVariant)
            .where(ProductVariant.product_id == product_id)
            .order_by(ProductVariant.sku)
        )
        return list(session.exec(stmt).all())

    def get_variant(
        self,
        session: Session,
        product_id: uuid.UUID,
        sku: str,
    ) -> ProductVariant | None:
        """Variant by SKU, only if it belongs to `product_id`."""
        stmt = select(ProductVariant).where(
            ProductVariant.product_id == product_id,
            ProductVariant.sku == sku,
        )
        return session.exec(stmt).first()

    def find_skus_taken(
        self,
        session: Session,
        skus: list[str],
        exclude_product_id: uuid.UUID | None = None,
    ) -> list[str]:
        """SKUs from `skus` already used by another product."""
        if not skus:
            return []
        stmt = select(ProductVariant.sku).where(ProductVariant.sku.in_(skus))
        if exclude_product_id is not None:
            stmt = stmt.where(ProductVariant.product_id != exclude_product_id)
        return list(session.exec(stmt).all())

    def decrement_stock(
        self,
        session: Session,
        variant_id: uuid.UUID,
        quantity: int,
    ) -> bool:
        """
        Atomically take `quantity` units from a variant.

        Single conditional UPDATE: succeeds only while stock >= quantity.
        Returns False (nothing changed) otherwise.
        """
        stmt = (
            update(ProductVariant)
            .where(ProductVariant.id == variant_id, ProductVariant.stock >= quantity)
            .values(stock=ProductVariant.stock - quantity)
        )
        result = session.exec(stmt)  # type: ignore[call-overload]
        return result.rowcount == 1

    def increment_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        sku: str,
        quantity: int,
    ) -> bool:
        """
        Return `quantity` units to a variant. False if the variant is gone.
        """
        stmt = (
            update(ProductVariant)
            .where(ProductVariant.product_id == product_id, ProductVariant.sku == sku)
            .values(stock=ProductVariant.stock + quantity)
        )
        result = session.exec(stmt)  # type: ignore[call-overload]
        return result.rowcount == 1

    # ----- Images -----

    def list_images(self, session: Session, product_id: uuid.UUID) -> list[ProductImage]:
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.sort_order)
        )
        return list(session.exec(stmt).all())

    def primary_image(self, session: Session, product_id: uuid.UUID) -> ProductImage | None:
        """Image flagged primary, else the first one."""
        images = self.list_images(session, product_id)
        for img in images:
            if img.is_primary:
                return img
        return images[0] if images else None

    # ----- Categories -----

    def list_category_ids(self, session: Session, product_id: uuid.UUID) -> list[uuid.UUID]:
        stmt = select(ProductCategoryLink.category_id).where(
            ProductCategoryLink.product_id == product_id
        )
        return list(session.exec(stmt).all())
