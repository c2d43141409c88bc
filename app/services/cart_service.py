# app/services/cart_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.errors import InsufficientStock, ProductNotFound, VariantNotFound
from app.models.cart import Cart, CartItem
from app.models.product import Product, ProductVariant
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartItemProduct,
    CartItemRead,
    CartLine,
    CartRead,
)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - lazily create the user's cart
      - validate product and variant existence
      - enforce quantity <= variant stock (the stock itself is untouched
        until checkout)
      - keep one line per (product, variant), merging quantities
      - compute line totals and cart totals from current prices
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_product_variant(
        self,
        session: Session,
        product_id: uuid.UUID,
        variant_id: str,
    ) -> tuple[Product, ProductVariant]:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise ProductNotFound()
        variant = self.product_repo.get_variant(session, product.id, variant_id)
        if not variant:
            raise VariantNotFound()
        return product, variant

    def _build_summary(self, session: Session, cart: Cart) -> CartRead:
        """
        Cart lines joined with product details, plus totals.
        """
        items = self.cart_repo.list_items(session, cart.id)

        item_reads: list[CartItemRead] = []
        total_qty = 0
        total_price = 0.0

        for it in items:
            product = self.product_repo.get_by_id(session, it.product_id)
            details = None
            line_total = 0.0
            if product is not None:
                variant = self.product_repo.get_variant(session, product.id, it.variant_id)
                image = self.product_repo.primary_image(session, product.id)
                details = CartItemProduct(
                    name=product.name,
                    price=product.price,
                    image_url=image.url if image else None,
                    size=variant.size if variant else None,
                    color=variant.color if variant else None,
                    stock=variant.stock if variant else None,
                )
                line_total = round(product.price * it.quantity, 2)

            total_qty += it.quantity
            total_price += line_total
            item_reads.append(
                CartItemRead(
                    product_id=it.product_id,
                    variant_id=it.variant_id,
                    quantity=it.quantity,
                    product=details,
                    line_total=line_total,
                )
            )

        return CartRead(
            id=cart.id,
            user_id=cart.user_id,
            items=item_reads,
            total_quantity=total_qty,
            total_price=round(total_price, 2),
            updated_at=cart.updated_at,
        )

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: uuid.UUID) -> CartRead:
        cart = self.cart_repo.get_or_create(session, user_id)
        return self._build_summary(session, cart)

    def add_item(self, session: Session, user_id: uuid.UUID, payload: CartLine) -> CartRead:
        """
        Add a (product, variant) line to the user's cart.

        Rules:
          - product and variant must exist
          - requested quantity, and the merged quantity when the line
            already exists, must not exceed the variant's stock
        """
        _, variant = self._get_product_variant(session, payload.product_id, payload.variant_id)

        if payload.quantity > variant.stock:
            raise InsufficientStock()

        cart = self.cart_repo.get_or_create(session, user_id)
        existing = self.cart_repo.get_item(
            session, cart.id, payload.product_id, payload.variant_id
        )

        if existing:
            new_qty = existing.quantity + payload.quantity
            if new_qty > variant.stock:
                raise InsufficientStock()
            existing.quantity = new_qty
            self.cart_repo.save_item(session, cart, existing)
        else:
            item = CartItem(
                cart_id=cart.id,
                product_id=payload.product_id,
                variant_id=payload.variant_id,
                quantity=payload.quantity,
            )
            self.cart_repo.save_item(session, cart, item)

        return self._build_summary(session, cart)

    def update_item(self, session: Session, user_id: uuid.UUID, payload: CartLine) -> CartRead:
        """
        Set the quantity of an existing line, re-validated against stock.
        """
        cart = self.cart_repo.get_for_user(session, user_id)
        if not cart:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cart not found",
            )

        item = self.cart_repo.get_item(session, cart.id, payload.product_id, payload.variant_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )

        _, variant = self._get_product_variant(session, payload.product_id, payload.variant_id)
        if payload.quantity > variant.stock:
            raise InsufficientStock()

        item.quantity = payload.quantity
        self.cart_repo.save_item(session, cart, item)
        return self._build_summary(session, cart)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        variant_id: str,
    ) -> CartRead:
        cart = self.cart_repo.get_for_user(session, user_id)
        item = None
        if cart:
            item = self.cart_repo.get_item(session, cart.id, product_id, variant_id)
        if not cart or not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Item not found in cart",
            )

        self.cart_repo.delete_item(session, cart, item)
        return self._build_summary(session, cart)

    def clear(self, session: Session, user_id: uuid.UUID) -> CartRead:
        """
        Empty the cart (the cart itself is kept).
        """
        cart = self.cart_repo.get_or_create(session, user_id)
        self.cart_repo.empty(session, cart)
        return self._build_summary(session, cart)
