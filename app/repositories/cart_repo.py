# app/repositories/cart_repo.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import delete
from sqlmodel import Session, select

from app.models.cart import Cart, CartItem


class CartRepository:

    # Cart row
    def get_for_user(self, session: Session, user_id: uuid.UUID) -> Cart | None:
        stmt = select(Cart).where(Cart.user_id == user_id)
        return session.exec(stmt).first()

    def get_or_create(self, session: Session, user_id: uuid.UUID) -> Cart:
        cart = self.get_for_user(session, user_id)
        if cart is None:
            cart = Cart(user_id=user_id)
            session.add(cart)
            session.commit()
            session.refresh(cart)
        return cart

    def touch(self, session: Session, cart: Cart) -> None:
        """Bump updated_at; committed with the caller's changes."""
        cart.updated_at = datetime.now(timezone.utc)
        session.add(cart)

    # Lines, in insertion order
    def list_items(self, session: Session, cart_id: uuid.UUID) -> list[CartItem]:
        stmt = (
            select(CartItem)
            .where(CartItem.cart_id == cart_id)
            .order_by(CartItem.created_at, CartItem.id)
        )
        return list(session.exec(stmt).all())

    def get_item(
        self,
        session: Session,
        cart_id: uuid.UUID,
        product_id: uuid.UUID,
        variant_id: str,
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.cart_id == cart_id,
            CartItem.product_id == product_id,
            CartItem.variant_id == variant_id,
        )
        return session.exec(stmt).first()

    # CRUD
    def save_item(self, session: Session, cart: Cart, item: CartItem) -> CartItem:
        session.add(item)
        self.touch(session, cart)
        session.commit()
        session.refresh(item)
        return item

    def delete_item(self, session: Session, cart: Cart, item: CartItem) -> None:
        session.delete(item)
        self.touch(session, cart)
        session.commit()

    def empty(self, session: Session, cart: Cart, commit: bool = True) -> None:
        """
        Remove every line of the cart (the cart row itself stays).
        With commit=False the deletion joins the caller's transaction.
        """
        session.exec(delete(CartItem).where(CartItem.cart_id == cart.id))  # type: ignore[call-overload]
        self.touch(session, cart)
        if commit:
            session.commit()
