# app/routers/cart.py
import uuid

from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.auth import require_auth
from app.database import get_session
from app.models.user import User
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import CartLine, CartRead, CartResponse
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)


@router.get("", response_model=CartRead)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get current user's cart (created on first access).
    """
    return service.get_cart(session, current_user.id)


@router.post("/add", response_model=CartResponse)
def add_to_cart(
    payload: CartLine,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add a product variant to the cart; an existing line gets its
    quantity increased.
    """
    cart = service.add_item(session, current_user.id, payload)
    return CartResponse(message="Item added to cart successfully", cart=cart)


@router.put("/update", response_model=CartResponse)
def update_cart_item(
    payload: CartLine,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Set the quantity of a line already in the cart.
    """
    cart = service.update_item(session, current_user.id, payload)
    return CartResponse(message="Cart updated successfully", cart=cart)


@router.delete("/remove/{product_id}/{variant_id}", response_model=CartResponse)
def remove_cart_item(
    product_id: uuid.UUID,
    variant_id: str,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    cart = service.remove_item(session, current_user.id, product_id, variant_id)
    return CartResponse(message="Item removed from cart successfully", cart=cart)


@router.delete("/clear", response_model=CartResponse)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Remove every line from the cart.
    """
    cart = service.clear(session, current_user.id)
    return CartResponse(message="Cart cleared successfully", cart=cart)
