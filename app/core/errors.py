# app/core/errors.py
"""
Named domain errors for the cart and order flows (HTTPException subclasses).
"""
from fastapi import HTTPException, status


class EmptyCart(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cart is empty",
        )


class ProductNotFound(HTTPException):
    def __init__(self, product_id: object | None = None) -> None:
        detail = "Product not found"
        if product_id is not None:
            detail = f"Product {product_id} not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class VariantNotFound(HTTPException):
    def __init__(self, variant_id: str | None = None) -> None:
        detail = "Product variant not found"
        if variant_id is not None:
            detail = f"Variant {variant_id} not found"
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InsufficientStock(HTTPException):
    def __init__(self, product_name: str | None = None) -> None:
        detail = "Insufficient stock"
        if product_name:
            detail = f"Insufficient stock for {product_name}"
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
