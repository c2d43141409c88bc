# app/services/order_service.py
import logging
import math
import uuid
from datetime import datetime

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.errors import (
    EmptyCart,
    InsufficientStock,
    ProductNotFound,
    VariantNotFound,
)
from app.core.security import generate_transaction_id
from app.models.order import Order, OrderItem
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import (
    AdminOrderPage,
    OrderCreate,
    OrderItemRead,
    OrderPage,
    OrderRead,
    OrderStatusUpdate,
    PaymentRead,
    ShippingAddress,
)

logger = logging.getLogger(__name__)

PENDING = "Pending"
CANCELLED = "Cancelled"

# Forward progression; Cancelled can be reached from any of these
STATUS_FLOW = ["Pending", "Processing", "Shipped", "Delivered"]


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from cart in a single transaction
      - Validate cart lines against products/variants (existence, stock)
      - Snapshot unit prices and compute the payment amount
      - Decrement variant stock with a conditional update per line
      - Clear cart after success
      - Enforce status transitions and restore stock on cancellation (admin)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # -------- User-facing operations --------

    def create_order_from_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderRead:
        """
        Convert the current user's cart into an Order.

        Steps:
          1. Load cart lines; EmptyCart if there are none.
          2. For each line, in cart order:
             - product must exist (ProductNotFound)
             - variant must exist by SKU (VariantNotFound)
             - stock >= quantity (InsufficientStock)
          3. Snapshot the current unit price and add price * quantity
             to the total.
          4. Decrement the variant's stock (conditional UPDATE).
          5. Build the order: status Pending, payment amount = computed
             total, generated transaction id.
          6. Persist the order, empty the cart, commit.

        Everything happens in one transaction: any failure rolls back
        the stock already taken, and no order is written.
        """
        cart = self.cart_repo.get_for_user(session, user_id)
        cart_items = self.cart_repo.list_items(session, cart.id) if cart else []
        if not cart or not cart_items:
            raise EmptyCart()

        try:
            order_items: list[OrderItem] = []
            total_amount = 0.0

            for position, line in enumerate(cart_items):
                product = self.product_repo.get_by_id(session, line.product_id)
                if not product:
                    raise ProductNotFound(line.product_id)

                variant = self.product_repo.get_variant(session, product.id, line.variant_id)
                if not variant:
                    raise VariantNotFound(line.variant_id)

                if variant.stock < line.quantity:
                    raise InsufficientStock(product.name)

                order_items.append(
                    OrderItem(
                        product_id=product.id,
                        variant_id=variant.sku,
                        quantity=line.quantity,
                        price=product.price,
                        position=position,
                    )
                )
                total_amount += product.price * line.quantity

                # Zero rows updated: a concurrent checkout took the units first
                if not self.product_repo.decrement_stock(session, variant.id, line.quantity):
                    raise InsufficientStock(product.name)

            order = Order(
                user_id=user_id,
                status=PENDING,
                shipping_address=payload.shipping_address.address,
                shipping_city=payload.shipping_address.city,
                shipping_zip_code=payload.shipping_address.zip_code,
                payment_method=payload.payment.method,
                payment_amount=round(total_amount, 2),
                transaction_id=generate_transaction_id(),
            )
            self.order_repo.add_order(session, order, order_items)
            self.cart_repo.empty(session, cart, commit=False)

            session.commit()
        except HTTPException as exc:
            session.rollback()
            logger.info("Checkout rejected for user %s: %s", user_id, exc.detail)
            raise
        except Exception:
            session.rollback()
            raise

        session.refresh(order)
        logger.info(
            "Order %s placed by user %s (%d items, total %.2f)",
            order.id,
            user_id,
            len(order_items),
            order.payment_amount,
        )
        return self._build_order_dto(order, self.order_repo.list_items(session, order.id))

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 10,
        status_filter: str | None = None,
    ) -> OrderPage:
        """
        The user's orders, newest first.
        """
        total = self.order_repo.count(session, user_id=user_id, status=status_filter)
        orders = self.order_repo.list_orders(
            session,
            skip=(page - 1) * limit,
            limit=limit,
            user_id=user_id,
            status=status_filter,
        )
        return OrderPage(
            orders=self._build_many(session, orders),
            total=total,
            total_pages=math.ceil(total / limit),
            current_page=page,
        )

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get_for_user(session, order_id, user_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return self._build_order_dto(order, self.order_repo.list_items(session, order.id))

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        page: int = 1,
        limit: int = 10,
        status_filter: str | None = None,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> AdminOrderPage:
        """
        All orders with filters, plus count and revenue over the filter.
        The date window applies only when both bounds are given.
        """
        filters = dict(status=status_filter, from_date=from_date, to_date=to_date)
        total = self.order_repo.count(session, **filters)
        orders = self.order_repo.list_orders(
            session,
            skip=(page - 1) * limit,
            limit=limit,
            sort_by=sort_by,
            descending=sort_order == "desc",
            **filters,
        )
        return AdminOrderPage(
            orders=self._build_many(session, orders),
            total=total,
            total_pages=math.ceil(total / limit),
            current_page=page,
            total_orders=total,
            total_revenue=round(self.order_repo.sum_amount(session, **filters), 2),
        )

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin-only status update:

          Pending -> Processing -> Shipped -> Delivered (forward only)
          any non-Cancelled status -> Cancelled (restores stock)
          Cancelled -> (no change)

        Setting the current status again is a no-op.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        current = order.status
        new = payload.status

        if current == new:
            return self._build_order_dto(order, self.order_repo.list_items(session, order.id))

        self._check_transition(current, new)
        items = self.order_repo.list_items(session, order.id)

        try:
            # Only the request that moves the row off `current` restores stock
            if not self.order_repo.claim_status(session, order.id, current, new):
                session.rollback()
                session.refresh(order)
                if order.status == new:
                    return self._build_order_dto(order, items)
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Order status was changed by another request",
                )

            if new == CANCELLED:
                self._restore_stock(session, order, items)

            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(order)
        logger.info("Order %s status %s -> %s", order.id, current, new)
        return self._build_order_dto(order, items)

    # -------- Helpers --------

    @staticmethod
    def _check_transition(current: str, new: str) -> None:
        if current == CANCELLED:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cancelled orders cannot change status",
            )
        if new == CANCELLED:
            return
        if STATUS_FLOW.index(new) < STATUS_FLOW.index(current):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

    def _restore_stock(self, session: Session, order: Order, items: list[OrderItem]) -> None:
        for item in items:
            restored = self.product_repo.increment_stock(
                session, item.product_id, item.variant_id, item.quantity
            )
            if not restored:
                logger.warning(
                    "Order %s: variant %s of product %s no longer exists, stock not restored",
                    order.id,
                    item.variant_id,
                    item.product_id,
                )

    def _build_many(self, session: Session, orders: list[Order]) -> list[OrderRead]:
        grouped = self.order_repo.list_items_for_orders(session, [o.id for o in orders])
        return [self._build_order_dto(o, grouped.get(o.id, [])) for o in orders]

    def _build_order_dto(self, order: Order, items: list[OrderItem]) -> OrderRead:
        """
        Compose OrderRead from ORM models.
        """
        item_dtos: list[OrderItemRead] = []
        subtotal = 0.0

        for it in items:
            line_total = round(it.quantity * it.price, 2)
            subtotal += line_total
            item_dtos.append(
                OrderItemRead(
                    product_id=it.product_id,
                    variant_id=it.variant_id,
                    quantity=it.quantity,
                    price=it.price,
                    line_total=line_total,
                )
            )

        return OrderRead(
            id=order.id,
            user_id=order.user_id,
            status=order.status,  # Literal
            items=item_dtos,
            shipping_address=ShippingAddress(
                address=order.shipping_address,
                city=order.shipping_city,
                zip_code=order.shipping_zip_code,
            ),
            payment=PaymentRead(
                method=order.payment_method,  # Literal
                amount=order.payment_amount,
                transaction_id=order.transaction_id,
            ),
            total_amount=round(subtotal, 2),
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
