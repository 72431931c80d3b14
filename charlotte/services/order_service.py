# charlotte/services/order_service.py
import logging
import uuid

from fastapi import HTTPException, status

from charlotte.core.filters import ALL_STATUSES, filter_orders
from charlotte.core.gateway import Gateway, GatewayError
from charlotte.core.reconciler import patch
from charlotte.models.order import Order, OrderStatus
from charlotte.repositories.order_repo import USER_COLUMNS, OrderRepository
from charlotte.schemas.order import (
    OrderCreate,
    OrderItemRead,
    OrderRead,
    OrderStatusUpdate,
)
from charlotte.schemas.pattern import PatternRead

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Place an order from explicit line items
      - Compute valor_total once, at creation
      - List / filter orders for customers and for the admin board
      - Set the status (admin); any of the three values, from any value
    """

    def __init__(self, repo: OrderRepository):
        self.repo = repo

    # -------- User-facing operations --------

    def place_order(
        self,
        gateway: Gateway,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderRead:
        """
        Create an order with its items.

        Steps:
          1. Compute valor_total from the lines.
          2. Insert the order row (status='processando').
          3. Insert the item rows.
          4. If the items cannot be written, remove the order row again so
             no empty order is left behind, then report the failure.
          5. Return the order with items.
        """
        valor_total = round(
            sum(item.quantidade * item.preco_unitario for item in payload.itens), 2
        )

        order_row = self.repo.create_order(gateway, user_id=user_id, valor_total=valor_total)
        order_id = order_row["id"]

        try:
            self.repo.create_items(
                gateway,
                [
                    {
                        "pedido_id": order_id,
                        "estampa_id": str(item.estampa_id),
                        "quantidade": item.quantidade,
                        "preco_unitario": item.preco_unitario,
                    }
                    for item in payload.itens
                ],
            )
        except GatewayError:
            logger.error("Items of order %s not written; removing the order", order_id)
            self.repo.delete_order(gateway, order_id)
            raise

        logger.info("Order %s placed by %s (total %.2f)", order_id, user_id, valor_total)
        order = self.repo.get_by_id(gateway, order_id, columns=USER_COLUMNS)
        if order is None:
            # Written but not readable back: RLS select policy mismatch
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Order created but could not be loaded",
            )
        return self.to_read(order)

    def list_user_orders(
        self,
        gateway: Gateway,
        user_id: uuid.UUID,
        status_filter: str = ALL_STATUSES,
    ) -> list[OrderRead]:
        """
        The user's orders with items, newest first.
        """
        orders = self.repo.list_for_user(gateway, user_id)
        return [self.to_read(o) for o in filter_orders(orders, status=status_filter)]

    def get_user_order(
        self,
        gateway: Gateway,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Get a single order for the user, including items.

        - 404 if order not found or does not belong to this user.
        """
        order = self.repo.get_by_id(gateway, order_id, columns=USER_COLUMNS)
        if not order or order.usuario_id != user_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return self.to_read(order)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        gateway: Gateway,
        text: str = "",
        status_filter: str = ALL_STATUSES,
    ) -> list[OrderRead]:
        """
        Admin board: every order, filtered by id / customer name and status.
        """
        orders = self.repo.list_all(gateway)
        return [self.to_read(o) for o in filter_orders(orders, text, status_filter)]

    def update_status(
        self,
        gateway: Gateway,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin-only status update.

        Any status may follow any other: there is no transition table.
        The backend answers with the bare row, so only ``status`` of the
        loaded order (customer, items, valor_total) is changed locally.
        """
        order = self.repo.get_by_id(gateway, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        self.repo.update_status(gateway, order_id, payload.status)
        logger.info("Order %s: %s -> %s", order_id, order.status, payload.status)

        [updated] = self.apply_status([order], order_id, payload.status)
        return self.to_read(updated)

    @staticmethod
    def apply_status(
        orders: list[Order],
        order_id: uuid.UUID,
        new_status: OrderStatus,
    ) -> list[Order]:
        """Local counterpart of a status change: nothing but ``status`` moves."""
        return patch(orders, order_id, status=new_status)

    # -------- Helper DTO builder --------

    def to_read(self, order: Order) -> OrderRead:
        """
        Compose OrderRead, including the subtotal recomputed from the items.

        valor_total is reported as stored. A mismatch is logged, not fixed.
        """
        items = order.itens or []
        item_dtos = [
            OrderItemRead(
                id=it.id,
                pedido_id=it.pedido_id,
                estampa_id=it.estampa_id,
                quantidade=it.quantidade,
                preco_unitario=it.preco_unitario,
                line_total=it.line_total,
                estampa=PatternRead.model_validate(it.estampa.model_dump()) if it.estampa else None,
            )
            for it in items
        ]
        subtotal = round(order.items_subtotal, 2)

        if items and abs(subtotal - order.valor_total) > 0.005:
            logger.warning(
                "Order %s: valor_total %.2f differs from items subtotal %.2f",
                order.id,
                order.valor_total,
                subtotal,
            )

        return OrderRead(
            id=order.id,
            usuario_id=order.usuario_id,
            data_pedido=order.data_pedido,
            status=order.status,
            valor_total=order.valor_total,
            usuario=order.usuario,
            itens=item_dtos,
            subtotal_itens=subtotal,
        )
