# charlotte/repositories/order_repo.py
import uuid
from datetime import datetime, timezone
from typing import Any

from charlotte.core.gateway import Gateway, Query
from charlotte.models.order import Order

ORDERS = "pedidos"
ITEMS = "itens_pedido"

# Customer view: items with their patterns
USER_COLUMNS = "*, itens:itens_pedido(*, estampa:estampas(*))"

# Admin board: plus the customer's name
ADMIN_COLUMNS = (
    "*, usuario:usuarios_ext(nome_completo), itens:itens_pedido(*, estampa:estampas(*))"
)


class OrderRepository:
    """
    Data access layer for pedidos and itens_pedido.

    NOTE:
      - The backend offers no multi-table transaction here; the service
        compensates when the items of a new order cannot be written.
    """

    # ---- Orders ----

    def list_for_user(self, gateway: Gateway, user_id: uuid.UUID) -> list[Order]:
        rows = gateway.select(
            Query(
                table=ORDERS,
                columns=USER_COLUMNS,
                match={"usuario_id": str(user_id)},
                order_by="data_pedido",
            )
        )
        return [Order.model_validate(r) for r in rows]

    def list_all(self, gateway: Gateway) -> list[Order]:
        rows = gateway.select(
            Query(table=ORDERS, columns=ADMIN_COLUMNS, order_by="data_pedido")
        )
        return [Order.model_validate(r) for r in rows]

    def get_by_id(
        self,
        gateway: Gateway,
        order_id: uuid.UUID,
        columns: str = ADMIN_COLUMNS,
    ) -> Order | None:
        row = gateway.select_one(ORDERS, {"id": str(order_id)}, columns=columns)
        return Order.model_validate(row) if row else None

    def create_order(
        self,
        gateway: Gateway,
        *,
        user_id: uuid.UUID,
        valor_total: float,
    ) -> dict[str, Any]:
        """Insert the order row; returns the bare row (no items yet)."""
        return gateway.insert(
            ORDERS,
            {
                "usuario_id": str(user_id),
                "status": "processando",
                "valor_total": valor_total,
                "data_pedido": datetime.now(timezone.utc).isoformat(),
            },
        )

    def update_status(self, gateway: Gateway, order_id: uuid.UUID, status: str) -> dict[str, Any]:
        return gateway.update(ORDERS, {"status": status}, {"id": str(order_id)})

    def delete_order(self, gateway: Gateway, order_id: uuid.UUID) -> None:
        gateway.delete(ORDERS, {"id": str(order_id)})

    # ---- Order items ----

    def create_items(self, gateway: Gateway, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return gateway.insert_many(ITEMS, rows)
