# charlotte/models/order.py
import uuid
from datetime import datetime
from typing import Literal

from sqlmodel import SQLModel, Field

from charlotte.models.pattern import Pattern
from charlotte.models.user import UserSummary

# processing | completed | canceled
OrderStatus = Literal["processando", "concluido", "cancelado"]


class OrderItem(SQLModel):
    """
    Line item inside an order (``itens_pedido``).

    quantidade and preco_unitario are a snapshot taken when the order was
    placed. The referenced pattern may later change or disappear (no
    cascade), in which case ``estampa`` comes back as None.
    """

    id: int

    pedido_id: uuid.UUID

    estampa_id: uuid.UUID

    quantidade: int = Field(gt=0)

    preco_unitario: float = Field(ge=0)

    created_at: datetime | None = None

    # Expanded join
    estampa: Pattern | None = None

    @property
    def line_total(self) -> float:
        return self.quantidade * self.preco_unitario


class Order(SQLModel):
    """
    Customer order (``pedidos``).

    valor_total is computed once when the order is placed and stored as is;
    it is never recomputed from ``itens`` afterwards.
    """

    id: uuid.UUID

    usuario_id: uuid.UUID

    data_pedido: datetime

    status: OrderStatus = "processando"

    valor_total: float

    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Expanded joins
    usuario: UserSummary | None = None
    itens: list[OrderItem] | None = None

    @property
    def items_subtotal(self) -> float:
        return sum(item.line_total for item in self.itens or [])
