# charlotte/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field

from charlotte.models.order import OrderStatus
from charlotte.models.user import UserSummary
from charlotte.schemas.pattern import PatternRead

# Status filter of the order pages; "todos" means no constraint
StatusFilter = Literal["todos", "processando", "concluido", "cancelado"]


class OrderItemCreate(SQLModel):
    """
    One line of a new order.

    preco_unitario is the price quoted to the customer; it is stored as a
    snapshot and never refreshed from the pattern.
    """

    model_config = ConfigDict(extra="forbid")

    estampa_id: uuid.UUID
    quantidade: int = Field(gt=0)
    preco_unitario: float = Field(ge=0)


class OrderCreate(SQLModel):
    """
    Payload for placing an order.

    Backend derives:
      - usuario_id from token
      - status = 'processando'
      - valor_total = sum of the lines, computed once
    """

    model_config = ConfigDict(extra="forbid")

    itens: list[OrderItemCreate] = Field(min_length=1)


class OrderItemRead(SQLModel):
    id: int
    pedido_id: uuid.UUID
    estampa_id: uuid.UUID
    quantidade: int
    preco_unitario: float
    line_total: float
    estampa: PatternRead | None = None


class OrderRead(SQLModel):
    """
    Order with items.

    valor_total is the stored snapshot; subtotal_itens is recomputed from
    the lines for display and may differ.
    """

    id: uuid.UUID
    usuario_id: uuid.UUID
    data_pedido: datetime
    status: OrderStatus
    valor_total: float
    usuario: UserSummary | None = None
    itens: list[OrderItemRead]
    subtotal_itens: float


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
