# charlotte/repositories/pattern_repo.py
import uuid
from typing import Any

from charlotte.core.filters import CatalogFilter, remote_query
from charlotte.core.gateway import Gateway, Query
from charlotte.models.pattern import Pattern

TABLE = "estampas"


class PatternRepository:
    """
    Data access layer for patterns.

    - Pure gateway operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    def get_by_id(self, gateway: Gateway, pattern_id: uuid.UUID) -> Pattern | None:
        row = gateway.select_one(TABLE, {"id": str(pattern_id)})
        return Pattern.model_validate(row) if row else None

    def list_all(self, gateway: Gateway) -> list[Pattern]:
        """Full catalog, newest first."""
        rows = gateway.select(Query(table=TABLE))
        return [Pattern.model_validate(r) for r in rows]

    def search(self, gateway: Gateway, filters: CatalogFilter) -> list[Pattern]:
        """Catalog with text and tag predicates evaluated remotely."""
        rows = gateway.select(remote_query(TABLE, filters))
        return [Pattern.model_validate(r) for r in rows]

    def create(self, gateway: Gateway, values: dict[str, Any]) -> Pattern:
        return Pattern.model_validate(gateway.insert(TABLE, values))

    def update(
        self,
        gateway: Gateway,
        pattern_id: uuid.UUID,
        values: dict[str, Any],
    ) -> Pattern:
        row = gateway.update(TABLE, values, {"id": str(pattern_id)})
        return Pattern.model_validate(row)

    def delete(self, gateway: Gateway, pattern_id: uuid.UUID) -> bool:
        """True when a row was actually removed."""
        return bool(gateway.delete(TABLE, {"id": str(pattern_id)}))
