# tests/conftest.py
import os

# Settings are read once, at import time of the application modules.
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-secret")
os.environ.pop("SUPABASE_SERVICE_ROLE_KEY", None)

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest
from fastapi.testclient import TestClient

from charlotte.core.auth import get_gateway, get_session
from charlotte.core.auth_context import AuthSession
from charlotte.core.gateway import Gateway, GatewayError, Query, SilentWriteError
from charlotte.main import app

BUCKET = "estampas"
PUBLIC_PREFIX = f"https://test.supabase.co/storage/v1/object/public/{BUCKET}/"

# Tables whose primary key is a bigint sequence
INT_IDS = {"itens_pedido", "comentarios"}
UUID_IDS = {"estampas", "pedidos"}

DEFAULTS: dict[str, dict[str, Any]] = {
    "estampas": {"descricao": None, "imagem_url": None, "tags": [], "paleta_cores": {}, "criado_por": None},
    "usuarios_ext": {"avatar_url": None, "role": "cliente"},
    "pedidos": {"status": "processando"},
}


class InMemoryGateway(Gateway):
    """
    Gateway fake holding tables as lists of dicts.

    Follows the PostgREST semantics the application relies on:
    equality matches, ilike search across columns, array overlap, newest
    first ordering, relation expansion for the aliases used by the
    repositories, update/delete answering with the affected rows.

    Knobs:
      - deny_writes: tables where writes affect nothing (RLS rejection)
      - fail_tables: tables where every call raises GatewayError
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.files: dict[str, bytes] = {}
        self.deny_writes: set[str] = set()
        self.fail_tables: set[str] = set()
        self.removed_paths: list[str] = []
        self.queries: list[Query] = []
        self._seq = 0
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    # ----- helpers -----

    def _tick(self) -> str:
        self._seq += 1
        return (self._clock + timedelta(seconds=self._seq)).isoformat()

    def _check(self, table: str) -> None:
        if table in self.fail_tables:
            raise GatewayError(f"{table} unavailable", table=table)

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    @staticmethod
    def _matches(row: dict[str, Any], match: dict[str, Any]) -> bool:
        return all(str(row.get(k)) == str(v) for k, v in match.items())

    def _find(self, table: str, match: dict[str, Any]) -> dict[str, Any] | None:
        return next((r for r in self.rows(table) if self._matches(r, match)), None)

    def _expand(self, table: str, row: dict[str, Any], columns: str) -> dict[str, Any]:
        out = dict(row)
        if table == "pedidos":
            if "usuario:" in columns:
                user = self._find("usuarios_ext", {"id": row["usuario_id"]})
                out["usuario"] = {"nome_completo": user["nome_completo"]} if user else None
            if "itens:" in columns:
                out["itens"] = [
                    {**item, "estampa": self._find("estampas", {"id": item["estampa_id"]})}
                    for item in self.rows("itens_pedido")
                    if str(item["pedido_id"]) == str(row["id"])
                ]
        elif table == "comentarios" and "usuario:" in columns:
            user = self._find("usuarios_ext", {"id": row["usuario_id"]})
            out["usuario"] = (
                {"nome_completo": user["nome_completo"], "avatar_url": user["avatar_url"]}
                if user
                else None
            )
        elif table == "favoritos" and "estampa:" in columns:
            out["estampa"] = self._find("estampas", {"id": row["estampa_id"]})
        return out

    # ----- tables -----

    def select(self, query: Query) -> list[dict[str, Any]]:
        self._check(query.table)
        self.queries.append(query)
        result = [r for r in self.rows(query.table) if self._matches(r, query.match)]

        if query.search and query.search_columns:
            # PostgREST reads `*` in an ilike operand as `%`
            needle = re.compile(
                ".*".join(re.escape(part) for part in query.search.lower().split("*"))
            )
            result = [
                r
                for r in result
                if any(needle.search((r.get(c) or "").lower()) for c in query.search_columns)
            ]

        for column, values in query.overlaps.items():
            result = [r for r in result if any(v in (r.get(column) or []) for v in values)]

        if query.order_by:
            result = sorted(
                result,
                key=lambda r: r.get(query.order_by) or "",
                reverse=query.descending,
            )

        return [self._expand(query.table, r, query.columns) for r in result]

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        return self.insert_many(table, [row])[0]

    def insert_many(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        self._check(table)
        if table in self.deny_writes:
            raise SilentWriteError("Insert was not applied", table=table)
        inserted = []
        for row in rows:
            new = {**DEFAULTS.get(table, {}), **row}
            if "id" not in new:
                if table in INT_IDS:
                    new["id"] = len(self.rows(table)) + 1
                elif table in UUID_IDS:
                    new["id"] = str(uuid.uuid4())
            stamp = self._tick()
            new.setdefault("created_at", stamp)
            new.setdefault("updated_at", stamp)
            self.rows(table).append(new)
            inserted.append(dict(new))
        return inserted

    def update(
        self,
        table: str,
        values: dict[str, Any],
        match: dict[str, Any],
    ) -> dict[str, Any]:
        self._check(table)
        targets = [] if table in self.deny_writes else [
            r for r in self.rows(table) if self._matches(r, match)
        ]
        if not targets:
            raise SilentWriteError("Update was not applied", table=table)
        for row in targets:
            row.update(values)
            row["updated_at"] = self._tick()
        return dict(targets[0])

    def delete(self, table: str, match: dict[str, Any]) -> list[dict[str, Any]]:
        self._check(table)
        if table in self.deny_writes:
            return []
        removed = [r for r in self.rows(table) if self._matches(r, match)]
        self.tables[table] = [r for r in self.rows(table) if not self._matches(r, match)]
        return removed

    # ----- blob store -----

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        self._check("storage")
        self.files[path] = data
        return self.public_url(path)

    def public_url(self, path: str) -> str:
        return PUBLIC_PREFIX + path

    def remove(self, paths: list[str]) -> None:
        self._check("storage")
        for path in paths:
            self.removed_paths.append(path)
            self.files.pop(path, None)


# ----- seed helpers -----


def add_user(gateway: InMemoryGateway, role: str = "cliente", nome: str = "Ana Souza") -> dict:
    return gateway.insert(
        "usuarios_ext",
        {"id": str(uuid.uuid4()), "nome_completo": nome, "role": role},
    )


def add_pattern(gateway: InMemoryGateway, **fields: Any) -> dict:
    row = {"nome": "Padrão", "codigo": f"EST-{uuid.uuid4().hex[:6]}"}
    row.update(fields)
    return gateway.insert("estampas", row)


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def customer(gateway) -> dict:
    return add_user(gateway, "cliente", "Ana Souza")


@pytest.fixture
def admin(gateway) -> dict:
    return add_user(gateway, "admin", "Carla Admin")


@pytest.fixture
def login() -> Callable[[dict], None]:
    """Act as the given profile row on the following requests."""

    def act_as(user: dict) -> None:
        app.dependency_overrides[get_session] = lambda: AuthSession(
            user_id=uuid.UUID(user["id"]), email="user@example.com", access_token="token"
        )

    return act_as


@pytest.fixture
def client(gateway) -> TestClient:
    """
    TestClient wired to the in-memory gateway.

    The lifespan runs, so every test starts from a fresh catalog snapshot.
    """
    app.dependency_overrides[get_gateway] = lambda: gateway
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
