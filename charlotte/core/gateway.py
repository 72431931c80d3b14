# charlotte/core/gateway.py
"""
Remote data gateway.

Every read and write of the application goes through a ``Gateway``: a
table-like view of the hosted backend (PostgREST) plus its blob store
(Supabase Storage). A gateway is constructed per request with the caller's
access token, so the backend's row-level security decides what the caller
may see or change.

Failure taxonomy:
  - GatewayError      : the remote call itself failed (network, permission,
                        validation). Nothing was changed locally.
  - SilentWriteError  : the write "succeeded" but affected no row, which is
                        how PostgREST reports an RLS rejection on
                        update/delete. Treated as a failure, never as success.
"""
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from postgrest.exceptions import APIError
from storage3.exceptions import StorageApiError
from supabase import Client

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """A remote call failed; the operation was abandoned."""

    def __init__(self, message: str, *, table: str | None = None):
        super().__init__(message)
        self.message = message
        self.table = table


class SilentWriteError(GatewayError):
    """A write returned no error but also no affected row."""


@dataclass
class Query:
    """
    Declarative select against one table.

    - columns     : PostgREST select string, may expand relations
                    (e.g. "*, usuario:usuarios_ext(nome_completo)")
    - match       : column == value conditions (AND)
    - search      : case-insensitive substring searched in any of
                    ``search_columns`` (OR across columns)
    - overlaps    : array column -> values; row matches if it shares any value
    - order_by    : timestamp column used for ordering, newest first by default
    """

    table: str
    columns: str = "*"
    match: dict[str, Any] = field(default_factory=dict)
    search: str | None = None
    search_columns: tuple[str, ...] = ()
    overlaps: dict[str, list[str]] = field(default_factory=dict)
    order_by: str | None = "created_at"
    descending: bool = True


class Gateway:
    """
    Interface of the remote data gateway.

    Implementations: SupabaseGateway (production) and the in-memory fake
    used by the test-suite.
    """

    # ----- Tables -----

    def select(self, query: Query) -> list[dict[str, Any]]:
        raise NotImplementedError

    def select_one(
        self,
        table: str,
        match: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any] | None:
        rows = self.select(
            Query(table=table, columns=columns, match=match, order_by=None)
        )
        return rows[0] if rows else None

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    def insert_many(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        raise NotImplementedError

    def update(
        self,
        table: str,
        values: dict[str, Any],
        match: dict[str, Any],
    ) -> dict[str, Any]:
        raise NotImplementedError

    def delete(self, table: str, match: dict[str, Any]) -> list[dict[str, Any]]:
        raise NotImplementedError

    # ----- Blob store -----

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        raise NotImplementedError

    def public_url(self, path: str) -> str:
        raise NotImplementedError

    def remove(self, paths: list[str]) -> None:
        raise NotImplementedError


def _quote(value: str) -> str:
    """Double-quote a PostgREST filter value (commas, dots, parens are reserved)."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def ilike_pattern(term: str) -> str:
    """
    Build a quoted ``ilike`` operand matching ``term`` as a substring.

    LIKE wildcards typed by the user are escaped so they match literally.
    PostgREST still reads ``*`` as a wildcard, so the remote result may be
    wider than a literal substring match.
    """
    like = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return _quote(f"*{like}*")


def array_literal(values: list[str]) -> str:
    """
    Render values as a PostgreSQL array literal, e.g. ``{floral,"a,b"}``.

    Elements are quoted only when PostgreSQL requires it. Passing the
    literal as a string keeps postgrest from quoting the elements again.
    """
    elements = []
    for value in values:
        if (
            value == ""
            or value.lower() == "null"
            or any(ch in value for ch in '{},"\\')
            or any(ch.isspace() for ch in value)
        ):
            value = _quote(value)
        elements.append(value)
    return "{" + ",".join(elements) + "}"


class SupabaseGateway(Gateway):
    """
    Gateway backed by a supabase ``Client`` (PostgREST + Storage).
    """

    def __init__(self, client: Client, bucket: str):
        self.client = client
        self.bucket = bucket

    def _execute(self, builder, table: str) -> list[dict[str, Any]]:
        try:
            response = builder.execute()
        except APIError as exc:
            logger.warning("Remote call on %s failed: %s", table, exc.message)
            raise GatewayError(exc.message or "Remote call failed", table=table) from exc
        except httpx.HTTPError as exc:
            logger.warning("Remote call on %s failed: %s", table, exc)
            raise GatewayError("Backend unreachable", table=table) from exc
        return list(response.data or [])

    # ----- Tables -----

    def select(self, query: Query) -> list[dict[str, Any]]:
        builder = self.client.table(query.table).select(query.columns)

        for column, value in query.match.items():
            builder = builder.eq(column, value)

        if query.search and query.search_columns:
            pattern = ilike_pattern(query.search)
            builder = builder.or_(
                ",".join(f"{column}.ilike.{pattern}" for column in query.search_columns)
            )

        for column, values in query.overlaps.items():
            builder = builder.ov(column, array_literal(values))

        if query.order_by:
            builder = builder.order(query.order_by, desc=query.descending)

        return self._execute(builder, query.table)

    def select_one(
        self,
        table: str,
        match: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any] | None:
        builder = self.client.table(table).select(columns)
        for column, value in match.items():
            builder = builder.eq(column, value)
        rows = self._execute(builder.limit(1), table)
        return rows[0] if rows else None

    def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        rows = self._execute(self.client.table(table).insert(row), table)
        if not rows:
            raise SilentWriteError("Insert was not applied", table=table)
        return rows[0]

    def insert_many(self, table: str, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        inserted = self._execute(self.client.table(table).insert(rows), table)
        if len(inserted) != len(rows):
            raise SilentWriteError("Insert was not applied", table=table)
        return inserted

    def update(
        self,
        table: str,
        values: dict[str, Any],
        match: dict[str, Any],
    ) -> dict[str, Any]:
        builder = self.client.table(table).update(values)
        for column, value in match.items():
            builder = builder.eq(column, value)
        rows = self._execute(builder, table)
        if not rows:
            raise SilentWriteError("Update was not applied", table=table)
        return rows[0]

    def delete(self, table: str, match: dict[str, Any]) -> list[dict[str, Any]]:
        builder = self.client.table(table).delete()
        for column, value in match.items():
            builder = builder.eq(column, value)
        return self._execute(builder, table)

    # ----- Blob store -----

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        try:
            self.client.storage.from_(self.bucket).upload(
                path,
                data,
                {"content-type": content_type, "upsert": "true"},
            )
        except (StorageApiError, httpx.HTTPError) as exc:
            logger.warning("Upload of %s failed: %s", path, exc)
            raise GatewayError(f"Upload failed: {exc}") from exc
        return self.public_url(path)

    def public_url(self, path: str) -> str:
        return self.client.storage.from_(self.bucket).get_public_url(path)

    def remove(self, paths: list[str]) -> None:
        try:
            self.client.storage.from_(self.bucket).remove(paths)
        except (StorageApiError, httpx.HTTPError) as exc:
            raise GatewayError(f"Remove failed: {exc}") from exc
