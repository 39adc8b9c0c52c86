"""SQLite-backed repository implementing the backing repository contract."""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Iterator, Sequence

from ..assets.types import AssetData, AssetId, Condition, OpType, Query
from .base import (
    AssetDataManager,
    AssetNotFoundError,
    AssociationError,
    AttributeNotDefinedError,
    RepositoryConnection,
    RepositoryError,
    Row,
)


logger = logging.getLogger(__name__)

# Attributes every asset carries as columns rather than attribute rows
CORE_COLUMNS = ("id", "name")

SCHEMA_SQL = """
-- Attributes each asset type defines
CREATE TABLE IF NOT EXISTS attribute_defs (
    assettype TEXT NOT NULL,
    name TEXT NOT NULL,
    PRIMARY KEY (assettype, name)
);

-- Assets; rowid gives the repository order
CREATE TABLE IF NOT EXISTS assets (
    assettype TEXT NOT NULL,
    id INTEGER NOT NULL,
    name TEXT NOT NULL,
    UNIQUE(assettype, id)
);

-- Attribute values, stored as text plus the kind needed to decode them
CREATE TABLE IF NOT EXISTS asset_attributes (
    assettype TEXT NOT NULL,
    assetid INTEGER NOT NULL,
    name TEXT NOT NULL,
    value TEXT,
    kind TEXT NOT NULL DEFAULT 'string',
    PRIMARY KEY (assettype, assetid, name)
);

-- Named associations between assets
CREATE TABLE IF NOT EXISTS associations (
    assettype TEXT NOT NULL,
    assetid INTEGER NOT NULL,
    name TEXT NOT NULL,
    target_type TEXT NOT NULL,
    target_id INTEGER NOT NULL
);

-- Sites and the assets they own
CREATE TABLE IF NOT EXISTS Publication (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS AssetPublication (
    id INTEGER PRIMARY KEY,
    pubid INTEGER NOT NULL REFERENCES Publication(id),
    assettype TEXT NOT NULL,
    assetid INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_assets_name ON assets(assettype, name);
CREATE INDEX IF NOT EXISTS idx_assoc_source ON associations(assettype, assetid, name);
CREATE INDEX IF NOT EXISTS idx_assetpub_asset ON AssetPublication(assettype, assetid);
"""

SQL_OPERATORS = {
    OpType.EQUALS: "=",
    OpType.NOT_EQUALS: "!=",
    OpType.LIKE: "LIKE",
    OpType.GREATER_THAN: ">",
    OpType.LESS_THAN: "<",
}


def encode_value(value: Any) -> tuple[str | None, str]:
    """Encode an attribute value as (text, kind)."""
    if value is None:
        return None, "string"
    if isinstance(value, AssetId):
        return str(value), "assetid"
    if isinstance(value, datetime):
        return value.isoformat(), "date"
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day).isoformat(), "date"
    if isinstance(value, bool):
        return str(value).lower(), "string"
    if isinstance(value, int):
        return str(value), "int"
    if isinstance(value, float):
        return repr(value), "float"
    return str(value), "string"


def decode_value(text: str | None, kind: str) -> Any:
    """Decode a stored (text, kind) pair back into a Python value."""
    if text is None:
        return None
    if kind == "assetid":
        return AssetId.parse(text)
    if kind == "date":
        return datetime.fromisoformat(text)
    if kind == "int":
        return int(text)
    if kind == "float":
        return float(text)
    return text


def init_db(db_path: str | Path = ":memory:") -> sqlite3.Connection:
    """Open the database and create tables if they don't exist."""
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.executescript(SCHEMA_SQL)
    conn.commit()
    return conn


class SqliteAssetDataManager(AssetDataManager):
    """Asset reads against the SQLite schema."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # =========================================================================
    # AssetDataManager
    # =========================================================================

    def read(self, ids: Sequence[AssetId]) -> Iterable[AssetData]:
        results = []
        try:
            for asset_id in ids:
                if self._asset_row(asset_id) is None:
                    continue
                names = list(CORE_COLUMNS) + self.defined_attributes(asset_id.type)
                results.append(self._load(asset_id, names))
        except sqlite3.Error as e:
            raise RepositoryError(f"Read failed: {e}") from e
        return results

    def read_attributes(self, asset_id: AssetId, attributes: Sequence[str]) -> AssetData:
        try:
            if self._asset_row(asset_id) is None:
                raise AssetNotFoundError(f"Asset not found: {asset_id}")
            self._check_defined(asset_id.type, attributes)
            return self._load(asset_id, list(attributes))
        except sqlite3.Error as e:
            raise RepositoryError(f"Read failed for {asset_id}: {e}") from e

    def search(self, query: Query) -> Iterable[AssetData]:
        try:
            self._check_defined(query.asset_type, [c.attribute for c in query.conditions])
            self._check_defined(query.asset_type, query.order_by)
            if query.attributes is not None:
                self._check_defined(query.asset_type, query.attributes)
            sql, params = self._build_search(query)
        except sqlite3.Error as e:
            raise RepositoryError(f"Search failed: {e}") from e
        logger.debug(f"Search on {query.asset_type}: {sql} {params}")
        return self._iter_search(query, sql, params)

    # =========================================================================
    # Helpers
    # =========================================================================

    def defined_attributes(self, asset_type: str) -> list[str]:
        """Names of the non-core attributes defined for a type."""
        cursor = self.conn.execute(
            "SELECT name FROM attribute_defs WHERE assettype = ? ORDER BY rowid",
            (asset_type,),
        )
        return [row["name"] for row in cursor.fetchall()]

    def _check_defined(self, asset_type: str, attributes: Iterable[str]) -> None:
        defined = set(CORE_COLUMNS) | set(self.defined_attributes(asset_type))
        for name in attributes:
            if name not in defined:
                raise AttributeNotDefinedError(
                    f"Attribute '{name}' is not defined for asset type {asset_type}"
                )

    def _asset_row(self, asset_id: AssetId) -> sqlite3.Row | None:
        cursor = self.conn.execute(
            "SELECT assettype, id, name FROM assets WHERE assettype = ? AND id = ?",
            (asset_id.type, asset_id.id),
        )
        return cursor.fetchone()

    def _load(self, asset_id: AssetId, names: list[str]) -> AssetData:
        row = self._asset_row(asset_id)
        stored = {
            r["name"]: decode_value(r["value"], r["kind"])
            for r in self.conn.execute(
                "SELECT name, value, kind FROM asset_attributes WHERE assettype = ? AND assetid = ?",
                (asset_id.type, asset_id.id),
            ).fetchall()
        }
        attributes: dict[str, Any] = {}
        for name in names:
            if name == "id":
                attributes[name] = row["id"]
            elif name == "name":
                attributes[name] = row["name"]
            else:
                attributes[name] = stored.get(name)
        return AssetData(asset_id, attributes)

    def _column_expr(self, attribute: str, params: list[Any]) -> str:
        if attribute in CORE_COLUMNS:
            return f"a.{attribute}"
        params.append(attribute)
        return (
            "(SELECT v.value FROM asset_attributes v "
            "WHERE v.assettype = a.assettype AND v.assetid = a.id AND v.name = ?)"
        )

    def _condition_sql(self, condition: Condition, params: list[Any]) -> str:
        # Stored values are text; numeric condition values compare numerically
        column = self._column_expr(condition.attribute, params)
        text, kind = encode_value(condition.value)
        if kind in ("int", "float"):
            if condition.attribute not in CORE_COLUMNS:
                column = f"CAST({column} AS REAL)"
            params.append(condition.value)
        else:
            params.append(text)
        return f"{column} {SQL_OPERATORS[condition.op]} ?"

    def _build_search(self, query: Query) -> tuple[str, list[Any]]:
        params: list[Any] = [query.asset_type]
        clauses = ["a.assettype = ?"]
        for condition in query.conditions:
            clauses.append(self._condition_sql(condition, params))

        order = [self._column_expr(name, params) for name in query.order_by]
        order.append("a.rowid")

        sql = (
            "SELECT a.assettype, a.id FROM assets a "
            f"WHERE {' AND '.join(clauses)} "
            f"ORDER BY {', '.join(order)}"
        )
        return sql, params

    def _iter_search(self, query: Query, sql: str, params: list[Any]) -> Iterator[AssetData]:
        try:
            cursor = self.conn.execute(sql, params)
            for row in cursor:
                asset_id = AssetId(row["assettype"], row["id"])
                if query.attributes is None:
                    names = list(CORE_COLUMNS) + self.defined_attributes(asset_id.type)
                else:
                    names = list(query.attributes)
                yield self._load(asset_id, names)
        except sqlite3.Error as e:
            raise RepositoryError(f"Search failed: {e}") from e


class SqliteRepository(RepositoryConnection):
    """
    Repository session over a SQLite database.

    Besides the read contract it exposes population helpers used by the
    loader and by tests.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    @classmethod
    def open(cls, db_path: str | Path = ":memory:") -> SqliteRepository:
        """Open (and initialize) a repository database."""
        return cls(init_db(db_path))

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> SqliteRepository:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =========================================================================
    # RepositoryConnection
    # =========================================================================

    def get_manager(self) -> AssetDataManager:
        return SqliteAssetDataManager(self.conn)

    def get_single_association(self, asset_id: AssetId, name: str) -> AssetId | None:
        try:
            rows = self.conn.execute(
                "SELECT target_type, target_id FROM associations "
                "WHERE assettype = ? AND assetid = ? AND name = ? ORDER BY rowid",
                (asset_id.type, asset_id.id, name),
            ).fetchall()
        except sqlite3.Error as e:
            raise RepositoryError(f"Association lookup failed for {asset_id}: {e}") from e

        if not rows:
            return None
        if len(rows) > 1:
            raise AssociationError(
                f"Expected at most one '{name}' association on {asset_id}, found {len(rows)}"
            )
        return AssetId(rows[0]["target_type"], rows[0]["target_id"])

    def select(
        self,
        sql: str,
        params: Sequence[Any] = (),
        tables: Sequence[str] = (),
    ) -> Iterator[Row]:
        logger.debug(f"Select on {', '.join(tables) or 'unspecified tables'}: {sql}")
        try:
            cursor = self.conn.execute(sql, tuple(params))
            yield from cursor
        except sqlite3.Error as e:
            raise RepositoryError(f"Select failed: {e}") from e

    # =========================================================================
    # Population
    # =========================================================================

    def define_type(self, asset_type: str, attributes: Iterable[str]) -> None:
        """Define (or extend) the attribute set of an asset type."""
        self.conn.executemany(
            "INSERT OR IGNORE INTO attribute_defs (assettype, name) VALUES (?, ?)",
            [(asset_type, name) for name in attributes if name not in CORE_COLUMNS],
        )
        self.conn.commit()

    def add_asset(self, asset_id: AssetId, name: str, attributes: dict[str, Any] | None = None) -> None:
        """Insert an asset; its attribute names are added to the type definition."""
        attributes = attributes or {}
        self.define_type(asset_id.type, attributes.keys())
        self.conn.execute(
            "INSERT INTO assets (assettype, id, name) VALUES (?, ?, ?)",
            (asset_id.type, asset_id.id, name),
        )
        rows = []
        for attr_name, value in attributes.items():
            if attr_name in CORE_COLUMNS:
                continue
            text, kind = encode_value(value)
            rows.append((asset_id.type, asset_id.id, attr_name, text, kind))
        self.conn.executemany(
            "INSERT INTO asset_attributes (assettype, assetid, name, value, kind) VALUES (?, ?, ?, ?, ?)",
            rows,
        )
        self.conn.commit()

    def add_association(self, asset_id: AssetId, name: str, target: AssetId) -> None:
        self.conn.execute(
            "INSERT INTO associations (assettype, assetid, name, target_type, target_id) "
            "VALUES (?, ?, ?, ?, ?)",
            (asset_id.type, asset_id.id, name, target.type, target.id),
        )
        self.conn.commit()

    def add_publication(self, name: str, pubid: int | None = None) -> int:
        """Get or create a publication by name and return its id."""
        row = self.conn.execute(
            "SELECT id FROM Publication WHERE name = ?", (name,)
        ).fetchone()
        if row:
            return row["id"]
        cursor = self.conn.execute(
            "INSERT INTO Publication (id, name) VALUES (?, ?)", (pubid, name)
        )
        self.conn.commit()
        return cursor.lastrowid

    def share(self, asset_id: AssetId, publication: str) -> None:
        """Record that a publication owns an asset."""
        pubid = self.add_publication(publication)
        self.conn.execute(
            "INSERT INTO AssetPublication (pubid, assettype, assetid) VALUES (?, ?, ?)",
            (pubid, asset_id.type, asset_id.id),
        )
        self.conn.commit()
