import hashlib
import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .schema import ProductRecord

logger = logging.getLogger(__name__)

COLUMNS = ("id", "workspace_id", "url", "title", "image", "price", "size", "is_favorite", "error", "updated_at")


def key_for(url: str) -> str:
    return hashlib.md5(url.encode("utf-8")).hexdigest()


class ProductCache(ABC):
    """
    Store for scraped records, keyed by (id, workspace_id).

    `put` is an upsert with last-write-wins semantics and leaves is_favorite
    alone on existing rows. It never raises: a failed write is logged and
    reported as False so the caller can still return the fresh record.
    """

    @abstractmethod
    def get(self, id: str, workspace_id: str) -> Optional[ProductRecord]:
        raise NotImplementedError

    @abstractmethod
    def put(self, record: ProductRecord) -> bool:
        raise NotImplementedError

    @abstractmethod
    def list(self, workspace_id: str, favorites_only: bool = False) -> List[ProductRecord]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, id: str, workspace_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def set_favorite(self, id: str, workspace_id: str, is_favorite: bool) -> Optional[ProductRecord]:
        raise NotImplementedError


class SqliteProductCache(ProductCache):
    def __init__(self, db_path: str = "products.db", table: str = "products"):
        self.db_path = str(db_path)
        self.table = table
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        with closing(self._connect()) as conn:
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table} (
                    id TEXT NOT NULL,
                    workspace_id TEXT NOT NULL,
                    url TEXT,
                    title TEXT,
                    image TEXT,
                    price TEXT,
                    size TEXT,
                    is_favorite INTEGER NOT NULL DEFAULT 0,
                    error TEXT,
                    updated_at TEXT,
                    PRIMARY KEY (id, workspace_id)
                );
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{self.table}_ws_updated ON {self.table}(workspace_id, updated_at);"
            )
            conn.commit()

    def _connect(self) -> sqlite3.Connection:
        # one connection per call; requests are served from worker threads
        conn = sqlite3.connect(self.db_path, timeout=5.0)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _to_record(row: sqlite3.Row) -> ProductRecord:
        data = dict(row)
        data["is_favorite"] = bool(data.get("is_favorite"))
        return ProductRecord.model_validate(data)

    def get(self, id: str, workspace_id: str) -> Optional[ProductRecord]:
        with closing(self._connect()) as conn:
            row = conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ? AND workspace_id = ?", (id, workspace_id)
            ).fetchone()
        return self._to_record(row) if row else None

    def put(self, record: ProductRecord) -> bool:
        data = record.model_dump()
        data["is_favorite"] = int(data["is_favorite"])
        data["updated_at"] = (record.updated_at or datetime.now(timezone.utc)).isoformat()
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    f"""
                    INSERT INTO {self.table} ({", ".join(COLUMNS)})
                    VALUES ({", ".join(":" + c for c in COLUMNS)})
                    ON CONFLICT(id, workspace_id) DO UPDATE SET
                        url = excluded.url,
                        title = excluded.title,
                        image = excluded.image,
                        price = excluded.price,
                        size = excluded.size,
                        error = excluded.error,
                        updated_at = excluded.updated_at
                    """,
                    data,
                )
        except sqlite3.Error:
            logger.exception("DB Write Error for %s", record.url)
            return False
        return True

    def list(self, workspace_id: str, favorites_only: bool = False) -> List[ProductRecord]:
        sql = f"SELECT * FROM {self.table} WHERE workspace_id = ?"
        if favorites_only:
            sql += " AND is_favorite = 1"
        sql += " ORDER BY updated_at DESC"
        with closing(self._connect()) as conn:
            rows = conn.execute(sql, (workspace_id,)).fetchall()
        return [self._to_record(r) for r in rows]

    def delete(self, id: str, workspace_id: str) -> bool:
        with closing(self._connect()) as conn, conn:
            cur = conn.execute(f"DELETE FROM {self.table} WHERE id = ? AND workspace_id = ?", (id, workspace_id))
        return cur.rowcount > 0

    def set_favorite(self, id: str, workspace_id: str, is_favorite: bool) -> Optional[ProductRecord]:
        with closing(self._connect()) as conn, conn:
            cur = conn.execute(
                f"UPDATE {self.table} SET is_favorite = ? WHERE id = ? AND workspace_id = ?",
                (int(is_favorite), id, workspace_id),
            )
        if cur.rowcount == 0:
            return None
        return self.get(id, workspace_id)


class SupabaseProductCache(ProductCache):
    """
    Expected DB setup:
    - `products` has a UNIQUE constraint on (id, workspace_id)
    - `is_favorite` boolean default false, `updated_at` timestamptz
    """

    def __init__(self, client, table: str = "products"):
        self.client = client
        self.table = table

    def _rows(self, resp) -> List[Dict[str, Any]]:
        # supabase-py v2: resp.data; older versions: resp.get("data")
        return getattr(resp, "data", None) or []

    def get(self, id: str, workspace_id: str) -> Optional[ProductRecord]:
        resp = (
            self.client.table(self.table)
            .select("*")
            .eq("id", id)
            .eq("workspace_id", workspace_id)
            .limit(1)
            .execute()
        )
        rows = self._rows(resp)
        return ProductRecord.model_validate(rows[0]) if rows else None

    def put(self, record: ProductRecord) -> bool:
        row = record.model_dump(mode="json", exclude={"is_favorite"})
        row["updated_at"] = row.get("updated_at") or datetime.now(timezone.utc).isoformat()
        try:
            resp = (
                self.client.table(self.table)
                .upsert(row, on_conflict="id,workspace_id")
                .execute()
            )
        except Exception:
            logger.exception("Supabase upsert() raised an exception for %s", record.url)
            return False

        error = getattr(resp, "error", None)
        if error:
            logger.error("Supabase response.error: %s", error)
            return False
        return True

    def list(self, workspace_id: str, favorites_only: bool = False) -> List[ProductRecord]:
        query = self.client.table(self.table).select("*").eq("workspace_id", workspace_id)
        if favorites_only:
            query = query.eq("is_favorite", True)
        resp = query.order("updated_at", desc=True).execute()
        return [ProductRecord.model_validate(r) for r in self._rows(resp)]

    def delete(self, id: str, workspace_id: str) -> bool:
        resp = self.client.table(self.table).delete().eq("id", id).eq("workspace_id", workspace_id).execute()
        return bool(self._rows(resp))

    def set_favorite(self, id: str, workspace_id: str, is_favorite: bool) -> Optional[ProductRecord]:
        resp = (
            self.client.table(self.table)
            .update({"is_favorite": is_favorite})
            .eq("id", id)
            .eq("workspace_id", workspace_id)
            .execute()
        )
        rows = self._rows(resp)
        return ProductRecord.model_validate(rows[0]) if rows else None
