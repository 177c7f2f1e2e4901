# core/storage.py
import datetime
import json
import os
import sqlite3
from typing import List

import pytz

from .logger import get_logger
from .models import CartLine

logger = get_logger(__name__)

DB_PATH = os.getenv(
    "CART_DB_PATH", os.path.expanduser("~/.character_shop/shop.sqlite3")
)
CART_KEY = os.getenv("CART_KEY", "cart")


def now_utc_iso() -> str:
    return datetime.datetime.now(tz=pytz.UTC).isoformat()


class CartStore:
    """
    Durable client-side state: one key/value row per key in a local SQLite
    file. The cart is stored as the JSON list of its serialized lines.
    Failures are logged and never raised.
    """

    def __init__(self, db_path: str = DB_PATH, key: str = CART_KEY):
        self.db_path = db_path
        self.key = key

    def _connect(self):
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def ensure_db(self):
        with self._connect() as con:
            cur = con.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT,
                    updated_at TEXT
                )
            """
            )
            con.commit()

    def read_raw(self) -> str | None:
        self.ensure_db()
        with self._connect() as con:
            cur = con.cursor()
            cur.execute("SELECT value FROM kv WHERE key=?", (self.key,))
            row = cur.fetchone()
        return row[0] if row else None

    def write_raw(self, value: str):
        self.ensure_db()
        with self._connect() as con:
            cur = con.cursor()
            cur.execute(
                """
                INSERT INTO kv (key, value, updated_at)
                VALUES (?,?,?)
                ON CONFLICT(key) DO UPDATE SET
                    value=excluded.value,
                    updated_at=excluded.updated_at
            """,
                (self.key, value, now_utc_iso()),
            )
            con.commit()

    def load(self) -> List[CartLine]:
        """
        Return the persisted cart, or [] when absent, unreadable or corrupt.
        Lines sharing an identifier are merged into the first occurrence.
        """
        try:
            raw = self.read_raw()
        except (sqlite3.Error, OSError) as e:
            logger.warning("Failed to read cart from %s: %s", self.db_path, e)
            return []

        if not raw:
            return []

        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning("Persisted cart under '%s' is corrupt: %s", self.key, e)
            return []

        if not isinstance(data, list):
            logger.warning(
                "Persisted cart under '%s' is not a list (%s); ignoring.",
                self.key, type(data).__name__,
            )
            return []

        lines: List[CartLine] = []
        by_id = {}
        for entry in data:
            if not isinstance(entry, dict):
                logger.debug("Dropping malformed cart entry: %r", entry)
                continue
            line = CartLine.from_dict(entry)
            ident = line.identifier
            if not ident:
                logger.debug("Dropping cart entry without identifier: %r", entry)
                continue
            if ident in by_id:
                by_id[ident].qty += line.qty
                continue
            by_id[ident] = line
            lines.append(line)

        logger.debug("Loaded %d cart lines from %s", len(lines), self.db_path)
        return lines

    def save(self, lines: List[CartLine]):
        try:
            self.write_raw(json.dumps([line.to_dict() for line in lines]))
        except (sqlite3.Error, OSError, TypeError, ValueError) as e:
            logger.warning("Failed to persist cart to %s: %s", self.db_path, e)
