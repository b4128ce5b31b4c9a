"""
SQL DDL statements for the stock tracker tables.

Everything here is idempotent (IF NOT EXISTS) and safe to call on every startup.
"""
import sqlite3

from toystock.db.database import get_connection

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

CREATE_STOCKS_TABLE = """
CREATE TABLE IF NOT EXISTS stocks (
    id              TEXT    PRIMARY KEY,
    user_id         TEXT    NOT NULL,
    item_name       TEXT    NOT NULL CHECK(length(item_name) > 0),
    item_code       TEXT    NOT NULL CHECK(length(item_code) > 0),
    purchase_price  REAL    NOT NULL DEFAULT 0.0 CHECK(purchase_price >= 0),
    selling_price   REAL    NOT NULL DEFAULT 0.0 CHECK(selling_price >= 0),
    quantity        INTEGER NOT NULL DEFAULT 0   CHECK(quantity >= 0),
    stock_value     REAL    NOT NULL DEFAULT 0.0,
    created_at      TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_STOCKS_OWNER_INDEX = """
CREATE INDEX IF NOT EXISTS ix_stocks_user_created
    ON stocks (user_id, created_at);
"""

ALL_STATEMENTS = [
    CREATE_STOCKS_TABLE,
    CREATE_STOCKS_OWNER_INDEX,
]


def create_schema(conn: sqlite3.Connection) -> None:
    """Run every DDL statement on an open connection."""
    cursor = conn.cursor()
    for ddl in ALL_STATEMENTS:
        cursor.execute(ddl)
    conn.commit()


def create_tables() -> None:
    """Create all tables on a fresh connection."""
    conn = get_connection()
    try:
        create_schema(conn)
    finally:
        conn.close()
