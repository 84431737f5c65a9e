import sqlite3
from typing import Dict, Any, Optional
from nameindex import config

SCHEMA = """
-- resolver assignment per node (latest NewResolver wins)
CREATE TABLE IF NOT EXISTS node_resolvers (
  node             TEXT PRIMARY KEY,
  resolver_address TEXT,
  block_height     INTEGER
);

-- address records, keyed by the emitting resolver
CREATE TABLE IF NOT EXISTS node_addresses (
  resolver_address TEXT,
  node             TEXT,
  address          TEXT,
  block_height     INTEGER,
  PRIMARY KEY (resolver_address, node)
);

-- name records, keyed by the emitting resolver
CREATE TABLE IF NOT EXISTS node_names (
  resolver_address TEXT,
  node             TEXT,
  name             TEXT,
  block_height     INTEGER,
  PRIMARY KEY (resolver_address, node)
);

-- current state per node (denormalized for lookups)
CREATE TABLE IF NOT EXISTS nodes (
  node             TEXT PRIMARY KEY,
  reverse_node     TEXT,
  resolver_address TEXT,
  address          TEXT,
  name             TEXT,
  block_height     INTEGER
);
CREATE INDEX IF NOT EXISTS idx_nodes_address ON nodes(address);
CREATE INDEX IF NOT EXISTS idx_nodes_reverse ON nodes(reverse_node);

-- text / contenthash / dns / zonehash records
CREATE TABLE IF NOT EXISTS records (
  node             TEXT,
  resolver_address TEXT,
  type             TEXT,
  key              TEXT,
  value            TEXT,
  block_height     INTEGER,
  PRIMARY KEY (node, resolver_address, type, key)
);

-- primary name per address; on equal block heights the chosen row is arbitrary
CREATE VIEW IF NOT EXISTS primary_names AS
  SELECT n.address, nr.name AS name, MAX(n.block_height) AS block_height
  FROM nodes n
  LEFT JOIN nodes nr ON nr.node = n.reverse_node
  WHERE n.address IS NOT NULL
  GROUP BY n.address;
"""

TABLES = {
    "node_resolvers": ("node",),
    "node_addresses": ("resolver_address", "node"),
    "node_names": ("resolver_address", "node"),
    "nodes": ("node",),
    "records": ("node", "resolver_address", "type", "key"),
}

# resume points; only tables whose rows are never deleted, so a checkpoint never goes down
RESOLVER_CHECKPOINT = ("node_resolvers",)
RECORD_CHECKPOINT = ("node_names", "node_addresses")

def connect(path: Optional[str] = None) -> sqlite3.Connection:
    conn = sqlite3.connect(path or config.DB_PATH, isolation_level=None, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA temp_store=MEMORY;")
    return conn

def ensure_schema(conn: sqlite3.Connection):
    conn.executescript(SCHEMA)

def _table(table: str) -> str:
    if table not in TABLES:
        raise ValueError(f"unknown table {table!r}")
    return table

def max_block_height(conn, *tables: str) -> Optional[int]:
    """Highest block_height stored across the given tables, None when all are empty."""
    parts = " UNION ALL ".join(f"SELECT MAX(block_height) AS h FROM {_table(t)}" for t in tables)
    row = conn.execute(f"SELECT MAX(h) FROM ({parts})").fetchone()
    return row[0] if row and row[0] is not None else None

def upsert(conn, table: str, keys: Dict[str, Any], values: Dict[str, Any]):
    """Insert, or overwrite only the given value columns of an existing row."""
    if set(keys) != set(TABLES[_table(table)]):
        raise ValueError(f"{table} is keyed by {TABLES[table]}, got {tuple(keys)}")
    row = {**keys, **values}
    cols = ",".join(row.keys())
    qmarks = ",".join(["?"] * len(row))
    conn.execute(f"""
        INSERT INTO {table} ({cols})
        VALUES ({qmarks})
        ON CONFLICT({",".join(keys)}) DO UPDATE SET
        {", ".join([f"{k}=excluded.{k}" for k in values.keys()])}
    """, tuple(row.values()))

def update(conn, table: str, where: Dict[str, Any], values: Dict[str, Any]) -> int:
    cur = conn.execute(
        f"UPDATE {_table(table)} SET {', '.join(f'{k}=?' for k in values)} "
        f"WHERE {' AND '.join(f'{k}=?' for k in where)}",
        tuple(values.values()) + tuple(where.values()),
    )
    return cur.rowcount

def delete(conn, table: str, keys: Dict[str, Any]) -> int:
    cur = conn.execute(
        f"DELETE FROM {_table(table)} WHERE {' AND '.join(f'{k}=?' for k in keys)}",
        tuple(keys.values()),
    )
    return cur.rowcount

def row_to_dict(row: Optional[sqlite3.Row]) -> Optional[Dict[str, Any]]:
    if row is None: return None
    return {k: row[k] for k in row.keys()}
