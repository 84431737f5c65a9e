from typing import Any, Dict, List, Optional
from nameindex.db import RECORD_CHECKPOINT, RESOLVER_CHECKPOINT, max_block_height, row_to_dict
from nameindex.helpers import as_node

# Every lookup takes a node id (0x + 64 hex) or a plain name such as "alice.vet".

def resolver_of(conn, node: str) -> Optional[Dict[str, Any]]:
    row = conn.execute("""
        SELECT node, resolver_address, block_height
        FROM node_resolvers WHERE node=?
    """, (as_node(node),)).fetchone()
    return row_to_dict(row)

def address_of(conn, node: str) -> Optional[Dict[str, Any]]:
    row = conn.execute("""
        SELECT node, resolver_address, address, reverse_node, block_height
        FROM nodes WHERE node=? AND address IS NOT NULL
    """, (as_node(node),)).fetchone()
    return row_to_dict(row)

def name_of(conn, node: str) -> Optional[Dict[str, Any]]:
    row = conn.execute("""
        SELECT node, resolver_address, name, block_height
        FROM nodes WHERE node=? AND name IS NOT NULL
    """, (as_node(node),)).fetchone()
    return row_to_dict(row)

def primary_name(conn, address: str) -> Optional[Dict[str, Any]]:
    """Reverse-resolved name of an address, None when no reverse record names it."""
    row = conn.execute("""
        SELECT address, name, block_height
        FROM primary_names WHERE lower(address)=lower(?) AND name IS NOT NULL
    """, (address,)).fetchone()
    return row_to_dict(row)

def record(conn, node: str, type_: str, key: str = "") -> Optional[Dict[str, Any]]:
    # only records set by the node's current resolver count
    row = conn.execute("""
        SELECT r.node, r.resolver_address, r.type, r.key, r.value, r.block_height
        FROM records r
        JOIN nodes n ON n.node = r.node AND n.resolver_address = r.resolver_address
        WHERE r.node=? AND r.type=? AND r.key=?
    """, (as_node(node), type_, key)).fetchone()
    return row_to_dict(row)

def records_of(conn, node: str) -> List[Dict[str, Any]]:
    rows = conn.execute("""
        SELECT r.type, r.key, r.value, r.block_height
        FROM records r
        JOIN nodes n ON n.node = r.node AND n.resolver_address = r.resolver_address
        WHERE r.node=?
        ORDER BY r.type, r.key
    """, (as_node(node),)).fetchall()
    return [row_to_dict(r) for r in rows]

def sync_status(conn) -> Dict[str, Any]:
    counts = conn.execute("""
        SELECT (SELECT COUNT(*) FROM nodes)          AS nodes,
               (SELECT COUNT(*) FROM node_resolvers) AS resolvers,
               (SELECT COUNT(*) FROM records)        AS records
    """).fetchone()
    return {
        "checkpoints": {
            "resolvers": max_block_height(conn, *RESOLVER_CHECKPOINT),
            "records": max_block_height(conn, *RECORD_CHECKPOINT),
        },
        "counts": row_to_dict(counts),
    }
